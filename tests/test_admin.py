from eventnest.config import Settings
from eventnest.models.user import Role, User

import create_first_user


def test_admin_lists_users(client, admin, student, headers_for):
    response = client.get("/admin/users", headers=headers_for(admin))

    assert response.status_code == 200
    ids = {u["id"] for u in response.json()}
    assert {admin.id, student.id} <= ids


def test_non_admin_is_forbidden(client, organizer, headers_for):
    assert client.get("/admin/users", headers=headers_for(organizer)).status_code == 403
    assert client.get("/admin/events", headers=headers_for(organizer)).status_code == 403


def test_promote_user(client, db, admin, student, headers_for):
    response = client.put(f"/admin/users/{student.id}/role", json={"role": "ORGANIZER"}, headers=headers_for(admin))

    assert response.status_code == 200
    assert response.json()["role"] == "ORGANIZER"
    db.expire_all()
    assert db.get(User, student.id).role == Role.ORGANIZER


def test_invalid_role_rejected(client, admin, student, headers_for):
    response = client.put(f"/admin/users/{student.id}/role", json={"role": "SUPERUSER"}, headers=headers_for(admin))
    assert response.status_code == 422


def test_unknown_user(client, admin, headers_for):
    response = client.put("/admin/users/ghost/role", json={"role": "ADMIN"}, headers=headers_for(admin))
    assert response.status_code == 404


def test_admin_sees_past_events(client, admin, organizer, make_event, headers_for):
    make_event(organizer, title="Past", days_ahead=-30)
    make_event(organizer, title="Future")

    titles = [e["title"] for e in client.get("/admin/events", headers=headers_for(admin)).json()]
    assert titles == ["Future", "Past"]


def test_first_admin_is_seeded_once(app, db):
    settings = Settings(admin_email="root@campus.edu", admin_password="bootstrap-pass")

    create_first_user.create_first_user(app.state.database.SessionLocal, settings)
    create_first_user.create_first_user(app.state.database.SessionLocal, settings)

    admins = db.query(User).filter(User.email == "root@campus.edu").all()
    assert len(admins) == 1
    assert admins[0].role == Role.ADMIN
