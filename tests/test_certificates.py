import os

import pytest

from eventnest.models.certificate import Certificate
from eventnest.models.registration import Registration
from eventnest.models.user import Role
from eventnest.services.renderers import CertificatePdfRenderer


@pytest.fixture
def attendee(db, event, student):
    registration = Registration(user_id=student.id, event_id=event.id)
    db.add(registration)
    db.commit()
    return student


def _check_in_all(db, event):
    for registration in db.query(Registration).filter_by(event_id=event.id):
        registration.attended = True
    db.commit()


def _generate(client, event, user, headers_for):
    return client.post(f"/events/{event.id}/generate-certificates", headers=headers_for(user))


def test_full_lifecycle(client, db, event, student, organizer, headers_for, mailer, settings):
    registration = client.post(f"/events/{event.id}/register", headers=headers_for(student)).json()["registration"]
    client.post(f"/registrations/{registration['id']}/attend", headers=headers_for(organizer))

    first = _generate(client, event, organizer, headers_for)
    assert first.status_code == 201
    assert first.json() == {
        "message": "Successfully generated 1 certificate(s).",
        "generated": 1,
        "failed": 0,
        "total_eligible": 1,
    }

    certificate = db.query(Certificate).one()
    assert certificate.certificate_url == f"/static/certificates/certificate-{certificate.id}.pdf"
    assert os.path.isfile(os.path.join(settings.certificates_dir, f"certificate-{certificate.id}.pdf"))

    message = mailer.sent[-1]
    assert message.subject == "Certificate: Intro to Robotics"
    assert message.attachments[0].filename == "Certificate-Intro_to_Robotics.pdf"
    assert message.attachments[0].content.startswith(b"%PDF")

    second = _generate(client, event, organizer, headers_for)
    assert second.status_code == 200
    assert second.json()["generated"] == 0
    assert second.json()["failed"] == 0
    assert second.json()["message"] == "All eligible attendees already have certificates."

    db.expire_all()
    assert db.query(Certificate).count() == 1

    again = client.post(f"/events/{event.id}/register", headers=headers_for(student))
    assert again.status_code == 400


def test_no_attendees(client, event, attendee, organizer, headers_for):
    response = _generate(client, event, organizer, headers_for)

    assert response.status_code == 200
    assert response.json()["generated"] == 0
    assert response.json()["message"] == "No attendees found for certificate generation."


def test_only_attended_registrants_are_certified(client, db, event, make_user, organizer, headers_for):
    present, absent = make_user(name="Present"), make_user(name="Absent")
    db.add_all([
        Registration(user_id=present.id, event_id=event.id, attended=True),
        Registration(user_id=absent.id, event_id=event.id),
    ])
    db.commit()

    response = _generate(client, event, organizer, headers_for)

    assert response.json()["generated"] == 1
    assert [c.user_id for c in db.query(Certificate)] == [present.id]


def test_mail_failure_is_counted_and_others_continue(client, db, event, make_user, organizer, headers_for, mailer):
    ok_user, failing_user = make_user(), make_user()
    db.add_all([
        Registration(user_id=ok_user.id, event_id=event.id, attended=True),
        Registration(user_id=failing_user.id, event_id=event.id, attended=True),
    ])
    db.commit()
    mailer.fail_for.add(failing_user.email)

    body = _generate(client, event, organizer, headers_for).json()

    assert body["generated"] == 1
    assert body["failed"] == 1
    assert body["total_eligible"] == 2
    assert body["message"] == "Successfully generated 1 certificate(s). 1 failed."


class FlakyPdfRenderer(CertificatePdfRenderer):
    fail_for = set()

    def render(self, certificate, user, event):
        if user.email in self.fail_for:
            raise OSError("disk full")
        return super().render(certificate, user, event)


@pytest.fixture
def service_overrides(settings):
    return {"pdf_renderer": FlakyPdfRenderer(settings.certificates_dir, settings.frontend_url)}


def test_render_failure_leaves_attendee_eligible(client, db, app, event, attendee, organizer, headers_for):
    _check_in_all(db, event)
    renderer = app.state.services.certificates.pdf_renderer
    renderer.fail_for = {attendee.email}

    failed = _generate(client, event, organizer, headers_for).json()
    assert failed["failed"] == 1
    assert db.query(Certificate).count() == 0

    renderer.fail_for = set()
    retried = _generate(client, event, organizer, headers_for).json()
    assert retried["generated"] == 1


def test_generate_requires_event_owner(client, event, make_user, headers_for):
    other = make_user(role=Role.ORGANIZER)
    assert _generate(client, event, other, headers_for).status_code == 403


@pytest.fixture
def issued(client, db, event, attendee, organizer, headers_for):
    _check_in_all(db, event)
    _generate(client, event, organizer, headers_for)
    return db.query(Certificate).one()


def test_my_certificates(client, issued, attendee, headers_for):
    response = client.get("/users/me/certificates", headers=headers_for(attendee))

    assert response.status_code == 200
    body = response.json()
    assert body[0]["id"] == issued.id
    assert body[0]["event"]["title"] == "Intro to Robotics"


def test_download_permissions(client, issued, attendee, organizer, admin, make_user, headers_for):
    url = f"/certificates/{issued.id}/download"

    for user in (attendee, organizer, admin):
        response = client.get(url, headers=headers_for(user))
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    stranger = make_user(role=Role.STUDENT)
    assert client.get(url, headers=headers_for(stranger)).status_code == 403


def test_download_missing_row_and_missing_file(client, issued, attendee, settings, headers_for):
    missing_row = client.get("/certificates/unknown/download", headers=headers_for(attendee))
    assert missing_row.status_code == 404
    assert missing_row.json()["message"] == "Certificate not found"

    os.remove(os.path.join(settings.certificates_dir, f"certificate-{issued.id}.pdf"))
    missing_file = client.get(f"/certificates/{issued.id}/download", headers=headers_for(attendee))
    assert missing_file.status_code == 404
    assert missing_file.json()["message"] == "Certificate file not found"


def test_verify_is_public(client, issued):
    response = client.get(f"/certificates/{issued.id}/verify")

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is True
    certificate = body["certificate"]
    assert certificate["id"] == issued.id
    assert certificate["recipient_name"] == "Sam Student"
    assert certificate["event_title"] == "Intro to Robotics"
    assert certificate["organizer"] == "Olivia Organizer"
    assert "user_id" not in certificate
    assert "email" not in certificate


def test_verify_unknown_certificate(client):
    response = client.get("/certificates/does-not-exist/verify")

    assert response.status_code == 404
    assert response.json()["valid"] is False


def test_static_certificate_file_is_served(client, issued):
    response = client.get(issued.certificate_url)
    assert response.status_code == 200


def test_concurrently_issued_certificate_is_skipped(client, app, db, event, attendee, organizer, headers_for, monkeypatch):
    _check_in_all(db, event)
    assert _generate(client, event, organizer, headers_for).json()["generated"] == 1

    # another run inserted the row after this one built its pending list
    monkeypatch.setattr(app.state.services.certificates, "certified_user_ids", lambda db, event_id: set())
    body = _generate(client, event, organizer, headers_for).json()

    assert body["total_eligible"] == 1
    assert body["generated"] == 0
    assert body["failed"] == 0
    db.expire_all()
    assert db.query(Certificate).count() == 1
