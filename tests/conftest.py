import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from eventnest.auth import create_access_token, get_password_hash
from eventnest.config import Settings
from eventnest.database import utcnow
from eventnest.models.event import Event
from eventnest.models.user import Role, User
from eventnest.services import build_services
from eventnest.services.mailer import DeliveryResult, DeliveryStatus
from main import create_app


class RecordingMailer:
    def __init__(self):
        self.sent = []
        self.fail_for = set()

    def send(self, message):
        if message.to in self.fail_for:
            return DeliveryResult(DeliveryStatus.FAILED, "smtp unavailable")
        self.sent.append(message)
        return DeliveryResult(DeliveryStatus.SENT)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        environment="test",
        database_url=f"sqlite:///{tmp_path / 'eventnest.db'}",
        certificates_dir=str(tmp_path / "certificates"),
        jwt_secret="test-secret",
        frontend_url="http://frontend.test",
    )


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def service_overrides():
    return {}


@pytest.fixture
def app(settings, mailer, service_overrides):
    services = build_services(settings, mailer=mailer, **service_overrides)
    return create_app(settings, services=services)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app, client):
    session = app.state.database.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    def _make(role=Role.STUDENT, name="Test User", email=None, password="secret123"):
        user = User(
            name=name,
            email=email or f"user-{uuid.uuid4().hex[:8]}@campus.edu",
            password_hash=get_password_hash(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def headers_for(settings):
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user, settings.jwt_secret)}"}

    return _headers


@pytest.fixture
def organizer(make_user):
    return make_user(role=Role.ORGANIZER, name="Olivia Organizer")


@pytest.fixture
def student(make_user):
    return make_user(role=Role.STUDENT, name="Sam Student")


@pytest.fixture
def admin(make_user):
    return make_user(role=Role.ADMIN, name="Ada Admin")


@pytest.fixture
def make_event(db):
    def _make(organizer, title="Intro to Robotics", days_ahead=7, **fields):
        event = Event(
            title=title,
            description=fields.pop("description", "Hands-on workshop"),
            date=utcnow() + timedelta(days=days_ahead),
            location=fields.pop("location", "Hall B"),
            category=fields.pop("category", "workshop"),
            organizer_id=organizer.id,
            **fields,
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    return _make


@pytest.fixture
def event(make_event, organizer):
    return make_event(organizer)
