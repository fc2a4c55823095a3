import dataclasses
import logging

import pytest
from fastapi.testclient import TestClient

from eventnest.config import Settings
from eventnest.logging_config import RequestIdFilter
from eventnest.services import build_services
from main import create_app


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


def test_domain_errors_carry_request_id(client):
    response = client.get("/events/missing", headers={"X-Request-ID": "req-42"})

    assert response.status_code == 404
    assert response.json() == {"message": "Event not found", "request_id": "req-42"}


def test_production_settings():
    settings = Settings(environment="production")

    assert settings.is_production
    assert settings.effective_log_level == "INFO"
    assert Settings().effective_log_level == "DEBUG"


class RequestIdRecorder(logging.Handler):
    def __init__(self):
        super().__init__()
        self.addFilter(RequestIdFilter())
        self.request_ids = []

    def emit(self, record):
        self.request_ids.append(record.request_id)


@pytest.fixture
def error_log():
    recorder = RequestIdRecorder()
    error_logger = logging.getLogger("eventnest.errors")
    error_logger.addHandler(recorder)
    yield recorder
    error_logger.removeHandler(recorder)


def _client_with_failing_route(settings, mailer):
    app = create_app(settings, services=build_services(settings, mailer=mailer))

    def explode():
        raise RuntimeError("kaboom")

    app.add_api_route("/explode", explode)
    return TestClient(app)


@pytest.mark.parametrize("environment, message", [
    ("development", "kaboom"),
    ("production", "Internal server error"),
])
def test_unhandled_error_carries_request_id(settings, mailer, error_log, environment, message):
    settings = dataclasses.replace(settings, environment=environment)

    with _client_with_failing_route(settings, mailer) as client:
        response = client.get("/explode", headers={"X-Request-ID": "req-500"})

    assert response.status_code == 500
    assert response.json() == {"message": message, "request_id": "req-500"}
    assert response.headers["X-Request-ID"] == "req-500"
    assert error_log.request_ids == ["req-500"]


def test_unhandled_error_log_redacts_query_params(settings, mailer, caplog):
    with _client_with_failing_route(settings, mailer) as client:
        with caplog.at_level(logging.ERROR, logger="eventnest.errors"):
            client.get("/explode?token=hunter2&page=2")

    assert "kaboom" in caplog.text
    assert "[REDACTED]" in caplog.text
    assert "hunter2" not in caplog.text
    assert "'page': '2'" in caplog.text
