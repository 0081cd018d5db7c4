# pylint: disable=redefined-outer-name

from typing import List, Optional, Tuple

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.api.mail_transport import MailTransportConfig
from backend.api.mailer import MailDeliveryError, get_mailer
from backend.api.models import MailMessage
from backend.database.config.config import Settings, get_settings
from backend.main import create_app


class FakeMailer:
    """Stands in for SmtpMailer; records every send instead of talking SMTP."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.sent: List[Tuple[MailTransportConfig, MailMessage]] = []

    async def send(self, transport: MailTransportConfig, message: MailMessage) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((transport, message))


@pytest.fixture
def app_settings() -> Settings:
    return Settings(
        _env_file=None,
        DB_HOST="db.internal",
        DB_USER="deals",
        DB_PASSWORD="s3cret",
        DB_NAME="deals247",
        EMAIL_USER="D247Online@outlook.com",
        EMAIL_PASSWORD="app-password",
        SMTP_HOST=None,
        SMTP_PORT=None,
        CONTACT_RECIPIENT="D247Online@outlook.com",
        HOST="0.0.0.0",
        PORT=5000,
        FRONTEND_URL="http://localhost:5173",
        INIT_MODE="test",
    )


@pytest.fixture
def fake_mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def failing_mailer() -> FakeMailer:
    return FakeMailer(
        error=MailDeliveryError("Invalid login: 535 Authentication unsuccessful", code=535, command="AUTH")
    )


def _make_app(settings: Settings, mailer: FakeMailer) -> FastAPI:
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_mailer] = lambda: mailer
    return app


@pytest.fixture
def client(app_settings: Settings, fake_mailer: FakeMailer) -> TestClient:
    return TestClient(_make_app(app_settings, fake_mailer))


@pytest.fixture
def failing_client(app_settings: Settings, failing_mailer: FakeMailer) -> TestClient:
    return TestClient(_make_app(app_settings, failing_mailer), raise_server_exceptions=True)


@pytest.fixture
def valid_submission() -> dict:
    return {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "subject": "Partnership",
        "message": "Hello,\nI would like to list my store.",
    }
