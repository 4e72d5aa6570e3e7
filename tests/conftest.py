from pathlib import Path

import aiosmtplib
import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.ratelimit import limiter
from app.main import app
from app.services.SmtpMailClient import SmtpMailClient, get_mail_client


@pytest.fixture(autouse=True)
def reset_rate_limits():
    "every test starts with a fresh submission budget"
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch) -> Path:
    directory = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(directory))
    return directory


@pytest.fixture
def outbox(monkeypatch) -> list:
    """Messages handed to the SMTP relay, in send order."""
    sent = []

    async def fake_send(message, **kwargs):
        sent.append(message)
        return {}, "OK"

    monkeypatch.setattr(aiosmtplib, "send", fake_send)
    return sent


@pytest.fixture
def mail_client(outbox) -> SmtpMailClient:
    client = SmtpMailClient(
        hostname="smtp.test",
        port=465,
        username="jobs@abchires.com",
        password="secret",
        default_sender="jobs@abchires.com",
    )
    app.dependency_overrides[get_mail_client] = lambda: client
    yield client
    app.dependency_overrides.pop(get_mail_client, None)


@pytest.fixture
def client(mail_client, upload_dir) -> TestClient:
    return TestClient(app)
