"""Pytest configuration and fixtures.

MongoDB is replaced by mongomock and the email transport by a recording fake,
so the suite needs no running services.
"""

import re

import mongomock
import pytest
from fastapi.testclient import TestClient

from notes_api.api.deps import get_email_client
from notes_api.core import rate_limit
from notes_api.core.config import Settings
from notes_api.infrastructure.db import mongo
from notes_api.main import create_app

OTP_RE = re.compile(r"Your OTP is: (\d{6})\.")


class RecordingEmailClient:
    """Email client that keeps every message in memory."""

    def __init__(self):
        self.outbox = []

    def send(self, to_email, subject, text_body):
        self.outbox.append({"to": to_email, "subject": subject, "body": text_body})

    def last_for(self, email):
        sent = [m for m in self.outbox if m["to"] == email]
        assert sent, f"no email sent to {email}"
        return sent[-1]

    def last_code(self, email):
        match = OTP_RE.search(self.last_for(email)["body"])
        assert match, "email body carries no OTP"
        return match.group(1)


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id and email."""

    def __init__(self, *args, user_id=None, email=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        jwt_secret="test-secret-0123456789abcdef0123456789",
        email_backend="console",
        mongo_db="notes_test",
        otp_rate_per_min=100,
        login_rate_per_min=100,
        verify_rate_per_min=100,
    )


@pytest.fixture
def db(settings):
    """Fresh in-memory database per test."""
    mongo.init_mongo(settings, client=mongomock.MongoClient())
    database = mongo.get_db()
    yield database
    mongo.close_mongo()


@pytest.fixture
def mailer():
    return RecordingEmailClient()


@pytest.fixture
def app(settings, db, mailer):
    application = create_app(settings)
    application.dependency_overrides[get_email_client] = lambda: mailer
    rate_limit.reset()
    yield application
    application.dependency_overrides.clear()
    rate_limit.reset()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client, mailer):
    """Register and verify a user; return bearer headers for it."""

    def _make(email="alice@example.com", name="Alice", date_of_birth="15/06/1990"):
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "dateOfBirth": date_of_birth},
        )
        assert response.status_code == 201
        code = mailer.last_code(email)
        response = client.post("/api/auth/verify-otp", json={"email": email, "otp": code})
        assert response.status_code == 200
        data = response.json()
        return AuthHeaders(
            {"Authorization": f"Bearer {data['token']}"},
            user_id=data["user"]["id"],
            email=email,
        )

    return _make


@pytest.fixture
def auth_headers(make_user):
    return make_user()
