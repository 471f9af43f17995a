"""Unit tests for OTP generation and consumption."""

from datetime import datetime, timedelta, timezone

import pytest

from notes_api.core.exceptions import ExpiredError, InvalidCredentialError
from notes_api.repositories import user_repo
from notes_api.services import otp_service


def test_generate_otp_bounds(monkeypatch):
    """The lowest and highest draws map to 100000 and 999999."""
    monkeypatch.setattr(otp_service.secrets, "randbelow", lambda n: 0)
    assert otp_service.generate_otp() == "100000"
    monkeypatch.setattr(otp_service.secrets, "randbelow", lambda n: n - 1)
    assert otp_service.generate_otp() == "999999"


def test_generate_otp_draws_from_full_range(monkeypatch):
    seen = []
    monkeypatch.setattr(otp_service.secrets, "randbelow", lambda n: seen.append(n) or 0)
    otp_service.generate_otp()
    assert seen == [900000]


def test_generate_otp_is_six_digits():
    for _ in range(200):
        code = otp_service.generate_otp()
        assert len(code) == 6 and code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_new_otp_expiry_window(settings, monkeypatch):
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    monkeypatch.setattr(otp_service, "_now_utc", lambda: now)
    settings.otp_expire_minutes = 3
    _, expires_at = otp_service.new_otp(settings)
    assert expires_at == now + timedelta(minutes=3)


def _user(db, otp="123456", expires_at=None):
    user_id = user_repo.insert_user(
        name="Alice",
        email="alice@example.com",
        date_of_birth="15/06/1990",
        otp=otp,
        otp_expires_at=expires_at or datetime.now(timezone.utc) + timedelta(minutes=10),
    )
    return user_repo.get_user_by_id(user_id)


def test_consume_otp_marks_verified(db):
    user = _user(db)
    otp_service.consume_otp(user, "123456")
    stored = user_repo.get_user_by_id(str(user["_id"]))
    assert stored["is_email_verified"] is True
    assert "otp" not in stored and "otp_expires_at" not in stored


def test_consume_otp_is_exact_string_match(db):
    user = _user(db)
    with pytest.raises(InvalidCredentialError):
        otp_service.consume_otp(user, " 123456")
    with pytest.raises(InvalidCredentialError):
        otp_service.consume_otp(user, "123457")


def test_consume_otp_wrong_code_checked_before_expiry(db):
    user = _user(db, expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
    with pytest.raises(InvalidCredentialError):
        otp_service.consume_otp(user, "654321")
    with pytest.raises(ExpiredError):
        otp_service.consume_otp(user, "123456")


def test_consume_otp_loses_race_to_new_issuance(db):
    """A stale snapshot cannot consume a code that was replaced meanwhile."""
    user = _user(db)
    user_repo.set_otp(user["_id"], "999999", datetime.now(timezone.utc) + timedelta(minutes=10))
    with pytest.raises(InvalidCredentialError):
        otp_service.consume_otp(user, "123456")
    assert user_repo.get_user_by_id(str(user["_id"]))["is_email_verified"] is False


def test_issue_otp_replaces_code_and_sends(db, settings, mailer, monkeypatch):
    user = _user(db)
    monkeypatch.setattr(otp_service, "generate_otp", lambda: "424242")
    otp_service.issue_otp(user, subject=otp_service.SUBJECT_LOGIN, settings=settings, email_client=mailer)

    stored = user_repo.get_user_by_id(str(user["_id"]))
    assert stored["otp"] == "424242"
    assert mailer.outbox == [
        {
            "to": "alice@example.com",
            "subject": "Login OTP",
            "body": "Your OTP is: 424242. It will expire in 10 minutes.",
        }
    ]
