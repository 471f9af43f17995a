"""Session token issuance and the bearer-token gate."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from notes_api.services import token_service

NOTES = "/api/notes"
SECRET = "test-secret-0123456789abcdef0123456789"


def _encode(payload, secret=SECRET):
    return jwt.encode(payload, secret, algorithm="HS256")


def test_session_token_claims(settings):
    token = token_service.create_session_token(user_id="abc", email="a@example.com", settings=settings)
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert payload["userId"] == "abc"
    assert payload["email"] == "a@example.com"
    assert payload["exp"] - payload["iat"] == 7 * 24 * 3600


def test_verify_session_token_rejects_other_secret(settings):
    token = token_service.create_session_token(user_id="abc", email="a@example.com", settings=settings)
    settings.jwt_secret = "rotated-secret-0123456789abcdef0123456"
    with pytest.raises(jwt.InvalidTokenError):
        token_service.verify_session_token(token, settings=settings)


def test_verify_session_token_requires_identity(settings):
    now = int(datetime.now(timezone.utc).timestamp())
    token = _encode({"email": "a@example.com", "iat": now, "exp": now + 60})
    with pytest.raises(jwt.InvalidTokenError):
        token_service.verify_session_token(token, settings=settings)


def test_missing_header_is_unauthorized(client):
    response = client.get(NOTES)
    assert response.status_code == 401
    assert response.json()["error"] == "Access token required"


def test_non_bearer_header_is_unauthorized(client):
    response = client.get(NOTES, headers={"Authorization": "Basic abc"})
    assert response.status_code == 401


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        _encode({"userId": "u", "email": "e@example.com", "iat": 0, "exp": 4102444800}, secret="wrong-secret-0123456789abcdef012345678"),
        _encode({"userId": "u", "email": "e@example.com", "iat": 0, "exp": 1}),
    ],
    ids=["malformed", "bad-signature", "expired"],
)
def test_invalid_tokens_are_forbidden(client, token):
    response = client.get(NOTES, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403
    assert response.json()["error"] == "Invalid token"


def test_gate_does_not_read_user_store(client, auth_headers, db):
    """A valid token keeps working even if the account record is gone."""
    db["user"].delete_many({})
    assert client.get(NOTES, headers=auth_headers).status_code == 200


def test_token_from_verify_authorizes_notes(client, auth_headers):
    response = client.get(NOTES, headers=auth_headers)
    assert response.status_code == 200


def test_expired_session_token(client, auth_headers, settings):
    past = datetime.now(timezone.utc) - timedelta(days=8)
    token = _encode(
        {
            "userId": auth_headers.user_id,
            "email": auth_headers.email,
            "iat": int(past.timestamp()),
            "exp": int((past + timedelta(days=7)).timestamp()),
        }
    )
    response = client.get(NOTES, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


def test_token_with_non_objectid_user_is_forbidden(client):
    """A correctly signed token must still carry a well-formed user id."""
    now = int(datetime.now(timezone.utc).timestamp())
    token = _encode({"userId": "not-an-oid", "email": "e@example.com", "iat": now, "exp": now + 60})
    response = client.post(NOTES, headers={"Authorization": f"Bearer {token}"}, json={"title": "T", "content": "C"})
    assert response.status_code == 403
    assert response.json()["error"] == "Invalid token"
