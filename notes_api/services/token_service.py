"""
Creación y verificación de tokens de sesión (JWT HS256, sin estado en servidor).
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt as pyjwt
from bson import ObjectId

from notes_api.core.config import Settings


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def create_session_token(*, user_id: str, email: str, settings: Settings) -> str:
    """
    Genera un JWT válido por SESSION_TOKEN_EXPIRE_DAYS.
    Claims: userId, email, iat, exp.
    """
    now = _now_utc()
    exp = now + timedelta(days=settings.session_token_expire_days)
    payload = {
        "userId": user_id,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return pyjwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session_token(token: str, *, settings: Settings) -> Dict[str, Any]:
    """
    Decodifica y valida firma/expiración. Devuelve payload.

    Levanta jwt.InvalidTokenError (o subclases) si el token no es válido o le
    faltan los claims de identidad.
    """
    payload = pyjwt.decode(
        token,
        key=settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["exp", "iat"]},
    )
    if not payload.get("userId") or not payload.get("email"):
        raise pyjwt.InvalidTokenError("Token sin identidad")
    if not ObjectId.is_valid(str(payload["userId"])):
        raise pyjwt.InvalidTokenError("userId no es un ObjectId")
    return payload
