"""
Dependencias reutilizables para routers (FastAPI Depends).

- Configuración y transporte de correo inyectados desde `app.state`.
- Autenticación: valida el token de sesión y devuelve la identidad del llamador.
- Mantener esta capa delgada: sin lógica de negocio pesada.
"""
from dataclasses import dataclass
from typing import Optional

import jwt as pyjwt
from fastapi import Depends, Header, Request

from notes_api.core.config import Settings
from notes_api.core.exceptions import ForbiddenError, UnauthorizedError
from notes_api.infrastructure.email.email_client import EmailClient
from notes_api.services.token_service import verify_session_token


@dataclass(frozen=True)
class CurrentIdentity:
    user_id: str
    email: str


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_email_client(request: Request) -> EmailClient:
    return request.app.state.email_client


def client_ip(request: Request) -> str:
    return request.client.host if request.client else ""


def get_current_identity(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> CurrentIdentity:
    """
    Puerta de sesión: solo verifica firma/expiración del token, sin tocar la base.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Access token required")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise UnauthorizedError("Access token required")
    try:
        payload = verify_session_token(token, settings=settings)
    except pyjwt.InvalidTokenError:
        raise ForbiddenError("Invalid token")
    return CurrentIdentity(user_id=str(payload["userId"]), email=str(payload["email"]))
