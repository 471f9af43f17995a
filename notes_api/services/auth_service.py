"""
Lógica de autenticación: registro, envío de OTP, verificación y login.
"""
import logging
from typing import Any, Dict

from pymongo.errors import DuplicateKeyError

from notes_api.core.config import Settings
from notes_api.core.exceptions import ConflictError, InvalidCredentialError, NotFoundError
from notes_api.infrastructure.email.email_client import EmailClient
from notes_api.repositories import user_repo as repo
from notes_api.services import otp_service, token_service

_log = logging.getLogger("notes.auth")


def public_user(u: Dict[str, Any]) -> Dict[str, Any]:
    """Proyección pública: nunca incluye OTP ni fecha de nacimiento."""
    return {"id": str(u["_id"]), "name": u.get("name"), "email": u.get("email")}


def _session(u: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    token = token_service.create_session_token(user_id=str(u["_id"]), email=u["email"], settings=settings)
    return {"message": "Login successful", "token": token, "user": public_user(u)}


def register(*, name: str, email: str, date_of_birth: str, settings: Settings, email_client: EmailClient) -> Dict[str, Any]:
    """
    Crea el usuario sin verificar con su primer OTP y lo envía por correo.
    Un fallo de correo se propaga (el usuario queda creado y puede pedir reenvío).
    """
    if repo.find_user_by_email(email):
        raise ConflictError("User already exists")

    code, expires_at = otp_service.new_otp(settings)
    try:
        user_id = repo.insert_user(
            name=name, email=email, date_of_birth=date_of_birth, otp=code, otp_expires_at=expires_at
        )
    except DuplicateKeyError:
        # Carrera entre dos registros con el mismo email
        raise ConflictError("User already exists")
    _log.info("Usuario registrado user_id=%s", user_id)

    otp_service.send_otp_email(
        email_client, email=email, code=code, subject=otp_service.SUBJECT_VERIFY, settings=settings
    )
    return {"message": "User registered. Please check your email for OTP."}


def send_otp(*, email: str, settings: Settings, email_client: EmailClient) -> Dict[str, Any]:
    u = repo.find_user_by_email(email)
    if not u:
        raise NotFoundError("User not found")
    otp_service.issue_otp(u, subject=otp_service.SUBJECT_LOGIN, settings=settings, email_client=email_client)
    return {"message": "OTP sent successfully. Please check your email."}


def verify_otp(*, email: str, otp: str, settings: Settings) -> Dict[str, Any]:
    """
    Verifica el OTP, marca el email como verificado y emite el token de sesión.
    """
    u = repo.find_user_by_email(email)
    if not u:
        raise NotFoundError("User not found")
    otp_service.consume_otp(u, otp)
    return _session(u, settings)


def login(*, email: str, settings: Settings) -> Dict[str, Any]:
    """Emite sesión directa para cuentas ya verificadas."""
    u = repo.find_user_by_email(email)
    if not u:
        raise InvalidCredentialError("User not found")
    if not u.get("is_email_verified"):
        raise InvalidCredentialError("Please verify your email first")
    return _session(u, settings)


def get_profile(user_id: str) -> Dict[str, Any]:
    u = repo.get_user_by_id(user_id)
    if not u:
        raise NotFoundError("User not found")
    out = public_user(u)
    out["isEmailVerified"] = bool(u.get("is_email_verified"))
    return out
