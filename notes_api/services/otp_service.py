"""
Ciclo de vida del OTP por correo: generación, emisión, entrega y consumo.

Estados del usuario:
    sin código --emitir--> código vigente --verificar(ok)--> verificado, sin código
Un verificar fallido no cambia nada; cada emisión reemplaza el código anterior.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

from notes_api.core.config import Settings
from notes_api.core.exceptions import ExpiredError, InvalidCredentialError
from notes_api.core.time import as_utc
from notes_api.infrastructure.email.email_client import EmailClient
from notes_api.repositories import user_repo as repo

_log = logging.getLogger("notes.otp")

OTP_MIN = 100000
OTP_MAX = 999999

SUBJECT_VERIFY = "Verify your email - OTP"
SUBJECT_LOGIN = "Login OTP"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def generate_otp() -> str:
    """Código de 6 dígitos uniforme en [100000, 999999]."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def new_otp(settings: Settings) -> Tuple[str, datetime]:
    """Devuelve (código, expiración) con la ventana configurada."""
    return generate_otp(), _now_utc() + timedelta(minutes=settings.otp_expire_minutes)


def otp_email_body(code: str, minutes: int) -> str:
    return f"Your OTP is: {code}. It will expire in {minutes} minutes."


def send_otp_email(email_client: EmailClient, *, email: str, code: str, subject: str, settings: Settings) -> None:
    email_client.send(email, subject, otp_email_body(code, settings.otp_expire_minutes))


def issue_otp(user: Dict[str, Any], *, subject: str, settings: Settings, email_client: EmailClient) -> datetime:
    """
    Emite un OTP nuevo para un usuario existente: lo guarda (invalidando el
    anterior) y lo envía por correo. Devuelve la expiración.
    """
    code, expires_at = new_otp(settings)
    repo.set_otp(user["_id"], code, expires_at)
    _log.info("OTP emitido user_id=%s expires_at=%s", user["_id"], expires_at.isoformat())
    send_otp_email(email_client, email=user["email"], code=code, subject=subject, settings=settings)
    return expires_at


def consume_otp(user: Dict[str, Any], code: str) -> None:
    """
    Valida `code` contra el OTP guardado y lo consume (uso único).

    - Código distinto (o ya consumido): InvalidCredentialError
    - Fuera de la ventana: ExpiredError (justo en la expiración aún es válido)
    """
    stored = user.get("otp")
    if stored is None or stored != code:
        raise InvalidCredentialError("Invalid OTP")

    expires_at = user.get("otp_expires_at")
    if expires_at is not None and _now_utc() > as_utc(expires_at):
        raise ExpiredError("OTP expired")

    # Update condicionado al código: si otra emisión ganó la carrera, no coincide
    if not repo.consume_otp(user["_id"], code):
        raise InvalidCredentialError("Invalid OTP")
    _log.info("OTP consumido user_id=%s", user["_id"])
