"""
Transporte de correo: SMTP (producción) o consola (desarrollo local).

Ambos exponen `send(to_email, subject, text_body)`; la API obtiene la instancia
con la dependencia `get_email_client`.
"""
import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from notes_api.core.config import Settings

_log = logging.getLogger("notes.email")


class EmailClient(Protocol):
    def send(self, to_email: str, subject: str, text_body: str) -> None: ...


class SmtpEmailClient:
    def __init__(self, settings: Settings) -> None:
        if not settings.smtp_configured:
            raise RuntimeError("SMTP no configurado. Define SMTP_HOST/SMTP_USER/SMTP_PASS en .env")
        self.settings = settings

    def send(self, to_email: str, subject: str, text_body: str) -> None:
        s = self.settings
        msg = EmailMessage()
        msg["From"] = f"{s.smtp_from_name} <{s.smtp_from_email or s.smtp_user}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(text_body)

        # Conexión STARTTLS por defecto (587); SSL directo si smtp_use_tls=False (465)
        if s.smtp_use_tls:
            with smtplib.SMTP(s.smtp_host, s.smtp_port) as server:
                server.starttls()
                server.login(s.smtp_user, s.smtp_pass)
                server.send_message(msg)
        else:
            with smtplib.SMTP_SSL(s.smtp_host, s.smtp_port) as server:
                server.login(s.smtp_user, s.smtp_pass)
                server.send_message(msg)
        _log.info("Correo enviado to=%s subject=%r", to_email, subject)


class ConsoleEmailClient:
    """Escribe el correo en el log en lugar de enviarlo (solo desarrollo)."""

    def send(self, to_email: str, subject: str, text_body: str) -> None:
        _log.warning("[console email] to=%s subject=%r body=%r", to_email, subject, text_body)


def build_email_client(settings: Settings) -> EmailClient:
    if settings.email_backend == "console":
        return ConsoleEmailClient()
    return SmtpEmailClient(settings)
