"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del proyecto.
- Agrupa ajustes por área: App, CORS, Mongo, Sesión/JWT, OTP, Email, Rate limit.
- Los secretos (JWT, SMTP) no tienen valor por defecto: se exigen al arrancar.
"""
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resuelve el .env ubicado en la raíz del proyecto (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Conjunto de variables de configuración.

    Se construye una vez y se inyecta en `create_app(settings)`; los servicios
    lo reciben como argumento en vez de leer el entorno directamente.
    """
    # App
    app_name: str = "Notes API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # CORS (cliente React en localhost)
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    cors_allow_any: bool = False

    # Mongo
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "notes_db"
    mongo_tls: bool = False
    mongo_tls_insecure: bool = False  # solo dev: acepta certificados inválidos

    # Sesión / JWT
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    session_token_expire_days: int = 7

    # OTP
    otp_expire_minutes: int = 10

    # Email
    email_backend: Literal["smtp", "console"] = "smtp"
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_pass: str | None = None
    smtp_from_email: str | None = None
    smtp_from_name: str = "Notes"
    smtp_use_tls: bool = True

    # Rate limit (por minuto)
    otp_rate_per_min: int = 5
    login_rate_per_min: int = 10
    verify_rate_per_min: int = 10

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
    )

    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref:
            return ""
        if not pref.startswith("/"):
            pref = "/" + pref
        if len(pref) > 1 and pref.endswith("/"):
            pref = pref[:-1]
        return pref

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_pass)

    def check_required(self) -> None:
        """Falla temprano si faltan secretos obligatorios."""
        if not self.jwt_secret:
            raise RuntimeError("JWT_SECRET no configurado. Defínelo en el entorno o en .env")
        if self.email_backend == "smtp" and not self.smtp_configured:
            raise RuntimeError("SMTP no configurado. Define SMTP_HOST/SMTP_USER/SMTP_PASS en .env")


@lru_cache
def get_settings() -> Settings:
    return Settings()
