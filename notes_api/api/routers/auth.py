"""Rutas de autenticación: registro, envío/verificación de OTP y login."""
from fastapi import APIRouter, Depends, Request, status

from notes_api.api.deps import (
    CurrentIdentity,
    client_ip,
    get_current_identity,
    get_email_client,
    get_settings,
)
from notes_api.api.schemas import rules
from notes_api.api.schemas.auth import (
    EmailPayload,
    MessageOut,
    RegisterPayload,
    SessionOut,
    VerifyOtpPayload,
)
from notes_api.api.schemas.user import ProfileOut
from notes_api.core import rate_limit
from notes_api.core.config import Settings
from notes_api.core.exceptions import RateLimitedError
from notes_api.infrastructure.email.email_client import EmailClient
from notes_api.services import auth_service as service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar usuario",
    description="Crea el usuario sin verificar y envía el primer OTP por correo.",
)
def register(
    payload: RegisterPayload,
    settings: Settings = Depends(get_settings),
    email_client: EmailClient = Depends(get_email_client),
):
    return service.register(
        name=payload.name,
        email=payload.email,
        date_of_birth=payload.date_of_birth,
        settings=settings,
        email_client=email_client,
    )


@router.post(
    "/send-otp",
    response_model=MessageOut,
    summary="Enviar OTP de login",
    description="Emite un OTP nuevo (invalida el anterior) y lo envía por correo.",
)
def send_otp(
    payload: EmailPayload,
    request: Request,
    settings: Settings = Depends(get_settings),
    email_client: EmailClient = Depends(get_email_client),
):
    key = (f"{client_ip(request)}:{payload.email}", "/auth/send-otp")
    if not rate_limit.allow(key, limit=settings.otp_rate_per_min, window_seconds=60):
        raise RateLimitedError("Too many OTP requests, please wait a moment")
    return service.send_otp(email=payload.email, settings=settings, email_client=email_client)


@router.post(
    "/verify-otp",
    response_model=SessionOut,
    summary="Verificar OTP",
    description="Valida el OTP, marca el email como verificado y emite el token de sesión.",
)
def verify_otp(payload: VerifyOtpPayload, request: Request, settings: Settings = Depends(get_settings)):
    key = (f"{client_ip(request)}:{payload.email}", "/auth/verify-otp")
    if not rate_limit.allow(key, limit=settings.verify_rate_per_min, window_seconds=60):
        raise RateLimitedError("Too many attempts, please wait a moment")
    return service.verify_otp(email=payload.email, otp=payload.otp, settings=settings)


@router.post(
    "/login",
    response_model=SessionOut,
    summary="Login",
    description="Emite token de sesión para una cuenta ya verificada.",
)
def login(payload: EmailPayload, request: Request, settings: Settings = Depends(get_settings)):
    if not rate_limit.allow((client_ip(request), "/auth/login"), limit=settings.login_rate_per_min, window_seconds=60):
        raise RateLimitedError("Too many attempts, please wait a moment")
    return service.login(email=payload.email, settings=settings)


@router.get(
    "/me",
    response_model=ProfileOut,
    summary="Perfil básico del usuario",
    description="Devuelve la proyección pública del usuario autenticado.",
)
def me(identity: CurrentIdentity = Depends(get_current_identity)):
    return service.get_profile(identity.user_id)


@router.get(
    "/validation-rules",
    response_model=dict,
    summary="Reglas de validación",
    description="Límites, patrones y mensajes que aplica el servidor a cada formulario.",
)
def validation_rules():
    return rules.describe()
