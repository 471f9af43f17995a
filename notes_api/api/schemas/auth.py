"""
Esquemas Pydantic para operaciones de autenticación.

- Mantiene las validaciones y normalizaciones (p. ej. email en minúsculas).
- Los nombres JSON siguen al cliente web (camelCase); en Python, snake_case.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator

from notes_api.api.schemas import rules
from notes_api.api.schemas.user import UserOut


class RegisterPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: rules.Email
    date_of_birth: str = Field(alias="dateOfBirth")

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        return rules.check_name(v)

    @field_validator("date_of_birth")
    @classmethod
    def _check_dob(cls, v: str) -> str:
        return rules.check_date_of_birth(v)


class EmailPayload(BaseModel):
    """Payload de send-otp y login."""
    email: rules.Email


class VerifyOtpPayload(BaseModel):
    email: rules.Email
    otp: str

    @field_validator("otp")
    @classmethod
    def _check_otp(cls, v: str) -> str:
        return rules.check_otp(v)


# === Response models ===

class MessageOut(BaseModel):
    message: str


class SessionOut(BaseModel):
    message: str
    token: str
    user: UserOut
