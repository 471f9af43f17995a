"""
Esquemas Pydantic de salida para la colección `user`.

Solo campos públicos: el OTP, su expiración y la fecha de nacimiento nunca salen.
"""
from pydantic import BaseModel, ConfigDict, Field


class UserOut(BaseModel):
    """Respuesta pública de usuario (sin secretos)."""
    id: str
    name: str
    email: str


class ProfileOut(UserOut):
    model_config = ConfigDict(populate_by_name=True)

    is_email_verified: bool = Field(alias="isEmailVerified")
