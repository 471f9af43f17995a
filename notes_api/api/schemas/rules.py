"""
Reglas de validación compartidas por los esquemas de entrada.

Los mismos límites y mensajes se publican en GET /auth/validation-rules para
que el cliente web valide igual que el servidor.
"""
import re
from datetime import date, datetime
from typing import Any, Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BeforeValidator

NAME_MIN = 2
NAME_MAX = 50
NAME_PATTERN = r"^[a-zA-Z\s]+$"
DOB_PATTERN = r"^\d{2}/\d{2}/\d{4}$"
DOB_FORMAT = "%d/%m/%Y"
MIN_AGE = 13
OTP_LENGTH = 6
OTP_PATTERN = r"^\d{6}$"
TITLE_MAX = 100
CONTENT_MAX = 1000

MESSAGES = {
    "name_min": f"Name must be at least {NAME_MIN} characters long",
    "name_max": f"Name must be at most {NAME_MAX} characters",
    "name_pattern": "Name can only contain letters and spaces",
    "email": "Please enter a valid email address",
    "dob_format": "Date of birth must be in DD/MM/YYYY format",
    "dob_invalid": "Date of birth must be a valid date",
    "dob_age": f"You must be at least {MIN_AGE} years old",
    "otp_length": f"OTP must be exactly {OTP_LENGTH} digits",
    "otp_digits": "OTP must contain only numbers",
    "title_required": "Title is required",
    "title_max": f"Title must be at most {TITLE_MAX} characters",
    "content_required": "Content is required",
    "content_max": f"Content must be at most {CONTENT_MAX} characters",
}


def _normalize_email(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip().lower()
    return v


def _check_email(v: str) -> str:
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(MESSAGES["email"])
    return v


# Email en minúsculas y sin espacios, validado con email-validator
Email = Annotated[str, BeforeValidator(_normalize_email), AfterValidator(_check_email)]


def check_name(v: str) -> str:
    if len(v) < NAME_MIN:
        raise ValueError(MESSAGES["name_min"])
    if len(v) > NAME_MAX:
        raise ValueError(MESSAGES["name_max"])
    if not re.fullmatch(NAME_PATTERN, v):
        raise ValueError(MESSAGES["name_pattern"])
    return v


def age_on(born: date, today: date) -> int:
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years


def check_date_of_birth(v: str, today: date | None = None) -> str:
    if not re.fullmatch(DOB_PATTERN, v):
        raise ValueError(MESSAGES["dob_format"])
    try:
        born = datetime.strptime(v, DOB_FORMAT).date()
    except ValueError:
        raise ValueError(MESSAGES["dob_invalid"])
    if age_on(born, today or date.today()) < MIN_AGE:
        raise ValueError(MESSAGES["dob_age"])
    return v


def check_otp(v: str) -> str:
    if len(v) != OTP_LENGTH:
        raise ValueError(MESSAGES["otp_length"])
    if not re.fullmatch(OTP_PATTERN, v):
        raise ValueError(MESSAGES["otp_digits"])
    return v


def _bounded_text(v: str, max_len: int, required_msg: str, max_msg: str) -> str:
    # El largo se mide sobre el texto recibido; el recorte va después
    if len(v) > max_len:
        raise ValueError(max_msg)
    v = v.strip()
    if not v:
        raise ValueError(required_msg)
    return v


def check_title(v: str) -> str:
    return _bounded_text(v, TITLE_MAX, MESSAGES["title_required"], MESSAGES["title_max"])


def check_content(v: str) -> str:
    return _bounded_text(v, CONTENT_MAX, MESSAGES["content_required"], MESSAGES["content_max"])


def describe() -> dict:
    """Reglas en forma serializable para el cliente."""
    return {
        "name": {"minLength": NAME_MIN, "maxLength": NAME_MAX, "pattern": NAME_PATTERN},
        "dateOfBirth": {"pattern": DOB_PATTERN, "format": "DD/MM/YYYY", "minAge": MIN_AGE},
        "otp": {"length": OTP_LENGTH, "pattern": OTP_PATTERN},
        "title": {"minLength": 1, "maxLength": TITLE_MAX, "trim": True},
        "content": {"minLength": 1, "maxLength": CONTENT_MAX, "trim": True},
        "messages": dict(MESSAGES),
    }
