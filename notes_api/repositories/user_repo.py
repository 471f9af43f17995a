"""Persistencia de usuarios (credenciales, verificación y OTP vigente)."""
from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId

from notes_api.core.time import now_utc
from notes_api.infrastructure.db.mongo import get_db

USER_COLL = "user"


def _oid(user_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


def find_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    """Busca usuario por email (email en minúsculas)."""
    return get_db()[USER_COLL].find_one({"email": email})


def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    oid = _oid(user_id)
    if oid is None:
        return None
    return get_db()[USER_COLL].find_one({"_id": oid})


def insert_user(*, name: str, email: str, date_of_birth: str, otp: str, otp_expires_at: datetime) -> str:
    """Crea un usuario sin verificar con su primer OTP. Devuelve id (str).

    Puede levantar DuplicateKeyError si el índice único de email ya tiene el valor.
    """
    now = now_utc()
    doc = {
        "name": name,
        "email": email,
        "date_of_birth": date_of_birth,
        "is_email_verified": False,
        "otp": otp,
        "otp_expires_at": otp_expires_at,
        "created_at": now,
        "updated_at": now,
    }
    res = get_db()[USER_COLL].insert_one(doc)
    return str(res.inserted_id)


def set_otp(user_id: ObjectId, otp: str, expires_at: datetime) -> None:
    """Reemplaza el OTP vigente (y su expiración) del usuario."""
    get_db()[USER_COLL].update_one(
        {"_id": user_id},
        {"$set": {"otp": otp, "otp_expires_at": expires_at, "updated_at": now_utc()}},
    )


def consume_otp(user_id: ObjectId, otp: str) -> bool:
    """Consume el OTP si sigue siendo el vigente: lo elimina y marca el email verificado.

    Devuelve False si otro request lo reemplazó o consumió antes.
    """
    res = get_db()[USER_COLL].update_one(
        {"_id": user_id, "otp": otp},
        {
            "$set": {"is_email_verified": True, "updated_at": now_utc()},
            "$unset": {"otp": "", "otp_expires_at": ""},
        },
    )
    return res.matched_count == 1
