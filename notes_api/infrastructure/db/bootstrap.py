"""
Bootstrap de la base Mongo: define y aplica índices y validadores (JSON Schema).
Se ejecuta al inicio de la app para asegurar colecciones mínimas y consistencia.
No tumba la app si algo falla; deja warnings en casos no críticos.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError
from notes_api.infrastructure.db.mongo import get_db
from notes_api.repositories.user_repo import USER_COLL
from notes_api.repositories.note_repo import NOTE_COLL

_log = logging.getLogger("notes.mongo.bootstrap")


USER_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["email", "name", "date_of_birth", "is_email_verified", "created_at", "updated_at"],
    "properties": {
        "email": {"bsonType": "string", "minLength": 3, "description": "lowercase"},
        "name": {"bsonType": "string", "minLength": 2, "maxLength": 50},
        "date_of_birth": {"bsonType": "string", "pattern": r"^\d{2}/\d{2}/\d{4}$"},
        "is_email_verified": {"bsonType": "bool"},
        "otp": {"bsonType": "string", "pattern": r"^\d{6}$"},
        "otp_expires_at": {"bsonType": "date"},
        "created_at": {"bsonType": "date"},
        "updated_at": {"bsonType": "date"},
    },
    "additionalProperties": True,
    # OTP y expiración van juntos
    "dependencies": {"otp": ["otp_expires_at"], "otp_expires_at": ["otp"]},
}

NOTE_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["user_id", "title", "content", "created_at", "updated_at"],
    "properties": {
        "user_id": {"bsonType": "objectId"},
        "title": {"bsonType": "string", "minLength": 1, "maxLength": 100},
        "content": {"bsonType": "string", "minLength": 1, "maxLength": 1000},
        "created_at": {"bsonType": "date"},
        "updated_at": {"bsonType": "date"},
    },
    "additionalProperties": True,
}


def _collmod_or_create(name: str, validator: Dict[str, Any]) -> None:
    db = get_db()
    try:
        if name in db.list_collection_names():
            db.command({
                "collMod": name,
                "validator": {"$jsonSchema": validator},
                "validationLevel": "moderate",
            })
        else:
            db.create_collection(name, validator={"$jsonSchema": validator})
    except PyMongoError as e:
        # Algunos motores no aceptan collMod sin privilegios; seguimos sin validator estricto.
        _log.warning("No se pudo aplicar validator en '%s': %s", name, e)


def _ensure_indexes(name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = get_db()[name]
    for ix in indexes:
        ix = dict(ix)
        keys = ix.pop("keys")
        try:
            coll.create_index(keys, **ix)
        except PyMongoError as e:
            # Ignora fallas de índice (e.g., ya existe o datos no únicos previos)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


def ensure_indexes() -> None:
    _ensure_indexes(USER_COLL, [
        {"keys": [("email", ASCENDING)], "unique": True, "name": "uniq_email"},
    ])
    _ensure_indexes(NOTE_COLL, [
        {"keys": [("user_id", ASCENDING), ("created_at", DESCENDING)], "name": "ix_user_created"},
    ])


def ensure_validators() -> None:
    _collmod_or_create(USER_COLL, USER_VALIDATOR)
    _collmod_or_create(NOTE_COLL, NOTE_VALIDATOR)


def ensure_collections() -> None:
    """
    Garantiza índices y validadores mínimos. Los índices van primero: el único
    de email respalda la detección de registros duplicados.
    """
    ensure_indexes()
    ensure_validators()
