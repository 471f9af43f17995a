"""Repo de la colección `note` (siempre filtrada por dueño)."""
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING

from notes_api.core.time import now_utc
from notes_api.infrastructure.db.mongo import get_db

NOTE_COLL = "note"


def _oid(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def insert_note(*, user_id: str, title: str, content: str) -> Dict[str, Any]:
    """Inserta nota y devuelve el documento creado (con _id)."""
    now = now_utc()
    doc = {
        "user_id": ObjectId(user_id),
        "title": title,
        "content": content,
        "created_at": now,
        "updated_at": now,
    }
    res = get_db()[NOTE_COLL].insert_one(doc)
    doc["_id"] = res.inserted_id
    return doc


def list_notes(user_id: str) -> List[Dict[str, Any]]:
    """Lista notas del dueño, más recientes primero (_id desempata)."""
    owner = _oid(user_id)
    if owner is None:
        return []
    cursor = get_db()[NOTE_COLL].find({"user_id": owner}).sort(
        [("created_at", DESCENDING), ("_id", DESCENDING)]
    )
    return list(cursor)


def delete_note(*, user_id: str, note_id: str) -> bool:
    """Borra la nota solo si pertenece al dueño. False si no hay coincidencia."""
    owner, oid = _oid(user_id), _oid(note_id)
    if owner is None or oid is None:
        return False
    res = get_db()[NOTE_COLL].delete_one({"_id": oid, "user_id": owner})
    return res.deleted_count == 1
