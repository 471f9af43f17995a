"""
Service layer for notes: ownership-scoped wrappers over the repository.
"""
import logging
from typing import Any, Dict, List

from notes_api.core.exceptions import NotFoundError
from notes_api.repositories import note_repo

_log = logging.getLogger("notes.notes")


def list_notes(user_id: str) -> List[Dict[str, Any]]:
    return note_repo.list_notes(user_id)


def create_note(*, user_id: str, title: str, content: str) -> Dict[str, Any]:
    doc = note_repo.insert_note(user_id=user_id, title=title, content=content)
    _log.info("Nota creada note_id=%s user_id=%s", doc["_id"], user_id)
    return doc


def delete_note(*, user_id: str, note_id: str) -> None:
    # Nota ajena e inexistente responden igual: no revelamos ids de otros usuarios
    if not note_repo.delete_note(user_id=user_id, note_id=note_id):
        raise NotFoundError("Note not found")
    _log.info("Nota borrada note_id=%s user_id=%s", note_id, user_id)
