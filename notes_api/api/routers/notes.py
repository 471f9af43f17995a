"""
Endpoints para `notes` del usuario autenticado.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from notes_api.api.deps import CurrentIdentity, get_current_identity
from notes_api.api.schemas.auth import MessageOut
from notes_api.api.schemas.note import NoteCreate, NoteOut
from notes_api.services import note_service


router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get(
    "",
    response_model=List[NoteOut],
    summary="Listar notas",
    description="Lista las notas del usuario, más recientes primero.",
)
def list_notes(identity: CurrentIdentity = Depends(get_current_identity)):
    return [NoteOut.from_doc(d) for d in note_service.list_notes(identity.user_id)]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteOut,
    summary="Crear nota",
)
def create_note(payload: NoteCreate, identity: CurrentIdentity = Depends(get_current_identity)):
    doc = note_service.create_note(user_id=identity.user_id, title=payload.title, content=payload.content)
    return NoteOut.from_doc(doc)


@router.delete(
    "/{note_id}",
    response_model=MessageOut,
    summary="Borrar nota",
    description="Borra una nota propia; una nota ajena responde igual que una inexistente (404).",
)
def delete_note(note_id: str, identity: CurrentIdentity = Depends(get_current_identity)):
    note_service.delete_note(user_id=identity.user_id, note_id=note_id)
    return MessageOut(message="Note deleted successfully")
