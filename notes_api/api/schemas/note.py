"""
Esquemas Pydantic para `note`.

La salida conserva `_id`/`userId`/`createdAt` porque el cliente web indexa por ellos.
"""
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notes_api.api.schemas import rules
from notes_api.core.time import iso_utc


class NoteCreate(BaseModel):
    title: str
    content: str

    @field_validator("title")
    @classmethod
    def _check_title(cls, v: str) -> str:
        return rules.check_title(v)

    @field_validator("content")
    @classmethod
    def _check_content(cls, v: str) -> str:
        return rules.check_content(v)


class NoteOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    user_id: str = Field(alias="userId")
    title: str
    content: str
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "NoteOut":
        return cls(
            id=str(doc["_id"]),
            user_id=str(doc["user_id"]),
            title=doc["title"],
            content=doc["content"],
            created_at=iso_utc(doc.get("created_at")) or "",
            updated_at=iso_utc(doc.get("updated_at")) or "",
        )
