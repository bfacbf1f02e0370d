"""Request bodies and the response envelope shared by all JSON routes."""

from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import Field

from scribe.domain.note import CamelModel


class Credentials(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class NoteCreate(CamelModel):
    folder_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)


class FolderCreate(CamelModel):
    parent_folder_id: str | None = None
    name: str = Field(..., min_length=1)


class NoteContentUpdate(CamelModel):
    content: str


def ok(data: Any) -> dict[str, Any]:
    return {"success": True, "data": jsonable_encoder(data)}


def failure(error: str) -> dict[str, Any]:
    return {"success": False, "error": error}
