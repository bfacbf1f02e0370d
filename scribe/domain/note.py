"""Note and folder domain models."""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_note_id() -> str:
    return f"note-{uuid4()}"


def new_folder_id() -> str:
    return f"folder-{uuid4()}"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire and on disk."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Note(CamelModel):
    """A titled document holding rich-text markup.

    Attributes:
        id: Unique identifier within the owner's file tree
        title: Note title, fixed at creation
        content: Serialized rich-text markup (HTML)
        created_at: Creation timestamp (UTC)
        updated_at: Last content update timestamp (UTC)
    """

    id: str = Field(default_factory=new_note_id)
    title: str
    content: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Folder(CamelModel):
    """A named container owning notes and sub-folders."""

    id: str = Field(default_factory=new_folder_id)
    name: str
    notes: list[Note] = []
    folders: list["Folder"] = []
