from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator, model_validator

from ghichu.core.models.base import AppBaseModel


def _split_tags(v: list[str] | str | None) -> list[str]:
    """Accept a list or the comma-separated form input; trim and drop empties."""
    if v is None:
        return []
    raw = v.split(",") if isinstance(v, str) else v
    return [tag.strip() for tag in raw if tag and tag.strip()]


class NoteWrite(AppBaseModel):
    title: str = Field(..., description="Note title")
    content: str = Field(..., description="Note content")
    tags: list[str] = Field(default_factory=list, description="Tags, as a list or comma-separated")
    storage_id: str | None = Field(default=None, description="Storage key of an uploaded image")
    image_url: str | None = Field(default=None, description="External image URL")

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: list[str] | str | None) -> list[str]:
        return _split_tags(v)

    @field_validator("title", "content")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Title and content must not be empty")
        return stripped


class NoteCreate(NoteWrite):
    @model_validator(mode="after")
    def validate_single_image(self) -> NoteCreate:
        if (self.storage_id or "").strip() and (self.image_url or "").strip():
            raise ValueError("Provide either an uploaded image or an image URL, not both")
        return self


class NoteUpdate(NoteWrite):
    """Full replacement of a note.

    ``storage_id`` is a new upload when it differs from the note's current
    key. ``image_url`` replaces the stored URL when it differs from it, so
    clients echo the stored value back to leave the image alone.
    """


class NoteCreated(AppBaseModel):
    id: UUID


class NoteRead(AppBaseModel):
    id: UUID
    title: str
    content: str
    tags: list[str]
    user_id: UUID
    storage_id: str | None
    image_url: str | None
    display_url: str | None
    created_at: datetime


class UploadTargetRead(AppBaseModel):
    storage_id: str
    upload_url: str
    token: str | None = None
