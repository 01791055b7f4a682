from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import Field

from .base import CreatedModel


class Note(CreatedModel):
    """Note domain model.

    ``storage_id`` and ``image_url`` are both persisted; which one is shown is
    decided when the note is written (see ``core.services.image_policy``).
    """

    id: UUID = Field(default_factory=uuid4, description="Unique note identifier")

    title: str = Field(description="Note title")
    content: str = Field(description="Note content")

    # Stored in insertion order; duplicates are kept as given
    tags: list[str] = Field(default_factory=list, description="Tags for filtering")

    # Ownership
    user_id: UUID = Field(description="Owner of the note")

    # Image: an uploaded blob key or an external URL
    storage_id: str | None = Field(default=None, description="Storage key of an uploaded image")
    image_url: str | None = Field(default=None, description="External image URL")

    def has_tag(self, tag: str) -> bool:
        """Exact, case-sensitive tag membership."""
        return tag in self.tags

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": str(uuid4()),
                    "title": "Mua sắm",
                    "content": "Sữa, trứng",
                    "tags": ["nhà"],
                    "user_id": str(uuid4()),
                    "storage_id": None,
                    "image_url": None,
                }
            ]
        }
    }


class ResolvedNote(Note):
    """A note as returned by reads, with its image URL resolved for display."""

    display_url: str | None = Field(default=None, description="URL to render the note image from")
