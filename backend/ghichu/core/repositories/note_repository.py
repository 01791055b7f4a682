from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from ghichu.core.models.note import Note


SearchField = Literal["title", "content"]


class NoteRepository(ABC):
    """Abstract repository interface for notes.

    Contract used by services and dependency injection. Implementations should
    perform I/O (database, network) and therefore expose async methods. Owner
    scoping for reads is part of the contract; ownership checks for writes
    belong to the services.
    """

    @abstractmethod
    async def create(self, note: Note) -> Note:  # pragma: no cover - interface only
        """Persist a new note and return the stored entity."""

    @abstractmethod
    async def get(self, note_id: UUID) -> Note | None:  # pragma: no cover
        """Fetch a note by id or return None if not found."""

    @abstractmethod
    async def list(self, *, user_id: UUID) -> Sequence[Note]:  # pragma: no cover
        """Return all notes owned by ``user_id``, newest first."""

    @abstractmethod
    async def search_text(
        self,
        *,
        user_id: UUID,
        field: SearchField,
        query: str,
    ) -> Sequence[Note]:  # pragma: no cover
        """Full-text lookup of ``query`` against one field of the user's notes.

        Terms are prefix-matched. Result order is whatever the index yields.
        """

    @abstractmethod
    async def list_tag_sets(self, *, user_id: UUID) -> Sequence[list[str]]:  # pragma: no cover
        """Return the ``tags`` value of every note owned by ``user_id``."""

    @abstractmethod
    async def replace_fields(self, note_id: UUID, changes: dict[str, Any]) -> Note | None:  # pragma: no cover
        """Overwrite the given fields on a note; None if the note is missing."""

    @abstractmethod
    async def delete(self, note_id: UUID) -> bool:  # pragma: no cover
        """Delete a note by id. Return True if a row was removed, False otherwise."""
