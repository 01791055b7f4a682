from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from ghichu.core.exceptions import NotFoundOrForbidden, Unauthenticated
from ghichu.core.models.note import Note
from ghichu.core.services.image_policy import NoImage, resolve_notes
from ghichu.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ghichu.core.models.note import ResolvedNote
    from ghichu.core.repositories.blob_storage import BlobStorage
    from ghichu.core.repositories.note_repository import NoteRepository
    from ghichu.core.services.image_policy import ImageIntent

logger = get_logger(__name__)


class NoteService:
    """Owner-scoped note lifecycle.

    The caller identity is passed explicitly to every operation. Reads degrade
    to empty results without one; writes raise ``Unauthenticated``.
    """

    def __init__(self, repo: NoteRepository, storage: BlobStorage) -> None:
        self._repo = repo
        self._storage = storage

    async def list_notes(self, user_id: UUID | None) -> list[ResolvedNote]:
        """List the user's notes, newest first, with images resolved."""
        if user_id is None:
            return []
        notes = await self._repo.list(user_id=user_id)
        return await resolve_notes(notes, self._storage)

    async def get_owned_note(self, note_id: str | UUID, user_id: UUID | None) -> Note:
        """Return the note if ``user_id`` owns it.

        Raises ``NotFoundOrForbidden`` whether the note is missing or belongs to
        someone else.
        """
        if user_id is None:
            raise Unauthenticated()
        try:
            note_uuid = UUID(str(note_id))
        except ValueError as err:
            raise NotFoundOrForbidden() from err
        note = await self._repo.get(note_uuid)
        if note is None or note.user_id != user_id:
            logger.warning(
                "Denied access to note",
                extra={"note_id": str(note_uuid), "user_id": str(user_id)},
            )
            raise NotFoundOrForbidden()
        return note

    async def create_note(
        self,
        user_id: UUID | None,
        *,
        title: str,
        content: str,
        tags: Sequence[str] = (),
        image: ImageIntent | None = None,
    ) -> UUID:
        """Create a note owned by ``user_id`` and return its id."""
        if user_id is None:
            raise Unauthenticated("Sign in to create notes")

        image_fields = (image or NoImage()).fields()
        note = Note(
            id=uuid4(),
            title=title,
            content=content,
            tags=list(tags),
            user_id=user_id,
            storage_id=image_fields.storage_id,
            image_url=image_fields.image_url,
        )
        created = await self._repo.create(note)
        logger.info("Note created", extra={"note_id": str(created.id), "user_id": str(user_id)})
        return created.id

    async def update_note(
        self,
        user_id: UUID | None,
        note_id: str | UUID,
        *,
        title: str,
        content: str,
        tags: Sequence[str],
        storage_id: str | None,
        image_url: str | None,
    ) -> None:
        """Overwrite every editable field of the user's note.

        Image precedence must already be resolved; both image columns are
        written as given.
        """
        if user_id is None:
            raise Unauthenticated("Sign in to edit notes")
        note = await self.get_owned_note(note_id, user_id)

        changes = {
            "title": title,
            "content": content,
            "tags": list(tags),
            "storage_id": storage_id,
            "image_url": image_url,
        }
        updated = await self._repo.replace_fields(note.id, changes)
        if updated is None:
            # Deleted between the ownership check and the write
            raise NotFoundOrForbidden()
        logger.info("Note updated", extra={"note_id": str(note.id), "user_id": str(user_id)})

    async def delete_note(self, user_id: UUID | None, note_id: str | UUID) -> None:
        """Permanently delete the user's note. Its image blob is left in storage."""
        if user_id is None:
            raise Unauthenticated("Sign in to delete notes")
        note = await self.get_owned_note(note_id, user_id)

        if not await self._repo.delete(note.id):
            raise NotFoundOrForbidden()
        logger.info("Note deleted", extra={"note_id": str(note.id), "user_id": str(user_id)})
