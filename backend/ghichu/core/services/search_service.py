from __future__ import annotations

from typing import TYPE_CHECKING

from ghichu.core.services.image_policy import resolve_notes

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from ghichu.core.models.note import Note, ResolvedNote
    from ghichu.core.repositories.blob_storage import BlobStorage
    from ghichu.core.repositories.note_repository import NoteRepository


def merge_unique(*result_sets: Iterable[Note]) -> list[Note]:
    """Concatenate result sets, keeping the first occurrence of each note id."""
    seen: set[UUID] = set()
    merged: list[Note] = []
    for results in result_sets:
        for note in results:
            if note.id in seen:
                continue
            seen.add(note.id)
            merged.append(note)
    return merged


def filter_by_tag(notes: Iterable[Note], tag: str | None) -> list[Note]:
    """Keep notes carrying ``tag`` exactly. No tag (or an empty one) keeps everything."""
    if not tag:
        return list(notes)
    return [note for note in notes if note.has_tag(tag)]


class SearchService:
    """Service for searching a user's notes.

    A blank query lists the user's notes newest first. Otherwise the title
    and content indexes are queried separately and their hits are merged,
    title hits first, without score blending.
    """

    def __init__(self, repo: NoteRepository, storage: BlobStorage) -> None:
        self._repo = repo
        self._storage = storage

    async def search_notes(
        self,
        *,
        user_id: UUID | None,
        query: str = "",
        tag: str | None = None,
    ) -> list[ResolvedNote]:
        if user_id is None:
            return []

        notes: Sequence[Note]
        if not (query or "").strip():
            notes = await self._repo.list(user_id=user_id)
        else:
            title_hits = await self._repo.search_text(user_id=user_id, field="title", query=query)
            content_hits = await self._repo.search_text(user_id=user_id, field="content", query=query)
            notes = merge_unique(title_hits, content_hits)

        return await resolve_notes(filter_by_tag(notes, tag), self._storage)
