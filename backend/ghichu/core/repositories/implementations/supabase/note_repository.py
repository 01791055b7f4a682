from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from ghichu.config import settings
from ghichu.core.models.note import Note
from ghichu.core.repositories.note_repository import NoteRepository
from ghichu.utils.logging import get_logger
from ghichu.utils.text_search import to_prefix_tsquery

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from supabase import Client

    from ghichu.core.repositories.note_repository import SearchField


class SupabaseNoteRepository(NoteRepository):
    """Supabase implementation of the NoteRepository.

    Uses Supabase's PostgREST client. Assumes a ``notes`` table with columns
    matching the ``Note`` model and GIN text-search indexes on ``title`` and
    ``content`` (see ``supabase/schema.sql``).
    """

    def __init__(
        self,
        client: Client,
        table_name: str | None = None,
        page_size: int | None = None,
    ) -> None:
        self._client: Client = client
        self._table_name = table_name or settings.notes_table
        self._page_size = page_size or settings.page_size

    async def create(self, note: Note) -> Note:
        row = self._note_to_row(note)
        resp = await self._run(
            lambda: self._client.table(self._table_name)
            .insert(row)
            .execute()
        )
        data = self._first(resp.data)
        return self._row_to_note(data)

    async def get(self, note_id: UUID) -> Note | None:
        resp = await self._run(
            lambda: self._client.table(self._table_name)
            .select("*")
            .eq("id", str(note_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_note(items[0])

    async def list(self, *, user_id: UUID) -> Sequence[Note]:
        items = await self._fetch_all(
            lambda: self._client.table(self._table_name)
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .order("id")
        )
        return [self._row_to_note(i) for i in items]

    async def search_text(
        self,
        *,
        user_id: UUID,
        field: SearchField,
        query: str,
    ) -> Sequence[Note]:
        tsquery = to_prefix_tsquery(query)
        if tsquery is None:
            return []

        items = await self._fetch_all(
            lambda: self._client.table(self._table_name)
            .select("*")
            .eq("user_id", str(user_id))
            .text_search(field, tsquery, options={"config": settings.text_search_config})
            .order("id")
        )
        logger.debug(
            "Text search finished",
            extra={"field": field, "user_id": str(user_id), "hits": len(items)},
        )
        return [self._row_to_note(i) for i in items]

    async def list_tag_sets(self, *, user_id: UUID) -> Sequence[list[str]]:
        rows = await self._fetch_all(
            lambda: self._client.table(self._table_name)
            .select("tags")
            .eq("user_id", str(user_id))
            .order("id")
        )
        tag_sets: list[list[str]] = []
        for row in rows:
            tags = row.get("tags") or []
            if isinstance(tags, list):
                tag_sets.append([t for t in tags if isinstance(t, str)])
        return tag_sets

    async def replace_fields(self, note_id: UUID, changes: dict[str, Any]) -> Note | None:
        # Identity and creation stamp are immutable
        sanitized: dict[str, Any] = {
            k: v for k, v in (changes or {}).items() if k not in {"id", "user_id", "created_at"}
        }
        if not sanitized:
            return await self.get(note_id)

        resp = await self._run(
            lambda: self._client.table(self._table_name)
            .update(sanitized)
            .eq("id", str(note_id))
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_note(items[0])

    async def delete(self, note_id: UUID) -> bool:
        resp = await self._run(
            lambda: self._client.table(self._table_name)
            .delete()
            .eq("id", str(note_id))
            .execute()
        )
        items = resp.data or []
        return len(items) > 0

    async def _fetch_all(self, build: Callable[[], Any]) -> list[dict[str, Any]]:
        """Run the query built by ``build`` page by page.

        PostgREST silently caps a single response at its max-rows setting, so
        reads that must return everything walk ``range()`` windows until a
        short page comes back. ``build`` must apply a total order.
        """
        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            start = offset
            resp = await self._run(
                lambda: build().range(start, start + self._page_size - 1).execute()
            )
            page: list[dict[str, Any]] = resp.data or []
            rows.extend(page)
            if len(page) < self._page_size:
                return rows
            offset += self._page_size

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        return await asyncio.to_thread(func)

    @staticmethod
    def _first(data: Any) -> dict[str, Any]:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        return {}

    @staticmethod
    def _row_to_note(row: dict[str, Any]) -> Note:
        normalized = dict(row)

        # Columns maintained by the database that the model does not carry
        for field in ("updated_at", "rank"):
            normalized.pop(field, None)

        if normalized.get("tags") is None:
            normalized["tags"] = []
        return Note.model_validate(normalized)

    @staticmethod
    def _note_to_row(note: Note) -> dict[str, Any]:
        data = note.model_dump()
        # PostgREST needs JSON-serializable values
        data["id"] = str(note.id)
        data["user_id"] = str(note.user_id)
        data["created_at"] = note.created_at.isoformat()
        return data
