from __future__ import annotations

from itertools import chain
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from ghichu.core.repositories.note_repository import NoteRepository


async def collect_user_tags(*, user_id: UUID | None, repo: NoteRepository) -> list[str]:
    """Return the unique tags across a user's notes, sorted ascending.

    Tags are compared exactly as stored; no case folding or trimming.
    """
    if user_id is None:
        return []
    tag_sets = await repo.list_tag_sets(user_id=user_id)
    # Code point order; differs from UTF-16 code unit order only for astral-plane tags
    return sorted(set(chain.from_iterable(tag_sets)))
