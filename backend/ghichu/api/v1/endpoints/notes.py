from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, status

from ghichu.api.v1.schemas.note import NoteCreate, NoteCreated, NoteRead, NoteUpdate
from ghichu.core.services.image_policy import image_intent, resolve_update_image
from ghichu.core.services.tag_service import collect_user_tags
from ghichu.dependencies import (
    get_note_repository,
    get_note_service,
    get_optional_user,
    get_search_service,
)

if TYPE_CHECKING:
    from ghichu.core.repositories.note_repository import NoteRepository
    from ghichu.core.schemas.auth import AuthUser
    from ghichu.core.services.note_service import NoteService
    from ghichu.core.services.search_service import SearchService

router = APIRouter(
    responses={
        401: {"description": "Authentication required"},
        404: {"description": "Note not found or not owned by the caller"},
    }
)


def _user_id(user: AuthUser | None) -> UUID | None:
    return user.id if user else None


@router.get("/", response_model=list[NoteRead])
async def list_notes(
    current_user: AuthUser | None = Depends(get_optional_user),
    service: NoteService = Depends(get_note_service),
):
    """List the caller's notes, newest first. Anonymous callers get an empty list."""
    notes = await service.list_notes(_user_id(current_user))
    return [NoteRead.model_validate(n) for n in notes]


@router.get("/search", response_model=list[NoteRead])
async def search_notes(
    q: str = "",
    tag: str | None = None,
    current_user: AuthUser | None = Depends(get_optional_user),
    service: SearchService = Depends(get_search_service),
):
    """Search titles and contents, optionally narrowed to one exact tag."""
    notes = await service.search_notes(user_id=_user_id(current_user), query=q, tag=tag)
    return [NoteRead.model_validate(n) for n in notes]


@router.get("/tags", response_model=list[str])
async def list_tags(
    current_user: AuthUser | None = Depends(get_optional_user),
    repo: NoteRepository = Depends(get_note_repository),
) -> list[str]:
    """Return every tag the caller has used, sorted."""
    return await collect_user_tags(user_id=_user_id(current_user), repo=repo)


@router.post("/", response_model=NoteCreated, status_code=status.HTTP_201_CREATED)
async def create_note(
    payload: NoteCreate,
    current_user: AuthUser | None = Depends(get_optional_user),
    service: NoteService = Depends(get_note_service),
):
    note_id = await service.create_note(
        _user_id(current_user),
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        image=image_intent(payload.storage_id, payload.image_url),
    )
    return NoteCreated(id=note_id)


@router.put("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    current_user: AuthUser | None = Depends(get_optional_user),
    service: NoteService = Depends(get_note_service),
):
    user_id = _user_id(current_user)
    previous = await service.get_owned_note(note_id, user_id)
    image = resolve_update_image(previous, payload.storage_id, payload.image_url)
    await service.update_note(
        user_id,
        note_id,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        storage_id=image.storage_id,
        image_url=image.image_url,
    )
    return None


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    current_user: AuthUser | None = Depends(get_optional_user),
    service: NoteService = Depends(get_note_service),
):
    await service.delete_note(_user_id(current_user), note_id)
    return None
