from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ghichu.core.exceptions import Unauthenticated
from ghichu.core.repositories.implementations.supabase.blob_storage import SupabaseBlobStorage
from ghichu.core.repositories.implementations.supabase.note_repository import (
    SupabaseNoteRepository,
)
from ghichu.core.schemas.auth import AuthUser
from ghichu.core.services.note_service import NoteService
from ghichu.core.services.search_service import SearchService
from ghichu.db.base import create_request_supabase_client
from ghichu.utils.logging import get_logger

logger = get_logger(__name__)

# Use auto_error=False so anonymous reads can degrade to empty results
http_bearer = HTTPBearer(auto_error=False)

if TYPE_CHECKING:
    from supabase import Client

    from ghichu.core.repositories.blob_storage import BlobStorage
    from ghichu.core.repositories.note_repository import NoteRepository


def get_request_supabase_client(request: Request) -> Client:
    """Create a request-scoped Supabase client and set PostgREST bearer.

    Extracts the Authorization: Bearer <jwt> header if present and configures
    PostgREST to enforce RLS for the user.
    """
    auth_header = request.headers.get("authorization") or request.headers.get("Authorization")
    jwt: str | None = None
    if auth_header and auth_header.lower().startswith("bearer "):
        jwt = auth_header.split(" ", 1)[1].strip()
    return create_request_supabase_client(jwt)


def get_note_repository(client: Client = Depends(get_request_supabase_client)) -> NoteRepository:
    """Get a request-scoped note repository instance using request client."""
    return SupabaseNoteRepository(client)


def get_blob_storage(client: Client = Depends(get_request_supabase_client)) -> BlobStorage:
    """Get a request-scoped image storage instance."""
    return SupabaseBlobStorage(client)


def get_note_service(
    repo: NoteRepository = Depends(get_note_repository),
    storage: BlobStorage = Depends(get_blob_storage),
) -> NoteService:
    """Get a request-scoped note service instance."""
    return NoteService(repo, storage)


def get_search_service(
    repo: NoteRepository = Depends(get_note_repository),
    storage: BlobStorage = Depends(get_blob_storage),
) -> SearchService:
    """Get a request-scoped search service instance."""
    return SearchService(repo, storage)


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
) -> AuthUser | None:
    """Resolve the caller from a Supabase JWT, or None when there is no valid one."""
    if not credentials:
        return None
    jwt = credentials.credentials
    if not jwt or len(jwt.split(".")) != 3:
        logger.warning("Rejected malformed bearer token", extra={"jwt_length": len(jwt or "")})
        return None

    supabase = create_request_supabase_client(jwt)
    try:
        resp = await asyncio.to_thread(lambda: supabase.auth.get_user(jwt))
    except Exception as err:
        error_msg = str(err).lower()
        logger.warning(
            "JWT validation failed",
            extra={
                "error_type": type(err).__name__,
                "error_summary": error_msg[:100] if error_msg else "Unknown error",
                "jwt_length": len(jwt),
            }
        )
        return None

    user = getattr(resp, "user", None)
    user_id = getattr(user, "id", None)
    if not user_id:
        logger.warning("Token resolved to no user")
        return None
    return AuthUser(
        id=user_id,
        email=getattr(user, "email", None) or "",
        role=getattr(user, "role", None),
    )


async def get_current_user(user: AuthUser | None = Depends(get_optional_user)) -> AuthUser:
    """Require an authenticated caller."""
    if user is None:
        raise Unauthenticated()
    return user
