from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from ghichu.core.models.base import AppBaseModel


class AuthUser(AppBaseModel):
    """Caller identity resolved from a Supabase access token."""

    id: UUID
    email: str = ""
    role: str | None = None
