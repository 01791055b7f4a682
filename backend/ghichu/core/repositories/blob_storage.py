from __future__ import annotations

from abc import ABC, abstractmethod

from ghichu.core.models.base import AppBaseModel


class UploadTarget(AppBaseModel):
    """One-time destination for a client-side image upload."""

    storage_id: str
    upload_url: str
    token: str | None = None


class BlobStorage(ABC):
    """Abstract image storage used by the note services."""

    @abstractmethod
    async def generate_upload_target(self) -> UploadTarget:  # pragma: no cover - interface only
        """Reserve a storage key and return where the client should send the bytes."""

    @abstractmethod
    async def resolve(self, storage_id: str) -> str | None:  # pragma: no cover
        """Return a URL the client can load the blob from, or None if it is gone."""
