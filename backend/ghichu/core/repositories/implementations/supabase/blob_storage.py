from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from storage3.utils import StorageException

from ghichu.config import settings
from ghichu.core.repositories.blob_storage import BlobStorage, UploadTarget
from ghichu.utils.logging import get_logger

if TYPE_CHECKING:
    from supabase import Client

logger = get_logger(__name__)


class SupabaseBlobStorage(BlobStorage):
    """Image storage backed by a Supabase Storage bucket.

    Objects are keyed by a random UUID; the key is what notes keep in
    ``storage_id``. Reads hand out signed URLs so the bucket can stay private.
    """

    def __init__(self, client: Client, bucket: str | None = None) -> None:
        self._client = client
        self._bucket = bucket or settings.storage_bucket

    async def generate_upload_target(self) -> UploadTarget:
        storage_id = str(uuid4())
        resp: dict[str, Any] = await asyncio.to_thread(
            lambda: self._client.storage.from_(self._bucket).create_signed_upload_url(storage_id)
        )
        logger.info("Issued upload target", extra={"storage_id": storage_id, "bucket": self._bucket})
        return UploadTarget(
            storage_id=resp.get("path") or storage_id,
            upload_url=resp.get("signed_url") or resp.get("signedUrl") or "",
            token=resp.get("token"),
        )

    async def resolve(self, storage_id: str) -> str | None:
        try:
            resp: dict[str, Any] = await asyncio.to_thread(
                lambda: self._client.storage.from_(self._bucket).create_signed_url(
                    storage_id, settings.signed_url_ttl
                )
            )
        except StorageException as err:
            # Missing objects resolve to no image rather than failing the whole read
            logger.warning(
                "Could not resolve image",
                extra={"storage_id": storage_id, "error_summary": str(err)[:100]},
            )
            return None
        return resp.get("signedURL") or resp.get("signedUrl")
