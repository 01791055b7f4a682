from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, status

from ghichu.api.v1.schemas.note import UploadTargetRead
from ghichu.dependencies import get_blob_storage, get_current_user
from ghichu.utils.logging import get_logger

if TYPE_CHECKING:
    from ghichu.core.repositories.blob_storage import BlobStorage
    from ghichu.core.schemas.auth import AuthUser

logger = get_logger(__name__)

router = APIRouter()


@router.post("/", response_model=UploadTargetRead, status_code=status.HTTP_201_CREATED)
async def request_upload_target(
    current_user: AuthUser = Depends(get_current_user),
    storage: BlobStorage = Depends(get_blob_storage),
):
    """Reserve a storage key for one image upload.

    The client sends the bytes to ``upload_url`` and then passes ``storage_id``
    when creating or updating a note. Nothing is recorded server-side, so an
    abandoned upload leaves no note behind.
    """
    target = await storage.generate_upload_target()
    logger.info(
        "Upload target requested",
        extra={"user_id": str(current_user.id), "storage_id": target.storage_id},
    )
    return UploadTargetRead.model_validate(target)
