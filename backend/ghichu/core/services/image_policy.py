from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Annotated, Literal, Union

from pydantic import Field

from ghichu.core.models.base import AppBaseModel
from ghichu.core.models.note import ResolvedNote

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ghichu.core.models.note import Note
    from ghichu.core.repositories.blob_storage import BlobStorage


class ImageFields(AppBaseModel):
    """The two image columns exactly as they are persisted."""

    storage_id: str | None = None
    image_url: str | None = None


class BlobImage(AppBaseModel):
    kind: Literal["blob"] = "blob"
    storage_id: str

    def fields(self) -> ImageFields:
        return ImageFields(storage_id=self.storage_id)


class ExternalImage(AppBaseModel):
    kind: Literal["url"] = "url"
    url: str

    def fields(self) -> ImageFields:
        return ImageFields(image_url=self.url)


class NoImage(AppBaseModel):
    kind: Literal["none"] = "none"

    def fields(self) -> ImageFields:
        return ImageFields()


ImageIntent = Annotated[Union[BlobImage, ExternalImage, NoImage], Field(discriminator="kind")]


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def image_intent(storage_id: str | None = None, image_url: str | None = None) -> ImageIntent:
    """Build the intent for a new note. An uploaded blob wins over a URL."""
    storage_id = _clean(storage_id)
    if storage_id:
        return BlobImage(storage_id=storage_id)
    image_url = _clean(image_url)
    if image_url:
        return ExternalImage(url=image_url)
    return NoImage()


def resolve_update_image(
    previous: Note,
    uploaded_storage_id: str | None,
    image_url: str | None,
) -> ImageFields:
    """Decide the image columns for an update of ``previous``.

    A freshly uploaded blob replaces the image and clears any URL. Otherwise a
    URL that differs from the stored one replaces it and clears the blob (an
    empty URL therefore removes the image). Otherwise both stored values stay.
    """
    uploaded_storage_id = _clean(uploaded_storage_id)
    # Echoing the current key back is not a new upload
    if uploaded_storage_id and uploaded_storage_id != previous.storage_id:
        return BlobImage(storage_id=uploaded_storage_id).fields()

    image_url = _clean(image_url)
    if image_url != previous.image_url:
        return ImageFields(image_url=image_url)

    return ImageFields(storage_id=previous.storage_id, image_url=previous.image_url)


async def display_url(note: Note, storage: BlobStorage) -> str | None:
    """URL to show for a note: the blob when there is one, else the stored URL."""
    if note.storage_id:
        return await storage.resolve(note.storage_id)
    return note.image_url


async def resolve_notes(notes: Sequence[Note], storage: BlobStorage) -> list[ResolvedNote]:
    """Attach display URLs to ``notes``, resolving blobs concurrently."""
    urls = await asyncio.gather(*(display_url(note, storage) for note in notes))
    return [
        ResolvedNote(**note.model_dump(), display_url=url)
        for note, url in zip(notes, urls, strict=True)
    ]
