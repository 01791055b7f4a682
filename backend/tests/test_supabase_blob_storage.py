from types import SimpleNamespace

import pytest
from storage3.utils import StorageException

from ghichu.core.repositories.implementations.supabase.blob_storage import SupabaseBlobStorage

pytestmark = pytest.mark.anyio


class FakeBucket:
    def __init__(self, objects):
        self.objects = objects

    def create_signed_upload_url(self, path):
        return {"signed_url": f"https://project.supabase.co/upload/{path}", "token": "tok", "path": path}

    def create_signed_url(self, path, expires_in):
        if path not in self.objects:
            raise StorageException({"statusCode": 404, "error": "not_found", "message": "Object not found"})
        return {"signedURL": f"https://project.supabase.co/object/{path}?ttl={expires_in}"}


class FakeStorage:
    def __init__(self, objects=()):
        self.buckets = []
        self.bucket = FakeBucket(set(objects))

    def from_(self, bucket):
        self.buckets.append(bucket)
        return self.bucket


def make_storage(objects=()):
    client = SimpleNamespace(storage=FakeStorage(objects))
    return client, SupabaseBlobStorage(client, bucket="note-images")


async def test_upload_target_uses_the_bucket():
    client, storage = make_storage()

    target = await storage.generate_upload_target()

    assert client.storage.buckets == ["note-images"]
    assert target.upload_url.endswith(target.storage_id)
    assert target.token == "tok"


async def test_resolve_signs_existing_objects():
    _, storage = make_storage(objects={"key-1"})

    assert await storage.resolve("key-1") == "https://project.supabase.co/object/key-1?ttl=3600"


async def test_resolve_missing_object_is_none():
    _, storage = make_storage()

    assert await storage.resolve("gone") is None

