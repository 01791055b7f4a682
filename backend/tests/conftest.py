import os
import itertools
from uuid import UUID, uuid4

import pytest

# Settings are read at import time
os.environ.setdefault("APP_SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("APP_SUPABASE_ANON_KEY", "test-anon-key")

from fastapi import Request  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from ghichu.core.repositories.blob_storage import BlobStorage, UploadTarget  # noqa: E402
from ghichu.core.repositories.note_repository import NoteRepository  # noqa: E402
from ghichu.core.schemas.auth import AuthUser  # noqa: E402
from ghichu.utils.text_search import query_terms  # noqa: E402


class InMemoryNoteRepository(NoteRepository):
    """Dict-backed repository that mimics prefix full-text matching."""

    def __init__(self):
        self.rows = {}
        self._order = {}
        self._seq = itertools.count()

    async def create(self, note):
        self.rows[note.id] = note.model_copy(deep=True)
        self._order[note.id] = next(self._seq)
        return self.rows[note.id].model_copy(deep=True)

    async def get(self, note_id):
        note = self.rows.get(note_id)
        return note.model_copy(deep=True) if note else None

    def _owned(self, user_id):
        return [n for n in self.rows.values() if n.user_id == user_id]

    async def list(self, *, user_id):
        notes = sorted(
            self._owned(user_id),
            key=lambda n: (n.created_at, self._order[n.id]),
            reverse=True,
        )
        return [n.model_copy(deep=True) for n in notes]

    async def search_text(self, *, user_id, field, query):
        terms = [t.lower() for t in query_terms(query)]
        if not terms:
            return []
        hits = []
        for note in sorted(self._owned(user_id), key=lambda n: self._order[n.id]):
            words = [w.lower() for w in query_terms(getattr(note, field))]
            if all(any(w.startswith(t) for w in words) for t in terms):
                hits.append(note.model_copy(deep=True))
        return hits

    async def list_tag_sets(self, *, user_id):
        return [list(n.tags) for n in self._owned(user_id)]

    async def replace_fields(self, note_id, changes):
        note = self.rows.get(note_id)
        if note is None:
            return None
        self.rows[note_id] = note.model_copy(update=changes)
        return self.rows[note_id].model_copy(deep=True)

    async def delete(self, note_id):
        self._order.pop(note_id, None)
        return self.rows.pop(note_id, None) is not None


class InMemoryBlobStorage(BlobStorage):
    def __init__(self):
        self.issued = []
        self.missing = set()

    async def generate_upload_target(self):
        storage_id = str(uuid4())
        self.issued.append(storage_id)
        return UploadTarget(
            storage_id=storage_id,
            upload_url=f"https://storage.test/upload/{storage_id}",
            token="upload-token",
        )

    async def resolve(self, storage_id):
        if storage_id in self.missing:
            return None
        return f"https://storage.test/object/{storage_id}?token=signed"


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def repo():
    return InMemoryNoteRepository()


@pytest.fixture()
def storage():
    return InMemoryBlobStorage()


@pytest.fixture()
def alice():
    return UUID("11111111-1111-1111-1111-111111111111")


@pytest.fixture()
def bob():
    return UUID("22222222-2222-2222-2222-222222222222")


@pytest.fixture()
def client(repo, storage):
    from ghichu.dependencies import get_blob_storage, get_note_repository, get_optional_user
    from ghichu.main import app

    async def fake_user(request: Request):
        raw = request.headers.get("X-Test-User")
        return AuthUser(id=UUID(raw), email=f"{raw}@example.com") if raw else None

    app.dependency_overrides[get_optional_user] = fake_user
    app.dependency_overrides[get_note_repository] = lambda: repo
    app.dependency_overrides[get_blob_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
