def as_user(user_id):
    return {"X-Test-User": str(user_id)}


API = "/api/v1"


def create(client, user_id, **body):
    payload = {"title": "t", "content": "c", "tags": []}
    payload.update(body)
    r = client.post(f"{API}/notes/", headers=as_user(user_id), json=payload)
    assert r.status_code == 201, r.text
    return r.json()["id"]


def test_note_access_is_isolated_per_user(client, alice, bob):
    note_id = create(client, alice, title="Mua sắm", content="Sữa, trứng", tags=["nhà"])

    r = client.get(f"{API}/notes/", headers=as_user(alice))
    assert r.status_code == 200
    assert [n["id"] for n in r.json()] == [note_id]

    r = client.get(f"{API}/notes/", headers=as_user(bob))
    assert r.json() == []


def test_anonymous_reads_are_empty(client, alice):
    create(client, alice, tags=["a"])

    assert client.get(f"{API}/notes/").json() == []
    assert client.get(f"{API}/notes/search", params={"q": "t"}).json() == []
    assert client.get(f"{API}/notes/tags").json() == []


def test_anonymous_writes_are_rejected(client, repo):
    r = client.post(f"{API}/notes/", json={"title": "t", "content": "c"})
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"
    assert repo.rows == {}

    r = client.post(f"{API}/uploads/")
    assert r.status_code == 401


def test_create_validates_title_and_content(client, alice):
    r = client.post(f"{API}/notes/", headers=as_user(alice), json={"title": "  ", "content": "c"})
    assert r.status_code == 422

    r = client.post(f"{API}/notes/", headers=as_user(alice), json={"title": "t"})
    assert r.status_code == 422


def test_create_rejects_two_images(client, alice):
    r = client.post(
        f"{API}/notes/",
        headers=as_user(alice),
        json={"title": "t", "content": "c", "storage_id": "k", "image_url": "https://example.com/a.png"},
    )
    assert r.status_code == 422


def test_comma_separated_tags_are_split(client, repo, alice):
    note_id = create(client, alice, tags="công việc, cá nhân, , ý tưởng")

    [note] = client.get(f"{API}/notes/", headers=as_user(alice)).json()
    assert note["id"] == note_id
    assert note["tags"] == ["công việc", "cá nhân", "ý tưởng"]


def test_search_endpoint(client, alice):
    note_id = create(client, alice, title="Mua sắm", content="Sữa, trứng", tags=["nhà"])
    create(client, alice, title="Họp", content="Thứ hai", tags=["việc"])

    def search(**params):
        r = client.get(f"{API}/notes/search", headers=as_user(alice), params=params)
        assert r.status_code == 200
        return [n["id"] for n in r.json()]

    assert search(q="Mua") == [note_id]
    assert search(q="", tag="nhà") == [note_id]
    assert search(q="Mua", tag="khác") == []
    assert len(search()) == 2


def test_tags_endpoint(client, alice):
    create(client, alice, tags=["a", "b"])
    create(client, alice, tags=["b", "c"])

    r = client.get(f"{API}/notes/tags", headers=as_user(alice))
    assert r.json() == ["a", "b", "c"]


def test_update_replaces_fields(client, repo, alice):
    note_id = create(client, alice, title="old", content="old", tags=["x"])

    r = client.put(
        f"{API}/notes/{note_id}",
        headers=as_user(alice),
        json={"title": "new", "content": "body", "tags": ["y"]},
    )
    assert r.status_code == 204

    [note] = client.get(f"{API}/notes/", headers=as_user(alice)).json()
    assert (note["title"], note["content"], note["tags"]) == ("new", "body", ["y"])


def test_update_with_new_upload_clears_previous_url(client, alice):
    note_id = create(client, alice, image_url="https://example.com/old.png")
    target = client.post(f"{API}/uploads/", headers=as_user(alice)).json()

    r = client.put(
        f"{API}/notes/{note_id}",
        headers=as_user(alice),
        json={
            "title": "t",
            "content": "c",
            "tags": [],
            "storage_id": target["storage_id"],
            "image_url": "https://example.com/old.png",
        },
    )
    assert r.status_code == 204

    [note] = client.get(f"{API}/notes/", headers=as_user(alice)).json()
    assert note["storage_id"] == target["storage_id"]
    assert note["image_url"] is None
    assert note["display_url"] == f"https://storage.test/object/{target['storage_id']}?token=signed"


def test_update_keeps_image_when_unchanged(client, alice):
    note_id = create(client, alice, storage_id="key-1")

    r = client.put(
        f"{API}/notes/{note_id}",
        headers=as_user(alice),
        json={"title": "t2", "content": "c2", "tags": [], "storage_id": "key-1"},
    )
    assert r.status_code == 204

    [note] = client.get(f"{API}/notes/", headers=as_user(alice)).json()
    assert note["storage_id"] == "key-1"
    assert note["display_url"].startswith("https://storage.test/object/key-1")


def test_non_owner_update_and_delete_look_like_missing_notes(client, repo, alice, bob):
    note_id = create(client, alice, title="riêng tư")
    missing_id = "00000000-0000-0000-0000-000000000000"
    body = {"title": "x", "content": "y", "tags": []}

    foreign = client.put(f"{API}/notes/{note_id}", headers=as_user(bob), json=body)
    missing = client.put(f"{API}/notes/{missing_id}", headers=as_user(bob), json=body)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()

    assert client.delete(f"{API}/notes/{note_id}", headers=as_user(bob)).status_code == 404
    assert repo.rows[next(iter(repo.rows))].title == "riêng tư"


def test_delete_then_delete_again(client, alice):
    note_id = create(client, alice)

    assert client.delete(f"{API}/notes/{note_id}", headers=as_user(alice)).status_code == 204
    assert client.delete(f"{API}/notes/{note_id}", headers=as_user(alice)).status_code == 404
    assert client.get(f"{API}/notes/", headers=as_user(alice)).json() == []


def test_invalid_note_id_is_rejected(client, alice):
    r = client.delete(f"{API}/notes/not-a-uuid", headers=as_user(alice))
    assert r.status_code == 422


def test_upload_target(client, storage, alice):
    r = client.post(f"{API}/uploads/", headers=as_user(alice))
    assert r.status_code == 201
    data = r.json()
    assert data["storage_id"] == storage.issued[0]
    assert data["upload_url"].endswith(data["storage_id"])


def test_health(client):
    r = client.get(f"{API}/health/")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"
    assert r.headers["X-Content-Type-Options"] == "nosniff"
