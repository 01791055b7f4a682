from types import SimpleNamespace

from supabase.lib.client_options import ClientOptions

from ghichu.db import base as db_base


def test_request_client_forwards_the_caller_token(monkeypatch):
    postgrest_tokens = []

    def fake_create_client(url, key, options):
        return SimpleNamespace(
            options=options,
            postgrest=SimpleNamespace(auth=postgrest_tokens.append),
        )

    monkeypatch.setattr(db_base, "create_client", fake_create_client)

    client = db_base.create_request_supabase_client("a.b.c")
    assert isinstance(client.options, ClientOptions)
    assert postgrest_tokens == ["a.b.c"]
    assert client.options.headers["Authorization"] == "Bearer a.b.c"


def test_anonymous_request_client_keeps_the_anon_key(monkeypatch):
    monkeypatch.setattr(
        db_base,
        "create_client",
        lambda url, key, options: SimpleNamespace(options=options, postgrest=None),
    )

    client = db_base.create_request_supabase_client()
    assert "Bearer" not in client.options.headers.get("Authorization", "")
