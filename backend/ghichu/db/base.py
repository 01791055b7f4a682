from __future__ import annotations

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from ghichu.config import settings
from ghichu.utils.logging import get_logger

logger = get_logger(__name__)


def create_request_supabase_client(bearer_token: str | None = None) -> Client:
    """Create a request-scoped Supabase client using the anon key.

    If a JWT is provided it becomes the bearer for PostgREST and Storage, so
    row-level security on ``notes`` and on the image bucket applies to
    everything done in this request.
    """
    logger.debug("Creating request-scoped Supabase client")
    anon_key = settings.supabase_anon_key
    if not anon_key:
        raise RuntimeError("supabase_anon_key is required for request client")

    client = create_client(
        settings.supabase_url,
        anon_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
    if bearer_token:
        client.postgrest.auth(bearer_token)
        # The storage client is built lazily from these headers on first use
        client.options.headers["Authorization"] = f"Bearer {bearer_token}"
    return client
