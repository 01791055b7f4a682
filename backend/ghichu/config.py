from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    cors_origin_regex: str | None = None
    trusted_hosts: list[str] = ["*"]
    root_path: str = ""

    # Supabase
    supabase_url: str
    supabase_anon_key: str

    # Notes storage
    notes_table: str = "notes"
    text_search_config: str = "simple"  # Postgres text search config used by the FTS indexes
    page_size: int = 1000  # Rows per read request; keep at or below PostgREST max-rows

    # Image storage
    storage_bucket: str = "note-images"
    signed_url_ttl: int = 3600  # Seconds a resolved image URL stays valid


settings = Settings()
