from __future__ import annotations

import logging
import sys

from ghichu.config import settings

# Supabase clients talk over httpx, which logs every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def setup_logging() -> None:
    """Configure root logging for the API process.

    Output goes to stdout so container runtimes pick it up; the level comes from
    ``APP_LOG_LEVEL``.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).info("Logging configured", extra={"level": settings.log_level})


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
