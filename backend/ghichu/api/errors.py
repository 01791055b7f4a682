from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import status
from fastapi.responses import JSONResponse

from ghichu.core.exceptions import NotFoundOrForbidden, Unauthenticated
from ghichu.utils.logging import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = get_logger(__name__)


async def unauthenticated_handler(request: Request, exc: Unauthenticated) -> JSONResponse:
    logger.info("Rejected anonymous write", extra={"path": request.url.path, "method": request.method})
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": exc.detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def not_found_or_forbidden_handler(request: Request, exc: NotFoundOrForbidden) -> JSONResponse:
    # Same response whether the note is missing or someone else's
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": exc.detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Unauthenticated, unauthenticated_handler)
    app.add_exception_handler(NotFoundOrForbidden, not_found_or_forbidden_handler)
