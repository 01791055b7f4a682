from __future__ import annotations

import asyncio

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ghichu.config import settings
from ghichu.db.base import create_request_supabase_client

router = APIRouter()

SERVICE_NAME = "ghichu-notes-api"
SERVICE_VERSION = "0.1.0"


@router.get("/")
async def health_check():
    """Health check endpoint."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
        }
    )


@router.get("/ready")
async def readiness_check():
    """Readiness check: can the notes table be reached."""
    db_status = "connected"
    try:
        client = create_request_supabase_client()
        await asyncio.to_thread(
            lambda: client.table(settings.notes_table).select("id").limit(1).execute()
        )
    except Exception as e:
        db_status = f"error: {type(e).__name__}"

    return JSONResponse(
        status_code=status.HTTP_200_OK if db_status == "connected" else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if db_status == "connected" else "degraded",
            "database": db_status,
            "storage_bucket": settings.storage_bucket,
            "api_prefix": settings.api_prefix,
        }
    )
