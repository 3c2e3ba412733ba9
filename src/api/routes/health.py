from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Request
from sqlalchemy import text
from src.core.config import get_settings

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


async def check_postgres(request: Request) -> dict:
    """Check PostgreSQL connection."""
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        return {"status": "error", "message": "database not configured"}
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
            return {"status": "ok"}
    except Exception as e:
        return {"status": "error", "message": str(e)[:100]}


@router.get("/health", summary="Service health probe")
async def health_check(request: Request) -> dict:
    """Return basic service and datastore status information."""
    settings = get_settings()

    postgres_status = await check_postgres(request)
    overall_status = "ok" if postgres_status.get("status") == "ok" else "degraded"

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "status": overall_status,
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {
            "postgres": postgres_status,
        },
    }
    logger.info("health_probe", **payload)
    return payload
