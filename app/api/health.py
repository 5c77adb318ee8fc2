"""
app/api/health.py

Purpose: Service probes

- / basic info
- /health database and bot configuration
- /ready for orchestrators (database reachable)
- /live process is up
"""

import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.db.mongo import check_database_health

router = APIRouter()

VERSION = "1.0.0"


def _telegram_status(request: Request) -> str:
    dialogue_router = getattr(request.app.state, "dialogue_router", None)
    if dialogue_router is None:
        return "not_initialized"
    return "configured" if dialogue_router.transport.is_configured() else "not_configured"


@router.get("/")
async def root():
    return {
        "name": "CargoLink API",
        "version": VERSION,
        "description": "Telegram cargo marketplace bot",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


@router.get("/health")
async def health_check(request: Request):
    """
    Database connectivity plus whether the bot can send messages.
    Returns 503 unless the database answers.
    """
    database_ok = await check_database_health()
    telegram = _telegram_status(request)

    status = "healthy" if database_ok else "unhealthy"
    if database_ok and telegram != "configured":
        status = "degraded"

    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "status": status,
            "timestamp": time.time(),
            "environment": settings.ENVIRONMENT,
            "version": VERSION,
            "checks": {
                "database": "healthy" if database_ok else "unhealthy",
                "telegram": telegram,
            },
            "session_ttl_seconds": settings.SESSION_TTL_SECONDS,
        }
    )


@router.get("/ready")
async def readiness_check():
    if await check_database_health():
        return {"status": "ready"}
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "database_unavailable"}
    )


@router.get("/live")
async def liveness_check():
    return {"status": "alive"}
