"""Health check endpoint for infrastructure monitoring."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorClient

from chatbridge.config import Settings, get_settings

logger = logging.getLogger(__name__)
router = APIRouter()


async def _check_mongodb(settings: Settings) -> dict[str, Any]:
    """Ping MongoDB and return status."""
    client: AsyncIOMotorClient | None = None
    try:
        client = AsyncIOMotorClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=2000,
        )
        await client.admin.command("ping")
        return {"status": "healthy"}
    except Exception as exc:
        logger.warning("MongoDB health check failed: %s", exc)
        return {"status": "unhealthy", "error": str(exc)}
    finally:
        if client is not None:
            client.close()


@router.get("")
async def health_check(
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """Return aggregate health of all backend services."""
    services = {
        "mongodb": await _check_mongodb(settings),
    }

    overall = (
        "healthy"
        if all(s["status"] == "healthy" for s in services.values())
        else "degraded"
    )

    return {
        "status": overall,
        "model": settings.openrouter_model,
        "services": services,
    }
