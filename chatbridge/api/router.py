"""Central API router that aggregates all route modules."""

from fastapi import APIRouter

from chatbridge.api.health import router as health_router

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
