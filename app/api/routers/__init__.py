"""
🧭 API Router Aggregator
========================

Composes the frontend-facing surface under a single `/api` prefix.

Quick usage
-----------
    from app.api.routers import router
    app.include_router(router)
"""

from fastapi import APIRouter

from .admin_assets import router as admin_assets_router
from .playback import router as playback_router
from .uploads import router as uploads_router


def build_api_router(prefix: str = "/api") -> APIRouter:
    """Compose uploads, playback and admin routes under `prefix`."""
    api = APIRouter(prefix=prefix)
    api.include_router(uploads_router)
    api.include_router(playback_router)
    api.include_router(admin_assets_router)
    return api


router = build_api_router()

__all__ = [
    "build_api_router",
    "router",
    "admin_assets_router",
    "playback_router",
    "uploads_router",
]
