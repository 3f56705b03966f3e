# app/main.py
from __future__ import annotations

"""
# Mux Playback Gateway — Application Entrypoint (FastAPI)

ASGI application factory and lifecycle for the service that sits between the
frontend and Mux: it hands out upload targets, resolves upload/asset ids into
playback URLs, and deletes assets for admins.

## Design Goals
- Deterministic, testable **app factory** (`create_app`) with explicit lifespan.
- Middleware order: request id → access log → CORS.
- Centralized exception handling (`{error, code?}` JSON bodies).
- One shared Mux HTTP client per process, closed on shutdown.

## Probes
- `/healthz` — liveness (process up).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
import logging
import os

from fastapi import FastAPI
from starlette.responses import JSONResponse

from app.core.logger import configure_logging

configure_logging()

from app.api.routers import router as api_router  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.core.exception_handlers import install_exception_handlers  # noqa: E402
from app.middleware.request_id import RequestIDMiddleware  # noqa: E402
from app.middleware.request_log import RequestLogMiddleware  # noqa: E402
from app.security_headers import configure_cors  # noqa: E402
from app.services.mux_client import MuxClient  # noqa: E402

logger = logging.getLogger("app.main")


# ─────────────────────────────────────────────────────────────────────────────
# 🔄 Lifespan: startup & shutdown
# ─────────────────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Startup:
        - Build the shared Mux client.
        - Log which optional features are configured.

    Shutdown:
        - Close the Mux client's connection pool.
    """
    app.state.mux_client = MuxClient(settings)
    logger.info("✅ %s starting up", settings.PROJECT_NAME)
    if not settings.signing_configured:
        logger.info("Signed playback disabled (no signing key configured)")
    if not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD not set; admin delete routes will answer 500")

    try:
        yield
    finally:
        await app.state.mux_client.aclose()
        logger.info("🛑 %s shutting down", settings.PROJECT_NAME)


# ─────────────────────────────────────────────────────────────────────────────
# 🏗️ App factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    """
    Build and configure the FastAPI app instance.

    Returns:
        FastAPI: fully wired application with middleware, exception handlers,
        routers, and the liveness endpoint.
    """
    enable_docs = settings.ENABLE_DOCS
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url="/docs" if enable_docs else None,
        redoc_url="/redoc" if enable_docs else None,
        openapi_url="/openapi.json" if enable_docs else None,
        lifespan=lifespan,
    )

    # Starlette runs the last-added middleware first.
    configure_cors(app)
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    install_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/healthz", tags=["meta"])
    async def healthz() -> dict[str, bool]:
        """Liveness probe: `{"ok": true}` when the process is responsive."""
        return {"ok": True}

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        return JSONResponse({"name": settings.PROJECT_NAME, "version": settings.VERSION, "docs": app.docs_url or ""})

    return app


# ─────────────────────────────────────────────────────────────────────────────
# 🚀 Module-level ASGI app for Uvicorn
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()
__all__ = ["create_app", "app"]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", str(settings.PORT))),
        reload=os.getenv("RELOAD", "0") == "1",
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
