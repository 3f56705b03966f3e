"""
CORS setup.

The allow-list comes from `FRONTEND_ORIGINS` (CSV) and optionally
`ALLOW_ORIGINS_REGEX`; credentials are allowed so the admin password header
survives preflight.
"""

from typing import Iterable, Optional

from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings

__all__ = ["configure_cors"]


def configure_cors(
    app,
    *,
    allow_credentials: bool = True,
    allow_methods: Optional[Iterable[str]] = None,
    allow_headers: Optional[Iterable[str]] = None,
) -> None:
    """Install strict CORS based on settings."""
    allow_methods = allow_methods or ["GET", "HEAD", "OPTIONS", "POST", "DELETE"]
    allow_headers = allow_headers or [
        "Authorization",
        "Content-Type",
        "X-Request-ID",
        "X-Admin-Password",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.frontend_origins,
        allow_origin_regex=settings.ALLOW_ORIGINS_REGEX or None,
        allow_credentials=allow_credentials,
        allow_methods=list(allow_methods),
        allow_headers=list(allow_headers),
        expose_headers=["X-Request-ID"],
        max_age=3600,
    )
