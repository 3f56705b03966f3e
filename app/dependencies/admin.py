from __future__ import annotations

"""
Admin guard (shared secret)
---------------------------
The admin routes are protected by a single password compared in constant time
against `ADMIN_PASSWORD`. The secret may arrive in the `X-Admin-Password`
header or, for JSON bodies, in a `password` field.

- not configured server-side → 500 "Admin password not configured"
- missing or wrong          → 401 "Unauthorized"
"""

import hmac
import logging
from typing import Optional

from fastapi import Header

from app.core.config import settings
from app.core.exceptions import AdminAuthError, AdminNotConfigured

logger = logging.getLogger(__name__)


def _compare_ct(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def check_admin_password(provided: Optional[str]) -> None:
    """Raise unless `provided` equals the configured admin password."""
    expected = settings.ADMIN_PASSWORD.get_secret_value() if settings.ADMIN_PASSWORD else ""
    if not expected:
        raise AdminNotConfigured()
    if not provided or not _compare_ct(provided, expected):
        logger.warning("Rejected admin request: bad or missing password")
        raise AdminAuthError()


async def require_admin(x_admin_password: Optional[str] = Header(default=None, alias="X-Admin-Password")) -> None:
    """FastAPI dependency for routes that take the password from the header only."""
    check_admin_password(x_admin_password)


__all__ = ["check_admin_password", "require_admin"]
