# app/core/exceptions.py
from __future__ import annotations

"""
Mux Playback Gateway — Application Exceptions
=============================================
A small, consistent layer on top of FastAPI/Starlette's `HTTPException` that
lets us attach structured metadata and render the gateway's JSON error shape
from `app.core.exception_handlers`.

Taxonomy
--------
- `ConfigurationError`     server-side configuration missing (500; 400 for signing)
- `AdminAuthError`         bad or missing admin credential (401)
- `ClientInputError`       request is missing what we need (400)
- `RemotePlatformError`    Mux answered with an error; status mirrored (default 500)

"Not found" from Mux during resolution is *not* an exception at this layer:
the services absorb it and answer with `{processing: true}`.

Usage
-----
    raise SigningNotConfigured()
    raise RemotePlatformError.from_mux(exc)
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

from fastapi import HTTPException, status

if TYPE_CHECKING:
    from app.services.mux_client import MuxAPIError

__all__ = [
    "AppException",
    "ConfigurationError",
    "SigningNotConfigured",
    "AdminNotConfigured",
    "AdminAuthError",
    "ClientInputError",
    "MissingIdentifiers",
    "RemotePlatformError",
]


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(HTTPException):
    """Base application-level exception with optional metadata.

    Attributes
    -----------
    status_code : int
        HTTP status code of the response.
    message : str
        Human-readable error message (serialized as `error`).
    code : int | str | None
        Optional typed error code surfaced as `code` in the body. Remote
        failures carry the Mux status code here.
    details : Any
        Machine-readable details, omitted from the body when None.
    """

    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        code: Optional[int | str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.message: str = message
        self.code: Optional[int | str] = code
        self.details: Optional[Any] = details

    def to_body(self, *, request_id: Optional[str] = None) -> Dict[str, Any]:
        """Return the `{error, code?}` JSON body used by every error response."""
        body: Dict[str, Any] = {"error": self.message}
        if self.code is not None:
            body["code"] = self.code
        if self.details is not None:
            body["details"] = self.details
        if request_id:
            body["request_id"] = request_id
        return body


# ──────────────────────────────────────────────────────────────
# ⚙️ Configuration
# ──────────────────────────────────────────────────────────────
class ConfigurationError(AppException):
    """A required server-side setting is missing. Never retried."""

    def __init__(self, message: str, *, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR, code: str = "not_configured") -> None:
        super().__init__(status_code=status_code, message=message, code=code)


class SigningNotConfigured(ConfigurationError):
    """Signed playback requested but no signing key is configured.

    Reported as 400 and never downgraded to a public URL.
    """

    def __init__(self) -> None:
        super().__init__(
            "Signed playback is not configured: MUX_SIGNING_KEY_ID and MUX_SIGNING_PRIVATE_KEY are required",
            status_code=status.HTTP_400_BAD_REQUEST,
            code="signing_not_configured",
        )


class AdminNotConfigured(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("Admin password not configured")


# ──────────────────────────────────────────────────────────────
# 🔐 Authorization
# ──────────────────────────────────────────────────────────────
class AdminAuthError(AppException):
    """Admin credential missing or wrong. No detail beyond 'Unauthorized'."""

    def __init__(self) -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, message="Unauthorized")


# ──────────────────────────────────────────────────────────────
# 📨 Client input
# ──────────────────────────────────────────────────────────────
class ClientInputError(AppException):
    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, message=message, details=details)


class MissingIdentifiers(ClientInputError):
    def __init__(self) -> None:
        super().__init__("Missing identifiers: provide assetId, playbackId or playbackUrl")


# ──────────────────────────────────────────────────────────────
# 🌐 Remote platform
# ──────────────────────────────────────────────────────────────
class RemotePlatformError(AppException):
    """Mux rejected a call; its status code and message are passed through verbatim."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        code = int(status_code or status.HTTP_500_INTERNAL_SERVER_ERROR)
        # Anything outside the HTTP error range cannot be mirrored as-is.
        http_status = code if 400 <= code <= 599 else status.HTTP_500_INTERNAL_SERVER_ERROR
        super().__init__(status_code=http_status, message=message, code=code)

    @classmethod
    def from_mux(cls, exc: MuxAPIError) -> "RemotePlatformError":
        return cls(exc.message or str(exc), status_code=exc.status_code)
