from __future__ import annotations

"""
HTTP Utilities
==============

Shared helpers for API routers:

- No-store JSON helper (playback URLs and admin results must not be cached)
- Translation of resolution outcomes into HTTP responses
"""

from typing import Any, Dict

from fastapi.responses import JSONResponse

from app.core.exceptions import RemotePlatformError
from app.schemas.mux import PlaybackOut, ProcessingOut
from app.services.playback import Error, NotFound, PlaybackReady, Processing, ResolutionResult

__all__ = ["json_no_store", "present_resolution"]

_NO_STORE = {"Cache-Control": "no-store", "Pragma": "no-cache"}


def json_no_store(payload: Any, status_code: int = 200) -> JSONResponse:
    """Return a JSON response with strict `no-store` caching.

    Pydantic models exposing `dump()` are serialized with their camelCase aliases.
    """
    if hasattr(payload, "dump"):
        payload = payload.dump()
    return JSONResponse(payload, status_code=status_code, headers=dict(_NO_STORE))


def present_resolution(result: ResolutionResult, *, include_asset_id: bool = True) -> JSONResponse:
    """Map a `ResolutionResult` onto the frontend contract.

    - `PlaybackReady` → `{playbackUrl, playbackId, assetId?}`
    - `Processing`    → `{processing, assetId?, asset?}`
    - `NotFound`      → `{processing: true}` (HTTP 200: the id may just not be visible yet)
    - `Error`         → raises `RemotePlatformError` with the remote status
    """
    if isinstance(result, PlaybackReady):
        return json_no_store(
            PlaybackOut(
                playback_url=result.url,
                playback_id=result.playback_id,
                asset_id=result.asset_id if include_asset_id else None,
            )
        )
    if isinstance(result, Processing):
        asset: Dict[str, Any] | None = result.asset.model_dump(mode="json") if result.asset is not None else None
        return json_no_store(ProcessingOut(processing=result.processing, asset_id=result.asset_id, asset=asset))
    if isinstance(result, NotFound):
        return json_no_store(ProcessingOut())
    if isinstance(result, Error):
        raise RemotePlatformError(result.message, status_code=result.code)
    raise TypeError(f"Unhandled resolution result: {result!r}")
