# app/services/mux_client.py
from __future__ import annotations

"""
📡 Mux • Video API Client
=========================

Thin async wrapper over the Mux Video REST API used by:
- Identifier resolution (uploads, assets)
- Playback materialization (create playback ids)
- Deletion (playback-id lookup, asset delete)
- Upload targets (direct uploads)

🎯 Goals
--------
- One shared `httpx.AsyncClient` (connection pool) per process
- Explicit timeouts, **no retries** (callers classify every failure at once)
- Every non-2xx answer becomes `MuxAPIError(status_code, message)`;
  transport failures become `MuxAPIError(502, ...)`
- Zero secret leakage in logs

🔗 Contract
-----------
- `retrieve_upload(id)`, `create_upload(...)`, `retrieve_asset(id)`,
  `create_playback_id(asset_id, policy)`, `retrieve_playback_id(id)`,
  `delete_asset(id)`, `put_upload_bytes(url, stream, content_type)`
- `MuxAPIError.is_not_found` distinguishes 404 from everything else.
"""

from typing import Any, AsyncIterable, Dict, Optional
from urllib.parse import quote
import logging

import httpx

from app.core.config import Settings, settings as default_settings
from app.schemas.enums import PlaybackPolicy
from app.schemas.mux import AssetRecord, PlaybackIdLookup, PlaybackRecord, UploadRecord

logger = logging.getLogger(__name__)

_VIDEO = "/video/v1"


def _seg(value: str) -> str:
    """Percent-encode one path segment; `/`, `?` and `#` never leave it."""
    return quote(str(value), safe="")


# ─────────────────────────────────────────────────────────────────────────────
# 🧱 Exceptions
# ─────────────────────────────────────────────────────────────────────────────

class MuxAPIError(RuntimeError):
    """Raised when a Mux call fails. `status_code` is the remote HTTP status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"[{status_code}] {message}")
        self.status_code = int(status_code)
        self.message = message

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


def _error_message(response: httpx.Response) -> str:
    """Extract Mux's `error.messages` (or `error.type`) from an error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase or "Mux request failed"
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict):
        messages = err.get("messages") or []
        if messages:
            return "; ".join(str(m) for m in messages)
        if err.get("type"):
            return str(err["type"])
    return response.reason_phrase or "Mux request failed"


# ─────────────────────────────────────────────────────────────────────────────
# 📦 Client
# ─────────────────────────────────────────────────────────────────────────────

class MuxClient:
    """
    Async Mux Video API client.

    Parameters
    ----------
    config : Settings | None
        Source of credentials, base URL and timeout. Defaults to global settings.
    http : httpx.AsyncClient | None
        Pre-built client (tests pass one with a `MockTransport`). When omitted
        a client is built from `config`, and `aclose()` closes it.
    """

    def __init__(self, config: Optional[Settings] = None, *, http: Optional[httpx.AsyncClient] = None) -> None:
        self._config = config or default_settings
        self._owns_http = http is None
        if http is None:
            creds = self._config.mux_credentials
            if creds is None:
                logger.warning("MUX_TOKEN_ID/MUX_TOKEN_SECRET not set; Mux calls will be rejected")
            http = httpx.AsyncClient(
                base_url=self._config.MUX_API_BASE_URL,
                auth=httpx.BasicAuth(*creds) if creds else None,
                timeout=httpx.Timeout(self._config.MUX_HTTP_TIMEOUT_SECONDS),
                headers={"Accept": "application/json"},
            )
        self._http = http

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # ── Transport ───────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, *, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("Mux %s %s transport error: %s", method, path, e.__class__.__name__)
            raise MuxAPIError(502, f"Mux request failed: {e.__class__.__name__}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.debug("Mux %s %s -> %s %s", method, path, response.status_code, message)
            raise MuxAPIError(response.status_code, message)

        if response.status_code == 204 or not response.content:
            return None
        return response.json().get("data")

    # ── Uploads ─────────────────────────────────────────────────────────────

    async def retrieve_upload(self, upload_id: str) -> UploadRecord:
        data = await self._request("GET", f"{_VIDEO}/uploads/{_seg(upload_id)}")
        return UploadRecord.model_validate(data)

    async def create_upload(
        self,
        *,
        cors_origin: str,
        policy: PlaybackPolicy = PlaybackPolicy.PUBLIC,
    ) -> UploadRecord:
        payload = {
            "cors_origin": cors_origin,
            "new_asset_settings": {"playback_policy": [policy.value]},
        }
        data = await self._request("POST", f"{_VIDEO}/uploads", json=payload)
        return UploadRecord.model_validate(data)

    async def put_upload_bytes(self, url: str, content: AsyncIterable[bytes], *, content_type: str) -> None:
        """Stream a file body to a direct-upload URL (absolute, not on the API host)."""
        try:
            response = await self._http.put(url, content=content, headers={"Content-Type": content_type}, auth=None)
        except httpx.HTTPError as e:
            raise MuxAPIError(502, f"Upload transfer failed: {e.__class__.__name__}") from e
        if response.status_code >= 400:
            raise MuxAPIError(response.status_code, response.text or "Upload transfer failed")

    # ── Assets ──────────────────────────────────────────────────────────────

    async def retrieve_asset(self, asset_id: str) -> AssetRecord:
        data = await self._request("GET", f"{_VIDEO}/assets/{_seg(asset_id)}")
        return AssetRecord.model_validate(data)

    async def delete_asset(self, asset_id: str) -> None:
        await self._request("DELETE", f"{_VIDEO}/assets/{_seg(asset_id)}")

    # ── Playback ids ────────────────────────────────────────────────────────

    async def create_playback_id(self, asset_id: str, policy: PlaybackPolicy) -> PlaybackRecord:
        data = await self._request("POST", f"{_VIDEO}/assets/{_seg(asset_id)}/playback-ids", json={"policy": policy.value})
        return PlaybackRecord.model_validate(data)

    async def retrieve_playback_id(self, playback_id: str) -> PlaybackIdLookup:
        data = await self._request("GET", f"{_VIDEO}/playback-ids/{_seg(playback_id)}")
        return PlaybackIdLookup.model_validate(data)


__all__ = ["MuxAPIError", "MuxClient"]
