from __future__ import annotations

"""
🗑️ Deletion reconciliation
==========================

Deletes a Mux asset given whatever the caller still holds: the asset id, a
playback id, or a full playback URL.

Normalization order: asset id → playback id (owner lookup) → playback URL
(extract the playback id, then owner lookup). Nothing usable → 400.

Deleting is idempotent: a 404 from Mux on the delete call, or on the owner
lookup of a playback id, is reported as success with `already_deleted=True`.
In the second case the asset id is no longer knowable and stays None.
Every other failure keeps Mux's status code and message.
"""

from dataclasses import dataclass
from typing import Optional
import logging
import re

from app.core.exceptions import ClientInputError, MissingIdentifiers, RemotePlatformError
from app.services.mux_client import MuxAPIError, MuxClient

logger = logging.getLogger(__name__)

# stream.mux.com/<id> ends at ".m3u8", "?" or end of string
_PLAYBACK_URL_RE = re.compile(r"stream\.mux\.com/([A-Za-z0-9_-]+)(?:\.m3u8|[?#]|/|$)")


def extract_playback_id(playback_url: str) -> Optional[str]:
    """Return the playback id embedded in a stream URL, or None."""
    match = _PLAYBACK_URL_RE.search((playback_url or "").strip())
    return match.group(1) if match else None


@dataclass(frozen=True)
class DeletionOutcome:
    asset_id: Optional[str]
    already_deleted: bool = False
    ok: bool = True


class DeletionReconciler:
    def __init__(self, client: MuxClient) -> None:
        self._client = client

    async def delete_by_any_identifier(
        self,
        *,
        asset_id: Optional[str] = None,
        playback_id: Optional[str] = None,
        playback_url: Optional[str] = None,
    ) -> DeletionOutcome:
        resolved = await self._normalize(asset_id=asset_id, playback_id=playback_id, playback_url=playback_url)
        if resolved is None:
            return DeletionOutcome(asset_id=None, already_deleted=True)
        return await self.delete_asset(resolved)

    async def delete_asset(self, asset_id: str) -> DeletionOutcome:
        try:
            await self._client.delete_asset(asset_id)
        except MuxAPIError as e:
            if e.is_not_found:
                logger.info("Asset %s already deleted", asset_id)
                return DeletionOutcome(asset_id=asset_id, already_deleted=True)
            raise RemotePlatformError.from_mux(e) from e
        logger.info("Deleted asset %s", asset_id)
        return DeletionOutcome(asset_id=asset_id)

    async def _normalize(
        self,
        *,
        asset_id: Optional[str],
        playback_id: Optional[str],
        playback_url: Optional[str],
    ) -> Optional[str]:
        if asset_id:
            return asset_id
        if not playback_id and playback_url:
            playback_id = extract_playback_id(playback_url)
            if playback_id is None:
                logger.info("Unrecognized playback URL: %r", playback_url)
        if not playback_id:
            raise MissingIdentifiers()
        return await self._owner_of(playback_id)

    async def _owner_of(self, playback_id: str) -> Optional[str]:
        try:
            lookup = await self._client.retrieve_playback_id(playback_id)
        except MuxAPIError as e:
            if e.is_not_found:
                # Mux drops playback ids together with their asset.
                logger.info("Playback id %s unknown; treating its asset as already deleted", playback_id)
                return None
            raise RemotePlatformError.from_mux(e) from e
        if lookup.object.type != "asset":
            raise ClientInputError(f"Playback id {playback_id} does not belong to an asset")
        return lookup.object.id


__all__ = ["DeletionOutcome", "DeletionReconciler", "extract_playback_id"]
