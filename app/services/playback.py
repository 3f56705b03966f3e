from __future__ import annotations

"""
🎬 Playback resolution
======================

Turns an opaque identifier into something the player can use.

- `IdentifierResolver` decides whether an id is an upload or an asset
  (upload first, asset second) and hands the asset to the materializer.
- `PlaybackMaterializer` makes sure the asset has a playback id, creating one
  on demand, and builds the public or signed HLS URL.

Every call is an independent chain of Mux requests: no caching, no locks,
no retries. Two concurrent requests may both create a playback id for the
same asset; the first one listed by Mux wins from then on.

Outcomes are a closed set of frozen dataclasses (`ResolutionResult`):
`PlaybackReady`, `Processing`, `NotFound`, `Error`.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Union
import logging

from app.schemas.enums import PlaybackPolicy
from app.schemas.mux import AssetRecord
from app.services.mux_client import MuxAPIError, MuxClient
from app.services.signing import PlaybackSigner

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# 🧾 Outcomes
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PlaybackReady:
    url: str
    asset_id: str
    playback_id: str


@dataclass(frozen=True)
class Processing:
    """Nothing playable yet.

    `processing` is False only for an asset that is `ready` but still has no
    playback id (creation failed), so callers can tell it from "encoding".
    """
    asset_id: Optional[str] = None
    asset: Optional[AssetRecord] = None
    processing: bool = True


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Error:
    code: int
    message: str

    @classmethod
    def from_mux(cls, exc: MuxAPIError) -> "Error":
        return cls(code=exc.status_code, message=exc.message)


ResolutionResult = Union[PlaybackReady, Processing, NotFound, Error]


class _Inconclusive:
    def __repr__(self) -> str:
        return "INCONCLUSIVE"


INCONCLUSIVE = _Inconclusive()

Strategy = Callable[[str, bool], Awaitable[Union[ResolutionResult, _Inconclusive]]]


# ─────────────────────────────────────────────────────────────────────────────
# 🎞️ Playback Materializer
# ─────────────────────────────────────────────────────────────────────────────

class PlaybackMaterializer:
    """Ensure an asset has a playback id and build its HLS URL."""

    def __init__(self, client: MuxClient, signer: PlaybackSigner, *, stream_base_url: str = "https://stream.mux.com") -> None:
        self._client = client
        self._signer = signer
        self._stream_base_url = stream_base_url.rstrip("/")

    def public_url(self, playback_id: str) -> str:
        return f"{self._stream_base_url}/{playback_id}.m3u8"

    def signed_url(self, playback_id: str) -> str:
        token = self._signer.sign(playback_id)
        return f"{self.public_url(playback_id)}?token={token}"

    def ensure_signing_configured(self) -> None:
        self._signer.ensure_configured()

    async def materialize(self, asset: AssetRecord, signed: bool = False) -> ResolutionResult:
        # A signed stream is never served as public.
        if signed:
            self.ensure_signing_configured()
        policy = PlaybackPolicy.SIGNED if signed else PlaybackPolicy.PUBLIC

        playback_id = self._existing_playback_id(asset, policy)
        if playback_id is None:
            playback_id = await self._create_playback_id(asset.id, policy)

        if playback_id is None:
            return Processing(asset_id=asset.id, asset=asset, processing=not asset.is_ready)

        url = self.signed_url(playback_id) if signed else self.public_url(playback_id)
        return PlaybackReady(url=url, asset_id=asset.id, playback_id=playback_id)

    @staticmethod
    def _existing_playback_id(asset: AssetRecord, policy: PlaybackPolicy) -> Optional[str]:
        if policy is PlaybackPolicy.SIGNED:
            for record in asset.playback_ids:
                if record.policy is PlaybackPolicy.SIGNED:
                    return record.id
            return None
        return asset.playback_ids[0].id if asset.playback_ids else None

    async def _create_playback_id(self, asset_id: str, policy: PlaybackPolicy) -> Optional[str]:
        try:
            record = await self._client.create_playback_id(asset_id, policy)
        except MuxAPIError as e:
            logger.warning("Could not create %s playback id for asset %s: %s", policy.value, asset_id, e)
            return None
        logger.info("Created %s playback id %s for asset %s", policy.value, record.id, asset_id)
        return record.id


# ─────────────────────────────────────────────────────────────────────────────
# 🧭 Identifier Resolver
# ─────────────────────────────────────────────────────────────────────────────

class IdentifierResolver:
    """Resolve an id that may denote an upload or an asset.

    Strategies run in order and the first definite outcome wins. A 404 is a
    normal disambiguation step and never surfaces as an `Error`.
    """

    def __init__(self, client: MuxClient, materializer: PlaybackMaterializer) -> None:
        self._client = client
        self._materializer = materializer
        self._strategies: Tuple[Strategy, ...] = (self._from_upload, self._from_asset)

    async def resolve(self, identifier: str, *, signed: bool = False) -> ResolutionResult:
        if signed:
            self._materializer.ensure_signing_configured()
        for strategy in self._strategies:
            outcome = await strategy(identifier, signed)
            if outcome is not INCONCLUSIVE:
                return outcome  # type: ignore[return-value]
        return NotFound()

    async def resolve_asset(self, asset_id: str, *, signed: bool = False) -> ResolutionResult:
        """Materialize a known asset id; a missing asset is `NotFound`."""
        if signed:
            self._materializer.ensure_signing_configured()
        return await self._materialize_asset(asset_id, signed, missing=NotFound())

    # ── Strategies ──────────────────────────────────────────────────────────

    async def _from_upload(self, identifier: str, signed: bool) -> Union[ResolutionResult, _Inconclusive]:
        try:
            upload = await self._client.retrieve_upload(identifier)
        except MuxAPIError as e:
            if e.is_not_found:
                return INCONCLUSIVE
            return Error.from_mux(e)

        if not upload.asset_id:
            logger.debug("Upload %s has no asset yet (status=%s)", upload.id, upload.status)
            return Processing()
        # The upload points at an asset Mux may not list yet.
        return await self._materialize_asset(upload.asset_id, signed, missing=Processing())

    async def _from_asset(self, identifier: str, signed: bool) -> Union[ResolutionResult, _Inconclusive]:
        return await self._materialize_asset(identifier, signed, missing=NotFound())

    async def _materialize_asset(self, asset_id: str, signed: bool, *, missing: ResolutionResult) -> ResolutionResult:
        try:
            asset = await self._client.retrieve_asset(asset_id)
        except MuxAPIError as e:
            if e.is_not_found:
                return missing
            return Error.from_mux(e)
        return await self._materializer.materialize(asset, signed)


__all__ = [
    "PlaybackReady",
    "Processing",
    "NotFound",
    "Error",
    "ResolutionResult",
    "INCONCLUSIVE",
    "PlaybackMaterializer",
    "IdentifierResolver",
]
