from __future__ import annotations

"""
Mux • Records & API Schemas
===========================

Purpose
-------
- Parse the `data` objects returned by the Mux Video API into typed records.
- Describe the JSON bodies served to the frontend (camelCase keys).

Design
------
- Records ignore unknown fields: Mux adds attributes over time and we only
  read a handful of them.
- Records are read-only snapshots for one request; nothing is persisted.
- Outbound models use a camelCase alias generator and are dumped with
  `by_alias=True, exclude_none=True` so optional keys only appear when set.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.enums import AssetStatus, PlaybackPolicy


# === Platform records ======================================================

class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class PlaybackRecord(_Record):
    id: str
    policy: PlaybackPolicy = PlaybackPolicy.PUBLIC


class AssetRecord(_Record):
    """A video after ingestion. `playback_ids` keeps Mux's order (first-created first)."""
    id: str
    status: AssetStatus
    playback_ids: List[PlaybackRecord] = Field(default_factory=list)
    duration: Optional[float] = None
    aspect_ratio: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status is AssetStatus.READY


class UploadRecord(_Record):
    """A direct upload target. `asset_id` stays None until Mux has ingested the bytes."""
    id: str
    status: Optional[str] = None
    asset_id: Optional[str] = None
    url: Optional[str] = None
    timeout: Optional[int] = None
    cors_origin: Optional[str] = None
    new_asset_settings: Optional[Dict[str, Any]] = None
    error: Optional[Dict[str, Any]] = None


class PlaybackOwner(_Record):
    type: str
    id: str


class PlaybackIdLookup(_Record):
    """Result of looking up a playback id: which object it belongs to."""
    id: str
    policy: PlaybackPolicy = PlaybackPolicy.PUBLIC
    object: PlaybackOwner


# === Inbound bodies ========================================================

class _CamelIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class UploadCreateIn(_CamelIn):
    cors_origin: Optional[str] = None
    signed: bool = False


class DeleteAssetIn(_CamelIn):
    """Flexible delete: any one of the identifiers is enough."""
    asset_id: Optional[str] = None
    playback_id: Optional[str] = None
    playback_url: Optional[str] = None
    password: Optional[str] = None


# === Outbound bodies =======================================================

class _CamelOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def dump(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UploadOut(_CamelOut):
    upload_url: str
    upload_id: str


class FileUploadOut(_CamelOut):
    upload_id: str
    filename: str


class PlaybackOut(_CamelOut):
    playback_url: str
    playback_id: Optional[str] = None
    asset_id: Optional[str] = None


class ProcessingOut(_CamelOut):
    processing: bool = True
    asset_id: Optional[str] = None
    asset: Optional[dict] = None


class DeleteOut(_CamelOut):
    ok: bool = True
    asset_id: Optional[str] = None
    already_deleted: Optional[bool] = None


__all__ = [
    "PlaybackRecord",
    "AssetRecord",
    "UploadRecord",
    "PlaybackOwner",
    "PlaybackIdLookup",
    "UploadCreateIn",
    "DeleteAssetIn",
    "UploadOut",
    "FileUploadOut",
    "PlaybackOut",
    "ProcessingOut",
    "DeleteOut",
]
