"""
🎬 Playback routes
==================

Read paths used by the frontend player.

Routes
------
- GET /api/mux-playback/{id}                        → resolve an upload *or* asset id
- GET /api/mux-playback-by-asset/{asset_id}         → materialize a known asset
- GET /api/mux-signed-playback-by-asset/{asset_id}  → same, signed policy
- GET /api/mux-signed-playback/{playback_id}        → signed URL for a known playback id

An id Mux does not know (yet) answers 200 `{processing: true}`, never 404:
a just-finished upload can take a moment to appear on either lookup.
"""

from fastapi import APIRouter, Depends, Path

from app.api.http_utils import json_no_store, present_resolution
from app.core.dependencies import get_materializer, get_resolver
from app.schemas.mux import PlaybackOut
from app.services.playback import IdentifierResolver, PlaybackMaterializer

router = APIRouter(tags=["playback"])


@router.get("/mux-playback/{identifier}", summary="Resolve an upload or asset id to a playback URL")
async def get_playback(
    identifier: str = Path(..., min_length=1, max_length=255),
    resolver: IdentifierResolver = Depends(get_resolver),
):
    result = await resolver.resolve(identifier)
    return present_resolution(result)


@router.get("/mux-playback-by-asset/{asset_id}", summary="Playback URL for a known asset id")
async def get_playback_by_asset(
    asset_id: str = Path(..., min_length=1, max_length=255),
    resolver: IdentifierResolver = Depends(get_resolver),
):
    result = await resolver.resolve_asset(asset_id)
    return present_resolution(result, include_asset_id=False)


@router.get("/mux-signed-playback-by-asset/{asset_id}", summary="Signed playback URL for a known asset id")
async def get_signed_playback_by_asset(
    asset_id: str = Path(..., min_length=1, max_length=255),
    resolver: IdentifierResolver = Depends(get_resolver),
):
    result = await resolver.resolve_asset(asset_id, signed=True)
    return present_resolution(result, include_asset_id=False)


@router.get("/mux-signed-playback/{playback_id}", summary="Signed playback URL for a known playback id")
async def get_signed_playback(
    playback_id: str = Path(..., min_length=1, max_length=255),
    materializer: PlaybackMaterializer = Depends(get_materializer),
):
    url = materializer.signed_url(playback_id)
    return json_no_store(PlaybackOut(playback_url=url))
