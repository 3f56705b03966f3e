"""
⬆️ Upload routes
================

- POST /api/mux-upload                  → create a direct-upload target (browser PUTs the bytes)
- POST /api/mux-upload/file             → receive a `video` file and forward it to a fresh target
- GET  /api/mux-upload-status/{id}      → upload record as Mux reports it, including `error` (debug aid);
                                          unset fields omitted; 404 → `{processing: true}`
"""

from typing import AsyncIterator, Optional

from fastapi import APIRouter, Body, Depends, File, Path, UploadFile
from loguru import logger

from app.api.http_utils import json_no_store
from app.core.config import settings
from app.core.dependencies import get_mux_client, get_signer
from app.core.exceptions import ClientInputError, RemotePlatformError
from app.schemas.enums import PlaybackPolicy
from app.schemas.mux import FileUploadOut, ProcessingOut, UploadCreateIn, UploadOut
from app.services.mux_client import MuxAPIError, MuxClient
from app.services.signing import PlaybackSigner

router = APIRouter(tags=["uploads"])

_CHUNK_SIZE = 1024 * 1024


async def _new_upload(client: MuxClient, signer: PlaybackSigner, *, cors_origin: Optional[str], signed: bool):
    if signed:
        signer.ensure_configured()
    policy = PlaybackPolicy.SIGNED if signed else PlaybackPolicy(settings.MUX_DEFAULT_POLICY)
    try:
        return await client.create_upload(cors_origin=cors_origin or settings.MUX_UPLOAD_CORS_ORIGIN, policy=policy)
    except MuxAPIError as e:
        raise RemotePlatformError.from_mux(e) from e


@router.post("/mux-upload", summary="Create a direct-upload target")
async def create_upload(
    body: Optional[UploadCreateIn] = Body(default=None),
    client: MuxClient = Depends(get_mux_client),
    signer: PlaybackSigner = Depends(get_signer),
):
    body = body or UploadCreateIn()
    upload = await _new_upload(client, signer, cors_origin=body.cors_origin, signed=body.signed)
    if not upload.url:
        raise RemotePlatformError("Mux did not return an upload URL", status_code=502)
    logger.info("Created upload {}", upload.id)
    return json_no_store(UploadOut(upload_url=upload.url, upload_id=upload.id))


@router.post("/mux-upload/file", summary="Upload a video file through the server")
async def upload_file(
    video: Optional[UploadFile] = File(default=None),
    client: MuxClient = Depends(get_mux_client),
    signer: PlaybackSigner = Depends(get_signer),
):
    if video is None or not video.filename:
        raise ClientInputError("No video file uploaded")
    logger.info("Received video file {}", video.filename)

    upload = await _new_upload(client, signer, cors_origin=None, signed=False)
    if not upload.url:
        raise RemotePlatformError("Mux did not return an upload URL", status_code=502)

    async def _chunks() -> AsyncIterator[bytes]:
        while True:
            chunk = await video.read(_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk

    try:
        await client.put_upload_bytes(upload.url, _chunks(), content_type=video.content_type or "application/octet-stream")
    except MuxAPIError as e:
        raise RemotePlatformError.from_mux(e) from e
    finally:
        await video.close()
    return json_no_store(FileUploadOut(upload_id=upload.id, filename=video.filename))


@router.get("/mux-upload-status/{upload_id}", summary="Raw upload status")
async def get_upload_status(
    upload_id: str = Path(..., min_length=1, max_length=255),
    client: MuxClient = Depends(get_mux_client),
):
    try:
        upload = await client.retrieve_upload(upload_id)
    except MuxAPIError as e:
        if e.is_not_found:
            return json_no_store(ProcessingOut())
        raise RemotePlatformError.from_mux(e) from e
    return json_no_store(upload.model_dump(mode="json", exclude_none=True))
