from __future__ import annotations

"""
Service providers for route handlers.

The Mux client (and its connection pool) lives on `app.state.mux_client` and
is created/closed by the lifespan in `app.main`. Everything built on top of
it is cheap and stateless, so a fresh instance per request is fine. Tests
override `get_mux_client` (or any provider) via `app.dependency_overrides`.
"""

from fastapi import Depends, Request

from app.core.config import settings
from app.services.deletion import DeletionReconciler
from app.services.mux_client import MuxClient
from app.services.playback import IdentifierResolver, PlaybackMaterializer
from app.services.signing import PlaybackSigner


def get_mux_client(request: Request) -> MuxClient:
    client = getattr(request.app.state, "mux_client", None)
    if client is None:
        # App built without the lifespan (scripts, ad-hoc mounts).
        client = MuxClient(settings)
        request.app.state.mux_client = client
    return client


def get_signer() -> PlaybackSigner:
    return PlaybackSigner(settings)


def get_materializer(
    client: MuxClient = Depends(get_mux_client),
    signer: PlaybackSigner = Depends(get_signer),
) -> PlaybackMaterializer:
    return PlaybackMaterializer(client, signer, stream_base_url=settings.MUX_STREAM_BASE_URL)


def get_resolver(
    client: MuxClient = Depends(get_mux_client),
    materializer: PlaybackMaterializer = Depends(get_materializer),
) -> IdentifierResolver:
    return IdentifierResolver(client, materializer)


def get_reconciler(client: MuxClient = Depends(get_mux_client)) -> DeletionReconciler:
    return DeletionReconciler(client)


__all__ = [
    "get_mux_client",
    "get_signer",
    "get_materializer",
    "get_resolver",
    "get_reconciler",
]
