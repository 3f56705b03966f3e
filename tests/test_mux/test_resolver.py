# tests/test_mux/test_resolver.py

import pytest

from app.core.exceptions import SigningNotConfigured
from app.services.playback import (
    Error,
    IdentifierResolver,
    NotFound,
    PlaybackMaterializer,
    PlaybackReady,
    Processing,
)
from app.services.signing import PlaybackSigner
from tests.fixtures.mux import make_asset

pytestmark = pytest.mark.anyio


def _resolver(fake_mux, config) -> IdentifierResolver:
    materializer = PlaybackMaterializer(fake_mux, PlaybackSigner(config), stream_base_url="https://stream.mux.com")
    return IdentifierResolver(fake_mux, materializer)


async def test_ready_asset_with_playback_id_yields_url(fake_mux, unsigned_settings):
    fake_mux.add_asset(make_asset("a1", playback_ids=[("p1", "public")]))

    result = await _resolver(fake_mux, unsigned_settings).resolve("a1")

    assert result == PlaybackReady(url="https://stream.mux.com/p1.m3u8", asset_id="a1", playback_id="p1")
    assert fake_mux.ops("create_playback_id") == []


async def test_upload_with_asset_never_tries_direct_asset_lookup(fake_mux, unsigned_settings):
    fake_mux.add_upload("u1", asset_id="a1")
    fake_mux.add_asset(make_asset("a1", playback_ids=[("p1", "public")]))

    result = await _resolver(fake_mux, unsigned_settings).resolve("u1")

    assert isinstance(result, PlaybackReady)
    assert result.asset_id == "a1"
    # Only the associated asset is fetched, never "u1" as an asset id.
    assert fake_mux.calls == [("retrieve_upload", "u1"), ("retrieve_asset", "a1")]


async def test_upload_without_asset_is_processing(fake_mux, unsigned_settings):
    fake_mux.add_upload("u1")

    result = await _resolver(fake_mux, unsigned_settings).resolve("u1")

    assert result == Processing()
    assert fake_mux.ops("retrieve_asset") == []


async def test_upload_asset_not_visible_yet_is_processing(fake_mux, unsigned_settings):
    fake_mux.add_upload("u1", asset_id="a-late")

    result = await _resolver(fake_mux, unsigned_settings).resolve("u1")

    assert result == Processing()


async def test_unknown_id_falls_through_to_not_found(fake_mux, unsigned_settings):
    result = await _resolver(fake_mux, unsigned_settings).resolve("nope")

    assert result == NotFound()
    assert fake_mux.calls == [("retrieve_upload", "nope"), ("retrieve_asset", "nope")]


async def test_upload_lookup_error_other_than_404_is_surfaced(fake_mux, unsigned_settings):
    fake_mux.fail("retrieve_upload", "x1", 401, "Unauthorized request")

    result = await _resolver(fake_mux, unsigned_settings).resolve("x1")

    assert result == Error(code=401, message="Unauthorized request")
    assert fake_mux.ops("retrieve_asset") == []


async def test_asset_lookup_error_other_than_404_is_surfaced(fake_mux, unsigned_settings):
    fake_mux.fail("retrieve_asset", "a1", 500, "upstream exploded")

    result = await _resolver(fake_mux, unsigned_settings).resolve("a1")

    assert result == Error(code=500, message="upstream exploded")


async def test_missing_playback_id_is_created_once(fake_mux, unsigned_settings):
    fake_mux.add_asset(make_asset("a2", status="ready"))

    result = await _resolver(fake_mux, unsigned_settings).resolve("a2")

    assert isinstance(result, PlaybackReady)
    assert result.playback_id == "pb-a2-1"
    assert result.url == "https://stream.mux.com/pb-a2-1.m3u8"
    assert fake_mux.ops("create_playback_id") == ["a2"]


async def test_preparing_asset_with_failed_creation_is_processing(fake_mux, unsigned_settings):
    asset = fake_mux.add_asset(make_asset("a1", status="preparing"))
    fake_mux.fail("create_playback_id", "a1", 400, "asset not ready")

    result = await _resolver(fake_mux, unsigned_settings).resolve("a1")

    assert result == Processing(asset_id="a1", asset=asset, processing=True)
    assert fake_mux.ops("create_playback_id") == ["a1"]


async def test_ready_asset_with_failed_creation_flags_not_processing(fake_mux, unsigned_settings):
    fake_mux.add_asset(make_asset("a1", status="ready"))
    fake_mux.fail("create_playback_id", "a1", 500, "nope")

    result = await _resolver(fake_mux, unsigned_settings).resolve("a1")

    assert isinstance(result, Processing)
    assert result.processing is False
    assert result.asset_id == "a1"


async def test_resolve_asset_reports_missing_asset_as_not_found(fake_mux, unsigned_settings):
    result = await _resolver(fake_mux, unsigned_settings).resolve_asset("ghost")

    assert result == NotFound()
    assert fake_mux.ops("retrieve_upload") == []


async def test_signed_resolution_without_keys_fails_before_remote_calls(fake_mux, unsigned_settings):
    fake_mux.add_asset(make_asset("a1", playback_ids=[("p1", "signed")]))

    with pytest.raises(SigningNotConfigured):
        await _resolver(fake_mux, unsigned_settings).resolve("a1", signed=True)

    assert fake_mux.calls == []
