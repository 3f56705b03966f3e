# tests/test_mux/test_mux_client.py

import json

import httpx
import pytest

from app.schemas.enums import AssetStatus, PlaybackPolicy
from app.services.mux_client import MuxAPIError, MuxClient

pytestmark = pytest.mark.anyio


def _client(handler) -> MuxClient:
    http = httpx.AsyncClient(base_url="https://api.mux.com", transport=httpx.MockTransport(handler))
    return MuxClient(http=http)


async def test_retrieve_asset_parses_data_envelope():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        return httpx.Response(
            200,
            json={
                "data": {
                    "id": "a1",
                    "status": "ready",
                    "playback_ids": [{"id": "p1", "policy": "public"}],
                    "tracks": [{"type": "video"}],
                }
            },
        )

    asset = await _client(handler).retrieve_asset("a1")

    assert seen == [("GET", "/video/v1/assets/a1")]
    assert asset.status is AssetStatus.READY
    assert [p.id for p in asset.playback_ids] == ["p1"]


async def test_not_found_is_distinguished():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": {"type": "not_found", "messages": ["Upload not found"]}})

    with pytest.raises(MuxAPIError) as exc:
        await _client(handler).retrieve_upload("u404")

    assert exc.value.is_not_found
    assert exc.value.message == "Upload not found"


async def test_other_errors_keep_status_and_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"type": "invalid_parameters", "messages": ["bad policy", "try again"]}})

    with pytest.raises(MuxAPIError) as exc:
        await _client(handler).create_playback_id("a1", PlaybackPolicy.SIGNED)

    assert exc.value.status_code == 400
    assert not exc.value.is_not_found
    assert exc.value.message == "bad policy; try again"


async def test_create_playback_id_posts_policy():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append((request.url.path, json.loads(request.content)))
        return httpx.Response(201, json={"data": {"id": "p-new", "policy": "signed"}})

    record = await _client(handler).create_playback_id("a1", PlaybackPolicy.SIGNED)

    assert bodies == [("/video/v1/assets/a1/playback-ids", {"policy": "signed"})]
    assert record.id == "p-new"
    assert record.policy is PlaybackPolicy.SIGNED


async def test_delete_returns_none_on_204():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        return httpx.Response(204)

    assert await _client(handler).delete_asset("a1") is None


@pytest.mark.parametrize(
    "asset_id, raw_path",
    [
        ("abc?foo=1", b"/video/v1/assets/abc%3Ffoo%3D1"),
        ("a1/playback-ids/pb1", b"/video/v1/assets/a1%2Fplayback-ids%2Fpb1"),
        ("a1#x", b"/video/v1/assets/a1%23x"),
    ],
)
async def test_ids_are_escaped_as_single_path_segment(asset_id, raw_path):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.raw_path, request.url.query))
        return httpx.Response(204)

    await _client(handler).delete_asset(asset_id)

    assert seen == [(raw_path, b"")]


async def test_playback_lookup_escapes_id():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path)
        return httpx.Response(404, json={"error": {"messages": ["Playback ID not found"]}})

    with pytest.raises(MuxAPIError):
        await _client(handler).retrieve_playback_id("pb1/../assets")

    assert seen == [b"/video/v1/playback-ids/pb1%2F..%2Fassets"]


async def test_playback_lookup_exposes_owner():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"data": {"id": "pb1", "policy": "public", "object": {"type": "asset", "id": "a9"}}},
        )

    lookup = await _client(handler).retrieve_playback_id("pb1")

    assert lookup.object.type == "asset"
    assert lookup.object.id == "a9"


async def test_create_upload_sends_new_asset_settings():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            201,
            json={"data": {"id": "up1", "status": "waiting", "url": "https://storage.example/up1", "timeout": 3600}},
        )

    upload = await _client(handler).create_upload(cors_origin="http://localhost:5173")

    assert bodies == [
        {"cors_origin": "http://localhost:5173", "new_asset_settings": {"playback_policy": ["public"]}}
    ]
    assert upload.url == "https://storage.example/up1"
    assert upload.asset_id is None


async def test_transport_failure_maps_to_502():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(MuxAPIError) as exc:
        await _client(handler).retrieve_asset("a1")

    assert exc.value.status_code == 502


async def test_upload_bytes_go_to_absolute_url_without_api_auth():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, str(request.url), request.headers.get("authorization"), request.content))
        return httpx.Response(200)

    http = httpx.AsyncClient(
        base_url="https://api.mux.com",
        auth=httpx.BasicAuth("id", "secret"),
        transport=httpx.MockTransport(handler),
    )

    async def body():
        yield b"abc"
        yield b"def"

    await MuxClient(http=http).put_upload_bytes("https://storage.example/up1", body(), content_type="video/mp4")

    assert seen == [("PUT", "https://storage.example/up1", None, b"abcdef")]
