"""TopologyApi over a mocked transport."""
from __future__ import annotations

import json

import httpx
import pytest

from topomap.canvas.api import ApiError, TopologyApi

BASE = "http://api.test/api"


def _api(handler) -> TopologyApi:
    return TopologyApi(base_url=BASE + "/", client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_fetch_topology_parses_wire_format():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert str(request.url) == f"{BASE}/topology"
        return httpx.Response(200, json={
            "nodes": [{"id": "n1", "type": "device", "position": {"x": 1, "y": 2},
                       "data": {"name": "SW1", "type": "switch", "status": "up"}}],
            "edges": [{"id": "e1", "source": "n1", "target": "n1", "data": {"status": "warn"}}],
        })

    api = _api(handler)
    topo = await api.fetch_topology()
    await api.aclose()

    assert topo.nodes[0].data.name == "SW1"
    assert topo.nodes[0].position.x == 1.0
    assert topo.edges[0].data.status == "warn"
    assert topo.edges[0].sourceHandle is None


@pytest.mark.asyncio
async def test_create_device_omits_unset_fields():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "n1"})

    api = _api(handler)
    result = await api.create_device("SW1", "switch", x=10.0, y=20.0)

    assert result == {"id": "n1"}
    assert seen == {"method": "POST", "path": "/api/devices",
                    "body": {"name": "SW1", "type": "switch", "x": 10.0, "y": 20.0}}


@pytest.mark.asyncio
async def test_create_link_uses_camel_case():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={})

    await _api(handler).create_link("a", "b", status="up", to_handle="t-top")

    assert seen["body"] == {"fromId": "a", "toId": "b", "status": "up", "toHandle": "t-top"}


@pytest.mark.asyncio
async def test_patch_calls():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={})

    api = _api(handler)
    await api.patch_device_position("d1", 1.5, 2.5)
    await api.patch_device_status("d1", "down")
    await api.patch_link_status("l1", "warn")

    assert calls == [
        ("PATCH", "/api/devices/d1/position", {"x": 1.5, "y": 2.5}),
        ("PATCH", "/api/devices/d1", {"status": "down"}),
        ("PATCH", "/api/links/l1", {"status": "warn"}),
    ]


@pytest.mark.asyncio
async def test_delete_returns_none_on_204():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        return httpx.Response(204)

    api = _api(handler)
    assert await api.delete_device("d1") is None
    assert await api.delete_link("l1") is None


@pytest.mark.asyncio
async def test_error_body_becomes_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, text='{"message":"Link already exists"}')

    with pytest.raises(ApiError) as exc:
        await _api(handler).create_link("a", "b")

    assert exc.value.status_code == 409
    assert "Link already exists" in exc.value.message


@pytest.mark.asyncio
async def test_empty_error_body_falls_back_to_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(ApiError) as exc:
        await _api(handler).fetch_topology()

    assert exc.value.message == "HTTP 500"


@pytest.mark.asyncio
async def test_transport_failure_is_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ApiError) as exc:
        await _api(handler).fetch_topology()

    assert "connection refused" in exc.value.message
    assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_unexpected_topology_shape_is_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"nodes": [{"id": 1}]})

    with pytest.raises(ApiError):
        await _api(handler).fetch_topology()
