"""
Tests for the NetDeploy HTTP client.

The client talks to a small aiohttp stand-in for the API.
"""

import pytest
from aiohttp import web
from aiohttp import test_utils

from netdeploy.client import ClientConfig, NetDeployClient, NetDeployClientError
from netdeploy.config import API_PREFIX

TREE = {
    "macAddress": "AA:AA:AA:AA:AA:AA",
    "deviceType": "GATEWAY",
    "downlinkDevices": [
        {"macAddress": "BB:BB:BB:BB:BB:BB", "deviceType": "SWITCH", "downlinkDevices": []},
    ],
}


def problem(status: int, detail: str) -> web.Response:
    return web.json_response(
        {"type": "about:blank", "status": status, "detail": detail},
        status=status,
        content_type="application/problem+json",
    )


REGISTERED = web.AppKey("registered", list)


def make_stub_api() -> web.Application:
    app = web.Application()
    app[REGISTERED] = []

    async def health(request):
        return web.json_response({"status": "ok"})

    async def register(request):
        body = await request.json()
        if body["macAddress"] in [b["macAddress"] for b in app[REGISTERED]]:
            return problem(400, f"Device with '{body['macAddress']}' MAC address already exists")
        app[REGISTERED].append(body)
        return web.Response(status=204)

    async def list_devices(request):
        return web.json_response([
            {"macAddress": b["macAddress"], "deviceType": b["deviceType"]} for b in app[REGISTERED]
        ])

    async def tree(request):
        return web.json_response(TREE)

    async def subtree(request):
        if request.match_info["mac"] != "BB:BB:BB:BB:BB:BB":
            return problem(404, "Device not found")
        return web.json_response(TREE["downlinkDevices"][0])

    async def get_device(request):
        mac = request.match_info["mac"]
        if mac == "EE:EE:EE:EE:EE:EE":
            return web.Response(status=500, text="boom")
        return web.json_response({"macAddress": mac, "deviceType": "SWITCH"})

    app.router.add_get("/health", health)
    app.router.add_post(f"{API_PREFIX}/devices", register)
    app.router.add_get(f"{API_PREFIX}/devices", list_devices)
    app.router.add_get(f"{API_PREFIX}/devices/tree", tree)
    app.router.add_get(f"{API_PREFIX}/devices/tree/{{mac}}", subtree)
    app.router.add_get(f"{API_PREFIX}/devices/{{mac}}", get_device)
    return app


class TestClientConfig:
    """Tests for ClientConfig."""

    def test_urls(self):
        """URLs are built from host and port."""
        config = ClientConfig(host="example", port=1234)

        assert config.base_url == "http://example:1234"
        assert config.devices_url == "http://example:1234/api/v1/network-deployment/devices"


class TestNetDeployClient:
    """Tests for NetDeployClient against a stub API."""

    @pytest.mark.asyncio
    async def test_register_and_list(self):
        """Registered payloads use the API's field names."""
        app = make_stub_api()
        async with test_utils.TestServer(app) as server:
            async with NetDeployClient(ClientConfig(host=server.host, port=server.port)) as client:
                await client.register_device("GATEWAY", "AA:AA:AA:AA:AA:AA")
                await client.register_device("SWITCH", "BB:BB:BB:BB:BB:BB", "AA:AA:AA:AA:AA:AA")

                devices = await client.list_devices()

        assert app[REGISTERED] == [
            {"deviceType": "GATEWAY", "macAddress": "AA:AA:AA:AA:AA:AA"},
            {"deviceType": "SWITCH", "macAddress": "BB:BB:BB:BB:BB:BB", "uplinkMacAddress": "AA:AA:AA:AA:AA:AA"},
        ]
        assert [d["macAddress"] for d in devices] == ["AA:AA:AA:AA:AA:AA", "BB:BB:BB:BB:BB:BB"]

    @pytest.mark.asyncio
    async def test_empty_uplink_is_sent(self):
        """An empty uplink is passed through for the server to reject, not dropped."""
        app = make_stub_api()
        async with test_utils.TestServer(app) as server:
            async with NetDeployClient(ClientConfig(host=server.host, port=server.port)) as client:
                await client.register_device("SWITCH", "BB:BB:BB:BB:BB:BB", "")

        assert app[REGISTERED] == [
            {"deviceType": "SWITCH", "macAddress": "BB:BB:BB:BB:BB:BB", "uplinkMacAddress": ""},
        ]

    @pytest.mark.asyncio
    async def test_problem_detail_raised(self):
        """Error responses raise with the problem detail."""
        async with test_utils.TestServer(make_stub_api()) as server:
            async with NetDeployClient(ClientConfig(host=server.host, port=server.port)) as client:
                await client.register_device("GATEWAY", "AA:AA:AA:AA:AA:AA")

                with pytest.raises(NetDeployClientError) as exc_info:
                    await client.register_device("GATEWAY", "AA:AA:AA:AA:AA:AA")

        assert exc_info.value.status == 400
        assert exc_info.value.detail == "Device with 'AA:AA:AA:AA:AA:AA' MAC address already exists"

    @pytest.mark.asyncio
    async def test_tree_and_subtree(self):
        """Tree without an address, subtree with one."""
        async with test_utils.TestServer(make_stub_api()) as server:
            async with NetDeployClient(ClientConfig(host=server.host, port=server.port)) as client:
                tree = await client.get_device_tree()
                subtree = await client.get_device_tree("BB:BB:BB:BB:BB:BB")

                with pytest.raises(NetDeployClientError) as exc_info:
                    await client.get_device_tree("CC:CC:CC:CC:CC:CC")

        assert tree == TREE
        assert subtree["macAddress"] == "BB:BB:BB:BB:BB:BB"
        assert exc_info.value.status == 404

    @pytest.mark.asyncio
    async def test_plain_text_error(self):
        """Non-JSON error bodies become the detail."""
        async with test_utils.TestServer(make_stub_api()) as server:
            async with NetDeployClient(ClientConfig(host=server.host, port=server.port)) as client:
                device = await client.get_device("BB:BB:BB:BB:BB:BB")

                with pytest.raises(NetDeployClientError) as exc_info:
                    await client.get_device("EE:EE:EE:EE:EE:EE")

        assert device == {"macAddress": "BB:BB:BB:BB:BB:BB", "deviceType": "SWITCH"}
        assert exc_info.value.status == 500
        assert exc_info.value.detail == "boom"

    @pytest.mark.asyncio
    async def test_health_check(self):
        """Health check is true for a live server."""
        async with test_utils.TestServer(make_stub_api()) as server:
            async with NetDeployClient(ClientConfig(host=server.host, port=server.port)) as client:
                assert await client.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_unreachable(self):
        """Health check is false when nothing listens."""
        async with NetDeployClient(ClientConfig(host="127.0.0.1", port=1, timeout=2.0)) as client:
            assert await client.health_check() is False
