"""
Unit tests for the TCP client API endpoints.

Runs the FastAPI app over httpx with the test session manager injected.
"""
import asyncio
from unittest.mock import AsyncMock

import pytest

from app.api.v1.tcp import run_with_timeout
from tcp_client.connection import SessionState
from tcp_client.exceptions import OperationTimeout


class TestConnectEndpoint:
    """Test POST /api/tcp/connect."""

    @pytest.mark.asyncio
    async def test_connect(self, api_client, echo_server):
        response = await api_client.post(
            "/api/tcp/connect",
            json={"ipAddress": "127.0.0.1", "port": echo_server.port},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}

    @pytest.mark.asyncio
    async def test_connect_missing_fields(self, api_client):
        response = await api_client.post("/api/tcp/connect", json={"ipAddress": "127.0.0.1"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_connect_invalid_host(self, api_client):
        response = await api_client.post(
            "/api/tcp/connect",
            json={"ipAddress": "300.1.1.1", "port": 5000},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "INVALID_ENDPOINT"

    @pytest.mark.asyncio
    async def test_connect_refused(self, api_client, closed_port):
        response = await api_client.post(
            "/api/tcp/connect",
            json={"ipAddress": "127.0.0.1", "port": closed_port},
        )

        assert response.status_code == 502
        assert response.json()["error"] == "CONNECT_FAILED"


class TestSendEndpoint:
    """Test POST /api/tcp/send."""

    @pytest.mark.asyncio
    async def test_send_single(self, api_client, manager, echo_server):
        await manager.connect("127.0.0.1", echo_server.port)

        response = await api_client.post("/api/tcp/send", json={"hexCode": "A0 01 01 A2"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "response": "A0 01 01 A2"}

    @pytest.mark.asyncio
    async def test_send_repeat(self, api_client, manager, echo_server):
        await manager.connect("127.0.0.1", echo_server.port)

        response = await api_client.post(
            "/api/tcp/send",
            json={"hexCode": "A0 01 01 A2", "repeatCount": 2},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "responses": ["A0 01 01 A2", "A0 01 01 A2"],
            "successCount": 2,
            "totalCount": 2,
        }

    @pytest.mark.asyncio
    async def test_send_not_connected(self, api_client):
        response = await api_client.post("/api/tcp/send", json={"hexCode": "A0"})

        assert response.status_code == 409
        assert response.json()["error"] == "NOT_CONNECTED"

    @pytest.mark.asyncio
    async def test_send_invalid_hex(self, api_client, manager, echo_server):
        await manager.connect("127.0.0.1", echo_server.port)

        response = await api_client.post("/api/tcp/send", json={"hexCode": "ZZ"})

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_HEX"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("repeat_count", [0, 101])
    async def test_send_repeat_bounds(self, api_client, repeat_count):
        response = await api_client.post(
            "/api/tcp/send",
            json={"hexCode": "A0", "repeatCount": repeat_count},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_send_requires_hex(self, api_client):
        response = await api_client.post("/api/tcp/send", json={"hexCode": ""})
        assert response.status_code == 422


class TestDisconnectEndpoint:
    """Test POST /api/tcp/disconnect."""

    @pytest.mark.asyncio
    async def test_disconnect_twice(self, api_client, manager, echo_server):
        await manager.connect("127.0.0.1", echo_server.port)

        first = await api_client.post("/api/tcp/disconnect")
        second = await api_client.post("/api/tcp/disconnect")

        assert first.json() == {"success": True}
        assert second.json() == {"success": True}


class TestStatusEndpoint:
    """Test GET /api/tcp/status."""

    @pytest.mark.asyncio
    async def test_status_disconnected(self, api_client):
        response = await api_client.get("/api/tcp/status")

        assert response.status_code == 200
        body = response.json()
        assert body["connected"] is False
        assert "connectionInfo" not in body
        assert "lastUpdated" in body
        assert body["log"][0]["type"] == "info"
        assert body["log"][0]["message"] == "TCP client initialized"

    @pytest.mark.asyncio
    async def test_status_connected(self, api_client, manager, echo_server):
        await manager.connect("127.0.0.1", echo_server.port)

        body = (await api_client.get("/api/tcp/status")).json()

        assert body["connected"] is True
        assert body["connectionInfo"] == f"127.0.0.1:{echo_server.port}"
        assert body["serverInfo"] == f"Connected to TCP server at 127.0.0.1:{echo_server.port}"
        assert "lastActivity" in body

    @pytest.mark.asyncio
    async def test_status_log_capped(self, api_client, manager):
        for i in range(80):
            manager.session.log.info(f"entry {i}")

        body = (await api_client.get("/api/tcp/status")).json()

        assert len(body["log"]) == 50
        assert body["log"][-1]["message"] == "entry 79"


class TestMiscEndpoints:
    """Test presets and health."""

    @pytest.mark.asyncio
    async def test_presets(self, api_client):
        response = await api_client.get("/api/tcp/presets")

        assert response.status_code == 200
        presets = response.json()
        assert presets[0] == {"label": "Relay1 ON", "code": "A0 01 01 A2", "group": "relay"}
        assert len(presets) == 10

    @pytest.mark.asyncio
    async def test_health(self, api_client):
        response = await api_client.get("/health")

        assert response.status_code == 200
        assert response.json()["connected"] is False


class TestRunWithTimeout:
    """Test the caller-side timeout wrapper."""

    @pytest.mark.asyncio
    async def test_returns_result(self):
        assert await run_with_timeout("Op", AsyncMock(return_value=5)(), 1.0) == 5

    @pytest.mark.asyncio
    async def test_timeout_leaves_operation_running(self):
        """Test the operation still completes after the caller gives up."""
        finished = asyncio.Event()

        async def slow():
            await asyncio.sleep(0.2)
            finished.set()
            return True

        with pytest.raises(OperationTimeout) as exc_info:
            await run_with_timeout("Connect", slow(), 0.05)

        assert exc_info.value.code == "OPERATION_TIMEOUT"
        await asyncio.wait_for(finished.wait(), timeout=1.0)

    @pytest.mark.asyncio
    async def test_late_connect_still_lands(self, manager, echo_server, monkeypatch):
        """Test a connect that outlives its caller still ends connected."""
        open_connection = asyncio.open_connection

        async def slow_open(host, port):
            await asyncio.sleep(0.2)
            return await open_connection(host, port)

        monkeypatch.setattr(asyncio, "open_connection", slow_open)

        with pytest.raises(OperationTimeout):
            await run_with_timeout(
                "Connect",
                manager.connect("127.0.0.1", echo_server.port),
                0.05,
            )

        assert manager.session.state == SessionState.CONNECTING

        for _ in range(100):
            if manager.session.state == SessionState.CONNECTED:
                break
            await asyncio.sleep(0.01)

        assert manager.session.state == SessionState.CONNECTED
        assert manager.get_status().connected is True
