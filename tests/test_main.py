"""Route tests for the FastAPI application."""

import pytest
from fastapi.testclient import TestClient

from plugin_gateway.backends import BackendState, InMemoryTransport
from plugin_gateway.config import Settings
from plugin_gateway.gateway import Gateway
from plugin_gateway.main import app, build_gateway, connect_configured_backends
from plugin_gateway.backends.config import BackendRegistryConfig

from conftest import ESSENTIAL_NAMES, TransportRegistry, memory_config


@pytest.fixture
def client(gateway):
    # Lifespan is not run: the gateway is injected directly
    app.state.gateway = gateway
    yield TestClient(app)
    del app.state.gateway


@pytest.fixture
def connected_client(gateway, client):
    client.post("/gateway/backends", json={"config": {"backend_id": "fs", "transport": "memory"}})
    client.post("/gateway/backends", json={"config": {"backend_id": "code", "transport": "memory"}})
    return client


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_openapi_schema_generated(client):
    response = client.get("/openapi.json")

    assert response.status_code == 200
    assert "/mcp" in response.json()["paths"]


class TestGatewayRoutes:
    """Tests for /gateway endpoints."""

    def test_connect_and_list_backends(self, connected_client):
        response = connected_client.get("/gateway/backends")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert {b["state"] for b in data["backends"]} == {"connected"}

    def test_connect_twice_is_conflict(self, connected_client):
        response = connected_client.post(
            "/gateway/backends",
            json={"config": {"backend_id": "fs", "transport": "memory"}},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "ALREADY_CONNECTED"

    def test_connect_failure_is_bad_gateway(self, gateway, transports, client):
        transports.add(InMemoryTransport("broken", fail_on_start=True))

        response = client.post(
            "/gateway/backends",
            json={"config": {"backend_id": "broken", "transport": "memory"}},
        )

        assert response.status_code == 502
        assert response.json()["error"] == "CONNECTION_FAILED"

    def test_malformed_tools_are_bad_gateway(self, transports, client):
        transports.add(InMemoryTransport("odd", tools=[{"name": "odd_tool", "_meta": {"keywords": 5}}]))

        response = client.post("/gateway/backends", json={"config": {"backend_id": "odd", "transport": "memory"}})

        assert response.status_code == 502
        assert response.json()["error"] == "CONNECTION_FAILED"

    def test_list_operations(self, connected_client):
        response = connected_client.get("/gateway/operations", params={"query": "search", "limit": 5})

        assert response.status_code == 200
        data = response.json()
        assert [op["name"] for op in data["matched"]] == ["grep_code"]
        assert len(data["essential"]) == 4
        assert data["total_available"] == 5
        assert data["strategy"]["layer"] == 2
        assert "backend_id" not in data["matched"][0]

    def test_invoke(self, connected_client):
        response = connected_client.post("/gateway/invoke", json={"name": "read_file", "arguments": {"path": "a"}})

        assert response.status_code == 200
        assert response.json()["content"][0]["text"] == "contents of a"

    def test_invoke_tool_error_is_result(self, connected_client):
        response = connected_client.post("/gateway/invoke", json={"name": "search_files"})

        assert response.status_code == 200
        assert response.json()["isError"] is True

    def test_invoke_unknown(self, connected_client):
        response = connected_client.post("/gateway/invoke", json={"name": "nope"})

        assert response.status_code == 404
        assert response.json()["error"] == "OPERATION_NOT_FOUND"

    def test_disconnect(self, connected_client):
        response = connected_client.delete("/gateway/backends/code")
        assert response.status_code == 204

        response = connected_client.delete("/gateway/backends/code")
        assert response.status_code == 204

        response = connected_client.post("/gateway/invoke", json={"name": "grep_code"})
        assert response.status_code == 404

    def test_usage_and_stats(self, connected_client):
        connected_client.post("/gateway/invoke", json={"name": "read_file", "arguments": {"path": "a"}})

        usage = connected_client.get("/gateway/usage").json()
        assert usage == [{"name": "read_file", "backend_id": "fs", "usage_count": 1}]

        stats = connected_client.get("/gateway/stats").json()
        assert stats["catalog"]["total_invocations"] == 1

        assert connected_client.delete("/gateway/usage").status_code == 204
        assert connected_client.get("/gateway/usage").json() == []

    def test_essential_routes(self, connected_client):
        connected_client.post("/gateway/essential/grep_code")
        data = connected_client.get("/gateway/operations").json()
        assert "grep_code" in [op["name"] for op in data["essential"]]

        connected_client.delete("/gateway/essential/grep_code")
        data = connected_client.get("/gateway/operations").json()
        assert "grep_code" not in [op["name"] for op in data["essential"]]


class TestSessionRoutes:
    """Tests for /sessions endpoints."""

    def test_session_crud(self, client):
        response = client.post("/sessions", json={"session_id": "abc"})
        assert response.status_code == 201
        assert response.json()["session_id"] == "abc"

        assert client.post("/sessions", json={"session_id": "abc"}).status_code == 409
        assert client.get("/sessions").json()["count"] == 1
        assert client.get("/sessions/abc").status_code == 200
        assert client.get("/sessions/current").json()["session_id"] == "abc"

        assert client.delete("/sessions/abc").status_code == 204
        response = client.get("/sessions/abc")
        assert response.status_code == 404
        assert response.json()["error"] == "SESSION_NOT_FOUND"

    def test_generated_id(self, client):
        response = client.post("/sessions")

        assert response.status_code == 201
        assert response.json()["session_id"].startswith("session_")

    def test_metadata_and_backends(self, client):
        client.post("/sessions", json={"session_id": "abc"})

        response = client.put("/sessions/abc/metadata/mode", json={"value": "tdd"})
        assert response.json()["metadata"] == {"mode": "tdd"}
        assert client.get("/sessions/abc/metadata/mode").json() == {"key": "mode", "value": "tdd"}

        response = client.post("/sessions/abc/backends/fs")
        assert response.json()["backends"] == ["fs"]
        response = client.delete("/sessions/abc/backends/fs")
        assert response.json()["backends"] == []

    def test_sweep(self, client):
        client.post("/sessions", json={"session_id": "abc"})

        response = client.post("/sessions/sweep", json={"max_age_seconds": 0})

        assert response.json() == {"removed": 1, "remaining": 0}


class TestMCPEndpoint:
    """Tests for the JSON-RPC endpoint."""

    def test_initialize(self, client):
        response = client.post("/mcp", json={
            "jsonrpc": "2.0",
            "id": 1,
            "method": "initialize",
            "params": {"protocolVersion": "2024-11-05", "capabilities": {}, "clientInfo": {"name": "t"}},
        })

        result = response.json()["result"]
        assert result["protocolVersion"] == "2024-11-05"
        assert "tools" in result["capabilities"]

    def test_initialized_notification(self, client):
        response = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})

        assert response.status_code == 202

    def test_tools_list(self, connected_client):
        response = connected_client.post("/mcp", json={
            "jsonrpc": "2.0",
            "id": "a",
            "method": "tools/list",
            "params": {"query": "search", "limit": 5},
        })

        result = response.json()["result"]
        assert [t["name"] for t in result["tools"]] == [
            "read_file", "write_file", "search_files", "list_directory", "grep_code",
        ]
        assert result["_meta"]["totalAvailable"] == 5
        assert result["_meta"]["matched"] == ["grep_code"]

    def test_tools_call(self, connected_client):
        response = connected_client.post("/mcp", json={
            "jsonrpc": "2.0",
            "id": 7,
            "method": "tools/call",
            "params": {"name": "read_file", "arguments": {"path": "x"}},
        })

        data = response.json()
        assert data["id"] == 7
        assert data["result"]["content"][0]["text"] == "contents of x"

    def test_tools_call_unknown_operation(self, connected_client):
        response = connected_client.post("/mcp", json={
            "jsonrpc": "2.0",
            "id": 8,
            "method": "tools/call",
            "params": {"name": "nope"},
        })

        assert response.json()["error"]["code"] == -32001

    def test_tools_call_invalid_params(self, client):
        response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 9, "method": "tools/call", "params": {}})

        assert response.json()["error"]["code"] == -32602

    def test_unknown_method(self, client):
        response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 2, "method": "resources/list"})

        assert response.json()["error"]["code"] == -32601

    def test_parse_error(self, client):
        response = client.post("/mcp", content=b"{not json", headers={"Content-Type": "application/json"})

        assert response.json()["error"]["code"] == -32700


class TestStartup:
    """Tests for the lifespan helpers."""

    def test_build_gateway_from_settings(self):
        settings = Settings(ESSENTIAL_TOOLS="a,b", DEFAULT_LIST_LIMIT=7, SCORE_USAGE_WEIGHT=2.0)

        gateway = build_gateway(settings)

        assert gateway.essential_names == ["a", "b"]
        assert gateway.default_list_limit == 7
        assert gateway.exposure.weights.usage == 2.0

    def test_registry_essentials_win(self):
        registry = BackendRegistryConfig(essential_tools=["x"])

        gateway = build_gateway(Settings(), registry)

        assert gateway.essential_names == ["x"]

    @pytest.mark.asyncio
    async def test_connect_configured_backends_tolerates_failures(self, fs_transport):
        transports = TransportRegistry(fs_transport, InMemoryTransport("broken", fail_on_start=True))
        gateway = Gateway(transport_factory=transports, essential_names=ESSENTIAL_NAMES)
        registry = BackendRegistryConfig(backends=[memory_config("broken"), memory_config("fs")])

        connected = await connect_configured_backends(gateway, registry)

        assert connected == 1
        assert "read_file" in gateway.catalog

    @pytest.mark.asyncio
    async def test_malformed_backend_does_not_abort_startup(self, fs_transport):
        odd = InMemoryTransport("odd", tools=[{"name": "odd_tool", "_meta": ["oops"]}])
        gateway = Gateway(transport_factory=TransportRegistry(odd, fs_transport))
        registry = BackendRegistryConfig(backends=[memory_config("odd"), memory_config("fs")])

        connected = await connect_configured_backends(gateway, registry)

        assert connected == 1
        assert gateway.backend_status("odd").state == BackendState.failed
