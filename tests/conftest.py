# Test configuration
import sys
from pathlib import Path
from typing import Any

import pytest

REPO_ROOT = Path(__file__).parent.parent

# Add src to path so tests can import the package without installing it
sys.path.insert(0, str(REPO_ROOT / "src"))

from plugin_gateway.backends.memory import InMemoryTransport  # noqa: E402
from plugin_gateway.backends.schemas import BackendConfig  # noqa: E402
from plugin_gateway.catalog.schemas import OperationDescriptor  # noqa: E402
from plugin_gateway.gateway.service import Gateway  # noqa: E402


ESSENTIAL_NAMES = ["read_file", "write_file", "search_files", "list_directory", "bash_command"]


def make_descriptor(name: str, backend_id: str = "fs", **kwargs: Any) -> OperationDescriptor:
    return OperationDescriptor(name=name, backend_id=backend_id, **kwargs)


def tool(name: str, description: str = "", **meta: Any) -> dict[str, Any]:
    """MCP-style tool definition as a backend reports it."""
    definition: dict[str, Any] = {
        "name": name,
        "description": description,
        "inputSchema": {"type": "object", "properties": {}},
    }
    if meta:
        definition["_meta"] = meta
    return definition


def memory_config(backend_id: str) -> BackendConfig:
    return BackendConfig(backend_id=backend_id, transport="memory")


class TransportRegistry:
    """Transport factory handing out pre-built in-memory transports by backend id."""

    def __init__(self, *transports: InMemoryTransport) -> None:
        self.transports = {t.backend_id: t for t in transports}
        self.built: list[str] = []

    def add(self, transport: InMemoryTransport) -> None:
        self.transports[transport.backend_id] = transport

    def __call__(self, config: BackendConfig) -> InMemoryTransport:
        self.built.append(config.backend_id)
        return self.transports[config.backend_id]


@pytest.fixture
def fs_transport() -> InMemoryTransport:
    return InMemoryTransport(
        "fs",
        tools=[
            tool("read_file", "Read a file from disk"),
            tool("write_file", "Write a file to disk"),
            tool("search_files", "Search files by name pattern"),
            tool("list_directory", "List a directory"),
        ],
        handlers={
            "read_file": lambda args: f"contents of {args.get('path')}",
            "write_file": lambda args: None,
        },
    )


@pytest.fixture
def code_transport() -> InMemoryTransport:
    return InMemoryTransport(
        "code",
        tools=[tool("grep_code", "Find patterns in source", keywords=["search", "grep"])],
        handlers={"grep_code": lambda args: {"matches": 2}},
    )


@pytest.fixture
def transports(fs_transport, code_transport) -> TransportRegistry:
    return TransportRegistry(fs_transport, code_transport)


@pytest.fixture
def gateway(transports) -> Gateway:
    return Gateway(transport_factory=transports, essential_names=ESSENTIAL_NAMES)
