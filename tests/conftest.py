"""Shared pytest fixtures for SerialMemory MCP tests."""

from __future__ import annotations

from typing import Any

import pytest
import pytest_asyncio

from serialmemory_mcp.catalog import HttpVerb, ToolCatalog
from serialmemory_mcp.config import McpConfig
from serialmemory_mcp.mcp.dispatcher import Dispatcher
from serialmemory_mcp.mcp.forwarder import ApiForwarder
from serialmemory_mcp.mcp.protocol import text_result

BACKEND_URL = "http://backend.test"


class RecordingForwarder:
    """Stand-in forwarder that records calls instead of making them."""

    def __init__(self, result: dict[str, Any] | None = None):
        self.calls: list[tuple[str, HttpVerb, Any]] = []
        self.result = result if result is not None else text_result("ok")
        self.closed = False

    async def forward(self, path: str, verb: HttpVerb, payload: Any = None) -> dict[str, Any]:
        self.calls.append((path, verb, payload))
        return self.result

    async def close(self) -> None:
        self.closed = True


class ExitRecorder:
    """Replacement for os._exit that remembers the exit code."""

    def __init__(self):
        self.codes: list[int] = []

    def __call__(self, code: int) -> None:
        self.codes.append(code)


@pytest.fixture
def catalog():
    """The bundled tool catalog."""
    return ToolCatalog.default()


@pytest_asyncio.fixture
async def forwarder():
    """Real forwarder pointed at the mocked backend."""
    fwd = ApiForwarder(endpoint=BACKEND_URL, api_key="test-api-key", timeout=5.0)
    yield fwd
    await fwd.close()


@pytest.fixture
def recording_forwarder():
    return RecordingForwarder()


@pytest.fixture
def exit_recorder():
    return ExitRecorder()


@pytest.fixture
def lazy_dispatcher(catalog, recording_forwarder, exit_recorder):
    """Lazy-mode dispatcher with a recording forwarder."""
    return Dispatcher(catalog, recording_forwarder, lazy_mode=True, exit_fn=exit_recorder)


@pytest.fixture
def full_dispatcher(catalog, recording_forwarder, exit_recorder):
    """Full-listing dispatcher with a recording forwarder."""
    return Dispatcher(catalog, recording_forwarder, lazy_mode=False, exit_fn=exit_recorder)


@pytest.fixture
def make_config():
    """Factory for adapter configurations with test defaults."""

    def _make(**overrides) -> McpConfig:
        values = {"endpoint": BACKEND_URL, "api_key": "test-api-key"}
        values.update(overrides)
        return McpConfig(**values)

    return _make


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment without any SERIALMEMORY_* variables or stray .env file."""
    for key in (
        "SERIALMEMORY_ENDPOINT",
        "SERIALMEMORY_API_KEY",
        "SERIALMEMORY_LAZY_MCP",
        "SERIALMEMORY_MCP_TOKEN",
        "SERIALMEMORY_CONTAINER",
        "SERIALMEMORY_HTTP_PORT",
        "SERIALMEMORY_HTTPS_PORT",
        "SERIALMEMORY_TLS_CERT",
        "SERIALMEMORY_TLS_KEY",
        "SERIALMEMORY_MAX_BODY_BYTES",
    ):
        # Registered first so values loaded from a .env file are undone
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def make_recording_forwarder():
    """Factory for additional recording forwarders."""
    return RecordingForwarder
