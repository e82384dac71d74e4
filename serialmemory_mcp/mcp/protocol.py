"""JSON-RPC envelopes and MCP result shapes."""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "serialmemory-mcp"

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600


class McpMethod(str, Enum):
    """MCP methods the adapter answers. Anything else is ignored."""

    INITIALIZE = "initialize"
    INITIALIZED = "notifications/initialized"
    SHUTDOWN = "shutdown"
    EXIT = "exit"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    RESOURCES_LIST = "resources/list"
    RESOURCES_READ = "resources/read"

    @classmethod
    def lookup(cls, method: str) -> "McpMethod | None":
        try:
            return cls(method)
        except ValueError:
            return None


class RpcParseError(Exception):
    """Inbound message is not a usable JSON-RPC request."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(message)

    def to_response(self) -> dict[str, Any]:
        """JSON-RPC error envelope for transports that reply to bad input."""
        return {
            "jsonrpc": JSONRPC_VERSION,
            "id": None,
            "error": {"code": self.code, "message": self.message},
        }


class RpcRequest(BaseModel):
    """An inbound JSON-RPC request or notification."""

    model_config = ConfigDict(extra="ignore")

    id: Any = None
    method: str = Field(..., min_length=1)
    params: dict[str, Any] | None = None

    @field_validator("params", mode="before")
    @classmethod
    def _object_params_only(cls, value: Any) -> Any:
        # Positional (array) params are not used by MCP
        return value if isinstance(value, dict) else None


def parse_request(raw: str | bytes) -> RpcRequest:
    """Decode one JSON-RPC request.

    Raises:
        RpcParseError: If the text is not JSON, or not a request object
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RpcParseError(PARSE_ERROR, f"Parse error: {e}") from e
    return validate_request(data)


def validate_request(data: Any) -> RpcRequest:
    """Validate an already-decoded JSON value as a request."""
    if not isinstance(data, dict):
        raise RpcParseError(INVALID_REQUEST, "Invalid Request: expected a JSON object")
    try:
        return RpcRequest.model_validate(data)
    except ValidationError as e:
        raise RpcParseError(
            INVALID_REQUEST, f"Invalid Request: {e.errors()[0]['msg']}"
        ) from e


def make_response(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def dumps(message: Any) -> str:
    """Compact single-line JSON, as written to the wire.

    Raises:
        ValueError: If the message holds NaN or Infinity
    """
    return json.dumps(message, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


# ═══════════════════════════════════════════════════════════════════════════════
# TOOL RESULT ENVELOPES
# ═══════════════════════════════════════════════════════════════════════════════


def text_result(text: str) -> dict[str, Any]:
    """Successful tool result carrying a single text item."""
    return {"content": [{"type": "text", "text": text}]}


def error_result(message: str) -> dict[str, Any]:
    """Failed tool result. The client session continues normally."""
    return {"isError": True, "content": [{"type": "text", "text": f"Error: {message}"}]}


def is_tool_result(value: Any) -> bool:
    """Whether a backend payload is already shaped as a tool result."""
    return isinstance(value, dict) and value.get("content") is not None
