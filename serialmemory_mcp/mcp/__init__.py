"""MCP layer for the SerialMemory adapter.

This package:
1. Parses JSON-RPC requests and answers the MCP protocol methods
2. Serves the lazy tool catalog and its discovery meta-tools in-process
3. Forwards every other tool call to the SerialMemory API

Architecture:
    MCP client → Dispatcher → (ToolCatalog | ApiForwarder) → SerialMemory API
    - Adapter handles: protocol shape, tool routing, error envelopes
    - API handles: memory storage, search, graph reasoning
"""

from serialmemory_mcp.mcp.dispatcher import Dispatcher
from serialmemory_mcp.mcp.forwarder import ApiForwarder, BackendError, FailureKind
from serialmemory_mcp.mcp.protocol import McpMethod, RpcParseError, RpcRequest

__all__ = [
    "ApiForwarder",
    "BackendError",
    "Dispatcher",
    "FailureKind",
    "McpMethod",
    "RpcParseError",
    "RpcRequest",
]
