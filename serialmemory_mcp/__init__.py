"""SerialMemory MCP - protocol adapter for the SerialMemory API.

A thin MCP server that speaks JSON-RPC to MCP clients with:
- Line-delimited stdio transport for locally spawned clients
- MCP over HTTP (FastAPI + uvicorn) for remote and containerized clients
- Lazy tool catalog with category browsing meta-tools
- httpx forwarding of every tool call to the SerialMemory API
"""

__version__ = "1.0.0"

from serialmemory_mcp.catalog import ToolCatalog
from serialmemory_mcp.config import ConfigError, McpConfig
from serialmemory_mcp.mcp import ApiForwarder, Dispatcher

__all__ = [
    "ApiForwarder",
    "ConfigError",
    "Dispatcher",
    "McpConfig",
    "ToolCatalog",
]
