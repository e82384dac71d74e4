"""Transports: line-delimited stdio and MCP over HTTP."""

from serialmemory_mcp.transport.http import create_app
from serialmemory_mcp.transport.stdio import StdioTransport

__all__ = ["StdioTransport", "create_app"]
