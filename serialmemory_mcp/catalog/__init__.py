"""Tool catalog for the SerialMemory MCP adapter.

Static schema tables plus the lookups the dispatcher needs: full and lazy
listings, category browsing, ``category.tool`` paths and backend routes.
"""

from serialmemory_mcp.catalog.catalog import ToolCatalog, normalize_key
from serialmemory_mcp.catalog.models import (
    Category,
    HttpVerb,
    MetaTool,
    Route,
    ToolDescriptor,
)

__all__ = [
    "Category",
    "HttpVerb",
    "MetaTool",
    "Route",
    "ToolCatalog",
    "ToolDescriptor",
    "normalize_key",
]
