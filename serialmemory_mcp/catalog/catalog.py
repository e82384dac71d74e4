"""Queryable tool catalog.

Pure lookups over immutable tables. One instance is shared by every
transport and request; nothing here changes after construction.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from serialmemory_mcp.catalog import definitions
from serialmemory_mcp.catalog.models import Category, MetaTool, Route, ToolDescriptor


def normalize_key(value: str | None) -> str:
    """Trim and lower-case a category key or tool path."""
    return (value or "").strip().lower()


class ToolCatalog:
    """Tool descriptors, categories, tool paths and routes.

    Two listings are offered: the full catalog, and the lazy catalog which
    keeps a handful of core tools and adds the two discovery meta-tools so
    the rest can be browsed by category on demand.
    """

    def __init__(
        self,
        tools: Iterable[ToolDescriptor],
        routes: Mapping[str, Route],
        categories: Iterable[Category],
        tool_paths: Mapping[str, str],
        lazy_core_names: Iterable[str],
        meta_tools: Iterable[ToolDescriptor],
        hidden_meta_tools: Iterable[ToolDescriptor] = (),
    ):
        self._tools: tuple[ToolDescriptor, ...] = tuple(tools)
        self._by_name: Mapping[str, ToolDescriptor] = MappingProxyType(
            {tool.name: tool for tool in self._tools}
        )
        if len(self._by_name) != len(self._tools):
            raise ValueError("Duplicate tool names in catalog")

        self._routes: Mapping[str, Route] = MappingProxyType(dict(routes))
        missing = [tool.name for tool in self._tools if tool.name not in self._routes]
        if missing:
            raise ValueError(f"No route for tools: {', '.join(missing)}")

        self._categories: Mapping[str, Category] = MappingProxyType(
            {category.key: category for category in categories}
        )
        self._tool_paths: Mapping[str, str] = MappingProxyType(
            {normalize_key(path): name for path, name in tool_paths.items()}
        )
        for path, name in self._tool_paths.items():
            category = path.split(".", 1)[0]
            if category not in self._categories:
                raise ValueError(f"Tool path {path} uses unknown category {category}")
            if name not in self._by_name:
                raise ValueError(f"Tool path {path} points at unknown tool {name}")

        lazy_names = frozenset(lazy_core_names)
        self._meta_tools = tuple(meta_tools)
        self._lazy: tuple[ToolDescriptor, ...] = (
            tuple(tool for tool in self._tools if tool.name in lazy_names)
            + self._meta_tools
        )
        self._meta_names = frozenset(
            tool.name for tool in (*self._meta_tools, *hidden_meta_tools)
        )

    @classmethod
    def default(cls) -> "ToolCatalog":
        """Catalog built from the bundled SerialMemory definitions."""
        return cls(
            tools=definitions.ALL_TOOLS,
            routes=definitions.ROUTES,
            categories=definitions.CATEGORIES,
            tool_paths=definitions.TOOL_PATHS,
            lazy_core_names=definitions.LAZY_CORE_TOOL_NAMES,
            meta_tools=definitions.META_TOOLS,
            hidden_meta_tools=definitions.GATEWAY_TOOLS,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # LISTINGS
    # ═══════════════════════════════════════════════════════════════════════════

    def list_all(self) -> tuple[ToolDescriptor, ...]:
        """Every forwardable tool."""
        return self._tools

    def list_lazy(self) -> tuple[ToolDescriptor, ...]:
        """Core subset followed by the discovery meta-tools."""
        return self._lazy

    def categories(self) -> Mapping[str, Category]:
        return self._categories

    def tools_for_category(self, key: str) -> tuple[ToolDescriptor, ...]:
        """Descriptors indexed under a category; empty for unknown keys."""
        prefix = normalize_key(key) + "."
        return tuple(
            self._by_name[name]
            for path, name in self._tool_paths.items()
            if path.startswith(prefix)
        )

    def tool_count(self, key: str) -> int:
        prefix = normalize_key(key) + "."
        return sum(1 for path in self._tool_paths if path.startswith(prefix))

    def get(self, name: str) -> ToolDescriptor | None:
        return self._by_name.get(name)

    # ═══════════════════════════════════════════════════════════════════════════
    # RESOLUTION
    # ═══════════════════════════════════════════════════════════════════════════

    def resolve_tool_path(self, path: str | None) -> str | None:
        """Map ``category.tool`` to a tool name."""
        return self._tool_paths.get(normalize_key(path))

    def resolve_route(self, name: str) -> Route | None:
        return self._routes.get(name)

    def resolve_handler(self, name: str) -> MetaTool | Route | None:
        """Decide how a tool call is fulfilled.

        Returns:
            A MetaTool for in-process tools, the Route for forwardable
            tools, or None for unknown names.
        """
        if name in self._meta_names:
            return MetaTool.lookup(name)
        return self._routes.get(name)
