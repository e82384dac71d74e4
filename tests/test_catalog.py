"""Tests for the tool catalog."""

import pytest

from serialmemory_mcp.catalog import (
    Category,
    HttpVerb,
    MetaTool,
    Route,
    ToolCatalog,
    ToolDescriptor,
    normalize_key,
)
from serialmemory_mcp.catalog import definitions


def _tool(name: str) -> ToolDescriptor:
    return ToolDescriptor(name=name, description=name, input_schema={"type": "object"})


class TestFullCatalog:
    """Tests for the full listing."""

    def test_every_tool_has_a_route(self, catalog):
        """Every listed tool should resolve to a backend route."""
        for tool in catalog.list_all():
            assert catalog.resolve_route(tool.name) is not None, tool.name

    def test_names_are_unique(self, catalog):
        """No two descriptors should share a name."""
        names = [tool.name for tool in catalog.list_all()]
        assert len(names) == len(set(names))

    def test_meta_tools_not_in_full_listing(self, catalog):
        """Meta-tools are in-process and never part of the full listing."""
        names = {tool.name for tool in catalog.list_all()}
        assert "get_tools_in_category" not in names
        assert "execute_tool" not in names
        assert "get_tools" not in names
        assert "use_tool" not in names

    def test_includes_workspace_tools(self, catalog):
        """Workspace and snapshot tools should be routed."""
        assert catalog.resolve_route("workspace_switch") == Route("workspaces/switch", HttpVerb.POST)
        assert catalog.resolve_route("snapshot_list") == Route("snapshots", HttpVerb.GET)

    def test_known_routes(self, catalog):
        """Core tools should map to their API paths and verbs."""
        assert catalog.resolve_route("memory_search") == Route("memories/search", HttpVerb.GET)
        assert catalog.resolve_route("memory_ingest") == Route("memories", HttpVerb.POST)
        assert catalog.resolve_route("memory_update") == Route("power/memory/update", HttpVerb.POST)

    def test_unknown_route_is_none(self, catalog):
        assert catalog.resolve_route("bogus_tool") is None


class TestLazyCatalog:
    """Tests for the lazy listing."""

    def test_core_subset_plus_meta_tools(self, catalog):
        """Lazy listing is exactly the core subset and the two meta-tools."""
        names = {tool.name for tool in catalog.list_lazy()}
        assert names == set(definitions.LAZY_CORE_TOOL_NAMES) | {
            "get_tools_in_category",
            "execute_tool",
        }

    def test_smaller_than_full_listing(self, catalog):
        assert len(catalog.list_lazy()) < len(catalog.list_all())

    def test_meta_tools_listed_last(self, catalog):
        """Meta-tools follow the core tools."""
        names = [tool.name for tool in catalog.list_lazy()]
        assert names[-2:] == ["get_tools_in_category", "execute_tool"]

    def test_overlapping_tools_share_routes(self, catalog):
        """Lazy and full listings never disagree on a route."""
        full = {tool.name: tool for tool in catalog.list_all()}
        for tool in catalog.list_lazy():
            if tool.name in full:
                assert tool is full[tool.name]
                assert catalog.resolve_route(tool.name) is not None

    def test_execute_tool_schema_requires_tool_path(self, catalog):
        execute = next(t for t in catalog.list_lazy() if t.name == "execute_tool")
        assert execute.input_schema["required"] == ["tool_path"]


class TestCategories:
    """Tests for category browsing and tool paths."""

    def test_category_keys(self, catalog):
        assert list(catalog.categories()) == [
            "lifecycle",
            "observability",
            "safety",
            "export",
            "reasoning",
            "session",
            "admin",
            "workspace",
        ]

    def test_tools_for_category(self, catalog):
        """Lifecycle lists its tools in path order."""
        names = [tool.name for tool in catalog.tools_for_category("lifecycle")]
        assert names[0] == "memory_update"
        assert "memory_supersede" in names
        assert catalog.tool_count("lifecycle") == len(names)

    def test_tools_for_unknown_category_is_empty(self, catalog):
        assert catalog.tools_for_category("nonexistent") == ()
        assert catalog.tool_count("nonexistent") == 0

    def test_category_key_is_normalized(self, catalog):
        """Keys are trimmed and case-insensitive."""
        assert catalog.tools_for_category("  LifeCycle ") == catalog.tools_for_category("lifecycle")

    def test_resolve_tool_path(self, catalog):
        assert catalog.resolve_tool_path("lifecycle.memory_update") == "memory_update"
        assert catalog.resolve_tool_path(" Lifecycle.Memory_Update ") == "memory_update"

    def test_resolve_unknown_tool_path(self, catalog):
        assert catalog.resolve_tool_path("lifecycle.bogus") is None
        assert catalog.resolve_tool_path("memory_update") is None
        assert catalog.resolve_tool_path(None) is None

    def test_every_path_points_at_a_routed_tool(self, catalog):
        for key in catalog.categories():
            for tool in catalog.tools_for_category(key):
                assert catalog.resolve_route(tool.name) is not None


class TestResolveHandler:
    """Tests for tool call resolution."""

    def test_forwardable_tool_resolves_to_route(self, catalog):
        assert catalog.resolve_handler("memory_search") == Route("memories/search", HttpVerb.GET)

    def test_meta_tools_resolve_in_process(self, catalog):
        assert catalog.resolve_handler("get_tools_in_category") is MetaTool.GET_TOOLS_IN_CATEGORY
        assert catalog.resolve_handler("execute_tool") is MetaTool.EXECUTE_TOOL

    def test_gateway_tools_resolve_in_process(self, catalog):
        """Unlisted gateway tools stay callable."""
        assert catalog.resolve_handler("get_tools") is MetaTool.GET_TOOLS
        assert catalog.resolve_handler("use_tool") is MetaTool.USE_TOOL

    def test_unknown_tool(self, catalog):
        assert catalog.resolve_handler("bogus_tool") is None


class TestCatalogValidation:
    """Tests for construction-time checks."""

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            ToolCatalog(
                tools=[_tool("a"), _tool("a")],
                routes={"a": Route("a")},
                categories=[],
                tool_paths={},
                lazy_core_names=[],
                meta_tools=[],
            )

    def test_missing_route_rejected(self):
        with pytest.raises(ValueError, match="No route"):
            ToolCatalog(
                tools=[_tool("a"), _tool("b")],
                routes={"a": Route("a")},
                categories=[],
                tool_paths={},
                lazy_core_names=[],
                meta_tools=[],
            )

    def test_path_with_unknown_category_rejected(self):
        with pytest.raises(ValueError, match="unknown category"):
            ToolCatalog(
                tools=[_tool("a")],
                routes={"a": Route("a")},
                categories=[Category("one", "One", "first")],
                tool_paths={"two.a": "a"},
                lazy_core_names=[],
                meta_tools=[],
            )

    def test_path_with_unknown_tool_rejected(self):
        with pytest.raises(ValueError, match="unknown tool"):
            ToolCatalog(
                tools=[_tool("a")],
                routes={"a": Route("a")},
                categories=[Category("one", "One", "first")],
                tool_paths={"one.b": "b"},
                lazy_core_names=[],
                meta_tools=[],
            )


class TestToolDescriptor:
    """Tests for descriptor serialization."""

    def test_to_dict_uses_mcp_field_names(self, catalog):
        data = catalog.get("memory_search").to_dict()
        assert data["name"] == "memory_search"
        assert data["inputSchema"]["required"] == ["query"]
        assert data["annotations"] == {"readOnlyHint": True}

    def test_to_dict_copies_schema(self, catalog):
        """Mutating a serialized schema leaves the catalog untouched."""
        data = catalog.get("memory_search").to_dict()
        data["inputSchema"]["required"].append("mode")
        assert catalog.get("memory_search").input_schema["required"] == ["query"]

    def test_hints(self, catalog):
        assert catalog.get("memory_search").read_only
        assert catalog.get("memory_delete").destructive
        assert not catalog.get("memory_ingest").read_only


def test_normalize_key():
    assert normalize_key("  Export ") == "export"
    assert normalize_key(None) == ""
