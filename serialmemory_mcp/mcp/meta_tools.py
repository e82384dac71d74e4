"""In-process discovery tools for the lazy catalog.

``get_tools_in_category`` (and its older alias ``get_tools``) render the
category browser. Execution by path or by name is resolved here and handed
back to the dispatcher for forwarding.
"""

import json
from typing import Any

from serialmemory_mcp.catalog import ToolCatalog, normalize_key
from serialmemory_mcp.mcp.protocol import error_result, text_result


def _string_arg(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    return value if isinstance(value, str) else ""


def render_category_index(catalog: ToolCatalog) -> dict[str, Any]:
    """Markdown index of every category with its tool count."""
    lines = ["## SerialMemory Tool Categories", ""]
    for key, category in catalog.categories().items():
        lines.append(f"- **{key}** ({catalog.tool_count(key)} tools): {category.description}")
    lines.append("")
    lines.append("Use `get_tools_in_category` with a category name to see available tools.")
    return text_result("\n".join(lines))


def render_category(catalog: ToolCatalog, key: str) -> dict[str, Any]:
    """Full schema listing for one category, or an error for unknown keys."""
    key = normalize_key(key)
    if not key:
        return render_category_index(catalog)

    category = catalog.categories().get(key)
    if category is None:
        available = ", ".join(catalog.categories())
        return error_result(f"Unknown category: {key}. Available: {available}")

    tools = [tool.to_dict() for tool in catalog.tools_for_category(key)]
    text = (
        f"## {category.title}\n"
        f"{category.description}\n\n"
        f"**{len(tools)} tools available.** "
        f"Use `execute_tool` with path `{key}.<tool_name>` to execute.\n\n"
        f"{json.dumps(tools, indent=2, ensure_ascii=False)}"
    )
    return text_result(text)


def get_tools_in_category(catalog: ToolCatalog, arguments: dict[str, Any]) -> dict[str, Any]:
    return render_category(catalog, _string_arg(arguments, "path"))


def get_tools(catalog: ToolCatalog, arguments: dict[str, Any]) -> dict[str, Any]:
    return render_category(catalog, _string_arg(arguments, "category"))


def resolve_execute_tool(
    catalog: ToolCatalog, arguments: dict[str, Any]
) -> tuple[str | None, Any, dict[str, Any] | None]:
    """Resolve an ``execute_tool`` call.

    Returns:
        (tool name, nested arguments, None) on success, or
        (None, None, error envelope) when the path cannot be resolved
    """
    tool_path = normalize_key(_string_arg(arguments, "tool_path"))
    if not tool_path:
        return None, None, error_result("tool_path is required (e.g. 'lifecycle.memory_update')")

    tool_name = catalog.resolve_tool_path(tool_path)
    if tool_name is None:
        return None, None, error_result(
            f"Unknown tool path: {tool_path}. "
            "Use get_tools_in_category to discover available tools."
        )
    return tool_name, arguments.get("arguments"), None


def resolve_use_tool(
    catalog: ToolCatalog, arguments: dict[str, Any]
) -> tuple[str | None, Any, dict[str, Any] | None]:
    """Resolve a gateway ``use_tool`` call.

    A non-empty ``context`` object rides along in the forwarded payload
    unless the tool arguments already carry their own.
    """
    tool_name = _string_arg(arguments, "tool_name").strip()
    if not tool_name:
        return None, None, error_result("tool_name is required (e.g. 'memory_update')")
    if catalog.resolve_route(tool_name) is None:
        return None, None, error_result(
            f"Unknown tool: {tool_name}. Use get_tools to discover available tools."
        )

    payload = arguments.get("arguments")
    context = arguments.get("context")
    if isinstance(context, dict) and context:
        payload = dict(payload) if isinstance(payload, dict) else {}
        payload.setdefault("context", context)
    return tool_name, payload, None
