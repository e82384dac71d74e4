"""MCP request dispatcher.

Switches on the JSON-RPC method, answers protocol methods and meta-tools
in-process, and hands every other tool call to the forwarder. Holds no
per-request state, so the stdio loop and concurrent HTTP requests share one
instance.
"""

import os
from typing import Any, Callable

from serialmemory_mcp import __version__
from serialmemory_mcp.catalog import MetaTool, Route, ToolCatalog
from serialmemory_mcp.catalog.definitions import RESOURCES_READ_ROUTE
from serialmemory_mcp.log_config import get_logger
from serialmemory_mcp.mcp import meta_tools
from serialmemory_mcp.mcp.forwarder import ApiForwarder
from serialmemory_mcp.mcp.protocol import (
    PROTOCOL_VERSION,
    SERVER_NAME,
    McpMethod,
    RpcRequest,
    dumps,
    error_result,
    make_response,
    parse_request,
)

log = get_logger("mcp.dispatcher")

RESOURCES = (
    {"uri": "memory://recent", "name": "Recent Memories", "mimeType": "application/json"},
    {"uri": "memory://sessions", "name": "Conversation Sessions", "mimeType": "application/json"},
)


class Dispatcher:
    """Resolves MCP requests to results.

    Args:
        catalog: Tool catalog shared by all requests
        forwarder: SerialMemory API forwarder
        lazy_mode: List the lazy catalog instead of every tool
        exit_fn: Called with exit code 0 on the ``exit`` method
    """

    def __init__(
        self,
        catalog: ToolCatalog,
        forwarder: ApiForwarder,
        lazy_mode: bool = True,
        exit_fn: Callable[[int], Any] = os._exit,
    ):
        self.catalog = catalog
        self.forwarder = forwarder
        self.lazy_mode = lazy_mode
        self._exit = exit_fn

    @staticmethod
    def parse_request(raw: str | bytes) -> RpcRequest:
        """Decode one inbound message.

        Raises:
            RpcParseError: If the message is not JSON or not a request object
        """
        return parse_request(raw)

    async def handle_line(self, raw: str | bytes) -> str | None:
        """Parse, dispatch and serialize one message.

        Returns:
            The response line, or None when the method produces no output

        Raises:
            RpcParseError: If the message is not a valid request
        """
        request = self.parse_request(raw)
        response = await self.dispatch(request)
        return dumps(response) if response is not None else None

    async def dispatch(self, request: RpcRequest) -> dict[str, Any] | None:
        """Dispatch one request.

        Returns:
            JSON-RPC response envelope, or None for notifications, ``shutdown``
            and unrecognized methods
        """
        log.info(f"← MCP request: {request.method}")
        method = McpMethod.lookup(request.method)

        if method is None:
            log.debug(f"Ignoring unrecognized method {request.method}")
            return None
        if method == McpMethod.EXIT:
            log.info("Exit requested, terminating")
            self._exit(0)
            return None

        result = await self._dispatch_method(method, request.params or {})
        if result is None:
            return None
        return make_response(request.id, result)

    async def _dispatch_method(self, method: McpMethod, params: dict[str, Any]) -> Any:
        if method == McpMethod.INITIALIZE:
            return self._initialize_result()
        if method in (McpMethod.INITIALIZED, McpMethod.SHUTDOWN):
            return None
        if method == McpMethod.TOOLS_LIST:
            tools = self.catalog.list_lazy() if self.lazy_mode else self.catalog.list_all()
            return {"tools": [tool.to_dict() for tool in tools]}
        if method == McpMethod.RESOURCES_LIST:
            return {"resources": [dict(resource) for resource in RESOURCES]}
        if method == McpMethod.RESOURCES_READ:
            return await self.forwarder.forward(
                RESOURCES_READ_ROUTE.path, RESOURCES_READ_ROUTE.verb, params
            )
        if method == McpMethod.TOOLS_CALL:
            return await self.call_tool(params)
        return None

    @staticmethod
    def _initialize_result() -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
            "capabilities": {
                "tools": {"listChanged": True},
                "resources": {"listChanged": True},
            },
        }

    # ═══════════════════════════════════════════════════════════════════════════
    # TOOLS
    # ═══════════════════════════════════════════════════════════════════════════

    async def call_tool(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle ``tools/call``. Always returns a tool-result envelope."""
        name = params.get("name")
        if not isinstance(name, str) or not name:
            return error_result("Tool name is required")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = params.get("params")

        handler = self.catalog.resolve_handler(name)
        if handler is None:
            log.warning(f"Unknown tool: {name}")
            return error_result(f"Unknown tool: {name}")
        if isinstance(handler, MetaTool):
            return await self._call_meta_tool(handler, arguments if isinstance(arguments, dict) else {})

        log.info(f"→ Forwarding tool call: {name}")
        return await self._forward(name, handler, arguments)

    async def _call_meta_tool(self, tool: MetaTool, arguments: dict[str, Any]) -> dict[str, Any]:
        if tool == MetaTool.GET_TOOLS_IN_CATEGORY:
            return meta_tools.get_tools_in_category(self.catalog, arguments)
        if tool == MetaTool.GET_TOOLS:
            return meta_tools.get_tools(self.catalog, arguments)

        if tool == MetaTool.EXECUTE_TOOL:
            tool_name, payload, error = meta_tools.resolve_execute_tool(self.catalog, arguments)
        else:
            tool_name, payload, error = meta_tools.resolve_use_tool(self.catalog, arguments)
        if error is not None:
            return error

        route = self.catalog.resolve_route(tool_name)
        if route is None:
            return error_result(f"No API route for tool: {tool_name}")

        log.info(f"→ {tool.value}: {tool_name}")
        return await self._forward(tool_name, route, payload)

    async def _forward(self, name: str, route: Route, payload: Any) -> dict[str, Any]:
        result = await self.forwarder.forward(route.path, route.verb, payload)
        if result.get("isError"):
            log.info(f"Tool {name} returned an error result")
        return result
