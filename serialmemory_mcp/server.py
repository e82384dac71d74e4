"""Process wiring for the SerialMemory MCP adapter.

Builds the shared catalog, forwarder and dispatcher, then runs the stdio
loop in the foreground with the HTTP listeners beside it on the same event
loop, or the HTTP listeners alone.
"""

import asyncio
from typing import TextIO

import uvicorn
from fastapi import FastAPI

from serialmemory_mcp.catalog import ToolCatalog
from serialmemory_mcp.config import McpConfig
from serialmemory_mcp.log_config import get_logger
from serialmemory_mcp.mcp.dispatcher import Dispatcher
from serialmemory_mcp.mcp.forwarder import ApiForwarder
from serialmemory_mcp.transport.http import create_app
from serialmemory_mcp.transport.stdio import StdioTransport

log = get_logger("server")


def build_dispatcher(config: McpConfig) -> Dispatcher:
    """Create the dispatcher shared by both transports."""
    forwarder = ApiForwarder(
        endpoint=config.endpoint,
        api_key=config.api_key,
        timeout=config.request_timeout,
    )
    return Dispatcher(ToolCatalog.default(), forwarder, lazy_mode=config.lazy_mode)


def build_http_servers(app: FastAPI, config: McpConfig) -> list[uvicorn.Server]:
    """uvicorn servers for the configured listeners.

    Loopback mode serves HTTP, plus HTTPS when a certificate and key are
    configured. Container mode binds all interfaces over plain HTTP.
    Access logging stays off: stdout belongs to the stdio transport.
    """
    common = {"host": config.host, "log_level": "warning", "access_log": False, "log_config": None}
    servers = [uvicorn.Server(uvicorn.Config(app, port=config.http_port, **common))]

    if config.tls_enabled:
        servers.append(
            uvicorn.Server(
                uvicorn.Config(
                    app,
                    port=config.https_port,
                    ssl_certfile=str(config.tls_certfile),
                    ssl_keyfile=str(config.tls_keyfile),
                    **common,
                )
            )
        )
    elif not config.container_mode:
        log.info("HTTPS listener disabled (set SERIALMEMORY_TLS_CERT and SERIALMEMORY_TLS_KEY)")
    return servers


def _describe_listeners(config: McpConfig) -> str:
    host = "localhost" if not config.container_mode else config.host
    urls = [f"http://{host}:{config.http_port}/mcp"]
    if config.tls_enabled:
        urls.append(f"https://{host}:{config.https_port}/mcp")
    return " and ".join(urls)


async def _serve_listener(server: uvicorn.Server) -> None:
    """Run one listener; a failed bind must not take the stdio loop down."""
    try:
        await server.serve()
    except SystemExit:
        # uvicorn exits on bind failure
        log.error(f"HTTP listener on port {server.config.port} failed to start")


async def run(
    config: McpConfig,
    http_only: bool = False,
    dispatcher: Dispatcher | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Serve until stdin closes (stdio mode) or the listeners stop (HTTP-only).

    Args:
        config: Adapter configuration
        http_only: Skip the stdio transport
        dispatcher: Prebuilt dispatcher (default: built from config)
        stdin: Stdio input stream (default: sys.stdin)
        stdout: Stdio output stream (default: sys.stdout)
    """
    if dispatcher is None:
        dispatcher = build_dispatcher(config)
    app = create_app(dispatcher, config)
    servers = build_http_servers(app, config)

    mode = "HTTP" if http_only else "stdio + HTTP"
    log.info(f"SerialMemory MCP adapter starting → {config.endpoint} ({mode})")
    log.info(f"HTTP transport listening on {_describe_listeners(config)}")

    listeners = [asyncio.create_task(_serve_listener(server)) for server in servers]
    try:
        if http_only:
            await asyncio.gather(*listeners)
        else:
            await StdioTransport(dispatcher, stdin=stdin, stdout=stdout).run()
    finally:
        for server in servers:
            server.should_exit = True
        await asyncio.gather(*listeners, return_exceptions=True)
        await dispatcher.forwarder.close()
        log.info("SerialMemory MCP adapter stopped")
