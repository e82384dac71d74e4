"""FastAPI application for the MCP-over-HTTP transport.

Routes:
    GET  /, /health                         static status
    GET  /.well-known/oauth-*               "not supported" stub, never authenticated
    POST /mcp                               one JSON-RPC request per body

When a bearer token is configured every route except the OAuth stubs
requires it.
"""

import json
import secrets
from typing import Any, Callable

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Security, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from serialmemory_mcp import __version__
from serialmemory_mcp.config import McpConfig
from serialmemory_mcp.log_config import get_logger
from serialmemory_mcp.mcp.dispatcher import Dispatcher
from serialmemory_mcp.mcp.protocol import (
    PARSE_ERROR,
    SERVER_NAME,
    RpcParseError,
    validate_request,
)

log = get_logger("transport.http")

OAUTH_DISCOVERY_PATHS = (
    "/.well-known/oauth-authorization-server",
    "/.well-known/oauth-protected-resource",
)

bearer_scheme = HTTPBearer(auto_error=False)


def make_token_verifier(expected_token: str) -> Callable[..., Any]:
    """Build a dependency that checks the Authorization bearer token.

    Comparison is constant-time.
    """

    async def verify_bearer_token(
        credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    ) -> str:
        if credentials is None or not credentials.credentials:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing bearer token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not secrets.compare_digest(
            credentials.credentials.encode(), expected_token.encode()
        ):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid bearer token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return credentials.credentials

    return verify_bearer_token


def _bad_request(code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=RpcParseError(code, message).to_response(),
    )


def create_app(dispatcher: Dispatcher, config: McpConfig) -> FastAPI:
    """Create the HTTP transport application.

    Args:
        dispatcher: Dispatcher shared with the stdio transport
        config: Adapter configuration (auth token, body size cap)

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="SerialMemory MCP",
        description="MCP over HTTP for the SerialMemory API",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.dispatcher = dispatcher
    app.state.config = config

    # OAuth discovery is answered before auth so discovering clients fail fast
    async def oauth_not_supported() -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "not_supported",
                "error_description": "OAuth is not supported; use a bearer token.",
            },
        )

    for path in OAUTH_DISCOVERY_PATHS:
        app.add_api_route(path, oauth_not_supported, methods=["GET"], include_in_schema=False)

    dependencies = [Depends(make_token_verifier(config.http_token))] if config.auth_enabled else []
    router = APIRouter(dependencies=dependencies)

    @router.get("/")
    @router.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "ok", "service": SERVER_NAME, "version": __version__}

    @router.post("/mcp")
    async def mcp_endpoint(request: Request) -> JSONResponse:
        """Dispatch one JSON-RPC request."""
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > config.max_body_bytes:
            return _too_large(config.max_body_bytes)

        body = await _read_capped(request, config.max_body_bytes)
        if body is None:
            return _too_large(config.max_body_bytes)
        if not body.strip():
            return _bad_request(PARSE_ERROR, "Parse error: empty request body")

        # The whole body must be one complete JSON document
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log.warning(f"Rejecting malformed MCP body: {e}")
            return _bad_request(PARSE_ERROR, f"Parse error: {e}")

        try:
            rpc_request = validate_request(data)
        except RpcParseError as e:
            log.warning(f"Rejecting invalid MCP request: {e.message}")
            return _bad_request(e.code, e.message)

        try:
            response = await dispatcher.dispatch(rpc_request)
            return JSONResponse(content=response if response is not None else {})
        except Exception as e:
            log.exception(f"MCP HTTP request error: {e}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Internal server error"},
            )

    app.include_router(router)
    return app


async def _read_capped(request: Request, limit: int) -> bytes | None:
    """Read the request body, or None once it grows past ``limit`` bytes.

    Chunked uploads carry no Content-Length, so the running size is checked
    as each chunk arrives and reading stops at the first chunk over the cap.
    """
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            log.warning(f"Rejecting MCP body over {limit} bytes")
            return None
    return bytes(body)


def _too_large(limit: int) -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={"error": f"Request body exceeds {limit} bytes"},
    )
