"""SerialMemory API forwarder.

Turns a (route, payload) pair into one HTTP call against the SerialMemory
API and coerces whatever comes back, including failures, into an MCP
tool-result envelope. A single attempt is made per call.
"""

import asyncio
import json
from enum import Enum
from typing import Any
from urllib.parse import quote

import httpx

from serialmemory_mcp import __version__
from serialmemory_mcp.catalog import HttpVerb
from serialmemory_mcp.config import REQUEST_TIMEOUT_SECONDS
from serialmemory_mcp.log_config import get_logger, log_timing
from serialmemory_mcp.mcp.protocol import error_result, is_tool_result, text_result

log = get_logger("mcp.forwarder")


class FailureKind(str, Enum):
    """How a backend call failed. Used for logging only."""

    TIMEOUT = "timeout"
    HTTP = "http"
    CONNECTION = "connection"


class BackendError(Exception):
    """Error from the SerialMemory API."""

    def __init__(self, kind: FailureKind, detail: str, status_code: int = 0):
        self.kind = kind
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"Backend {kind.value} error {status_code}: {detail}")


def _query_value(value: Any) -> str:
    # Strings go out raw; numbers, booleans and structures as compact JSON
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def build_query_string(payload: Any) -> str:
    """Serialize a flat argument mapping into a query string.

    Null values are skipped. Keys and values are percent-encoded with only
    the RFC 3986 unreserved characters left as-is.
    """
    if not isinstance(payload, dict):
        return ""

    parts = []
    for key, value in payload.items():
        if value is None:
            continue
        parts.append(f"{quote(str(key), safe='')}={quote(_query_value(value), safe='')}")
    return "&".join(parts)


def _reject_constant(name: str) -> Any:
    # NaN and Infinity cannot be written back out as JSON
    raise ValueError(f"non-standard JSON constant {name}")


def _extract_error_message(response: httpx.Response) -> str:
    """Best-effort human-readable message from a failed response."""
    body = response.text
    try:
        data = response.json()
    except ValueError:
        return body or response.reason_phrase

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        for key in ("error", "message", "detail"):
            if isinstance(data.get(key), str) and data[key]:
                return data[key]
    return body or response.reason_phrase


class ApiForwarder:
    """HTTP client for the SerialMemory API.

    Handles:
    - Async HTTP requests against {endpoint}/api/{route}
    - Bearer authentication
    - GET query-string and POST body encoding
    - Mapping every outcome onto a tool-result envelope

    The underlying httpx client (and its connection pool) is created on first
    use and shared by every concurrent dispatch.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        """Initialize the forwarder.

        Args:
            endpoint: SerialMemory API base URL
            api_key: Bearer credential sent on every call
            timeout: Per-call timeout in seconds
        """
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.endpoint,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Accept": "application/json",
                    "User-Agent": f"SerialMemory-MCP/{__version__}",
                },
                timeout=httpx.Timeout(self.timeout),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _send(self, client: httpx.AsyncClient, url: str, verb: HttpVerb, payload: Any) -> httpx.Response:
        if verb == HttpVerb.GET:
            query = build_query_string(payload)
            if query:
                url = f"{url}?{query}"
            log.debug(f"GET {url}")
            return await client.get(url)

        body = payload if payload is not None else {}
        log.debug(f"POST {url} with {_query_value(body)[:500]}")
        return await client.post(url, json=body)

    async def _request(self, path: str, verb: HttpVerb, payload: Any) -> str:
        """Make one HTTP request and return the body of a 2xx response.

        ``self.timeout`` bounds the whole call, from connecting to the last
        byte of the body. httpx's own timeouts only bound each phase.

        Raises:
            BackendError: On timeout, transport failure, or non-2xx status
        """
        client = await self._get_client()
        url = f"/api/{path}"

        try:
            with log_timing(f"{verb.value} {url}", log):
                response = await asyncio.wait_for(
                    self._send(client, url, verb, payload),
                    timeout=self.timeout,
                )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise BackendError(FailureKind.TIMEOUT, str(e) or "timed out") from e
        except httpx.HTTPError as e:
            raise BackendError(FailureKind.CONNECTION, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise BackendError(
                FailureKind.HTTP,
                _extract_error_message(response),
                status_code=response.status_code,
            )
        return response.text

    async def forward(self, path: str, verb: HttpVerb, payload: Any = None) -> dict[str, Any]:
        """Forward a call and normalize the outcome.

        Args:
            path: Route relative to /api/
            verb: HTTP verb for the route
            payload: Tool arguments (query string for GET, JSON body for POST)

        Returns:
            Tool-result envelope; failures carry ``isError: true``
        """
        try:
            body = await self._request(path, verb, payload)
        except BackendError as e:
            if e.kind == FailureKind.TIMEOUT:
                log.warning(f"{verb.value} /api/{path} timed out after {self.timeout:.0f}s")
                return error_result("Request timed out")
            if e.kind == FailureKind.HTTP:
                log.warning(f"{verb.value} /api/{path} returned HTTP {e.status_code}: {e.detail[:200]}")
                return error_result(e.detail)
            log.error(f"{verb.value} /api/{path} failed: {e.detail}")
            return error_result(f"API request failed: {e.detail}")

        try:
            parsed = json.loads(body, parse_constant=_reject_constant)
        except ValueError:
            parsed = None

        # The API may answer with a ready-made tool result
        if is_tool_result(parsed):
            return parsed
        return text_result(body)
