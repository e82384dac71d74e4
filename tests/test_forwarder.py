"""Tests for the SerialMemory API forwarder."""

import asyncio
import json
import time

import httpx
import pytest
import respx
from httpx import Response

from serialmemory_mcp.catalog import HttpVerb
from serialmemory_mcp.mcp.forwarder import (
    ApiForwarder,
    BackendError,
    FailureKind,
    build_query_string,
)
from serialmemory_mcp.mcp.protocol import dumps

BACKEND_URL = "http://backend.test"


class TestBuildQueryString:
    """Tests for GET argument encoding."""

    def test_strings_are_percent_encoded(self):
        assert build_query_string({"query": "hello world"}) == "query=hello%20world"

    def test_reserved_characters_are_encoded(self):
        assert build_query_string({"q": "a&b=c/d"}) == "q=a%26b%3Dc%2Fd"

    def test_unreserved_characters_kept(self):
        assert build_query_string({"q": "a-b_c.d~e"}) == "q=a-b_c.d~e"

    def test_non_ascii_is_utf8_encoded(self):
        assert build_query_string({"q": "ü"}) == "q=%C3%BC"

    def test_none_values_skipped(self):
        assert build_query_string({"query": "x", "mode": None}) == "query=x"

    def test_scalars_use_json_form(self):
        """Booleans and numbers go out as their JSON spelling."""
        assert build_query_string({"limit": 5, "include": True, "t": 0.5}) == "limit=5&include=true&t=0.5"

    def test_structures_use_compact_json(self):
        assert build_query_string({"filter": {"a": 1}}) == "filter=%7B%22a%22%3A1%7D"

    def test_non_mapping_payload_is_empty(self):
        assert build_query_string(None) == ""
        assert build_query_string(["x"]) == ""

    def test_preserves_argument_order(self):
        assert build_query_string({"b": "1", "a": "2"}) == "b=1&a=2"


class TestForwardSuccess:
    """Tests for successful backend calls."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_plain_body_is_wrapped_as_text(self, forwarder):
        """A body without top-level content becomes a single text item."""
        respx.get(f"{BACKEND_URL}/api/memories/search").mock(
            return_value=Response(200, content=b'{"results":[]}')
        )

        result = await forwarder.forward("memories/search", HttpVerb.GET, {"query": "foo"})
        assert result == {"content": [{"type": "text", "text": '{"results":[]}'}]}

    @pytest.mark.asyncio
    @respx.mock
    async def test_tool_result_body_passes_through(self, forwarder):
        """A body already shaped as a tool result is returned unchanged."""
        body = {"content": [{"type": "text", "text": "done"}], "isError": False, "extra": 1}
        respx.post(f"{BACKEND_URL}/api/memories").mock(return_value=Response(200, json=body))

        result = await forwarder.forward("memories", HttpVerb.POST, {"content": "x"})
        assert result == body

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_body_is_wrapped(self, forwarder):
        respx.get(f"{BACKEND_URL}/api/stats").mock(return_value=Response(200, text="all good"))

        result = await forwarder.forward("stats", HttpVerb.GET)
        assert result == {"content": [{"type": "text", "text": "all good"}]}

    @pytest.mark.asyncio
    @respx.mock
    async def test_json_array_body_is_wrapped(self, forwarder):
        respx.get(f"{BACKEND_URL}/api/workspaces").mock(return_value=Response(200, text="[]"))

        result = await forwarder.forward("workspaces", HttpVerb.GET)
        assert result["content"][0]["text"] == "[]"
        assert "isError" not in result

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_bearer_credential(self, forwarder):
        route = respx.get(f"{BACKEND_URL}/api/persona").mock(return_value=Response(200, json={}))

        await forwarder.forward("persona", HttpVerb.GET)
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer test-api-key"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"].startswith("SerialMemory-MCP/")

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_arguments_in_query_string(self, forwarder):
        route = respx.get(f"{BACKEND_URL}/api/memories/search").mock(
            return_value=Response(200, json={"results": []})
        )

        await forwarder.forward(
            "memories/search",
            HttpVerb.GET,
            {"query": "hello world", "limit": 5, "include_entities": True, "mode": None},
        )
        request = route.calls.last.request
        assert request.url.params["query"] == "hello world"
        assert request.url.params["limit"] == "5"
        assert request.url.params["include_entities"] == "true"
        assert "mode" not in request.url.params
        assert "hello%20world" in str(request.url)
        assert request.content == b""

    @pytest.mark.asyncio
    @respx.mock
    async def test_post_arguments_as_json_body(self, forwarder):
        route = respx.post(f"{BACKEND_URL}/api/power/memory/update").mock(
            return_value=Response(200, json={"ok": True})
        )
        payload = {"memory_id": "abc", "new_content": "updated", "nested": {"k": [1, 2]}}

        await forwarder.forward("power/memory/update", HttpVerb.POST, payload)
        request = route.calls.last.request
        assert json.loads(request.content) == payload
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    @respx.mock
    async def test_post_without_arguments_sends_empty_object(self, forwarder):
        route = respx.post(f"{BACKEND_URL}/api/sessions/current/end").mock(
            return_value=Response(200, json={})
        )

        await forwarder.forward("sessions/current/end", HttpVerb.POST, None)
        assert json.loads(route.calls.last.request.content) == {}

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_is_reused(self, forwarder):
        """Calls share one pooled client."""
        respx.get(f"{BACKEND_URL}/api/stats").mock(return_value=Response(200, json={}))

        await forwarder.forward("stats", HttpVerb.GET)
        first = forwarder._client
        await forwarder.forward("stats", HttpVerb.GET)
        assert forwarder._client is first


class TestForwardErrors:
    """Tests for failed backend calls."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_uses_error_field(self, forwarder):
        respx.post(f"{BACKEND_URL}/api/power/memory/delete").mock(
            return_value=Response(404, json={"error": "Memory not found"})
        )

        result = await forwarder.forward("power/memory/delete", HttpVerb.POST, {"memory_id": "x"})
        assert result == {
            "isError": True,
            "content": [{"type": "text", "text": "Error: Memory not found"}],
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_uses_nested_error_message(self, forwarder):
        respx.get(f"{BACKEND_URL}/api/stats").mock(
            return_value=Response(400, json={"error": {"message": "bad workspace"}})
        )

        result = await forwarder.forward("stats", HttpVerb.GET)
        assert result["content"][0]["text"] == "Error: bad workspace"

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_uses_detail_field(self, forwarder):
        respx.get(f"{BACKEND_URL}/api/stats").mock(
            return_value=Response(422, json={"detail": "limit must be positive"})
        )

        result = await forwarder.forward("stats", HttpVerb.GET)
        assert result["content"][0]["text"] == "Error: limit must be positive"

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_with_plain_body(self, forwarder):
        respx.get(f"{BACKEND_URL}/api/stats").mock(return_value=Response(502, text="Bad gateway"))

        result = await forwarder.forward("stats", HttpVerb.GET)
        assert result["isError"] is True
        assert result["content"][0]["text"] == "Error: Bad gateway"

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_with_empty_body_uses_reason(self, forwarder):
        respx.get(f"{BACKEND_URL}/api/stats").mock(return_value=Response(500))

        result = await forwarder.forward("stats", HttpVerb.GET)
        assert result["content"][0]["text"] == "Error: Internal Server Error"

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_becomes_error_result(self, forwarder):
        """A timed-out call returns an error envelope instead of raising."""
        respx.get(f"{BACKEND_URL}/api/memories/search").mock(
            side_effect=httpx.ReadTimeout("timed out")
        )

        result = await forwarder.forward("memories/search", HttpVerb.GET, {"query": "x"})
        assert result["isError"] is True
        assert "timed out" in result["content"][0]["text"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error_becomes_error_result(self, forwarder):
        respx.post(f"{BACKEND_URL}/api/memories").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        result = await forwarder.forward("memories", HttpVerb.POST, {"content": "x"})
        assert result == {
            "isError": True,
            "content": [{"type": "text", "text": "Error: API request failed: connection refused"}],
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_request_raises_backend_error(self, forwarder):
        """The low-level call reports failures as BackendError."""
        respx.get(f"{BACKEND_URL}/api/stats").mock(
            return_value=Response(403, json={"message": "forbidden"})
        )

        with pytest.raises(BackendError) as exc_info:
            await forwarder._request("stats", HttpVerb.GET, None)
        assert exc_info.value.kind == FailureKind.HTTP
        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "forbidden"


class TestForwarderLifecycle:
    """Tests for client setup and teardown."""

    def test_endpoint_trailing_slash_stripped(self):
        fwd = ApiForwarder(endpoint="http://backend.test/", api_key="k")
        assert fwd.endpoint == "http://backend.test"

    @pytest.mark.asyncio
    async def test_close_without_client(self):
        fwd = ApiForwarder(endpoint=BACKEND_URL, api_key="k")
        await fwd.close()
        assert fwd._client is None

    @pytest.mark.asyncio
    async def test_close_releases_client(self):
        fwd = ApiForwarder(endpoint=BACKEND_URL, api_key="k")
        await fwd._get_client()
        await fwd.close()
        assert fwd._client is None


class TestCallDeadline:
    """Tests for the whole-call timeout."""

    @pytest.mark.asyncio
    async def test_trickling_response_times_out(self):
        """A body that keeps arriving slowly still hits the call deadline."""
        handlers = []

        async def trickle(reader, writer):
            handlers.append((asyncio.current_task(), writer))
            await reader.readuntil(b"\r\n\r\n")
            writer.write(
                b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\nContent-Length: 14\r\n\r\n"
            )
            try:
                for byte in b'{"results":[]}':
                    writer.write(bytes([byte]))
                    await writer.drain()
                    await asyncio.sleep(0.3)
            except ConnectionError:
                pass

        server = await asyncio.start_server(trickle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        fwd = ApiForwarder(endpoint=f"http://127.0.0.1:{port}", api_key="k", timeout=1.0)
        try:
            start = time.perf_counter()
            result = await fwd.forward("stats", HttpVerb.GET)
            elapsed = time.perf_counter() - start
        finally:
            await fwd.close()
            for task, writer in handlers:
                task.cancel()
                writer.close()
            server.close()

        assert result == {"isError": True, "content": [{"type": "text", "text": "Error: Request timed out"}]}
        assert elapsed < 3.0


class TestNonStandardJson:
    """Tests for backend bodies with NaN or Infinity."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_constants_are_not_passed_through(self, forwarder):
        """Such a body is returned as text so the reply stays valid JSON."""
        body = '{"content":[{"type":"text","text":"x"}],"score":NaN}'
        respx.get(f"{BACKEND_URL}/api/stats").mock(return_value=Response(200, text=body))

        result = await forwarder.forward("stats", HttpVerb.GET)
        assert result == {"content": [{"type": "text", "text": body}]}
        assert "NaN" in json.loads(dumps(result))["content"][0]["text"]

    def test_wire_encoding_rejects_constants(self):
        with pytest.raises(ValueError):
            dumps({"score": float("nan")})
