"""Line-delimited stdio transport.

One JSON-RPC request per input line, one response per output line. Requests
are handled one at a time, so responses leave in the order requests arrived.
"""

import asyncio
import sys
from typing import TextIO

from serialmemory_mcp.log_config import get_logger
from serialmemory_mcp.mcp.dispatcher import Dispatcher
from serialmemory_mcp.mcp.protocol import RpcParseError

log = get_logger("transport.stdio")


class StdioTransport:
    """Foreground request loop over stdin/stdout."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ):
        self.dispatcher = dispatcher
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    async def run(self) -> None:
        """Serve until stdin closes or stdout goes away."""
        log.info("stdio transport ready")
        while True:
            # Blocking read runs in a worker thread so HTTP listeners keep serving
            line = await asyncio.to_thread(self.stdin.readline)
            if not line:
                log.info("stdin closed, stopping stdio transport")
                return
            if not line.strip():
                continue

            response = await self._handle(line)
            if response is None:
                continue
            if not self._write(response):
                return

    async def _handle(self, line: str) -> str | None:
        try:
            return await self.dispatcher.handle_line(line)
        except RpcParseError as e:
            log.warning(f"Dropping malformed request: {e.message}")
        except Exception as e:
            log.exception(f"MCP stdio request error: {e}")
        return None

    def _write(self, response: str) -> bool:
        try:
            self.stdout.write(response + "\n")
            self.stdout.flush()
        except (BrokenPipeError, OSError) as e:
            log.warning(f"stdout closed while sending: {e}")
            return False
        return True
