"""Logging configuration for the SerialMemory MCP adapter.

Uses loguru. Stdout carries the MCP protocol, so every sink writes to stderr
or to files, never to stdout.

File logs go to ~/.serialmemory_mcp/logs/ (rotated at 10 MB, kept 7 days,
old files zipped). A read-only home directory leaves stderr as the only sink.

Environment variables:
- SERIALMEMORY_LOG_LEVEL: Console log level (default: INFO)
- SERIALMEMORY_LOG_FORWARDER: Console level for backend calls only
- SERIALMEMORY_LOG_HTTP: Console level for the HTTP transport only
- SERIALMEMORY_LOG_DIR: Override the log directory
"""

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from time import perf_counter

from loguru import logger

_console_log_level = os.getenv("SERIALMEMORY_LOG_LEVEL", "INFO").upper()

# Per-component console overrides, keyed by the name given to get_logger()
_component_log_levels: dict[str, str] = {
    "mcp.forwarder": os.getenv("SERIALMEMORY_LOG_FORWARDER", "").upper(),
    "transport.http": os.getenv("SERIALMEMORY_LOG_HTTP", "").upper(),
}


def _level_filter(record) -> bool:
    """Console filter: component override if set, else the global level."""
    level = _component_log_levels.get(record["extra"].get("name", "")) or _console_log_level
    try:
        return record["level"].no >= logger.level(level).no
    except ValueError:
        return True  # Unknown level name


logger.remove()

logger.add(
    sys.stderr,
    level=0,
    filter=_level_filter,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    colorize=True,
)

_log_dir = Path(os.getenv("SERIALMEMORY_LOG_DIR", Path.home() / ".serialmemory_mcp" / "logs"))

try:
    _log_dir.mkdir(parents=True, exist_ok=True)
except OSError as e:
    logger.warning(f"File logging disabled, cannot create {_log_dir}: {e}")
else:
    logger.add(
        _log_dir / "serialmemory_mcp_{time:YYYY-MM-DD}.log",
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra} | {name}:{function}:{line} | {message}",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
        enqueue=True,          # Safe from the stdin reader thread
    )


def get_logger(name: str):
    """Logger bound to a component name such as ``mcp.dispatcher``."""
    return logger.bind(name=name)


@contextmanager
def log_timing(operation: str, log_instance=None, level: str = "debug"):
    """Log how long the wrapped block took.

    The yielded dict gets ``elapsed_ms`` once the block exits, including when
    it raises.

    Example:
        with log_timing("GET /api/stats", log) as timing:
            response = await client.get("/api/stats")
    """
    log_fn = log_instance or logger
    timing = {"elapsed_ms": 0.0}
    start = perf_counter()
    try:
        yield timing
    finally:
        timing["elapsed_ms"] = (perf_counter() - start) * 1000
        getattr(log_fn, level)(f"{operation}: {timing['elapsed_ms']:.1f}ms")


__all__ = ["logger", "get_logger", "log_timing"]
