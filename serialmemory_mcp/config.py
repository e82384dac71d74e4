"""Configuration for the SerialMemory MCP adapter.

Built once at startup from environment variables (a ``.env`` file in the
working directory is loaded first) and passed explicitly to the transports
and the forwarder. Nothing here is mutated after construction.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from serialmemory_mcp.log_config import get_logger

log = get_logger("config")

DEFAULT_HTTP_PORT = 4545
DEFAULT_HTTPS_PORT = 4546
REQUEST_TIMEOUT_SECONDS = 120.0
DEFAULT_MAX_BODY_BYTES = 4 * 1024 * 1024  # 4 MiB


class ConfigError(Exception):
    """Required configuration is missing or malformed."""


def _env_bool(key: str, default: bool) -> bool:
    """Parse boolean from environment variable."""
    val = os.environ.get(key, "").strip().lower()
    if val in ("true", "1", "yes"):
        return True
    if val in ("false", "0", "no"):
        return False
    return default


def _env_int(key: str, default: int) -> int:
    """Parse integer from environment variable."""
    val = os.environ.get(key, "").strip()
    if not val:
        return default
    try:
        return int(val)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {val!r}") from e


def _env_path(key: str) -> Path | None:
    val = os.environ.get(key, "").strip()
    return Path(val) if val else None


@dataclass(frozen=True)
class McpConfig:
    """Process-wide settings for the adapter.

    Attributes:
        endpoint: SerialMemory API base URL, without trailing slash
        api_key: Bearer credential for the SerialMemory API
        lazy_mode: List the reduced catalog plus discovery meta-tools
        http_token: Bearer token required by the HTTP transport (None disables auth)
        container_mode: Bind all interfaces, HTTP only
        http_port: Plain HTTP listener port
        https_port: HTTPS listener port (loopback mode with TLS files only)
        tls_certfile: PEM certificate for the HTTPS listener
        tls_keyfile: PEM private key for the HTTPS listener
        request_timeout: Per-call timeout for backend requests, in seconds
        max_body_bytes: Largest accepted HTTP request body
    """

    endpoint: str
    api_key: str = field(repr=False)
    lazy_mode: bool = True
    http_token: str | None = field(default=None, repr=False)
    container_mode: bool = False
    http_port: int = DEFAULT_HTTP_PORT
    https_port: int = DEFAULT_HTTPS_PORT
    tls_certfile: Path | None = None
    tls_keyfile: Path | None = None
    request_timeout: float = REQUEST_TIMEOUT_SECONDS
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    @classmethod
    def from_env(cls, container_mode: bool | None = None) -> "McpConfig":
        """Build the configuration from the environment.

        Args:
            container_mode: Command-line override for SERIALMEMORY_CONTAINER

        Raises:
            ConfigError: If the endpoint or API key is missing, or a value is malformed
        """
        load_dotenv(find_dotenv(usecwd=True), override=False)

        endpoint = os.environ.get("SERIALMEMORY_ENDPOINT", "").strip().rstrip("/")
        if not endpoint:
            raise ConfigError(
                "SERIALMEMORY_ENDPOINT is required (e.g., https://api.serialmemory.dev)"
            )

        api_key = os.environ.get("SERIALMEMORY_API_KEY", "").strip()
        if not api_key:
            raise ConfigError("Missing SERIALMEMORY_API_KEY")

        if container_mode is None:
            container_mode = _env_bool("SERIALMEMORY_CONTAINER", False)

        config = cls(
            endpoint=endpoint,
            api_key=api_key,
            lazy_mode=_env_bool("SERIALMEMORY_LAZY_MCP", True),
            http_token=os.environ.get("SERIALMEMORY_MCP_TOKEN", "").strip() or None,
            container_mode=container_mode,
            http_port=_env_int("SERIALMEMORY_HTTP_PORT", DEFAULT_HTTP_PORT),
            https_port=_env_int("SERIALMEMORY_HTTPS_PORT", DEFAULT_HTTPS_PORT),
            tls_certfile=_env_path("SERIALMEMORY_TLS_CERT"),
            tls_keyfile=_env_path("SERIALMEMORY_TLS_KEY"),
            max_body_bytes=_env_int("SERIALMEMORY_MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES),
        )

        log.debug(f"endpoint={config.endpoint}")
        log.debug(f"lazy_mode={config.lazy_mode}, container_mode={config.container_mode}")
        log.debug(f"http_port={config.http_port}, https_port={config.https_port}, tls={config.tls_enabled}")
        log.debug(f"http_auth={'enabled' if config.auth_enabled else 'disabled'}")
        return config

    @property
    def host(self) -> str:
        """Interface the HTTP listeners bind to."""
        return "0.0.0.0" if self.container_mode else "127.0.0.1"

    @property
    def tls_enabled(self) -> bool:
        """Whether the HTTPS listener can be started."""
        return (
            not self.container_mode
            and self.tls_certfile is not None
            and self.tls_keyfile is not None
        )

    @property
    def auth_enabled(self) -> bool:
        """Whether HTTP requests must present the bearer token."""
        return bool(self.http_token)
