"""Allow ``python -m serialmemory_mcp``."""

from serialmemory_mcp.cli import app

app()
