"""Entrypoint for the Google Cloud MCP server."""

from __future__ import annotations

import logging
import threading

from gcp_mcp import __version__
from gcp_mcp.config import load_settings
from gcp_mcp.logging_utils import configure_logging
from gcp_mcp.mcp_runtime import MCPServer
from gcp_mcp.tools import register_tools

logger = logging.getLogger(__name__)


def build_server() -> MCPServer:
    """Create and configure the MCP server instance."""

    settings = load_settings()

    server = MCPServer(
        name="gcp-mcp",
        version=__version__,
        instructions=settings.server.instructions,
    )

    # Configure after FastMCP init so our handlers are the ones that persist.
    configure_logging()

    logger.info("Initializing Google Cloud MCP Server v%s", __version__)
    logger.info("Public CA endpoint: %s", settings.eab.endpoint)
    register_tools(server)
    return server


_server: MCPServer | None = None
_server_lock = threading.Lock()


def get_server() -> MCPServer:
    """Lazily initialise and return the module-level server instance."""
    global _server
    if _server is not None:
        return _server
    with _server_lock:
        if _server is None:
            _server = build_server()
        return _server


def run_entrypoint() -> None:
    """Run the server over stdio."""
    get_server().run()


if __name__ == "__main__":  # pragma: no cover
    run_entrypoint()
