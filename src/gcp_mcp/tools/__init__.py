"""Tool registration helpers.

One tool per lifecycle step of the ACME EAB credential, plus the backend
service lookup:
- gcp_acme_eab_create / gcp_acme_eab_rotate
- gcp_acme_eab_read / gcp_acme_eab_delete (terminal no-ops)
- gcp_load_balancer_backend_services
"""

from __future__ import annotations

from gcp_mcp.logging_utils import get_logger
from gcp_mcp.mcp_runtime import MCPServer, ToolSpec
from gcp_mcp.tools.acme_eab import (
    create_eab_tool,
    delete_eab_tool,
    read_eab_tool,
    rotate_eab_tool,
)
from gcp_mcp.tools.backend_services import backend_services_tool

__all__ = ["get_tool_registry", "get_tool_specs", "register_tools"]


def get_tool_specs() -> list[ToolSpec]:
    return [
        create_eab_tool,
        rotate_eab_tool,
        read_eab_tool,
        delete_eab_tool,
        backend_services_tool,
    ]


def get_tool_registry() -> dict[str, ToolSpec]:
    return {tool.name: tool for tool in get_tool_specs()}


def register_tools(server: MCPServer) -> None:
    logger = get_logger(__name__)
    specs = get_tool_specs()
    for tool in specs:
        server.add_tool(tool)
    logger.info("Registered %d tools: %s", len(specs), ", ".join(t.name for t in specs))
