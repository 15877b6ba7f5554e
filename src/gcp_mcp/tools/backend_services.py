"""Load balancer backend services tool."""

from __future__ import annotations

import logging

from gcp_mcp.app import get_app_context
from gcp_mcp.compute.backend_services import list_backend_services_async
from gcp_mcp.compute.filters import BackendServiceFilter
from gcp_mcp.config import resolve_google_target
from gcp_mcp.errors import GcpMcpError
from gcp_mcp.mcp_runtime import ToolResult, ToolSpec
from gcp_mcp.tools._schemas import BACKEND_SERVICES_SCHEMA
from gcp_mcp.tools.base import error_response, result_from_payload, validate_or_raise
from gcp_mcp.utils.masking import redact_sensitive_fields

logger = logging.getLogger(__name__)


def _client_override(payload: dict[str, object]) -> tuple[str | None, str | None]:
    raw = payload.get("client_config")
    if not isinstance(raw, dict):
        return None, None
    project = raw.get("project")
    credentials = raw.get("credentials")
    return (
        project if isinstance(project, str) and project else None,
        credentials if isinstance(credentials, str) and credentials else None,
    )


async def find_backend_services(payload: dict[str, object]) -> ToolResult:
    """List backend services whose name and description tags match the filter."""
    validate_or_raise(BACKEND_SERVICES_SCHEMA, payload)
    ctx = get_app_context()
    logger.info(
        "gcp_load_balancer_backend_services called: args=%s",
        redact_sensitive_fields(payload),
    )

    name = payload.get("name")
    raw_tags = payload.get("tags")
    flt = BackendServiceFilter(
        name=name if isinstance(name, str) else None,
        tags=dict(raw_tags) if isinstance(raw_tags, dict) else None,
    )
    project_override, credentials_override = _client_override(payload)

    try:
        project, credentials_json = resolve_google_target(
            ctx.settings, project=project_override, credentials=credentials_override
        )
        matches = await list_backend_services_async(project, credentials_json, flt)
    except GcpMcpError as exc:
        return error_response(exc)

    return result_from_payload(
        {
            "name": flt.name,
            "tags": dict(flt.tags) if flt.tags is not None else None,
            "items": [match.to_item() for match in matches],
        }
    )


backend_services_tool = ToolSpec(
    name="gcp_load_balancer_backend_services",
    description=(
        "List Google Cloud load balancer backend services. Optional 'name' filters "
        "by exact name; optional 'tags' (object) keeps services whose description "
        "tags ('Key1:Value1|Key2:Value2') contain every given key with an equal "
        "value. Optional 'client_config' {project, credentials} overrides the "
        "default client. Returns items of {id, tags}."
    ),
    input_schema=BACKEND_SERVICES_SCHEMA,
    handler=find_backend_services,
)
