"""ACME EAB tools: create, rotate, and the terminal read/delete no-ops."""

from __future__ import annotations

import logging

from gcp_mcp.app import get_app_context
from gcp_mcp.config import resolve_service_account_json
from gcp_mcp.eab.lifecycle import DELETE_NOT_SUPPORTED
from gcp_mcp.eab.models import EabCredential
from gcp_mcp.errors import GcpMcpError, NotSupportedError
from gcp_mcp.mcp_runtime import ToolResult, ToolSpec
from gcp_mcp.tools._schemas import EAB_CREATE_SCHEMA, EAB_NOOP_SCHEMA, EAB_ROTATE_SCHEMA
from gcp_mcp.tools.base import error_response, result_from_payload, validate_or_raise
from gcp_mcp.utils.masking import redact_sensitive_fields

logger = logging.getLogger(__name__)

_CREATED_AT_HINT = (
    "create_at is the local time the response was decoded; "
    "Public CA does not report when the key was created."
)


def _deadline(payload: dict[str, object]) -> float | None:
    raw = payload.get("deadlineSeconds")
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    return None


def _state_from_payload(payload: dict[str, object]) -> EabCredential:
    state = {key: payload[key] for key in ("key_id", "name", "hmac_base64") if key in payload}
    state["create_at"] = payload.get("create_at", 0)
    return EabCredential.from_state(state)


async def create_eab(payload: dict[str, object]) -> ToolResult:
    """Request a new EAB credential using the configured service account."""
    validate_or_raise(EAB_CREATE_SCHEMA, payload)
    ctx = get_app_context()
    logger.info("gcp_acme_eab_create called")
    try:
        service_account_json = resolve_service_account_json(ctx.settings)
        credential = await ctx.eab.create(
            service_account_json, deadline_seconds=_deadline(payload)
        )
    except GcpMcpError as exc:
        logger.warning("EAB create failed: %s", exc)
        return error_response(exc)
    return result_from_payload({"credential": credential.to_state(), "note": _CREATED_AT_HINT})


async def rotate_eab(payload: dict[str, object]) -> ToolResult:
    """Replace an existing EAB credential with a newly issued one."""
    validate_or_raise(EAB_ROTATE_SCHEMA, payload)
    ctx = get_app_context()
    logger.info("gcp_acme_eab_rotate called: args=%s", redact_sensitive_fields(payload))
    try:
        prior = _state_from_payload(payload)
        service_account_json = resolve_service_account_json(ctx.settings)
        credential = await ctx.eab.update(
            service_account_json, prior, deadline_seconds=_deadline(payload)
        )
    except GcpMcpError as exc:
        logger.warning("EAB rotate failed: %s", exc)
        return error_response(exc)
    return result_from_payload(
        {
            "credential": credential.to_state(),
            "replaces_key_id": prior.key_id,
            "note": _CREATED_AT_HINT,
        }
    )


def read_eab(payload: dict[str, object]) -> ToolResult:
    validate_or_raise(EAB_NOOP_SCHEMA, payload)
    ctx = get_app_context()
    try:
        credential = ctx.eab.read()
    except NotSupportedError as exc:
        return result_from_payload({"supported": False, "message": str(exc)})
    return result_from_payload({"supported": True, "credential": credential.to_state()})


def delete_eab(payload: dict[str, object]) -> ToolResult:
    validate_or_raise(EAB_NOOP_SCHEMA, payload)
    ctx = get_app_context()
    ctx.eab.delete()
    return result_from_payload({"deleted": False, "message": DELETE_NOT_SUPPORTED})


create_eab_tool = ToolSpec(
    name="gcp_acme_eab_create",
    description=(
        "Request an ACME External Account Binding credential from Google Public CA "
        "for the configured service account's project. Returns key_id, name, "
        "hmac_base64 and create_at."
    ),
    input_schema=EAB_CREATE_SCHEMA,
    handler=create_eab,
)

rotate_eab_tool = ToolSpec(
    name="gcp_acme_eab_rotate",
    description=(
        "Rotate an ACME EAB credential: sends the current key_id, name and "
        "hmac_base64 and returns the newly issued credential, which replaces it."
    ),
    input_schema=EAB_ROTATE_SCHEMA,
    handler=rotate_eab,
)

read_eab_tool = ToolSpec(
    name="gcp_acme_eab_read",
    description=(
        "Explain why an EAB credential cannot be read back. Google Cloud offers "
        "no retrieval API; the locally kept credential is authoritative."
    ),
    input_schema=EAB_NOOP_SCHEMA,
    handler=read_eab,
)

delete_eab_tool = ToolSpec(
    name="gcp_acme_eab_delete",
    description=(
        "Acknowledge discarding an EAB credential. Google Cloud offers no deletion "
        "API, so nothing is revoked remotely."
    ),
    input_schema=EAB_NOOP_SCHEMA,
    handler=delete_eab,
)
