"""Tool helpers."""

from __future__ import annotations

import json

from gcp_mcp.eab.retry import RetryVerdict, classify_error
from gcp_mcp.errors import GcpMcpError, TransportError
from gcp_mcp.mcp_runtime import ToolResult
from gcp_mcp.utils.jsonschema import validate_payload
from gcp_mcp.utils.serialization import json_default


def validate_or_raise(schema: dict[str, object], payload: dict[str, object]) -> None:
    errors = validate_payload(schema, payload)
    if errors:
        raise ValueError("Input validation failed: " + "; ".join(errors))


def result_from_payload(payload: dict[str, object]) -> ToolResult:
    text = json.dumps(payload, ensure_ascii=True, indent=2, default=json_default)
    content = [{"type": "text", "text": text}]
    return ToolResult(content=content, structured_content=payload)


def error_response(exc: GcpMcpError, hint: str | None = None) -> ToolResult:
    """Create a standardized error response."""
    error: dict[str, object] = {
        "type": exc.code,
        "message": str(exc),
    }
    if hint:
        error["hint"] = hint
    error["retryable"] = (
        isinstance(exc, TransportError)
        and exc.code != "retries_exhausted"
        and classify_error(exc) is RetryVerdict.RETRYABLE
    )
    return result_from_payload({"error": error})
