"""Compute Engine backend service lookup."""

from gcp_mcp.compute.backend_services import (
    BackendServiceMatch,
    BackendServiceRecord,
    list_backend_services,
    list_backend_services_async,
    scan_backend_services,
)
from gcp_mcp.compute.filters import BackendServiceFilter, matches
from gcp_mcp.compute.tags import decode_tags, encode_tags

__all__ = [
    "BackendServiceFilter",
    "BackendServiceMatch",
    "BackendServiceRecord",
    "decode_tags",
    "encode_tags",
    "list_backend_services",
    "list_backend_services_async",
    "matches",
    "scan_backend_services",
]
