"""MCP server for Google Cloud ACME EAB provisioning and backend service lookup."""

__version__ = "0.1.0"
