"""Error taxonomy shared by the EAB provisioner and the backend service scanner."""

from __future__ import annotations


class GcpMcpError(Exception):
    """Base error carrying a machine-readable ``code``."""

    code = "gcp_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class ConfigError(GcpMcpError):
    """Malformed service-account JSON or unusable signing material."""

    code = "config_error"


class TransportError(GcpMcpError):
    """The HTTP round trip did not complete."""

    code = "transport_error"


class ResponseError(GcpMcpError):
    """A completed round trip returned a non-200 status."""

    code = "response_error"

    def __init__(self, url: str, status_code: int, body: str) -> None:
        super().__init__(f"url:{url}, error:{body}")
        self.url = url
        self.status_code = status_code
        self.body = body


class DecodeError(GcpMcpError):
    """The response body was not valid JSON or carried invalid base64."""

    code = "decode_error"


class FormatError(GcpMcpError):
    """A description string does not follow the ``Key:Value|Key:Value`` convention."""

    code = "format_error"

    def __init__(self, message: str, description: str) -> None:
        super().__init__(message)
        self.description = description


class NotSupportedError(GcpMcpError):
    """The requested lifecycle operation has no remote counterpart."""

    code = "not_supported"


class ApiError(GcpMcpError):
    """A Google Cloud API call failed while listing resources."""

    code = "api_error"
