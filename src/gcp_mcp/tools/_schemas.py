"""JSON Schemas for tool inputs."""

from __future__ import annotations

_DEADLINE_PROPERTY = {
    "type": "number",
    "exclusiveMinimum": 0,
    "maximum": 3600,
    "description": (
        "Optional bound in seconds on the whole request, including retries. "
        "Defaults to the configured backoff ceiling."
    ),
}

EAB_CREATE_SCHEMA = {
    "type": "object",
    "properties": {
        "deadlineSeconds": _DEADLINE_PROPERTY,
    },
    "additionalProperties": False,
}

EAB_STATE_SCHEMA = {
    "type": "object",
    "properties": {
        "key_id": {"type": "string", "minLength": 1, "description": "EAB key ID."},
        "name": {"type": "string", "description": "EAB name."},
        "hmac_base64": {
            "type": "string",
            "minLength": 1,
            "description": "EAB HMAC key, standard base64.",
        },
        "create_at": {
            "type": "integer",
            "minimum": 0,
            "maximum": 253402300799,  # 9999-12-31T23:59:59Z
            "description": "Unix timestamp recorded when the credential was issued.",
        },
    },
    "required": ["key_id", "name", "hmac_base64"],
}

EAB_ROTATE_SCHEMA = {
    **EAB_STATE_SCHEMA,
    "properties": {
        **EAB_STATE_SCHEMA["properties"],
        "deadlineSeconds": _DEADLINE_PROPERTY,
    },
    "additionalProperties": False,
}

EAB_NOOP_SCHEMA = {
    "type": "object",
    "properties": EAB_STATE_SCHEMA["properties"],
}

BACKEND_SERVICES_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {
            "type": "string",
            "description": "Name of backend service to be filtered (exact, case-sensitive).",
        },
        "tags": {
            "type": "object",
            "additionalProperties": {"type": "string"},
            "description": (
                "Tags of backend service to be filtered. Tags are read from the "
                "service description in the form 'Key1:Value1|Key2:Value2'."
            ),
        },
        "client_config": {
            "type": "object",
            "properties": {
                "project": {
                    "type": "string",
                    "description": "Project overriding the configured default.",
                },
                "credentials": {
                    "type": "string",
                    "description": (
                        "Service account JSON (or a path to it) overriding the "
                        "configured default."
                    ),
                },
            },
            "additionalProperties": False,
            "description": "Overrides the default client for this call only; never echoed back.",
        },
    },
    "additionalProperties": False,
}
