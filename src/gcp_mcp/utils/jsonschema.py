"""JSON Schema validation wrapper."""

from __future__ import annotations

from jsonschema import Draft202012Validator


def validate_payload(schema: dict[str, object], payload: dict[str, object]) -> list[str]:
    """Validate payload against schema and return error messages.

    Errors are ordered by their JSON path so messages are stable across runs.
    """
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda e: list(map(str, e.absolute_path)))
    return [_format_error(error) for error in errors]


def _format_error(error: object) -> str:
    path = ".".join(str(p) for p in getattr(error, "absolute_path", ()))
    message = str(getattr(error, "message", error))
    return f"{path}: {message}" if path else message
