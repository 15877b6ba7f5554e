"""Tag convention stored in free-text ``description`` fields.

A description such as ``"Env:Prod|Team:Core"`` carries the tags
``{"Env": "Prod", "Team": "Core"}``. ``|`` separates entries and the first
``:`` of each entry separates key from value, so values may contain ``:``.
Nothing is escaped: keys containing ``|`` or ``:`` and values containing
``|`` do not survive an encode/decode round trip.
"""

from __future__ import annotations

from collections.abc import Mapping

from gcp_mcp.errors import FormatError

ENTRY_SEPARATOR = "|"
KEY_VALUE_SEPARATOR = ":"


def encode_tags(tags: Mapping[str, str]) -> str:
    """Join tags as ``k1:v1|k2:v2``. Entry order follows the mapping."""
    return ENTRY_SEPARATOR.join(
        f"{key}{KEY_VALUE_SEPARATOR}{value}" for key, value in tags.items()
    )


def decode_tags(description: str) -> dict[str, str]:
    """Parse a description into tags.

    An empty description has no tags. An entry without ``:`` rejects the
    whole description rather than yielding a partial tag set.
    """
    if description == "":
        return {}
    tags: dict[str, str] = {}
    for entry in description.split(ENTRY_SEPARATOR):
        key, sep, value = entry.partition(KEY_VALUE_SEPARATOR)
        if not sep:
            raise FormatError(
                f"Malformed tag entry {entry!r} in description {description!r}: "
                "expected 'Key:Value'",
                description=description,
            )
        tags[key] = value
    return tags
