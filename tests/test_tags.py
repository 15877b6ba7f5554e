from __future__ import annotations

import pytest

from gcp_mcp.compute.tags import decode_tags, encode_tags
from gcp_mcp.errors import FormatError


def test_decode_tags_scenario() -> None:
    assert decode_tags("Env:Prod|Team:Core") == {"Env": "Prod", "Team": "Core"}


def test_decode_empty_description_is_empty_map() -> None:
    assert decode_tags("") == {}


def test_decode_splits_on_first_colon_only() -> None:
    assert decode_tags("url:https://example.com:8443|Team:Core") == {
        "url": "https://example.com:8443",
        "Team": "Core",
    }


def test_decode_allows_empty_value_and_key() -> None:
    assert decode_tags("Env:|:orphan") == {"Env": "", "": "orphan"}


@pytest.mark.parametrize("description", ["Env", "Env:Prod|Team", "Env:Prod|", "|Env:Prod"])
def test_decode_rejects_entry_without_colon(description: str) -> None:
    with pytest.raises(FormatError) as exc_info:
        decode_tags(description)
    assert exc_info.value.description == description
    assert exc_info.value.code == "format_error"


@pytest.mark.parametrize(
    "tags",
    [
        {},
        {"Env": "Prod"},
        {"Env": "Prod", "Team": "Core", "Owner": "sre"},
        {"endpoint": "10.0.0.1:443"},
    ],
)
def test_decode_inverts_encode(tags: dict[str, str]) -> None:
    assert decode_tags(encode_tags(tags)) == tags


def test_encode_joins_entries() -> None:
    encoded = encode_tags({"Env": "Prod", "Team": "Core"})
    assert sorted(encoded.split("|")) == ["Env:Prod", "Team:Core"]
