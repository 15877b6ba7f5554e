"""Name and tag filters for backend services."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol


class TaggedResource(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def tags(self) -> Mapping[str, str] | None: ...


@dataclass(frozen=True)
class BackendServiceFilter:
    """``None`` on either field leaves that dimension unconstrained."""

    name: str | None = None
    tags: Mapping[str, str] | None = None


def matches(resource: TaggedResource, flt: BackendServiceFilter) -> bool:
    """Return True when ``resource`` satisfies every constraint in ``flt``.

    Name comparison is exact and case-sensitive. Every filter tag must be
    present with an equal value; an empty tag filter matches anything, and a
    resource without tags only matches an absent or empty tag filter.
    """
    if flt.name is not None and flt.name != resource.name:
        return False
    if flt.tags is not None:
        actual = resource.tags or {}
        for key, expected in flt.tags.items():
            if key not in actual or actual[key] != expected:
                return False
    return True
