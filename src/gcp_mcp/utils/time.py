"""Time helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def from_unix_seconds(value: int) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)
