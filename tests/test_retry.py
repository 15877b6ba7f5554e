from __future__ import annotations

import pytest
from tenacity import RetryError

from gcp_mcp.config import BackoffSettings
from gcp_mcp.eab.retry import (
    RetryVerdict,
    build_retrying,
    classify_error,
    is_retryable_transport_error,
)
from gcp_mcp.errors import ResponseError, TransportError


@pytest.mark.parametrize(
    ("message", "verdict"),
    [
        ("connection timeout", RetryVerdict.RETRYABLE),
        ("invalid grant", RetryVerdict.PERMANENT),
        ("received status 500 ", RetryVerdict.RETRYABLE),
        ("received status 504 from upstream", RetryVerdict.RETRYABLE),
        ("received status 404", RetryVerdict.PERMANENT),
        ("DNS lookup failed", RetryVerdict.RETRYABLE),
        ("dns lookup failed", RetryVerdict.PERMANENT),
        ("Timeout exceeded", RetryVerdict.PERMANENT),
        ("status 500", RetryVerdict.PERMANENT),
    ],
)
def test_classify_error_uses_case_sensitive_markers(message: str, verdict: RetryVerdict) -> None:
    assert classify_error(RuntimeError(message)) is verdict


def test_only_transport_errors_take_part_in_retry() -> None:
    assert is_retryable_transport_error(TransportError("read timeout"))
    assert not is_retryable_transport_error(TransportError("certificate verify failed"))
    assert not is_retryable_transport_error(ResponseError("https://x", 500, "boom 500 "))
    assert not is_retryable_transport_error(RuntimeError("timeout"))


@pytest.mark.asyncio
async def test_build_retrying_sleeps_exponentially_until_attempt_ceiling() -> None:
    sleeps: list[float] = []

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    retrying = build_retrying(
        BackoffSettings(
            initial_interval_seconds=1.0,
            multiplier=2.0,
            max_interval_seconds=3.0,
            max_attempts=4,
            randomization_factor=0.0,
        ),
        sleep=fake_sleep,
    )
    calls = {"count": 0}

    async def always_times_out() -> None:
        calls["count"] += 1
        raise TransportError("i/o timeout")

    with pytest.raises(RetryError):
        await retrying(always_times_out)

    assert calls["count"] == 4
    assert sleeps == [1.0, 2.0, 3.0]


def test_backoff_settings_reject_initial_above_max() -> None:
    with pytest.raises(ValueError):
        BackoffSettings(initial_interval_seconds=10.0, max_interval_seconds=5.0)


@pytest.mark.asyncio
async def test_build_retrying_randomizes_each_interval() -> None:
    sleeps: list[float] = []

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    retrying = build_retrying(
        BackoffSettings(
            initial_interval_seconds=1.0,
            multiplier=2.0,
            max_interval_seconds=3.0,
            max_attempts=4,
            randomization_factor=0.5,
        ),
        sleep=fake_sleep,
    )

    async def always_times_out() -> None:
        raise TransportError("i/o timeout")

    with pytest.raises(RetryError):
        await retrying(always_times_out)

    assert len(sleeps) == 3
    for delay, interval in zip(sleeps, [1.0, 2.0, 3.0]):
        assert interval * 0.5 <= delay <= interval * 1.5


def test_backoff_defaults_randomize_by_half() -> None:
    assert BackoffSettings().randomization_factor == 0.5
