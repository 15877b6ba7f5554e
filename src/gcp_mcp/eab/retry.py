"""Transient vs. permanent failure classification and the backoff policy.

The classifier inspects only the error's message text. An error is
retryable when the message contains one of the case-sensitive markers
``"timeout"``, ``" 500 "``, ``" 504 "`` or ``"DNS"``. This is a coarse
heuristic: a transport library that rewords its messages changes what gets
retried, and status codes are never examined directly.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from enum import Enum

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

from gcp_mcp.config import BackoffSettings
from gcp_mcp.errors import TransportError

logger = logging.getLogger(__name__)

RETRYABLE_MARKERS: tuple[str, ...] = ("timeout", " 500 ", " 504 ", "DNS")


class RetryVerdict(str, Enum):
    RETRYABLE = "retryable"
    PERMANENT = "permanent"


class RetryPhase(str, Enum):
    ATTEMPTING = "attempting"
    SLEEPING = "sleeping"
    SUCCEEDED = "succeeded"
    FAILED_PERMANENT = "failed_permanent"
    FAILED_EXHAUSTED = "failed_exhausted"


def classify_error(exc: BaseException) -> RetryVerdict:
    message = str(exc)
    if any(marker in message for marker in RETRYABLE_MARKERS):
        return RetryVerdict.RETRYABLE
    return RetryVerdict.PERMANENT


def is_retryable_transport_error(exc: BaseException) -> bool:
    """Only transport failures take part in the retry loop."""
    return isinstance(exc, TransportError) and classify_error(exc) is RetryVerdict.RETRYABLE


class wait_randomized_exponential(wait_exponential):
    """Exponential interval, capped, then spread by ``+/- randomization_factor``.

    The cap applies before randomizing, so a single sleep may exceed the
    configured maximum by up to the factor.
    """

    def __init__(
        self,
        multiplier: float,
        exp_base: float,
        max: float,
        randomization_factor: float,
    ) -> None:
        super().__init__(multiplier=multiplier, exp_base=exp_base, max=max)
        self.randomization_factor = randomization_factor

    def __call__(self, retry_state: RetryCallState) -> float:
        interval = super().__call__(retry_state)
        delta = self.randomization_factor * interval
        return random.uniform(interval - delta, interval + delta)


def _log_sleep(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    error = outcome.exception() if outcome is not None else None
    delay = retry_state.next_action.sleep if retry_state.next_action is not None else 0.0
    logger.warning(
        "EAB request phase=%s attempt=%d delay=%.2fs error=%s",
        RetryPhase.SLEEPING.value,
        retry_state.attempt_number,
        delay,
        error,
    )


def build_retrying(
    settings: BackoffSettings,
    *,
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> AsyncRetrying:
    """Build the exponential backoff policy for EAB requests.

    Sleeping happens on the event loop, so cancelling the calling task (or an
    enclosing ``asyncio.timeout``) interrupts the wait.
    """
    stop = stop_after_delay(settings.max_elapsed_seconds)
    if settings.max_attempts is not None:
        stop = stop | stop_after_attempt(settings.max_attempts)

    return AsyncRetrying(
        sleep=sleep or asyncio.sleep,
        stop=stop,
        wait=wait_randomized_exponential(
            multiplier=settings.initial_interval_seconds,
            exp_base=settings.multiplier,
            max=settings.max_interval_seconds,
            randomization_factor=settings.randomization_factor,
        ),
        retry=retry_if_exception(is_retryable_transport_error),
        before_sleep=_log_sleep,
    )
