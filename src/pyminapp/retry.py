"""Bounded retry with backoff for remote platform calls."""

from __future__ import annotations

import asyncio
import dataclasses
import enum
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pyminapp._constants import RETRYABLE_HTTP_STATUSES, SYSTEM_BUSY_CODE
from pyminapp.exceptions import (
    MinappApiError,
    MinappAuthError,
    MinappConfigError,
    MinappNetworkError,
    MinappRateLimitError,
)

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Backoff(enum.Enum):
    """How the delay between attempts grows."""

    NONE = "none"
    FIXED = "fixed"
    EXPONENTIAL = "exponential"


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    """Retry settings for a single call.

    Parameters
    ----------
    max_attempts : int
        Total number of attempts, including the first one.  Must be ``>= 1``.
    delay : float
        Base wait in seconds between attempts.
    backoff : Backoff
        ``NONE`` retries immediately, ``FIXED`` always waits *delay*,
        ``EXPONENTIAL`` waits *delay* multiplied by the attempt index.
    """

    max_attempts: int = 3
    delay: float = 0.5
    backoff: Backoff = Backoff.EXPONENTIAL

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise MinappConfigError(f"retry.max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay < 0:
            raise MinappConfigError(f"retry.delay must be >= 0, got {self.delay}")
        if not isinstance(self.backoff, Backoff):
            # Accept the string form used in env vars / plain configs.
            try:
                object.__setattr__(self, "backoff", Backoff(str(self.backoff).strip().lower()))
            except ValueError as exc:
                raise MinappConfigError(f"unknown retry.backoff {self.backoff!r}") from exc

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number *attempt* (1-based)."""
        if self.backoff is Backoff.NONE:
            return 0.0
        if self.backoff is Backoff.FIXED:
            return self.delay
        return self.delay * attempt


def is_retryable(exc: BaseException) -> bool:
    """Return ``True`` for transport-level and transient server failures."""
    if isinstance(exc, MinappNetworkError):
        return exc.status_code is None or exc.status_code in RETRYABLE_HTTP_STATUSES
    if isinstance(exc, MinappRateLimitError):
        return True
    if isinstance(exc, MinappAuthError):
        return False
    if isinstance(exc, MinappApiError):
        return exc.code == SYSTEM_BUSY_CODE
    return False


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    description: str = "platform call",
) -> T:
    """Await *operation* until it succeeds or *policy* is exhausted.

    Only errors accepted by :func:`is_retryable` are retried; anything
    else propagates on the first attempt.  Once attempts run out the
    most recent error is re-raised unchanged.

    Parameters
    ----------
    operation : callable
        Zero-argument factory returning a fresh awaitable per attempt.
    policy : RetryPolicy
        Attempt count and delay settings.
    description : str
        Label used in log messages.
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as exc:
            if not is_retryable(exc) or attempt >= policy.max_attempts:
                raise
            wait = policy.delay_for(attempt)
            _logger.info(
                "%s failed (attempt %d/%d): %s; retrying in %.2fs",
                description,
                attempt,
                policy.max_attempts,
                exc,
                wait,
            )
            if wait > 0:
                await asyncio.sleep(wait)
            attempt += 1
