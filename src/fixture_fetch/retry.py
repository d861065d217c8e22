"""
Retry policy with exponential backoff.

RetryConfig is the injected policy; run_with_retry drives a coroutine
factory until it succeeds, raises a non-retryable error, or exhausts the
attempt budget.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from fixture_fetch.errors import FixtureFetchError, TransientNetworkError
from fixture_fetch.logging.utilities import get_logger, log_with_context

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """
    Exponential backoff policy.

    Delay before retry n (0-indexed) is
    ``min(base_delay * multiplier ** n, max_delay)``.

    Attributes:
        max_attempts: Total attempts including the first one (>= 1)
        base_delay: Delay in seconds before the first retry
        multiplier: Growth factor between consecutive delays
        max_delay: Upper bound for any single delay in seconds
    """

    max_attempts: int = 5
    base_delay: float = 0.5
    multiplier: float = 2.0
    max_delay: float = 30.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("Retry delays must be non-negative")
        if self.multiplier < 1:
            raise ValueError(f"multiplier must be >= 1, got {self.multiplier}")

    def get_delay(self, retry_index: int) -> float:
        """Delay in seconds before retry ``retry_index`` (0 = first retry)."""
        return min(self.base_delay * (self.multiplier**retry_index), self.max_delay)


DEFAULT_RETRY = RetryConfig()

# Zero-delay policy for tests and local servers.
NO_DELAY_RETRY = RetryConfig(max_attempts=3, base_delay=0.0, max_delay=0.0)


@dataclass
class RetryStats:
    """Attempts made and delays slept during one run_with_retry call."""

    attempts: int = 0
    delays: List[float] = field(default_factory=list)


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
    stats: Optional[RetryStats] = None,
    log_fields: Optional[Dict[str, Any]] = None,
) -> T:
    """
    Await ``operation()`` until it succeeds or a terminal error occurs.

    Only FixtureFetchError instances whose ``is_retryable`` is True are
    retried. Anything else propagates on the first occurrence.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        config: Backoff policy
        stats: Optional accumulator for attempts and delays
        log_fields: Extra structured fields for retry log records

    Raises:
        TransientNetworkError: When every attempt failed transiently
        FixtureFetchError: Any non-retryable error, unchanged
    """
    stats = stats if stats is not None else RetryStats()
    fields = log_fields or {}

    while True:
        stats.attempts += 1
        try:
            return await operation()
        except FixtureFetchError as e:
            if not e.is_retryable:
                raise
            if stats.attempts >= config.max_attempts:
                raise TransientNetworkError(
                    f"Giving up after {stats.attempts} attempt(s): {e.message}",
                    status_code=getattr(e, "status_code", None),
                    cause=e.cause or e,
                    context={**e.context, "attempts": stats.attempts},
                    filename=e.filename,
                    url=e.url,
                ) from e

            delay = config.get_delay(stats.attempts - 1)
            stats.delays.append(delay)
            log_with_context(
                logger,
                logging.WARNING,
                f"Attempt {stats.attempts}/{config.max_attempts} failed, retrying in {delay:.1f}s",
                retry_count=stats.attempts,
                delay_seconds=delay,
                http_status=getattr(e, "status_code", None),
                error_message=e.message,
                **fields,
            )
            await asyncio.sleep(delay)


__all__ = [
    "RetryConfig",
    "RetryStats",
    "DEFAULT_RETRY",
    "NO_DELAY_RETRY",
    "run_with_retry",
]
