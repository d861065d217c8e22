"""Fetch configuration from environment variables."""

import logging
import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from fixture_fetch.http_client import DEFAULT_TIMEOUT_SECONDS
from fixture_fetch.retry import RetryConfig

T = TypeVar("T")

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class FetchConfig:
    """Retry, timeout, cache and logging settings for a fetch run.

    Load from environment using FetchConfig.from_env().
    All timing values in seconds.
    """

    # Retry policy
    max_attempts: int = 5
    base_delay: float = 0.5
    backoff_multiplier: float = 2.0
    max_delay: float = 30.0

    # HTTP
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    # Behavior
    use_cache: bool = True

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "FetchConfig":
        """Load configuration from environment variables.

        Optional environment variables (with defaults):
            FIXTURE_FETCH_MAX_ATTEMPTS: 5
            FIXTURE_FETCH_BASE_DELAY: 0.5
            FIXTURE_FETCH_BACKOFF_MULTIPLIER: 2.0
            FIXTURE_FETCH_MAX_DELAY: 30.0
            FIXTURE_FETCH_TIMEOUT: 60
            FIXTURE_FETCH_USE_CACHE: true
            FIXTURE_FETCH_LOG_LEVEL: INFO

        Raises:
            ValueError: If a variable cannot be parsed
        """
        return cls(
            max_attempts=_env("FIXTURE_FETCH_MAX_ATTEMPTS", int, 5),
            base_delay=_env("FIXTURE_FETCH_BASE_DELAY", float, 0.5),
            backoff_multiplier=_env("FIXTURE_FETCH_BACKOFF_MULTIPLIER", float, 2.0),
            max_delay=_env("FIXTURE_FETCH_MAX_DELAY", float, 30.0),
            timeout_seconds=_env(
                "FIXTURE_FETCH_TIMEOUT", float, float(DEFAULT_TIMEOUT_SECONDS)
            ),
            use_cache=_env("FIXTURE_FETCH_USE_CACHE", _parse_bool, True),
            log_level=_env("FIXTURE_FETCH_LOG_LEVEL", _parse_log_level, "INFO"),
        )

    def retry_config(self) -> RetryConfig:
        """Build the backoff policy described by this configuration."""
        return RetryConfig(
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            multiplier=self.backoff_multiplier,
            max_delay=self.max_delay,
        )


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_log_level(value: str) -> str:
    name = value.upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ValueError(f"unknown log level {value!r}")
    return name


def _env(name: str, parse: Callable[[str], T], default: T) -> T:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError as e:
        raise ValueError(f"Invalid value for {name}: {raw!r} ({e})") from e


__all__ = ["FetchConfig"]
