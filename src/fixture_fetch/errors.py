"""
Exception types and error classification for fixture_fetch.

Provides:
- ErrorCategory enum for retry decisions
- Typed exception hierarchy for fetch failures
- HTTP status classification
"""

from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that should retry with backoff
                   (e.g., connection refused, timeouts, non-2xx responses)
        PERMANENT: Failures that won't succeed on retry
                   (e.g., hash mismatch, bad hash declaration, disk full)
    """

    TRANSIENT = "transient"
    PERMANENT = "permanent"


class FixtureFetchError(Exception):
    """
    Base exception for all fetch errors.

    Attributes:
        message: Human-readable error description
        cause: Original exception if wrapping
        context: Additional context dict for debugging
        filename: Asset filename the error belongs to, when known
        url: Asset source URL, when known
    """

    category: ErrorCategory = ErrorCategory.PERMANENT

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
        filename: Optional[str] = None,
        url: Optional[str] = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        self.filename = filename
        self.url = url
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether this error should trigger a retry."""
        return self.category == ErrorCategory.TRANSIENT

    def for_asset(self, filename: str, url: str) -> "FixtureFetchError":
        """Fill in asset identity if the raiser did not know it."""
        if self.filename is None:
            self.filename = filename
        if self.url is None:
            self.url = url
        return self

    def __str__(self) -> str:
        parts = [self.message]
        if self.filename:
            parts.append(f"asset: {self.filename}")
        if self.url:
            parts.append(f"url: {self.url}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class ConfigurationError(FixtureFetchError):
    """Malformed asset declaration (hash length/encoding, filename)."""

    pass


class ManifestError(ConfigurationError):
    """Manifest file could not be read, parsed or validated."""

    pass


class TransientNetworkError(FixtureFetchError):
    """Connection refused, timeout or non-2xx status - retried with backoff."""

    category = ErrorCategory.TRANSIENT

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
        filename: Optional[str] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message, cause, context, filename, url)
        self.status_code = status_code


class IntegrityError(FixtureFetchError):
    """Downloaded bytes do not match the declared hash. Never retried."""

    def __init__(
        self,
        message: str,
        expected: str,
        actual: str,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
        filename: Optional[str] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message, cause, context, filename, url)
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return f"{super().__str__()} | expected: {self.expected} | actual: {self.actual}"


class FilesystemError(FixtureFetchError):
    """Target directory or file could not be created, read or written."""

    pass


def classify_http_status(status_code: int) -> Optional[ErrorCategory]:
    """
    Classify HTTP status code into error category.

    Every non-2xx response is transient; the attempt budget caps retries.

    Returns:
        None for 2xx, otherwise ErrorCategory.TRANSIENT
    """
    if 200 <= status_code < 300:
        return None
    return ErrorCategory.TRANSIENT


__all__ = [
    "ErrorCategory",
    "FixtureFetchError",
    "ConfigurationError",
    "ManifestError",
    "TransientNetworkError",
    "IntegrityError",
    "FilesystemError",
    "classify_http_status",
]
