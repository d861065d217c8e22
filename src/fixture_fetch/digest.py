"""SHA-256 digest helpers used for fixture integrity checks."""

import hashlib
import string
from pathlib import Path
from typing import Union

from fixture_fetch.errors import ConfigurationError

DIGEST_SIZE = hashlib.sha256().digest_size
HEX_LENGTH = DIGEST_SIZE * 2

_HEX_DIGITS = frozenset(string.hexdigits.lower())


def digest_hex(data: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of ``data``."""
    return hashlib.sha256(data).hexdigest()


def file_digest_hex(path: Union[str, Path]) -> str:
    """Return the lowercase hex SHA-256 digest of a file's full content."""
    return digest_hex(Path(path).read_bytes())


def verify(data: bytes, expected_hex: str) -> bool:
    """True iff ``data`` hashes to ``expected_hex`` (compared in lower case)."""
    return digest_hex(data) == expected_hex.lower()


def validate_hash(value: str) -> str:
    """
    Normalize a declared hash and check its shape.

    Args:
        value: Hex digest as written in the asset declaration

    Returns:
        Lowercase hex string of exactly HEX_LENGTH characters

    Raises:
        ConfigurationError: Wrong length or non-hex characters
    """
    normalized = value.strip().lower()
    if len(normalized) != HEX_LENGTH:
        raise ConfigurationError(
            f"Hash must be {HEX_LENGTH} hex characters, got {len(normalized)}",
            context={"hash": value},
        )
    if not set(normalized) <= _HEX_DIGITS:
        raise ConfigurationError(
            "Hash contains non-hexadecimal characters",
            context={"hash": value},
        )
    return normalized


__all__ = [
    "DIGEST_SIZE",
    "HEX_LENGTH",
    "digest_hex",
    "file_digest_hex",
    "verify",
    "validate_hash",
]
