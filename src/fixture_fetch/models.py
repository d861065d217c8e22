"""
Asset declaration and fetch outcome models.

AssetDescriptor is the immutable record the manifest produces and the
fetcher consumes. FetchOutcome reports what happened to one descriptor.
"""

from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fixture_fetch.digest import validate_hash
from fixture_fetch.errors import ConfigurationError


class AssetDescriptor(BaseModel):
    """Declaration of a single test fixture file.

    Attributes:
        filename: Relative name of the file under the output directory
        hash: Expected SHA-256 digest, lowercase hex
        url: Location the bytes are fetched from

    Example:
        >>> asset = AssetDescriptor(
        ...     filename="images/a.png",
        ...     hash="2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824",
        ...     url="https://example.com/a.png",
        ... )
    """

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., description="Relative on-disk name")
    hash: str = Field(..., description="Expected SHA-256 digest in hex")
    url: str = Field(..., description="Source URL")

    # Validators raise ConfigurationError, which pydantic passes through
    # unwrapped; only type and missing-field errors become ValidationError.

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        """Reject names that would land outside the output directory."""
        return check_relative_filename(v)

    @field_validator("hash")
    @classmethod
    def validate_hash_format(cls, v: str) -> str:
        return validate_hash(v)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.strip():
            raise ConfigurationError("url cannot be empty or whitespace")
        return v.strip()


# Mapping key is an arbitrary label; only the descriptor fields drive fetching.
AssetSet = Dict[str, AssetDescriptor]


@dataclass
class FetchOutcome:
    """
    Result of fetching one asset.

    Attributes:
        descriptor: The asset that was processed
        path: Local path holding the verified bytes
        cached: True when the existing local copy was trusted (no network)
        attempts: Number of HTTP attempts made (0 on a cache hit)
        bytes_written: Size of the verified content
    """

    descriptor: AssetDescriptor
    path: Path
    cached: bool
    attempts: int
    bytes_written: int


def check_relative_filename(value: str) -> str:
    """Return ``value`` if it is a non-empty relative path without ``..``.

    Raises:
        ConfigurationError: Empty, absolute or escaping filename
    """
    if not value or not value.strip():
        raise ConfigurationError("filename cannot be empty or whitespace")
    path = PurePath(value)
    if path.is_absolute() or value.startswith(("/", "\\")):
        raise ConfigurationError(
            f"filename must be relative: {value}", context={"filename": value}
        )
    if ".." in path.parts:
        raise ConfigurationError(
            f"filename must not contain '..': {value}", context={"filename": value}
        )
    return value


__all__ = [
    "AssetDescriptor",
    "AssetSet",
    "FetchOutcome",
    "check_relative_filename",
]
