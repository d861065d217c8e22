"""
fixture_fetch: download test fixture files and verify them by content hash.

Keeps binary test assets out of version control. Each asset is declared by
filename, SHA-256 hash and URL; a verified local copy is reused across runs.

Usage from a test suite:
    from fixture_fetch import AssetDescriptor, dl_test_files

    dl_test_files(
        {"logo": AssetDescriptor(filename="logo.png", hash="...", url="https://...")},
        "test-assets",
    )
"""

from fixture_fetch.errors import (
    ConfigurationError,
    ErrorCategory,
    FilesystemError,
    FixtureFetchError,
    IntegrityError,
    ManifestError,
    TransientNetworkError,
)
from fixture_fetch.fetcher import AssetFetcher
from fixture_fetch.manifest import load_manifest
from fixture_fetch.models import AssetDescriptor, AssetSet, FetchOutcome
from fixture_fetch.retry import RetryConfig
from fixture_fetch.runner import dl_test_files, fetch_assets

__all__ = [
    "AssetDescriptor",
    "AssetFetcher",
    "AssetSet",
    "ConfigurationError",
    "ErrorCategory",
    "FetchOutcome",
    "FilesystemError",
    "FixtureFetchError",
    "IntegrityError",
    "ManifestError",
    "RetryConfig",
    "TransientNetworkError",
    "dl_test_files",
    "fetch_assets",
    "load_manifest",
]
