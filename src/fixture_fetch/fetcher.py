"""
Fixture fetcher with integrity verification.

Provides AssetFetcher, which processes one AssetDescriptor:
1. Descriptor validation (hash shape, relative filename)
2. Local cache check (skip the network if the file already verifies)
3. HTTP GET with exponential backoff on transient failure
4. Digest verification (mismatch is fatal, never retried)
5. Atomic write to the output directory

Clean interface: AssetDescriptor -> FetchOutcome (or a FixtureFetchError)
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union

import aiohttp

from fixture_fetch.cache import check_local_copy
from fixture_fetch.digest import digest_hex, validate_hash
from fixture_fetch.errors import FixtureFetchError, IntegrityError
from fixture_fetch.http_client import (
    DEFAULT_TIMEOUT_SECONDS,
    create_session,
    download_bytes,
)
from fixture_fetch.logging.context import asset_log_context
from fixture_fetch.logging.utilities import get_logger, log_with_context
from fixture_fetch.models import AssetDescriptor, FetchOutcome, check_relative_filename
from fixture_fetch.retry import DEFAULT_RETRY, RetryConfig, RetryStats, run_with_retry
from fixture_fetch.storage import write_atomic

logger = get_logger(__name__)


class AssetFetcher:
    """
    Fetches and verifies single fixture files.

    Usage:
        fetcher = AssetFetcher(retry=RetryConfig(max_attempts=3))
        outcome = await fetcher.fetch(descriptor, Path("test-assets"))
        print(outcome.path, outcome.cached)

    Session management:
        By default, creates a new session for each fetch.
        For batches, pass a shared session to the constructor:

        async with create_session() as session:
            fetcher = AssetFetcher(session=session)
            for descriptor in assets.values():
                await fetcher.fetch(descriptor, output_dir)
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        retry: RetryConfig = DEFAULT_RETRY,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        use_cache: bool = True,
    ):
        """
        Args:
            session: Optional aiohttp session (None = create per fetch)
            retry: Backoff policy for transient failures
            timeout_seconds: Per-request timeout
            use_cache: Trust an existing local file whose hash matches
        """
        self._session = session
        self.retry = retry
        self.timeout_seconds = timeout_seconds
        self.use_cache = use_cache

    async def fetch(
        self, descriptor: AssetDescriptor, output_dir: Union[str, Path]
    ) -> FetchOutcome:
        """
        Make ``output_dir / descriptor.filename`` hold the verified bytes.

        Raises:
            ConfigurationError: Malformed hash or filename (no network touched)
            TransientNetworkError: Every attempt failed transiently
            IntegrityError: Downloaded bytes do not match the declared hash
            FilesystemError: Target could not be read, removed or written
        """
        with asset_log_context(descriptor.filename):
            try:
                return await self._fetch(descriptor, Path(output_dir))
            except FixtureFetchError as e:
                e.for_asset(descriptor.filename, descriptor.url)
                raise

    async def _fetch(self, descriptor: AssetDescriptor, output_dir: Path) -> FetchOutcome:
        expected = self._validated_hash(descriptor)
        target = output_dir / descriptor.filename

        if self.use_cache and check_local_copy(target, expected):
            log_with_context(
                logger,
                logging.INFO,
                f"{descriptor.filename} has a matching hash, skipping download",
                cached=True,
            )
            return FetchOutcome(
                descriptor=descriptor,
                path=target,
                cached=True,
                attempts=0,
                bytes_written=target.stat().st_size,
            )

        log_with_context(
            logger,
            logging.INFO,
            f"Fetching {descriptor.filename}",
            download_url=descriptor.url,
        )
        start = time.perf_counter()
        stats = RetryStats()
        content = await self._download_with_retry(descriptor, stats)

        actual = digest_hex(content)
        if actual != expected:
            log_with_context(
                logger,
                logging.ERROR,
                f"Hash mismatch for {descriptor.filename}",
                download_url=descriptor.url,
                expected_hash=expected,
                actual_hash=actual,
                attempts=stats.attempts,
            )
            raise IntegrityError(
                "Downloaded content does not match the declared hash",
                expected=expected,
                actual=actual,
                context={"attempts": stats.attempts},
            )

        write_atomic(target, content)

        log_with_context(
            logger,
            logging.INFO,
            f"Fetched {descriptor.filename}",
            bytes_written=len(content),
            attempts=stats.attempts,
            duration_ms=round((time.perf_counter() - start) * 1000, 1),
        )
        return FetchOutcome(
            descriptor=descriptor,
            path=target,
            cached=False,
            attempts=stats.attempts,
            bytes_written=len(content),
        )

    async def _download_with_retry(
        self, descriptor: AssetDescriptor, stats: RetryStats
    ) -> bytes:
        session = self._session
        should_close_session = False
        try:
            if session is None:
                session = create_session()
                should_close_session = True

            async def attempt() -> bytes:
                response = await download_bytes(
                    session, descriptor.url, timeout_seconds=self.timeout_seconds
                )
                return response.content

            return await run_with_retry(
                attempt,
                self.retry,
                stats=stats,
                log_fields={"download_url": descriptor.url},
            )
        finally:
            if should_close_session and session:
                await session.close()

    @staticmethod
    def _validated_hash(descriptor: AssetDescriptor) -> str:
        # Descriptors built with model_construct() skip pydantic validation.
        check_relative_filename(descriptor.filename)
        return validate_hash(descriptor.hash)


__all__ = ["AssetFetcher"]
