"""
Batch runner: fetch every asset of a set, one after another.

The first terminal failure aborts the batch. Files fetched earlier in the
same run stay on disk; later assets are not attempted.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import List, Optional, Union

import aiohttp

from fixture_fetch.errors import FixtureFetchError
from fixture_fetch.fetcher import AssetFetcher
from fixture_fetch.http_client import DEFAULT_TIMEOUT_SECONDS, create_session
from fixture_fetch.logging.utilities import get_logger, log_exception, log_with_context
from fixture_fetch.models import AssetDescriptor, FetchOutcome
from fixture_fetch.retry import DEFAULT_RETRY, RetryConfig

logger = get_logger(__name__)

Assets = Union[Mapping[str, AssetDescriptor], Iterable[AssetDescriptor]]


def _iter_descriptors(assets: Assets) -> List[AssetDescriptor]:
    if isinstance(assets, Mapping):
        return list(assets.values())
    return list(assets)


async def fetch_assets(
    assets: Assets,
    output_dir: Union[str, Path],
    *,
    retry: RetryConfig = DEFAULT_RETRY,
    use_cache: bool = True,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    session: Optional[aiohttp.ClientSession] = None,
) -> List[FetchOutcome]:
    """
    Fetch and verify every asset into ``output_dir``, sequentially.

    Args:
        assets: AssetSet mapping (processed in insertion order) or a
            sequence of descriptors
        output_dir: Base directory for the fixture files
        retry: Backoff policy for transient network failures
        use_cache: Skip assets whose local copy already verifies
        timeout_seconds: Per-request timeout
        session: Optional shared aiohttp session (created and closed here
            when omitted)

    Returns:
        One FetchOutcome per asset, in processing order

    Raises:
        FixtureFetchError: The first terminal failure, with filename and
            url of the failing asset populated
    """
    descriptors = _iter_descriptors(assets)
    output_dir = Path(output_dir)
    outcomes: List[FetchOutcome] = []

    owns_session = session is None
    if session is None:
        session = create_session()

    fetcher = AssetFetcher(
        session=session,
        retry=retry,
        timeout_seconds=timeout_seconds,
        use_cache=use_cache,
    )
    try:
        for descriptor in descriptors:
            try:
                outcomes.append(await fetcher.fetch(descriptor, output_dir))
            except FixtureFetchError as e:
                e.for_asset(descriptor.filename, descriptor.url)
                log_exception(
                    logger,
                    e,
                    f"Failed to fetch {descriptor.filename}, aborting batch",
                    include_traceback=False,
                    asset=descriptor.filename,
                    download_url=descriptor.url,
                    assets_total=len(descriptors),
                    assets_fetched=len(outcomes),
                )
                raise
    finally:
        if owns_session:
            await session.close()

    cached = sum(1 for o in outcomes if o.cached)
    log_with_context(
        logger,
        logging.INFO,
        f"Fetched {len(outcomes) - cached} asset(s), {cached} already up to date",
        assets_total=len(descriptors),
        assets_fetched=len(outcomes) - cached,
        assets_cached=cached,
    )
    return outcomes


def dl_test_files(
    assets: Assets,
    output_dir: Union[str, Path],
    *,
    retry: RetryConfig = DEFAULT_RETRY,
    use_cache: bool = True,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> List[FetchOutcome]:
    """
    Blocking wrapper around fetch_assets for use from synchronous tests.

    Raises:
        FixtureFetchError: As fetch_assets
        RuntimeError: Called while an event loop is running; async callers
            must await fetch_assets instead

    Example:
        def test_decoder():
            dl_test_files(
                [AssetDescriptor(filename="a.png", hash="...", url="https://...")],
                "test-assets",
            )
            data = Path("test-assets/a.png").read_bytes()
    """
    return asyncio.run(
        fetch_assets(
            assets,
            output_dir,
            retry=retry,
            use_cache=use_cache,
            timeout_seconds=timeout_seconds,
        )
    )


__all__ = ["fetch_assets", "dl_test_files"]
