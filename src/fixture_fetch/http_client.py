"""
HTTP boundary built on aiohttp.

download_bytes performs one GET and either returns the full body or raises
TransientNetworkError. Retrying is the caller's concern.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import aiohttp

from fixture_fetch.errors import TransientNetworkError, classify_http_status

DEFAULT_TIMEOUT_SECONDS = 60


@dataclass
class DownloadResponse:
    """Body and metadata of a successful GET."""

    content: bytes
    status_code: int
    content_type: Optional[str] = None


def create_session() -> aiohttp.ClientSession:
    """Create a client session for a sequential batch (one connection)."""
    connector = aiohttp.TCPConnector(limit=1)
    return aiohttp.ClientSession(connector=connector)


async def download_bytes(
    session: aiohttp.ClientSession,
    url: str,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> DownloadResponse:
    """
    GET ``url`` and read the whole body into memory.

    Args:
        session: aiohttp session
        url: Source URL
        timeout_seconds: Total per-request timeout

    Returns:
        DownloadResponse for a 2xx answer

    Raises:
        TransientNetworkError: Connection failure, timeout, broken body or
            non-2xx status
    """
    try:
        async with session.get(
            url,
            timeout=aiohttp.ClientTimeout(total=timeout_seconds),
            allow_redirects=True,
        ) as response:
            if classify_http_status(response.status) is not None:
                raise TransientNetworkError(
                    f"HTTP {response.status} from {url}",
                    status_code=response.status,
                    url=url,
                )
            content = await response.read()
            return DownloadResponse(
                content=content,
                status_code=response.status,
                content_type=response.headers.get("Content-Type"),
            )

    except asyncio.TimeoutError as e:
        raise TransientNetworkError(
            f"Timeout after {timeout_seconds}s: {url}", cause=e, url=url
        ) from e

    except aiohttp.ClientError as e:
        raise TransientNetworkError(
            f"Connection error: {url}", cause=e, url=url
        ) from e


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "DownloadResponse",
    "create_session",
    "download_bytes",
]
