"""Tests for the aiohttp download boundary against an in-process server."""

import pytest

from fixture_fetch.errors import ErrorCategory, TransientNetworkError, classify_http_status
from fixture_fetch.http_client import create_session, download_bytes


class TestClassifyHttpStatus:
    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success(self, status):
        assert classify_http_status(status) is None

    @pytest.mark.parametrize("status", [301, 400, 403, 404, 429, 500, 503])
    def test_non_2xx_is_transient(self, status):
        assert classify_http_status(status) == ErrorCategory.TRANSIENT


class TestDownloadBytes:
    @pytest.mark.asyncio
    async def test_returns_full_body(self, fixture_server):
        fixture_server.add("a.bin", b"hello")

        async with create_session() as session:
            response = await download_bytes(session, fixture_server.url("a.bin"))

        assert response.content == b"hello"
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self, fixture_server):
        fixture_server.add("broken.bin", b"", status=500)

        async with create_session() as session:
            with pytest.raises(TransientNetworkError) as excinfo:
                await download_bytes(session, fixture_server.url("broken.bin"))

        assert excinfo.value.status_code == 500
        assert excinfo.value.url == fixture_server.url("broken.bin")
        assert excinfo.value.is_retryable is True

    @pytest.mark.asyncio
    async def test_not_found_is_transient(self, fixture_server):
        async with create_session() as session:
            with pytest.raises(TransientNetworkError) as excinfo:
                await download_bytes(session, fixture_server.url("missing.bin"))

        assert excinfo.value.status_code == 404

    @pytest.mark.asyncio
    async def test_connection_refused_is_transient(self, unused_port):
        url = f"http://127.0.0.1:{unused_port}/a.bin"

        async with create_session() as session:
            with pytest.raises(TransientNetworkError, match="Connection error") as excinfo:
                await download_bytes(session, url, timeout_seconds=5)

        assert excinfo.value.status_code is None
        assert excinfo.value.cause is not None

    @pytest.mark.asyncio
    async def test_timeout_is_transient(self, fixture_server):
        fixture_server.add("slow.bin", b"late", delay=1.0)

        async with create_session() as session:
            with pytest.raises(TransientNetworkError, match="Timeout"):
                await download_bytes(
                    session, fixture_server.url("slow.bin"), timeout_seconds=0.1
                )
