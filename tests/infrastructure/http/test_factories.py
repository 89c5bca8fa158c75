"""Tests for TLS context and connector factories."""

import ssl

import aiohttp
import pytest

from chunkget.infrastructure.http import (
    create_insecure_ssl_context,
    create_secure_connector,
    create_ssl_context,
)


class TestCreateSslContext:
    def test_verifies_certificates(self) -> None:
        ctx = create_ssl_context()
        assert ctx.verify_mode == ssl.CERT_REQUIRED
        assert ctx.check_hostname

    def test_uses_certifi_ca_bundle(self) -> None:
        assert create_ssl_context().cert_store_stats()["x509_ca"] > 0


class TestCreateInsecureSslContext:
    def test_skips_verification(self) -> None:
        ctx = create_insecure_ssl_context()
        assert ctx.verify_mode == ssl.CERT_NONE
        assert not ctx.check_hostname


class TestCreateSecureConnector:
    @pytest.mark.asyncio
    async def test_returns_tcp_connector(self) -> None:
        connector = create_secure_connector()
        assert isinstance(connector, aiohttp.TCPConnector)
        await connector.close()

    @pytest.mark.asyncio
    async def test_accepts_custom_ssl_context(self) -> None:
        custom_ctx = ssl.create_default_context()
        connector = create_secure_connector(ssl=custom_ctx)
        assert connector._ssl is custom_ctx
        await connector.close()

    @pytest.mark.asyncio
    async def test_accepts_connector_kwargs(self) -> None:
        connector = create_secure_connector(limit=50)
        assert connector.limit == 50
        await connector.close()
