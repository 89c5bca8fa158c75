"""Factories for TLS contexts and connectors."""

import ssl
import typing as t

import aiohttp
import certifi


def create_ssl_context() -> ssl.SSLContext:
    """Create an SSL context that trusts certifi's CA bundle.

    Using certifi gives the same trust store on every platform; some Python
    builds (e.g. macOS framework installs) ship without usable system certs.
    """
    return ssl.create_default_context(cafile=certifi.where())


def create_insecure_ssl_context() -> ssl.SSLContext:
    """Create an SSL context that skips certificate and hostname checks.

    Only meant for test servers with self-signed certificates.
    """
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def create_secure_connector(
    ssl: ssl.SSLContext | None = None, **kwargs: t.Any
) -> aiohttp.TCPConnector:
    """Create a TCPConnector using ``ssl`` or the certifi-backed default."""
    return aiohttp.TCPConnector(ssl=ssl or create_ssl_context(), **kwargs)
