"""HTTP transport - aiohttp session lifecycle and TLS trust configuration."""

from .client import AiohttpClient
from .factories import (
    create_insecure_ssl_context,
    create_secure_connector,
    create_ssl_context,
)

__all__ = [
    "AiohttpClient",
    "create_insecure_ssl_context",
    "create_secure_connector",
    "create_ssl_context",
]
