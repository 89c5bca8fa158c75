"""CLI state container."""

import typing as t

from ..config.settings import Settings
from ..downloads import ChunkClient, FileValidator
from ..downloads.validation import BaseFileValidator
from ..events import BaseEmitter
from ..infrastructure.http import (
    AiohttpClient,
    create_insecure_ssl_context,
    create_ssl_context,
)
from ..infrastructure.logging import get_logger

ChunkClientFactory = t.Callable[..., ChunkClient]


class CLIState:
    """Shared state for CLI commands: settings plus dependency factories.

    Factories are injectable so tests can swap in mocks without touching the
    network.
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: ChunkClientFactory | None = None,
        validator: BaseFileValidator | None = None,
    ):
        self.settings = settings
        self._client_factory = client_factory or self._default_client_factory
        self.validator = validator or FileValidator()

    def create_http_client(self, insecure: bool | None = None) -> AiohttpClient:
        """Create an HTTP client honouring the TLS verification setting."""
        skip_verify = self.settings.insecure if insecure is None else insecure
        ssl_context = create_insecure_ssl_context() if skip_verify else create_ssl_context()
        return AiohttpClient(ssl_context=ssl_context)

    def create_chunk_client(
        self,
        http_client: AiohttpClient,
        emitter: BaseEmitter,
        **overrides: t.Any,
    ) -> ChunkClient:
        return self._client_factory(
            http_client=http_client, emitter=emitter, **overrides
        )

    def _default_client_factory(
        self,
        http_client: AiohttpClient,
        emitter: BaseEmitter,
        verify_etag: bool | None = None,
        timeout: float | None = None,
    ) -> ChunkClient:
        return ChunkClient(
            http_client.session,
            workers=self.settings.workers,
            chunk_size=self.settings.chunk_size,
            verify_etag=self.settings.verify_etag if verify_etag is None else verify_etag,
            timeout=self.settings.timeout if timeout is None else timeout,
            logger=get_logger("chunkget.cli"),
            emitter=emitter,
        )
