"""Tests for CLI application wiring."""

import asyncio

from chunkget.cli.app import create_cli_app
from chunkget.cli.state import CLIState
from chunkget.config.settings import LogLevel
from chunkget.downloads import ChunkClient
from chunkget.events import NullEmitter
from chunkget.infrastructure.http import AiohttpClient


class TestCliApp:
    def test_help_lists_download_command(self, cli_runner):
        result = cli_runner.invoke(create_cli_app(), ["--help"])

        assert result.exit_code == 0
        assert "download" in result.stdout

    def test_global_options_build_settings(self, cli_runner, mocker):
        state_cls = mocker.patch("chunkget.cli.app.CLIState", wraps=CLIState)

        cli_runner.invoke(
            create_cli_app(),
            ["-w", "3", "-c", "4096", "-v", "download", "not a url"],
        )

        settings = state_cls.call_args.args[0]
        assert settings.workers == 3
        assert settings.chunk_size == 4096
        assert settings.log_level == LogLevel.DEBUG


def build_client(state: CLIState, **overrides) -> ChunkClient:
    async def _build() -> ChunkClient:
        async with state.create_http_client() as http_client:
            return state.create_chunk_client(http_client, NullEmitter(), **overrides)

    return asyncio.run(_build())


class TestCliState:
    def test_insecure_http_client_skips_verification(self, cli_settings):
        http_client = CLIState(cli_settings).create_http_client(insecure=True)

        assert isinstance(http_client, AiohttpClient)
        assert http_client._ssl_context.check_hostname is False

    def test_default_client_uses_settings(self, cli_settings):
        client = build_client(CLIState(cli_settings))

        assert client.workers == cli_settings.workers
        assert client.chunk_size == cli_settings.chunk_size
        assert client.verify_etag is False

    def test_overrides_beat_settings(self, cli_settings):
        client = build_client(CLIState(cli_settings), verify_etag=True, timeout=3.0)

        assert client.verify_etag is True
        assert client.timeout == 3.0
