"""Shared fixtures for CLI tests."""

import pytest

from chunkget.cli.app import create_cli_app
from chunkget.cli.state import CLIState
from chunkget.config.settings import Environment, LogLevel, Settings
from chunkget.downloads import ChunkClient

from tests.fixtures.range_server import CONTENT


@pytest.fixture
def cli_settings(tmp_path):
    """Settings that keep downloads inside the test's temporary directory."""
    return Settings(
        environment=Environment.TESTING,
        log_level=LogLevel.CRITICAL,
        workers=5,
        chunk_size=16384,
        download_dir=tmp_path,
    )


@pytest.fixture
def mock_chunk_client(mocker):
    """ChunkClient double whose get_file writes CONTENT into the sink."""

    async def fake_get_file(url, sink):
        await sink.write_at(CONTENT, 0)
        return len(CONTENT)

    mock = mocker.Mock(spec=ChunkClient)
    mock.get_file = mocker.AsyncMock(side_effect=fake_get_file)
    return mock


@pytest.fixture
def client_factory(mocker, mock_chunk_client):
    """Factory handed to CLIState; records the overrides each command passes."""
    return mocker.Mock(return_value=mock_chunk_client)


@pytest.fixture
def cli_state(cli_settings, client_factory):
    return CLIState(cli_settings, client_factory=client_factory)


@pytest.fixture
def app_with_mock_client(cli_state):
    """CLI app whose downloads go to the mocked ChunkClient."""
    return create_cli_app(state=cli_state)
