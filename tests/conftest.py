"""Pytest configuration and fixtures for chunkget tests."""

import hashlib
import typing as t

import loguru
import pytest
import pytest_asyncio
from aiohttp import ClientSession
from typer.testing import CliRunner

from chunkget.app import create_app
from chunkget.config.settings import Environment, LogLevel, Settings
from chunkget.domain.hash_validation import HashAlgorithm
from chunkget.events import BaseEmitter, EventEmitter
from chunkget.infrastructure.logging import reset_logging


@pytest.fixture
def test_settings() -> Settings:
    """Provide test-specific settings."""
    return Settings(
        environment=Environment.TESTING,
        log_level=LogLevel.CRITICAL,  # Minimal logging during tests
    )


@pytest.fixture
def test_app(test_settings):
    """Provide a test app with clean logging state."""
    reset_logging()
    app = create_app(settings=test_settings)
    yield app
    reset_logging()


@pytest.fixture
def mock_logger(mocker):
    """Provide a mock logger for testing that captures log calls."""
    return mocker.Mock(spec=loguru.logger)


@pytest.fixture
def mock_emitter(mocker):
    """Provide a mock event emitter for testing event emission."""
    emitter = mocker.Mock(spec=BaseEmitter)
    emitter.emit = mocker.AsyncMock()
    return emitter


@pytest.fixture
def real_emitter(mock_logger) -> EventEmitter:
    """Provide a real EventEmitter for tests that subscribe to events."""
    return EventEmitter(mock_logger)


@pytest.fixture(autouse=True)
def clean_logging_state() -> t.Iterator[None]:
    """Automatically reset logging before each test for isolation."""
    reset_logging()
    yield
    reset_logging()


@pytest_asyncio.fixture
async def aio_client() -> t.AsyncIterator[ClientSession]:
    """Provide a real aiohttp ClientSession for integration testing."""
    session = ClientSession()
    yield session
    await session.close()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def calculate_hash() -> t.Callable[[bytes, HashAlgorithm], str]:
    """Factory fixture to calculate the hex digest of test content.

    Usage:
        def test_something(calculate_hash):
            hash_value = calculate_hash(b"content", HashAlgorithm.SHA256)
    """

    def _calculate(content: bytes, algorithm: HashAlgorithm) -> str:
        return hashlib.new(algorithm.value, content).hexdigest()

    return _calculate
