import typing as t
from enum import Enum, StrEnum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WORKERS: t.Final = 8
DEFAULT_CHUNK_SIZE: t.Final = 1024 * 1024


class Environment(Enum):
    """Runtime environment for the application.

    Kept small and explicit to support simple environment-driven behavior.
    """

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(StrEnum):
    """Log levels understood by loguru."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Settings container used to bootstrap the app and the CLI.

    Values come from keyword arguments first, then ``CHUNKGET_*`` environment
    variables, then the defaults below.
    """

    model_config = SettingsConfigDict(env_prefix="CHUNKGET_", frozen=True)

    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.INFO
    workers: int = Field(default=DEFAULT_WORKERS, ge=1)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)
    verify_etag: bool = False
    timeout: float | None = Field(default=None, gt=0)
    insecure: bool = False
    download_dir: Path = Path(".")


def build_settings(**overrides: t.Any) -> Settings:
    """Build Settings, ignoring overrides that were not supplied (None)."""
    provided = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**provided)
