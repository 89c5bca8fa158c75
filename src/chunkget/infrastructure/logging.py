"""Logging setup built on loguru.

Loguru keeps a single global logger; this module owns its handler
configuration so the rest of the package only ever calls ``get_logger``.
"""

import sys
import typing as t

from loguru import logger

from ..config.settings import Environment, LogLevel, Settings

if t.TYPE_CHECKING:
    import loguru

_DEVELOPMENT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_configured = False


def configure_logger(
    level: LogLevel = LogLevel.INFO,
    environment: Environment = Environment.DEVELOPMENT,
) -> None:
    """Replace loguru's handlers with one suited to the environment.

    Production emits JSON lines; development and testing use a readable,
    colourised format on stderr.
    """
    global _configured

    logger.remove()
    logger.configure(extra={"name": "chunkget"})
    if environment is Environment.PRODUCTION:
        logger.add(sys.stderr, level=str(level), serialize=True)
    else:
        logger.add(
            sys.stderr,
            level=str(level),
            format=_DEVELOPMENT_FORMAT,
            colorize=environment is Environment.DEVELOPMENT,
        )
    _configured = True


def setup_logging(settings: Settings) -> None:
    """Configure logging from application settings."""
    configure_logger(level=settings.log_level, environment=settings.environment)


def get_logger(name: str) -> "loguru.Logger":
    """Return the shared logger bound to ``name``.

    Configures defaults on first use so library code works without an
    explicit ``setup_logging`` call.
    """
    if not _configured:
        configure_logger()
    return logger.bind(name=name)


def reset_logging() -> None:
    """Drop all handlers so the next ``get_logger`` reconfigures from scratch."""
    global _configured

    logger.remove()
    _configured = False
