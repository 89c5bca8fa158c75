"""CLI application factory."""

from typing import Optional

import typer

from ..app import create_app
from ..config.settings import LogLevel, Settings, build_settings
from .commands.download import download
from .state import CLIState


def create_cli_app(
    settings: Settings | None = None, state: CLIState | None = None
) -> typer.Typer:
    """Create CLI application with optional settings or state override.

    Args:
        settings: Optional Settings override for testing
        state: Optional fully built CLIState (takes precedence over settings)

    Returns:
        Configured Typer application with commands registered
    """
    app = typer.Typer(
        name="chunkget",
        help="chunkget - parallel chunked HTTP downloads using Range requests",
        no_args_is_help=True,
    )

    @app.callback()
    def setup(
        ctx: typer.Context,
        workers: Optional[int] = typer.Option(
            None,
            "--workers",
            "-w",
            help="Number of concurrent chunk fetches",
            min=1,
        ),
        chunk_size: Optional[int] = typer.Option(
            None,
            "--chunk-size",
            "-c",
            help="Chunk size in bytes",
            min=1,
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Enable verbose output (DEBUG logging)",
        ),
    ) -> None:
        """Global options available to all commands."""
        if state is not None:
            resolved_state = state
        else:
            resolved_settings = settings or build_settings(
                workers=workers,
                chunk_size=chunk_size,
                log_level=LogLevel.DEBUG if verbose else None,
            )
            resolved_state = CLIState(resolved_settings)

        create_app(resolved_state.settings)
        ctx.obj = resolved_state

    app.command()(download)
    return app
