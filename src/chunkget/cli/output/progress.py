"""Progress display functions for CLI, driven by download events."""

import typer

from ...events import (
    BaseEmitter,
    ChunkCompletedEvent,
    ChunkFailedEvent,
    DownloadCompletedEvent,
    DownloadFailedEvent,
    DownloadStartedEvent,
)


class ChunkProgress:
    """Counts completed chunks and prints a line per completion milestone."""

    def __init__(self, step_percent: int = 10) -> None:
        self._step_percent = step_percent
        self._total_chunks = 0
        self._done = 0
        self._last_reported = 0

    def on_started(self, event: DownloadStartedEvent) -> None:
        self._total_chunks = event.chunk_count
        typer.echo(
            f"Downloading: {event.url} "
            f"({event.total_bytes} bytes, {event.chunk_count} chunks)"
        )

    def on_chunk_completed(self, event: ChunkCompletedEvent) -> None:
        self._done += 1
        if not self._total_chunks:
            return
        percent = self._done * 100 // self._total_chunks
        if percent - self._last_reported >= self._step_percent or percent == 100:
            self._last_reported = percent
            typer.echo(f"  {percent:3d}% ({self._done}/{self._total_chunks} chunks)")

    def subscribe(self, emitter: BaseEmitter) -> None:
        emitter.on("download.started", self.on_started)
        emitter.on("chunk.completed", self.on_chunk_completed)
        emitter.on("chunk.failed", display_chunk_failed)
        emitter.on("download.completed", display_download_completed)
        emitter.on("download.failed", display_download_failed)


def display_chunk_failed(event: ChunkFailedEvent) -> None:
    typer.secho(
        f"  ✗ chunk at offset {event.offset}: {event.error_type}: {event.error_message}",
        fg=typer.colors.RED,
    )


def display_download_completed(event: DownloadCompletedEvent) -> None:
    """Display completion message from event."""
    typer.secho(
        f"✓ Downloaded: {event.url} ({event.total_bytes} bytes in "
        f"{event.elapsed_seconds:.2f}s)",
        fg=typer.colors.GREEN,
    )


def display_download_failed(event: DownloadFailedEvent) -> None:
    """Display error message from event."""
    typer.secho(f"✗ Failed: {event.url}", fg=typer.colors.RED)
    typer.secho(f"  Error: {event.error_message}", fg=typer.colors.RED)


def display_validation_result(algorithm: str, calculated_hash: str) -> None:
    typer.secho(f"✓ {algorithm} validation passed: {calculated_hash}", fg=typer.colors.GREEN)
