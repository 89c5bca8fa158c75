"""Download command implementation."""

import asyncio
from pathlib import Path, PurePosixPath
from typing import Optional

import typer
from pydantic import HttpUrl, ValidationError

from ...domain.exceptions import ChunkGetError, FileValidationError
from ...domain.hash_validation import HashConfig
from ...downloads import ChunkClient, FileSink
from ...downloads.validation import BaseFileValidator
from ...events import EventEmitter
from ..output.progress import ChunkProgress, display_validation_result
from ..state import CLIState


def validate_url(url_str: str) -> HttpUrl:
    """Validate and convert a URL string to HttpUrl.

    Raises:
        typer.Exit: If URL is invalid
    """
    try:
        return HttpUrl(url_str)
    except ValidationError as e:
        typer.secho(f"✗ Invalid URL: {url_str}", fg=typer.colors.RED)
        typer.secho(f"  {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def validate_hash(hash_str: str) -> HashConfig:
    """Validate and parse a hash string in format 'algorithm:hash'.

    Raises:
        typer.Exit: If hash format is invalid or algorithm is unsupported
    """
    try:
        return HashConfig.from_checksum_string(hash_str)
    except ValueError as e:
        typer.secho(f"✗ Invalid hash: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def resolve_destination(url: HttpUrl, output: Optional[Path], download_dir: Path) -> Path:
    """Pick the output file: explicit path, a directory, or the URL's basename."""
    filename = PurePosixPath(url.path or "").name or "download"
    if output is None:
        return download_dir / filename
    if output.is_dir():
        return output / filename
    return output


async def download_file(
    url: HttpUrl,
    destination: Path,
    client: ChunkClient,
    hash_config: Optional[HashConfig],
    validator: BaseFileValidator,
) -> int:
    """Core download logic with injected dependencies.

    The CLI is the caller that owns the destination file: it opens the sink
    before the download and closes it afterwards, whatever the outcome.

    Returns:
        Number of bytes written.
    """
    async with await FileSink.open(destination) as sink:
        total = await client.get_file(str(url), sink)

    if hash_config is not None:
        calculated = await validator.validate(destination, hash_config)
        display_validation_result(str(hash_config.algorithm), calculated)
    return total


def download(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL to download"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Output file or directory"
    ),
    verify_etag: bool = typer.Option(
        False,
        "--verify-etag",
        help="Fail if the resource's ETag changes between chunks",
    ),
    insecure: bool = typer.Option(
        False, "--insecure", help="Skip TLS certificate verification"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Per-request timeout in seconds", min=0.001
    ),
    hash_str: Optional[str] = typer.Option(
        None, "--hash", help="Checksum of the whole file (format: algorithm:hash)"
    ),
) -> None:
    """Download a file using concurrent byte-range requests.

    Examples:
        chunkget download https://example.com/file.iso
        chunkget -w 16 -c 4194304 download https://example.com/file.iso -o out.iso
        chunkget download https://example.com/file.iso --verify-etag
        chunkget download https://example.com/file.iso --hash sha256:abc123...
    """
    state: CLIState = ctx.obj

    validated_url = validate_url(url)
    hash_config = validate_hash(hash_str) if hash_str else None
    destination = resolve_destination(validated_url, output, state.settings.download_dir)

    emitter = EventEmitter()
    ChunkProgress().subscribe(emitter)

    async def run() -> int:
        async with state.create_http_client(insecure=insecure or None) as http_client:
            client = state.create_chunk_client(
                http_client, emitter, verify_etag=verify_etag or None, timeout=timeout
            )
            return await download_file(
                validated_url, destination, client, hash_config, state.validator
            )

    try:
        asyncio.run(run())
    except FileValidationError as e:
        typer.secho(f"✗ Validation failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except ChunkGetError as e:
        # Progress output already reported chunk failures
        typer.secho(f"Download failed: {e}", fg=typer.colors.RED)
        typer.secho(
            f"  {destination} is incomplete and should not be used",
            fg=typer.colors.YELLOW,
        )
        raise typer.Exit(code=1)
    except OSError as e:
        typer.secho(f"Download failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
