"""Checksum validation of an assembled download."""

import hmac
import stat
import typing as t
from pathlib import Path

import aiofiles
import aiofiles.os

from ...domain.exceptions import FileAccessError, HashMismatchError
from ...domain.hash_validation import HashAlgorithm, HashConfig
from ...infrastructure.logging import get_logger
from .base import BaseFileValidator

if t.TYPE_CHECKING:
    from loguru import Logger


class FileValidator(BaseFileValidator):
    """Reads a finished download back and compares its digest.

    Chunks land out of order, so hashing can only start once the whole file
    is written. The file is read sequentially in ``read_size`` blocks.
    """

    def __init__(
        self,
        *,
        read_size: int = 1024 * 1024,
        logger: t.Optional["Logger"] = None,
    ) -> None:
        self._read_size = read_size
        self._logger = logger or get_logger(__name__)

    async def validate(self, file_path: Path, config: HashConfig) -> str:
        try:
            info = await aiofiles.os.stat(file_path)
        except FileNotFoundError as exc:
            raise FileAccessError(f"File not found for validation: {file_path}") from exc
        except OSError as exc:
            raise FileAccessError(f"Unable to stat {file_path}: {exc}") from exc
        if not stat.S_ISREG(info.st_mode):
            raise FileAccessError(f"Not a regular file: {file_path}")

        try:
            actual_hash = await self._digest(file_path, config.algorithm)
        except OSError as exc:
            raise FileAccessError(f"Unable to read {file_path}: {exc}") from exc

        if not hmac.compare_digest(actual_hash, config.expected_hash):
            raise HashMismatchError(
                expected_hash=config.expected_hash,
                actual_hash=actual_hash,
                file_path=file_path,
            )

        self._logger.debug(
            f"{config.algorithm} matches for {file_path} ({info.st_size} bytes)"
        )
        return actual_hash

    async def _digest(self, file_path: Path, algorithm: HashAlgorithm) -> str:
        hasher = algorithm.new_hasher()
        async with aiofiles.open(file_path, "rb") as handle:
            while block := await handle.read(self._read_size):
                hasher.update(block)
        return hasher.hexdigest()
