"""Post-download checksum validation."""

from .base import BaseFileValidator
from .validator import FileValidator

__all__ = ["BaseFileValidator", "FileValidator"]
