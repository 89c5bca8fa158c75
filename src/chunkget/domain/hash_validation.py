"""Checksum of a whole download, checked once every chunk is on disk."""

import enum
import hashlib
import re
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_HEX_DIGITS: Final = re.compile(r"[0-9a-f]+")


class HashAlgorithm(enum.StrEnum):
    """Digest algorithms accepted in ``<algorithm>:<hex digest>`` checksums."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def hex_length(self) -> int:
        return self.new_hasher().digest_size * 2

    def new_hasher(self) -> "hashlib._Hash":
        return hashlib.new(self.value)


class HashConfig(BaseModel):
    """Expected digest of the assembled file.

    Per-chunk ETag checks only show that every chunk came from one version
    of the resource; the digest shows it is the version the caller wanted.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    algorithm: HashAlgorithm
    expected_hash: str = Field(min_length=1, description="Lowercase hex digest")

    @field_validator("expected_hash")
    @classmethod
    def _lowercase_hex(cls, value: str) -> str:
        value = value.lower()
        if _HEX_DIGITS.fullmatch(value) is None:
            raise ValueError("Expected hash must be hexadecimal")
        return value

    @model_validator(mode="after")
    def _check_digest_length(self) -> "HashConfig":
        required = self.algorithm.hex_length
        if len(self.expected_hash) != required:
            raise ValueError(
                f"{self.algorithm} digest must be {required} hex characters, "
                f"got {len(self.expected_hash)}"
            )
        return self

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.expected_hash}"

    @classmethod
    def from_checksum_string(cls, checksum: str) -> "HashConfig":
        """Parse ``<algorithm>:<hex digest>``, e.g. ``sha256:9f86d0...``."""
        name, separator, digest = checksum.partition(":")
        if not separator:
            raise ValueError("Checksum must be in format '<algorithm>:<hash>'")

        name = name.strip().lower()
        try:
            algorithm = HashAlgorithm(name)
        except ValueError:
            supported = ", ".join(HashAlgorithm)
            raise ValueError(
                f"Unsupported hash algorithm '{name}' (expected one of: {supported})"
            ) from None
        return cls(algorithm=algorithm, expected_hash=digest)
