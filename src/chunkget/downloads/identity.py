"""Consistency Verifier: cross-chunk ETag comparison against a set-once baseline."""

from ..domain.exceptions import ResourceChangedError


class IdentityVerifier:
    """Detects a resource being replaced on the server mid-download.

    The first tag observed becomes the baseline; every later tag must match
    it. One verifier lives for exactly one download.

    Workers share the verifier. ``verify`` never awaits, so under asyncio the
    check-and-set of the baseline runs uninterrupted and acts as a
    compare-and-set-if-absent.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._baseline: str | None = None

    @property
    def baseline(self) -> str | None:
        return self._baseline

    def verify(self, offset: int, identity_tag: str | None) -> None:
        """Check ``identity_tag`` seen on the chunk at ``offset``.

        A missing tag is not a mismatch: with nothing to compare, the chunk
        passes.

        Raises:
            ResourceChangedError: If a baseline exists and the tag differs.
        """
        if not self.enabled or identity_tag is None:
            return
        if self._baseline is None:
            self._baseline = identity_tag
            return
        if identity_tag != self._baseline:
            raise ResourceChangedError(
                offset=offset,
                expected_tag=self._baseline,
                actual_tag=identity_tag,
            )
