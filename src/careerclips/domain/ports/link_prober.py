"""Port for probing clip URLs over the network."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from careerclips.domain.entities.validation import ValidationResult


@runtime_checkable
class LinkProberPort(Protocol):
    """Checks that an allowlisted URL is reachable without downloading it.

    Implementations try a lightweight request first and fall back to a
    ranged GET when the host refuses it. Never raises: every failure is
    returned as ``ValidationResult(is_valid=False, reason=...)``.
    """

    async def probe(self, url: str, redirect_count: int = 0) -> ValidationResult:
        """Probe *url*, following allowlisted redirects manually.

        Args:
            url: URL that already passed the format check.
            redirect_count: Hops followed so far (0 for the first call).
        """
        ...
