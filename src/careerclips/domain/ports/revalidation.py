"""Port for background revalidation of stale clips."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RevalidationSchedulerPort(Protocol):
    """Fire-and-forget submission of clip ids for revalidation.

    ``submit`` never blocks on the revalidation itself and never raises
    on its outcome. The caller receives no handle to await or cancel.
    """

    def submit(self, clip_ids: list[str]) -> int:
        """Schedule revalidation; return how many ids were newly scheduled."""
        ...
