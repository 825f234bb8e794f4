"""Port for clip record persistence."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from careerclips.domain.entities.clip import (
    ClipFilter,
    ClipRecord,
    ClipUpdate,
    VerifiedStatus,
)


@runtime_checkable
class ClipRepository(Protocol):
    """Async read/write contract for clip records.

    Implementations return records of ``find_many`` ordered by
    ``display_order`` ascending, then ``created_at`` descending.
    No transactions beyond single-record updates.
    """

    async def find_many(
        self, where: ClipFilter, *, limit: int | None = None
    ) -> list[ClipRecord]: ...

    async def get(self, clip_id: str) -> ClipRecord | None: ...

    async def update(self, clip_id: str, changes: ClipUpdate) -> ClipRecord:
        """Apply *changes* to one record.

        Raises:
            ClipNotFoundError: No record with *clip_id*.
        """
        ...

    async def count(self, status: VerifiedStatus | None = None) -> int: ...

    async def create_many(self, records: list[ClipRecord]) -> int: ...
