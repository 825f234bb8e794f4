"""Process-local clip store for tests, demos and the ``memory`` backend."""

from __future__ import annotations

import asyncio

from careerclips.domain.entities.clip import (
    ClipFilter,
    ClipNotFoundError,
    ClipRecord,
    ClipUpdate,
    VerifiedStatus,
)
from careerclips.infrastructure.persistence.ordering import apply_update, select


class InMemoryClipRepository:
    """Dict-backed ClipRepository.

    Insertion order is preserved, so ``find_many`` ties fall back to
    creation order like a relational store with a stable index.
    """

    def __init__(self, records: list[ClipRecord] | None = None) -> None:
        self._records: dict[str, ClipRecord] = {}
        self._lock = asyncio.Lock()
        for record in records or []:
            self._records[record.id] = record

    async def find_many(
        self, where: ClipFilter, *, limit: int | None = None
    ) -> list[ClipRecord]:
        return select(list(self._records.values()), where, limit)

    async def get(self, clip_id: str) -> ClipRecord | None:
        return self._records.get(clip_id)

    async def update(self, clip_id: str, changes: ClipUpdate) -> ClipRecord:
        async with self._lock:
            record = self._records.get(clip_id)
            if record is None:
                raise ClipNotFoundError(clip_id)
            updated = apply_update(record, changes)
            self._records[clip_id] = updated
            return updated

    async def count(self, status: VerifiedStatus | None = None) -> int:
        if status is None:
            return len(self._records)
        return sum(1 for r in self._records.values() if r.verified_status == status)

    async def create_many(self, records: list[ClipRecord]) -> int:
        async with self._lock:
            for record in records:
                self._records[record.id] = record
        return len(records)
