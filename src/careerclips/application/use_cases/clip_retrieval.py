"""Consumer-facing retrieval of verified clips."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import structlog

from careerclips.domain.entities import (
    CategoryClips,
    ClipFilter,
    ClipForDisplay,
    ClipRecord,
    VerifiedStatus,
)
from careerclips.domain.ports import ClipRepository, RevalidationSchedulerPort
from careerclips.domain.rules.platform import category_label, source_label
from careerclips.domain.rules.staleness import REVALIDATION_WINDOW, needs_revalidation

log = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_display(record: ClipRecord) -> ClipForDisplay:
    """Project a record onto the fields display consumers may see."""
    return ClipForDisplay(
        id=record.id,
        career_slug=record.career_slug,
        category_slug=record.category_slug,
        title=record.title,
        platform=record.platform,
        url=record.url,
        thumbnail_url=record.thumbnail_url,
        duration_secs=record.duration_secs,
        source_label=record.source_label or source_label(record.platform),
    )


class ClipRetrievalUseCase:
    """Lists VALID clips and hands stale ones to background revalidation.

    The VALID filter is applied here, not by callers, and cannot be
    relaxed. Revalidation is submitted after the result set is built;
    the caller never waits for it and never sees its errors.
    """

    def __init__(
        self,
        repo: ClipRepository,
        scheduler: RevalidationSchedulerPort | None = None,
        *,
        revalidation_window: timedelta = REVALIDATION_WINDOW,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.repo = repo
        self.scheduler = scheduler
        self._window = revalidation_window
        self._now = now

    async def list_valid_clips(
        self,
        career_slug: str | None = None,
        category_slug: str | None = None,
        limit: int = 6,
    ) -> list[ClipForDisplay]:
        records = await self.repo.find_many(
            ClipFilter(
                status=VerifiedStatus.VALID,
                career_slug=career_slug,
                category_slug=category_slug,
            ),
            limit=limit,
        )
        self._schedule_stale(records)
        return [to_display(r) for r in records]

    async def list_clips_by_category(
        self, per_category_limit: int = 2
    ) -> list[CategoryClips]:
        """Group VALID clips by category, keeping at most N per category.

        Categories appear in the order their first clip sorts.
        """
        records = await self.repo.find_many(ClipFilter(status=VerifiedStatus.VALID))

        grouped: dict[str, list[ClipRecord]] = {}
        for record in records:
            bucket = grouped.setdefault(record.category_slug, [])
            if len(bucket) < per_category_limit:
                bucket.append(record)

        kept = [r for bucket in grouped.values() for r in bucket]
        self._schedule_stale(kept)

        return [
            CategoryClips(
                category=slug,
                category_label=category_label(slug),
                clips=[to_display(r) for r in bucket],
            )
            for slug, bucket in grouped.items()
            if bucket
        ]

    def _schedule_stale(self, records: list[ClipRecord]) -> None:
        if self.scheduler is None or not records:
            return
        now = self._now()
        stale = [
            r.id
            for r in records
            if needs_revalidation(r.last_checked_at, now, self._window)
        ]
        if not stale:
            return
        try:
            self.scheduler.submit(stale)
        except Exception:
            log.error("revalidation_submit_error", count=len(stale), exc_info=True)
