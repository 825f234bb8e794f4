"""Seeding of the default career clip catalogue."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import structlog

from careerclips.application.use_cases.clip_validation import ClipValidationUseCase
from careerclips.domain.entities import (
    ClipPlatform,
    ClipRecord,
    SeedSummary,
    VerifiedStatus,
)
from careerclips.domain.ports import ClipRepository
from careerclips.domain.rules.platform import platform_thumbnail, source_label

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SeedClip:
    career_slug: str
    category_slug: str
    title: str
    platform: ClipPlatform
    url: str


_YT = ClipPlatform.YOUTUBE_SHORTS

DEFAULT_SEED_CLIPS: tuple[SeedClip, ...] = (
    # Healthcare
    SeedClip("nurse", "healthcare", "Day in the life of an ER nurse", _YT,
             "https://www.youtube.com/shorts/JQ3oJG8h4aI"),
    SeedClip("doctor", "healthcare", "Medical school journey", _YT,
             "https://www.youtube.com/shorts/5XG8yBQh5jA"),
    # Technology
    SeedClip("software-engineer", "technology", "What software engineers actually do", _YT,
             "https://www.youtube.com/shorts/Nf4rDU5ynhA"),
    SeedClip("data-scientist", "technology", "Data science explained", _YT,
             "https://www.youtube.com/shorts/X3paOmcrTjQ"),
    # Skilled trades
    SeedClip("electrician", "trades", "Becoming an electrician", _YT,
             "https://www.youtube.com/shorts/qg7zDwL6GQE"),
    SeedClip("plumber", "trades", "Plumbing apprenticeship", _YT,
             "https://www.youtube.com/shorts/3YDqL0MrQtQ"),
    # Creative arts
    SeedClip("graphic-designer", "creative", "Graphic design career path", _YT,
             "https://www.youtube.com/shorts/uN4g0Sr3jOI"),
    SeedClip("photographer", "creative", "Life as a professional photographer", _YT,
             "https://www.youtube.com/shorts/zIwLWfaAg-8"),
    # Business
    SeedClip("marketing-manager", "business", "Marketing career insights", _YT,
             "https://www.youtube.com/shorts/gkgYwY1V3Fs"),
    SeedClip("accountant", "business", "Why I became an accountant", _YT,
             "https://www.youtube.com/shorts/Mh2ebPxhoLs"),
    # Education
    SeedClip("teacher", "education", "Teaching career reality", _YT,
             "https://www.youtube.com/shorts/RFDOI24RRAE"),
    SeedClip("school-counselor", "education", "School counselor day in the life", _YT,
             "https://www.youtube.com/shorts/vxQI8FKSI6Y"),
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ClipSeedUseCase:
    """Creates the default catalogue once and validates it.

    On a non-empty store nothing is created; leftover NOT_CHECKED clips
    are validated by a background task instead.
    """

    def __init__(
        self,
        repo: ClipRepository,
        validation: ClipValidationUseCase,
        *,
        seed_clips: tuple[SeedClip, ...] = DEFAULT_SEED_CLIPS,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.repo = repo
        self.validation = validation
        self._seed_clips = seed_clips
        self._now = now
        self._background: asyncio.Task | None = None

    def _build_records(self) -> list[ClipRecord]:
        base = self._now()
        records: list[ClipRecord] = []
        for order, clip in enumerate(self._seed_clips):
            records.append(
                ClipRecord(
                    id=uuid.uuid4().hex,
                    career_slug=clip.career_slug,
                    category_slug=clip.category_slug,
                    title=clip.title,
                    platform=clip.platform,
                    url=clip.url,
                    display_order=order,
                    thumbnail_url=platform_thumbnail(clip.platform, clip.url),
                    verified_status=VerifiedStatus.NOT_CHECKED,
                    source_label=source_label(clip.platform),
                    # Later entries are newer.
                    created_at=base + timedelta(microseconds=order),
                )
            )
        return records

    async def seed(self) -> SeedSummary:
        existing = await self.repo.count()
        if existing > 0:
            pending = await self.repo.count(VerifiedStatus.NOT_CHECKED)
            if pending > 0:
                self._start_background_validation()
            log.info("seed_skipped", existing=existing, pending=pending)
            return SeedSummary(created=0, validated=0)

        created = await self.repo.create_many(self._build_records())
        log.info("seed_created", created=created)

        summary = await self.validation.validate_all_pending()
        return SeedSummary(created=created, validated=summary.valid)

    def _start_background_validation(self) -> None:
        if self._background is not None and not self._background.done():
            return
        self._background = asyncio.get_running_loop().create_task(
            self._validate_pending_in_background(), name="seed:validate-pending"
        )

    async def _validate_pending_in_background(self) -> None:
        try:
            await self.validation.validate_all_pending()
        except asyncio.CancelledError:
            raise
        except Exception:
            log.error("seed_background_validation_error", exc_info=True)

    async def wait_background(self) -> None:
        """Await a running background validation, if any."""
        if self._background is not None:
            await self._background

    async def aclose(self) -> None:
        if self._background is not None and not self._background.done():
            self._background.cancel()
            with suppress(asyncio.CancelledError):
                await self._background
