"""Shared test fixtures for CareerClips test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from careerclips.domain.entities import (
    ClipPlatform,
    ClipRecord,
    ValidationResult,
    VerifiedStatus,
)
from careerclips.infrastructure.persistence.in_memory_clip_repo import (
    InMemoryClipRepository,
)

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


def make_clip(
    clip_id: str = "clip-1",
    *,
    career_slug: str = "nurse",
    category_slug: str = "healthcare",
    platform: ClipPlatform = ClipPlatform.YOUTUBE_SHORTS,
    url: str = "https://www.youtube.com/shorts/JQ3oJG8h4aI",
    status: VerifiedStatus = VerifiedStatus.VALID,
    last_checked_at: datetime | None = NOW - timedelta(days=1),
    display_order: int = 0,
    created_at: datetime = NOW - timedelta(days=30),
    source_label: str = "YouTube Shorts (verified link)",
    thumbnail_url: str | None = None,
) -> ClipRecord:
    """ClipRecord with sensible defaults; override what the test cares about."""
    return ClipRecord(
        id=clip_id,
        career_slug=career_slug,
        category_slug=category_slug,
        title=f"Clip {clip_id}",
        platform=platform,
        url=url,
        display_order=display_order,
        thumbnail_url=thumbnail_url,
        verified_status=status,
        last_checked_at=last_checked_at,
        source_label=source_label,
        created_at=created_at,
    )


@pytest.fixture()
def now() -> datetime:
    """Fixed evaluation time shared by clip fixtures."""
    return NOW


@pytest.fixture()
def clip_factory():
    """Factory building ClipRecords (see make_clip)."""
    return make_clip


@pytest.fixture()
def clip() -> ClipRecord:
    """A VALID, recently checked YouTube Shorts clip."""
    return make_clip()


@pytest.fixture()
def repo() -> InMemoryClipRepository:
    """Empty in-memory clip store."""
    return InMemoryClipRepository()


# ---------------------------------------------------------------------------
# Port mocks
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_prober() -> AsyncMock:
    """LinkProberPort that accepts every URL."""
    prober = AsyncMock()
    prober.probe = AsyncMock(
        return_value=ValidationResult.ok(final_url="https://www.youtube.com/", status_code=200)
    )
    return prober


@pytest.fixture()
def mock_scheduler() -> MagicMock:
    """RevalidationSchedulerPort recording submitted ids."""
    scheduler = MagicMock()
    scheduler.submit = MagicMock(side_effect=lambda ids: len(ids))
    return scheduler


@pytest.fixture()
def mock_store() -> AsyncMock:
    """RecordStorePort mock; every key reads as absent."""
    store = AsyncMock()
    store.get = AsyncMock(return_value=None)
    store.put = AsyncMock()
    store.put_many = AsyncMock()
    return store
