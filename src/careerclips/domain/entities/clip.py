"""Domain entities for career clips and their verification state.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class VerifiedStatus(str, Enum):
    """Verification state of a clip record.

    Only ``VALID`` records are ever shown to consumers.
    """

    NOT_CHECKED = "NOT_CHECKED"
    VALID = "VALID"
    INVALID = "INVALID"


class ClipPlatform(str, Enum):
    """Hosting platform of a clip (closed set)."""

    TIKTOK = "TIKTOK"
    YOUTUBE_SHORTS = "YOUTUBE_SHORTS"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ClipRecord:
    """Persisted clip with its verification state.

    ``url`` is never mutated once set; ``verified_status``,
    ``last_checked_at`` and ``check_fail_reason`` are written only by
    the validate-and-persist operation.
    """

    id: str
    career_slug: str
    category_slug: str
    title: str
    platform: ClipPlatform
    url: str
    duration_secs: int | None = None
    display_order: int = 0
    thumbnail_url: str | None = None
    verified_status: VerifiedStatus = VerifiedStatus.NOT_CHECKED
    last_checked_at: datetime | None = None
    check_fail_reason: str | None = None
    source_label: str = ""
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ClipForDisplay:
    """Consumer-facing projection of a clip.

    Deliberately omits verified_status, last_checked_at and
    check_fail_reason.
    """

    id: str
    career_slug: str
    category_slug: str
    title: str
    platform: ClipPlatform
    url: str
    thumbnail_url: str | None
    duration_secs: int | None
    source_label: str


@dataclass(frozen=True)
class CategoryClips:
    """Clips of one category with a human-readable label."""

    category: str
    category_label: str
    clips: list[ClipForDisplay] = field(default_factory=list)


@dataclass(frozen=True)
class ClipFilter:
    """Query filter for the clip store.

    ``status=None`` means "any status" and is only used by
    administrative paths; consumer reads always pin ``VALID``.
    """

    status: VerifiedStatus | None = None
    career_slug: str | None = None
    category_slug: str | None = None

    def matches(self, record: ClipRecord) -> bool:
        if self.status is not None and record.verified_status != self.status:
            return False
        if self.career_slug is not None and record.career_slug != self.career_slug:
            return False
        if (
            self.category_slug is not None
            and record.category_slug != self.category_slug
        ):
            return False
        return True


@dataclass(frozen=True)
class ClipUpdate:
    """Single-record update written after a verification run."""

    verified_status: VerifiedStatus
    last_checked_at: datetime
    check_fail_reason: str | None
    thumbnail_url: str | None
    source_label: str


class ClipNotFoundError(LookupError):
    """Raised by stores and API lookups for an unknown clip id."""

    def __init__(self, clip_id: str) -> None:
        super().__init__(f"Clip not found: {clip_id}")
        self.clip_id = clip_id
