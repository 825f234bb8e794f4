"""Shared query semantics for clip stores without a query engine."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from careerclips.domain.entities.clip import ClipFilter, ClipRecord, ClipUpdate


def select(
    records: Iterable[ClipRecord], where: ClipFilter, limit: int | None
) -> list[ClipRecord]:
    """Filter, order (display_order asc, created_at desc) and cap *records*."""
    matching = [r for r in records if where.matches(r)]
    # Two stable sorts: secondary key first, then primary.
    matching.sort(key=lambda r: r.created_at, reverse=True)
    matching.sort(key=lambda r: r.display_order)
    if limit is not None:
        return matching[: max(limit, 0)]
    return matching


def apply_update(record: ClipRecord, changes: ClipUpdate) -> ClipRecord:
    return replace(
        record,
        verified_status=changes.verified_status,
        last_checked_at=changes.last_checked_at,
        check_fail_reason=changes.check_fail_reason,
        thumbnail_url=changes.thumbnail_url,
        source_label=changes.source_label,
    )
