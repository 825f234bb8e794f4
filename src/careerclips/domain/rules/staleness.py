"""Staleness policy for verified clip records."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

REVALIDATION_WINDOW = timedelta(days=7)


def needs_revalidation(
    last_checked_at: datetime | None,
    now: datetime | None = None,
    window: timedelta = REVALIDATION_WINDOW,
) -> bool:
    """Return True if a record was never checked or is older than *window*.

    Naive timestamps are treated as UTC.
    """
    if last_checked_at is None:
        return True
    if now is None:
        now = datetime.now(timezone.utc)
    if last_checked_at.tzinfo is None:
        last_checked_at = last_checked_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now - last_checked_at > window
