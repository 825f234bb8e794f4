"""Clip repository over a durable record store (diskcache or redis)."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

import structlog

from careerclips.domain.entities.clip import (
    ClipFilter,
    ClipNotFoundError,
    ClipPlatform,
    ClipRecord,
    ClipUpdate,
    VerifiedStatus,
)
from careerclips.domain.ports.record_store import RecordStorePort
from careerclips.infrastructure.persistence.ordering import apply_update, select

log = structlog.get_logger(__name__)

_INDEX_KEY = "clip:index"


def _record_key(clip_id: str) -> str:
    return f"clip:{clip_id}"


def _dt_to_str(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _dt_from_str(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _serialize_clip(record: ClipRecord) -> str:
    """Serialize ClipRecord to JSON string."""
    return json.dumps(
        {
            "id": record.id,
            "career_slug": record.career_slug,
            "category_slug": record.category_slug,
            "title": record.title,
            "platform": record.platform.value,
            "url": record.url,
            "duration_secs": record.duration_secs,
            "display_order": record.display_order,
            "thumbnail_url": record.thumbnail_url,
            "verified_status": record.verified_status.value,
            "last_checked_at": _dt_to_str(record.last_checked_at),
            "check_fail_reason": record.check_fail_reason,
            "source_label": record.source_label,
            "created_at": _dt_to_str(record.created_at),
        }
    )


def _deserialize_clip(data: str) -> ClipRecord:
    """Deserialize ClipRecord from JSON string."""
    d = json.loads(data)
    return ClipRecord(
        id=d["id"],
        career_slug=d["career_slug"],
        category_slug=d["category_slug"],
        title=d["title"],
        platform=ClipPlatform(d["platform"]),
        url=d["url"],
        duration_secs=d.get("duration_secs"),
        display_order=d.get("display_order", 0),
        thumbnail_url=d.get("thumbnail_url"),
        verified_status=VerifiedStatus(d.get("verified_status", "NOT_CHECKED")),
        last_checked_at=_dt_from_str(d.get("last_checked_at")),
        check_fail_reason=d.get("check_fail_reason"),
        source_label=d.get("source_label", ""),
        created_at=_dt_from_str(d["created_at"]) or datetime.now(timezone.utc),
    )


class KeyValueClipRepository:
    """Stores clip records as JSON strings in a RecordStorePort.

    Each record lives under ``clip:<id>``; ``clip:index`` holds the list
    of ids in creation order. Queries load all indexed records and filter
    in process, which suits a curated catalogue of a few hundred clips.
    """

    def __init__(self, store: RecordStorePort) -> None:
        self.store = store
        self._index_lock = asyncio.Lock()

    async def _load_index(self) -> list[str]:
        raw = await self.store.get(_INDEX_KEY)
        if raw is None:
            return []
        try:
            return list(json.loads(raw))
        except (json.JSONDecodeError, TypeError) as e:
            log.error("clip_index_deserialize_error", error=str(e))
            return []

    async def _load_all(self) -> list[ClipRecord]:
        records: list[ClipRecord] = []
        for clip_id in await self._load_index():
            record = await self.get(clip_id)
            if record is not None:
                records.append(record)
        return records

    async def find_many(
        self, where: ClipFilter, *, limit: int | None = None
    ) -> list[ClipRecord]:
        return select(await self._load_all(), where, limit)

    async def get(self, clip_id: str) -> ClipRecord | None:
        data = await self.store.get(_record_key(clip_id))
        if data is None:
            return None
        try:
            return _deserialize_clip(data)
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            log.error("clip_deserialize_error", clip_id=clip_id, error=str(e))
            return None

    async def update(self, clip_id: str, changes: ClipUpdate) -> ClipRecord:
        record = await self.get(clip_id)
        if record is None:
            raise ClipNotFoundError(clip_id)
        updated = apply_update(record, changes)
        await self.store.put(_record_key(clip_id), _serialize_clip(updated))
        log.debug(
            "clip_saved",
            clip_id=clip_id,
            verified_status=updated.verified_status.value,
        )
        return updated

    async def count(self, status: VerifiedStatus | None = None) -> int:
        if status is None:
            return len(await self._load_index())
        return len(await self.find_many(ClipFilter(status=status)))

    async def create_many(self, records: list[ClipRecord]) -> int:
        async with self._index_lock:
            index = await self._load_index()
            known = set(index)
            batch: dict[str, str] = {}
            for record in records:
                batch[_record_key(record.id)] = _serialize_clip(record)
                if record.id not in known:
                    index.append(record.id)
                    known.add(record.id)
            batch[_INDEX_KEY] = json.dumps(index)
            # Records and index are written in one batch.
            await self.store.put_many(batch)
        log.info("clips_created", count=len(records))
        return len(records)
