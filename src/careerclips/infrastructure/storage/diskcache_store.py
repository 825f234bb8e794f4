"""SQLite-backed record store (diskcache), no daemon process required."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path

import structlog
from diskcache import Cache as DiskCache

log = structlog.get_logger(__name__)


class DiskcacheRecordStore:
    """Async wrapper around diskcache.Cache for clip records.

    diskcache is synchronous, so every call runs in ``asyncio.to_thread``.
    A semaphore bounds parallel disk operations to keep SQLite lock
    contention low. Batch writes run inside one diskcache transaction.

    Args:
        directory: SQLite directory, created on first open.
        namespace: Prefix applied to every key.
        max_concurrent: Max parallel disk operations.
    """

    def __init__(
        self,
        directory: str | Path = "./.data/careerclips",
        *,
        namespace: str = "careerclips",
        max_concurrent: int = 10,
    ) -> None:
        self.directory = Path(directory)
        self.namespace = namespace
        self._cache: DiskCache | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def __aenter__(self) -> DiskcacheRecordStore:
        if self._cache is None:
            self._cache = await asyncio.to_thread(DiskCache, str(self.directory))
            log.info("record_store_opened", backend="diskcache", path=str(self.directory))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._cache is not None:
            await asyncio.to_thread(self._cache.close)
            self._cache = None
            log.info("record_store_closed", backend="diskcache")

    def _require_open(self) -> DiskCache:
        if self._cache is None:
            raise RuntimeError(
                "Record store not opened. Use 'async with store:' first."
            )
        return self._cache

    async def get(self, key: str) -> str | None:
        cache = self._require_open()
        async with self._semaphore:
            return await asyncio.to_thread(cache.get, self._key(key), None)

    async def put(self, key: str, value: str) -> None:
        cache = self._require_open()
        async with self._semaphore:
            await asyncio.to_thread(cache.set, self._key(key), value)

    async def put_many(self, items: Mapping[str, str]) -> None:
        cache = self._require_open()
        prefixed = {self._key(k): v for k, v in items.items()}

        def _write() -> None:
            with cache.transact():
                for k, v in prefixed.items():
                    cache.set(k, v)

        async with self._semaphore:
            await asyncio.to_thread(_write)
        log.debug("record_store_batch_written", backend="diskcache", keys=len(prefixed))
