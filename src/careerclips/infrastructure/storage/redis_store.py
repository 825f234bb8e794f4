"""Redis-backed record store via redis.asyncio."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping

import structlog
from redis.asyncio import Redis
from redis.exceptions import RedisError

log = structlog.get_logger(__name__)


class RedisRecordStore:
    """Clip records in Redis, one string key per record.

    Read errors are logged and propagate: a store outage must surface as a
    failed request rather than an empty catalogue. Batch writes use a
    transactional ``MSET``.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        *,
        namespace: str = "careerclips",
        max_concurrent: int = 50,
    ) -> None:
        self.url = url
        self.namespace = namespace
        self._client: Redis | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def __aenter__(self) -> RedisRecordStore:
        """Connect and verify with PING."""
        if self._client is None:
            client = Redis.from_url(self.url, decode_responses=True)
            try:
                await client.ping()
            except RedisError as e:
                log.error("record_store_connect_failed", backend="redis", url=self.url, error=str(e))
                await client.aclose()
                raise
            self._client = client
            log.info("record_store_opened", backend="redis", url=self.url)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.info("record_store_closed", backend="redis")

    def _require_open(self) -> Redis:
        if self._client is None:
            raise RuntimeError("Record store not opened. Use 'async with store:' first.")
        return self._client

    async def get(self, key: str) -> str | None:
        client = self._require_open()
        async with self._semaphore:
            try:
                return await client.get(self._key(key))
            except RedisError as e:
                log.error("record_store_read_error", backend="redis", key=key, error=str(e))
                raise

    async def put(self, key: str, value: str) -> None:
        client = self._require_open()
        async with self._semaphore:
            try:
                await client.set(self._key(key), value)
            except RedisError as e:
                log.error("record_store_write_error", backend="redis", key=key, error=str(e))
                raise

    async def put_many(self, items: Mapping[str, str]) -> None:
        if not items:
            return
        client = self._require_open()
        async with self._semaphore:
            try:
                await client.mset({self._key(k): v for k, v in items.items()})
            except RedisError as e:
                log.error("record_store_write_error", backend="redis", keys=len(items), error=str(e))
                raise
