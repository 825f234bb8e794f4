"""Record store factory: builds the adapter selected by ``storage.backend``."""

from __future__ import annotations

import structlog

from careerclips.domain.ports.record_store import RecordStorePort
from careerclips.infrastructure.config.schema import StorageConfig
from careerclips.infrastructure.storage.diskcache_store import DiskcacheRecordStore
from careerclips.infrastructure.storage.redis_store import RedisRecordStore

log = structlog.get_logger(__name__)


def create_record_store(storage: StorageConfig) -> RecordStorePort:
    """Create an unopened record store for a durable backend.

    Raises:
        ValueError: ``memory`` or an unknown backend; the in-memory
            repository does not go through a record store.
    """
    if storage.backend == "diskcache":
        log.info("record_store_create", backend="diskcache", directory=str(storage.directory))
        return DiskcacheRecordStore(
            storage.directory,
            namespace=storage.namespace,
            max_concurrent=storage.max_concurrent,
        )
    if storage.backend == "redis":
        log.info("record_store_create", backend="redis", url=storage.redis_url)
        return RedisRecordStore(
            storage.redis_url,
            namespace=storage.namespace,
            max_concurrent=storage.max_concurrent,
        )
    raise ValueError(f"Backend {storage.backend!r} has no record store.")
