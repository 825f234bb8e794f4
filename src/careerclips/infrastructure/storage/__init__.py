"""Durable record stores for clip persistence."""

from .diskcache_store import DiskcacheRecordStore
from .factory import create_record_store
from .redis_store import RedisRecordStore

__all__ = [
    "DiskcacheRecordStore",
    "RedisRecordStore",
    "create_record_store",
]
