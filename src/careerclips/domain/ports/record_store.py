"""Record store port: durable string key-value storage for clip records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol


class RecordStorePort(Protocol):
    """Async key-value store holding serialized records.

    Values are opaque strings (the clip repository writes JSON) and never
    expire. Keys are namespaced by the adapter, so callers use short keys
    such as ``clip:<id>``.

    Implementations must be opened with ``async with store:`` before use.
    """

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    async def put(self, key: str, value: str) -> None: ...

    async def put_many(self, items: Mapping[str, str]) -> None:
        """Write several keys in one batch (all or nothing where supported)."""
        ...

    async def aclose(self) -> None: ...

    async def __aenter__(self) -> RecordStorePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
