"""Shared fixtures for integration tests.

These tests use real infrastructure components (DiskcacheRecordStore,
HttpLinkProber, KeyValueClipRepository) with mocked HTTP via respx.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx

from careerclips.infrastructure.storage.diskcache_store import DiskcacheRecordStore


@pytest.fixture()
async def http_client() -> httpx.AsyncClient:
    """Real httpx.AsyncClient for use with respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
async def record_store(tmp_path: Path) -> DiskcacheRecordStore:
    """Real DiskcacheRecordStore backed by tmp_path (auto-cleaned)."""
    store = DiskcacheRecordStore(tmp_path / "store", max_concurrent=5)
    async with store:
        yield store


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
