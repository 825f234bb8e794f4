"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from careerclips.application.use_cases import (
    ClipRetrievalUseCase,
    ClipSeedUseCase,
    ClipValidationUseCase,
)
from careerclips.domain.ports import ClipRepository
from careerclips.infrastructure.config.schema import AppConfig
from careerclips.infrastructure.metrics import MetricsCollector
from careerclips.infrastructure.persistence.in_memory_clip_repo import (
    InMemoryClipRepository,
)
from careerclips.infrastructure.persistence.kv_clip_repo import KeyValueClipRepository
from careerclips.infrastructure.revalidation.scheduler import RevalidationScheduler
from careerclips.infrastructure.storage import create_record_store
from careerclips.infrastructure.validation.http_link_prober import HttpLinkProber
from careerclips.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


async def _open_clip_repo(state: AppState, config: AppConfig) -> ClipRepository:
    """Open the configured clip store; sets ``state.record_store`` for durable backends."""
    if config.storage.backend == "memory":
        state.record_store = None
        log.info("clip_store_initialized", backend="memory")
        return InMemoryClipRepository()

    store = create_record_store(config.storage)
    await store.__aenter__()
    state.record_store = store
    log.info("clip_store_initialized", backend=config.storage.backend)
    return KeyValueClipRepository(store=store)


@asynccontextmanager
async def open_services(state: AppState) -> AsyncIterator[AppState]:
    """Create all resources on *state* and release them on exit.

    Order matters:
        1. Metrics (recorded into by prober and scheduler)
        2. Clip store
        3. HTTP client
        4. Link prober (uses HTTP client)
        5. Validation use case (store + prober)
        6. Revalidation scheduler (runs validation use case)
        7. Retrieval and seed use cases
    """
    config = state.config

    # 1) Metrics collector
    state.metrics = MetricsCollector()

    # 2) Clip store
    state.clip_repo = await _open_clip_repo(state, config)

    # 3) HTTP client (redirects are followed by the prober, hop by hop)
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=False,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 4) Link prober
    state.link_prober = HttpLinkProber(
        http_client=state.http_client,
        timeout_seconds=config.http_timeout_seconds,
        max_redirects=config.validation.max_redirects,
        user_agent=config.http_user_agent,
        metrics=state.metrics,
    )

    # 5) Validation use case
    state.clip_validation_uc = ClipValidationUseCase(
        repo=state.clip_repo,
        prober=state.link_prober,
    )

    # 6) Background revalidation (optional)
    if config.validation.background_revalidation:
        state.revalidation_scheduler = RevalidationScheduler(
            state.clip_validation_uc.validate_and_update,
            max_concurrent=config.validation.revalidation_max_concurrent,
            metrics=state.metrics,
        )
        log.info(
            "revalidation_scheduler_initialized",
            max_concurrent=config.validation.revalidation_max_concurrent,
        )
    else:
        state.revalidation_scheduler = None
        log.info("revalidation_scheduler_disabled")

    # 7) Retrieval + seed use cases
    state.clip_retrieval_uc = ClipRetrievalUseCase(
        repo=state.clip_repo,
        scheduler=state.revalidation_scheduler,
        revalidation_window=timedelta(days=config.validation.revalidation_window_days),
    )
    state.clip_seed_uc = ClipSeedUseCase(
        repo=state.clip_repo,
        validation=state.clip_validation_uc,
    )

    try:
        yield state
    finally:
        if state.revalidation_scheduler is not None:
            await state.revalidation_scheduler.aclose()

        await state.clip_seed_uc.aclose()

        await state.http_client.aclose()
        log.info("http_client_closed")

        if state.record_store is not None:
            await state.record_store.aclose()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root)."""
    state = cast(AppState, app.state)

    async with open_services(state):
        if state.config.seed_on_startup:
            summary = await state.clip_seed_uc.seed()
            log.info(
                "startup_seed_complete",
                created=summary.created,
                validated=summary.validated,
            )

        log.info("app_startup_complete")
        yield

    log.info("app_shutdown_complete")
