"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from careerclips.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from careerclips.application.use_cases import (
        ClipRetrievalUseCase,
        ClipSeedUseCase,
        ClipValidationUseCase,
    )
    from careerclips.domain.ports import ClipRepository, LinkProberPort, RecordStorePort
    from careerclips.infrastructure.metrics import MetricsCollector
    from careerclips.infrastructure.revalidation.scheduler import (
        RevalidationScheduler,
    )


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    record_store: RecordStorePort | None
    http_client: httpx.AsyncClient
    metrics: MetricsCollector

    # Domain Ports
    clip_repo: ClipRepository
    link_prober: LinkProberPort

    # Background work
    revalidation_scheduler: RevalidationScheduler | None

    # Application Services
    clip_validation_uc: ClipValidationUseCase
    clip_retrieval_uc: ClipRetrievalUseCase
    clip_seed_uc: ClipSeedUseCase
