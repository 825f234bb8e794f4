"""Runtime metrics and clip-store statistics."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from careerclips.domain.entities import VerifiedStatus
from careerclips.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/metrics")
async def metrics(request: Request) -> JSONResponse:
    """Return in-memory runtime metrics.

    Includes probe outcomes, revalidation counters, clip counts per
    verification status and the ids currently being revalidated.
    """
    state = cast(AppState, request.app.state)

    data: dict[str, Any] = {}

    m = getattr(state, "metrics", None)
    if m is not None:
        data.update(m.snapshot())

    repo = getattr(state, "clip_repo", None)
    if repo is not None:
        try:
            data["clips"] = {
                status.value: await repo.count(status) for status in VerifiedStatus
            }
        except Exception:
            log.warning("clip_count_failed", exc_info=True)

    scheduler = getattr(state, "revalidation_scheduler", None)
    if scheduler is not None:
        data["revalidation_in_flight"] = sorted(scheduler.in_flight)

    return JSONResponse(content=data)
