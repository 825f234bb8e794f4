"""Consumer endpoints listing verified clips."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from careerclips.interfaces.api.clips.presenter import present_category, present_clip
from careerclips.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/clips", tags=["clips"])


@router.get("")
async def list_clips(
    request: Request,
    career: str | None = Query(default=None, description="Career slug filter."),
    category: str | None = Query(default=None, description="Category slug filter."),
    limit: int = Query(default=6, ge=1, le=50),
) -> JSONResponse:
    """Return verified clips, optionally filtered by career and/or category."""
    state = cast(AppState, request.app.state)

    try:
        clips = await state.clip_retrieval_uc.list_valid_clips(
            career_slug=career, category_slug=category, limit=limit
        )
    except Exception as e:
        log.error("clip_list_failed", career=career, category=category, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to load clips") from e

    return JSONResponse(
        content={"clips": [present_clip(c) for c in clips], "count": len(clips)}
    )


@router.get("/by-category")
async def list_clips_by_category(
    request: Request,
    limit: int = Query(default=2, ge=1, le=20, description="Clips per category."),
) -> JSONResponse:
    """Return verified clips grouped by category."""
    state = cast(AppState, request.app.state)

    try:
        groups = await state.clip_retrieval_uc.list_clips_by_category(
            per_category_limit=limit
        )
    except Exception as e:
        log.error("clip_list_by_category_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to load clips") from e

    return JSONResponse(content={"categories": [present_category(g) for g in groups]})
