"""Administrative endpoints for validating and seeding clips."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from careerclips.domain.entities import ClipNotFoundError
from careerclips.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/admin/clips", tags=["admin"])


@router.post("/{clip_id}/validate")
async def validate_clip(clip_id: str, request: Request) -> JSONResponse:
    """Re-validate a single clip now and persist the outcome.

    Raises:
        HTTPException(404): Clip does not exist.
        HTTPException(500): Clip store failure.
    """
    state = cast(AppState, request.app.state)

    log.info("admin_validate_request", clip_id=clip_id)

    try:
        outcome = await state.clip_validation_uc.validate_and_update(clip_id)
    except ClipNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        log.error("admin_validate_failed", clip_id=clip_id, error=str(e))
        raise HTTPException(
            status_code=500, detail="Failed to validate clip"
        ) from e

    if not outcome.success:
        raise HTTPException(status_code=404, detail=f"Clip not found: {clip_id}")

    return JSONResponse(
        content={
            "success": outcome.success,
            "is_valid": outcome.is_valid,
            "reason": outcome.reason,
        }
    )


@router.post("/validate-pending")
async def validate_pending(request: Request) -> JSONResponse:
    """Validate every NOT_CHECKED clip sequentially."""
    state = cast(AppState, request.app.state)

    try:
        summary = await state.clip_validation_uc.validate_all_pending()
    except Exception as e:
        log.error("admin_validate_pending_failed", error=str(e))
        raise HTTPException(
            status_code=500, detail="Failed to validate pending clips"
        ) from e

    return JSONResponse(
        content={
            "validated": summary.validated,
            "valid": summary.valid,
            "invalid": summary.invalid,
        }
    )


@router.post("/seed")
async def seed_clips(request: Request) -> JSONResponse:
    """Seed the default catalogue if the clip store is empty."""
    state = cast(AppState, request.app.state)

    try:
        summary = await state.clip_seed_uc.seed()
    except Exception as e:
        log.error("admin_seed_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to seed clips") from e

    return JSONResponse(
        content={"created": summary.created, "validated": summary.validated}
    )
