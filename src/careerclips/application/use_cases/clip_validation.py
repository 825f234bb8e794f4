"""Validate-and-persist and batch validation of clip links."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from careerclips.domain.entities import (
    BatchValidationSummary,
    ClipFilter,
    ClipUpdate,
    ClipValidationOutcome,
    ValidationResult,
    VerifiedStatus,
)
from careerclips.domain.ports import ClipRepository, LinkProberPort
from careerclips.domain.rules.platform import platform_thumbnail, source_label
from careerclips.domain.rules.url_format import validate_url_format

log = structlog.get_logger(__name__)

CLIP_NOT_FOUND_REASON = "Clip not found"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ClipValidationUseCase:
    """Sole writer of ``verified_status`` on clip records.

    Flow per clip:
        1. Look up the record
        2. Format check, then accessibility probe on its URL
        3. Persist status, timestamp, reason, thumbnail and label in one update
    """

    def __init__(
        self,
        repo: ClipRepository,
        prober: LinkProberPort,
        *,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.repo = repo
        self.prober = prober
        self._now = now

    async def validate_url(self, url: str) -> ValidationResult:
        """Run the format check and, if it passes, the accessibility probe."""
        fmt = validate_url_format(url)
        if not fmt.is_valid:
            return fmt
        return await self.prober.probe(url)

    async def validate_and_update(self, clip_id: str) -> ClipValidationOutcome:
        """Validate one clip and persist the outcome.

        Returns:
            ClipValidationOutcome; ``success`` is False only when the clip
            does not exist.
        """
        record = await self.repo.get(clip_id)
        if record is None:
            log.warning("clip_not_found", clip_id=clip_id)
            return ClipValidationOutcome(
                success=False, is_valid=False, reason=CLIP_NOT_FOUND_REASON
            )

        result = await self.validate_url(record.url)

        thumbnail = record.thumbnail_url or platform_thumbnail(
            record.platform, record.url
        )
        await self.repo.update(
            clip_id,
            ClipUpdate(
                verified_status=(
                    VerifiedStatus.VALID if result.is_valid else VerifiedStatus.INVALID
                ),
                last_checked_at=self._now(),
                check_fail_reason=None if result.is_valid else result.reason,
                thumbnail_url=thumbnail,
                source_label=source_label(record.platform),
            ),
        )

        if result.is_valid:
            log.info(
                "clip_validated",
                clip_id=clip_id,
                status_code=result.status_code,
                final_url=result.final_url,
            )
        else:
            log.info(
                "clip_invalidated",
                clip_id=clip_id,
                reason=result.reason,
                status_code=result.status_code,
            )

        return ClipValidationOutcome(
            success=True, is_valid=result.is_valid, reason=result.reason
        )

    async def validate_all_pending(self) -> BatchValidationSummary:
        """Validate every NOT_CHECKED clip, one at a time."""
        pending = await self.repo.find_many(
            ClipFilter(status=VerifiedStatus.NOT_CHECKED)
        )
        log.info("batch_validation_start", pending=len(pending))

        valid = 0
        invalid = 0
        for record in pending:
            try:
                outcome = await self.validate_and_update(record.id)
            except Exception:
                log.error("batch_validation_error", clip_id=record.id, exc_info=True)
                invalid += 1
                continue
            if outcome.is_valid:
                valid += 1
            else:
                invalid += 1

        summary = BatchValidationSummary(
            validated=len(pending), valid=valid, invalid=invalid
        )
        log.info(
            "batch_validation_complete",
            validated=summary.validated,
            valid=summary.valid,
            invalid=summary.invalid,
        )
        return summary
