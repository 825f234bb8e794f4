"""Background revalidation of stale clips, detached from the read path."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import structlog

from careerclips.domain.entities.validation import ClipValidationOutcome

if TYPE_CHECKING:
    from careerclips.infrastructure.metrics import MetricsCollector

log = structlog.get_logger(__name__)

ValidateFn = Callable[[str], Awaitable[ClipValidationOutcome]]


class RevalidationScheduler:
    """Runs ``validate_and_update`` for submitted clip ids as asyncio tasks.

    A clip id already queued or running is not scheduled again, and at
    most ``max_concurrent`` validations hit the network at once. Task
    references are held until completion so the event loop cannot
    garbage-collect them mid-flight.

    Call :meth:`aclose` during app shutdown to cancel pending work.
    """

    def __init__(
        self,
        validate: ValidateFn,
        *,
        max_concurrent: int = 2,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._validate = validate
        self._sem = asyncio.Semaphore(max_concurrent)
        self._metrics = metrics
        self._in_flight: set[str] = set()
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(self._in_flight)

    def submit(self, clip_ids: list[str]) -> int:
        """Schedule revalidation; return how many ids were newly scheduled."""
        if self._closed:
            log.warning("revalidation_submit_after_close", count=len(clip_ids))
            return 0

        scheduled = 0
        for clip_id in dict.fromkeys(clip_ids):
            if clip_id in self._in_flight:
                continue
            self._in_flight.add(clip_id)
            task = asyncio.get_running_loop().create_task(
                self._run(clip_id), name=f"revalidate:{clip_id}"
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            scheduled += 1

        deduplicated = len(clip_ids) - scheduled
        if self._metrics is not None:
            self._metrics.record_revalidation_submitted(
                scheduled=scheduled, deduplicated=deduplicated
            )
        if scheduled:
            log.info(
                "revalidation_scheduled",
                scheduled=scheduled,
                deduplicated=deduplicated,
            )
        return scheduled

    async def _run(self, clip_id: str) -> None:
        success = False
        try:
            async with self._sem:
                outcome = await self._validate(clip_id)
            success = outcome.success
            if not success:
                log.warning(
                    "revalidation_failed", clip_id=clip_id, reason=outcome.reason
                )
        except asyncio.CancelledError:
            log.debug("revalidation_cancelled", clip_id=clip_id)
            raise
        except Exception:
            log.error("revalidation_error", clip_id=clip_id, exc_info=True)
        finally:
            self._in_flight.discard(clip_id)
            if self._metrics is not None:
                self._metrics.record_revalidation_done(success=success)

    async def drain(self) -> None:
        """Wait until every scheduled revalidation has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel pending revalidations and wait for them to unwind."""
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        log.info("revalidation_scheduler_closed", cancelled=len(tasks))
