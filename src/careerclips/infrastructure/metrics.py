"""Zero-impact in-memory pipeline metrics.

All counters are plain Python integers manipulated inside the single-threaded
async event loop. No locks and no I/O.

``time.perf_counter_ns()`` is used for timing (monotonic, nanosecond
resolution, near-zero overhead).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from careerclips.domain.entities.validation import ValidationResult

# Reason prefix -> failure class, in match order.
_FAILURE_CLASSES: tuple[tuple[str, str], ...] = (
    ("Invalid URL format", "format"),
    ("URL must use HTTPS", "format"),
    ("Domain not in allowlist", "format"),
    ("Redirect", "redirect"),
    ("Too many redirects", "redirect"),
    ("Request timed out", "timeout"),
    ("Network error", "network"),
    ("Content not found", "not_found"),
    ("Server error", "server_error"),
    ("HTTP error", "http_error"),
    ("Unexpected content type", "content_type"),
)


def classify_failure(reason: str | None) -> str:
    """Map a failure reason string onto a coarse failure class."""
    if not reason:
        return "unknown"
    for prefix, name in _FAILURE_CLASSES:
        if reason.startswith(prefix):
            return name
    return "unknown"


@dataclass
class ProbeStats:
    """Accumulated statistics for accessibility probes."""

    probes: int = 0
    valid: int = 0
    invalid: int = 0
    total_duration_ns: int = 0
    failures: dict[str, int] = field(default_factory=dict)

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable summary."""
        avg_ms = (
            round(self.total_duration_ns / self.probes / 1_000_000, 1)
            if self.probes
            else 0.0
        )
        return {
            "probes": self.probes,
            "valid": self.valid,
            "invalid": self.invalid,
            "failures": dict(sorted(self.failures.items())),
            "avg_duration_ms": avg_ms,
        }


@dataclass
class RevalidationStats:
    """Accumulated statistics for background revalidation."""

    submitted: int = 0
    deduplicated: int = 0
    completed: int = 0
    failed: int = 0

    def snapshot(self) -> dict[str, object]:
        return {
            "submitted": self.submitted,
            "deduplicated": self.deduplicated,
            "completed": self.completed,
            "failed": self.failed,
        }


@dataclass
class MetricsCollector:
    """Central in-memory metrics collector.

    Thread-safety is not required: the async event loop is
    single-threaded, so plain integer increments are atomic enough.
    """

    _probe: ProbeStats = field(default_factory=ProbeStats)
    _revalidation: RevalidationStats = field(default_factory=RevalidationStats)
    _start_ns: int = field(default_factory=time.perf_counter_ns)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_probe(self, result: ValidationResult, *, duration_ns: int) -> None:
        """Record one accessibility probe (a whole redirect chain)."""
        self._probe.probes += 1
        self._probe.total_duration_ns += duration_ns
        if result.is_valid:
            self._probe.valid += 1
            return
        self._probe.invalid += 1
        name = classify_failure(result.reason)
        self._probe.failures[name] = self._probe.failures.get(name, 0) + 1

    def record_revalidation_submitted(self, *, scheduled: int, deduplicated: int) -> None:
        self._revalidation.submitted += scheduled
        self._revalidation.deduplicated += deduplicated

    def record_revalidation_done(self, *, success: bool) -> None:
        if success:
            self._revalidation.completed += 1
        else:
            self._revalidation.failed += 1

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable snapshot of all metrics."""
        uptime_ns = time.perf_counter_ns() - self._start_ns
        uptime_s = round(uptime_ns / 1_000_000_000, 1)

        return {
            "uptime_seconds": uptime_s,
            "probe": self._probe.snapshot(),
            "revalidation": self._revalidation.snapshot(),
        }
