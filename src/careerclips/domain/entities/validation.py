"""Result types of the link-validation pipeline.

Failures are carried as data (``reason``), never raised.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a format check or accessibility probe."""

    is_valid: bool
    reason: str | None = None
    final_url: str | None = None
    status_code: int | None = None

    @classmethod
    def ok(
        cls, final_url: str | None = None, status_code: int | None = None
    ) -> ValidationResult:
        return cls(is_valid=True, final_url=final_url, status_code=status_code)

    @classmethod
    def fail(cls, reason: str, status_code: int | None = None) -> ValidationResult:
        return cls(is_valid=False, reason=reason, status_code=status_code)


@dataclass(frozen=True)
class ClipValidationOutcome:
    """Result of validate-and-persist for a single clip."""

    success: bool
    is_valid: bool
    reason: str | None = None


@dataclass(frozen=True)
class BatchValidationSummary:
    """Aggregate counts of a batch validation run."""

    validated: int
    valid: int
    invalid: int


@dataclass(frozen=True)
class SeedSummary:
    """Result of seeding the clip store."""

    created: int
    validated: int
