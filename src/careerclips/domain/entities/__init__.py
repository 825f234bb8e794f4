from .clip import (
    CategoryClips,
    ClipFilter,
    ClipForDisplay,
    ClipNotFoundError,
    ClipPlatform,
    ClipRecord,
    ClipUpdate,
    VerifiedStatus,
)
from .validation import (
    BatchValidationSummary,
    ClipValidationOutcome,
    SeedSummary,
    ValidationResult,
)

__all__ = [
    "BatchValidationSummary",
    "CategoryClips",
    "ClipFilter",
    "ClipForDisplay",
    "ClipNotFoundError",
    "ClipPlatform",
    "ClipRecord",
    "ClipUpdate",
    "ClipValidationOutcome",
    "SeedSummary",
    "ValidationResult",
    "VerifiedStatus",
]
