from .clip_retrieval import ClipRetrievalUseCase
from .clip_seed import DEFAULT_SEED_CLIPS, ClipSeedUseCase, SeedClip
from .clip_validation import ClipValidationUseCase

__all__ = [
    "ClipRetrievalUseCase",
    "ClipSeedUseCase",
    "ClipValidationUseCase",
    "DEFAULT_SEED_CLIPS",
    "SeedClip",
]
