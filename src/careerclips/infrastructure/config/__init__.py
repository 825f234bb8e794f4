from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, StorageConfig, ValidationConfig

__all__ = [
    "AppConfig",
    "EnvOverrides",
    "StorageConfig",
    "ValidationConfig",
    "load_config",
]
