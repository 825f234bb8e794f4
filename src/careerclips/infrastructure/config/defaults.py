"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "careerclips",
    "environment": "dev",
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": (
            "Mozilla/5.0 (compatible; CareerClips/1.0; "
            "+https://github.com/careerclips)"
        ),
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "validation": {
        "max_redirects": 5,
        "revalidation_window_days": 7.0,
        "background_revalidation": True,
        "revalidation_max_concurrent": 2,
    },
    "storage": {
        "backend": "diskcache",
        "dir": "./.data/careerclips",
        "redis_url": "redis://localhost:6379/0",
        "namespace": "careerclips",
        "max_concurrent": 10,
    },
    "seed_on_startup": False,
}
