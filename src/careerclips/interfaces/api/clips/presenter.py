"""JSON presentation of clip read models."""

from __future__ import annotations

from typing import Any

from careerclips.domain.entities import CategoryClips, ClipForDisplay


def present_clip(clip: ClipForDisplay) -> dict[str, Any]:
    return {
        "id": clip.id,
        "career_slug": clip.career_slug,
        "category_slug": clip.category_slug,
        "title": clip.title,
        "platform": clip.platform.value,
        "url": clip.url,
        "thumbnail_url": clip.thumbnail_url,
        "duration_secs": clip.duration_secs,
        "source_label": clip.source_label,
    }


def present_category(group: CategoryClips) -> dict[str, Any]:
    return {
        "category": group.category,
        "category_label": group.category_label,
        "clips": [present_clip(c) for c in group.clips],
    }
