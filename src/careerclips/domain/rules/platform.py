"""Platform-derived display fields (thumbnail, source label, category label)."""

from __future__ import annotations

from urllib.parse import parse_qs

from careerclips.domain.entities.clip import ClipPlatform
from careerclips.domain.rules.url_format import parse_url

_YOUTUBE_THUMBNAIL = "https://img.youtube.com/vi/{video_id}/mqdefault.jpg"

_SOURCE_LABELS: dict[ClipPlatform, str] = {
    ClipPlatform.TIKTOK: "TikTok (verified link)",
    ClipPlatform.YOUTUBE_SHORTS: "YouTube Shorts (verified link)",
}

CATEGORY_LABELS: dict[str, str] = {
    "healthcare": "Healthcare",
    "technology": "Technology",
    "trades": "Skilled Trades",
    "creative": "Creative Arts",
    "business": "Business",
    "education": "Education",
}


def _youtube_video_id(url: str) -> str | None:
    try:
        parts = parse_url(url)
    except ValueError:
        return None

    if (parts.hostname or "").lower() == "youtu.be":
        video_id = parts.path.lstrip("/").split("/")[0]
    elif "/shorts/" in parts.path:
        video_id = parts.path.split("/shorts/", 1)[1].split("/")[0]
    else:
        video_id = parse_qs(parts.query).get("v", [""])[0]

    return video_id or None


def platform_thumbnail(platform: ClipPlatform, url: str) -> str | None:
    """Derive a thumbnail URL, or None when the platform offers no stable one.

    TikTok has no public thumbnail endpoint, so only YouTube is derived.
    """
    if platform == ClipPlatform.YOUTUBE_SHORTS:
        video_id = _youtube_video_id(url)
        if video_id:
            return _YOUTUBE_THUMBNAIL.format(video_id=video_id)
    return None


def source_label(platform: ClipPlatform) -> str:
    return _SOURCE_LABELS.get(platform, "Verified link")


def category_label(category_slug: str) -> str:
    return CATEGORY_LABELS.get(category_slug, category_slug)
