"""URL format validation against the platform host allowlist.

Pure functions, no network access. The allowlist here is the single
source of truth for both the initial format check and redirect targets.
"""

from __future__ import annotations

from urllib.parse import SplitResult, urlsplit

from careerclips.domain.entities.validation import ValidationResult

ALLOWED_HOSTS: frozenset[str] = frozenset(
    {
        # TikTok
        "tiktok.com",
        "www.tiktok.com",
        "m.tiktok.com",
        "vm.tiktok.com",
        # YouTube
        "youtube.com",
        "www.youtube.com",
        "m.youtube.com",
        "youtu.be",
        "youtube-nocookie.com",
        "www.youtube-nocookie.com",
    }
)


def _has_ambiguous_netloc(netloc: str) -> bool:
    return any(
        ch in "@\\" or ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F
        for ch in netloc
    )


def parse_url(url: str) -> SplitResult:
    """Split *url* and require an absolute URL with a plain host.

    The URL is checked exactly as given. A netloc carrying userinfo,
    backslashes, whitespace or control characters is rejected: browsers
    and urlsplit would not agree on its host.

    Raises:
        ValueError: Empty or padded input, missing scheme or host, an
            ambiguous netloc, or a malformed port / IPv6 literal.
    """
    if not url or not url.strip():
        raise ValueError("empty URL")
    if url != url.strip():
        raise ValueError("leading or trailing whitespace")
    # urlsplit silently drops tab, CR and LF.
    if any(ch in url for ch in "\t\r\n"):
        raise ValueError("embedded tab or newline")
    parts = urlsplit(url)
    if not parts.scheme:
        raise ValueError(f"missing scheme in {url!r}")
    if not parts.netloc or not parts.hostname:
        raise ValueError(f"missing host in {url!r}")
    if _has_ambiguous_netloc(parts.netloc):
        raise ValueError(f"ambiguous host in {url!r}")
    # .port raises ValueError for non-numeric or out-of-range ports.
    _ = parts.port
    return parts


def is_host_allowed(hostname: str | None) -> bool:
    """True if *hostname* equals or is a subdomain of an allowlisted host."""
    if not hostname:
        return False
    host = hostname.lower().rstrip(".")
    return any(host == allowed or host.endswith(f".{allowed}") for allowed in ALLOWED_HOSTS)


def validate_url_format(url: str) -> ValidationResult:
    """Check scheme, parseability and host allowlist of a clip URL."""
    try:
        parts = parse_url(url)
    except ValueError as e:
        return ValidationResult.fail(f"Invalid URL format: {e}")

    if parts.scheme.lower() != "https":
        return ValidationResult.fail("URL must use HTTPS protocol")

    if not is_host_allowed(parts.hostname):
        return ValidationResult.fail(f"Domain not in allowlist: {parts.hostname}")

    return ValidationResult.ok()
