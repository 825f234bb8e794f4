"""HTTP accessibility prober: HEAD with ranged-GET fallback, manual redirects."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING
from urllib.parse import urljoin

import structlog
from httpx import TimeoutException

from careerclips.domain.entities.validation import ValidationResult
from careerclips.domain.rules.url_format import is_host_allowed, parse_url

if TYPE_CHECKING:
    from httpx import AsyncClient, Response

    from careerclips.infrastructure.metrics import MetricsCollector

log = structlog.get_logger(__name__)

# Statuses with which a host rejects the HEAD method itself.
_METHOD_REJECTED_STATUSES = frozenset({405, 501})

# Declared content types accepted on a successful probe.
_ACCEPTED_CONTENT_TYPES: tuple[str, ...] = ("text/html", "video/", "application/json")

_NOT_FOUND_STATUSES = frozenset({404, 410})


class HttpLinkProber:
    """Checks clip URLs via HTTP HEAD with a ranged GET fallback.

    Some platforms refuse or drop HEAD requests. When HEAD raises or is
    answered with 405/501, the probe is retried once as
    ``GET`` with ``Range: bytes=0-0`` so only a single byte is requested.

    Redirects are followed manually so that every hop is checked against
    the host allowlist and must stay on HTTPS. Each request carries its
    own timeout; there is no deadline spanning a whole redirect chain
    beyond ``max_redirects``.

    Args:
        http_client: Shared httpx.AsyncClient (injected).
        timeout_seconds: Per-request timeout (default: 10s).
        max_redirects: Hop limit before the probe fails (default: 5).
        user_agent: Identifying User-Agent sent on every request.
        metrics: Optional collector for probe outcomes.
    """

    def __init__(
        self,
        http_client: AsyncClient,
        timeout_seconds: float = 10.0,
        max_redirects: int = 5,
        user_agent: str | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.http_client = http_client
        self.timeout = timeout_seconds
        self.max_redirects = max_redirects
        self._headers = {"User-Agent": user_agent} if user_agent else {}
        self._metrics = metrics

    async def probe(self, url: str, redirect_count: int = 0) -> ValidationResult:
        """Probe *url*, following allowlisted redirects.

        Returns:
            ValidationResult; never raises.
        """
        start_ns = time.perf_counter_ns()
        result = await self._probe(url, redirect_count)
        if self._metrics is not None and redirect_count == 0:
            self._metrics.record_probe(
                result, duration_ns=time.perf_counter_ns() - start_ns
            )
        return result

    async def _probe(self, url: str, redirect_count: int) -> ValidationResult:
        if redirect_count >= self.max_redirects:
            log.info("clip_probe_too_many_redirects", url=url, hops=redirect_count)
            return ValidationResult.fail(
                f"Too many redirects (max {self.max_redirects})"
            )

        try:
            response = await self._request(url)
        except TimeoutException:
            log.warning("clip_probe_timeout", url=url, timeout=self.timeout)
            return ValidationResult.fail("Request timed out")
        except Exception as e:  # noqa: BLE001
            log.warning("clip_probe_network_error", url=url, error=str(e))
            return ValidationResult.fail(f"Network error: {e}")

        status = response.status_code

        if 300 <= status < 400 and status != 304:
            return await self._follow_redirect(url, response, redirect_count)

        if 200 <= status < 300 or status == 304:
            return self._check_content_type(url, response)

        if status in _NOT_FOUND_STATUSES:
            reason = f"Content not found ({status})"
        elif status >= 500:
            reason = f"Server error ({status})"
        else:
            reason = f"HTTP error ({status})"

        log.info("clip_probe_http_failure", url=url, status_code=status)
        return ValidationResult.fail(reason, status_code=status)

    async def _request(self, url: str) -> Response:
        """HEAD first; ranged GET when HEAD errors or is rejected."""
        try:
            response = await self.http_client.head(
                url,
                headers=self._headers,
                timeout=self.timeout,
                follow_redirects=False,
            )
        except Exception as e:  # noqa: BLE001
            log.debug("clip_head_failed", url=url, error=str(e))
            return await self._ranged_get(url)

        if response.status_code in _METHOD_REJECTED_STATUSES:
            log.debug("clip_head_rejected", url=url, status_code=response.status_code)
            return await self._ranged_get(url)

        log.debug("clip_head_result", url=url, status_code=response.status_code)
        return response

    async def _ranged_get(self, url: str) -> Response:
        """GET a single byte; the body is never read."""
        async with self.http_client.stream(
            "GET",
            url,
            headers={**self._headers, "Range": "bytes=0-0"},
            timeout=self.timeout,
            follow_redirects=False,
        ) as response:
            log.debug(
                "clip_get_fallback_result", url=url, status_code=response.status_code
            )
            return response

    async def _follow_redirect(
        self, url: str, response: Response, redirect_count: int
    ) -> ValidationResult:
        status = response.status_code
        location = response.headers.get("location")
        if not location:
            return ValidationResult.fail(
                f"Redirect without location header ({status})", status_code=status
            )

        redirect_url = urljoin(url, location)
        try:
            target = parse_url(redirect_url)
        except ValueError as e:
            log.warning(
                "clip_redirect_invalid", url=url, target=redirect_url, error=str(e)
            )
            return ValidationResult.fail(
                f"Redirect to invalid URL: {e}", status_code=status
            )

        if not is_host_allowed(target.hostname):
            log.warning("clip_redirect_blocked", url=url, target=redirect_url)
            return ValidationResult.fail(
                f"Redirect to non-allowed domain: {target.hostname}",
                status_code=status,
            )

        if target.scheme.lower() != "https":
            log.warning("clip_redirect_insecure", url=url, target=redirect_url)
            return ValidationResult.fail(
                f"Redirect to non-HTTPS URL: {redirect_url}", status_code=status
            )

        log.debug("clip_redirect", url=url, target=redirect_url, hop=redirect_count + 1)
        return await self._probe(redirect_url, redirect_count + 1)

    def _check_content_type(self, url: str, response: Response) -> ValidationResult:
        status = response.status_code
        content_type = response.headers.get("content-type", "").strip()

        # Many platforms omit content-type on HEAD; only a declared mismatch fails.
        if content_type and not content_type.lower().startswith(_ACCEPTED_CONTENT_TYPES):
            log.info("clip_probe_content_type", url=url, content_type=content_type)
            return ValidationResult.fail(
                f"Unexpected content type: {content_type}", status_code=status
            )

        return ValidationResult.ok(final_url=url, status_code=status)
