"""Tests for HttpLinkProber (respx-mocked httpx)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import respx

from careerclips.infrastructure.metrics import MetricsCollector
from careerclips.infrastructure.validation.http_link_prober import HttpLinkProber

SHORT = "https://youtu.be/JQ3oJG8h4aI"
CANONICAL = "https://www.youtube.com/shorts/JQ3oJG8h4aI"

_HTML = {"content-type": "text/html; charset=utf-8"}


@pytest.fixture()
async def client() -> httpx.AsyncClient:
    async with httpx.AsyncClient() as c:
        yield c


@pytest.fixture()
def prober(client: httpx.AsyncClient) -> HttpLinkProber:
    return HttpLinkProber(client, user_agent="CareerClipsTest/1.0")


class TestSuccess:
    @respx.mock
    async def test_200_html_is_valid(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(return_value=httpx.Response(200, headers=_HTML))
        result = await prober.probe(CANONICAL)
        assert result.is_valid is True
        assert result.status_code == 200
        assert result.final_url == CANONICAL

    @respx.mock
    async def test_206_video_is_valid(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(
            return_value=httpx.Response(206, headers={"content-type": "video/mp4"})
        )
        result = await prober.probe(CANONICAL)
        assert result.is_valid is True
        assert result.status_code == 206

    @respx.mock
    async def test_json_content_type_is_valid(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(
            return_value=httpx.Response(200, headers={"content-type": "application/json"})
        )
        assert (await prober.probe(CANONICAL)).is_valid is True

    @respx.mock
    async def test_missing_content_type_is_valid(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(return_value=httpx.Response(200))
        assert (await prober.probe(CANONICAL)).is_valid is True

    @respx.mock
    async def test_304_is_valid(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(return_value=httpx.Response(304))
        result = await prober.probe(CANONICAL)
        assert result.is_valid is True
        assert result.status_code == 304

    @respx.mock
    async def test_sends_user_agent(self, prober: HttpLinkProber) -> None:
        route = respx.head(CANONICAL).mock(return_value=httpx.Response(200, headers=_HTML))
        await prober.probe(CANONICAL)
        assert route.calls.last.request.headers["user-agent"] == "CareerClipsTest/1.0"


class TestContentType:
    @respx.mock
    async def test_unexpected_content_type(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(
            return_value=httpx.Response(200, headers={"content-type": "application/zip"})
        )
        result = await prober.probe(CANONICAL)
        assert result.is_valid is False
        assert result.reason == "Unexpected content type: application/zip"
        assert result.status_code == 200


class TestHttpErrors:
    @pytest.mark.parametrize("status", [404, 410])
    @respx.mock
    async def test_not_found(self, prober: HttpLinkProber, status: int) -> None:
        respx.head(CANONICAL).mock(return_value=httpx.Response(status))
        result = await prober.probe(CANONICAL)
        assert result.is_valid is False
        assert result.reason == f"Content not found ({status})"
        assert "not found" in result.reason
        assert result.status_code == status

    @pytest.mark.parametrize("status", [500, 503])
    @respx.mock
    async def test_server_error(self, prober: HttpLinkProber, status: int) -> None:
        respx.head(CANONICAL).mock(return_value=httpx.Response(status))
        result = await prober.probe(CANONICAL)
        assert result.is_valid is False
        assert result.reason == f"Server error ({status})"

    @respx.mock
    async def test_other_4xx_is_generic_http_error(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(return_value=httpx.Response(403))
        result = await prober.probe(CANONICAL)
        assert result.is_valid is False
        assert result.reason == "HTTP error (403)"
        assert result.status_code == 403


class TestRedirects:
    @respx.mock
    async def test_short_link_redirect_to_canonical(self, prober: HttpLinkProber) -> None:
        respx.head(SHORT).mock(
            return_value=httpx.Response(301, headers={"location": CANONICAL})
        )
        respx.head(CANONICAL).mock(return_value=httpx.Response(200, headers=_HTML))
        result = await prober.probe(SHORT)
        assert result.is_valid is True
        assert result.final_url == CANONICAL

    @respx.mock
    async def test_relative_location_resolved(self, prober: HttpLinkProber) -> None:
        respx.head("https://www.youtube.com/watch?v=JQ3oJG8h4aI").mock(
            return_value=httpx.Response(302, headers={"location": "/shorts/JQ3oJG8h4aI"})
        )
        respx.head(CANONICAL).mock(return_value=httpx.Response(200, headers=_HTML))
        result = await prober.probe("https://www.youtube.com/watch?v=JQ3oJG8h4aI")
        assert result.is_valid is True
        assert result.final_url == CANONICAL

    @respx.mock
    async def test_redirect_to_disallowed_host(self, prober: HttpLinkProber) -> None:
        respx.head(SHORT).mock(
            return_value=httpx.Response(
                302, headers={"location": "https://phishing.example.net/x"}
            )
        )
        result = await prober.probe(SHORT)
        assert result.is_valid is False
        assert "non-allowed domain" in result.reason
        assert "phishing.example.net" in result.reason

    @pytest.mark.parametrize(
        "location",
        [
            "https://evil.example.net\\@www.youtube.com/shorts/JQ3oJG8h4aI",
            "https://user@www.youtube.com/shorts/JQ3oJG8h4aI",
        ],
    )
    @respx.mock
    async def test_redirect_with_ambiguous_host_fails(
        self, prober: HttpLinkProber, location: str
    ) -> None:
        respx.head(SHORT).mock(
            return_value=httpx.Response(302, headers={"location": location})
        )
        result = await prober.probe(SHORT)
        assert result.is_valid is False
        assert result.reason.startswith("Redirect to invalid URL")
        assert result.status_code == 302
        assert len(respx.calls) == 1

    @respx.mock
    async def test_redirect_downgrade_to_http_fails(
        self, prober: HttpLinkProber
    ) -> None:
        insecure = "http://www.youtube.com/shorts/JQ3oJG8h4aI"
        respx.head(SHORT).mock(
            return_value=httpx.Response(301, headers={"location": insecure})
        )
        result = await prober.probe(SHORT)
        assert result.is_valid is False
        assert result.reason == f"Redirect to non-HTTPS URL: {insecure}"
        assert len(respx.calls) == 1

    @respx.mock
    async def test_redirect_without_location(self, prober: HttpLinkProber) -> None:
        respx.head(SHORT).mock(return_value=httpx.Response(302))
        result = await prober.probe(SHORT)
        assert result.is_valid is False
        assert result.reason == "Redirect without location header (302)"

    @respx.mock
    async def test_six_chained_redirects_exceed_cap(self, prober: HttpLinkProber) -> None:
        urls = [f"https://www.youtube.com/hop/{i}" for i in range(7)]
        for current, nxt in zip(urls, urls[1:]):
            respx.head(current).mock(
                return_value=httpx.Response(301, headers={"location": nxt})
            )
        respx.head(urls[-1]).mock(return_value=httpx.Response(200, headers=_HTML))

        result = await prober.probe(urls[0])
        assert result.is_valid is False
        assert result.reason == "Too many redirects (max 5)"
        assert "too many redirects" in result.reason.lower()

    @respx.mock
    async def test_five_redirects_within_cap(self, prober: HttpLinkProber) -> None:
        urls = [f"https://www.youtube.com/hop/{i}" for i in range(5)]
        for current, nxt in zip(urls, urls[1:]):
            respx.head(current).mock(
                return_value=httpx.Response(301, headers={"location": nxt})
            )
        respx.head(urls[-1]).mock(return_value=httpx.Response(200, headers=_HTML))

        result = await prober.probe(urls[0])
        assert result.is_valid is True

    async def test_hop_counter_at_limit_fails_without_request(
        self, prober: HttpLinkProber
    ) -> None:
        result = await prober.probe(CANONICAL, redirect_count=5)
        assert result.reason == "Too many redirects (max 5)"


class TestHeadFallback:
    @respx.mock
    async def test_head_exception_falls_back_to_ranged_get(
        self, prober: HttpLinkProber
    ) -> None:
        respx.head(CANONICAL).mock(side_effect=httpx.RemoteProtocolError("dropped"))
        get_route = respx.get(CANONICAL).mock(
            return_value=httpx.Response(206, headers={"content-type": "video/mp4"})
        )
        result = await prober.probe(CANONICAL)
        assert result.is_valid is True
        assert get_route.called
        assert get_route.calls.last.request.headers["range"] == "bytes=0-0"

    @pytest.mark.parametrize("status", [405, 501])
    @respx.mock
    async def test_head_rejected_falls_back(
        self, prober: HttpLinkProber, status: int
    ) -> None:
        respx.head(CANONICAL).mock(return_value=httpx.Response(status))
        respx.get(CANONICAL).mock(return_value=httpx.Response(200, headers=_HTML))
        result = await prober.probe(CANONICAL)
        assert result.is_valid is True
        assert result.status_code == 200

    @respx.mock
    async def test_fallback_result_is_classified(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(return_value=httpx.Response(405))
        respx.get(CANONICAL).mock(return_value=httpx.Response(404))
        result = await prober.probe(CANONICAL)
        assert result.reason == "Content not found (404)"

    @respx.mock
    async def test_head_success_does_not_issue_get(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(return_value=httpx.Response(200, headers=_HTML))
        get_route = respx.get(CANONICAL).mock(return_value=httpx.Response(200))
        await prober.probe(CANONICAL)
        assert not get_route.called


class TestNetworkFailures:
    @respx.mock
    async def test_timeout(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(side_effect=httpx.ReadTimeout("slow"))
        respx.get(CANONICAL).mock(side_effect=httpx.ReadTimeout("slow"))
        result = await prober.probe(CANONICAL)
        assert result.is_valid is False
        assert result.reason == "Request timed out"

    @respx.mock
    async def test_connect_error_is_network_error(self, prober: HttpLinkProber) -> None:
        respx.head(CANONICAL).mock(side_effect=httpx.ConnectError("connection refused"))
        respx.get(CANONICAL).mock(side_effect=httpx.ConnectError("connection refused"))
        result = await prober.probe(CANONICAL)
        assert result.is_valid is False
        assert result.reason == "Network error: connection refused"

    @respx.mock
    async def test_timeout_is_distinct_from_network_error(
        self, prober: HttpLinkProber
    ) -> None:
        respx.head(CANONICAL).mock(side_effect=httpx.ConnectError("refused"))
        respx.get(CANONICAL).mock(side_effect=httpx.ConnectTimeout("slow"))
        result = await prober.probe(CANONICAL)
        assert result.reason == "Request timed out"


class TestRequestShape:
    async def test_head_uses_timeout_and_no_auto_redirects(self) -> None:
        response = MagicMock()
        response.status_code = 200
        response.headers = {}
        client = AsyncMock(spec=httpx.AsyncClient)
        client.head = AsyncMock(return_value=response)

        prober = HttpLinkProber(client, timeout_seconds=3.5)
        result = await prober.probe(CANONICAL)

        assert result.is_valid is True
        kwargs = client.head.call_args.kwargs
        assert kwargs["timeout"] == 3.5
        assert kwargs["follow_redirects"] is False


class TestMetrics:
    @respx.mock
    async def test_records_one_probe_per_chain(self, client: httpx.AsyncClient) -> None:
        metrics = MetricsCollector()
        prober = HttpLinkProber(client, metrics=metrics)
        respx.head(SHORT).mock(
            return_value=httpx.Response(301, headers={"location": CANONICAL})
        )
        respx.head(CANONICAL).mock(return_value=httpx.Response(404))

        await prober.probe(SHORT)

        probe = metrics.snapshot()["probe"]
        assert probe["probes"] == 1
        assert probe["invalid"] == 1
        assert probe["failures"] == {"not_found": 1}
