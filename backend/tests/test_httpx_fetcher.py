from dataclasses import replace

import httpx
import pytest

from api_docs_reader.services.fetchers.types import FetchFailure, FetchSuccess
from helpers import SPA_HTML, STATIC_HTML, RecordingHandler, html_response, make_fetcher

URL = "https://docs.example.com/api"


@pytest.mark.asyncio
async def test_success_on_first_attempt(settings):
    handler = RecordingHandler(lambda request: html_response())
    fetcher = make_fetcher(settings, handler)

    result = await fetcher.fetch(URL)

    assert isinstance(result, FetchSuccess)
    assert result.status == 200
    assert result.content == STATIC_HTML
    assert result.content_type.startswith("text/html")
    assert result.is_spa is False
    assert result.fallback_info is None
    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_exhausting_all_profiles_returns_last_error(settings):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    settings = replace(settings, max_retries=3, retry_delay_ms=1500)
    handler = RecordingHandler(lambda request: httpx.Response(503, text="unavailable"))
    fetcher = make_fetcher(settings, handler, sleep=fake_sleep)

    result = await fetcher.fetch(URL)

    assert isinstance(result, FetchFailure)
    assert result.reason == "HTTP 503: Service Unavailable"
    assert len(handler.requests) == 3 * 3
    assert result.attempts == 9
    # Delay nur zwischen ganzen Durchläufen
    assert sleeps == [1.5, 1.5]


@pytest.mark.asyncio
async def test_rotates_to_next_profile_after_rejection(settings):
    def respond(request):
        if "Chrome" in request.headers["user-agent"]:
            return httpx.Response(403, text="forbidden")
        return html_response()

    handler = RecordingHandler(respond)
    result = await make_fetcher(settings, handler).fetch(URL)

    assert isinstance(result, FetchSuccess)
    assert result.profile == "firefox-desktop"
    assert len(handler.requests) == 2


@pytest.mark.asyncio
async def test_without_rotation_one_request_per_attempt(settings):
    settings = replace(settings, retry_with_different_headers=False, max_retries=2)
    handler = RecordingHandler(lambda request: httpx.Response(500, text="boom"))

    result = await make_fetcher(settings, handler).fetch(URL)

    assert isinstance(result, FetchFailure)
    assert len(handler.requests) == 2


@pytest.mark.asyncio
async def test_short_body_counts_as_failure(settings):
    settings = replace(settings, max_retries=1)
    handler = RecordingHandler(lambda request: html_response("<p>tiny</p>"))

    result = await make_fetcher(settings, handler).fetch(URL)

    assert isinstance(result, FetchFailure)
    assert "too short" in result.reason


@pytest.mark.asyncio
async def test_declared_oversize_response_is_rejected(settings):
    settings = replace(settings, max_retries=1, max_response_size=500)
    handler = RecordingHandler(lambda request: html_response("a" * 1000))

    result = await make_fetcher(settings, handler).fetch(URL)

    assert isinstance(result, FetchFailure)
    assert "too large" in result.reason


@pytest.mark.asyncio
async def test_timeout_is_reported(settings):
    settings = replace(settings, max_retries=1)

    def respond(request):
        raise httpx.ReadTimeout("timed out", request=request)

    result = await make_fetcher(settings, RecordingHandler(respond)).fetch(URL)

    assert isinstance(result, FetchFailure)
    assert result.reason == "Request timed out after 60s"


@pytest.mark.asyncio
async def test_connection_error_is_reported(settings):
    settings = replace(settings, max_retries=1)

    def respond(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = await make_fetcher(settings, RecordingHandler(respond)).fetch(URL)

    assert isinstance(result, FetchFailure)
    assert result.reason == "ConnectError: connection refused"


@pytest.mark.asyncio
async def test_caller_headers_are_sent(settings):
    handler = RecordingHandler(lambda request: html_response())

    await make_fetcher(settings, handler).fetch(URL, {"Authorization": "Bearer secret"})

    assert handler.requests[0].headers["authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_follows_redirects(settings):
    def respond(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"location": "https://docs.example.com/new"})
        return html_response()

    handler = RecordingHandler(respond)
    result = await make_fetcher(settings, handler).fetch("https://docs.example.com/old")

    assert isinstance(result, FetchSuccess)
    assert [r.url.path for r in handler.requests] == ["/old", "/new"]


@pytest.mark.asyncio
async def test_spa_page_carries_fallback_info(settings):
    handler = RecordingHandler(lambda request: html_response(SPA_HTML))

    result = await make_fetcher(settings, handler).fetch("https://portal.example.com/docs/api")

    assert isinstance(result, FetchSuccess)
    assert result.is_spa is True
    assert "Page title: Developer Portal" in result.fallback_info
    assert "/static/js/main.4f2a.js" in result.fallback_info


@pytest.mark.asyncio
async def test_spa_detection_can_be_disabled(settings):
    settings = replace(settings, enable_javascript_detection=False)
    handler = RecordingHandler(lambda request: html_response(SPA_HTML))

    result = await make_fetcher(settings, handler).fetch(URL)

    assert isinstance(result, FetchSuccess)
    assert result.is_spa is False


@pytest.mark.asyncio
async def test_actual_oversize_body_is_rejected_without_content_length(settings):
    settings = replace(settings, max_retries=1, max_response_size=500)

    async def chunks():
        yield b"a" * 1000

    def respond(request):
        return httpx.Response(200, content=chunks(), headers={"content-type": "text/html"})

    result = await make_fetcher(settings, RecordingHandler(respond)).fetch(URL)

    assert isinstance(result, FetchFailure)
    assert result.reason == "Response too large: 1000 bytes (limit 500)"


@pytest.mark.asyncio
async def test_unbuildable_url_stops_without_retries(settings):
    handler = RecordingHandler(lambda request: html_response())

    result = await make_fetcher(settings, handler).fetch("https://docs.example.com:abc/x")

    assert isinstance(result, FetchFailure)
    assert result.reason.startswith("Invalid request:")
    assert result.attempts == 1
    assert handler.requests == []


@pytest.mark.asyncio
async def test_non_ascii_header_stops_without_retries(settings):
    handler = RecordingHandler(lambda request: html_response())

    result = await make_fetcher(settings, handler).fetch(URL, {"X-Team": "Café"})

    assert isinstance(result, FetchFailure)
    assert result.reason.startswith("Invalid request:")
    assert result.attempts == 1
    assert handler.requests == []
