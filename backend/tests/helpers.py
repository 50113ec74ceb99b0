"""
Test-Helfer - HTML/JSON-Fixtures und Mock-Transport-Factories
"""

import json
from typing import Callable, List

import httpx

from api_docs_reader.config import Settings
from api_docs_reader.services.fetchers.fetch_manager import FetchManager
from api_docs_reader.services.fetchers.httpx_fetcher import HttpxFetcher
from api_docs_reader.tools import ApiDocsService

STATIC_HTML = """<html><head><title>Pets API</title></head><body>
<h1>Pets API Reference</h1>
<p>The Pets API lets you manage pets. Authenticate every request with an API key sent in the X-API-Key header.</p>
<h2>List pets</h2>
<p><code>GET /v1/pets</code> returns all pets.</p>
<h2>Create pet</h2>
<p><code>POST /v1/pets</code> creates a pet.</p>
<table>
<thead><tr><th>Parameter</th><th>Type</th><th>Required</th></tr></thead>
<tbody>
<tr><td>name</td><td>string</td><td>yes</td></tr>
<tr><td>tag</td><td>string</td><td>no</td></tr>
</tbody>
</table>
<pre><code>curl -X GET https://api.example.com/v1/pets -H "X-API-Key: secret"</code></pre>
<p>Base URL: https://api.example.com/v1</p>
<p>Rate limit: 100 requests per minute. Exceeding it returns HTTP 429.</p>
</body></html>"""

SPA_HTML = (
    '<!DOCTYPE html><html><head><title>Developer Portal</title>'
    '<meta name="description" content="Docs for the Acme API"></head>'
    '<body><div id="root"></div><script src="/static/js/main.4f2a.js"></script></body></html>'
)

PLAIN_PROSE = (
    "Welcome to the changelog of our service. Version 2 adds faster search, "
    "better pagination and a new dashboard for reviewing recent activity."
)

OPENAPI_DOC = {
    "openapi": "3.0.0",
    "info": {"title": "Pets", "version": "1.2.0", "description": "A small pet store API"},
    "servers": [{"url": "https://api.example.com/v1"}],
    "paths": {
        "/pets": {"get": {"summary": "List pets"}},
        "/pets/{id}": {"get": {"summary": "Get pet"}, "delete": {"summary": "Delete pet"}},
    },
}




class RecordingHandler:
    """Zählt Requests und liefert Responses aus einer Funktion"""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


def html_response(body: str = STATIC_HTML, status: int = 200) -> httpx.Response:
    return httpx.Response(status, text=body, headers={"content-type": "text/html; charset=utf-8"})


def json_response(data, status: int = 200) -> httpx.Response:
    return httpx.Response(status, text=json.dumps(data), headers={"content-type": "application/json"})


def make_fetcher(settings: Settings, handler, sleep=None) -> HttpxFetcher:
    kwargs = {"transport": httpx.MockTransport(handler)}
    if sleep is not None:
        kwargs["sleep"] = sleep
    return HttpxFetcher(settings, **kwargs)


def make_manager(settings: Settings, handler) -> FetchManager:
    return FetchManager(settings, fetcher=make_fetcher(settings, handler))


def make_service(settings: Settings, handler) -> ApiDocsService:
    return ApiDocsService(settings, manager=make_manager(settings, handler))
