"""
URL Utilities - Hinweise aus der Dokumentations-URL ableiten
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UrlHintRule:
    """Substring der URL -> feste Hinweis-Bullets"""
    keywords: Tuple[str, ...]
    title: str
    bullets: Tuple[str, ...]


URL_HINT_RULES: Tuple[UrlHintRule, ...] = (
    UrlHintRule(
        keywords=("oauth",),
        title="OAuth flow (inferred from URL)",
        bullets=(
            "1. Register an application to obtain a client_id and client_secret",
            "2. Redirect the user to the authorization endpoint (/authorize)",
            "3. Exchange the returned code for an access token at the token endpoint (/token)",
            "4. Send the access token as 'Authorization: Bearer <token>' and refresh it before expiry",
        ),
    ),
    UrlHintRule(
        keywords=("auth", "login", "token"),
        title="Authentication (inferred from URL)",
        bullets=(
            "API key in a header such as 'X-API-Key' or 'Authorization'",
            "Bearer token: 'Authorization: Bearer <token>'",
            "Basic auth: 'Authorization: Basic base64(user:password)'",
            "OAuth 2.0 access token obtained from a token endpoint",
        ),
    ),
    UrlHintRule(
        keywords=("/docs/api", "/api-docs", "/apidocs", "/reference", "swagger", "openapi"),
        title="API reference (inferred from URL)",
        bullets=(
            "Try machine-readable specs at /openapi.json, /swagger.json or /v3/api-docs",
            "Reference pages usually list one endpoint per section with method and path",
        ),
    ),
    UrlHintRule(
        keywords=("webhook",),
        title="Webhooks (inferred from URL)",
        bullets=(
            "Webhook payloads are usually POSTed as JSON to a URL you register",
            "Verify the signature header before trusting a payload",
        ),
    ),
)

TROUBLESHOOTING_BULLETS: Tuple[str, ...] = (
    "Check whether the provider publishes a machine-readable spec (OpenAPI/Swagger JSON or YAML)",
    "Open the page in a browser and inspect the network traffic for the underlying JSON/API calls",
    "Contact the API provider or look for an SDK / GitHub repository with the documentation",
)


def url_keyword_hints(url: str) -> List[str]:
    """
    Leitet Hinweis-Blöcke aus Substrings der URL ab.

    Args:
        url: Dokumentations-URL

    Returns:
        Liste formatierter Blöcke (leer wenn keine Regel greift)
    """
    url_lower = (url or "").lower()
    blocks = []
    for rule in URL_HINT_RULES:
        if any(keyword in url_lower for keyword in rule.keywords):
            lines = [f"{rule.title}:"] + [f"- {bullet}" for bullet in rule.bullets]
            blocks.append("\n".join(lines))
    return blocks


def troubleshooting_block() -> str:
    """Generischer Troubleshooting-Block (immer vorhanden)"""
    return "\n".join(["Suggestions:"] + [f"- {bullet}" for bullet in TROUBLESHOOTING_BULLETS])


def guidance_for_url(url: str) -> str:
    """URL-Hinweise + Troubleshooting als ein Textblock"""
    return "\n\n".join(url_keyword_hints(url) + [troubleshooting_block()])


def get_base_url(url: str) -> str:
    """
    Extrahiert die Base URL (scheme + domain) aus einer URL.

    Beispiel:
        >>> get_base_url("https://example.com/page?param=value")
        'https://example.com'
    """
    try:
        parsed = urlparse(url)
        return f"{parsed.scheme}://{parsed.netloc}"
    except ValueError as e:
        logger.warning(f"Base URL extraction failed for {url}: {e}")
        return url
