"""
Header-Profile - alternative HTTP-Identitäten für Retries
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from ...config import Settings

DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml,application/json,text/plain,*/*"

FIREFOX_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0"
SAFARI_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_4) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15"


@dataclass(frozen=True)
class HeaderProfile:
    """Benannte Header-Menge, die als eine Browser-Identität auftritt"""
    name: str
    headers: Dict[str, str]


def _merge(base: Dict[str, str], extra: Optional[Mapping[str, str]]) -> Dict[str, str]:
    # Caller-Header gewinnen immer
    merged = dict(base)
    if extra:
        merged.update({str(k): str(v) for k, v in extra.items()})
    return merged


def build_header_profiles(settings: Settings, extra_headers: Optional[Mapping[str, str]] = None) -> List[HeaderProfile]:
    """
    Erzeugt die geordnete Liste der Header-Profile für einen Fetch.

    Mit retry_with_different_headers: drei verschiedene Identitäten
    (Chrome mit konfiguriertem User-Agent, Firefox, Safari).
    Ohne: ein einziges Profil aus User-Agent + Caller-Headern.

    Args:
        settings: Prozess-Konfiguration
        extra_headers: Vom Caller übergebene Header

    Returns:
        Liste von HeaderProfile in Versuchsreihenfolge
    """
    if not settings.retry_with_different_headers:
        return [
            HeaderProfile(
                name="default",
                headers=_merge({"User-Agent": settings.user_agent, "Accept": DEFAULT_ACCEPT}, extra_headers),
            )
        ]

    chrome = {
        "User-Agent": settings.user_agent,
        "Accept": DEFAULT_ACCEPT,
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
    }
    firefox = {
        "User-Agent": FIREFOX_USER_AGENT,
        "Accept": DEFAULT_ACCEPT,
        "Accept-Language": "en-US,en;q=0.5",
        "DNT": "1",
        "Upgrade-Insecure-Requests": "1",
    }
    safari = {
        "User-Agent": SAFARI_USER_AGENT,
        "Accept": DEFAULT_ACCEPT,
        "Accept-Language": "en-GB,en;q=0.9",
    }

    return [
        HeaderProfile(name="chrome-desktop", headers=_merge(chrome, extra_headers)),
        HeaderProfile(name="firefox-desktop", headers=_merge(firefox, extra_headers)),
        HeaderProfile(name="safari-macos", headers=_merge(safari, extra_headers)),
    ]
