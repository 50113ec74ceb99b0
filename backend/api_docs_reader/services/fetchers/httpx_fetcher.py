"""
Httpx Fetcher - Retries mit rotierenden Header-Profilen
"""

import asyncio
import logging
from typing import Awaitable, Callable, Mapping, Optional

import httpx

from ...config import Settings
from ..extractors.spa import extract_fallback, is_spa
from .header_profiles import HeaderProfile, build_header_profiles
from .types import FetchFailure, FetchRequest, FetchResult, FetchSuccess

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 10
# Kürzere Bodies gelten als leere/Platzhalter-Seite
MIN_BODY_LENGTH = 100


class SubAttemptError(Exception):
    """Ein einzelner Versuch (Attempt x Profil) ist fehlgeschlagen"""


class HttpxFetcher:
    """
    Fetcht Dokumentations-URLs mit httpx.

    Ablauf pro fetch():
    - Äußere Schleife: Attempts 1..max_retries
    - Innere Schleife: Header-Profile in fester Reihenfolge
    - Erster Erfolg beendet beide Schleifen
    - retry_delay nur zwischen ganzen Attempt-Durchläufen

    Jeder Fetch nutzt einen eigenen AsyncClient, es gibt keinen geteilten
    Zustand zwischen parallelen Fetches.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings
        self._transport = transport
        self._sleep = sleep

    def build_request(self, url: str, headers: Optional[Mapping[str, str]] = None) -> FetchRequest:
        return FetchRequest(
            url=url,
            headers=dict(headers or {}),
            timeout=self.settings.timeout_seconds,
            max_retries=max(1, self.settings.max_retries),
        )

    async def fetch(self, url: str, headers: Optional[Mapping[str, str]] = None) -> FetchResult:
        """
        Fetcht eine URL mit Retries und Header-Rotation.

        Args:
            url: Die zu fetchende URL
            headers: Optionale Caller-Header (überschreiben Profil-Header)

        Returns:
            FetchSuccess oder FetchFailure (mit letztem Fehler)
        """
        request = self.build_request(url, headers)
        profiles = build_header_profiles(self.settings, request.headers)
        last_error = "No attempt made"
        sub_attempts = 0

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(request.timeout),
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
            transport=self._transport,
        ) as client:
            for attempt in range(1, request.max_retries + 1):
                for profile in profiles:
                    sub_attempts += 1
                    try:
                        result = await self._fetch_once(client, request, profile)
                        logger.info(
                            f"Fetch erfolgreich: {url} (attempt {attempt}/{request.max_retries}, "
                            f"profile {profile.name}, {len(result.content)} chars)"
                        )
                        return result
                    except SubAttemptError as e:
                        last_error = str(e)
                    except httpx.TimeoutException:
                        last_error = f"Request timed out after {request.timeout:g}s"
                    except httpx.HTTPError as e:
                        last_error = f"{type(e).__name__}: {e}" if str(e) else type(e).__name__
                    except (httpx.InvalidURL, UnicodeEncodeError) as e:
                        # Request lässt sich nicht bauen, weitere Versuche sind sinnlos
                        last_error = f"Invalid request: {e}"
                        logger.error(f"Fetch abgebrochen für {url}: {last_error}")
                        return FetchFailure(url=url, reason=last_error, attempts=sub_attempts)

                    logger.warning(
                        f"Fetch fehlgeschlagen für {url} (attempt {attempt}/{request.max_retries}, "
                        f"profile {profile.name}): {last_error}"
                    )

                if attempt < request.max_retries:
                    await self._sleep(self.settings.retry_delay_seconds)

        logger.error(f"Alle {sub_attempts} Versuche fehlgeschlagen für {url}: {last_error}")
        return FetchFailure(url=url, reason=last_error, attempts=sub_attempts)

    async def _fetch_once(self, client: httpx.AsyncClient, request: FetchRequest, profile: HeaderProfile) -> FetchSuccess:
        max_size = self.settings.max_response_size

        async with client.stream("GET", request.url, headers=profile.headers) as response:
            declared = response.headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > max_size:
                raise SubAttemptError(f"Response too large: {declared} bytes (limit {max_size})")

            if not 200 <= response.status_code < 300:
                raise SubAttemptError(f"HTTP {response.status_code}: {response.reason_phrase}")

            body = await response.aread()
            if len(body) > max_size:
                raise SubAttemptError(f"Response too large: {len(body)} bytes (limit {max_size})")

            text = response.text
            content_type = response.headers.get("content-type", "")
            status = response.status_code

        if len(text) < MIN_BODY_LENGTH:
            raise SubAttemptError(f"Response body too short ({len(text)} chars), likely an empty page")

        spa = self.settings.enable_javascript_detection and is_spa(text)
        fallback_info = None
        if spa:
            logger.info(f"SPA erkannt: {request.url}")
            fallback_info = extract_fallback(text, request.url, self.settings.extract_from_partial_content)

        return FetchSuccess(
            url=request.url,
            content=text,
            content_type=content_type,
            status=status,
            is_spa=spa,
            fallback_info=fallback_info,
            profile=profile.name,
        )
