"""
Fetch Manager - Single-Document-Pipeline und Batch-Orchestrierung
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Union

from ...config import Settings
from ...validators import InvalidDocUrlError, validate_doc_url
from ..extractors.formats import normalize, truncate
from ..extractors.summary import summarize
from .httpx_fetcher import HttpxFetcher
from .types import FetchFailure, FetchResult

logger = logging.getLogger(__name__)


@dataclass
class DocumentContent:
    """Statische Seite: Inhalt oder Summary, bereits gekürzt"""
    url: str
    content_type: str
    status: int
    text: str
    summarized: bool = False


@dataclass
class SpaDocument:
    """Script-gerenderte Shell: nur Fallback-Infos"""
    url: str
    content_type: str
    status: int
    fallback_info: str


@dataclass
class DocumentFailure:
    url: str
    reason: str


DocumentResult = Union[DocumentContent, SpaDocument, DocumentFailure]


@dataclass
class BatchItem:
    """Ergebnis eines Batch-Mitglieds (Exception wird als Text festgehalten)"""
    url: str
    result: Optional[DocumentResult] = None
    error: Optional[str] = None


class FetchManager:
    """
    Orchestriert fetch -> SPA-Check -> normalize -> summarize/truncate.

    Concurrency:
    - Single-Document-Aufrufe laufen bis zum Ende durch
    - Batch: alle URLs parallel via asyncio.gather, Fehler bleiben pro URL
    """

    def __init__(self, settings: Settings, fetcher: Optional[HttpxFetcher] = None):
        self.settings = settings
        self.fetcher = fetcher or HttpxFetcher(settings)

    def should_summarize(self, content: str, max_length: int, extract_summary: bool) -> bool:
        """Expliziter Flag gewinnt, sonst Größen-Heuristik (falls aktiviert)"""
        if extract_summary:
            return True
        return self.settings.auto_summary_for_large_content and len(content) > max_length

    async def fetch_raw(self, url: str, headers: Optional[Mapping[str, str]] = None) -> FetchResult:
        """Validiert die URL und fetcht sie (ohne Nachbearbeitung)"""
        try:
            url = validate_doc_url(url)
        except InvalidDocUrlError as e:
            logger.warning(f"Ungültige URL abgelehnt: {url!r} ({e.code})")
            return FetchFailure(url=url, reason=e.message)
        return await self.fetcher.fetch(url, headers)

    async def process_document(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        max_length: Optional[int] = None,
        extract_summary: bool = False,
    ) -> DocumentResult:
        """
        Single-Document-Pipeline.

        Args:
            url: Dokumentations-URL
            headers: Optionale Caller-Header
            max_length: Budget für den Inhalt (Default: max_content_length)
            extract_summary: Summary erzwingen

        Returns:
            DocumentContent | SpaDocument | DocumentFailure
        """
        budget = max_length if max_length and max_length > 0 else self.settings.max_content_length
        smart = self.settings.smart_truncation

        fetched = await self.fetch_raw(url, headers)
        if isinstance(fetched, FetchFailure):
            return DocumentFailure(url=fetched.url, reason=fetched.reason)

        if fetched.is_spa:
            return SpaDocument(
                url=fetched.url,
                content_type=fetched.content_type,
                status=fetched.status,
                fallback_info=truncate(fetched.fallback_info or "", budget, smart=smart),
            )

        content = normalize(fetched.content, fetched.content_type)
        if self.should_summarize(content, budget, extract_summary):
            text = summarize(content, fetched.content_type, self.settings.summary_length, smart=smart)
            summarized = True
        else:
            text = truncate(content, budget, smart=smart)
            summarized = False

        return DocumentContent(
            url=fetched.url,
            content_type=fetched.content_type,
            status=fetched.status,
            text=truncate(text, budget, smart=smart),
            summarized=summarized,
        )

    async def process_batch(
        self,
        urls: List[str],
        headers: Optional[Mapping[str, str]] = None,
        max_length: Optional[int] = None,
    ) -> List[BatchItem]:
        """
        Verarbeitet alle URLs parallel (Summary erzwungen).

        Returns:
            BatchItems in Eingabe-Reihenfolge
        """
        budget = max_length if max_length and max_length > 0 else self.settings.batch_max_length
        logger.info(f"Batch gestartet: {len(urls)} URLs")

        outcomes = await asyncio.gather(
            *[self.process_document(url, headers, budget, extract_summary=True) for url in urls],
            return_exceptions=True,
        )

        items = []
        for url, outcome in zip(urls, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Unerwarteter Fehler im Batch für {url}: {outcome}")
                items.append(BatchItem(url=url, error=str(outcome) or type(outcome).__name__))
            else:
                items.append(BatchItem(url=url, result=outcome))

        failed = sum(1 for item in items if item.error or isinstance(item.result, DocumentFailure))
        logger.info(f"Batch abgeschlossen: {len(items) - failed} erfolgreich, {failed} fehlgeschlagen")
        return items
