"""
SPA-Erkennung und Fallback-Extraktion für script-gerenderte Seiten
"""

import logging
import re
from typing import List

from bs4 import BeautifulSoup

from ...utils.url_utils import get_base_url, guidance_for_url
from .rules import SPA_RULES

logger = logging.getLogger(__name__)

MAX_SCRIPT_REFERENCES = 10
# Weniger sichtbarer Text als das gilt als "nur ein Script-Tag"
SHELL_TEXT_THRESHOLD = 50


def _is_single_script_shell(body: str) -> bool:
    """Body besteht im Wesentlichen aus genau einer externen Script-Referenz"""
    if "<script" not in body.lower():
        return False

    soup = BeautifulSoup(body, "lxml")
    external_scripts = soup.find_all("script", src=True)
    if len(external_scripts) != 1:
        return False

    for tag in soup(["script", "style", "noscript", "head"]):
        tag.extract()
    visible_text = re.sub(r"\s+", " ", soup.get_text()).strip()
    return len(visible_text) < SHELL_TEXT_THRESHOLD


def is_spa(body: str) -> bool:
    """
    Prüft, ob eine Seite eine script-gerenderte Shell ohne statischen Inhalt ist.

    Marker:
    - leerer Mount-Point (id="root", "app", "__next", ...)
    - "enable JavaScript"- oder Template-Warnungen
    - Framework-Marker (data-reactroot, __NEXT_DATA__, ng-version, ...)
    - Body besteht nur aus einer externen Script-Referenz
    """
    if not body:
        return False

    for rule in SPA_RULES:
        if rule.pattern.search(body):
            logger.debug(f"SPA-Marker gefunden: {rule.label}")
            return True

    return _is_single_script_shell(body)


def extract_fallback(body: str, url: str, from_partial_content: bool = True) -> str:
    """
    Best-Effort-Infos für SPA-Seiten: Titel, Meta-Description, Script-Pfade
    plus aus der URL abgeleitete Hinweise. Wirft nie.

    Args:
        body: Roh-HTML der Shell
        url: Dokumentations-URL
        from_partial_content: False -> nur URL-Hinweise, kein HTML-Parsing

    Returns:
        Textblock mit Fallback-Infos
    """
    sections: List[str] = []

    if from_partial_content and body:
        try:
            sections.extend(_extract_page_signals(body, url))
        except Exception as e:
            logger.warning(f"SPA-Fallback-Extraktion fehlgeschlagen für {url}: {e}")

    sections.append(guidance_for_url(url))
    return "\n\n".join(sections)


def _extract_page_signals(body: str, url: str) -> List[str]:
    soup = BeautifulSoup(body, "lxml")
    sections = []

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""
    if title:
        sections.append(f"Page title: {title}")

    meta = soup.find("meta", attrs={"name": re.compile(r"^description$", re.IGNORECASE)})
    description = (meta.get("content") or "").strip() if meta else ""
    if description:
        sections.append(f"Description: {description}")

    scripts = []
    for tag in soup.find_all("script", src=True):
        src = tag.get("src", "").strip()
        if src and src not in scripts:
            scripts.append(src)

    if scripts:
        lines = ["Referenced scripts:"]
        lines.extend(f"- {src}" for src in scripts[:MAX_SCRIPT_REFERENCES])
        if len(scripts) > MAX_SCRIPT_REFERENCES:
            lines.append(f"... and {len(scripts) - MAX_SCRIPT_REFERENCES} more")
        base = get_base_url(url)
        lines.append(f"Candidate spec locations: {base}/openapi.json, {base}/swagger.json")
        sections.append("\n".join(lines))

    return sections
