"""
Format-Erkennung, JSON-Normalisierung und grenzbewusste Kürzung
"""

import json
import logging
import re

logger = logging.getLogger(__name__)

FORMAT_JSON = "json"
FORMAT_HTML = "html"
FORMAT_TEXT = "text"

TRUNCATION_MARKER = "\n\n[... content truncated ...]"
# Zeilengrenze wird nur genutzt, wenn sie in den letzten 20% liegt
LINE_BOUNDARY_RATIO = 0.8

_HTML_SNIFF = re.compile(r"<!doctype html|<html[\s>]|<body[\s>]|<head[\s>]", re.IGNORECASE)


def is_json_content_type(content_type: str) -> bool:
    ct = (content_type or "").lower()
    return "json" in ct


def detect_format(content: str, content_type: str) -> str:
    """
    Bestimmt das Dokumentformat.

    Returns:
        "json" | "html" | "text"
    """
    ct = (content_type or "").lower()
    if is_json_content_type(ct):
        return FORMAT_JSON
    if "html" in ct:
        return FORMAT_HTML

    stripped = (content or "").lstrip()
    if stripped[:1] in ("{", "["):
        try:
            json.loads(stripped)
            return FORMAT_JSON
        except ValueError:
            pass
    if _HTML_SNIFF.search(stripped[:2000]):
        return FORMAT_HTML
    return FORMAT_TEXT


def normalize(content: str, content_type: str) -> str:
    """
    Pretty-printed JSON mit stabiler Einrückung. Parse-Fehler werden nie
    gemeldet: dann kommt der Originaltext zurück.
    """
    if detect_format(content, content_type) != FORMAT_JSON:
        return content
    try:
        return json.dumps(json.loads(content), indent=2, ensure_ascii=False)
    except ValueError as e:
        logger.debug(f"JSON-Normalisierung übersprungen: {e}")
        return content


def truncate(content: str, max_length: int, smart: bool = True) -> str:
    """
    Kürzt Text auf max_length Zeichen plus Marker.

    Mit smart=True wird an der letzten Zeilengrenze vor max_length
    geschnitten, sofern diese bei >= 80% von max_length liegt.
    Bereits gekürzter Text (Marker am Ende, Rest im Budget) bleibt
    unverändert, die Funktion ist damit idempotent.
    """
    if content is None:
        return ""
    if len(content) <= max_length:
        return content
    if content.endswith(TRUNCATION_MARKER) and len(content) - len(TRUNCATION_MARKER) <= max_length:
        return content

    cut = max_length
    if smart:
        boundary = content.rfind("\n", 0, max_length + 1)
        if boundary >= LINE_BOUNDARY_RATIO * max_length:
            cut = boundary

    return content[:cut] + TRUNCATION_MARKER
