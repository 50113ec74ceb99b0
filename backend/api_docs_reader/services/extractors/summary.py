"""
Summary-Extraktion - formatabhängige, begrenzte Zusammenfassungen

Drei Zweige (JSON-Schema, HTML, Plain Text). Jeder Fehler in einem Zweig
fällt auf den Plain-Text-Zweig zurück, das Ergebnis wird immer auf
summary_length gekürzt.
"""

import json
import logging
from typing import Any, List

from .formats import FORMAT_HTML, FORMAT_JSON, detect_format, truncate
from .rules import AUTH_KEYWORDS, BASE_URL_RULES, PARAMETER_KEYWORDS
from .structure import (
    extract_api_endpoints,
    extract_authentication,
    extract_code_examples,
    extract_parameters,
    find_endpoint_tokens,
    is_openapi_document,
    openapi_operations,
    parse_document,
)

logger = logging.getLogger(__name__)

MAX_SUMMARY_PATHS = 10
MAX_DESCRIPTION_LENGTH = 200
MAX_STRUCTURE_DEPTH = 3
MAX_STRUCTURE_FIELDS = 5
MAX_HEADINGS = 15
MAX_HTML_ENDPOINTS = 20
MAX_TABLE_PREVIEW_ROWS = 3
MAX_EXAMPLES = 5
MAX_BASE_URLS = 5
MAX_OVERVIEW_LINES = 5
MAX_AUTH_LINES = 3
MAX_PARAMETER_LINES = 5


def summarize(content: str, content_type: str, max_length: int = 3000, smart: bool = True) -> str:
    """
    Erstellt eine Zusammenfassung passend zum Format. Wirft nie.

    Args:
        content: Normalisierter Dokumentinhalt
        content_type: Content-Type des Responses
        max_length: Budget (summary_length)
        smart: Zeilengrenzen beim Kürzen beachten

    Returns:
        Gekürzte Zusammenfassung
    """
    fmt = detect_format(content, content_type)
    try:
        if fmt == FORMAT_JSON:
            summary = summarize_json(content)
        elif fmt == FORMAT_HTML:
            summary = summarize_html(content)
        else:
            summary = summarize_text(content)
    except Exception as e:
        logger.warning(f"Summary ({fmt}) fehlgeschlagen, Fallback auf Plain Text: {e}")
        summary = summarize_text(content)

    return truncate(summary, max_length, smart=smart)


# --- JSON ---

def summarize_json(content: str) -> str:
    data = json.loads(content)
    if is_openapi_document(data):
        return summarize_openapi(data)
    return "JSON document structure:\n" + "\n".join(summarize_structure(data))


def _server_address(spec: dict) -> str:
    servers = spec.get("servers")
    if isinstance(servers, list) and servers and isinstance(servers[0], dict):
        return str(servers[0].get("url") or "")
    host = spec.get("host")
    if host:
        schemes = spec.get("schemes") or ["https"]
        return f"{schemes[0]}://{host}{spec.get('basePath', '')}"
    return ""


def summarize_openapi(spec: dict) -> str:
    """Format/Version, Info-Felder, Server und die ersten 10 Pfade"""
    if "openapi" in spec:
        label = f"OpenAPI {spec.get('openapi')}"
    else:
        label = f"Swagger {spec.get('swagger')}"

    info = spec.get("info") if isinstance(spec.get("info"), dict) else {}
    lines = [f"Format: {label}"]
    if info.get("title"):
        lines.append(f"Title: {info['title']}")
    if info.get("version"):
        lines.append(f"Version: {info['version']}")
    description = str(info.get("description") or "").strip()
    if description:
        if len(description) > MAX_DESCRIPTION_LENGTH:
            description = description[:MAX_DESCRIPTION_LENGTH] + "..."
        lines.append(f"Description: {description}")

    server = _server_address(spec)
    if server:
        lines.append(f"Server: {server}")

    operations = openapi_operations(spec)
    lines.append(f"Paths: {len(operations)}")
    if operations:
        lines.append("Endpoints:")
        for path, methods in operations[:MAX_SUMMARY_PATHS]:
            lines.append(f"  {', '.join(methods)} {path}".rstrip() if methods else f"  {path}")
        if len(operations) > MAX_SUMMARY_PATHS:
            lines.append(f"  ... and {len(operations) - MAX_SUMMARY_PATHS} more paths")
    return "\n".join(lines)


def _type_name(value: Any) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if value is None:
        return "null"
    return "string"


def summarize_structure(value: Any, depth: int = 0) -> List[str]:
    """Rekursive Strukturbeschreibung, begrenzt auf MAX_STRUCTURE_DEPTH Ebenen"""
    indent = "  " * depth
    if depth >= MAX_STRUCTURE_DEPTH:
        return []

    lines = []
    if isinstance(value, dict):
        lines.append(f"{indent}Object with {len(value)} fields")
        items = list(value.items())
        for key, child in items[:MAX_STRUCTURE_FIELDS]:
            lines.append(f"{indent}- {key}: {_type_name(child)}")
            if isinstance(child, (dict, list)):
                lines.extend(summarize_structure(child, depth + 1))
        if len(items) > MAX_STRUCTURE_FIELDS:
            lines.append(f"{indent}... and {len(items) - MAX_STRUCTURE_FIELDS} more fields")
    elif isinstance(value, list):
        lines.append(f"{indent}Array with {len(value)} items")
        if value:
            lines.extend(summarize_structure(value[0], depth + 1))
    else:
        lines.append(f"{indent}{_type_name(value)}")
    return lines


# --- HTML ---

def find_base_urls(text: str) -> List[str]:
    found = []
    for rule in BASE_URL_RULES:
        for match in rule.pattern.finditer(text):
            url = match.group(1).rstrip(".,;:/")
            if url not in found:
                found.append(url)
    return found[:MAX_BASE_URLS]


def summarize_html(content: str) -> str:
    """Titel, Überschriften, Endpoints, Parameter, Beispiele, Auth, Base-URLs"""
    doc = parse_document(content)
    soup = doc.soup
    sections = []

    if soup is not None and soup.title and soup.title.get_text(strip=True):
        sections.append(f"Title: {soup.title.get_text(strip=True)}")

    if soup is not None:
        headings = []
        for tag in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]):
            text = " ".join(tag.get_text(" ").split())
            if text:
                level = int(tag.name[1])
                headings.append(f"{'  ' * (level - 1)}- {text}")
            if len(headings) >= MAX_HEADINGS:
                break
        if headings:
            sections.append("Headings:\n" + "\n".join(headings))

    endpoints = extract_api_endpoints(doc)
    if endpoints:
        lines = [f"Endpoints ({len(endpoints)}):"]
        lines.extend(f"- {endpoint}" for endpoint in endpoints[:MAX_HTML_ENDPOINTS])
        if len(endpoints) > MAX_HTML_ENDPOINTS:
            lines.append(f"... and {len(endpoints) - MAX_HTML_ENDPOINTS} more")
        sections.append("\n".join(lines))

    tables = extract_parameters(doc)
    for index, table in enumerate(tables, start=1):
        lines = [f"Parameter table {index}:"]
        if table.headers:
            lines.append("  " + " | ".join(table.headers))
        for row in table.rows[:MAX_TABLE_PREVIEW_ROWS]:
            lines.append("  " + " | ".join(row))
        remaining = len(table.rows) + table.omitted_rows - MAX_TABLE_PREVIEW_ROWS
        if remaining > 0:
            lines.append(f"  ... and {remaining} more rows")
        sections.append("\n".join(lines))

    examples = extract_code_examples(doc)
    if examples:
        lines = ["Code examples:"]
        lines.extend(f"- [{example.language}] {example.preview}" for example in examples[:MAX_EXAMPLES])
        sections.append("\n".join(lines))

    auth = extract_authentication(doc)
    if auth:
        sections.append(f"Authentication: {auth}")

    base_urls = find_base_urls(doc.text)
    if base_urls:
        sections.append("Base URLs:\n" + "\n".join(f"- {url}" for url in base_urls))

    if not sections:
        return summarize_text(doc.text)
    return "\n\n".join(sections)


# --- Plain Text ---

def _lines_with_keywords(lines: List[str], keywords, limit: int) -> List[str]:
    hits = []
    for line in lines:
        lower = line.lower()
        if any(keyword in lower for keyword in keywords):
            hits.append(line)
            if len(hits) >= limit:
                break
    return hits


def summarize_text(content: str) -> str:
    """Überblick, Endpoint-Tokens, Auth- und Parameter-Zeilen"""
    lines = [line.strip() for line in (content or "").splitlines() if line.strip()]
    sections = []

    if lines:
        sections.append("Overview:\n" + "\n".join(lines[:MAX_OVERVIEW_LINES]))

    endpoints = find_endpoint_tokens(content or "")
    if endpoints:
        sections.append("Endpoints:\n" + "\n".join(f"- {endpoint}" for endpoint in endpoints))

    auth_lines = _lines_with_keywords(lines, AUTH_KEYWORDS, MAX_AUTH_LINES)
    if auth_lines:
        sections.append("Authentication:\n" + "\n".join(f"- {line}" for line in auth_lines))

    param_lines = _lines_with_keywords(lines, PARAMETER_KEYWORDS, MAX_PARAMETER_LINES)
    if param_lines:
        sections.append("Parameters:\n" + "\n".join(f"- {line}" for line in param_lines))

    if not sections:
        return "No summarizable content found."
    return "\n\n".join(sections)
