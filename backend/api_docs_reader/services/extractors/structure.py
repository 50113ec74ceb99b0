"""
Struktur-Extraktion - heuristische API-Fakten aus HTML/Text

Alle Funktionen sind rein und liefern leere Container bzw. None statt
Exceptions, wenn nichts gefunden wird. Markup wird einmal tolerant
geparst (BeautifulSoup/lxml), die Patterns kommen aus rules.py.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field

from .rules import (
    API_PATH,
    API_URL,
    AUTH_RULES,
    BARE_PATH,
    CODE_PREVIEW_LENGTH,
    ERROR_RULES,
    FENCED_CODE,
    LANGUAGE_RULES,
    LEADING_VERB,
    MAX_MATCHES_PER_RULE,
    METHOD_PATH,
    METHOD_PATH_ANCHORED,
    MIN_CODE_LENGTH,
    PARAMETER_KEYWORDS,
    RATE_LIMIT_RULES,
    SUMMARY_METHODS,
    UNKNOWN_LANGUAGE,
    Rule,
)

logger = logging.getLogger(__name__)

DEFAULT_FOCUS_AREAS = ["endpoints", "authentication", "parameters", "examples"]

MAX_PARAMETER_ROWS = 10

_MARKUP = re.compile(r"<[a-zA-Z!/][^>]*>")
_INLINE_BACKTICK = re.compile(r"`([^`\n]+)`")
_WHITESPACE = re.compile(r"\s+")


class ParameterTable(BaseModel):
    headers: List[str] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)
    omitted_rows: int = Field(default=0, alias="omittedRows")

    model_config = ConfigDict(populate_by_name=True)


class CodeExample(BaseModel):
    language: str = UNKNOWN_LANGUAGE
    preview: str = ""
    code: str = ""


class ApiStructureReport(BaseModel):
    """Ergebnis von extract_api_structure; nur angefragte Bereiche sind gesetzt"""
    url: str
    content_type: str = Field(alias="contentType")
    page_type: str = Field(default="static", alias="pageType")
    fallback_info: Optional[str] = Field(default=None, alias="fallbackInfo")
    endpoints: Optional[List[str]] = None
    authentication: Optional[str] = None
    parameters: Optional[List[ParameterTable]] = None
    examples: Optional[List[CodeExample]] = None
    errors: Optional[List[str]] = None
    rate_limit: Optional[List[str]] = Field(default=None, alias="rateLimit")

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> str:
        data = self.model_dump(by_alias=True, exclude_unset=True)
        return json.dumps(data, indent=2, ensure_ascii=False)


@dataclass
class ParsedDocument:
    """Einmal geparstes Dokument: Rohtext, optionaler Soup-Baum, sichtbarer Text"""
    raw: str
    soup: Optional[BeautifulSoup]
    text: str


def parse_document(content: str) -> ParsedDocument:
    """Toleranter Tokenizer: Markup via lxml, alles andere bleibt Text"""
    content = content or ""
    if not _MARKUP.search(content):
        return ParsedDocument(raw=content, soup=None, text=content)

    try:
        soup = BeautifulSoup(content, "lxml")
    except Exception as e:
        logger.warning(f"Markup konnte nicht geparst werden, verwende Rohtext: {e}")
        return ParsedDocument(raw=content, soup=None, text=content)

    for tag in soup(["script", "style"]):
        tag.extract()
    return ParsedDocument(raw=content, soup=soup, text=soup.get_text("\n"))


DocumentInput = Union[str, ParsedDocument]


def _as_document(content: DocumentInput) -> ParsedDocument:
    if isinstance(content, ParsedDocument):
        return content
    return parse_document(content)


def clean_text(value: str) -> str:
    """Whitespace normalisieren, Reste von Markup entfernen"""
    return _WHITESPACE.sub(" ", _MARKUP.sub(" ", value or "")).strip()


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return result


def _match_rules(text: str, rules: Sequence[Rule]) -> List[str]:
    """Treffer aller Regeln, pro Regel gedeckelt, dann dedupliziert"""
    matches = []
    for rule in rules:
        found = [clean_text(m.group(0)) for m in rule.pattern.finditer(text)]
        matches.extend(found[:MAX_MATCHES_PER_RULE])
    return _dedupe(matches)


# --- Endpoints ---

def _inline_code_texts(doc: ParsedDocument) -> List[str]:
    if doc.soup is not None:
        return [
            clean_text(tag.get_text(" "))
            for tag in doc.soup.find_all(["code", "tt", "kbd"])
            if tag.find_parent("pre") is None
        ]
    return [clean_text(m.group(1)) for m in _INLINE_BACKTICK.finditer(doc.text)]


def _is_valid_endpoint(candidate: str) -> bool:
    return "/" in candidate or bool(LEADING_VERB.match(candidate))


def extract_api_endpoints(content: DocumentInput) -> List[str]:
    """
    Sammelt Endpoint-Kandidaten aus vier Quellen:
    1. Inline-Code "METHOD /path"
    2. Inline-Code mit nacktem Pfad
    3. Vollständige URLs mit "/api"
    4. "METHOD /path" in Tabellenzellen

    Returns:
        Deduplizierte Liste in Reihenfolge des ersten Auftretens
    """
    doc = _as_document(content)
    candidates = []

    inline = _inline_code_texts(doc)
    for text in inline:
        match = METHOD_PATH_ANCHORED.match(text)
        if match:
            candidates.append(f"{match.group(1).upper()} {match.group(2)}")
    for text in inline:
        if BARE_PATH.match(text):
            candidates.append(text)

    for match in API_URL.finditer(doc.text):
        candidates.append(match.group(0).rstrip(".,;:"))

    if doc.soup is not None:
        for cell in doc.soup.find_all(["td", "th"]):
            match = METHOD_PATH.search(clean_text(cell.get_text(" ")))
            if match:
                candidates.append(f"{match.group(1)} {match.group(2)}")

    return _dedupe(c for c in (clean_text(c) for c in candidates) if _is_valid_endpoint(c))


def find_endpoint_tokens(text: str) -> List[str]:
    """Endpoint-artige Tokens in Fließtext (METHOD /path, /api/..., URLs mit /api)"""
    tokens = []
    tokens.extend(f"{m.group(1)} {m.group(2)}" for m in list(METHOD_PATH.finditer(text))[:MAX_MATCHES_PER_RULE])
    tokens.extend(m.group(0).rstrip(".,;:") for m in list(API_PATH.finditer(text))[:MAX_MATCHES_PER_RULE])
    tokens.extend(m.group(0).rstrip(".,;:") for m in list(API_URL.finditer(text))[:MAX_MATCHES_PER_RULE])
    return _dedupe(tokens)


def openapi_operations(spec: Dict[str, Any]) -> List[Tuple[str, List[str]]]:
    """(path, [METHODS]) für alle Pfade eines OpenAPI/Swagger-Dokuments"""
    paths = spec.get("paths")
    if not isinstance(paths, dict):
        return []

    operations = []
    for path, item in paths.items():
        methods = []
        if isinstance(item, dict):
            methods = [key.upper() for key in item.keys() if str(key).upper() in SUMMARY_METHODS]
        operations.append((str(path), methods))
    return operations


def is_openapi_document(data: Any) -> bool:
    return isinstance(data, dict) and ("openapi" in data or "swagger" in data) and isinstance(data.get("paths"), dict)


# --- Authentifizierung ---

def extract_authentication(content: DocumentInput) -> Optional[str]:
    """Erstes Auth-Label nach Priorität (API Key, Bearer, Basic, OAuth, JWT) oder None"""
    doc = _as_document(content)
    for rule in AUTH_RULES:
        if rule.pattern.search(doc.text):
            return rule.label
    return None


# --- Parameter-Tabellen ---

def _row_cells(row) -> List[str]:
    return [clean_text(cell.get_text(" ")) for cell in row.find_all(["th", "td"])]


def _parse_table(table) -> Optional[ParameterTable]:
    rows = table.find_all("tr")
    if not rows:
        return None

    thead = table.find("thead")
    if thead is not None:
        header_row = thead.find("tr")
        headers = _row_cells(header_row) if header_row is not None else []
        data_rows = [row for row in rows if row.find_parent("thead") is None]
    else:
        headers = _row_cells(rows[0])
        data_rows = rows[1:]

    cells = [_row_cells(row) for row in data_rows]
    cells = [row for row in cells if any(row)]
    return ParameterTable(
        headers=headers,
        rows=cells[:MAX_PARAMETER_ROWS],
        omitted_rows=max(0, len(cells) - MAX_PARAMETER_ROWS),
    )


def extract_parameters(content: DocumentInput) -> List[ParameterTable]:
    """Tabellen mit Parameter-Keywords: Header + max. 10 Datenzeilen"""
    doc = _as_document(content)
    if doc.soup is None:
        return []

    tables = []
    for table in doc.soup.find_all("table"):
        table_text = table.get_text(" ").lower()
        if not any(keyword in table_text for keyword in PARAMETER_KEYWORDS):
            continue
        parsed = _parse_table(table)
        if parsed is not None and (parsed.headers or parsed.rows):
            tables.append(parsed)
    return tables


# --- Code-Beispiele ---

def detect_language(code: str) -> str:
    for rule in LANGUAGE_RULES:
        if rule.pattern.search(code):
            return rule.label
    return UNKNOWN_LANGUAGE


def _code_blocks(doc: ParsedDocument) -> List[str]:
    if doc.soup is None:
        return [m.group(1) for m in FENCED_CODE.finditer(doc.text)]

    blocks = [tag.get_text() for tag in doc.soup.find_all("pre")]
    for tag in doc.soup.find_all("code"):
        text = tag.get_text()
        if tag.find_parent("pre") is None and "\n" in text.strip():
            blocks.append(text)
    return blocks


def extract_code_examples(content: DocumentInput) -> List[CodeExample]:
    """Pre/Code-Blöcke (> 10 Zeichen) mit Sprach-Erkennung und 50-Zeichen-Preview"""
    doc = _as_document(content)
    examples = []
    for block in _code_blocks(doc):
        code = block.strip()
        if len(code) <= MIN_CODE_LENGTH:
            continue
        examples.append(CodeExample(
            language=detect_language(code),
            preview=code[:CODE_PREVIEW_LENGTH],
            code=code,
        ))
    return examples


# --- Fehlercodes / Rate Limits ---

def extract_error_codes(content: DocumentInput) -> Optional[List[str]]:
    doc = _as_document(content)
    return _match_rules(doc.text, ERROR_RULES) or None


def extract_rate_limits(content: DocumentInput) -> Optional[List[str]]:
    doc = _as_document(content)
    return _match_rules(doc.text, RATE_LIMIT_RULES) or None


# --- Report ---

def _openapi_endpoints(raw: str) -> List[str]:
    try:
        data = json.loads(raw)
    except ValueError:
        return []
    if not is_openapi_document(data):
        return []
    return [f"{method} {path}" for path, methods in openapi_operations(data) for method in methods]


def build_structure_report(
    url: str,
    content: str,
    content_type: str,
    focus_areas: Optional[Sequence[str]] = None,
    page_type: str = "static",
    fallback_info: Optional[str] = None,
) -> ApiStructureReport:
    """
    Führt die angefragten Extraktoren aus. Ein fehlschlagender Extraktor
    liefert einen leeren Bereich statt einer Exception.
    """
    areas = list(focus_areas) if focus_areas else list(DEFAULT_FOCUS_AREAS)
    doc = parse_document(content)

    extractors = {
        "endpoints": ("endpoints", lambda: _dedupe(_openapi_endpoints(doc.raw) + extract_api_endpoints(doc)), list),
        "authentication": ("authentication", lambda: extract_authentication(doc), lambda: None),
        "parameters": ("parameters", lambda: extract_parameters(doc), list),
        "examples": ("examples", lambda: extract_code_examples(doc), list),
        "errors": ("errors", lambda: extract_error_codes(doc), lambda: None),
        "ratelimits": ("rate_limit", lambda: extract_rate_limits(doc), lambda: None),
    }

    values: Dict[str, Any] = {}
    for area in areas:
        entry = extractors.get(area)
        if entry is None:
            logger.warning(f"Unbekannter Focus-Bereich ignoriert: {area}")
            continue
        field_name, extract, empty = entry
        try:
            values[field_name] = extract()
        except Exception as e:
            logger.warning(f"Extraktion '{area}' fehlgeschlagen für {url}: {e}")
            values[field_name] = empty()

    if fallback_info is not None:
        values["fallback_info"] = fallback_info
    return ApiStructureReport(url=url, content_type=content_type, page_type=page_type, **values)
