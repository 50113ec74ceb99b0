"""
Deklarative Pattern-Tabellen für die Extraktoren

Jede Tabelle ordnet ein Pattern einem Feld bzw. Label zu. Die Extraktoren
iterieren nur über diese Tabellen, die Reihenfolge ist die Priorität.
"""

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

# Methoden, die in Summaries aufgelistet werden
SUMMARY_METHODS: Tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")
HTTP_METHODS: Tuple[str, ...] = SUMMARY_METHODS + ("HEAD", "OPTIONS")

# Max. Treffer pro Pattern vor der Deduplizierung
MAX_MATCHES_PER_RULE = 10

_METHODS = "|".join(HTTP_METHODS)
_URL_CHARS = r"[^\s\"'<>`)\]]"


@dataclass(frozen=True)
class Rule:
    """Ein Eintrag einer Pattern-Tabelle"""
    label: str
    pattern: Pattern[str]


# --- Endpoints ---
METHOD_PATH = re.compile(rf"\b({_METHODS})\s+(/{_URL_CHARS}*)")
METHOD_PATH_ANCHORED = re.compile(rf"^({_METHODS})\s+(/\S*|https?://\S+)", re.IGNORECASE)
BARE_PATH = re.compile(r"^/[\w\-.~/{}:]+$")
API_PATH = re.compile(rf"(?<![\w/:.])/api/{_URL_CHARS}*")
API_URL = re.compile(rf"https?://{_URL_CHARS}*?/api{_URL_CHARS}*")
LEADING_VERB = re.compile(rf"^({_METHODS})\b", re.IGNORECASE)

# --- Base-URLs ---
BASE_URL_RULES: Tuple[Rule, ...] = (
    Rule("labelled", re.compile(rf"base\s*(?:url|uri|path)\s*[:=]?\s*(https?://{_URL_CHARS}+)", re.IGNORECASE)),
    Rule("api-host", re.compile(rf"(https?://api\.[\w.-]+(?:/{_URL_CHARS}*)?)")),
    Rule("versioned", re.compile(rf"(https?://[\w.-]+(?::\d+)?/(?:api/)?v\d+)\b")),
)

# --- Authentifizierung (Priorität = Reihenfolge) ---
AUTH_RULES: Tuple[Rule, ...] = (
    Rule("API Key", re.compile(r"api[\s_-]?key|x-api-key", re.IGNORECASE)),
    Rule("Bearer Token", re.compile(r"\bbearer\b", re.IGNORECASE)),
    Rule("Basic Auth", re.compile(r"basic\s+auth", re.IGNORECASE)),
    Rule("OAuth", re.compile(r"\boauth", re.IGNORECASE)),
    Rule("JWT", re.compile(r"\bjwt\b|json\s+web\s+token", re.IGNORECASE)),
)

AUTH_KEYWORDS: Tuple[str, ...] = ("auth", "token", "api key", "apikey", "api-key", "bearer", "oauth")
PARAMETER_KEYWORDS: Tuple[str, ...] = ("param", "parameter", "argument", "query", "required", "optional", "field")

# --- Code-Beispiele (Reihenfolge = Priorität) ---
LANGUAGE_RULES: Tuple[Rule, ...] = (
    Rule("curl", re.compile(r"^\s*(?:\$\s*)?(?:curl|wget|http)\s|\bcurl\s+-", re.MULTILINE)),
    Rule("json", re.compile(r"^\s*[\[{][\s\S]*[:][\s\S]*[\]}]\s*$")),
    Rule("python", re.compile(r"^\s*(?:import\s+[\w.]+\s*$|from\s+[\w.]+\s+import\b)|\bdef\s+\w+\s*\(|\bprint\(", re.MULTILINE)),
    Rule("javascript", re.compile(r"\b(?:const|let)\s+\w+|=>|\brequire\(")),
    Rule("java", re.compile(r"\bpublic\s+(?:static\s+)?class\b|^\s*import\s+(?:java|javax|com|org)\.[\w.]+;", re.MULTILINE)),
)
UNKNOWN_LANGUAGE = "unknown"
CODE_PREVIEW_LENGTH = 50
MIN_CODE_LENGTH = 10
FENCED_CODE = re.compile(r"```[\w+-]*\n(.*?)```", re.DOTALL)

# --- Fehlercodes ---
ERROR_RULES: Tuple[Rule, ...] = (
    Rule("error-code", re.compile(r"error\s+code\s*:?\s*\d+", re.IGNORECASE)),
    Rule("status-code", re.compile(r"status\s+code\s*:?\s*\d{3}", re.IGNORECASE)),
    Rule("http-status", re.compile(r"\bhttp\s+\d{3}\b", re.IGNORECASE)),
    Rule("known-code", re.compile(r"\b(?:400|401|403|404|429|500|502|503)\b")),
)

# --- Rate Limits ---
RATE_LIMIT_RULES: Tuple[Rule, ...] = (
    Rule("rate-limit", re.compile(r"rate[\s-]?limit[^.\n]{0,80}", re.IGNORECASE)),
    Rule("per-interval", re.compile(r"\d[\d,]*\s+(?:requests?|calls?)\s+(?:per|an?|every)\s+(?:second|minute|hour|day|month)", re.IGNORECASE)),
    Rule("slash-interval", re.compile(r"\d[\d,]*\s*(?:requests?|calls?|req)\s*/\s*(?:s|sec|second|min|minute|h|hour|day)\b", re.IGNORECASE)),
    Rule("throttle", re.compile(r"throttl\w*[^.\n]{0,60}", re.IGNORECASE)),
    Rule("quota", re.compile(r"quota[^.\n]{0,60}", re.IGNORECASE)),
)

# --- SPA-Signaturen ---
SPA_RULES: Tuple[Rule, ...] = (
    Rule("empty-mount-point", re.compile(
        r"<div[^>]*\bid\s*=\s*[\"'](?:root|app|__next|__nuxt|main-app)[\"'][^>]*>\s*</div>", re.IGNORECASE)),
    Rule("javascript-required", re.compile(
        r"you need to enable javascript to run this app|please enable javascript|javascript is required", re.IGNORECASE)),
    Rule("template-warning", re.compile(
        r"this (?:html )?file is a template|this is a template|<%=\s*htmlWebpackPlugin", re.IGNORECASE)),
    Rule("framework-marker", re.compile(
        r"data-reactroot|__NEXT_DATA__|next/script|window\.__NUXT__|\bng-version=|data-v-app|webpackJsonp|data-server-rendered", re.IGNORECASE)),
)
