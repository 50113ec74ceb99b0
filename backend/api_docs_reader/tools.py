"""
Tool-Schnittstelle - Kommandos, Argument-Modelle und Text-Rendering

Einziger Adapter zwischen den Ergebnis-Typen der Pipeline und dem
Text/JSON-Envelope, den der Caller bekommt.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

from .config import Settings
from .services.extractors.formats import normalize, truncate
from .services.extractors.structure import DEFAULT_FOCUS_AREAS, build_structure_report
from .services.fetchers.fetch_manager import (
    BatchItem,
    DocumentFailure,
    DocumentResult,
    FetchManager,
    SpaDocument,
)
from .services.fetchers.types import FetchFailure
from .utils.url_utils import TROUBLESHOOTING_BULLETS, guidance_for_url, url_keyword_hints

logger = logging.getLogger(__name__)

FocusArea = Literal["endpoints", "authentication", "parameters", "examples", "errors", "ratelimits"]


class UnknownToolError(LookupError):
    """Unbekannter Tool-Name - der einzige Fehler, der die Schnittstelle verlässt"""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class _ToolArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ReadApiDocsArgs(_ToolArgs):
    url: str = Field(description="URL of the API documentation")
    headers: Dict[str, str] = Field(default_factory=dict, description="Optional HTTP request headers")
    max_length: Optional[int] = Field(default=None, alias="maxLength", gt=0, description="Maximum content length")
    extract_summary: bool = Field(default=False, alias="extractSummary", description="Return a summary instead of raw content")


class ReadMultipleApiDocsArgs(_ToolArgs):
    urls: List[str] = Field(description="List of API documentation URLs")
    headers: Dict[str, str] = Field(default_factory=dict, description="Optional HTTP request headers")
    max_length: Optional[int] = Field(default=None, alias="maxLength", gt=0, description="Maximum length per document")


class ReadApiDocsSummaryArgs(_ToolArgs):
    url: str = Field(description="URL of the API documentation")
    headers: Dict[str, str] = Field(default_factory=dict, description="Optional HTTP request headers")


class ExtractApiStructureArgs(_ToolArgs):
    url: str = Field(description="URL of the API documentation")
    headers: Dict[str, str] = Field(default_factory=dict, description="Optional HTTP request headers")
    focus_areas: List[FocusArea] = Field(
        default_factory=lambda: list(DEFAULT_FOCUS_AREAS),
        alias="focusAreas",
        description="Categories of structural information to extract",
    )


# --- Rendering ---

def _header_lines(url: str, content_type: str, status: int) -> str:
    return f"URL: {url}\nContent-Type: {content_type or 'unknown'}\nStatus: {status}"


def render_failure(url: str, reason: str) -> str:
    return (
        "Failed to read API documentation\n"
        f"URL: {url}\n"
        f"Error: {reason}\n\n"
        f"{guidance_for_url(url)}"
    )


def render_document(result: DocumentResult) -> str:
    """Rendert ein Pipeline-Ergebnis als Text-Report"""
    if isinstance(result, DocumentFailure):
        return render_failure(result.url, result.reason)

    if isinstance(result, SpaDocument):
        return (
            f"{_header_lines(result.url, result.content_type, result.status)}\n\n"
            "Page type: SPA (content is rendered client-side by JavaScript; the static HTML carries no documentation)\n\n"
            f"Fallback info:\n{result.fallback_info}"
        )

    label = "Summary" if result.summarized else "Content"
    return f"{_header_lines(result.url, result.content_type, result.status)}\n\n{label}:\n{result.text}"


def render_batch(items: List[BatchItem]) -> str:
    sections = [f"Batch read of {len(items)} API documents:"]
    for index, item in enumerate(items, start=1):
        if item.error is not None:
            body = f"Failed to read document\nURL: {item.url}\nError: {item.error}"
        else:
            body = render_document(item.result)
        sections.append(f"=== Document {index} ===\n{body}")
    return "\n\n".join(sections)


# --- Service ---

@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    args_model: Type[_ToolArgs]


TOOL_DEFINITIONS = (
    ToolDefinition(
        "read_api_docs",
        "Read the content of an API documentation page from a URL",
        ReadApiDocsArgs,
    ),
    ToolDefinition(
        "read_multiple_api_docs",
        "Read several API documentation URLs concurrently and return a combined summary report",
        ReadMultipleApiDocsArgs,
    ),
    ToolDefinition(
        "read_api_docs_summary",
        "Read an API documentation page and return a bounded summary",
        ReadApiDocsSummaryArgs,
    ),
    ToolDefinition(
        "extract_api_structure",
        "Extract endpoints, authentication, parameters, examples, error codes and rate limits as JSON",
        ExtractApiStructureArgs,
    ),
)


class ApiDocsService:
    """Führt Tool-Aufrufe aus; alle Ergebnisse sind Text"""

    def __init__(self, settings: Settings, manager: Optional[FetchManager] = None):
        self.settings = settings
        self.manager = manager or FetchManager(settings)
        self._handlers: Dict[str, Callable[[Any], Awaitable[str]]] = {
            "read_api_docs": self.read_api_docs,
            "read_multiple_api_docs": self.read_multiple_api_docs,
            "read_api_docs_summary": self.read_api_docs_summary,
            "extract_api_structure": self.extract_api_structure,
        }

    def list_tools(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.args_model.model_json_schema(by_alias=True),
            }
            for tool in TOOL_DEFINITIONS
        ]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
        """
        Dispatcht einen Tool-Aufruf.

        Raises:
            UnknownToolError: Unbekannter Tool-Name
            pydantic.ValidationError: Ungültige Argumente
        """
        definition = next((tool for tool in TOOL_DEFINITIONS if tool.name == name), None)
        if definition is None:
            raise UnknownToolError(name)

        args = definition.args_model.model_validate(arguments or {})
        logger.info(f"Tool-Aufruf: {name}")
        return await self._handlers[name](args)

    async def read_api_docs(self, args: ReadApiDocsArgs) -> str:
        result = await self.manager.process_document(
            args.url, args.headers, args.max_length, extract_summary=args.extract_summary
        )
        return render_document(result)

    async def read_api_docs_summary(self, args: ReadApiDocsSummaryArgs) -> str:
        result = await self.manager.process_document(args.url, args.headers, extract_summary=True)
        return render_document(result)

    async def read_multiple_api_docs(self, args: ReadMultipleApiDocsArgs) -> str:
        items = await self.manager.process_batch(args.urls, args.headers, args.max_length)
        report = render_batch(items)
        return truncate(report, 2 * self.settings.max_content_length, smart=self.settings.smart_truncation)

    async def extract_api_structure(self, args: ExtractApiStructureArgs) -> str:
        fetched = await self.manager.fetch_raw(args.url, args.headers)
        if isinstance(fetched, FetchFailure):
            payload = {
                "url": fetched.url,
                "error": fetched.reason,
                "hints": url_keyword_hints(fetched.url),
                "suggestions": list(TROUBLESHOOTING_BULLETS),
            }
            return json.dumps(payload, indent=2, ensure_ascii=False)

        report = build_structure_report(
            url=fetched.url,
            content=normalize(fetched.content, fetched.content_type),
            content_type=fetched.content_type,
            focus_areas=args.focus_areas,
            page_type="spa" if fetched.is_spa else "static",
            fallback_info=fetched.fallback_info if fetched.is_spa else None,
        )
        return report.to_json()
