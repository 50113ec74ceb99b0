"""
Shared Types für Fetcher Module
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union


@dataclass(frozen=True)
class FetchRequest:
    """Ein einzelner Fetch-Auftrag (pro Aufruf unveränderlich)"""
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: float = 60.0
    max_retries: int = 3


@dataclass
class FetchSuccess:
    """Erfolgreicher Fetch. Bei is_spa=True ist fallback_info gesetzt."""
    url: str
    content: str
    content_type: str
    status: int
    is_spa: bool = False
    fallback_info: Optional[str] = None
    profile: Optional[str] = None


@dataclass
class FetchFailure:
    """Fehlgeschlagener Fetch nach allen Retries"""
    url: str
    reason: str
    attempts: int = 0


FetchResult = Union[FetchSuccess, FetchFailure]
