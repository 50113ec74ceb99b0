"""
Konfiguration - einmal beim Start geladen, danach read-only

Quellen (spätere überschreiben frühere):
1. Defaults
2. Optionale JSON-Datei (Pfad aus API_DOCS_CONFIG, camelCase-Keys)
3. Environment-Variablen API_DOCS_<NAME> (via python-dotenv)
"""

import json
import logging
import os
import pathlib
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "API_DOCS_"

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"

# camelCase-Key (Config-Datei) -> Feldname
CONFIG_KEYS = {
    "maxContentLength": "max_content_length",
    "maxResponseSize": "max_response_size",
    "summaryLength": "summary_length",
    "batchMaxLength": "batch_max_length",
    "autoSummaryForLargeContent": "auto_summary_for_large_content",
    "smartTruncation": "smart_truncation",
    "enableJavaScriptDetection": "enable_javascript_detection",
    "retryWithDifferentHeaders": "retry_with_different_headers",
    "extractFromPartialContent": "extract_from_partial_content",
    "timeout": "timeout_ms",
    "userAgent": "user_agent",
    "maxRetries": "max_retries",
    "retryDelay": "retry_delay_ms",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Prozessweite, unveränderliche Konfiguration"""
    # Größen-Budgets (Zeichen bzw. Bytes)
    max_content_length: int = 15000
    max_response_size: int = 5242880
    summary_length: int = 3000
    batch_max_length: int = 8000

    # Feature-Toggles
    auto_summary_for_large_content: bool = True
    smart_truncation: bool = True
    enable_javascript_detection: bool = True
    retry_with_different_headers: bool = True
    extract_from_partial_content: bool = True

    # Netzwerk
    timeout_ms: int = 60000
    user_agent: str = DEFAULT_USER_AGENT
    max_retries: int = 3
    retry_delay_ms: int = 2000

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000.0


def _coerce(name: str, raw: Any, default: Any) -> Any:
    """Konvertiert einen Rohwert in den Typ des Default-Werts"""
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return raw
        value = str(raw).strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ValueError(f"Ungültiger Boolean für {name}: {raw!r}")

    if isinstance(default, int):
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise ValueError(f"Ungültiger Integer für {name}: {raw!r}")
        if value < 0:
            raise ValueError(f"{name} darf nicht negativ sein: {value}")
        return value

    return str(raw)


def _load_config_file(path: str) -> Dict[str, Any]:
    """Liest die optionale JSON-Config-Datei (Fehler werden nur geloggt)"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Config-Datei {path} konnte nicht gelesen werden, verwende Defaults: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Config-Datei {path} enthält kein JSON-Objekt, ignoriert")
        return {}

    values = {}
    for key, raw in data.items():
        field_name = CONFIG_KEYS.get(key)
        if field_name is None:
            logger.warning(f"Unbekannter Config-Key ignoriert: {key}")
            continue
        values[field_name] = raw
    return values


def load_settings(environ: Optional[Dict[str, str]] = None, config_path: Optional[str] = None) -> Settings:
    """
    Baut die Settings aus Defaults, Config-Datei und Environment.

    Args:
        environ: Environment-Mapping (Default: os.environ)
        config_path: Pfad zur JSON-Config (Default: API_DOCS_CONFIG)

    Returns:
        Settings

    Raises:
        ValueError: Bei ungültigen Werten
    """
    env = os.environ if environ is None else environ
    defaults = Settings()
    overrides: Dict[str, Any] = {}

    path = config_path or env.get(f"{ENV_PREFIX}CONFIG")
    if path:
        overrides.update(_load_config_file(path))

    for f in fields(Settings):
        env_value = env.get(f"{ENV_PREFIX}{f.name.upper()}")
        if env_value is not None and env_value.strip() != "":
            overrides[f.name] = env_value

    coerced = {
        name: _coerce(name, raw, getattr(defaults, name))
        for name, raw in overrides.items()
    }
    return replace(defaults, **coerced)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Lädt die Settings einmal pro Prozess"""
    env_path = pathlib.Path(__file__).resolve().parent.parent / ".env.local"
    # Nur laden wenn Datei existiert (lokal), sonst System-Environment
    if env_path.exists():
        load_dotenv(dotenv_path=str(env_path))
    else:
        load_dotenv()

    settings = load_settings()
    logger.info(
        f"Settings geladen: max_content_length={settings.max_content_length}, "
        f"max_retries={settings.max_retries}, header_rotation={settings.retry_with_different_headers}"
    )
    return settings
