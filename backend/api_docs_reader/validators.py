"""
Input Validation Module

Prüft Dokumentations-URLs, bevor ein Request rausgeht.
"""

from typing import Optional
from urllib.parse import urlparse

MAX_URL_LENGTH = 2048

# Cloud-Metadata-Services (AWS, GCP, Azure)
METADATA_HOSTS = ['169.254.169.254', 'metadata.google.internal']


class InvalidDocUrlError(ValueError):
    """URL ist leer, zu lang, kein http/https oder zeigt auf einen Metadata-Service"""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def validate_doc_url(url: Optional[str]) -> str:
    """
    Validiert eine Dokumentations-URL.

    Args:
        url: Vom Caller übergebene URL

    Returns:
        Getrimmte URL

    Raises:
        InvalidDocUrlError: Wenn die URL ungültig ist

    Examples:
        >>> validate_doc_url(" https://example.com/docs ")
        'https://example.com/docs'
    """
    if not url or not url.strip():
        raise InvalidDocUrlError("EMPTY_URL", "URL must not be empty")

    url = url.strip()

    # Length check (prevent DoS via huge URLs)
    if len(url) > MAX_URL_LENGTH:
        raise InvalidDocUrlError("INVALID_URL_LENGTH", f"URL must be at most {MAX_URL_LENGTH} characters")

    try:
        parsed = urlparse(url)
        parsed.port  # wirft ValueError bei nicht-numerischem Port
    except ValueError as e:
        raise InvalidDocUrlError("INVALID_URL_FORMAT", f"Invalid URL format: {e}")

    # Nur http/https erlaubt
    if parsed.scheme not in ('http', 'https'):
        raise InvalidDocUrlError(
            "INVALID_URL_SCHEME",
            f"Invalid URL scheme: {parsed.scheme or '(none)'}. Only http and https are supported."
        )

    if not parsed.hostname:
        raise InvalidDocUrlError("INVALID_URL_FORMAT", "URL has no host")

    if parsed.hostname.lower() in METADATA_HOSTS:
        raise InvalidDocUrlError("METADATA_SERVICE_BLOCKED", "Access to cloud metadata services is not allowed")

    return url
