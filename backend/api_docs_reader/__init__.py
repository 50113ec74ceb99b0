"""
API Docs Reader - liest API-Dokumentationen und liefert begrenzte Zusammenfassungen
"""

__version__ = "1.0.0"
