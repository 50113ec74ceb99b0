"""
Shared pytest fixtures
"""

from dataclasses import replace

import pytest

from api_docs_reader.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Default-Settings ohne Retry-Delay"""
    return replace(Settings(), retry_delay_ms=0)
