"""
Test fixtures for services tests.

Provides a small reproducible offline catalog.
"""

import pytest

from src.core.models.catalog import MediaItem
from src.core.services.mock_catalog import generate_mock_catalog


@pytest.fixture
def catalog_items() -> list[MediaItem]:
    """Twelve generated items, two per category."""
    return generate_mock_catalog(12, seed=42)
