"""
Service layer for the catalog client.

This module exports consumer-facing services.
"""

from src.core.services.data_fetcher import (
    EMPTY_RESULT_MESSAGE,
    LOAD_ERROR_MESSAGE,
    DataFetcher,
    FetchState,
)
from src.core.services.mock_catalog import generate_mock_catalog, group_by_category

__all__ = [
    "DataFetcher",
    "EMPTY_RESULT_MESSAGE",
    "FetchState",
    "LOAD_ERROR_MESSAGE",
    "generate_mock_catalog",
    "group_by_category",
]
