"""
Data models for the catalog client.

This module exports the catalog item structures.
"""

from src.core.models.catalog import Genre, MediaItem

__all__ = [
    "Genre",
    "MediaItem",
]
