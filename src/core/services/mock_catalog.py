"""
Offline catalog dataset.

Used when no API is reachable (``--offline``) and as a fixture in tests.
"""

import random

from src.core.models.catalog import Genre, MediaItem

CATEGORIES = [
    "Trending Now",
    "Recently Added",
    "Action Thrillers",
    "Comedies",
    "Sci-Fi Adventures",
    "Drama for You",
]

GENRES = ["Action", "Comedy", "Drama", "Thriller", "Documentary", "Sci-Fi"]

DEFAULT_COUNT = 60


def generate_mock_catalog(count: int = DEFAULT_COUNT, seed: int | None = None) -> list[MediaItem]:
    """
    Generate a deterministic-shape catalog of ``count`` items.

    Categories and genres cycle in order; ratings are random in [3.0, 5.0]
    (reproducible when ``seed`` is given).

    Args:
        count: Number of items to generate.
        seed: Optional seed for the rating generator.

    Returns:
        List of catalog items with ids "1".."count".
    """
    rng = random.Random(seed)
    items: list[MediaItem] = []

    for index in range(count):
        number = index + 1
        genre_index = index % len(GENRES)
        items.append(
            MediaItem(
                id=str(number),
                title=f"Catalog Hit {number}",
                category=CATEGORIES[index % len(CATEGORIES)],
                description=(
                    f"A detailed summary for item number {number}. "
                    "A must-watch cinematic experience."
                ),
                rating=round(rng.uniform(3.0, 5.0), 1),
                image_url=f"https://picsum.photos/seed/{index * 123}/300/450",
                release_year=1995 + (index % 28),
                genres=[Genre(id=genre_index + 1, name=GENRES[genre_index])],
            )
        )

    return items


def group_by_category(items: list[MediaItem]) -> dict[str, list[MediaItem]]:
    """Group items by category, keeping categories in first-seen order."""
    grouped: dict[str, list[MediaItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped
