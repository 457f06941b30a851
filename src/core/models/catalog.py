"""
Catalog data structures.

Items are plain dataclasses built from API payloads; the API may
send either snake_case or camelCase keys.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Genre:
    """A genre tag attached to a catalog item."""

    id: int
    name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Genre":
        return cls(id=int(data["id"]), name=str(data["name"]))


@dataclass
class MediaItem:
    """
    A single catalog entry (movie, series, documentary).

    Only id and title are required; everything else has a default
    so partial payloads still parse.
    """

    id: str
    title: str
    category: str = ""
    description: str = ""
    rating: float = 0.0
    image_url: str = ""
    release_year: int | None = None
    genres: list[Genre] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MediaItem":
        """
        Build an item from an API payload.

        Raises:
            KeyError: If id or title is missing.
            ValueError: If a numeric field cannot be converted.
        """
        release_year = _first(data, "release_year", "releaseYear")
        if release_year is None and data.get("release_date"):
            release_year = str(data["release_date"])[:4]

        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            category=str(_first(data, "category", "genre") or ""),
            description=str(_first(data, "description", "overview") or ""),
            rating=float(data.get("rating") or 0.0),
            image_url=str(_first(data, "image_url", "imageUrl", "poster_url", "posterUrl") or ""),
            release_year=int(release_year) if release_year is not None else None,
            genres=[
                Genre.from_dict(g) for g in data.get("genres", []) if isinstance(g, dict)
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the API's snake_case shape."""
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "description": self.description,
            "rating": self.rating,
            "image_url": self.image_url,
            "release_year": self.release_year,
            "genres": [{"id": g.id, "name": g.name} for g in self.genres],
        }

    def __repr__(self) -> str:
        """Return string representation of item."""
        title_preview = self.title[:50] + "..." if len(self.title) > 50 else self.title
        return f"<MediaItem(id='{self.id}', title='{title_preview}')>"


def _first(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None
