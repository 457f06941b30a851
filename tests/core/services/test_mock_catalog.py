"""Tests for the offline catalog dataset."""

from src.core.models.catalog import MediaItem
from src.core.services.mock_catalog import (
    CATEGORIES,
    DEFAULT_COUNT,
    GENRES,
    generate_mock_catalog,
    group_by_category,
)


class TestGenerateMockCatalog:
    """Tests for generate_mock_catalog()."""

    def test_default_count(self):
        """The default catalog has sixty items."""
        items = generate_mock_catalog()

        assert len(items) == DEFAULT_COUNT == 60

    def test_ids_are_sequential(self, catalog_items):
        """Ids run from 1 to count."""
        assert [item.id for item in catalog_items] == [str(i) for i in range(1, 13)]

    def test_categories_and_genres_cycle(self, catalog_items):
        """Categories and genres cycle in declaration order."""
        assert catalog_items[0].category == CATEGORIES[0]
        assert catalog_items[len(CATEGORIES)].category == CATEGORIES[0]
        assert catalog_items[1].genres[0].name == GENRES[1]

    def test_ratings_in_range(self):
        """Ratings stay within [3.0, 5.0]."""
        items = generate_mock_catalog(200, seed=7)

        assert all(3.0 <= item.rating <= 5.0 for item in items)

    def test_seed_is_reproducible(self):
        """The same seed gives the same ratings."""
        first = [item.rating for item in generate_mock_catalog(10, seed=3)]
        second = [item.rating for item in generate_mock_catalog(10, seed=3)]

        assert first == second

    def test_release_years(self, catalog_items):
        """Release years start at 1995."""
        assert catalog_items[0].release_year == 1995
        assert catalog_items[11].release_year == 2006

    def test_zero_count(self):
        """A zero count gives an empty catalog."""
        assert generate_mock_catalog(0) == []


class TestGroupByCategory:
    """Tests for group_by_category()."""

    def test_groups_in_first_seen_order(self, catalog_items):
        """Groups follow the order categories first appear."""
        grouped = group_by_category(catalog_items)

        assert list(grouped) == CATEGORIES
        assert all(len(items) == 2 for items in grouped.values())

    def test_items_keep_order_within_group(self, catalog_items):
        """Items keep their relative order inside a group."""
        grouped = group_by_category(catalog_items)

        assert [item.id for item in grouped[CATEGORIES[0]]] == ["1", "7"]

    def test_empty(self):
        """No items gives no groups."""
        assert group_by_category([]) == {}

    def test_uncategorized_items(self):
        """Items without a category are grouped under the empty string."""
        items = [MediaItem(id="1", title="A"), MediaItem(id="2", title="B")]

        assert list(group_by_category(items)) == [""]
