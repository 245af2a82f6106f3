"""Tests for catalog loading."""

import numpy as np
import pytest

from color_search.catalog import (
    Catalog, FALLBACK_CATEGORIES, create_fallback_products, load_catalog,
)


@pytest.fixture
def products_csv(tmp_path):
    path = tmp_path / "products.csv"
    path.write_text(
        "id,name,category,price,imageUrl,description\n"
        "a1,Red Dress,Clothing,49.99,https://picsum.photos/250/200?random=9,Summer dress\n"
        ",,,,,\n",
        encoding="utf-8",
    )
    return str(path)


class TestLoadCatalog:
    """Tests for CSV catalog loading."""

    def test_loads_rows(self, products_csv, rng):
        catalog = load_catalog(products_csv, rng)
        assert catalog.source == "csv"
        assert len(catalog) == 2
        first = catalog.products[0]
        assert first["id"] == "a1"
        assert first["name"] == "Red Dress"
        assert first["category"] == "Clothing"
        assert first["price"] == "49.99"
        assert first["image_url"] == "https://picsum.photos/250/200?random=9"

    def test_fills_defaults(self, products_csv, rng):
        second = load_catalog(products_csv, rng).products[1]
        assert len(second["id"]) == 9
        assert second["name"] == "Unnamed Product"
        assert second["category"] == "Uncategorized"
        assert second["price"] == "0"
        assert second["image_url"] == "https://picsum.photos/250/200?random=2"
        assert second["description"] == "No description available"

    def test_every_product_gets_three_colors(self, products_csv, rng):
        for product in load_catalog(products_csv, rng):
            assert len(product["dominant_colors"]) == 3

    def test_seeded_loads_are_reproducible(self, products_csv):
        a = load_catalog(products_csv, np.random.default_rng(3))
        b = load_catalog(products_csv, np.random.default_rng(3))
        assert [p["dominant_colors"] for p in a] == [p["dominant_colors"] for p in b]

    def test_missing_file_falls_back(self, tmp_path, rng):
        catalog = load_catalog(str(tmp_path / "nope.csv"), rng)
        assert catalog.source == "fallback"
        assert len(catalog) == 50

    def test_header_only_file_falls_back(self, tmp_path, rng):
        path = tmp_path / "empty.csv"
        path.write_text("id,name,category,price,imageUrl,description\n", encoding="utf-8")
        catalog = load_catalog(str(path), rng)
        assert catalog.source == "fallback"
        assert len(catalog) == 50


class TestFallbackProducts:
    """Tests for the synthetic catalog."""

    def test_shape(self, rng):
        products = create_fallback_products(rng)
        assert [p["id"] for p in products] == [str(i) for i in range(1, 51)]
        for i, p in enumerate(products, start=1):
            assert p["name"] == f"Product {i}"
            assert p["category"] in FALLBACK_CATEGORIES
            assert p["description"] == f"This is a sample {p['category'].lower()} product"
            assert p["image_url"].endswith(f"random={i}")
            assert len(p["dominant_colors"]) == 3

    def test_prices_two_decimals_in_range(self, rng):
        for p in create_fallback_products(rng):
            whole, _, cents = p["price"].partition(".")
            assert len(cents) == 2
            assert 10 <= float(p["price"]) <= 1010

    def test_custom_count(self, rng):
        assert len(create_fallback_products(rng, count=5)) == 5


class TestCatalog:
    """Tests for the catalog snapshot."""

    def test_products_are_a_tuple(self):
        catalog = Catalog([{"id": "1"}])
        assert isinstance(catalog.products, tuple)

    def test_iterable_and_sized(self):
        catalog = Catalog([{"id": "1"}, {"id": "2"}])
        assert len(catalog) == 2
        assert [p["id"] for p in catalog] == ["1", "2"]

    def test_empty(self):
        assert len(Catalog([])) == 0
