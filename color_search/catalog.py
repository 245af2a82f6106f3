"""
Product catalog loading.

Reads products from a CSV file and tags each one with synthetic dominant
colors. Produces a read-only Catalog snapshot that is handed to the
search engine explicitly.

CSV columns (all optional per row):
    id, name, category, price, imageUrl, description

If the file is missing, unreadable, or has no rows, a synthetic catalog
of FALLBACK_PRODUCT_COUNT products is generated instead.
"""

import os
import csv
import uuid
import logging
from typing import Dict, Iterator, List, Optional, Sequence

import numpy as np

from .colors import generate_dominant_colors

logger = logging.getLogger(__name__)

FALLBACK_PRODUCT_COUNT = 50
FALLBACK_CATEGORIES = ("Clothing", "Electronics", "Home", "Sports")
PLACEHOLDER_IMAGE_URL = "https://picsum.photos/250/200?random={}"

# Seed for catalog color generation. Unset means a fresh random catalog
# on every load.
CATALOG_SEED = os.environ.get("CATALOG_SEED")


class Catalog:
    """
    Immutable snapshot of the product catalog.

    Products are stored as a tuple and are not modified by searches;
    scored results are built from copies.
    """

    def __init__(self, products: Sequence[Dict], source: str = "memory"):
        self.products = tuple(products)
        self.source = source

    def __len__(self) -> int:
        return len(self.products)

    def __iter__(self) -> Iterator[Dict]:
        return iter(self.products)

    def __repr__(self) -> str:
        return f"Catalog(products={len(self.products)}, source={self.source!r})"


def default_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Random generator for catalog colors, seeded from CATALOG_SEED if set."""
    if seed is None and CATALOG_SEED:
        seed = int(CATALOG_SEED)
    return np.random.default_rng(seed)


def _product_from_row(row: Dict, position: int) -> Dict:
    """Fill in defaults for a CSV row. position is 1-based."""
    return {
        "id": row.get("id") or uuid.uuid4().hex[:9],
        "name": row.get("name") or "Unnamed Product",
        "category": row.get("category") or "Uncategorized",
        "price": row.get("price") or "0",
        "image_url": row.get("imageUrl") or PLACEHOLDER_IMAGE_URL.format(position),
        "description": row.get("description") or "No description available",
    }


def create_fallback_products(rng: np.random.Generator,
                             count: int = FALLBACK_PRODUCT_COUNT) -> List[Dict]:
    """
    Generate a synthetic catalog.

    Args:
        rng: Random generator for categories, prices and colors.
        count: Number of products.

    Returns:
        List of product dicts with ids "1".."count".
    """
    products = []
    for i in range(1, count + 1):
        category = FALLBACK_CATEGORIES[int(rng.integers(len(FALLBACK_CATEGORIES)))]
        products.append({
            "id": str(i),
            "name": f"Product {i}",
            "category": category,
            "price": f"{rng.random() * 1000 + 10:.2f}",
            "image_url": PLACEHOLDER_IMAGE_URL.format(i),
            "description": f"This is a sample {category.lower()} product",
            "dominant_colors": generate_dominant_colors(rng),
        })
    return products


def load_catalog(csv_path: str,
                 rng: Optional[np.random.Generator] = None) -> Catalog:
    """
    Load the product catalog from a CSV file.

    Every product gets three synthetic dominant colors. Colors are
    assigned once here and never re-randomized per search.

    Args:
        csv_path: Path to the products CSV.
        rng: Random generator. Defaults to default_rng().

    Returns:
        Catalog with source "csv", or "fallback" if the CSV was empty or
        could not be read.
    """
    rng = rng or default_rng()

    try:
        with open(csv_path, "r", encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Catalog loading error ({csv_path}): {e}")
        catalog = Catalog(create_fallback_products(rng), source="fallback")
        logger.info(f"Loaded {len(catalog)} fallback products")
        return catalog

    if not rows:
        logger.warning(f"No products in {csv_path}, using fallback catalog")
        catalog = Catalog(create_fallback_products(rng), source="fallback")
    else:
        products = []
        for position, row in enumerate(rows, start=1):
            product = _product_from_row(row, position)
            product["dominant_colors"] = generate_dominant_colors(rng)
            products.append(product)
        catalog = Catalog(products, source="csv")

    logger.info(f"Loaded {len(catalog)} products ({catalog.source})")
    return catalog
