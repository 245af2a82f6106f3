"""Shared test fixtures for color search tests."""

import numpy as np
import cv2
import pytest

from color_search.catalog import Catalog, create_fallback_products
from color_search.colors import make_color


def encode_png(image_rgb):
    """Encode an RGB array as PNG bytes."""
    ok, buffer = cv2.imencode(".png", cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR))
    assert ok
    return buffer.tobytes()


@pytest.fixture
def rng():
    """Deterministic random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def solid_red_image():
    """Generate a 200x200 image of a single warm red."""
    img = np.zeros((200, 200, 3), dtype=np.uint8)
    img[:, :] = [200, 30, 30]
    return img


@pytest.fixture
def red_square_image():
    """Generate a 200x200 red square on white background."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 255
    img[40:160, 40:160] = [200, 30, 30]  # Red square
    return img


@pytest.fixture
def noise_image():
    """Generate a 200x200 random noise image."""
    rng = np.random.RandomState(42)
    return rng.randint(0, 255, (200, 200, 3), dtype=np.uint8)


@pytest.fixture
def red_png(solid_red_image):
    return encode_png(solid_red_image)


@pytest.fixture
def fallback_catalog(rng):
    """The 50-product synthetic catalog."""
    return Catalog(create_fallback_products(rng), source="fallback")


@pytest.fixture
def small_catalog():
    """Three products with known colors, one per scored category."""
    return Catalog([
        {
            "id": "p1", "name": "Black Phone", "category": "Electronics",
            "price": "699.00", "image_url": "https://picsum.photos/250/200?random=1",
            "description": "A phone",
            "dominant_colors": [make_color(10, 10, 10, 0.3)],
        },
        {
            "id": "c1", "name": "Red Shirt", "category": "Clothing",
            "price": "25.00", "image_url": "https://picsum.photos/250/200?random=2",
            "description": "A shirt",
            "dominant_colors": [make_color(200, 30, 30, 0.3), make_color(240, 240, 240, 0.2)],
        },
        {
            "id": "h1", "name": "Green Lamp", "category": "Home",
            "price": "0", "image_url": "https://picsum.photos/250/200?random=3",
            "description": "A lamp",
            "dominant_colors": [make_color(30, 180, 30, 0.3)],
        },
    ], source="memory")
