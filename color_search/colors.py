"""
RGB color primitives shared by the analyzer, catalog, and scorer.

Colors are plain dicts with ``red``, ``green``, ``blue`` (0-255 ints) and
``score`` (relative prominence of the color within its source image).
"""

import math
import logging
from typing import Dict, List

import numpy as np

logger = logging.getLogger(__name__)

# Largest possible RGB distance, sqrt(3 * 255^2), kept as the literal
# two-decimal value so normalized scores stay stable.
MAX_COLOR_DISTANCE = 441.67

# Fixed prominence weights for synthetic catalog colors (not normalized).
CATALOG_COLOR_SCORES = (0.3, 0.2, 0.1)


def make_color(red: int, green: int, blue: int, score: float = 0.0) -> Dict:
    """Build a color dict."""
    return {"red": red, "green": green, "blue": blue, "score": score}


def color_distance(color1: Dict, color2: Dict) -> float:
    """Euclidean distance between two colors in RGB space."""
    r_diff = color1["red"] - color2["red"]
    g_diff = color1["green"] - color2["green"]
    b_diff = color1["blue"] - color2["blue"]
    return math.sqrt(r_diff * r_diff + g_diff * g_diff + b_diff * b_diff)


def _clamp_channel(value) -> int:
    try:
        value = int(round(float(value)))
    except (TypeError, ValueError):
        return 0
    return max(0, min(255, value))


def sanitize_color(color: Dict) -> Dict:
    """
    Coerce an incoming color to integer channels in [0, 255].

    Applied at the boundary where colors enter the search path, so the
    scorer never sees fractional, missing, or out-of-range channels.
    Missing or non-numeric scores become 0.

    Args:
        color: Dict with red/green/blue and optional score.

    Returns:
        New color dict.
    """
    try:
        score = float(color.get("score") or 0)
    except (TypeError, ValueError):
        score = 0.0
    return make_color(
        _clamp_channel(color.get("red", 0)),
        _clamp_channel(color.get("green", 0)),
        _clamp_channel(color.get("blue", 0)),
        score,
    )


def generate_dominant_colors(rng: np.random.Generator) -> List[Dict]:
    """
    Assign three synthetic dominant colors to a catalog product.

    Each channel is drawn independently and uniformly from [0, 255].
    Scores are the fixed weights in CATALOG_COLOR_SCORES.

    Args:
        rng: Seedable numpy random generator.

    Returns:
        List of 3 color dicts, most prominent first.
    """
    channels = rng.integers(0, 256, size=(len(CATALOG_COLOR_SCORES), 3))
    return [
        make_color(int(r), int(g), int(b), score)
        for (r, g, b), score in zip(channels, CATALOG_COLOR_SCORES)
    ]
