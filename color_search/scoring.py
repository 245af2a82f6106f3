"""
Color-similarity scoring and ranking for catalog search results.

Combines two layered heuristics into one score in [0, 0.99]:
    - Color term (up to 0.4): how close each uploaded color is to the
      nearest product dominant color, weighted by the uploaded color's
      prominence.
    - Category bonus (up to 0.6): rule-based guesses about what the image
      shows (phone, clothing, electronics) matched against the product's
      category.

The two signals are deliberately not on a common basis; one is geometric
distance, the other pattern matching on the uploaded palette.
"""

import logging
from typing import Dict, List, Sequence

from .colors import MAX_COLOR_DISTANCE, color_distance

logger = logging.getLogger(__name__)

# Color term
COLOR_WEIGHT = 0.4
COLORS_COMPARED = 3
COLOR_TERM_DIVISOR = 3
COLOR_TERM_SCALE = 0.8
COLOR_TERM_FLOOR = 0.2
DEFAULT_COLOR_WEIGHT = 0.5

# Category bonuses
PHONE_BONUS = 0.6
CLOTHING_BONUS = 0.6
ELECTRONICS_BONUS = 0.4

# Channel thresholds for the category predicates
DARK_MAX = 100
BRIGHT_MIN = 150
WARM_RED_MIN = 150
WARM_OTHER_MAX = 120
GRAY_SPREAD_MAX = 30
GRAY_RED_MIN = 100
GRAY_RED_MAX = 200

MAX_SCORE = 0.99
DEFAULT_TOP_K = 12


def compute_color_similarity(uploaded_colors: Sequence[Dict],
                             product: Dict) -> float:
    """
    Compute the color term of the similarity score.

    For each of the first three uploaded colors, the closest product
    dominant color is found and converted to a 0-1 score, weighted by the
    uploaded color's own score (0.5 if missing or zero). The sum is
    divided by a fixed 3 regardless of how many colors were compared, so
    shorter palettes score lower.

    Args:
        uploaded_colors: Colors extracted from the query image.
        product: Catalog product with 'dominant_colors'.

    Returns:
        Color term in roughly [0.08, 0.4].
    """
    total = 0.0
    product_colors = product.get("dominant_colors") or []

    for uploaded in uploaded_colors[:COLORS_COMPARED]:
        best_match = float("inf")
        for product_color in product_colors:
            distance = color_distance(uploaded, product_color)
            if distance < best_match:
                best_match = distance

        color_score = max(0.0, 1 - best_match / MAX_COLOR_DISTANCE)
        total += color_score * (uploaded.get("score") or DEFAULT_COLOR_WEIGHT)

    term = min(1.0, (total / COLOR_TERM_DIVISOR) * COLOR_TERM_SCALE + COLOR_TERM_FLOOR)
    return term * COLOR_WEIGHT


def is_likely_phone(colors: Sequence[Dict]) -> bool:
    """Dark body with at least one bright spot."""
    has_dark = any(
        c["red"] < DARK_MAX and c["green"] < DARK_MAX and c["blue"] < DARK_MAX
        for c in colors
    )
    has_bright = any(
        c["red"] > BRIGHT_MIN or c["green"] > BRIGHT_MIN or c["blue"] > BRIGHT_MIN
        for c in colors
    )
    return has_dark and has_bright


def is_likely_clothing(colors: Sequence[Dict]) -> bool:
    """At least one warm, reddish tone."""
    return any(
        c["red"] > WARM_RED_MIN
        and c["green"] < WARM_OTHER_MAX
        and c["blue"] < WARM_OTHER_MAX
        for c in colors
    )


def is_likely_electronics(colors: Sequence[Dict]) -> bool:
    """At least one mid-tone, near-grayscale color."""
    return any(
        abs(c["red"] - c["green"]) < GRAY_SPREAD_MAX
        and abs(c["green"] - c["blue"]) < GRAY_SPREAD_MAX
        and GRAY_RED_MIN < c["red"] < GRAY_RED_MAX
        for c in colors
    )


def compute_category_bonus(uploaded_colors: Sequence[Dict],
                           product: Dict) -> float:
    """
    Rule-based bonus for products whose category fits the image.

    Rules are checked in priority order and do not stack:
        1. phone-like image, electronics product -> PHONE_BONUS
        2. clothing-like image, clothing product -> CLOTHING_BONUS
        3. electronics-like image, electronics product -> ELECTRONICS_BONUS

    Args:
        uploaded_colors: Full list of uploaded colors (not only the first 3).
        product: Catalog product with 'category' and 'name'.

    Returns:
        Bonus value, 0 when no rule applies.
    """
    category = (product.get("category") or "").lower()
    name = product.get("name")

    if category == "electronics" and is_likely_phone(uploaded_colors):
        logger.debug(f"Phone detected -> electronics bonus for: {name}")
        return PHONE_BONUS
    if category == "clothing" and is_likely_clothing(uploaded_colors):
        logger.debug(f"Clothing detected -> clothing bonus for: {name}")
        return CLOTHING_BONUS
    if category == "electronics" and is_likely_electronics(uploaded_colors):
        logger.debug(f"Electronics detected -> electronics bonus for: {name}")
        return ELECTRONICS_BONUS
    return 0.0


def compute_similarity_score(uploaded_colors: Sequence[Dict],
                             product: Dict) -> float:
    """
    Score how well a product matches an uploaded image.

    Args:
        uploaded_colors: Colors from the query image, already truncated.
        product: Catalog product with 'dominant_colors' and 'category'.

    Returns:
        Score in [0, 0.99].
    """
    color_similarity = compute_color_similarity(uploaded_colors, product)
    bonus = compute_category_bonus(uploaded_colors, product)
    return min(MAX_SCORE, color_similarity + bonus)


def rank_results(results: List[Dict], top_k: int = DEFAULT_TOP_K) -> List[Dict]:
    """
    Sort scored products by score (highest first) and keep the top_k.

    The sort is stable, so equal scores keep catalog order.

    Args:
        results: List of result dicts with a numeric 'score' key.
        top_k: Maximum number of results to keep.

    Returns:
        Sorted, truncated list.
    """
    return sorted(results, key=lambda x: -x["score"])[:top_k]
