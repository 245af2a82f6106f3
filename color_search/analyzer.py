"""
Dominant color extraction for uploaded query images.

Three sources feed the search path:
    - a vision-API image properties annotation, parsed by
      parse_vision_annotation()
    - raw image bytes, clustered locally with OpenCV k-means by
      analyze_image()
    - an image URL, fetched with requests and analyzed the same way by
      analyze_url()

Each way the result is an ordered list of at most MAX_UPLOADED_COLORS
colors. When analysis is unavailable, FALLBACK_COLORS stands in.
"""

import logging
from typing import Dict, List, Optional

import cv2
import numpy as np
import requests

from .colors import make_color
from .preprocessing import prepare_image

logger = logging.getLogger(__name__)

MAX_UPLOADED_COLORS = 5

# Neutral grays used when no color analysis is available
FALLBACK_COLORS = (
    make_color(200, 200, 200, 0.5),
    make_color(100, 100, 100, 0.3),
    make_color(50, 50, 50, 0.2),
)

KMEANS_ATTEMPTS = 3
KMEANS_CRITERIA = (cv2.TERM_CRITERIA_EPS + cv2.TERM_CRITERIA_MAX_ITER, 20, 1.0)
KMEANS_SEED = 42

FETCH_TIMEOUT = 10


def fallback_colors() -> List[Dict]:
    """Fresh copies of FALLBACK_COLORS."""
    return [dict(c) for c in FALLBACK_COLORS]


def parse_vision_annotation(annotation: Optional[Dict],
                            max_colors: int = MAX_UPLOADED_COLORS) -> List[Dict]:
    """
    Convert a vision-API image properties annotation to color dicts.

    Expects the shape::

        {"dominantColors": {"colors": [
            {"color": {"red": 12.0, "green": 40.0, "blue": 7.0},
             "score": 0.41, "pixelFraction": 0.2},
            ...
        ]}}

    Channels are rounded to ints (missing channels become 0) and missing
    scores become 0. Only the first max_colors entries are kept.

    Args:
        annotation: Parsed annotation dict, or None if the API call failed.
        max_colors: Maximum number of colors to keep.

    Returns:
        List of color dicts, or fallback colors when the annotation has no
        dominant color block.
    """
    if not annotation or not annotation.get("dominantColors"):
        logger.warning("No dominant colors in annotation, using fallback colors")
        return fallback_colors()

    entries = annotation["dominantColors"].get("colors") or []
    colors = []
    for entry in entries[:max_colors]:
        rgb = entry.get("color") or {}
        colors.append(make_color(
            int(round(rgb.get("red") or 0)),
            int(round(rgb.get("green") or 0)),
            int(round(rgb.get("blue") or 0)),
            entry.get("score") or 0,
        ))
    return colors


def decode_image(data: bytes) -> np.ndarray:
    """
    Decode an encoded image (JPEG, PNG, ...) into an RGB uint8 array.

    Raises:
        ValueError: If the bytes are empty or cannot be decoded.
    """
    if not data:
        raise ValueError("Empty image data")

    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError("Could not decode image data")

    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def extract_dominant_colors(image_np: np.ndarray,
                            max_colors: int = MAX_UPLOADED_COLORS) -> List[Dict]:
    """
    Extract the most prominent colors of an image.

    Process:
        1. Normalize to RGB uint8 and downscale
        2. If the image has no more distinct colors than max_colors, use
           them directly; otherwise cluster pixels with k-means
        3. Score each color by the fraction of pixels it covers
        4. Sort by score, most prominent first

    Args:
        image_np: RGB (or grayscale/RGBA) image array.
        max_colors: Maximum number of colors to return.

    Returns:
        List of color dicts with pixel-fraction scores.
    """
    image_np = prepare_image(image_np)
    pixels = image_np.reshape(-1, 3)
    if pixels.size == 0:
        return []

    unique, counts = np.unique(pixels, axis=0, return_counts=True)

    if len(unique) <= max_colors:
        centers = unique.astype(np.float32)
    else:
        cv2.setRNGSeed(KMEANS_SEED)
        _, labels, centers = cv2.kmeans(
            pixels.astype(np.float32), max_colors, None,
            KMEANS_CRITERIA, KMEANS_ATTEMPTS, cv2.KMEANS_PP_CENTERS,
        )
        counts = np.bincount(labels.flatten(), minlength=max_colors)

    total = float(counts.sum())
    colors = [
        make_color(*(int(round(float(v))) for v in np.clip(center, 0, 255)),
                   score=float(count) / total)
        for center, count in zip(centers, counts)
        if count > 0
    ]
    colors.sort(key=lambda c: c["score"], reverse=True)

    logger.debug(f"Extracted {len(colors)} dominant colors")
    return colors[:max_colors]


def analyze_image(data: bytes,
                  max_colors: int = MAX_UPLOADED_COLORS) -> List[Dict]:
    """
    Decode an uploaded image and extract its dominant colors.

    Never raises: any decode or clustering failure is logged and the
    fallback colors are returned instead.
    """
    try:
        colors = extract_dominant_colors(decode_image(data), max_colors)
    except (ValueError, cv2.error) as e:
        logger.error(f"Color analysis failed: {e}")
        return fallback_colors()

    if not colors:
        logger.warning("No colors extracted, using fallback colors")
        return fallback_colors()
    return colors


def fetch_image(url: str, timeout: float = FETCH_TIMEOUT) -> bytes:
    """
    Download an image.

    Raises:
        requests.RequestException: On network errors or non-2xx responses.
    """
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


def analyze_url(url: str,
                max_colors: int = MAX_UPLOADED_COLORS) -> List[Dict]:
    """
    Fetch an image by URL and extract its dominant colors.

    Download failures are logged and yield the fallback colors, like
    decode failures in analyze_image().
    """
    try:
        data = fetch_image(url)
    except requests.RequestException as e:
        logger.error(f"Image fetch failed ({url}): {e}")
        return fallback_colors()
    return analyze_image(data, max_colors)
