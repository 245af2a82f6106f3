"""
Image preprocessing for dominant color extraction.

Brings decoded uploads into a consistent shape (uint8, 3-channel RGB,
bounded size) before clustering.
"""

import os
import cv2
import numpy as np
import logging

logger = logging.getLogger(__name__)

# Longest side after downscaling. Clustering cost grows with pixel count.
ANALYZER_MAX_SIDE = int(os.environ.get("ANALYZER_MAX_SIDE", "256"))


def normalize_image(image_np: np.ndarray) -> np.ndarray:
    """Ensure image is uint8."""
    if image_np.dtype != np.uint8:
        if image_np.max() <= 1.0:
            image_np = np.clip(image_np * 255, 0, 255).astype(np.uint8)
        else:
            image_np = np.clip(image_np, 0, 255).astype(np.uint8)
    return image_np


def ensure_rgb(image_np: np.ndarray) -> np.ndarray:
    """
    Convert grayscale or RGBA input to 3-channel RGB.

    Raises:
        ValueError: If the array is not a 2D or 3D image.
    """
    if image_np.ndim == 2:
        return cv2.cvtColor(image_np, cv2.COLOR_GRAY2RGB)
    if image_np.ndim != 3:
        raise ValueError(f"Expected a 2D or 3D image array, got {image_np.ndim}D")
    if image_np.shape[2] == 4:
        return cv2.cvtColor(image_np, cv2.COLOR_RGBA2RGB)
    if image_np.shape[2] == 1:
        return cv2.cvtColor(image_np, cv2.COLOR_GRAY2RGB)
    return image_np


def downscale_image(image_np: np.ndarray,
                    max_side: int = ANALYZER_MAX_SIDE) -> np.ndarray:
    """Shrink the image so its longest side is at most max_side."""
    h, w = image_np.shape[:2]
    scale = max_side / max(h, w)
    if scale < 1.0:
        image_np = cv2.resize(image_np,
                              (max(1, int(w * scale)), max(1, int(h * scale))),
                              interpolation=cv2.INTER_AREA)
    return image_np


def prepare_image(image_np: np.ndarray,
                  max_side: int = ANALYZER_MAX_SIDE) -> np.ndarray:
    """Normalize, convert to RGB, and downscale an image for analysis."""
    image_np = normalize_image(image_np)
    image_np = ensure_rgb(image_np)
    return downscale_image(image_np, max_side)
