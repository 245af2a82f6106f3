"""Tests for image preprocessing."""

import numpy as np

from color_search.preprocessing import downscale_image, ensure_rgb, normalize_image


class TestNormalizeImage:
    """Tests for uint8 normalization."""

    def test_unit_float_scaled(self):
        img = np.full((4, 4, 3), 0.5, dtype=np.float32)
        assert normalize_image(img)[0, 0, 0] == 127

    def test_negative_unit_float_clipped(self):
        img = np.array([[[-0.5, 0.0, 1.0]]], dtype=np.float32)
        out = normalize_image(img)
        assert out.dtype == np.uint8
        assert out.tolist() == [[[0, 0, 255]]]

    def test_large_values_clipped(self):
        img = np.array([[[-20.0, 128.0, 300.0]]])
        assert normalize_image(img).tolist() == [[[0, 128, 255]]]

    def test_uint8_unchanged(self):
        img = np.zeros((2, 2, 3), dtype=np.uint8)
        assert normalize_image(img) is img


class TestShapeHelpers:
    """Tests for channel and size handling."""

    def test_rgba_to_rgb(self):
        img = np.zeros((3, 3, 4), dtype=np.uint8)
        assert ensure_rgb(img).shape == (3, 3, 3)

    def test_downscale_longest_side(self):
        img = np.zeros((1000, 500, 3), dtype=np.uint8)
        assert downscale_image(img, max_side=200).shape[:2] == (200, 100)

    def test_small_image_not_upscaled(self):
        img = np.zeros((50, 40, 3), dtype=np.uint8)
        assert downscale_image(img, max_side=200).shape[:2] == (50, 40)
