"""
Unit tests for sRGB -> CIE Lab conversion and hex parsing.
"""
import numpy as np
import pytest

from domain.dtos import Lab
from domain.errors import InvalidColorFormat
from services.color_space import hex_to_lab, hex_to_rgb, rgb_array_to_lab, rgb_to_lab


class TestHexToRgb:
    """Test hex string parsing"""

    def test_with_and_without_hash(self):
        assert hex_to_rgb("#7e9a6c") == (126, 154, 108)
        assert hex_to_rgb("7E9A6C") == (126, 154, 108)

    def test_surrounding_whitespace_ignored(self):
        assert hex_to_rgb("  #ffffff ") == (255, 255, 255)

    @pytest.mark.parametrize("bad", ["#ZZZZZZ", "abc", "", "#abc", "#1234567", "##123456", "12 456"])
    def test_malformed_input_raises(self, bad):
        with pytest.raises(InvalidColorFormat):
            hex_to_rgb(bad)

    def test_non_string_raises(self):
        with pytest.raises(InvalidColorFormat):
            hex_to_rgb(None)

    def test_invalid_color_is_value_error(self):
        """Callers catching ValueError also see InvalidColorFormat"""
        with pytest.raises(ValueError):
            hex_to_lab("#GGGGGG")


class TestRgbToLab:
    """Test reference Lab values"""

    def test_black(self):
        lab = rgb_to_lab(0, 0, 0)
        assert lab.L == pytest.approx(0.0, abs=1e-9)
        assert lab.a == pytest.approx(0.0, abs=1e-9)
        assert lab.b == pytest.approx(0.0, abs=1e-9)

    def test_white(self):
        lab = rgb_to_lab(255, 255, 255)
        assert lab.L == pytest.approx(100.0, abs=0.01)
        assert lab.a == pytest.approx(0.0, abs=0.01)
        assert lab.b == pytest.approx(0.0, abs=0.01)

    def test_primaries(self):
        red = rgb_to_lab(255, 0, 0)
        assert (red.L, red.a, red.b) == pytest.approx((53.24, 80.09, 67.20), abs=0.02)
        green = rgb_to_lab(0, 255, 0)
        assert (green.L, green.a, green.b) == pytest.approx((87.73, -86.18, 83.18), abs=0.02)
        blue = rgb_to_lab(0, 0, 255)
        assert (blue.L, blue.a, blue.b) == pytest.approx((32.30, 79.19, -107.86), abs=0.02)

    def test_gray_is_achromatic(self):
        lab = rgb_to_lab(128, 128, 128)
        assert lab.L == pytest.approx(53.59, abs=0.02)
        assert abs(lab.a) < 0.01
        assert abs(lab.b) < 0.01

    def test_dark_channel_uses_linear_segment(self):
        """Values at or below the companding threshold stay finite and ordered"""
        assert 0 < rgb_to_lab(10, 10, 10).L < rgb_to_lab(11, 11, 11).L

    def test_hex_is_deterministic(self):
        assert hex_to_lab("#7e9a6c") == hex_to_lab("#7e9a6c")
        assert hex_to_lab("#7e9a6c") == rgb_to_lab(126, 154, 108)
        assert isinstance(hex_to_lab("#7e9a6c"), Lab)


class TestRgbArrayToLab:
    """Test the vectorized conversion used for pixel arrays"""

    def test_matches_scalar_conversion(self):
        pixels = np.array([[0, 0, 0], [255, 255, 255], [126, 154, 108], [232, 223, 200], [3, 200, 90]],
                          dtype=np.uint8)
        labs = rgb_array_to_lab(pixels)
        assert labs.shape == (5, 3)
        for px, row in zip(pixels, labs):
            lab = rgb_to_lab(*px)
            assert row == pytest.approx([lab.L, lab.a, lab.b], abs=1e-9)

    def test_empty_input(self):
        assert rgb_array_to_lab(np.empty((0, 3), dtype=np.uint8)).shape == (0, 3)
