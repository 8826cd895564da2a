from __future__ import annotations
import re
from typing import Tuple

import numpy as np

from domain.dtos import Lab
from domain.errors import InvalidColorFormat

_HEX_RE = re.compile(r"#?([0-9a-fA-F]{6})")

# sRGB (D65) -> XYZ
_RGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
])
_WHITE = (0.95047, 1.0, 1.08883)


def _linearize(c: float) -> float:
    c = c / 255.0
    if c <= 0.04045:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def _f(t: float) -> float:
    if t > 0.008856:
        return t ** (1.0 / 3.0)
    return 7.787 * t + 16.0 / 116.0


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Parse ``#RRGGBB`` (hash optional) into 0..255 channels."""
    if not isinstance(hex_color, str):
        raise InvalidColorFormat(f"Expected a hex string, got {type(hex_color).__name__}")
    m = _HEX_RE.fullmatch(hex_color.strip())
    if m is None:
        raise InvalidColorFormat(f"Invalid hex color: {hex_color!r}")
    digits = m.group(1)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def rgb_to_lab(r: float, g: float, b: float) -> Lab:
    R, G, B = _linearize(r), _linearize(g), _linearize(b)
    m = _RGB_TO_XYZ
    x = m[0, 0] * R + m[0, 1] * G + m[0, 2] * B
    y = m[1, 0] * R + m[1, 1] * G + m[1, 2] * B
    z = m[2, 0] * R + m[2, 1] * G + m[2, 2] * B
    fx, fy, fz = _f(x / _WHITE[0]), _f(y / _WHITE[1]), _f(z / _WHITE[2])
    return Lab(L=float(116.0 * fy - 16.0), a=float(500.0 * (fx - fy)), b=float(200.0 * (fy - fz)))


def hex_to_lab(hex_color: str) -> Lab:
    return rgb_to_lab(*hex_to_rgb(hex_color))


def rgb_array_to_lab(pixels: np.ndarray) -> np.ndarray:
    """Vectorized ``rgb_to_lab`` for an (N, 3) array of 0..255 RGB values.

    Returns an (N, 3) float64 array of L, a, b.
    """
    c = np.asarray(pixels, dtype=np.float64).reshape(-1, 3) / 255.0
    linear = np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)
    xyz = linear @ _RGB_TO_XYZ.T
    t = xyz / np.array(_WHITE)
    f = np.where(t > 0.008856, np.cbrt(t), 7.787 * t + 16.0 / 116.0)
    lab = np.empty_like(f)
    lab[:, 0] = 116.0 * f[:, 1] - 16.0
    lab[:, 1] = 500.0 * (f[:, 0] - f[:, 1])
    lab[:, 2] = 200.0 * (f[:, 1] - f[:, 2])
    return lab
