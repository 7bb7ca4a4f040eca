"""
Linear RGB color.

Channels are floats where (0, 0, 0) is black and (1, 1, 1) is white.
Accumulated path-traced values may exceed 1 until corrected.
"""

from __future__ import annotations
from typing import Tuple
import numpy as np

from .vec3 import Vec3


class Color(Vec3):
    """An RGB color sharing the Vec3 algebra plus display conversions."""

    __slots__ = ()

    def __init__(self, r: float = 0.0, g: float = 0.0, b: float = 0.0):
        super().__init__(r, g, b)

    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    @classmethod
    def black(cls) -> Color:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def white(cls) -> Color:
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def from_u8(cls, r: int, g: int, b: int) -> Color:
        """Build a color from 8-bit channel values (0-255)."""
        return cls(r / 255.0, g / 255.0, b / 255.0)

    def correct(self, gamma: float, samples_per_pixel: int) -> Color:
        """Average an accumulated color and apply gamma correction.

        Each channel is scaled by 1 / samples_per_pixel, raised to
        1 / gamma and clamped to [0, 1].
        """
        scaled = np.maximum(self._data / samples_per_pixel, 0.0)
        return Color.from_array(np.clip(np.power(scaled, 1.0 / gamma), 0.0, 1.0))

    def brightness(self) -> float:
        """Perceptual brightness in [0, 1].

        Relative luminance (Rec. 709 weights) companded with the sRGB
        transfer curve.
        """
        linear = 0.2126 * self.r + 0.7152 * self.g + 0.0722 * self.b
        if linear <= 0.0031308:
            srgb = 12.92 * linear
        else:
            srgb = 1.055 * linear ** (1.0 / 2.4) - 0.055
        return min(max(srgb, 0.0), 1.0)

    def to_rgb8(self) -> Tuple[int, int, int]:
        """Return clamped 8-bit channels for display."""
        r, g, b = (np.clip(self._data, 0.0, 1.0) * 255.0).astype(np.uint8)
        return int(r), int(g), int(b)
