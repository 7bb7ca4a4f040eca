"""
Brightness to glyph mapping.

A palette is a string of glyphs ordered from darkest to lightest as seen
on a light-on-dark terminal: sparse glyphs light few pixels, dense glyphs
light many. A brightness b in [0, 1] selects

    index = min(int(clamp(b, 0, 1) * len(glyphs)), len(glyphs) - 1)

which is monotonic: a brighter input never selects an earlier glyph.
Inverting the palette serves dark-on-light terminals.
"""

from __future__ import annotations

DETAILED_GLYPHS = ".'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"
SIMPLE_GLYPHS = " .:;~=O#8%B@"


class Palette:
    """An ordered glyph ramp."""

    def __init__(self, glyphs: str = DETAILED_GLYPHS, inverted: bool = False):
        if not glyphs:
            raise ValueError("palette needs at least one glyph")
        self.glyphs = glyphs[::-1] if inverted else glyphs
        self.inverted = inverted

    def index_for(self, brightness: float) -> int:
        """Return the glyph index for a brightness value."""
        n = len(self.glyphs)
        b = min(max(brightness, 0.0), 1.0)
        return min(int(b * n), n - 1)

    def glyph_for(self, brightness: float) -> str:
        return self.glyphs[self.index_for(brightness)]

    @property
    def darkest(self) -> str:
        return self.glyphs[0]

    @property
    def lightest(self) -> str:
        return self.glyphs[-1]

    def __len__(self) -> int:
        return len(self.glyphs)

    def __repr__(self) -> str:
        return f"Palette({self.glyphs!r})"


PALETTES = {
    "detailed": DETAILED_GLYPHS,
    "simple": SIMPLE_GLYPHS,
}


def get_palette(name: str, inverted: bool = False) -> Palette:
    """Look up a built-in palette by name."""
    try:
        return Palette(PALETTES[name], inverted)
    except KeyError:
        raise ValueError(f"Unknown palette: {name}") from None
