"""
Rendered output: a grid of glyph cells plus the colors behind them.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class Cell:
    """One character cell of output."""
    glyph: str
    color: Optional[RGB] = None


@dataclass
class Frame:
    """A full frame in raster order (top row first, left to right).

    Attributes:
        cols: Width in cells
        rows: Height in cells
        cells: cols * rows cells
        colors: Corrected colors, shape (rows, cols, 3), values in [0, 1]
    """
    cols: int
    rows: int
    cells: List[Cell]
    colors: np.ndarray

    def cell(self, col: int, row: int) -> Cell:
        """Return the cell at a column and a row counted from the top."""
        return self.cells[row * self.cols + col]

    def lines(self) -> Iterator[List[Cell]]:
        for row in range(self.rows):
            yield self.cells[row * self.cols:(row + 1) * self.cols]

    def to_text(self) -> str:
        """Glyphs only, one line per row."""
        return "\n".join("".join(c.glyph for c in line) for line in self.lines())

    def to_image(self):
        """Return the corrected colors as an 8-bit PIL image (one pixel per cell)."""
        from PIL import Image as PILImage

        ldr = np.clip(self.colors * 255, 0, 255).astype(np.uint8)
        return PILImage.fromarray(ldr)

    def save_image(self, filename: str, scale: int = 1) -> None:
        """Save a snapshot of the frame's colors.

        Args:
            filename: Output filename (extension determines format)
            scale: Integer upscale factor; each cell becomes scale x scale pixels
        """
        from PIL import Image as PILImage

        image = self.to_image()
        if scale > 1:
            image = image.resize((self.cols * scale, self.rows * scale), PILImage.NEAREST)
        image.save(filename)
