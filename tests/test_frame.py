"""Tests for frames and image snapshots."""

import numpy as np
import pytest
from PIL import Image

from glyphforge.frame import Frame, Cell


def make_frame():
    cells = [
        Cell("a", (255, 0, 0)), Cell("b", (0, 255, 0)), Cell("c"),
        Cell("d"), Cell("e", (0, 0, 255)), Cell("f"),
    ]
    colors = np.zeros((2, 3, 3))
    colors[0, 0] = (1.0, 0.0, 0.0)
    colors[0, 1] = (0.0, 1.0, 0.0)
    colors[1, 1] = (0.0, 0.0, 1.0)
    return Frame(3, 2, cells, colors)


class TestFrame:
    """Test frame layout."""

    def test_cell_lookup(self):
        frame = make_frame()
        assert frame.cell(0, 0).glyph == "a"
        assert frame.cell(2, 1).glyph == "f"
        assert frame.cell(1, 1).color == (0, 0, 255)

    def test_lines(self):
        lines = list(make_frame().lines())
        assert len(lines) == 2
        assert [c.glyph for c in lines[1]] == ["d", "e", "f"]

    def test_to_text(self):
        assert make_frame().to_text() == "abc\ndef"

    def test_cell_is_frozen(self):
        cell = Cell("x")
        with pytest.raises(AttributeError):
            cell.glyph = "y"


class TestFrameImage:
    """Test saving the frame's colors as an image."""

    def test_to_image(self):
        image = make_frame().to_image()
        assert image.size == (3, 2)
        assert image.getpixel((0, 0)) == (255, 0, 0)
        assert image.getpixel((1, 1)) == (0, 0, 255)
        assert image.getpixel((2, 1)) == (0, 0, 0)

    def test_save_image(self, tmp_path):
        path = tmp_path / "frame.png"
        make_frame().save_image(str(path))
        with Image.open(path) as image:
            assert image.size == (3, 2)

    def test_save_image_scaled(self, tmp_path):
        path = tmp_path / "frame.png"
        make_frame().save_image(str(path), scale=4)
        with Image.open(path) as image:
            assert image.size == (12, 8)
            assert image.convert("RGB").getpixel((5, 0)) == (0, 255, 0)
