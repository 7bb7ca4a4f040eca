"""Tests for display sinks and the ANSI terminal encoder."""

import io

import numpy as np
import pytest

from glyphforge.frame import Frame, Cell
from glyphforge.display import BufferDisplay, Display, DisplayError, GlyphForgeError
from glyphforge.terminal import (
    TerminalDisplay, StreamDisplay, encode_frame, foreground,
    CLEAR, HOME, HIDE_CURSOR, SHOW_CURSOR, RESET
)


def plain_frame(text_rows):
    cols = len(text_rows[0])
    cells = [Cell(ch) for row in text_rows for ch in row]
    return Frame(cols, len(text_rows), cells, np.zeros((len(text_rows), cols, 3)))


class TestBufferDisplay:
    """Test the in-memory display."""

    def test_size(self):
        assert BufferDisplay(12, 5).size() == (12, 5)

    def test_records_frames(self):
        display = BufferDisplay()
        assert display.last_frame is None
        frame = plain_frame(["ab"])
        display.clear()
        display.write(frame)
        assert display.clears == 1
        assert display.frames == [frame]
        assert display.last_frame is frame

    def test_is_a_display(self):
        assert isinstance(BufferDisplay(), Display)

    def test_error_hierarchy(self):
        assert issubclass(DisplayError, GlyphForgeError)


class TestEncodeFrame:
    """Test turning frames into terminal text."""

    def test_plain_frame_is_text(self):
        frame = plain_frame(["ab", "cd"])
        assert encode_frame(frame) == "ab\ncd"

    def test_foreground(self):
        assert foreground((1, 2, 3)) == "\033[38;2;1;2;3m"

    def test_color_changes_only(self):
        red = (255, 0, 0)
        cells = [Cell("a", red), Cell("b", red), Cell("c", (0, 0, 255))]
        frame = Frame(3, 1, cells, np.zeros((1, 3, 3)))
        expected = foreground(red) + "ab" + foreground((0, 0, 255)) + "c" + RESET
        assert encode_frame(frame) == expected

    def test_reset_before_uncolored_cell(self):
        cells = [Cell("a", (255, 0, 0)), Cell("b")]
        frame = Frame(2, 1, cells, np.zeros((1, 2, 3)))
        assert encode_frame(frame) == foreground((255, 0, 0)) + "a" + RESET + "b"

    def test_each_line_starts_fresh(self):
        green = (0, 255, 0)
        cells = [Cell("a", green), Cell("b", green)]
        frame = Frame(1, 2, cells, np.zeros((2, 1, 3)))
        line = foreground(green) + "{}" + RESET
        assert encode_frame(frame) == line.format("a") + "\n" + line.format("b")


class TestTerminalDisplay:
    """Test the terminal display against a string buffer."""

    def test_context_prepares_and_restores(self):
        out = io.StringIO()
        with TerminalDisplay(out, capture_input=False):
            assert out.getvalue() == CLEAR + HOME + HIDE_CURSOR
        assert out.getvalue().endswith(RESET + SHOW_CURSOR + "\n")

    def test_restore_is_idempotent(self):
        out = io.StringIO()
        display = TerminalDisplay(out, capture_input=False)
        with display:
            pass
        written = out.getvalue()
        display.restore()
        assert out.getvalue() == written

    def test_write_homes_cursor(self):
        out = io.StringIO()
        TerminalDisplay(out, capture_input=False).write(plain_frame(["xy"]))
        assert out.getvalue() == HOME + "xy" + RESET

    def test_clear(self):
        out = io.StringIO()
        TerminalDisplay(out, capture_input=False).clear()
        assert out.getvalue() == CLEAR

    def test_size_fallback(self, monkeypatch):
        monkeypatch.setenv("COLUMNS", "40")
        monkeypatch.setenv("LINES", "12")
        assert TerminalDisplay(io.StringIO()).size() == (40, 12)

    def test_no_keys_without_input(self):
        display = TerminalDisplay(io.StringIO(), capture_input=False)
        assert display.poll_keys() == []

    @pytest.mark.parametrize("sequence,key", [
        ("\033", "ESC"),
        ("\033[A", "UP"),
        ("\033[B", "DOWN"),
        ("\033[C", "RIGHT"),
        ("\033[D", "LEFT"),
        ("\033OA", "UP"),
        ("\033[5~", None),
    ])
    def test_escape_sequences(self, sequence, key):
        assert TerminalDisplay._map_escape_sequence(sequence) == key


class TestStreamDisplay:
    """Test the plain stream display used for single frames."""

    def test_write_prints_frame_once(self):
        out = io.StringIO()
        display = StreamDisplay(out)
        display.clear()
        display.write(plain_frame(["ab", "cd"]))
        assert out.getvalue() == "ab\ncd\n"

    def test_never_captures_input(self):
        assert StreamDisplay(io.StringIO()).poll_keys() == []
