"""ANSI terminal display and keyboard input for interactive rendering."""

from __future__ import annotations

import os
import select
import shutil
import sys
from typing import List, Optional, TextIO, Tuple

from .display import Display
from .frame import Frame

try:
    import termios
    import tty
except ImportError:  # pragma: no cover - not available on Windows
    termios = None
    tty = None

ESC = "\033"

CLEAR = ESC + "[2J"
HOME = ESC + "[H"
HIDE_CURSOR = ESC + "[?25l"
SHOW_CURSOR = ESC + "[?25h"
RESET = ESC + "[0m"

ARROW_KEYS = {"A": "UP", "B": "DOWN", "C": "RIGHT", "D": "LEFT"}


def foreground(rgb: Tuple[int, int, int]) -> str:
    """24-bit foreground color escape."""
    r, g, b = rgb
    return f"{ESC}[38;2;{r};{g};{b}m"


def encode_frame(frame: Frame) -> str:
    """Encode a frame as text with color escapes.

    The color escape is only repeated when the color changes, and every
    colored line ends with a reset.
    """
    lines = []
    for line in frame.lines():
        parts = []
        current = None
        for cell in line:
            if cell.color != current:
                parts.append(RESET if cell.color is None else foreground(cell.color))
                current = cell.color
            parts.append(cell.glyph)
        if current is not None:
            parts.append(RESET)
        lines.append("".join(parts))
    return "\n".join(lines)


class TerminalDisplay(Display):
    """Context manager that prepares the terminal for repeated frames."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        *,
        fallback: Tuple[int, int] = (80, 24),
        capture_input: bool = True
    ) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._fallback = fallback
        self._capture_input = capture_input
        self._cursor_hidden = False
        self._stdin_fd: Optional[int] = None
        self._termios_before = None
        self._input_enabled = False

    def __enter__(self) -> "TerminalDisplay":
        self._stream.write(CLEAR + HOME + HIDE_CURSOR)
        self._stream.flush()
        self._cursor_hidden = True

        if self._capture_input and termios is not None and sys.stdin.isatty():
            fd = sys.stdin.fileno()
            try:
                self._termios_before = termios.tcgetattr(fd)
                tty.setcbreak(fd)
                self._stdin_fd = fd
                self._input_enabled = True
            except termios.error:
                self._termios_before = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        if self._cursor_hidden:
            self._stream.write(RESET + SHOW_CURSOR + "\n")
            self._stream.flush()
            self._cursor_hidden = False

        if self._input_enabled and self._stdin_fd is not None and self._termios_before is not None:
            termios.tcsetattr(self._stdin_fd, termios.TCSADRAIN, self._termios_before)
        self._input_enabled = False
        self._stdin_fd = None
        self._termios_before = None

    def size(self) -> Tuple[int, int]:
        size = shutil.get_terminal_size(fallback=self._fallback)
        return size.columns, size.lines

    def clear(self) -> None:
        self._stream.write(CLEAR)

    def write(self, frame: Frame) -> None:
        self._stream.write(HOME)
        self._stream.write(encode_frame(frame))
        self._stream.write(RESET)
        self._stream.flush()

    def poll_keys(self) -> List[str]:
        """Return the keys pressed since the last call without blocking.

        Arrow keys are reported as "UP", "DOWN", "LEFT" and "RIGHT",
        a lone escape as "ESC".
        """
        if not self._input_enabled or self._stdin_fd is None:
            return []

        keys: List[str] = []
        for char in iter(self._read_char, ""):
            if char == "\x03":
                raise KeyboardInterrupt
            if char != ESC:
                keys.append(char)
                continue
            key = self._map_escape_sequence(self._read_escape_sequence())
            if key is not None:
                keys.append(key)
        return keys

    def _read_char(self) -> str:
        """One decoded character, or "" once nothing is pending or stdin closed."""
        while select.select([self._stdin_fd], [], [], 0)[0]:
            data = os.read(self._stdin_fd, 1)
            if not data:
                break
            char = data.decode("utf-8", errors="ignore")
            if char:
                return char
        return ""

    def _read_escape_sequence(self) -> str:
        sequence = ESC
        for char in iter(self._read_char, ""):
            sequence += char
            if char.isalpha() or char == "~":
                break
        return sequence

    @staticmethod
    def _map_escape_sequence(sequence: str) -> Optional[str]:
        if sequence == ESC:
            return "ESC"
        if sequence[:2] in (ESC + "[", ESC + "O"):
            return ARROW_KEYS.get(sequence[-1])
        return None


class StreamDisplay(TerminalDisplay):
    """Prints each frame once, without cursor control, for pipes and files."""

    def __init__(self, stream: Optional[TextIO] = None, *, fallback: Tuple[int, int] = (80, 24)) -> None:
        super().__init__(stream, fallback=fallback, capture_input=False)

    def clear(self) -> None:
        pass

    def write(self, frame: Frame) -> None:
        self._stream.write(encode_frame(frame) + "\n")
        self._stream.flush()
