"""
Display sinks that frames are written to.

The renderer only needs three things from a display: its size in
cells, a way to clear it and a way to write a frame.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .frame import Frame


class GlyphForgeError(Exception):
    """Base class for errors raised by glyphforge."""


class DisplayError(GlyphForgeError):
    """The display could not be sized or written; the frame is lost."""


class Display(ABC):
    """Abstract display sink."""

    @abstractmethod
    def size(self) -> Tuple[int, int]:
        """Return the current (cols, rows) of the display."""

    @abstractmethod
    def clear(self) -> None:
        """Blank the display."""

    @abstractmethod
    def write(self, frame: Frame) -> None:
        """Show a frame, in raster order."""


class BufferDisplay(Display):
    """In-memory display for headless runs and tests."""

    def __init__(self, cols: int = 80, rows: int = 24):
        self.cols = cols
        self.rows = rows
        self.frames: List[Frame] = []
        self.clears = 0

    def size(self) -> Tuple[int, int]:
        return self.cols, self.rows

    def clear(self) -> None:
        self.clears += 1

    def write(self, frame: Frame) -> None:
        self.frames.append(frame)

    @property
    def last_frame(self) -> Optional[Frame]:
        return self.frames[-1] if self.frames else None
