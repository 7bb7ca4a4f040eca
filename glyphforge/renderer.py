"""
Renderer module - the heart of the path tracer.

Implements:
- Jittered multi-sample anti-aliasing
- Recursive path tracing with a hard depth limit
- Multi-threaded row-parallel rendering with reproducible seeding
- Brightness/color mapping of pixels to character cells
"""

from __future__ import annotations
import logging
import os
import platform
import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

import numpy as np

from .color import Color
from .ray import Ray
from .camera import Camera, CameraView
from .scene import Scene
from .palette import Palette
from .frame import Cell, Frame
from .display import Display, DisplayError

logger = logging.getLogger(__name__)


class RenderMode(Enum):
    """What each output cell carries."""
    BRIGHTNESS = "brightness"
    COLOR = "color"
    COLOR_AND_BRIGHTNESS = "color+brightness"


class RenderDimensions(ABC):
    """How large the rendered grid should be."""

    @abstractmethod
    def resolve(self, display: Optional[Display]) -> Tuple[int, int]:
        """Return (cols, rows), asking the display for its size if needed."""


@dataclass(frozen=True)
class ConcreteSize(RenderDimensions):
    cols: int
    rows: int

    def resolve(self, display: Optional[Display]) -> Tuple[int, int]:
        return self.cols, self.rows


@dataclass(frozen=True)
class TermSize(RenderDimensions):
    """Use the display's current size."""

    def resolve(self, display: Optional[Display]) -> Tuple[int, int]:
        if display is None:
            raise ValueError("TermSize needs a display to measure")
        return display.size()


@dataclass(frozen=True)
class RelativeToTermSize(RenderDimensions):
    """The display's size plus signed offsets (never below one cell)."""
    offset_cols: int = 0
    offset_rows: int = 0

    def resolve(self, display: Optional[Display]) -> Tuple[int, int]:
        if display is None:
            raise ValueError("RelativeToTermSize needs a display to measure")
        cols, rows = display.size()
        return max(1, cols + self.offset_cols), max(1, rows + self.offset_rows)


@dataclass
class RenderSettings:
    """Configuration for the renderer.

    samples_per_pixel and max_depth must be at least 1; they are not
    checked here.
    """
    samples_per_pixel: int = 10
    max_depth: int = 15
    gamma: float = 2.0
    mode: RenderMode = RenderMode.BRIGHTNESS
    num_threads: int = 0  # 0 = auto-detect
    seed: Optional[int] = None
    jitter: bool = True
    char_aspect: float = 2.0  # cell height / cell width
    t_min: float = 0.001
    palette: Optional[Palette] = None
    color_glyph: str = "#"

    def __post_init__(self):
        if self.palette is None:
            self.palette = Palette()
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


class Renderer:
    """Path tracing renderer producing character frames."""

    def __init__(self, settings: Optional[RenderSettings] = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, scene: Scene, camera: Camera, cols: int, rows: int) -> Frame:
        """Render the scene into a cols x rows frame.

        Args:
            scene: The scene to render
            camera: The camera to render from
            cols: Output width in cells
            rows: Output height in cells

        Returns:
            The frame, cells in raster order
        """
        settings = self.settings
        start_time = time.perf_counter()

        view = camera.get_view(cols / (rows * settings.char_aspect))

        # One independent stream per row keeps seeded renders reproducible
        # whatever order the rows finish in.
        row_seeds = np.random.SeedSequence(settings.seed).spawn(rows)

        cells: List[Optional[Cell]] = [None] * (cols * rows)
        colors = np.zeros((rows, cols, 3), dtype=np.float64)

        completed_rows = [0]
        progress_lock = threading.Lock()

        def render_row(row: int) -> None:
            rng = np.random.default_rng(row_seeds[row])
            # Row 0 is the bottom of the viewport, the last line on screen
            top = rows - row - 1

            for col in range(cols):
                color = self.sample_pixel(scene, view, col, row, cols, rows, rng)
                color = color.correct(settings.gamma, settings.samples_per_pixel)
                cells[top * cols + col] = self.shade(color)
                colors[top, col] = color.to_array()

            if self._progress_callback:
                # Held across the call so reports arrive in increasing order
                with progress_lock:
                    completed_rows[0] += 1
                    self._progress_callback(completed_rows[0] / rows)

        if settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=settings.num_threads) as executor:
                list(executor.map(render_row, range(rows)))
        else:
            for row in range(rows):
                render_row(row)

        logger.debug(
            "rendered %dx%d frame (%d spp, depth %d) in %.3fs",
            cols, rows, settings.samples_per_pixel, settings.max_depth,
            time.perf_counter() - start_time
        )
        return Frame(cols, rows, cells, colors)

    def render_to(
        self,
        display: Display,
        scene: Scene,
        camera: Camera,
        dimensions: Optional[RenderDimensions] = None
    ) -> Frame:
        """Render a frame sized for the display and write it there.

        Raises:
            DisplayError: if the display cannot be sized or written
        """
        dimensions = dimensions if dimensions is not None else TermSize()
        try:
            cols, rows = dimensions.resolve(display)
        except OSError as e:
            raise DisplayError(f"Could not get display size: {e}") from e

        frame = self.render(scene, camera, cols, rows)

        try:
            display.clear()
            display.write(frame)
        except OSError as e:
            raise DisplayError(f"Could not write frame: {e}") from e

        return frame

    def sample_pixel(
        self,
        scene: Scene,
        view: CameraView,
        col: int,
        row: int,
        cols: int,
        rows: int,
        rng: Optional[np.random.Generator] = None
    ) -> Color:
        """Accumulate samples_per_pixel traced samples for one cell.

        Row 0 is the bottom of the viewport. The sum is returned
        uncorrected.
        """
        settings = self.settings
        if rng is None:
            rng = np.random.default_rng()

        # Guard single-cell grids against division by zero
        u_span = max(cols - 1, 1)
        v_span = max(rows - 1, 1)

        total = Color.black()
        for _ in range(settings.samples_per_pixel):
            if settings.jitter:
                du, dv = rng.random(), rng.random()
            else:
                du = dv = 0.0
            ray = view.get_ray((col + du) / u_span, (row + dv) / v_span)
            total = total + self.ray_color(ray, scene, settings.max_depth, rng)

        return total

    def ray_color(
        self,
        ray: Ray,
        scene: Scene,
        depth: int,
        rng: Optional[np.random.Generator] = None
    ) -> Color:
        """Compute the color for a ray using path tracing.

        Args:
            ray: The ray to trace
            scene: The scene to trace against
            depth: Remaining bounces; 0 contributes black

        Returns:
            The computed color for this ray
        """
        if depth <= 0:
            return Color.black()

        hit_record = scene.hit(ray, self.settings.t_min, float('inf'))

        if hit_record is None:
            return scene.background_color(ray)

        scatter_result = hit_record.material.scatter(ray, hit_record, rng)
        if scatter_result is None:
            return Color.black()

        attenuation, scattered = scatter_result
        return attenuation * self.ray_color(scattered, scene, depth - 1, rng)

    def shade(self, color: Color) -> Cell:
        """Map a corrected color to an output cell according to the mode."""
        mode = self.settings.mode

        if mode is RenderMode.COLOR:
            glyph = self.settings.color_glyph
        else:
            glyph = self.settings.palette.glyph_for(color.brightness())

        rgb = None if mode is RenderMode.BRIGHTNESS else color.to_rgb8()
        return Cell(glyph, rgb)


def get_platform_info() -> dict:
    """Get information about the current platform.

    Returns:
        Dictionary with platform details
    """
    return {
        'system': platform.system(),
        'machine': platform.machine(),
        'python_version': platform.python_version(),
        'numpy_version': np.__version__,
        'cpu_count': os.cpu_count(),
    }
