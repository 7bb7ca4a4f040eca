"""Tests for Renderer class."""

import os

import pytest
import numpy as np

from glyphforge.vec3 import Vec3, Point3
from glyphforge.color import Color
from glyphforge.ray import Ray
from glyphforge.camera import Camera
from glyphforge.shapes import Sphere
from glyphforge.materials import Lambertian, Metal
from glyphforge.scene import Scene, SolidBackground, VerticalGradient
from glyphforge.palette import Palette, SIMPLE_GLYPHS
from glyphforge.display import BufferDisplay, DisplayError
from glyphforge.renderer import (
    Renderer, RenderSettings, RenderMode,
    ConcreteSize, TermSize, RelativeToTermSize, get_platform_info
)


def single_sphere_scene():
    return (
        Scene.builder(SolidBackground(Color(1, 1, 1)))
        .add_sphere(Point3(0, 0, -3), 1.0, Lambertian(Color(0.5, 0.5, 0.5)))
        .build()
    )


def front_camera():
    return Camera(Point3(0, 0, 0), Point3(0, 0, -1), Vec3(0, 1, 0), 90)


class BrokenDisplay(BufferDisplay):
    def __init__(self, fail_on):
        super().__init__(4, 4)
        self.fail_on = fail_on

    def size(self):
        if self.fail_on == "size":
            raise OSError("no terminal")
        return super().size()

    def write(self, frame):
        if self.fail_on == "write":
            raise OSError("broken pipe")
        super().write(frame)


class TestRenderSettings:
    """Test RenderSettings configuration."""

    def test_default_values(self):
        settings = RenderSettings()
        assert settings.samples_per_pixel == 10
        assert settings.max_depth == 15
        assert settings.gamma == 2.0
        assert settings.mode is RenderMode.BRIGHTNESS
        assert settings.char_aspect == 2.0
        assert isinstance(settings.palette, Palette)

    def test_auto_thread_detection(self):
        settings = RenderSettings(num_threads=0)
        assert settings.num_threads == (os.cpu_count() or 4)

    def test_explicit_threads(self):
        assert RenderSettings(num_threads=3).num_threads == 3


class TestRenderDimensions:
    """Test resolving output sizes."""

    def test_concrete(self):
        assert ConcreteSize(7, 3).resolve(None) == (7, 3)

    def test_term_size(self):
        assert TermSize().resolve(BufferDisplay(30, 9)) == (30, 9)

    def test_term_size_needs_display(self):
        with pytest.raises(ValueError):
            TermSize().resolve(None)

    def test_relative(self):
        assert RelativeToTermSize(-2, -1).resolve(BufferDisplay(10, 5)) == (8, 4)

    def test_relative_never_below_one(self):
        assert RelativeToTermSize(-50, -50).resolve(BufferDisplay(10, 5)) == (1, 1)

    def test_relative_needs_display(self):
        with pytest.raises(ValueError):
            RelativeToTermSize().resolve(None)


class TestRayColor:
    """Test path tracing a single ray."""

    def test_depth_zero_is_black(self):
        renderer = Renderer(RenderSettings(num_threads=1))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert renderer.ray_color(ray, single_sphere_scene(), 0) == Color(0, 0, 0)

    def test_miss_returns_background(self):
        renderer = Renderer(RenderSettings(num_threads=1))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert renderer.ray_color(ray, single_sphere_scene(), 5) == Color(1, 1, 1)

    def test_absorbed_ray_is_black(self):
        scene = Scene.builder(SolidBackground(Color(1, 1, 1))).add_sphere(
            Point3(0, 0, -3), 1.0
        ).build()
        renderer = Renderer(RenderSettings(num_threads=1))
        color = renderer.ray_color(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), scene, 5)
        assert color == Color(0, 0, 0)

    def test_mirror_bounce_attenuates(self):
        scene = Scene.builder(SolidBackground(Color(1, 1, 1))).add_sphere(
            Point3(0, 0, -3), 1.0, Metal(Color(0.5, 0.25, 1.0), 0.0)
        ).build()
        renderer = Renderer(RenderSettings(num_threads=1))
        color = renderer.ray_color(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), scene, 5)
        assert color == Color(0.5, 0.25, 1.0)

    def test_hit_at_depth_one_is_black(self):
        renderer = Renderer(RenderSettings(num_threads=1))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        color = renderer.ray_color(ray, single_sphere_scene(), 1, np.random.default_rng(0))
        assert color == Color(0, 0, 0)


class TestShade:
    """Test mapping colors to cells."""

    def test_brightness_mode(self):
        renderer = Renderer(RenderSettings(palette=Palette(SIMPLE_GLYPHS)))
        cell = renderer.shade(Color(1, 1, 1))
        assert cell.glyph == "@"
        assert cell.color is None

    def test_color_mode(self):
        renderer = Renderer(RenderSettings(mode=RenderMode.COLOR))
        cell = renderer.shade(Color(1, 0, 0))
        assert cell.glyph == "#"
        assert cell.color == (255, 0, 0)

    def test_color_and_brightness_mode(self):
        renderer = Renderer(RenderSettings(
            mode=RenderMode.COLOR_AND_BRIGHTNESS, palette=Palette(SIMPLE_GLYPHS)
        ))
        cell = renderer.shade(Color(0, 0, 0))
        assert cell.glyph == " "
        assert cell.color == (0, 0, 0)


class TestRender:
    """Test whole-frame rendering."""

    def test_frame_shape(self):
        renderer = Renderer(RenderSettings(samples_per_pixel=1, max_depth=2, num_threads=1, seed=1))
        frame = renderer.render(single_sphere_scene(), front_camera(), 7, 5)
        assert frame.cols == 7
        assert frame.rows == 5
        assert len(frame.cells) == 35
        assert frame.colors.shape == (5, 7, 3)
        assert all(cell is not None for cell in frame.cells)

    def test_single_sphere_silhouette(self):
        settings = RenderSettings(samples_per_pixel=1, max_depth=1, num_threads=1, jitter=False)
        renderer = Renderer(settings)
        scene = single_sphere_scene()
        camera = front_camera()
        frame = renderer.render(scene, camera, 10, 10)

        palette = settings.palette
        view = camera.get_view(10 / (10 * settings.char_aspect))
        for row in range(10):
            for col in range(10):
                ray = view.get_ray(col / 9, row / 9)
                covered = scene.hit(ray, settings.t_min, float('inf')) is not None
                expected = palette.darkest if covered else palette.lightest
                # Frame rows count from the top, viewport rows from the bottom
                assert frame.cell(col, 9 - row).glyph == expected

        assert frame.cell(4, 4).glyph == palette.darkest
        assert frame.cell(0, 0).glyph == palette.lightest
        assert frame.cell(9, 9).glyph == palette.lightest

    def test_jittered_silhouette_has_two_glyphs(self):
        settings = RenderSettings(samples_per_pixel=1, max_depth=1, num_threads=2, seed=8)
        frame = Renderer(settings).render(single_sphere_scene(), front_camera(), 10, 10)
        glyphs = {cell.glyph for cell in frame.cells}
        assert glyphs == {settings.palette.darkest, settings.palette.lightest}

    def test_top_row_is_sky(self):
        scene = Scene(background=VerticalGradient(top=Color(1, 1, 1), bottom=Color(0, 0, 0)))
        settings = RenderSettings(samples_per_pixel=1, num_threads=1, jitter=False)
        frame = Renderer(settings).render(scene, front_camera(), 1, 3)
        assert frame.colors[0, 0, 0] > frame.colors[1, 0, 0] > frame.colors[2, 0, 0]

    def test_seeded_render_is_reproducible(self):
        settings = RenderSettings(samples_per_pixel=2, max_depth=4, num_threads=4, seed=123)
        scene = single_sphere_scene()
        a = Renderer(settings).render(scene, front_camera(), 8, 6)
        b = Renderer(settings).render(scene, front_camera(), 8, 6)
        assert np.array_equal(a.colors, b.colors)
        assert a.to_text() == b.to_text()

    def test_thread_count_does_not_change_result(self):
        scene = single_sphere_scene()
        one = Renderer(RenderSettings(samples_per_pixel=2, max_depth=4, num_threads=1, seed=9))
        many = Renderer(RenderSettings(samples_per_pixel=2, max_depth=4, num_threads=4, seed=9))
        a = one.render(scene, front_camera(), 6, 4)
        b = many.render(scene, front_camera(), 6, 4)
        assert np.array_equal(a.colors, b.colors)

    def test_progress_callback(self):
        renderer = Renderer(RenderSettings(samples_per_pixel=1, max_depth=1, num_threads=2))
        progress = []
        renderer.set_progress_callback(progress.append)
        renderer.render(single_sphere_scene(), front_camera(), 4, 5)
        assert len(progress) == 5
        assert max(progress) == 1.0

    def test_progress_never_goes_backwards(self):
        renderer = Renderer(RenderSettings(samples_per_pixel=1, max_depth=1, num_threads=4))
        progress = []
        renderer.set_progress_callback(progress.append)
        renderer.render(single_sphere_scene(), front_camera(), 3, 16)
        assert progress == sorted(progress)
        assert progress == [i / 16 for i in range(1, 17)]

    def test_single_cell(self):
        renderer = Renderer(RenderSettings(samples_per_pixel=1, max_depth=1, num_threads=1))
        frame = renderer.render(single_sphere_scene(), front_camera(), 1, 1)
        assert len(frame.cells) == 1


class TestSamplePixel:
    """Test per-cell sampling."""

    def test_fixed_pattern_is_bit_identical(self):
        settings = RenderSettings(samples_per_pixel=1, max_depth=5, num_threads=1, jitter=False)
        renderer = Renderer(settings)
        scene = single_sphere_scene()
        view = front_camera().get_view(1.0)

        a = renderer.sample_pixel(scene, view, 0, 0, 10, 10, np.random.default_rng(77))
        b = renderer.sample_pixel(scene, view, 0, 0, 10, 10, np.random.default_rng(77))
        assert np.array_equal(a.to_array(), b.to_array())

    def test_sum_is_uncorrected(self):
        settings = RenderSettings(samples_per_pixel=4, max_depth=1, num_threads=1)
        renderer = Renderer(settings)
        view = front_camera().get_view(1.0)
        # Top left corner sees only the white background
        total = renderer.sample_pixel(single_sphere_scene(), view, 0, 9, 10, 10, np.random.default_rng(0))
        assert total == Color(4, 4, 4)


class TestRenderTo:
    """Test rendering into a display."""

    def test_uses_display_size(self):
        display = BufferDisplay(6, 4)
        renderer = Renderer(RenderSettings(samples_per_pixel=1, max_depth=1, num_threads=1))
        frame = renderer.render_to(display, single_sphere_scene(), front_camera())
        assert (frame.cols, frame.rows) == (6, 4)
        assert display.clears == 1
        assert display.last_frame is frame

    def test_explicit_dimensions(self):
        display = BufferDisplay(6, 4)
        renderer = Renderer(RenderSettings(samples_per_pixel=1, max_depth=1, num_threads=1))
        frame = renderer.render_to(
            display, single_sphere_scene(), front_camera(), RelativeToTermSize(-1, -1)
        )
        assert (frame.cols, frame.rows) == (5, 3)

    def test_size_failure(self):
        renderer = Renderer(RenderSettings(samples_per_pixel=1, max_depth=1, num_threads=1))
        with pytest.raises(DisplayError):
            renderer.render_to(BrokenDisplay("size"), single_sphere_scene(), front_camera())

    def test_write_failure(self):
        renderer = Renderer(RenderSettings(samples_per_pixel=1, max_depth=1, num_threads=1))
        with pytest.raises(DisplayError):
            renderer.render_to(BrokenDisplay("write"), single_sphere_scene(), front_camera())


class TestPlatformInfo:
    """Test platform detection."""

    def test_get_platform_info(self):
        info = get_platform_info()
        assert set(info) == {'system', 'machine', 'python_version', 'numpy_version', 'cpu_count'}
        assert info['numpy_version'] == np.__version__
