"""
GlyphForge - A Python Path Tracer for the Terminal

Renders 3D scenes as character art with support for:
- Diffuse, metal and glass materials
- Spheres and axis-aligned rectangles
- BVH acceleration for bounded scenes
- Brightness glyph ramps and 24-bit terminal color
- Multi-threaded, reproducible rendering
- Interactive camera movement from the keyboard
"""

__version__ = "0.1.0"
__author__ = "GlyphForge Team"

from .vec3 import Vec3, Point3
from .color import Color
from .ray import Ray
from .shapes import Sphere, AARect, XYRect, XZRect, YZRect, HittableList, AABB, HitRecord, Hittable
from .materials import Material, ScatterResult, NoOpMaterial, Lambertian, Metal, Dielectric
from .camera import Camera, CameraView, MoveDirection, RotationDirection
from .bvh import BVH, BVHNode, build_bvh
from .scene import Scene, SceneBuilder, Background, SolidBackground, VerticalGradient, HorizontalGradient
from .palette import Palette, DETAILED_GLYPHS, SIMPLE_GLYPHS, get_palette
from .frame import Frame, Cell
from .display import Display, BufferDisplay, GlyphForgeError, DisplayError
from .renderer import (
    Renderer, RenderSettings, RenderMode,
    RenderDimensions, ConcreteSize, TermSize, RelativeToTermSize,
    get_platform_info
)
from .terminal import TerminalDisplay, StreamDisplay, encode_frame
from .controls import CameraController, CancellationToken
from .scenes import create_demo_scene, create_demo_camera, create_cornell_box, load_demo
