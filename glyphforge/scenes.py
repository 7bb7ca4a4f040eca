"""Built-in demo scenes and matching cameras."""

from __future__ import annotations
from typing import Callable, Dict, Tuple

from .vec3 import Vec3, Point3
from .color import Color
from .camera import Camera
from .shapes import XYRect, XZRect, YZRect
from .materials import Lambertian, Metal, Dielectric
from .scene import Scene, SolidBackground, VerticalGradient


def create_demo_scene() -> Scene:
    """Three small spheres (diffuse, glass, fuzzy metal) on a large ground sphere."""
    return (
        Scene.builder(VerticalGradient(top=Color(0.5, 0.7, 1.0), bottom=Color(1.0, 1.0, 1.0)))
        # ground
        .add_sphere(Point3(0.0, -100.5, -1.0), 100.0, Lambertian(Color.from_u8(0, 255, 0)))
        # left
        .add_sphere(Point3(-0.5, 0.0, -1.0), 0.2, Lambertian(Color.from_u8(255, 0, 0)))
        # middle
        .add_sphere(Point3(0.0, 0.0, -1.0), 0.2, Dielectric(2.0))
        # right
        .add_sphere(Point3(0.5, 0.0, -1.0), 0.2, Metal(Color.from_u8(0, 0, 255), 0.8))
        .build()
    )


def create_demo_camera() -> Camera:
    return Camera(
        look_from=Point3(0, 0, 0),
        look_at=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        vfov=90
    )


def create_cornell_box() -> Scene:
    """A 10 x 10 x 10 box with colored side walls, lit by a bright background."""
    red = Lambertian(Color(0.65, 0.05, 0.05))
    white = Lambertian(Color(0.73, 0.73, 0.73))
    green = Lambertian(Color(0.12, 0.45, 0.15))

    # The box is open towards the camera (+z) so the background lights it
    return (
        Scene.builder(SolidBackground(Color(1.0, 1.0, 1.0)))
        .add_object(YZRect((0, 10), (-10, 0), -5, red))      # left wall
        .add_object(YZRect((0, 10), (-10, 0), 5, green))     # right wall
        .add_object(XZRect((-5, 5), (-10, 0), 0, white))     # floor
        .add_object(XZRect((-5, 5), (-10, 0), 10, white))    # ceiling
        .add_object(XYRect((-5, 5), (0, 10), -10, white))    # back wall
        .add_sphere(Point3(-2, 1.5, -6), 1.5, Dielectric(1.5))
        .add_sphere(Point3(2, 1, -4), 1.0, Metal(Color(0.8, 0.8, 0.8), 0.1))
        .add_sphere(Point3(0, 1, -8), 1.0, Lambertian(Color(0.8, 0.6, 0.2)))
        .build(accelerate=True)
    )


def create_cornell_camera() -> Camera:
    return Camera(
        look_from=Point3(0, 5, 12),
        look_at=Point3(0, 5, 0),
        vup=Vec3(0, 1, 0),
        vfov=50
    )


SCENES: Dict[str, Tuple[Callable[[], Scene], Callable[[], Camera]]] = {
    "demo": (create_demo_scene, create_demo_camera),
    "cornell": (create_cornell_box, create_cornell_camera),
}


def load_demo(name: str) -> Tuple[Scene, Camera]:
    """Build a named demo scene and its camera."""
    try:
        make_scene, make_camera = SCENES[name]
    except KeyError:
        raise ValueError(f"Unknown scene: {name}") from None
    return make_scene(), make_camera()
