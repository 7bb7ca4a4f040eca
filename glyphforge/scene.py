"""
Scenes: the objects to render plus what a ray sees when it hits nothing.

Background variants:
- Solid color
- Vertical gradient (bottom to top)
- Horizontal gradient (left to right)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import logging
from typing import Optional

from .vec3 import Vec3, Point3
from .color import Color
from .ray import Ray
from .shapes import Hittable, HitRecord, HittableList, Sphere
from .materials import Material
from .bvh import BVH

logger = logging.getLogger(__name__)


class Background(ABC):
    """Abstract base class for scene backgrounds."""

    @abstractmethod
    def sample(self, direction: Vec3) -> Color:
        """Get the background color for a given ray direction.

        Args:
            direction: The ray direction (need not be normalized)
        """


class SolidBackground(Background):
    """A uniform background color."""

    def __init__(self, color: Color = Color(0, 0, 0)):
        self.color = color

    def sample(self, direction: Vec3) -> Color:
        return self.color

    def __repr__(self) -> str:
        return f"SolidBackground({self.color})"


class VerticalGradient(Background):
    """Blend from `bottom` (looking down) to `top` (looking up)."""

    def __init__(
        self,
        top: Color = Color(0.5, 0.7, 1.0),
        bottom: Color = Color(1.0, 1.0, 1.0)
    ):
        self.top = top
        self.bottom = bottom

    def sample(self, direction: Vec3) -> Color:
        t = 0.5 * (direction.normalize().y + 1.0)
        return self.bottom * (1.0 - t) + self.top * t

    def __repr__(self) -> str:
        return f"VerticalGradient(top={self.top}, bottom={self.bottom})"


class HorizontalGradient(Background):
    """Blend from `left` (looking -x) to `right` (looking +x)."""

    def __init__(self, left: Color, right: Color):
        self.left = left
        self.right = right

    def sample(self, direction: Vec3) -> Color:
        t = 0.5 * (direction.normalize().x + 1.0)
        return self.left * (1.0 - t) + self.right * t

    def __repr__(self) -> str:
        return f"HorizontalGradient(left={self.left}, right={self.right})"


class Scene:
    """Objects plus a background; treated as read-only while rendering."""

    def __init__(
        self,
        objects: Optional[HittableList] = None,
        background: Optional[Background] = None,
        accelerate: bool = False
    ):
        """Create a scene.

        Args:
            objects: The primitives in the scene
            background: Color source for rays that miss (black if None)
            accelerate: Build a BVH over the objects when all are bounded
        """
        self.objects = objects if objects is not None else HittableList()
        self.background = background if background is not None else SolidBackground()
        self.world: Hittable = self.objects

        if accelerate:
            if len(self.objects) > 0 and self.objects.bounding_box() is None:
                logger.debug("scene has unbounded objects, using flat list")
            elif len(self.objects) > 0:
                self.world = BVH(self.objects.objects)

    @staticmethod
    def builder(background: Optional[Background] = None) -> SceneBuilder:
        """Start a fluent scene description."""
        return SceneBuilder(background)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return self.world.hit(ray, t_min, t_max)

    def background_color(self, ray: Ray) -> Color:
        return self.background.sample(ray.direction)

    def __len__(self) -> int:
        return len(self.objects)

    def __repr__(self) -> str:
        return f"Scene(objects={len(self.objects)}, background={self.background})"


class SceneBuilder:
    """Fluent builder for Scene.

    Parameters are not validated; a zero radius or an empty rectangle
    is the caller's problem.
    """

    def __init__(self, background: Optional[Background] = None):
        self._objects = HittableList()
        self._background = background

    def background(self, background: Background) -> SceneBuilder:
        self._background = background
        return self

    def add_object(self, obj: Hittable) -> SceneBuilder:
        self._objects.add(obj)
        return self

    def add_sphere(self, center: Point3, radius: float, material: Optional[Material] = None) -> SceneBuilder:
        return self.add_object(Sphere(center, radius, material))

    def build(self, accelerate: bool = False) -> Scene:
        return Scene(HittableList(self._objects.objects), self._background, accelerate)
