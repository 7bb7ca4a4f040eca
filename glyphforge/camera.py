"""
Camera module for generating primary rays.

The Camera holds mutable state (position, look-at target, up vector,
vertical field of view) that interactive controls change between
frames. Rendering works from a CameraView, a read-only projection of
that state for one aspect ratio.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import math

from .vec3 import Vec3, Point3
from .ray import Ray


class MoveDirection(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class RotationDirection(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class CameraView:
    """A static view on the scene.

    Attributes:
        origin: Eye position
        lower_left_corner: Lower left corner of the viewport plane
        horizontal: Full viewport width along the camera's right axis
        vertical: Full viewport height along the camera's up axis
        u, v, w: Orthonormal camera basis (right, up, backward)
    """
    origin: Point3
    lower_left_corner: Point3
    horizontal: Vec3
    vertical: Vec3
    u: Vec3
    v: Vec3
    w: Vec3

    def get_ray(self, s: float, t: float) -> Ray:
        """Generate a ray for the given UV coordinates on the image plane.

        Args:
            s: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            t: Vertical coordinate [0, 1] (0 = bottom, 1 = top)

        Returns:
            A ray from the eye through the viewport point (not normalized)
        """
        direction = (
            self.lower_left_corner
            + self.horizontal * s
            + self.vertical * t
            - self.origin
        )
        return Ray(self.origin, direction)


# Assigning any of these drops the cached view
_VIEW_INPUTS = frozenset(('position', 'look_at', 'vup', 'vfov'))


class Camera:
    """A pinhole camera that can be moved and turned between frames."""

    def __init__(
        self,
        look_from: Point3 = Point3(0, 0, 0),
        look_at: Point3 = Point3(0, 0, -1),
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0
    ):
        """Create a camera.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
        """
        self.position = look_from
        self.look_at = look_at
        self.vup = vup
        self.vfov = vfov
        self._view: Optional[Tuple[float, CameraView]] = None

    def get_view(self, aspect_ratio: float) -> CameraView:
        """Project the current state into a viewport for the given aspect ratio.

        The view is cached until the camera moves or the aspect ratio changes.
        """
        if self._view is not None and self._view[0] == aspect_ratio:
            return self._view[1]

        theta = math.radians(self.vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        # Compute orthonormal camera basis
        w = (self.position - self.look_at).normalize()  # Points backward from camera
        u = self.vup.cross(w).normalize()                # Points right
        v = w.cross(u)                                   # Points up

        horizontal = u * viewport_width
        vertical = v * viewport_height
        lower_left_corner = self.position - horizontal / 2 - vertical / 2 - w

        view = CameraView(self.position, lower_left_corner, horizontal, vertical, u, v, w)
        self._view = (aspect_ratio, view)
        return view

    def __setattr__(self, name, value):
        super().__setattr__(name, value)
        if name in _VIEW_INPUTS:
            super().__setattr__('_view', None)

    @property
    def look_direction(self) -> Vec3:
        return (self.look_at - self.position).normalize()

    def move_absolute(self, dx: float, dy: float, dz: float) -> None:
        """Translate position and target by a world-space offset."""
        offset = Vec3(dx, dy, dz)
        self.position = self.position + offset
        self.look_at = self.look_at + offset

    def move_relative(self, direction: MoveDirection, step: float) -> None:
        """Translate position and target along the camera's own axes."""
        look_dir = self.look_direction
        left = self.vup.cross(look_dir).normalize()
        up = self.vup.normalize()

        offsets = {
            MoveDirection.FORWARD: look_dir,
            MoveDirection.BACKWARD: -look_dir,
            MoveDirection.LEFT: left,
            MoveDirection.RIGHT: -left,
            MoveDirection.UP: up,
            MoveDirection.DOWN: -up,
        }
        offset = offsets[direction] * step

        self.position = self.position + offset
        self.look_at = self.look_at + offset

    def rotate(self, direction: RotationDirection, angle: float) -> None:
        """Turn the look direction about the up vector by `angle` radians.

        The camera stays in place; the target keeps its distance.
        """
        if direction is RotationDirection.RIGHT:
            angle = -angle

        axis = self.vup.normalize()
        offset = self.look_at - self.position

        # Rodrigues' rotation formula
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        rotated = (
            offset * cos_a
            + axis.cross(offset) * sin_a
            + axis * (axis.dot(offset) * (1 - cos_a))
        )

        self.look_at = self.position + rotated

    def __repr__(self) -> str:
        return f"Camera(position={self.position}, look_at={self.look_at}, vfov={self.vfov})"
