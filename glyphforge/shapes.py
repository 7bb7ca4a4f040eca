"""
Geometric shapes for the renderer.

Each shape implements the Hittable protocol with a `hit` method that
only reads its own state, so one scene can be shared by render threads.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .materials import Material, NO_OP_MATERIAL


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The surface normal at the intersection (always points against ray)
        t: The ray parameter at intersection
        front_face: True if ray hit from outside the object
        material: The material at the hit point
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool
    material: Material = NO_OP_MATERIAL

    @classmethod
    def with_face_normal(
        cls,
        ray: Ray,
        point: Point3,
        t: float,
        outward_normal: Vec3,
        material: Material
    ) -> HitRecord:
        """Build a record whose normal faces against the incoming ray."""
        record = cls(point=point, normal=outward_normal, t=t, front_face=True, material=material)
        record.set_face_normal(ray, outward_normal)
        return record

    def set_face_normal(self, ray: Ray, outward_normal: Vec3) -> None:
        """Set the normal to always point against the ray direction.

        Args:
            ray: The incoming ray
            outward_normal: The geometric normal pointing outward from surface
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Lower bound (exclusive) for t, avoids self-intersection
            t_max: Upper bound (exclusive) for t

        Returns:
            HitRecord for the nearest intersection, None otherwise
        """

    @abstractmethod
    def bounding_box(self) -> Optional[AABB]:
        """Get the axis-aligned bounding box for this object.

        Returns:
            AABB if the object is bounded, None otherwise
        """


class AABB:
    """Axis-Aligned Bounding Box for acceleration structures."""

    def __init__(self, minimum: Point3, maximum: Point3):
        """Create an AABB from corner points.

        Args:
            minimum: Corner with smallest x, y, z values
            maximum: Corner with largest x, y, z values
        """
        self.minimum = minimum
        self.maximum = maximum

    def hit(self, ray: Ray, t_min: float, t_max: float) -> bool:
        """Test if ray intersects this AABB using the slab method."""
        for i in range(3):
            origin = ray.origin[i]
            direction = ray.direction[i]

            if direction == 0.0:
                # Parallel to this slab: inside it for every t, or never
                if origin < self.minimum[i] or origin > self.maximum[i]:
                    return False
                continue

            inv_d = 1.0 / direction
            t0 = (self.minimum[i] - origin) * inv_d
            t1 = (self.maximum[i] - origin) * inv_d

            if inv_d < 0:
                t0, t1 = t1, t0

            t_min = max(t0, t_min)
            t_max = min(t1, t_max)

            if t_max <= t_min:
                return False

        return True

    def contains(self, point: Point3) -> bool:
        """Return True if the point lies inside or on the box."""
        return all(self.minimum[i] <= point[i] <= self.maximum[i] for i in range(3))

    @staticmethod
    def surrounding_box(box0: AABB, box1: AABB) -> AABB:
        """Return the AABB that contains both input boxes."""
        small = Point3(
            min(box0.minimum.x, box1.minimum.x),
            min(box0.minimum.y, box1.minimum.y),
            min(box0.minimum.z, box1.minimum.z)
        )
        big = Point3(
            max(box0.maximum.x, box1.maximum.x),
            max(box0.maximum.y, box1.maximum.y),
            max(box0.maximum.z, box1.maximum.z)
        )
        return AABB(small, big)

    def __repr__(self) -> str:
        return f"AABB(min={self.minimum}, max={self.maximum})"


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (negative flips the normals inward)
            material: Material for shading (absorbing no-op if omitted)
        """
        self.center = center
        self.radius = radius
        self.material = material if material is not None else NO_OP_MATERIAL

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0
        which is solved with the half-b form of the quadratic.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        if a == 0.0:
            return None
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if not discriminant >= 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Nearest root in the open interval, else the far one
        root = (-half_b - sqrtd) / a
        if root <= t_min or root >= t_max:
            root = (-half_b + sqrtd) / a
            if root <= t_min or root >= t_max:
                return None

        point = ray.at(root)
        outward_normal = (point - self.center) / self.radius

        return HitRecord.with_face_normal(ray, point, root, outward_normal, self.material)

    def bounding_box(self) -> Optional[AABB]:
        """Return the AABB containing this sphere."""
        r_vec = Vec3(abs(self.radius), abs(self.radius), abs(self.radius))
        return AABB(self.center - r_vec, self.center + r_vec)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class AARect(Hittable):
    """A rectangle lying in a plane perpendicular to one coordinate axis.

    `axis` is the fixed axis (0 = x, 1 = y, 2 = z) and `k` its coordinate.
    The two remaining axes, in increasing order, are bounded by `a_range`
    and `b_range`.
    """

    PADDING = 0.0001

    def __init__(
        self,
        axis: int,
        a_range: Tuple[float, float],
        b_range: Tuple[float, float],
        k: float,
        material: Optional[Material] = None
    ):
        self.axis = axis
        self.a_axis, self.b_axis = [i for i in range(3) if i != axis]
        self.a0, self.a1 = a_range
        self.b0, self.b1 = b_range
        self.k = k
        self.material = material if material is not None else NO_OP_MATERIAL

        normal = [0.0, 0.0, 0.0]
        normal[axis] = 1.0
        self.normal = Vec3(*normal)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Intersect the plane on the fixed axis, then check the in-plane bounds."""
        direction = ray.direction[self.axis]
        if direction == 0.0:
            return None

        t = (self.k - ray.origin[self.axis]) / direction
        if not t_min < t < t_max:
            return None

        a = ray.origin[self.a_axis] + t * ray.direction[self.a_axis]
        b = ray.origin[self.b_axis] + t * ray.direction[self.b_axis]
        if a < self.a0 or a > self.a1 or b < self.b0 or b > self.b1:
            return None

        return HitRecord.with_face_normal(ray, ray.at(t), t, self.normal, self.material)

    def bounding_box(self) -> Optional[AABB]:
        """Return the rectangle's box, padded along the fixed axis."""
        minimum = [0.0, 0.0, 0.0]
        maximum = [0.0, 0.0, 0.0]
        minimum[self.a_axis], maximum[self.a_axis] = self.a0, self.a1
        minimum[self.b_axis], maximum[self.b_axis] = self.b0, self.b1
        minimum[self.axis] = self.k - self.PADDING
        maximum[self.axis] = self.k + self.PADDING
        return AABB(Point3(*minimum), Point3(*maximum))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(a=({self.a0}, {self.a1}), "
            f"b=({self.b0}, {self.b1}), k={self.k})"
        )


class XYRect(AARect):
    """Rectangle in the plane z = k."""

    def __init__(self, x: Tuple[float, float], y: Tuple[float, float], k: float,
                 material: Optional[Material] = None):
        super().__init__(2, x, y, k, material)


class XZRect(AARect):
    """Rectangle in the plane y = k."""

    def __init__(self, x: Tuple[float, float], z: Tuple[float, float], k: float,
                 material: Optional[Material] = None):
        super().__init__(1, x, z, k, material)


class YZRect(AARect):
    """Rectangle in the plane x = k."""

    def __init__(self, y: Tuple[float, float], z: Tuple[float, float], k: float,
                 material: Optional[Material] = None):
        super().__init__(0, y, z, k, material)


class HittableList(Hittable):
    """A collection of hittable objects."""

    def __init__(self, objects: Optional[list[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find the closest intersection among all objects.

        Each hit lowers the upper bound, so on equal distances the
        first object wins.
        """
        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for obj in self.objects:
            hit_record = obj.hit(ray, t_min, closest_t)
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def bounding_box(self) -> Optional[AABB]:
        """Return the AABB containing all objects.

        None if the list is empty or any child is unbounded.
        """
        if not self.objects:
            return None

        output_box: Optional[AABB] = None

        for obj in self.objects:
            box = obj.bounding_box()
            if box is None:
                return None
            output_box = box if output_box is None else AABB.surrounding_box(output_box, box)

        return output_box

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)
