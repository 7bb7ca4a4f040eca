"""
Vector3 class for 3D math operations.

This is the fundamental building block of the renderer, used for:
- Points in 3D space
- Direction vectors
- RGB color values (see color.Color)
"""

from __future__ import annotations
import math
from typing import Iterator, Optional, Union
import numpy as np


def _source(rng: Optional[np.random.Generator]):
    """Return the random source to draw from (global numpy state if None)."""
    return np.random if rng is None else rng


class Vec3:
    """An immutable 3D vector.

    Uses numpy internally for efficient computation while providing
    a clean, Pythonic API. Arithmetic keeps the concrete type of the
    left operand so subclasses (Color) stay closed under their ops.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create a vector from a copy of a numpy array of three floats."""
        return cls._wrap(np.array(arr, dtype=np.float64))

    @classmethod
    def _wrap(cls, data: np.ndarray) -> Vec3:
        # Takes ownership of `data`; only for arrays nobody else holds
        v = cls.__new__(cls)
        v._data = data
        return v

    def _new(self, arr: np.ndarray) -> Vec3:
        return type(self)._wrap(arr)

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return bool(np.allclose(self._data, other._data))

    def __hash__(self) -> int:
        return hash(tuple(self._data))

    def __iter__(self) -> Iterator[float]:
        return (float(c) for c in self._data)

    def __neg__(self) -> Vec3:
        return self._new(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return self._new(self._data + other._data)
        return self._new(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        return self._new(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return self._new(self._data - other._data)
        return self._new(self._data - other)

    def __rsub__(self, other: float) -> Vec3:
        return self._new(other - self._data)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return self._new(self._data * other._data)
        return self._new(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return self._new(other * self._data)

    def __truediv__(self, other: float) -> Vec3:
        return self._new(self._data / other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction.

        The zero vector has no direction; it is returned unchanged.
        """
        length = self.length()
        if length == 0:
            return self._new(np.zeros(3))
        return self._new(self._data / length)

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return self._new(np.cross(self._data, other._data))

    def reflect(self, normal: Vec3) -> Vec3:
        """Reflect this vector around the given (unit) normal."""
        return self - normal * (2 * self.dot(normal))

    def refract(self, normal: Vec3, eta_ratio: float) -> Vec3:
        """Refract this unit vector through a surface with the given normal.

        Args:
            normal: Unit surface normal on the incoming side
            eta_ratio: Ratio of refractive indices (n1/n2)

        Returns:
            Refracted direction vector, or zero vector if total internal reflection
        """
        cos_theta = min(-self.dot(normal), 1.0)
        r_out_perp = (self + normal * cos_theta) * eta_ratio
        perp_len_sq = r_out_perp.length_squared()

        if perp_len_sq > 1.0:
            return self._new(np.zeros(3))

        r_out_parallel = normal * (-math.sqrt(abs(1.0 - perp_len_sq)))
        return r_out_perp + r_out_parallel

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return bool(np.all(np.abs(self._data) < epsilon))

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    def clamp(self, min_val: float = 0.0, max_val: float = 1.0) -> Vec3:
        """Clamp all components to the given range."""
        return self._new(np.clip(self._data, min_val, max_val))

    @classmethod
    def random(
        cls,
        min_val: float = 0.0,
        max_val: float = 1.0,
        rng: Optional[np.random.Generator] = None
    ) -> Vec3:
        """Generate a random vector with components in [min_val, max_val)."""
        return cls.from_array(_source(rng).uniform(min_val, max_val, 3))

    @staticmethod
    def random_in_unit_sphere(rng: Optional[np.random.Generator] = None) -> Vec3:
        """Generate a random point strictly inside the unit sphere."""
        while True:
            p = Vec3.random(-1, 1, rng)
            if p.length_squared() < 1:
                return p

    @staticmethod
    def random_unit_vector(rng: Optional[np.random.Generator] = None) -> Vec3:
        """Generate a random unit vector (uniform on sphere surface)."""
        while True:
            p = Vec3.random_in_unit_sphere(rng)
            if p.length_squared() > 1e-160:
                return p.normalize()

    @staticmethod
    def random_in_hemisphere(normal: Vec3, rng: Optional[np.random.Generator] = None) -> Vec3:
        """Generate a random vector in the hemisphere defined by normal."""
        in_unit_sphere = Vec3.random_in_unit_sphere(rng)
        if in_unit_sphere.dot(normal) > 0.0:
            return in_unit_sphere
        return -in_unit_sphere


# A point is a Vec3 used as a position
Point3 = Vec3
