"""
Materials decide how a ray continues after hitting a surface.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)
- NoOpMaterial (absorbs everything; the default for bare shapes)

Materials hold only their own parameters and are never mutated after
construction, so a single instance can be shared by many shapes and
render threads.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import NamedTuple, Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3
from .color import Color
from .ray import Ray

if TYPE_CHECKING:
    from .shapes import HitRecord


class ScatterResult(NamedTuple):
    """Result of a material scatter operation."""
    attenuation: Color
    scattered_ray: Ray


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(
        self,
        ray_in: Ray,
        rec: HitRecord,
        rng: Optional[np.random.Generator] = None
    ) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            rec: The hit being shaded
            rng: Random source (global numpy state if None)

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """


class NoOpMaterial(Material):
    """Material that absorbs every ray."""

    def scatter(self, ray_in, rec, rng=None):
        return None

    def __repr__(self) -> str:
        return "NoOpMaterial()"


NO_OP_MATERIAL = NoOpMaterial()


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        """Create a Lambertian material.

        Args:
            albedo: The base color (RGB, each component 0-1)
        """
        self.albedo = albedo

    def scatter(self, ray_in, rec, rng=None):
        scatter_direction = rec.normal + Vec3.random_in_unit_sphere(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = rec.normal

        return ScatterResult(self.albedo, Ray(rec.point, scatter_direction))

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Perturbation radius of the reflection (0 = mirror, 1 = very rough)
        """
        self.albedo = albedo
        self.fuzz = min(max(fuzz, 0.0), 1.0)

    def scatter(self, ray_in, rec, rng=None):
        reflected = ray_in.direction.normalize().reflect(rec.normal)

        if self.fuzz > 0:
            reflected = reflected + Vec3.random_in_unit_sphere(rng) * self.fuzz

        # Reflections into the surface are absorbed
        if reflected.dot(rec.normal) <= 0:
            return None
        return ScatterResult(self.albedo, Ray(rec.point, reflected))

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo}, fuzz={self.fuzz})"


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    def __init__(self, ior: float = 1.5):
        """Create a dielectric material.

        Args:
            ior: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
        """
        self.ior = ior

    def scatter(self, ray_in, rec, rng=None):
        refraction_ratio = 1.0 / self.ior if rec.front_face else self.ior
        unit_direction = ray_in.direction.normalize()

        if refraction_ratio == 1.0:
            # Index-matched interface: nothing to reflect off or bend
            return ScatterResult(Color.white(), Ray(rec.point, unit_direction))

        cos_theta = min(-unit_direction.dot(rec.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = refraction_ratio * sin_theta > 1.0
        chance = np.random.random() if rng is None else rng.random()

        if cannot_refract or self.reflectance(cos_theta, refraction_ratio) > chance:
            direction = unit_direction.reflect(rec.normal)
        else:
            direction = unit_direction.refract(rec.normal, refraction_ratio)

        return ScatterResult(Color.white(), Ray(rec.point, direction))

    @staticmethod
    def reflectance(cosine: float, ref_idx: float) -> float:
        """Schlick's approximation for reflectance."""
        r0 = (1 - ref_idx) / (1 + ref_idx)
        r0 = r0 * r0
        return r0 + (1 - r0) * pow(1 - cosine, 5)

    def __repr__(self) -> str:
        return f"Dielectric(ior={self.ior})"
