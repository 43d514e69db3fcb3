"""
Surface and volume scattering models.

Implements:
- Lambertian diffuse
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - reflection or refraction)
- Isotropic (uniform scattering inside participating media)

Materials are immutable once built and are shared by reference between
every shape (and every hit record) that uses them.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Color
from .ray import Ray
from .sampling import random_double

if TYPE_CHECKING:
    from .shapes import HitRecord


@dataclass(frozen=True)
class ScatterResult:
    """Result of a material scatter operation."""
    attenuation: Color
    scattered_ray: Ray


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: The intersection being shaded

        Returns:
            ScatterResult if the ray scatters, None if it is absorbed
        """


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Color):
        """Create a Lambertian material.

        Args:
            albedo: The base color (RGB, each component 0-1)
        """
        self.albedo = albedo

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        # Normal plus a point on the unit sphere is cosine distributed
        scatter_direction = hit.normal + Vec3.random_unit_vector()

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        scattered = Ray(hit.point, scatter_direction, ray_in.time)
        return ScatterResult(attenuation=self.albedo, scattered_ray=scattered)

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo})"


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Radius of the reflection perturbation (0 = mirror, clamped to [0, 1])
        """
        self.albedo = albedo
        self.fuzz = max(0.0, min(fuzz, 1.0))

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        reflected = ray_in.direction.normalize().reflect(hit.normal)
        if self.fuzz > 0:
            reflected = reflected + Vec3.random_in_unit_sphere() * self.fuzz

        # Fuzzed reflections that dip below the surface are absorbed
        if reflected.dot(hit.normal) <= 0:
            return None

        scattered = Ray(hit.point, reflected, ray_in.time)
        return ScatterResult(attenuation=self.albedo, scattered_ray=scattered)

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

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        refraction_ratio = 1.0 / self.ior if hit.front_face else self.ior

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(hit.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = refraction_ratio * sin_theta > 1.0

        if cannot_refract or self.reflectance(cos_theta, refraction_ratio) > random_double():
            direction = unit_direction.reflect(hit.normal)
        else:
            direction = unit_direction.refract(hit.normal, refraction_ratio)

        scattered = Ray(hit.point, direction, ray_in.time)
        return ScatterResult(attenuation=Color(1.0, 1.0, 1.0), scattered_ray=scattered)

    @staticmethod
    def reflectance(cosine: float, ref_idx: float) -> float:
        """Schlick's approximation for reflectance."""
        r0 = (1 - ref_idx) / (1 + ref_idx)
        r0 = r0 * r0
        return r0 + (1 - r0) * pow(1 - cosine, 5)

    def __repr__(self) -> str:
        return f"Dielectric(ior={self.ior})"


class Isotropic(Material):
    """Phase material for volumes: scatters uniformly in every direction."""

    def __init__(self, albedo: Color):
        self.albedo = albedo

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        scattered = Ray(hit.point, Vec3.random_unit_vector(), ray_in.time)
        return ScatterResult(attenuation=self.albedo, scattered_ray=scattered)

    def __repr__(self) -> str:
        return f"Isotropic(albedo={self.albedo})"
