"""
Participating media for the path tracer.

A ConstantMedium fills the inside of a boundary shape with a uniform
density of particles. Rays crossing the boundary may scatter at a random
depth inside, independent of any surface normal.
"""

from __future__ import annotations
from typing import Optional
import math

from .vec3 import Vec3, Color
from .ray import Ray
from .shapes import Hittable, HitRecord, AABB
from .materials import Material, Isotropic
from .sampling import get_rng

# Gap used when searching for the exit point past the entry point
_EXIT_EPSILON = 0.0001


class ConstantMedium(Hittable):
    """A constant density participating medium (fog, smoke, mist).

    The boundary must be a closed convex shape: the ray is assumed to enter
    once and leave once.
    """

    def __init__(
        self,
        boundary: Hittable,
        density: float,
        albedo: Color,
        phase_material: Optional[Material] = None
    ):
        """Create a constant density medium.

        Args:
            boundary: The shape that defines the medium's extent
            density: Particle density (higher = more opaque), must be positive
            albedo: Color of the medium
            phase_material: Material used at scattering events
                (defaults to Isotropic(albedo))
        """
        if density <= 0:
            raise ValueError(f"Medium density must be positive, got {density}")

        self.boundary = boundary
        self.density = density
        self.neg_inv_density = -1.0 / density
        self.phase_material = phase_material if phase_material is not None else Isotropic(albedo)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Sample a free-flight distance through the medium."""
        entry = self.boundary.hit(ray, -math.inf, math.inf)
        if entry is None:
            return None

        exit_ = self.boundary.hit(ray, entry.t + _EXIT_EPSILON, math.inf)
        if exit_ is None:
            return None

        t_enter = max(entry.t, t_min)
        t_exit = min(exit_.t, t_max)

        if t_enter >= t_exit:
            return None

        t_enter = max(t_enter, 0.0)

        ray_length = ray.direction.length()
        distance_inside_boundary = (t_exit - t_enter) * ray_length
        # 1 - U keeps the argument of log in (0, 1]
        hit_distance = self.neg_inv_density * math.log(1.0 - get_rng().random())

        if hit_distance > distance_inside_boundary:
            return None

        t = t_enter + hit_distance / ray_length

        return HitRecord(
            point=ray.at(t),
            normal=Vec3(1, 0, 0),  # Arbitrary; the phase function ignores it
            t=t,
            front_face=True,
            material=self.phase_material
        )

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        return self.boundary.bounding_box(time0, time1)

    def __repr__(self) -> str:
        return f"ConstantMedium({self.boundary!r}, density={self.density})"


def create_fog(
    boundary: Hittable,
    density: float = 0.1,
    color: Color = Color(1, 1, 1)
) -> ConstantMedium:
    """Create a fog volume.

    Args:
        boundary: The shape defining the fog region
        density: Fog density (higher = more opaque)
        color: Fog color

    Returns:
        A ConstantMedium scattering isotropically
    """
    return ConstantMedium(boundary, density, color)
