"""
Thin-lens camera.

Primary rays start on a disk-shaped lens centred on the eye point and pass
through a viewport placed on the plane of perfect focus. Each ray also
carries a time drawn from the shutter interval, which moving geometry uses
to place itself.
"""

from __future__ import annotations
import math
from typing import Tuple

from .vec3 import Vec3, Point3
from .ray import Ray
from .sampling import random_double


def _look_at_basis(look_from: Point3, look_at: Point3, vup: Vec3) -> Tuple[Vec3, Vec3, Vec3]:
    """Right-handed (u, v, w) frame with w pointing away from the target."""
    w = (look_from - look_at).normalize()
    u = vup.cross(w).normalize()
    return u, w.cross(u), w


class Camera:
    """Look-at camera with depth of field and a finite exposure."""

    def __init__(
        self,
        look_from: Point3,
        look_at: Point3,
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0,
        aperture: float = 0.0,
        focus_dist: float = 1.0,
        shutter_open: float = 0.0,
        shutter_close: float = 0.0
    ):
        """
        Args:
            look_from: Eye position
            look_at: Point at the centre of the image
            vup: Approximate up direction
            vfov: Vertical field of view in degrees
            aspect_ratio: Image width divided by height
            aperture: Lens diameter; 0 gives a pinhole with everything sharp
            focus_dist: Distance from the lens to the sharp plane
            shutter_open: Earliest ray time
            shutter_close: Latest ray time; equal to shutter_open freezes motion

        Raises:
            ValueError: If the shutter closes before it opens
        """
        if shutter_close < shutter_open:
            raise ValueError(
                f"Shutter interval is reversed: [{shutter_open}, {shutter_close}]"
            )

        self.u, self.v, self.w = _look_at_basis(look_from, look_at, vup)
        self.origin = look_from

        # Viewport on the focus plane, so lens rays converge there
        half_height = math.tan(math.radians(vfov) / 2) * focus_dist
        half_width = aspect_ratio * half_height
        self.horizontal = self.u * (2 * half_width)
        self.vertical = self.v * (2 * half_height)
        self.lower_left_corner = (
            look_from - self.u * half_width - self.v * half_height - self.w * focus_dist
        )

        self.lens_radius = aperture / 2
        self.shutter_open = shutter_open
        self.shutter_close = shutter_close

    def lens_offset(self) -> Vec3:
        """Random displacement of the ray origin across the lens."""
        if self.lens_radius <= 0:
            return Vec3(0, 0, 0)
        disk = Vec3.random_in_unit_disk() * self.lens_radius
        return self.u * disk.x + self.v * disk.y

    def sample_time(self) -> float:
        if self.shutter_close > self.shutter_open:
            return random_double(self.shutter_open, self.shutter_close)
        return self.shutter_open

    def get_ray(self, s: float, t: float) -> Ray:
        """Ray through viewport coordinates (s, t), both in [0, 1] from the bottom left.

        The direction is left unnormalised; its length is the distance
        from the lens to the viewport point.
        """
        offset = self.lens_offset()
        start = self.origin + offset
        target = self.lower_left_corner + self.horizontal * s + self.vertical * t
        return Ray(start, target - start, self.sample_time())

    def __repr__(self) -> str:
        return (
            f"Camera(origin={self.origin}, lens_radius={self.lens_radius}, "
            f"shutter=[{self.shutter_open}, {self.shutter_close}])"
        )
