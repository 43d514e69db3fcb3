"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point, a direction vector and the moment
within the shutter interval at which it exists.
Ray(t) = origin + t * direction
"""

from __future__ import annotations
from .vec3 import Vec3, Point3


class Ray:
    """A ray with origin, direction and time.

    The parametric form is: P(t) = origin + t * direction
    where t >= 0 represents points along the ray. The `time` attribute is
    unrelated to `t`; it is only consulted by time-varying geometry.
    """

    __slots__ = ('origin', 'direction', 'time')

    def __init__(self, origin: Point3, direction: Vec3, time: float = 0.0):
        """Create a ray with given origin and direction.

        Args:
            origin: The starting point of the ray
            direction: The direction vector (need not be normalized)
            time: Exposure time of the ray, used for motion blur (default 0)
        """
        self.origin = origin
        self.direction = direction
        self.time = time

    def at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t."""
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction}, time={self.time})"
