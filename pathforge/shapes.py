"""
Geometric shapes for the path tracer.

Each shape implements the Hittable protocol: a `hit` method returning the
nearest intersection inside an open parametric range, and a `bounding_box`
method used while building the BVH.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray

if TYPE_CHECKING:
    from .materials import Material


@dataclass(frozen=True)
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: Unit surface normal, always pointing against the ray
        t: The ray parameter at intersection
        front_face: True if ray hit from outside the object
        material: The (shared) material at the hit point
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool
    material: Optional[Material] = None

    @classmethod
    def from_outward_normal(
        cls,
        ray: Ray,
        point: Point3,
        outward_normal: Vec3,
        t: float,
        material: Optional[Material] = None
    ) -> HitRecord:
        """Build a record, orienting the normal against the incoming ray.

        Args:
            ray: The incoming ray
            point: Intersection point
            outward_normal: Unit geometric normal pointing out of the surface
            t: Ray parameter of the hit
            material: Material of the struck surface
        """
        front_face = ray.direction.dot(outward_normal) < 0
        normal = outward_normal if front_face else -outward_normal
        return cls(point=point, normal=normal, t=t, front_face=front_face, material=material)


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Lower bound of the open range of accepted t values
            t_max: Upper bound of the open range of accepted t values

        Returns:
            HitRecord for the nearest intersection, None otherwise
        """

    @abstractmethod
    def bounding_box(self, time0: float, time1: float) -> Optional[AABB]:
        """Get a box enclosing this object over the time range [time0, time1].

        Returns:
            AABB if the object is bounded, None otherwise
        """


class AABB:
    """Axis-Aligned Bounding Box for acceleration structures."""

    __slots__ = ('minimum', 'maximum')

    def __init__(self, minimum: Point3, maximum: Point3):
        """Create an AABB from corner points.

        Args:
            minimum: Corner with smallest x, y, z values
            maximum: Corner with largest x, y, z values
        """
        self.minimum = minimum
        self.maximum = maximum

    def hit(self, ray: Ray, t_min: float, t_max: float) -> bool:
        """Test if ray overlaps this box inside (t_min, t_max) using the slab method.

        A zero direction component gives an infinite reciprocal, so the slab
        for that axis is unbounded (or empty when the origin lies outside it).
        The NaN produced by 0 * inf when the origin sits exactly on a slab
        plane is discarded by fmax/fmin.
        """
        origin = ray.origin.to_array()
        with np.errstate(divide='ignore', invalid='ignore'):
            inv_d = 1.0 / ray.direction.to_array()
            t0 = (self.minimum.to_array() - origin) * inv_d
            t1 = (self.maximum.to_array() - origin) * inv_d

        negative = inv_d < 0
        near = np.where(negative, t1, t0)
        far = np.where(negative, t0, t1)

        start = np.fmax(t_min, np.fmax.reduce(near))
        end = np.fmin(t_max, np.fmin.reduce(far))
        # Closed interval, so zero-thickness boxes still register crossings
        return bool(end >= start)

    @staticmethod
    def surrounding_box(box0: AABB, box1: AABB) -> AABB:
        """Return the AABB that contains both input boxes."""
        return AABB(
            Vec3.minimum(box0.minimum, box1.minimum),
            Vec3.maximum(box0.maximum, box1.maximum)
        )

    def merge(self, other: AABB) -> AABB:
        return AABB.surrounding_box(self, other)

    def translate(self, offset: Vec3) -> AABB:
        return AABB(self.minimum + offset, self.maximum + offset)

    def longest_axis(self) -> int:
        """Index of the axis along which the box is widest."""
        extent = (self.maximum - self.minimum).to_array()
        return int(np.argmax(extent))

    def centroid(self) -> Point3:
        return (self.minimum + self.maximum) * 0.5

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return self.minimum == other.minimum and self.maximum == other.maximum

    def __repr__(self) -> str:
        return f"AABB(min={self.minimum}, max={self.maximum})"


def _hit_sphere(
    center: Point3,
    radius: float,
    material: Optional[Material],
    ray: Ray,
    t_min: float,
    t_max: float
) -> Optional[HitRecord]:
    """Ray-sphere intersection using the half-b quadratic.

    The equation (P-C)·(P-C) = r² where P = ray.at(t)
    expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0.
    """
    oc = ray.origin - center
    a = ray.direction.length_squared()
    half_b = oc.dot(ray.direction)
    c = oc.length_squared() - radius * radius

    discriminant = half_b * half_b - a * c
    if discriminant < 0:
        return None

    sqrtd = math.sqrt(discriminant)

    # Nearest root in the acceptable range
    root = (-half_b - sqrtd) / a
    if root <= t_min or root >= t_max:
        root = (-half_b + sqrtd) / a
        if root <= t_min or root >= t_max:
            return None

    point = ray.at(root)
    outward_normal = (point - center) / radius
    return HitRecord.from_outward_normal(ray, point, outward_normal, root, material)


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (negative flips normals inward,
                which is how hollow glass bubbles are modelled)
            material: Material for shading, possibly shared with other shapes
        """
        self.center = center
        self.radius = radius
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return _hit_sphere(self.center, self.radius, self.material, ray, t_min, t_max)

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> Optional[AABB]:
        r_vec = Vec3(abs(self.radius), abs(self.radius), abs(self.radius))
        return AABB(self.center - r_vec, self.center + r_vec)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class MovingSphere(Hittable):
    """A sphere that moves linearly between two positions over time.

    Used for motion blur effects.
    """

    def __init__(
        self,
        center0: Point3,
        center1: Point3,
        time0: float,
        time1: float,
        radius: float,
        material: Optional[Material] = None
    ):
        """Create a moving sphere.

        Args:
            center0: Center position at time0
            center1: Center position at time1
            time0: Time of the first keyframe
            time1: Time of the second keyframe
            radius: Radius of the sphere
            material: Material for shading
        """
        self.center0 = center0
        self.center1 = center1
        self.time0 = time0
        self.time1 = time1
        self.radius = radius
        self.material = material

    def center(self, time: float) -> Point3:
        """Get the center position at a given time (linear extrapolation outside the keys)."""
        if self.time1 == self.time0:
            return self.center0
        t = (time - self.time0) / (self.time1 - self.time0)
        return self.center0 + (self.center1 - self.center0) * t

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return _hit_sphere(self.center(ray.time), self.radius, self.material, ray, t_min, t_max)

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        """Return an AABB containing the sphere over [time0, time1]."""
        r_vec = Vec3(abs(self.radius), abs(self.radius), abs(self.radius))
        c0 = self.center(time0)
        c1 = self.center(time1)
        box0 = AABB(c0 - r_vec, c0 + r_vec)
        box1 = AABB(c1 - r_vec, c1 + r_vec)
        return AABB.surrounding_box(box0, box1)

    def __repr__(self) -> str:
        return f"MovingSphere(center0={self.center0}, center1={self.center1}, radius={self.radius})"


class Translate(Hittable):
    """Wraps another hittable, displacing it by a fixed offset."""

    def __init__(self, inner: Hittable, offset: Vec3):
        self.inner = inner
        self.offset = offset

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        moved = Ray(ray.origin - self.offset, ray.direction, ray.time)
        hit_record = self.inner.hit(moved, t_min, t_max)
        if hit_record is None:
            return None
        # Translation leaves directions, and therefore the normal, untouched
        return replace(hit_record, point=hit_record.point + self.offset)

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        box = self.inner.bounding_box(time0, time1)
        if box is None:
            return None
        return box.translate(self.offset)

    def __repr__(self) -> str:
        return f"Translate({self.inner!r}, offset={self.offset})"


class HittableList(Hittable):
    """A collection of hittable objects, searched linearly."""

    def __init__(self, objects: Optional[Iterable[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find the closest intersection among all objects."""
        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for obj in self.objects:
            hit_record = obj.hit(ray, t_min, closest_t)
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        """Return the AABB containing all objects, or None if any is unbounded."""
        output_box: Optional[AABB] = None

        for obj in self.objects:
            box = obj.bounding_box(time0, time1)
            if box is None:
                return None
            output_box = box if output_box is None else AABB.surrounding_box(output_box, box)

        return output_box

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)
