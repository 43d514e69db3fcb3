"""
Ready-made demo scenes.

Each builder returns a flat HittableList; wrap it with `build_bvh` before
rendering anything larger than a handful of objects.
"""

from __future__ import annotations
from typing import Callable, Dict, Optional

import numpy as np

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, MovingSphere, Translate, HittableList
from .materials import Lambertian, Metal, Dielectric
from .volumes import ConstantMedium


def three_spheres() -> HittableList:
    """Ground plus a glass, a hollow glass and a brushed metal sphere."""
    world = HittableList()

    ground = Lambertian(Color(0.8, 0.8, 0.0))
    glass = Dielectric(1.5)
    brushed = Metal(Color(0.8, 0.6, 0.2), 1.0)

    world.add(Sphere(Point3(0.0, -100.5, -1.0), 100.0, ground))
    world.add(Sphere(Point3(0.0, 0.0, -1.0), 0.5, glass))
    # A negative radius flips the normals, leaving a hollow bubble
    world.add(Sphere(Point3(-1.0, 0.0, -1.0), 0.5, glass))
    world.add(Sphere(Point3(-1.0, 0.0, -1.0), -0.45, glass))
    world.add(Sphere(Point3(1.0, 0.0, -1.0), 0.5, brushed))

    return world


def random_scene(seed: Optional[int] = None) -> HittableList:
    """A large field of small random spheres around three feature spheres.

    Diffuse spheres bounce upward during the shutter interval [0, 1] to
    show off motion blur.

    Args:
        seed: Seed for the scene layout (None for a different layout each call)
    """
    rng = np.random.default_rng(seed)
    world = HittableList()

    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    clearing = Point3(4, 0.2, 0)
    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if (center - clearing).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                albedo = Color.from_array(rng.random(3) * rng.random(3))
                center1 = center + Vec3(0, rng.uniform(0, 0.5), 0)
                world.add(MovingSphere(center, center1, 0.0, 1.0, 0.2, Lambertian(albedo)))
            elif choose_mat < 0.95:
                albedo = Color.from_array(rng.uniform(0.5, 1.0, 3))
                world.add(Sphere(center, 0.2, Metal(albedo, rng.uniform(0, 0.5))))
            else:
                world.add(Sphere(center, 0.2, Dielectric(1.5)))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


def foggy_spheres() -> HittableList:
    """Volumes: a smoke-filled glass ball next to a translated mirror ball."""
    world = HittableList()

    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.48, 0.83, 0.53))))

    glass = Dielectric(1.5)
    world.add(Sphere(Point3(0, 1, 0), 1.0, glass))
    world.add(ConstantMedium(Sphere(Point3(0, 1, 0), 0.98), 2.0, Color(0.2, 0.4, 0.9)))

    # Modelled at the origin and moved into place
    mirror = Sphere(Point3(0, 0, 0), 1.0, Metal(Color(0.8, 0.8, 0.9), 0.05))
    world.add(Translate(mirror, Vec3(2.5, 1, -1)))

    world.add(ConstantMedium(Sphere(Point3(-2.5, 1, -1), 1.0), 0.5, Color(0.9, 0.9, 0.9)))

    return world


def default_camera(scene: str, aspect_ratio: float) -> Camera:
    """Camera framing the named demo scene."""
    if scene == 'three':
        return Camera(
            look_from=Point3(-2, 2, 1),
            look_at=Point3(0, 0, -1),
            vfov=40,
            aspect_ratio=aspect_ratio
        )
    if scene == 'random':
        return Camera(
            look_from=Point3(13, 2, 3),
            look_at=Point3(0, 0, 0),
            vfov=20,
            aspect_ratio=aspect_ratio,
            aperture=0.1,
            focus_dist=10.0,
            shutter_open=0.0,
            shutter_close=1.0
        )
    if scene == 'fog':
        return Camera(
            look_from=Point3(0, 2, 9),
            look_at=Point3(0, 1, 0),
            vfov=35,
            aspect_ratio=aspect_ratio
        )
    raise ValueError(f"Unknown scene: {scene}")


SCENES: Dict[str, Callable[[], HittableList]] = {
    'three': three_spheres,
    'random': random_scene,
    'fog': foggy_spheres,
}
