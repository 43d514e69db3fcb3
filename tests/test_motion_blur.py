"""Tests for motion blur functionality."""

import pytest
import math
from pathforge.vec3 import Vec3, Point3, Color
from pathforge.ray import Ray
from pathforge.shapes import AABB, MovingSphere, HittableList
from pathforge.camera import Camera
from pathforge.bvh import build_bvh
from pathforge.materials import Lambertian


class TestMovingSphere:
    """Test MovingSphere class."""

    def test_creation(self):
        sphere = MovingSphere(
            center0=Point3(0, 0, 0),
            center1=Point3(1, 0, 0),
            time0=0.0,
            time1=1.0,
            radius=0.5
        )
        assert sphere.center0 == Point3(0, 0, 0)
        assert sphere.center1 == Point3(1, 0, 0)
        assert sphere.radius == 0.5

    def test_center_interpolation(self):
        sphere = MovingSphere(Point3(0, 0, 0), Point3(2, 0, 0), 0.0, 1.0, 0.5)

        assert sphere.center(0.0) == Point3(0, 0, 0)
        assert sphere.center(0.5) == Point3(1, 0, 0)
        assert sphere.center(1.0) == Point3(2, 0, 0)

    def test_center_with_offset_keyframes(self):
        sphere = MovingSphere(Point3(0, 0, 0), Point3(0, 4, 0), 1.0, 3.0, 0.5)
        assert sphere.center(2.0) == Point3(0, 2, 0)

    def test_equal_keyframe_times(self):
        sphere = MovingSphere(Point3(1, 2, 3), Point3(4, 5, 6), 0.5, 0.5, 0.5)
        assert sphere.center(0.5) == Point3(1, 2, 3)
        assert sphere.center(7.0) == Point3(1, 2, 3)

    def test_hit_depends_on_ray_time(self):
        sphere = MovingSphere(Point3(0, 0, 0), Point3(5, 0, 0), 0.0, 1.0, 1.0)

        early = Ray(Point3(0, 0, -5), Vec3(0, 0, 1), time=0.0)
        late = Ray(Point3(0, 0, -5), Vec3(0, 0, 1), time=1.0)

        hit = sphere.hit(early, 0.001, math.inf)
        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-9
        assert sphere.hit(late, 0.001, math.inf) is None

        moved = Ray(Point3(5, 0, -5), Vec3(0, 0, 1), time=1.0)
        assert sphere.hit(moved, 0.001, math.inf) is not None

    def test_bounding_box_covers_motion(self):
        sphere = MovingSphere(Point3(0, 0, 0), Point3(5, 0, 0), 0.0, 1.0, 1.0)
        box = sphere.bounding_box(0.0, 1.0)
        assert box == AABB(Point3(-1, -1, -1), Point3(6, 1, 1))

    def test_bounding_box_of_partial_interval(self):
        sphere = MovingSphere(Point3(0, 0, 0), Point3(4, 0, 0), 0.0, 1.0, 1.0)
        box = sphere.bounding_box(0.25, 0.5)
        assert box == AABB(Point3(0, -1, -1), Point3(3, 1, 1))

    def test_bvh_finds_moving_sphere_at_any_time(self):
        sphere = MovingSphere(Point3(0, 0, 0), Point3(5, 0, 0), 0.0, 1.0, 1.0)
        world = HittableList([sphere, MovingSphere(Point3(0, 5, 0), Point3(0, 5, 0), 0.0, 1.0, 1.0)])
        bvh = build_bvh(world, 0.0, 1.0)

        for time in (0.0, 0.25, 0.5, 0.75, 1.0):
            x = 5 * time
            ray = Ray(Point3(x, 0, -5), Vec3(0, 0, 1), time=time)
            hit = bvh.hit(ray, 0.001, math.inf)
            assert hit is not None
            assert abs(hit.t - 4.0) < 1e-9


class TestCameraShutter:
    """Test camera ray times."""

    def test_ray_times_inside_shutter(self):
        camera = Camera(
            look_from=Point3(0, 0, 0),
            look_at=Point3(0, 0, -1),
            shutter_open=0.2,
            shutter_close=0.6
        )

        times = [camera.get_ray(0.5, 0.5).time for _ in range(100)]
        assert all(0.2 <= t <= 0.6 for t in times)
        assert len(set(times)) > 1

    def test_instant_shutter(self):
        camera = Camera(Point3(0, 0, 0), Point3(0, 0, -1), shutter_open=0.3, shutter_close=0.3)
        assert camera.get_ray(0.5, 0.5).time == 0.3

    def test_shutter_must_not_close_before_opening(self):
        with pytest.raises(ValueError):
            Camera(Point3(0, 0, 0), Point3(0, 0, -1), shutter_open=1.0, shutter_close=0.5)

    def test_scattered_rays_keep_time(self):
        camera = Camera(Point3(0, 0, 0), Point3(0, 0, -1), shutter_open=0.0, shutter_close=1.0)
        ray = camera.get_ray(0.5, 0.5)
        sphere = MovingSphere(Point3(0, 0, -2), Point3(0, 0, -2), 0.0, 1.0, 0.5, Lambertian(Color(0.5, 0.5, 0.5)))

        hit = sphere.hit(ray, 0.001, math.inf)
        result = hit.material.scatter(ray, hit)
        assert result.scattered_ray.time == ray.time
