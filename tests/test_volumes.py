"""Tests for participating media."""

import math

import pytest

from pathforge.vec3 import Vec3, Point3, Color
from pathforge.ray import Ray
from pathforge.shapes import Sphere, AABB
from pathforge.materials import Isotropic, Lambertian
from pathforge.volumes import ConstantMedium, create_fog


class TestConstantMedium:
    """Test ConstantMedium class."""

    def setup_method(self):
        self.boundary = Sphere(Point3(0, 0, 0), 1.0)

    def test_rejects_non_positive_density(self):
        with pytest.raises(ValueError):
            ConstantMedium(self.boundary, 0.0, Color(1, 1, 1))
        with pytest.raises(ValueError):
            ConstantMedium(self.boundary, -1.0, Color(1, 1, 1))

    def test_dense_medium_scatters_at_entry(self):
        medium = ConstantMedium(self.boundary, 1e6, Color(1, 1, 1))
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        for _ in range(50):
            hit = medium.hit(ray, 0.001, math.inf)
            assert hit is not None
            assert 4.0 <= hit.t < 4.01

    def test_thin_medium_lets_rays_through(self):
        medium = ConstantMedium(self.boundary, 1e-6, Color(1, 1, 1))
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        hits = [medium.hit(ray, 0.001, math.inf) for _ in range(100)]
        assert all(hit is None for hit in hits)

    def test_scatter_probability_follows_density(self):
        # Two units of density 1 scatter with probability 1 - e^-2
        medium = ConstantMedium(self.boundary, 1.0, Color(1, 1, 1))
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        trials = 2000
        hits = sum(medium.hit(ray, 0.001, math.inf) is not None for _ in range(trials))
        assert abs(hits / trials - (1 - math.exp(-2))) < 0.05

    def test_hits_lie_inside_boundary(self):
        medium = ConstantMedium(self.boundary, 1.0, Color(1, 1, 1))
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        for _ in range(200):
            hit = medium.hit(ray, 0.001, math.inf)
            if hit is not None:
                assert 4.0 <= hit.t <= 6.0
                assert hit.point.length() <= 1.0 + 1e-9

    def test_miss_boundary(self):
        medium = ConstantMedium(self.boundary, 1e6, Color(1, 1, 1))
        ray = Ray(Point3(0, 5, -5), Vec3(0, 0, 1))
        assert medium.hit(ray, 0.001, math.inf) is None

    def test_ray_starting_inside(self):
        medium = ConstantMedium(self.boundary, 1e6, Color(1, 1, 1))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))

        hit = medium.hit(ray, 0.001, math.inf)
        assert hit is not None
        assert 0.001 <= hit.t < 0.01

    def test_range_ending_before_medium(self):
        medium = ConstantMedium(self.boundary, 1e6, Color(1, 1, 1))
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert medium.hit(ray, 0.001, 3.0) is None

    def test_unnormalized_direction(self):
        medium = ConstantMedium(self.boundary, 1e6, Color(1, 1, 1))
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 2))

        hit = medium.hit(ray, 0.001, math.inf)
        assert hit is not None
        assert 2.0 <= hit.t < 2.01

    def test_hit_uses_phase_material(self):
        albedo = Color(0.2, 0.4, 0.9)
        medium = ConstantMedium(self.boundary, 1e6, albedo)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        hit = medium.hit(ray, 0.001, math.inf)
        assert isinstance(hit.material, Isotropic)
        assert hit.material is medium.phase_material
        assert hit.material.albedo == albedo
        assert hit.front_face is True

    def test_custom_phase_material(self):
        phase = Lambertian(Color(0.5, 0.5, 0.5))
        medium = ConstantMedium(self.boundary, 1e6, Color(1, 1, 1), phase_material=phase)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert medium.hit(ray, 0.001, math.inf).material is phase

    def test_bounding_box_matches_boundary(self):
        medium = ConstantMedium(self.boundary, 0.5, Color(1, 1, 1))
        assert medium.bounding_box(0, 1) == AABB(Point3(-1, -1, -1), Point3(1, 1, 1))


class TestCreateFog:
    """Test the fog helper."""

    def test_defaults(self):
        fog = create_fog(Sphere(Point3(0, 0, 0), 2.0))
        assert isinstance(fog, ConstantMedium)
        assert fog.density == 0.1
        assert fog.phase_material.albedo == Color(1, 1, 1)

    def test_custom_color(self):
        fog = create_fog(Sphere(Point3(0, 0, 0), 2.0), density=0.5, color=Color(0.3, 0.3, 0.3))
        assert fog.density == 0.5
        assert fog.phase_material.albedo == Color(0.3, 0.3, 0.3)
