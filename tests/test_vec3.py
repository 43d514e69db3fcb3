"""Tests for Vec3 class."""

import pytest
import math
import pickle
import numpy as np

from pathforge.vec3 import Vec3, Point3, Color


class TestVec3Creation:
    """Test Vec3 construction."""

    def test_default_constructor(self):
        v = Vec3()
        assert v.x == 0.0
        assert v.y == 0.0
        assert v.z == 0.0

    def test_value_constructor(self):
        v = Vec3(1.0, 2.0, 3.0)
        assert (v.x, v.y, v.z) == (1.0, 2.0, 3.0)

    def test_from_array(self):
        v = Vec3.from_array(np.array([1.0, 2.0, 3.0]))
        assert v.to_tuple() == (1.0, 2.0, 3.0)

    def test_color_aliases(self):
        c = Color(0.5, 0.6, 0.7)
        assert c.r == 0.5
        assert c.g == 0.6
        assert c.b == 0.7

    def test_pickle_round_trip(self):
        v = Vec3(1.5, -2.0, 3.25)
        assert pickle.loads(pickle.dumps(v)) == v


class TestVec3Arithmetic:
    """Test Vec3 arithmetic operations."""

    def test_negation(self):
        assert -Vec3(1, 2, 3) == Vec3(-1, -2, -3)

    def test_addition(self):
        assert Vec3(1, 2, 3) + Vec3(4, 5, 6) == Vec3(5, 7, 9)

    def test_addition_scalar(self):
        assert Vec3(1, 2, 3) + 10 == Vec3(11, 12, 13)

    def test_subtraction(self):
        assert Vec3(5, 7, 9) - Vec3(4, 5, 6) == Vec3(1, 2, 3)

    def test_scalar_multiplication_both_sides(self):
        v = Vec3(1, 2, 3)
        assert v * 2 == Vec3(2, 4, 6)
        assert 2 * v == Vec3(2, 4, 6)

    def test_componentwise_multiplication(self):
        assert Vec3(1, 2, 3) * Vec3(2, 0.5, -1) == Vec3(2, 1, -3)

    def test_division(self):
        assert Vec3(2, 4, 6) / 2 == Vec3(1, 2, 3)

    def test_operations_do_not_mutate(self):
        v = Vec3(1, 2, 3)
        _ = v + Vec3(1, 1, 1)
        _ = v * 5
        assert v == Vec3(1, 2, 3)


class TestVec3Operations:
    """Test geometric operations."""

    def test_length(self):
        assert Vec3(3, 4, 0).length() == 5.0

    def test_length_squared(self):
        assert Vec3(1, 2, 2).length_squared() == 9.0

    def test_normalize(self):
        n = Vec3(3, 4, 0).normalize()
        assert abs(n.length() - 1.0) < 1e-12
        assert n == Vec3(0.6, 0.8, 0)

    def test_normalize_zero_vector(self):
        assert Vec3(0, 0, 0).normalize() == Vec3(0, 0, 0)

    def test_dot_product(self):
        assert Vec3(1, 2, 3).dot(Vec3(4, -5, 6)) == 12.0

    def test_cross_product(self):
        assert Vec3(1, 0, 0).cross(Vec3(0, 1, 0)) == Vec3(0, 0, 1)

    def test_reflect(self):
        reflected = Vec3(1, -1, 0).reflect(Vec3(0, 1, 0))
        assert reflected == Vec3(1, 1, 0)

    def test_refract_straight_through(self):
        incoming = Vec3(0, -1, 0)
        refracted = incoming.refract(Vec3(0, 1, 0), 1.0 / 1.5)
        assert refracted == Vec3(0, -1, 0)

    def test_refract_bends_toward_normal(self):
        incoming = Vec3(1, -1, 0).normalize()
        refracted = incoming.refract(Vec3(0, 1, 0), 1.0 / 1.5)
        # Entering a denser medium: smaller angle to the normal
        assert abs(refracted.x) < abs(incoming.x)
        assert refracted.y < 0

    def test_near_zero(self):
        assert Vec3(1e-9, -1e-9, 0).near_zero()
        assert not Vec3(1e-3, 0, 0).near_zero()

    def test_clamp(self):
        assert Vec3(-1, 0.5, 2).clamp() == Vec3(0, 0.5, 1)

    def test_minimum_maximum(self):
        a = Vec3(1, 5, -2)
        b = Vec3(3, 2, -4)
        assert Vec3.minimum(a, b) == Vec3(1, 2, -4)
        assert Vec3.maximum(a, b) == Vec3(3, 5, -2)

    def test_to_array_is_copy(self):
        v = Vec3(1, 2, 3)
        arr = v.to_array()
        arr[0] = 100
        assert v.x == 1


class TestVec3Random:
    """Test random vector generation."""

    def test_random_range(self):
        for _ in range(50):
            v = Vec3.random(-2, 3)
            assert all(-2 <= c < 3 for c in v)

    def test_random_in_unit_sphere(self):
        for _ in range(50):
            assert Vec3.random_in_unit_sphere().length_squared() < 1

    def test_random_unit_vector(self):
        for _ in range(50):
            assert abs(Vec3.random_unit_vector().length() - 1.0) < 1e-9

    def test_random_in_unit_disk(self):
        for _ in range(50):
            p = Vec3.random_in_unit_disk()
            assert p.z == 0
            assert p.length_squared() < 1


class TestVec3Comparison:
    """Test equality and indexing."""

    def test_equality(self):
        assert Vec3(1, 2, 3) == Vec3(1, 2, 3)

    def test_inequality(self):
        assert Vec3(1, 2, 3) != Vec3(1, 2, 4)

    def test_approximate_equality(self):
        assert Vec3(1, 2, 3) == Vec3(1 + 1e-12, 2, 3)

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Vec3(1, 2, 3))
        with pytest.raises(TypeError):
            {Vec3(1, 2, 3), Vec3(1 + 1e-12, 2, 3)}

    def test_getitem(self):
        v = Vec3(7, 8, 9)
        assert (v[0], v[1], v[2]) == (7, 8, 9)

    def test_aliases_are_vec3(self):
        assert Point3 is Vec3
        assert Color is Vec3
