"""Tests for material system."""

import pytest
import numpy as np
from pathforge.vec3 import Vec3, Point3, Color
from pathforge.ray import Ray
from pathforge.shapes import HitRecord
from pathforge.materials import (
    DefaultMaterial, Lambertian, Metal, Dielectric, reflectance
)


def make_hit(normal=Vec3(0, 1, 0), front_face=True, point=Point3(0, 0, 0)):
    return HitRecord(point=point, normal=normal, t=1.0, front_face=front_face)


class TestDefaultMaterial:
    """Test the absorbing placeholder material."""

    def test_never_scatters(self):
        mat = DefaultMaterial()
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        assert mat.scatter(ray_in, make_hit()) is None

    def test_instances_compare_equal(self):
        assert DefaultMaterial() == DefaultMaterial()
        assert DefaultMaterial() != Lambertian(Color(0.5, 0.5, 0.5))


class TestLambertian:
    """Test Lambertian diffuse material."""

    def test_scatter_always_succeeds(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        rng = np.random.default_rng(0)

        for _ in range(100):
            assert mat.scatter(ray_in, make_hit(Vec3(0, 0, 1)), rng) is not None

    def test_scattered_in_hemisphere(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, -1, 0))
        normal = Vec3(0, 1, 0)
        rng = np.random.default_rng(1)

        for _ in range(100):
            result = mat.scatter(ray_in, make_hit(normal), rng)
            # normal + unit vector never points below the surface
            assert result.scattered_ray.direction.dot(normal) >= 0
            assert result.scattered_ray.direction.length() <= 2.0 + 1e-12

    def test_scattered_ray_starts_at_hit_point(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, -1, 0), time=0.7)
        hit = make_hit(point=Point3(1, 2, 3))

        result = mat.scatter(ray_in, hit, np.random.default_rng(2))
        assert result.scattered_ray.origin == Point3(1, 2, 3)
        assert result.scattered_ray.time == 0.7

    def test_attenuation_matches_albedo(self):
        albedo = Color(0.8, 0.2, 0.3)
        mat = Lambertian(albedo)
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        result = mat.scatter(ray_in, make_hit(), np.random.default_rng(3))
        assert result.attenuation == albedo


class TestMetal:
    """Test Metal material."""

    def test_perfect_reflection(self):
        mat = Metal(Color(1, 1, 1), fuzz=0.0)
        ray_in = Ray(Point3(0, 0, 0), Vec3(1, -1, 0))

        result = mat.scatter(ray_in, make_hit(point=Point3(1, 0, 0)))
        assert result is not None

        # Incoming (1, -1, 0) reflects to (1, 1, 0)
        expected = Vec3(1, 1, 0).normalize()
        assert (result.scattered_ray.direction - expected).length() < 1e-12

    def test_mirror_is_deterministic(self):
        mat = Metal(Color(0.9, 0.9, 0.9))
        ray_in = Ray(Point3(0, 0, 0), Vec3(0.2, -1, 0.4))
        a = mat.scatter(ray_in, make_hit(), np.random.default_rng(0))
        b = mat.scatter(ray_in, make_hit(), np.random.default_rng(99))
        assert a.scattered_ray.direction == b.scattered_ray.direction

    @pytest.mark.parametrize("fuzz,expected", [(-1.0, 0.0), (0.3, 0.3), (5.0, 1.0)])
    def test_fuzz_clamped(self, fuzz, expected):
        assert Metal(Color(1, 1, 1), fuzz).fuzz == expected

    def test_rough_metal_adds_fuzz(self):
        mat = Metal(Color(1, 1, 1), fuzz=0.5)
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, -1, 0))
        rng = np.random.default_rng(4)

        directions = []
        for _ in range(100):
            result = mat.scatter(ray_in, make_hit(), rng)
            if result:
                directions.append(result.scattered_ray.direction)

        assert len(directions) > 1
        first = directions[0]
        assert any((d - first).length() > 0.01 for d in directions[1:])

    def test_no_scatter_below_surface(self):
        """Rough metal at a grazing angle sometimes scatters into the surface."""
        mat = Metal(Color(1, 1, 1), fuzz=1.0)
        ray_in = Ray(Point3(0, 0, 0), Vec3(1, -0.1, 0))
        normal = Vec3(0, 1, 0)
        rng = np.random.default_rng(5)

        successes = 0
        for _ in range(100):
            result = mat.scatter(ray_in, make_hit(normal), rng)
            if result:
                successes += 1
                assert result.scattered_ray.direction.dot(normal) > 0

        assert 0 < successes < 100

    def test_attenuation_matches_albedo(self):
        albedo = Color(0.7, 0.6, 0.5)
        result = Metal(albedo).scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit())
        assert result.attenuation == albedo


class TestDielectric:
    """Test Dielectric (glass) material."""

    def test_always_scatters_with_white_attenuation(self):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 0, 0), Vec3(0.3, -1, 0))
        rng = np.random.default_rng(6)

        for _ in range(100):
            result = mat.scatter(ray_in, make_hit(), rng)
            assert result is not None
            assert result.attenuation == Color(1, 1, 1)

    def test_matched_index_passes_straight_through(self):
        mat = Dielectric(1.0)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        result = mat.scatter(ray_in, make_hit(), np.random.default_rng(7))

        assert result.scattered_ray.direction == Vec3(0, -1, 0)
        assert result.attenuation == Color(1, 1, 1)

    def test_refraction_bends_toward_normal(self):
        """When entering a denser medium, the ray bends toward the normal."""
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(1, -1, 0))
        rng = np.random.default_rng(8)

        refractions = []
        for _ in range(100):
            result = mat.scatter(ray_in, make_hit(point=Point3(1, 0, 0)), rng)
            direction = result.scattered_ray.direction
            if direction.y < 0:
                refractions.append(direction)

        assert refractions
        for direction in refractions:
            assert direction.x < Vec3(1, -1, 0).normalize().x

    def test_total_internal_reflection(self):
        mat = Dielectric(1.5)
        # Leaving the glass at 45 degrees exceeds the critical angle
        ray_in = Ray(Point3(0, 0, 0), Vec3(1, 1, 0))
        hit = make_hit(normal=Vec3(0, -1, 0), front_face=False)
        rng = np.random.default_rng(9)

        for _ in range(20):
            direction = mat.scatter(ray_in, hit, rng).scattered_ray.direction
            assert (direction - Vec3(1, -1, 0).normalize()).length() < 1e-12

    def test_normal_incidence_mostly_refracts(self):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        rng = np.random.default_rng(10)

        reflected = sum(
            mat.scatter(ray_in, make_hit(), rng).scattered_ray.direction.y > 0
            for _ in range(2000)
        )
        # Schlick gives 4% reflectance head-on for glass
        assert 20 < reflected < 160


class TestReflectance:
    """Test Schlick's approximation."""

    def test_normal_incidence(self):
        assert abs(reflectance(1.0, 1.5) - 0.04) < 1e-12

    def test_grazing_incidence(self):
        assert abs(reflectance(0.0, 1.5) - 1.0) < 1e-12

    def test_matched_index(self):
        assert reflectance(1.0, 1.0) == 0.0

    def test_increases_toward_grazing(self):
        values = [reflectance(c, 1.5) for c in (1.0, 0.8, 0.5, 0.2, 0.0)]
        assert values == sorted(values)
