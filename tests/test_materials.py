"""Unit tests for Lambertian, Metal and Dielectric scattering."""

import math

import pytest

from conftest import FixedRng, SequenceRng, assert_vec_close, make_record
from core.ray import Ray
from core.utils import reflect
from core.vector import Vector3
from materials.dielectric import Dielectric
from materials.lambertian import Lambertian
from materials.material import Material
from materials.metal import Metal

# Scripted draws that make random_unit_vector return (0, 0, -1)
DOWN_Z_DRAWS = [0.5, 0.5, 0.0]


def test_base_material_is_abstract(downward_ray, up_record, rng):
    with pytest.raises(NotImplementedError):
        Material().scatter(downward_ray, up_record, rng)


class TestLambertian:
    """Tests for diffuse scattering."""

    def test_attenuation_is_albedo_and_origin_is_hit_point(self, rng):
        albedo = Vector3(0.2, 0.4, 0.6)
        material = Lambertian(albedo)
        point = Vector3(1.0, 2.0, 3.0)
        rec = make_record(point, Vector3(0.0, 1.0, 0.0))
        ray = Ray(Vector3(1.0, 5.0, 3.0), Vector3(0.0, -1.0, 0.0))

        for _ in range(100):
            scattered, attenuation = material.scatter(ray, rec, rng)
            assert attenuation == albedo
            assert scattered.origin == point

    def test_scatters_into_normal_hemisphere(self, rng, downward_ray, up_record):
        material = Lambertian(Vector3(0.5, 0.5, 0.5))
        for _ in range(200):
            scattered, _ = material.scatter(downward_ray, up_record, rng)
            assert scattered.direction.dot(up_record.normal) >= 0.0

    def test_degenerate_direction_falls_back_to_normal(self, downward_ray):
        material = Lambertian(Vector3(0.5, 0.5, 0.5))
        normal = Vector3(0.0, 0.0, 1.0)
        rec = make_record(Vector3(0.0, 0.0, 0.0), normal)

        scattered, _ = material.scatter(downward_ray, rec, SequenceRng(DOWN_Z_DRAWS))

        assert scattered.direction == normal


class TestMetal:
    """Tests for metallic reflection."""

    def test_zero_fuzz_is_mirror_reflection(self, rng):
        material = Metal(Vector3(0.9, 0.8, 0.7), 0.0)
        normal = Vector3(0.0, 1.0, 0.0)
        rec = make_record(Vector3(0.0, 0.0, 0.0), normal)
        incoming = Ray(Vector3(-2.0, 3.0, 1.0), Vector3(2.0, -3.0, -1.0))

        scattered, attenuation = material.scatter(incoming, rec, rng)

        expected = reflect(incoming.direction, normal).normalize()
        assert_vec_close(scattered.direction.normalize(), expected)
        assert math.isclose(scattered.direction.normalize().dot(normal), expected.dot(normal))
        assert attenuation == Vector3(0.9, 0.8, 0.7)
        assert scattered.origin == rec.p

    def test_fuzz_is_clamped_to_one(self):
        assert Metal(Vector3(1.0, 1.0, 1.0), 3.0).fuzz == 1

    def test_negative_fuzz_rejected(self):
        with pytest.raises(ValueError):
            Metal(Vector3(1.0, 1.0, 1.0), -0.1)

    def test_absorbs_when_fuzz_pushes_below_surface(self):
        material = Metal(Vector3(1.0, 1.0, 1.0), 1.0)
        normal = Vector3(0.0, 0.0, 1.0)
        rec = make_record(Vector3(0.0, 0.0, 0.0), normal)
        # Grazing ray: the mirror direction barely leaves the surface
        incoming = Ray(Vector3(-1.0, 0.0, 0.01), Vector3(1.0, 0.0, -0.01))

        assert material.scatter(incoming, rec, SequenceRng(DOWN_Z_DRAWS)) is None

    def test_fuzzy_reflection_stays_above_surface(self, rng, downward_ray, up_record):
        material = Metal(Vector3(1.0, 1.0, 1.0), 0.5)
        for _ in range(100):
            result = material.scatter(downward_ray, up_record, rng)
            if result is not None:
                scattered, _ = result
                assert scattered.direction.dot(up_record.normal) > 0.0


class TestDielectric:
    """Tests for refraction, total internal reflection and Schlick reflection."""

    @pytest.mark.parametrize("direction", [
        Vector3(0.0, -1.0, 0.0),
        Vector3(0.6, -0.8, 0.0),
        Vector3(-1.0, -2.0, 0.5),
    ])
    def test_index_one_passes_straight_through(self, direction):
        material = Dielectric(1.0)
        rec = make_record(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0))
        incoming = Ray(Vector3(0.0, 1.0, 0.0), direction)

        scattered, attenuation = material.scatter(incoming, rec, FixedRng(0.999))

        assert_vec_close(scattered.direction, direction.normalize())
        assert attenuation == Vector3(1.0, 1.0, 1.0)
        assert scattered.origin == rec.p

    def test_total_internal_reflection(self):
        material = Dielectric(1.5)
        normal = Vector3(0.0, -1.0, 0.0)
        # Leaving the glass at a steep angle from the inside
        rec = make_record(Vector3(0.0, 0.0, 0.0), normal, front_face=False)
        direction = Vector3(math.sin(1.2), math.cos(1.2), 0.0)
        incoming = Ray(Vector3(0.0, -1.0, 0.0), direction)

        scattered, attenuation = material.scatter(incoming, rec, FixedRng(0.999))

        assert_vec_close(scattered.direction, reflect(direction.normalize(), normal))
        assert attenuation == Vector3(1.0, 1.0, 1.0)

    def test_schlick_reflection_when_draw_is_low(self, downward_ray, up_record):
        material = Dielectric(1.5)
        scattered, _ = material.scatter(downward_ray, up_record, FixedRng(0.0))
        assert_vec_close(scattered.direction, Vector3(0.0, 1.0, 0.0))

    def test_refraction_when_draw_is_high(self, downward_ray, up_record):
        material = Dielectric(1.5)
        scattered, _ = material.scatter(downward_ray, up_record, FixedRng(0.5))
        assert_vec_close(scattered.direction, Vector3(0.0, -1.0, 0.0))

    def test_entering_glass_bends_toward_normal(self):
        material = Dielectric(1.5)
        rec = make_record(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0))
        incoming = Ray(Vector3(-1.0, 1.0, 0.0), Vector3(math.sin(0.6), -math.cos(0.6), 0.0))

        scattered, _ = material.scatter(incoming, rec, FixedRng(0.999))

        assert math.isclose(scattered.direction.x, math.sin(0.6) / 1.5, rel_tol=1e-9)
        assert scattered.direction.y < 0.0

    def test_rejects_non_positive_index(self):
        with pytest.raises(ValueError):
            Dielectric(0.0)
