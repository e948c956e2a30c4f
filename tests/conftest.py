"""Pytest configuration for renderer tests.

Every random draw in the renderer goes through an explicitly passed
generator, so tests either use a seeded ``random.Random`` or one of the
scripted generators below.
"""

import itertools
import random

import pytest

from core.vector import Vector3
from core.ray import Ray
from geometry.hittable import HitRecord


class FixedRng:
    """Generator that always returns the same unit-interval value."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.value


class SequenceRng:
    """Generator that cycles through a fixed list of unit-interval values."""

    def __init__(self, values):
        self._values = itertools.cycle(values)

    def random(self) -> float:
        return next(self._values)

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.random()


def assert_vec_close(actual: Vector3, expected: Vector3, tol: float = 1e-9):
    assert abs(actual.x - expected.x) < tol, (actual, expected)
    assert abs(actual.y - expected.y) < tol, (actual, expected)
    assert abs(actual.z - expected.z) < tol, (actual, expected)


def make_record(point: Vector3, normal: Vector3, front_face: bool = True, material=None) -> HitRecord:
    return HitRecord(p=point, normal=normal, t=1.0, front_face=front_face, material=material)


@pytest.fixture
def rng():
    """Seeded generator shared by a single test."""
    return random.Random(1234)


@pytest.fixture
def up_record():
    """Front-face hit at the origin on a surface facing +y."""
    return make_record(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0))


@pytest.fixture
def downward_ray():
    """Ray travelling straight down onto the origin."""
    return Ray(Vector3(0.0, 5.0, 0.0), Vector3(0.0, -1.0, 0.0))
