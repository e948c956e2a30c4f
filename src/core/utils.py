# core/utils.py
import math
from core.vector import Vector3

# Rejection sampling bounds for random_unit_vector.
MIN_SAMPLE_LENGTH_SQUARED = 1e-160


def random_vector(rng, low: float = 0.0, high: float = 1.0) -> Vector3:
    """
    Returns a vector whose components are drawn independently from [low, high).
    """
    return Vector3(rng.uniform(low, high),
                   rng.uniform(low, high),
                   rng.uniform(low, high))


def random_unit_vector(rng) -> Vector3:
    """
    Returns a random unit vector (uniformly distributed over the sphere).
    Candidates that are too short to normalize safely are rejected.
    """
    while True:
        p = random_vector(rng, -1.0, 1.0)
        length_squared = p.length_squared()
        if MIN_SAMPLE_LENGTH_SQUARED < length_squared <= 1.0:
            return p / math.sqrt(length_squared)


def random_in_unit_disk(rng) -> Vector3:
    """
    Returns a random point (x, y, 0) inside the unit disk. Used for lens sampling.
    """
    while True:
        p = Vector3(rng.uniform(-1, 1), rng.uniform(-1, 1), 0.0)
        if p.length_squared() < 1.0:
            return p


def reflect(v: Vector3, n: Vector3) -> Vector3:
    """
    Reflects vector v about the unit normal n.
    """
    return v - n * 2 * v.dot(n)


def refract(uv: Vector3, n: Vector3, etai_over_etat: float) -> Vector3:
    """
    Refracts the unit direction uv through a surface with unit normal n
    (pointing against uv) using Snell's law.
    """
    cos_theta = min(-uv.dot(n), 1.0)
    r_out_perp = (uv + n * cos_theta) * etai_over_etat
    r_out_parallel = n * -math.sqrt(abs(1.0 - r_out_perp.length_squared()))
    return r_out_perp + r_out_parallel


def reflectance(cos_theta: float, ref_idx: float) -> float:
    """
    Schlick's approximation of the Fresnel reflectance.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * math.pow(1.0 - cos_theta, 5)
