# renderer/raytracer.py
import logging
import math
import random
import time
from concurrent.futures import ProcessPoolExecutor
from functools import partial
import numpy as np
from core.vector import Vector3
from core.ray import Ray

logger = logging.getLogger(__name__)

# Lower bound of accepted hits; keeps scattered rays from re-hitting their own surface
T_MIN = 0.001
INFINITY = math.inf
SAMPLES_PER_PIXEL = 100
MAX_BOUNCES = 50

BLACK = Vector3(0.0, 0.0, 0.0)
WHITE = Vector3(1.0, 1.0, 1.0)
SKY_BLUE = Vector3(0.5, 0.7, 1.0)


def sky_color(ray: Ray) -> Vector3:
    """
    Background: a vertical blend from white at the horizon to sky blue overhead.
    """
    unit_direction = ray.direction.normalize()
    a = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - a) + SKY_BLUE * a


def ray_color(ray: Ray, depth: int, world, rng) -> Vector3:
    """
    Returns the linear color carried back along the ray, following at most
    depth bounces. An exhausted bounce budget contributes no light.
    """
    if depth <= 0:
        return BLACK

    rec = world.hit(ray, T_MIN, INFINITY)
    if rec is None:
        return sky_color(ray)

    scattered = rec.material.scatter(ray, rec, rng)
    if scattered is None:
        return BLACK

    scattered_ray, attenuation = scattered
    return attenuation * ray_color(scattered_ray, depth - 1, world, rng)


def render_row(camera, world, row: int, seed: int,
               samples_per_pixel: int = SAMPLES_PER_PIXEL,
               max_depth: int = MAX_BOUNCES) -> np.ndarray:
    """
    Renders one image row and returns its averaged linear colors as a
    (width, 3) array. Each row owns its random generator.
    """
    rng = random.Random(seed)
    scale = 1.0 / samples_per_pixel
    colors = np.zeros((camera.image_width, 3), dtype=np.float64)
    for i in range(camera.image_width):
        r = g = b = 0.0
        for _ in range(samples_per_pixel):
            color = ray_color(camera.get_ray(i, row, rng), max_depth, world, rng)
            r += color.x
            g += color.y
            b += color.z
        colors[i] = (r * scale, g * scale, b * scale)
    return colors


class Renderer:
    """
    Monte Carlo path tracer. Accumulates samples_per_pixel samples for every
    pixel and returns the averaged linear image.

    Random numbers come from one generator per row, seeded from a single
    SeedSequence, so a given seed always produces the same image whatever
    the number of workers.
    """
    def __init__(self, samples_per_pixel: int = SAMPLES_PER_PIXEL,
                 max_depth: int = MAX_BOUNCES, seed=None, workers: int = 1):
        if samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {samples_per_pixel}")
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        if workers <= 0:
            raise ValueError(f"workers must be positive, got {workers}")
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth
        self.workers = workers
        # Only the entropy is kept; spawning children mutates a SeedSequence
        self.entropy = np.random.SeedSequence(seed).entropy

    def row_seeds(self, height: int) -> list:
        seed_sequence = np.random.SeedSequence(self.entropy)
        return [int(child.generate_state(1)[0]) for child in seed_sequence.spawn(height)]

    def render(self, camera, world) -> np.ndarray:
        """
        Renders the world through the camera. Returns a (height, width, 3)
        float array of linear colors, rows top to bottom.
        """
        width, height = camera.image_width, camera.image_height
        image = np.zeros((height, width, 3), dtype=np.float64)
        seeds = self.row_seeds(height)

        logger.info("Rendering %dx%d, %d samples per pixel, %d bounces, %d worker(s)",
                    width, height, self.samples_per_pixel, self.max_depth, self.workers)
        logger.debug("Seed entropy: %s", self.entropy)
        start = time.perf_counter()

        trace_row = partial(render_row, camera, world,
                            samples_per_pixel=self.samples_per_pixel,
                            max_depth=self.max_depth)
        if self.workers == 1:
            for j, seed in enumerate(seeds):
                logger.info("%d lines remaining", height - j)
                image[j] = trace_row(j, seed)
        else:
            with ProcessPoolExecutor(max_workers=self.workers) as executor:
                # Rows arrive in order; progress is reported as each one is collected
                for j, colors in enumerate(executor.map(trace_row, range(height), seeds)):
                    logger.info("%d lines remaining", height - j)
                    image[j] = colors

        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return image
