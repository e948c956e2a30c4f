# main.py
import argparse
import logging
import random
import sys
from core.vector import Vector3
from core.utils import random_vector
from camera.camera import Camera
from geometry.world import HittableList
from geometry.sphere import Sphere
from materials.lambertian import Lambertian
from materials.metal import Metal
from materials.dielectric import Dielectric
from renderer.raytracer import MAX_BOUNCES, SAMPLES_PER_PIXEL, Renderer
from renderer.tone_mapping import quantize_image
from renderer.image_io import save_image, write_ppm

logger = logging.getLogger(__name__)

QUALITY_LEVELS = {
    "preview": {"samples": 8, "bounces": 8},
    "balanced": {"samples": 32, "bounces": 20},
    "final": {"samples": SAMPLES_PER_PIXEL, "bounces": MAX_BOUNCES},
}

CAMERA_POSITION = Vector3(13, 2, 3)
CAMERA_LOOK_AT = Vector3(0, 0, 0)
CAMERA_UP = Vector3(0, 1, 0)

GRID_EXTENT = 11
SMALL_RADIUS = 0.2
# Small spheres closer than this to the metal feature sphere are skipped
CLEARANCE = 0.9


def parse_aspect_ratio(value: str) -> float:
    """Accepts either a plain number or a W:H ratio such as 16:9."""
    try:
        if ":" in value:
            width, height = value.split(":", 1)
            ratio = float(width) / float(height)
        else:
            ratio = float(value)
    except (ValueError, ZeroDivisionError):
        raise argparse.ArgumentTypeError(f"invalid aspect ratio: {value!r}")
    if ratio <= 0:
        raise argparse.ArgumentTypeError(f"aspect ratio must be positive: {value!r}")
    return ratio


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render a field of random spheres with a Monte Carlo path tracer."
    )
    parser.add_argument('--width', type=int, default=1200, help='Image width in pixels (default: 1200)')
    parser.add_argument('--aspect-ratio', type=parse_aspect_ratio, default=16 / 9,
                        help='Aspect ratio as W:H or a number (default: 16:9)')
    parser.add_argument('--quality', choices=sorted(QUALITY_LEVELS), default='final',
                        help='Samples/bounces preset (default: final)')
    parser.add_argument('--samples', type=int, default=None, help='Samples per pixel, overrides --quality')
    parser.add_argument('--max-depth', type=int, default=None, help='Maximum ray bounces, overrides --quality')
    parser.add_argument('--vfov', type=float, default=20.0, help='Vertical field of view in degrees (default: 20)')
    parser.add_argument('--focus-dist', type=float, default=10.0, help='Distance to the plane in focus (default: 10)')
    parser.add_argument('--defocus-angle', type=float, default=0.6,
                        help='Lens cone angle in degrees, 0 disables depth of field (default: 0.6)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the scene and the renderer')
    parser.add_argument('--workers', type=int, default=1, help='Processes rendering rows in parallel (default: 1)')
    parser.add_argument('-o', '--output', default='-',
                        help="Output file; '-' writes a P3 image to stdout, *.png writes PNG (default: -)")
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level (default: INFO)')
    args = parser.parse_args(argv)

    quality = QUALITY_LEVELS[args.quality]
    if args.samples is None:
        args.samples = quality["samples"]
    if args.max_depth is None:
        args.max_depth = quality["bounces"]
    return args


def create_world(rng: random.Random) -> HittableList:
    """
    Ground sphere, a grid of small random spheres and three large feature spheres.
    """
    world = HittableList()

    world.add(Sphere(Vector3(0, -1000, 0), 1000, Lambertian(Vector3(0.5, 0.5, 0.5))))

    counts = {"diffuse": 0, "metal": 0, "glass": 0}
    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            choose_mat = rng.random()
            center = Vector3(a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random())

            if (center - Vector3(4, SMALL_RADIUS, 0)).length() <= CLEARANCE:
                continue

            if choose_mat < 0.8:
                albedo = random_vector(rng) * random_vector(rng)
                material = Lambertian(albedo)
                counts["diffuse"] += 1
            elif choose_mat < 0.95:
                albedo = random_vector(rng, 0.5, 1.0)
                material = Metal(albedo, rng.uniform(0, 0.5))
                counts["metal"] += 1
            else:
                material = Dielectric(1.5)
                counts["glass"] += 1
            world.add(Sphere(center, SMALL_RADIUS, material))

    world.add(Sphere(Vector3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Vector3(-4, 1, 0), 1.0, Lambertian(Vector3(0.4, 0.2, 0.1))))
    world.add(Sphere(Vector3(4, 1, 0), 1.0, Metal(Vector3(0.7, 0.6, 0.5), 0.0)))

    logger.info("Created world with %d spheres", len(world))
    logger.debug("Small spheres: %d diffuse, %d metal, %d glass",
                 counts["diffuse"], counts["metal"], counts["glass"])
    return world


def main(argv=None) -> int:
    args = parse_args(argv)
    # stdout may carry the image, so diagnostics go to stderr
    logging.basicConfig(level=args.log_level, stream=sys.stderr,
                        format='%(asctime)s %(levelname)s: %(message)s')

    try:
        camera = Camera(
            aspect_ratio=args.aspect_ratio,
            image_width=args.width,
            position=CAMERA_POSITION,
            look_at=CAMERA_LOOK_AT,
            up=CAMERA_UP,
            vfov=args.vfov,
            focus_dist=args.focus_dist,
            defocus_angle=args.defocus_angle,
        )
        renderer = Renderer(
            samples_per_pixel=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            workers=args.workers,
        )
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    world = create_world(random.Random(args.seed))
    image = renderer.render(camera, world)
    pixels = quantize_image(image)

    if args.output == '-':
        write_ppm(pixels, sys.stdout)
        sys.stdout.flush()
    else:
        save_image(pixels, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
