# camera/camera.py
import math
from core.vector import Vector3
from core.ray import Ray
from core.utils import random_in_unit_disk

class Camera:
    """
    Look-at camera with a thin lens for depth of field.

    Everything the render loop needs is derived once here: the image size,
    the world-space location of pixel (0, 0), the per-pixel step vectors and
    the defocus disk basis. The camera is not modified afterwards.
    """
    def __init__(self, aspect_ratio: float, image_width: int,
                 position: Vector3, look_at: Vector3, up: Vector3,
                 vfov: float = 90.0, focus_dist: float = 10.0,
                 defocus_angle: float = 0.0):
        if aspect_ratio <= 0:
            raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")
        if image_width <= 0:
            raise ValueError(f"Image width must be positive, got {image_width}")
        if focus_dist <= 0:
            raise ValueError(f"Focus distance must be positive, got {focus_dist}")
        if not 0 < vfov < 180:
            raise ValueError(f"Vertical field of view must be between 0 and 180 degrees, got {vfov}")
        if (position - look_at).near_zero():
            raise ValueError("Camera position and look-at target must differ")

        self.aspect_ratio = aspect_ratio
        self.image_width = int(image_width)
        self.image_height = max(1, int(self.image_width / aspect_ratio))
        self.position = position
        self.vfov = vfov
        self.focus_dist = focus_dist
        self.defocus_angle = defocus_angle

        # Orthonormal camera basis
        self.back = (position - look_at).normalize()
        right = up.cross(self.back)
        if right.near_zero():
            raise ValueError("Up vector must not be parallel to the viewing direction")
        self.right = right.normalize()
        self.up = self.back.cross(self.right)

        # Viewport dimensions at the focus plane
        theta = math.radians(vfov)
        viewport_height = 2.0 * math.tan(theta / 2) * focus_dist
        viewport_width = viewport_height * (self.image_width / self.image_height)

        # Viewport edges; rows run top to bottom
        viewport_u = self.right * viewport_width
        viewport_v = -self.up * viewport_height

        self.pixel_delta_u = viewport_u / self.image_width
        self.pixel_delta_v = viewport_v / self.image_height

        viewport_upper_left = (position -
                               self.back * focus_dist -
                               viewport_u * 0.5 -
                               viewport_v * 0.5)
        self.pixel00_loc = viewport_upper_left + (self.pixel_delta_u + self.pixel_delta_v) * 0.5

        # Lens disk for depth of field
        defocus_radius = focus_dist * math.tan(math.radians(defocus_angle / 2))
        self.defocus_disk_u = self.right * defocus_radius
        self.defocus_disk_v = self.up * defocus_radius

    def pixel_center(self, i: float, j: float) -> Vector3:
        """World-space point at pixel coordinates (i, j); integers are pixel centers."""
        return self.pixel00_loc + self.pixel_delta_u * i + self.pixel_delta_v * j

    def defocus_disk_sample(self, rng) -> Vector3:
        """Returns a random point on the camera lens."""
        p = random_in_unit_disk(rng)
        return self.position + self.defocus_disk_u * p.x + self.defocus_disk_v * p.y

    def get_ray(self, i: int, j: int, rng) -> Ray:
        """
        Generates a ray toward a random point inside pixel (i, j), starting
        from a random point on the lens when depth of field is enabled.
        """
        offset_x = rng.random() - 0.5
        offset_y = rng.random() - 0.5
        pixel_sample = self.pixel_center(i + offset_x, j + offset_y)

        if self.defocus_angle <= 0:
            ray_origin = self.position
        else:
            ray_origin = self.defocus_disk_sample(rng)

        return Ray(ray_origin, pixel_sample - ray_origin)

    def __repr__(self) -> str:
        return (f"Camera({self.image_width}x{self.image_height}, position={self.position!r}, "
                f"vfov={self.vfov}, focus_dist={self.focus_dist}, defocus_angle={self.defocus_angle})")
