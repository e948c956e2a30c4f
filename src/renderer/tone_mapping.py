# renderer/tone_mapping.py
import math
import numpy as np
from numba import njit

# Upper clamp before scaling, so a full-intensity channel maps to 255 rather than 256
MAX_INTENSITY = 0.999


@njit
def linear_to_gamma(linear_component):
    """
    Gamma 2 correction. Non-positive (and NaN) values map to 0.
    """
    if linear_component > 0.0:
        return math.sqrt(linear_component)
    return 0.0


@njit
def to_byte(linear_component):
    value = linear_to_gamma(linear_component)
    value = min(max(value, 0.0), MAX_INTENSITY)
    return int(256.0 * value)


@njit
def quantize_image(image):
    """
    Convert a (height, width, 3) linear image into display-ready 8-bit values.
    """
    height, width, channels = image.shape
    output = np.empty((height, width, channels), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            for c in range(channels):
                output[y, x, c] = to_byte(image[y, x, c])
    return output
