# renderer/image_io.py
import logging
from pathlib import Path
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

PPM_MAX_VALUE = 255


def write_ppm(pixels: np.ndarray, stream) -> None:
    """
    Write 8-bit (height, width, 3) pixels to a text stream as a plain P3 image:
    a three line header followed by one "r g b" line per pixel, row-major,
    top to bottom.
    """
    height, width, _ = pixels.shape
    stream.write("P3\n")
    stream.write(f"{width} {height}\n")
    stream.write(f"{PPM_MAX_VALUE}\n")
    for row in pixels.tolist():
        for r, g, b in row:
            stream.write(f"{r} {g} {b}\n")


def save_png(pixels: np.ndarray, filepath) -> None:
    Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(filepath)


def save_image(pixels: np.ndarray, filepath) -> None:
    """
    Save pixels to disk, choosing PNG or plain PPM from the file suffix.
    """
    path = Path(filepath)
    if path.suffix.lower() == ".png":
        save_png(pixels, path)
    else:
        with open(path, "w") as f:
            write_ppm(pixels, f)
    logger.info("Saved %s", path)
