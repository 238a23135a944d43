"""
Color output: gamma encoding, 8-bit quantization and image writers.

Rendered images hold linear RGB. Every writer here applies the same
transform per channel: gamma 2 (square root), clamp to [0, 0.999],
scale by 256 and truncate.
"""

from __future__ import annotations
from pathlib import Path
from typing import TextIO, Union
import math

import numpy as np

from .vec3 import Color
from .interval import Interval

INTENSITY = Interval(0.0, 0.999)


def linear_to_gamma(linear_component: float) -> float:
    """Gamma 2 transform; non-positive input maps to 0."""
    if linear_component > 0:
        return math.sqrt(linear_component)
    return 0.0


def quantize(linear_component: float) -> int:
    """Map one linear channel value to a byte in [0, 255]."""
    return int(256 * INTENSITY.clamp(linear_to_gamma(linear_component)))


def write_color(out: TextIO, pixel_color: Color) -> None:
    """Write one pixel as an "R G B" line."""
    r, g, b = (quantize(c) for c in pixel_color)
    out.write(f"{r} {g} {b}\n")


def write_ppm(out: TextIO, image: np.ndarray) -> None:
    """Write a linear RGB image as a plain-text PPM (P3) stream.

    Args:
        out: Text stream to write to
        image: Array of shape (height, width, 3), rows top to bottom
    """
    height, width = image.shape[:2]
    out.write(f"P3\n{width} {height}\n255\n")
    for r, g, b in to_ldr(image).reshape(-1, 3):
        out.write(f"{r} {g} {b}\n")


def to_ldr(image: np.ndarray) -> np.ndarray:
    """Convert a linear image to gamma-encoded 8-bit.

    Args:
        image: Linear image array (float)

    Returns:
        LDR image as uint8 array
    """
    corrected = np.sqrt(np.clip(image, 0, None))
    return (np.clip(corrected, INTENSITY.min, INTENSITY.max) * 256).astype(np.uint8)


def save_image(image: np.ndarray, filename: Union[str, Path]) -> None:
    """Save image to file.

    ``.ppm`` files are written as plain-text P3; any other extension goes
    through Pillow, which picks the format from the extension.

    Args:
        image: Linear image array of shape (height, width, 3)
        filename: Output filename (extension determines format)
    """
    path = Path(filename)
    if path.suffix.lower() == '.ppm':
        with path.open('w', encoding='ascii') as f:
            write_ppm(f, image)
        return

    from PIL import Image as PILImage

    PILImage.fromarray(to_ldr(image)).save(path)
