"""
Image output for rendered pixel arrays.

Pixel arrays are float images of shape (height, width, 3), already
averaged and gamma corrected, with row 0 at the top.
"""

from __future__ import annotations
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image as PILImage


def to_rgb8(pixels: np.ndarray) -> np.ndarray:
    """Quantize to 8 bits per channel.

    Values are clamped to [0, 0.999] and scaled by 256, so 1.0 maps to 255.
    """
    return (256.0 * np.clip(pixels, 0.0, 0.999)).astype(np.uint8)


def write_ppm(pixels: np.ndarray, filename: Union[str, Path]) -> None:
    """Save pixels as an ASCII (P3) PPM file."""
    rgb = to_rgb8(pixels)
    height, width = rgb.shape[:2]

    lines = [f"P3\n{width} {height}\n255\n"]
    for row in rgb:
        for r, g, b in row:
            lines.append(f"{r} {g} {b}\n")

    Path(filename).write_text(''.join(lines))


def save_image(pixels: np.ndarray, filename: Union[str, Path]) -> None:
    """Save image to file.

    Args:
        pixels: Float image (height, width, 3)
        filename: Output filename (extension determines format)
    """
    if str(filename).lower().endswith('.ppm'):
        write_ppm(pixels, filename)
        return

    pil_image = PILImage.fromarray(to_rgb8(pixels))
    pil_image.save(filename)
