"""
Image output: gamma correction, 8-bit quantisation and file writing.
"""

from __future__ import annotations
from pathlib import Path
from typing import TextIO, Union

import numpy as np
from PIL import Image as PILImage


def to_ldr(image: np.ndarray, gamma: float = 2.0) -> np.ndarray:
    """Convert averaged linear colors to 8-bit values.

    Each channel is gamma corrected (square root for the default gamma of 2),
    clamped to [0, 0.999] and scaled by 256 so that 1.0 maps to 255.

    Args:
        image: Float array of shape (height, width, 3)
        gamma: Display gamma

    Returns:
        uint8 array of the same shape
    """
    corrected = np.power(np.clip(image, 0.0, None), 1.0 / gamma)
    return (256 * np.clip(corrected, 0.0, 0.999)).astype(np.uint8)


def write_ppm(ldr: np.ndarray, stream: TextIO) -> None:
    """Write an 8-bit image as a plain-text (P3) PPM, top row first."""
    height, width = ldr.shape[:2]
    stream.write(f"P3\n{width} {height}\n255\n")
    for row in ldr:
        for r, g, b in row:
            stream.write(f"{r} {g} {b}\n")


def save_image(image: np.ndarray, filename: Union[str, Path], gamma: float = 2.0) -> None:
    """Save an image to disk; the extension selects the format.

    Float images are converted with `to_ldr` first. `.ppm` files are written
    as plain-text P3; anything else goes through Pillow.
    """
    if image.dtype != np.uint8:
        image = to_ldr(image, gamma)

    path = Path(filename)
    if path.suffix.lower() == '.ppm':
        with path.open('w') as f:
            write_ppm(image, f)
    else:
        PILImage.fromarray(image).save(path)
