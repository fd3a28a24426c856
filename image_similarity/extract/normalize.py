"""Resample decoded images onto the fixed grid the hash is computed over."""

from __future__ import annotations

import numpy as np
from PIL import Image

GRID_SIZE = 32

# Single-channel modes whose samples span 16 bits (PNG stores 16-bit gray this way).
_WIDE_MODES = frozenset({"I;16", "I;16B", "I;16L", "I;16N", "I", "F"})


def to_8bit(img: Image.Image) -> Image.Image:
    """Return a wide single-channel *img* as mode ``L``, keeping the high byte."""
    if img.mode not in _WIDE_MODES:
        return img
    samples = np.clip(np.asarray(img, dtype=np.float64), 0, 65535).astype(np.uint32)
    return Image.fromarray((samples >> 8).astype(np.uint8))


def to_rgb(img: Image.Image) -> Image.Image:
    """Return *img* in RGB mode; alpha is discarded, palettes are expanded."""
    if img.mode == "RGB":
        return img
    if img.mode == "P" and "transparency" in img.info:
        img = img.convert("RGBA")
    return to_8bit(img).convert("RGB")


def resample(
    img: Image.Image, width: int = GRID_SIZE, height: int = GRID_SIZE
) -> Image.Image:
    """Return *img* stretched to exactly ``width`` x ``height`` RGB pixels.

    Both axes are scaled independently so images of any aspect ratio land on
    the same grid. A Lanczos kernel keeps down-sampling aliasing out of the
    low-frequency coefficients.
    """
    if width <= 0 or height <= 0:
        raise ValueError("Target grid dimensions must be positive integers")
    if img.width <= 0 or img.height <= 0:
        raise ValueError("Cannot resample an image without pixels")

    return to_rgb(img).resize((width, height), Image.Resampling.LANCZOS)
