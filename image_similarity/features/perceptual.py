"""Perceptual signature computations."""

from __future__ import annotations

import imagehash
import numpy as np
from PIL import Image

from ..extract.normalize import GRID_SIZE, resample
from .luma import DEFAULT_LUMA, LumaStrategy, to_luma
from .transform import forward_dct

HASH_SIZE = 8
SIGNATURE_BITS = HASH_SIZE * HASH_SIZE


def extract_signature(coeffs: np.ndarray, hash_size: int = HASH_SIZE) -> imagehash.ImageHash:
    """Threshold the low-frequency block of *coeffs* against its own mean."""
    values = np.asarray(coeffs, dtype=np.float64)
    if values.ndim != 2 or values.shape[0] < hash_size or values.shape[1] < hash_size:
        raise ValueError(
            f"Coefficient matrix of shape {values.shape} has no {hash_size}x{hash_size} block"
        )
    block = values[:hash_size, :hash_size]
    avg = block.mean()
    return imagehash.ImageHash(block >= avg)


def compute_signature(
    img: Image.Image,
    luma: str | LumaStrategy = DEFAULT_LUMA,
    grid_size: int = GRID_SIZE,
) -> imagehash.ImageHash:
    """Return the 64-bit perceptual signature of a decoded *img*."""
    if not isinstance(img, Image.Image):
        raise TypeError("compute_signature expects a PIL.Image.Image instance")

    grid = resample(img, grid_size, grid_size)
    coeffs = forward_dct(to_luma(grid, luma))
    return extract_signature(coeffs)


def signature_bits(signature: imagehash.ImageHash) -> int:
    """Return how many bits *signature* carries."""
    return int(np.asarray(signature.hash).size)


def signature_to_hex(signature: imagehash.ImageHash) -> str:
    return str(signature)


def signature_from_hex(value: str) -> imagehash.ImageHash:
    """Parse a persisted hexadecimal signature."""
    digits = normalise_hex(value)
    try:
        int(digits, 16)
        return imagehash.hex_to_hash(digits)
    except ValueError as exc:
        raise ValueError(f"Signature {value!r} is not a hexadecimal string") from exc


def normalise_hex(value: str) -> str:
    if not isinstance(value, str):
        raise TypeError("Hash values must be provided as strings")
    stripped = value.strip().lower()
    return stripped[2:] if stripped.startswith("0x") else stripped
