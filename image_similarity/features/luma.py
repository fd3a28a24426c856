"""Grayscale reduction of the normalized grid."""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np
from PIL import Image

LumaStrategy = Callable[[np.ndarray], np.ndarray]

DEFAULT_LUMA = "weighted"

_REC601_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def weighted_luma(rgb: np.ndarray) -> np.ndarray:
    """Return ``0.299*R + 0.587*G + 0.114*B`` for each pixel of *rgb*."""
    if rgb.ndim != 3 or rgb.shape[2] < 3:
        raise ValueError("weighted_luma expects an (H, W, 3) RGB array")
    return rgb[:, :, :3].astype(np.float64) @ _REC601_WEIGHTS


LUMA_STRATEGIES: Dict[str, LumaStrategy] = {
    "weighted": weighted_luma,
}


def register_luma_strategy(name: str, strategy: LumaStrategy) -> None:
    """Make *strategy* selectable under *name*."""
    if not name:
        raise ValueError("Luma strategy name must be non-empty")
    if not callable(strategy):
        raise TypeError("Luma strategy must be callable")
    LUMA_STRATEGIES[name] = strategy


def resolve_luma_strategy(strategy: str | LumaStrategy) -> LumaStrategy:
    if callable(strategy):
        return strategy
    try:
        return LUMA_STRATEGIES[strategy]
    except KeyError:
        known = ", ".join(sorted(LUMA_STRATEGIES))
        raise ValueError(f"Unknown luma strategy {strategy!r} (known: {known})") from None


def to_luma(grid: Image.Image, strategy: str | LumaStrategy = DEFAULT_LUMA) -> np.ndarray:
    """Return the float64 luminance matrix of an RGB *grid*, indexed ``[row, col]``."""
    if not isinstance(grid, Image.Image):
        raise TypeError("to_luma expects a PIL.Image.Image instance")
    rgb = grid if grid.mode == "RGB" else grid.convert("RGB")
    pixels = np.asarray(rgb, dtype=np.float64)
    luma = resolve_luma_strategy(strategy)(pixels)
    if luma.shape != (grid.height, grid.width):
        raise ValueError(
            f"Luma strategy returned shape {luma.shape}, expected {(grid.height, grid.width)}"
        )
    return luma
