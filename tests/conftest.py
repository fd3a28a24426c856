from __future__ import annotations

import math
from pathlib import Path
from typing import Callable, Sequence

import numpy as np
import pytest
from PIL import Image

# (vertical frequency, horizontal frequency, amplitude)
Term = tuple[int, int, float]

PATTERN_A: Sequence[Term] = ((0, 1, 30), (1, 1, 25), (2, 3, 25), (3, 2, 20), (1, 4, 20))
PATTERN_B: Sequence[Term] = ((1, 0, 30), (2, 2, 25), (3, 1, 25), (1, 3, 20), (4, 4, 20))


def cosine_pattern(width: int, height: int, terms: Sequence[Term]) -> np.ndarray:
    """Return a float luminance field made of a few low-frequency cosines around 128."""
    y = (np.arange(height, dtype=np.float64)[:, None] + 0.5) / height
    x = (np.arange(width, dtype=np.float64)[None, :] + 0.5) / width
    field = np.full((height, width), 128.0)
    for u, v, amplitude in terms:
        field += amplitude * np.cos(math.pi * u * y) * np.cos(math.pi * v * x)
    return field


def pattern_image(width: int, height: int, terms: Sequence[Term]) -> Image.Image:
    field = cosine_pattern(width, height, terms)
    return Image.fromarray(np.clip(np.rint(field), 0, 255).astype(np.uint8))


def colour_pattern_image(width: int, height: int, terms: Sequence[Term]) -> Image.Image:
    """RGB image whose channels differ but whose luma follows the same pattern."""
    field = cosine_pattern(width, height, terms)
    channels = np.stack([field, 0.9 * field + 10.0, 255.0 - field], axis=-1)
    return Image.fromarray(np.clip(np.rint(channels), 0, 255).astype(np.uint8))


@pytest.fixture
def write_image(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, image: Image.Image, format: str | None = None, **params) -> Path:
        path = tmp_path / name
        image.save(path, format=format, **params)
        return path

    return _write


@pytest.fixture
def picture() -> Image.Image:
    return colour_pattern_image(256, 256, PATTERN_A)


@pytest.fixture
def other_picture() -> Image.Image:
    return colour_pattern_image(256, 256, PATTERN_B)


@pytest.fixture
def make_pattern() -> Callable[..., Image.Image]:
    patterns = {"a": PATTERN_A, "b": PATTERN_B}

    def _make(name: str, width: int = 256, height: int = 256, colour: bool = True) -> Image.Image:
        builder = colour_pattern_image if colour else pattern_image
        return builder(width, height, patterns[name])

    return _make
