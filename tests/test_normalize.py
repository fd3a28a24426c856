from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from image_similarity.extract.normalize import GRID_SIZE, resample, to_8bit


@pytest.mark.parametrize("size", [(300, 500), (1, 1), (32, 32), (1000, 7)])
def test_resample_stretches_to_fixed_grid(size: tuple[int, int]) -> None:
    grid = resample(Image.new("RGB", size, (10, 200, 30)))

    assert grid.size == (GRID_SIZE, GRID_SIZE)
    assert grid.mode == "RGB"


@pytest.mark.parametrize("mode", ["L", "RGBA", "P", "CMYK"])
def test_resample_converts_any_mode_to_rgb(mode: str) -> None:
    grid = resample(Image.new(mode, (64, 48)))

    assert grid.mode == "RGB"


def test_resample_keeps_flat_colour() -> None:
    grid = resample(Image.new("RGB", (123, 45), (90, 120, 150)))

    pixel = grid.getpixel((16, 16))
    assert all(abs(got - want) <= 1 for got, want in zip(pixel, (90, 120, 150)))


def test_resample_custom_target() -> None:
    assert resample(Image.new("RGB", (10, 10)), 8, 4).size == (8, 4)


def test_resample_rejects_empty_target() -> None:
    with pytest.raises(ValueError):
        resample(Image.new("RGB", (10, 10)), 0, 32)


@pytest.mark.parametrize("mode", ["I;16", "I", "F"])
def test_resample_scales_wide_gray_to_8bit(mode: str) -> None:
    wide = Image.new(mode, (40, 20), 200 * 257)

    grid = resample(wide)

    for low, high in grid.getextrema():
        assert 199 <= low <= high <= 201


def test_to_8bit_keeps_high_byte() -> None:
    wide = Image.fromarray(np.array([[0, 257, 65535, 40000]], dtype=np.uint16))

    narrow = to_8bit(wide)

    assert narrow.mode == "L"
    assert list(narrow.getdata()) == [0, 1, 255, 156]
