from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from image_similarity.features import luma as luma_module
from image_similarity.features.luma import register_luma_strategy, to_luma, weighted_luma


def test_weighted_luma_uses_rec601_weights() -> None:
    pixels = np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255], [10, 20, 30]]], dtype=np.uint8)

    values = weighted_luma(pixels)

    expected = [0.299 * 255, 0.587 * 255, 0.114 * 255, 0.299 * 10 + 0.587 * 20 + 0.114 * 30]
    np.testing.assert_allclose(values[0], expected)


def test_to_luma_returns_row_major_float_matrix() -> None:
    grid = Image.new("RGB", (32, 32), (0, 0, 0))
    grid.putpixel((5, 2), (255, 255, 255))

    values = to_luma(grid)

    assert values.shape == (32, 32)
    assert values.dtype == np.float64
    assert values[2, 5] == pytest.approx(255.0)
    assert values[5, 2] == 0.0


def test_to_luma_ignores_alpha() -> None:
    opaque = Image.new("RGBA", (4, 4), (40, 80, 120, 255))
    transparent = Image.new("RGBA", (4, 4), (40, 80, 120, 0))

    np.testing.assert_array_equal(to_luma(opaque), to_luma(transparent))


def test_unknown_strategy_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown luma strategy"):
        to_luma(Image.new("RGB", (2, 2)), "gamma")


def test_registered_strategy_is_selectable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(luma_module, "LUMA_STRATEGIES", dict(luma_module.LUMA_STRATEGIES))
    register_luma_strategy("green", lambda rgb: rgb[:, :, 1].astype(np.float64))

    values = to_luma(Image.new("RGB", (3, 3), (1, 2, 3)), "green")

    assert np.all(values == 2.0)


def test_strategy_with_wrong_shape_is_rejected() -> None:
    with pytest.raises(ValueError, match="shape"):
        to_luma(Image.new("RGB", (3, 3)), lambda rgb: rgb.reshape(-1))
