from __future__ import annotations

import numpy as np
import pytest

from image_similarity.features.transform import dct_basis, forward_dct, forward_dct_direct


def test_separable_matches_direct_form() -> None:
    rng = np.random.default_rng(7)
    matrix = rng.uniform(0.0, 255.0, size=(32, 32))

    separable = forward_dct(matrix)
    direct = forward_dct_direct(matrix)

    scale = float(np.abs(direct).max())
    np.testing.assert_allclose(separable, direct, rtol=1e-9, atol=1e-9 * scale)


def test_non_square_matrix_uses_both_axis_lengths() -> None:
    rng = np.random.default_rng(3)
    matrix = rng.uniform(0.0, 255.0, size=(6, 9))

    separable = forward_dct(matrix)

    assert separable.shape == (6, 9)
    np.testing.assert_allclose(separable, forward_dct_direct(matrix), rtol=1e-9, atol=1e-6)


def test_dc_term_is_unscaled_sum() -> None:
    matrix = np.arange(32 * 32, dtype=np.float64).reshape(32, 32)

    coeffs = forward_dct(matrix)

    assert coeffs[0, 0] == pytest.approx(matrix.sum(), rel=1e-12)


def test_constant_matrix_has_only_dc_energy() -> None:
    coeffs = forward_dct(np.full((32, 32), 100.0))

    assert coeffs[0, 0] == pytest.approx(100.0 * 32 * 32)
    rest = coeffs.copy()
    rest[0, 0] = 0.0
    assert np.abs(rest).max() < 1e-8


def test_basis_is_cached_and_read_only() -> None:
    basis = dct_basis(32)

    assert basis is dct_basis(32)
    with pytest.raises(ValueError):
        basis[0, 0] = 2.0


@pytest.mark.parametrize("bad", [np.zeros(32), np.zeros((0, 4)), np.zeros((2, 2, 2))])
def test_rejects_non_matrix_input(bad: np.ndarray) -> None:
    with pytest.raises(ValueError):
        forward_dct(bad)
