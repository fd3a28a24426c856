"""Two-dimensional DCT-II used to move luminance into the frequency domain.

The transform is left unnormalised::

    C[u][v] = sum_i sum_j M[i][j] * cos(pi/N * (i + 0.5) * u) * cos(pi/M * (j + 0.5) * v)

Signature thresholding only compares coefficients against their own mean, so
the missing scale factors do not change any bit.
"""

from __future__ import annotations

import math
from functools import lru_cache

import numpy as np


@lru_cache(maxsize=8)
def dct_basis(size: int) -> np.ndarray:
    """Return the read-only ``size`` x ``size`` cosine basis ``B[u, i]``."""
    if size <= 0:
        raise ValueError("DCT basis size must be positive")
    u = np.arange(size, dtype=np.float64)[:, None]
    i = np.arange(size, dtype=np.float64)[None, :]
    basis = np.cos(math.pi / size * (i + 0.5) * u)
    basis.setflags(write=False)
    return basis


def _as_matrix(matrix: np.ndarray) -> np.ndarray:
    values = np.asarray(matrix, dtype=np.float64)
    if values.ndim != 2 or 0 in values.shape:
        raise ValueError("DCT input must be a non-empty 2D matrix")
    return values


def forward_dct(matrix: np.ndarray) -> np.ndarray:
    """Separable DCT-II: transform the columns, then the rows."""
    values = _as_matrix(matrix)
    rows, cols = values.shape
    return dct_basis(rows) @ values @ dct_basis(cols).T


def forward_dct_direct(matrix: np.ndarray) -> np.ndarray:
    """Reference DCT-II evaluated term by term, O(N^2 * M^2)."""
    values = _as_matrix(matrix)
    rows, cols = values.shape
    grid = values.tolist()
    result = np.zeros((rows, cols), dtype=np.float64)
    for u in range(rows):
        for v in range(cols):
            total = 0.0
            for i in range(rows):
                cos_u = math.cos(math.pi / rows * (i + 0.5) * u)
                for j in range(cols):
                    total += (
                        grid[i][j]
                        * cos_u
                        * math.cos(math.pi / cols * (j + 0.5) * v)
                    )
            result[u, v] = total
    return result
