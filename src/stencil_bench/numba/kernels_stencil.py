"""Numba stencil kernels.

The kernels are stateless and operate on primitive NumPy arrays so they compile
in ``nopython`` mode. They are compiled with ``nogil=True``: the worker pool
calls them from plain Python threads and they must run concurrently.

Every kernel updates one half-open row band ``[row_start, row_stop)`` of the
interior and visits it in square tiles of edge ``tile`` (clipped at the band
and interior edges). Passing ``tile >= n`` degenerates to a plain row-major
sweep. Within a cell the terms are accumulated in
:func:`stencil_bench.weights.support` order, so tiling never changes a result.
"""

from __future__ import annotations

import numpy as np
from numba import njit


@njit(cache=True, nogil=True)
def apply_star(
    inp: np.ndarray,
    out: np.ndarray,
    w: np.ndarray,
    radius: int,
    row_start: int,
    row_stop: int,
    tile: int,
) -> None:
    """Star stencil as a center-column sum followed by a center-row sum."""
    n = inp.shape[0]
    r = radius
    j_hi = n - r
    for ib in range(row_start, row_stop, tile):
        i_end = min(ib + tile, row_stop)
        for jb in range(r, j_hi, tile):
            j_end = min(jb + tile, j_hi)
            for i in range(ib, i_end):
                for j in range(jb, j_end):
                    acc = out[i, j]
                    for di in range(-r, r + 1):
                        acc += w[r + di, r] * inp[i + di, j]
                    for dj in range(-r, 0):
                        acc += w[r, r + dj] * inp[i, j + dj]
                    for dj in range(1, r + 1):
                        acc += w[r, r + dj] * inp[i, j + dj]
                    out[i, j] = acc


@njit(cache=True, nogil=True)
def apply_compact(
    inp: np.ndarray,
    out: np.ndarray,
    w: np.ndarray,
    radius: int,
    row_start: int,
    row_stop: int,
    tile: int,
) -> None:
    """Compact stencil: full (2r+1)^2 double sum."""
    n = inp.shape[0]
    r = radius
    j_hi = n - r
    for ib in range(row_start, row_stop, tile):
        i_end = min(ib + tile, row_stop)
        for jb in range(r, j_hi, tile):
            j_end = min(jb + tile, j_hi)
            for i in range(ib, i_end):
                for j in range(jb, j_end):
                    acc = out[i, j]
                    for di in range(-r, r + 1):
                        for dj in range(-r, r + 1):
                            acc += w[r + di, r + dj] * inp[i + di, j + dj]
                    out[i, j] = acc
