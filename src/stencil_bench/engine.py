"""Stencil application over the grid interior.

Traversal policy
----------------
* ``tile_size < n - 2r``: the interior is covered by non-overlapping square
  tiles (clipped at the far boundary). The parallel decomposition unit is a
  *tile row*, i.e. a band of ``tile_size`` grid rows.
* otherwise the interior is swept directly and the unit is a single row.

Both policies perform the same per-cell sequence of operations, so they give
bit-identical output. Two backends are available: the Numba kernels in
:mod:`stencil_bench.numba` and a vectorised NumPy shifted-slice path.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from stencil_bench.grid import GridBuffers
from stencil_bench.numba import apply_compact, apply_star
from stencil_bench.weights import support


class StencilEngine:
    def __init__(
        self,
        weights: np.ndarray,
        radius: int,
        shape: str,
        n: int,
        tile_size: int,
        use_numba: bool = True,
    ):
        self.weights = weights
        self.radius = int(radius)
        self.shape = shape
        self.n = int(n)
        self.use_numba = bool(use_numba)

        self.extent = self.n - 2 * self.radius
        self.tiled = int(tile_size) < self.extent
        # An untiled sweep is a single tile covering the whole interior.
        self.tile = int(tile_size) if self.tiled else self.n

        self._offsets = support(self.radius, self.shape)
        self._kernel = apply_star if shape == "star" else apply_compact

    # ------------------------------------------------------------------
    # Decomposition
    # ------------------------------------------------------------------

    @property
    def unit_count(self) -> int:
        """Number of decomposition units (tile rows or interior rows)."""
        if self.tiled:
            return -(-self.extent // self.tile)
        return self.extent

    def unit_rows(self, unit_start: int, unit_stop: int) -> Tuple[int, int]:
        """Grid row band ``[row_start, row_stop)`` covered by a unit range."""
        r = self.radius
        step = self.tile if self.tiled else 1
        row_start = min(r + unit_start * step, self.n - r)
        row_stop = min(r + unit_stop * step, self.n - r)
        return row_start, row_stop

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def apply(self, grid: GridBuffers, row_start: int, row_stop: int) -> None:
        """Accumulate one stencil pass into ``grid.out`` for a row band."""
        if row_start >= row_stop:
            return
        if self.use_numba:
            self._kernel(grid.inp, grid.out, self.weights, self.radius, row_start, row_stop, self.tile)
        else:
            self._apply_numpy(grid.inp, grid.out, row_start, row_stop)

    def apply_all(self, grid: GridBuffers) -> None:
        row_start, row_stop = self.unit_rows(0, self.unit_count)
        self.apply(grid, row_start, row_stop)

    def _apply_numpy(self, inp: np.ndarray, out: np.ndarray, row_start: int, row_stop: int) -> None:
        r = self.radius
        j_hi = self.n - r
        for ib in range(row_start, row_stop, self.tile):
            i_end = min(ib + self.tile, row_stop)
            for jb in range(r, j_hi, self.tile):
                j_end = min(jb + self.tile, j_hi)
                dst = out[ib:i_end, jb:j_end]
                for di, dj in self._offsets:
                    dst += self.weights[r + di, r + dj] * inp[ib + di:i_end + di, jb + dj:j_end + dj]
