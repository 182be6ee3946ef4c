"""Input/output grid buffers.

Each grid is one flat heap buffer of ``n*n`` values owned by
:class:`GridBuffers`; all access goes through the 2-D views ``inp`` and
``out`` (row ``i``, column ``j``). Row-band helpers take half-open
``[row_start, row_stop)`` ranges so parallel workers can own disjoint bands.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from stencil_bench.errors import AllocationError


class GridBuffers:
    def __init__(self, n: int, radius: int, dtype=np.float64):
        self.n = int(n)
        self.radius = int(radius)
        self.dtype = np.dtype(dtype)

        try:
            self._in_flat: Optional[np.ndarray] = np.empty(self.n * self.n, dtype=self.dtype)
            self._out_flat: Optional[np.ndarray] = np.zeros(self.n * self.n, dtype=self.dtype)
        except MemoryError as exc:
            self._in_flat = None
            self._out_flat = None
            raise AllocationError("could not allocate space for input or output array") from exc

        self.inp = self._in_flat.reshape(self.n, self.n)
        self.out = self._out_flat.reshape(self.n, self.n)

    @property
    def released(self) -> bool:
        return self._in_flat is None

    @property
    def interior_slice(self) -> slice:
        return slice(self.radius, self.n - self.radius)

    @property
    def active_points(self) -> int:
        m = self.n - 2 * self.radius
        return m * m

    # ------------------------------------------------------------------
    # Row-band operations
    # ------------------------------------------------------------------

    def initialize_rows(self, row_start: int, row_stop: int, coefx: float, coefy: float) -> None:
        """Seed ``inp`` with the linear ramp and zero the interior of ``out``."""
        i = np.arange(row_start, row_stop, dtype=self.dtype)[:, None]
        j = np.arange(self.n, dtype=self.dtype)[None, :]
        self.inp[row_start:row_stop, :] = self.dtype.type(coefx) * i + self.dtype.type(coefy) * j

        rows = self._interior_rows(row_start, row_stop)
        if rows is not None:
            self.out[rows, self.interior_slice] = 0

    def refresh_rows(self, row_start: int, row_stop: int, increment: float = 1.0) -> None:
        """Add a constant to every input cell of the band (full width)."""
        self.inp[row_start:row_stop, :] += self.dtype.type(increment)

    def interior_abs_sum(self, row_start: int, row_stop: int) -> float:
        """Partial L1 sum of ``out`` over the interior part of the band."""
        rows = self._interior_rows(row_start, row_stop)
        if rows is None:
            return 0.0
        return float(np.abs(self.out[rows, self.interior_slice]).sum(dtype=np.float64))

    def _interior_rows(self, row_start: int, row_stop: int) -> Optional[slice]:
        """Band clipped to interior rows, or None if they do not overlap."""
        lo = max(row_start, self.radius)
        hi = min(row_stop, self.n - self.radius)
        if lo >= hi:
            return None
        return slice(lo, hi)

    def release(self) -> None:
        self.inp = None
        self.out = None
        self._in_flat = None
        self._out_flat = None
