"""Weight matrices of the discrete divergence stencils.

Both shapes are indexed ``w[di + r, dj + r]`` for offsets ``di, dj`` in
``[-r, r]``. Applied to a linear ramp ``a*i + b*j`` either stencil returns
``a + b`` at every interior point, which is what the L1-norm check relies on.

Star
----
Nonzero only on the center row and column::

    w[+k, 0] = w[0, +k] = +1 / (2 k r)
    w[-k, 0] = w[0, -k] = -1 / (2 k r)        k = 1..r

Compact
-------
Filled by concentric square rings at Chebyshev distance ``jj``. Ring edge
cells (excluding corners) get ``1 / (4 jj (2 jj - 1) r)``, the two corners on
the main diagonal get ``1 / (4 jj r)``. Sign follows the offset sign; the
anti-diagonal corners stay zero.
"""

from __future__ import annotations

from typing import List, Tuple

import numpy as np

from stencil_bench.errors import ConfigurationError


def _check(radius: int, shape: str) -> None:
    if int(radius) < 1:
        raise ConfigurationError(f"Stencil radius {radius} should be positive")
    if shape not in ("star", "compact"):
        raise ConfigurationError(f"Unknown stencil shape '{shape}'")


def build_weights(radius: int, shape: str = "star", dtype=np.float64) -> np.ndarray:
    """Return the read-only ``(2r+1, 2r+1)`` weight matrix."""
    _check(radius, shape)
    r = int(radius)
    w = np.zeros((2 * r + 1, 2 * r + 1), dtype=np.float64)
    c = r  # index of the zero offset

    if shape == "star":
        for k in range(1, r + 1):
            v = 1.0 / (2.0 * k * r)
            w[c + k, c] = w[c, c + k] = v
            w[c - k, c] = w[c, c - k] = -v
    else:
        for jj in range(1, r + 1):
            v = 1.0 / (4.0 * jj * (2.0 * jj - 1) * r)
            for ii in range(-jj + 1, jj):
                w[c + ii, c + jj] = v
                w[c + ii, c - jj] = -v
                w[c + jj, c + ii] = v
                w[c - jj, c + ii] = -v
            w[c + jj, c + jj] = 1.0 / (4.0 * jj * r)
            w[c - jj, c - jj] = -1.0 / (4.0 * jj * r)

    w = w.astype(dtype)
    w.setflags(write=False)
    return w


def support(radius: int, shape: str = "star") -> List[Tuple[int, int]]:
    """Offsets ``(di, dj)`` in the order every traversal path accumulates them.

    Star: the center column ``(di, 0)`` for di = -r..r, then the center row
    ``(0, dj)`` for dj = -r..-1, 1..r. Compact: row-major over the full square.
    """
    _check(radius, shape)
    r = int(radius)
    if shape == "star":
        offs = [(di, 0) for di in range(-r, r + 1)]
        offs += [(0, dj) for dj in range(-r, 0)]
        offs += [(0, dj) for dj in range(1, r + 1)]
        return offs
    return [(di, dj) for di in range(-r, r + 1) for dj in range(-r, r + 1)]


def stencil_size(radius: int, shape: str = "star") -> int:
    """Number of points in the stencil footprint."""
    _check(radius, shape)
    r = int(radius)
    if shape == "star":
        return 4 * r + 1
    return (2 * r + 1) ** 2


def flops_per_round(n: int, radius: int, shape: str = "star") -> float:
    """Floating-point operations of one full interior pass."""
    active = float(n - 2 * radius) ** 2
    return float(2 * stencil_size(radius, shape) - 1) * active
