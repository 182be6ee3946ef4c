"""Numba-compiled stencil kernels.

Kernels compile lazily on first call, once per (shape, precision) pair, and
are cached on disk. Select the vectorised NumPy path instead with
``StencilConfig(use_numba=False)`` or ``--no-numba``.
"""

from .kernels_stencil import apply_compact, apply_star

__all__ = [
    "apply_star",
    "apply_compact",
]
