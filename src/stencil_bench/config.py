"""Run parameters for the stencil benchmark."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from stencil_bench.errors import ConfigurationError


# Upper bound on requested worker threads.
MAX_THREADS = 512

# Linear ramp used to seed the input grid: in[i, j] = COEFX*i + COEFY*j
COEFX = 1.0
COEFY = 1.0

SHAPES = ("star", "compact")
PRECISIONS = ("single", "double")

_DTYPES = {
    "single": np.float32,
    "double": np.float64,
}

# Absolute tolerance of the L1-norm check.
_EPSILON = {
    "single": 1.0e-4,
    "double": 1.0e-8,
}


@dataclass
class StencilConfig:
    threads: int
    iterations: int
    n: int
    tile_size: Optional[int] = None  # None -> n (no tiling)

    radius: int = 2
    shape: str = "star"  # star | compact
    precision: str = "double"  # single | double

    coefx: float = COEFX
    coefy: float = COEFY

    # Numba kernels (default) or the vectorised NumPy path
    use_numba: bool = True

    def __post_init__(self):
        """Normalise selector aliases; values are checked by :meth:`validate`."""

        shape = (self.shape or "star").strip().lower()
        shape_aliases = {
            "cross": "star",
            "plus": "star",
            "box": "compact",
            "square": "compact",
            "full": "compact",
        }
        self.shape = shape_aliases.get(shape, shape)

        prec = (self.precision or "double").strip().lower()
        prec_aliases = {
            "float": "single",
            "float32": "single",
            "f32": "single",
            "sp": "single",
            "float64": "double",
            "f64": "double",
            "dp": "double",
        }
        self.precision = prec_aliases.get(prec, prec)

        if self.tile_size is None:
            self.tile_size = self.n

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(_DTYPES[self.precision])

    @property
    def epsilon(self) -> float:
        return _EPSILON[self.precision]

    @property
    def interior(self) -> int:
        """Linear extent of the interior (cells with full stencil support)."""
        return self.n - 2 * self.radius

    @property
    def tiled(self) -> bool:
        return self.tile_size < self.interior

    def validate(self) -> "StencilConfig":
        """Raise :class:`ConfigurationError` for any unusable parameter.

        Runs before any grid buffer is allocated.
        """

        if self.shape not in SHAPES:
            raise ConfigurationError(f"Unknown stencil shape '{self.shape}'. Expected one of {SHAPES}")
        if self.precision not in PRECISIONS:
            raise ConfigurationError(f"Unknown precision '{self.precision}'. Expected one of {PRECISIONS}")
        if self.threads < 1 or self.threads > MAX_THREADS:
            raise ConfigurationError(f"Invalid number of threads: {self.threads}")
        if self.iterations < 1:
            raise ConfigurationError(f"iterations must be >= 1 : {self.iterations}")
        if self.n < 1:
            raise ConfigurationError(f"grid dimension must be positive: {self.n}")
        if self.radius < 1:
            raise ConfigurationError(f"Stencil radius {self.radius} should be positive")
        if 2 * self.radius + 1 > self.n:
            raise ConfigurationError(f"Stencil radius {self.radius} exceeds grid size {self.n}")

        limit = np.iinfo(np.intp).max // self.dtype.itemsize
        if self.n > limit // self.n:
            raise ConfigurationError(f"Space for {self.n} x {self.n} grid cannot be represented")

        if self.tile_size < 1:
            raise ConfigurationError(f"tile size must be positive : {self.tile_size}")
        return self
