"""
stencil_bench - parallel 2D stencil throughput benchmark

Applies a star or compact divergence stencil of radius r repeatedly to an
n x n grid on a fixed pool of worker threads, checks the result against the
analytic L1 norm and reports MFlops/s.

Example usage:
    from stencil_bench import StencilConfig, run_stencil

    result = run_stencil(StencilConfig(threads=4, iterations=10, n=1000, tile_size=64))
    print(result.norm, result.mflops)
"""

__version__ = "1.0.0"

from .config import StencilConfig, MAX_THREADS
from .errors import (
    StencilError,
    ConfigurationError,
    AllocationError,
    WorkerCountError,
    ValidationError,
)
from .weights import build_weights, support, stencil_size, flops_per_round
from .grid import GridBuffers
from .engine import StencilEngine
from .pool import WorkerPool, WorkerContext, static_chunk
from .driver import run_stencil, StencilResult, TimingStats
from .validation import reference_norm, verify_norm

__all__ = [
    "StencilConfig", "MAX_THREADS",
    "StencilError", "ConfigurationError", "AllocationError",
    "WorkerCountError", "ValidationError",
    "build_weights", "support", "stencil_size", "flops_per_round",
    "GridBuffers",
    "StencilEngine",
    "WorkerPool", "WorkerContext", "static_chunk",
    "run_stencil", "StencilResult", "TimingStats",
    "reference_norm", "verify_norm",
]
