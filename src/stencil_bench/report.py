"""Run-time info printing utilities."""

from __future__ import annotations

import math
from datetime import datetime
from typing import TYPE_CHECKING, Callable
from zoneinfo import ZoneInfo

if TYPE_CHECKING:
    from stencil_bench.config import StencilConfig
    from stencil_bench.driver import StencilResult


def _fmt_rate(x: float) -> str:
    if math.isinf(x):
        return "inf"
    return f"{x:f}"


def print_run_header(tag: str, out: Callable[..., None] = print) -> None:
    # UTC so logs are comparable across machines.
    ts = datetime.now(ZoneInfo("UTC")).strftime("%Y-%m-%d %H:%M:%S %Z")
    out(f"[run] {tag}  start={ts}")


def print_run_config(config: "StencilConfig", out: Callable[..., None] = print) -> None:
    out(f"Number of threads    = {config.threads}")
    out(f"Grid size            = {config.n}")
    out(f"Radius of stencil    = {config.radius}")
    if config.tiled:
        out(f"Tile size            = {config.tile_size}")
    else:
        out("Grid not tiled")
    out(f"Type of stencil      = {config.shape}")
    out(f"Data type            = {config.precision} precision")
    out(f"Number of iterations = {config.iterations}")
    out(f"Kernels              = {'numba' if config.use_numba else 'numpy'}")


def print_result(result: "StencilResult", verbose: bool = False, out: Callable[..., None] = print) -> None:
    out("Solution validates")
    if verbose:
        out(f"Reference L1 norm = {result.reference_norm:f}, L1 norm = {result.norm:f}")
    t = result.timing
    out(
        f"Rate (MFlops/s): {_fmt_rate(result.mflops)},  Avg time (s): {t.avg_time:f},  "
        f"Min time (s): {t.min_time:f}, Max time (s): {t.max_time:f}"
    )
