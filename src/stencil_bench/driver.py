"""Iteration driver: repeated apply + refresh + timing inside one parallel region."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from stencil_bench.config import StencilConfig
from stencil_bench.engine import StencilEngine
from stencil_bench.errors import ConfigurationError, WorkerCountError
from stencil_bench.grid import GridBuffers
from stencil_bench.pool import WorkerContext, WorkerPool
from stencil_bench.report import print_run_config
from stencil_bench.validation import combine_partials, reference_norm, verify_norm
from stencil_bench.weights import build_weights, flops_per_round


# Added to every input cell after each round; forces fresh neighbour reads.
REFRESH_INCREMENT = 1.0


@dataclass
class TimingStats:
    """Per-round wall times. Round 0 is warm-up unless it is the only round."""

    iterations: int
    total: float = 0.0
    min_time: float = math.inf
    max_time: float = 0.0
    samples: int = 0

    def record(self, round_index: int, elapsed: float) -> None:
        if round_index == 0 and self.iterations > 1:
            return
        elapsed = float(elapsed)
        self.total += elapsed
        self.min_time = min(self.min_time, elapsed)
        self.max_time = max(self.max_time, elapsed)
        self.samples += 1

    @property
    def avg_time(self) -> float:
        return self.total / float(max(self.iterations - 1, 1))


@dataclass
class StencilResult:
    norm: float
    reference_norm: float
    timing: TimingStats
    flops: float
    nthreads: int
    tiled: bool

    @property
    def mflops(self) -> float:
        if self.timing.min_time <= 0.0 or math.isinf(self.timing.min_time):
            return math.inf
        return 1.0e-6 * self.flops / self.timing.min_time


def run_stencil(
    config: StencilConfig,
    pool: Optional[WorkerPool] = None,
    clock: Callable[[], float] = time.perf_counter,
    out: Callable[..., None] = print,
) -> StencilResult:
    """Run the full benchmark and validate the result.

    Raises
    ------
    ConfigurationError
        before anything is allocated.
    AllocationError, WorkerCountError, ValidationError
        as the run proceeds. A worker-count mismatch is also reported
        through ``out`` by the master before the workers leave.
    """

    config.validate()
    if pool is not None and pool.requested != config.threads:
        raise ConfigurationError(
            f"pool requests {pool.requested} workers but the run is configured for {config.threads}"
        )

    weights = build_weights(config.radius, config.shape, config.dtype)
    grid = GridBuffers(config.n, config.radius, config.dtype)
    engine = StencilEngine(weights, config.radius, config.shape, config.n, config.tile_size, config.use_numba)
    timing = TimingStats(config.iterations)
    pool = pool if pool is not None else WorkerPool(config.threads)

    def body(ctx: WorkerContext) -> None:
        if ctx.is_master:
            out("Parallel stencil execution on 2D grid")
            if ctx.size != ctx.requested:
                ctx.shared["nthreads"] = ctx.size
                ctx.abort.set()
                out(f"ERROR: {WorkerCountError(ctx.requested, ctx.size)}")
            else:
                print_run_config(config, out=out)
                ctx.shared["partials"] = [0.0] * ctx.size
        ctx.barrier()
        if ctx.abort.is_set():
            return

        row_start, row_stop = ctx.chunk(config.n)
        grid.initialize_rows(row_start, row_stop, config.coefx, config.coefy)

        unit_start, unit_stop = ctx.chunk(engine.unit_count)
        band_start, band_stop = engine.unit_rows(unit_start, unit_stop)

        t0 = 0.0
        for it in range(config.iterations):
            ctx.barrier()
            if ctx.is_master:
                t0 = clock()

            engine.apply(grid, band_start, band_stop)
            ctx.barrier()

            if ctx.is_master:
                timing.record(it, clock() - t0)

            grid.refresh_rows(row_start, row_stop, REFRESH_INCREMENT)

        partials: List[float] = ctx.shared["partials"]
        partials[ctx.rank] = grid.interior_abs_sum(row_start, row_stop)
        ctx.barrier()
        if ctx.is_master:
            ctx.shared["norm"] = combine_partials(partials, grid.active_points)

    try:
        shared = pool.run(body)
        if "nthreads" in shared:
            raise WorkerCountError(config.threads, shared["nthreads"])

        norm = shared["norm"]
        reference = reference_norm(config.iterations, config.coefx, config.coefy)
        verify_norm(norm, reference, config.epsilon)
    finally:
        grid.release()

    return StencilResult(
        norm=norm,
        reference_norm=reference,
        timing=timing,
        flops=flops_per_round(config.n, config.radius, config.shape),
        nthreads=pool.size,
        tiled=engine.tiled,
    )
