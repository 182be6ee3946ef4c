import threading

import pytest

from stencil_bench.pool import WorkerPool, static_chunk


@pytest.mark.parametrize("count,parts", [(10, 3), (3, 8), (0, 2), (64, 4), (7, 1)])
def test_static_chunk_partitions_range(count, parts):
    covered = []
    sizes = []
    for rank in range(parts):
        start, stop = static_chunk(count, parts, rank)
        assert start <= stop
        covered.extend(range(start, stop))
        sizes.append(stop - start)
    assert covered == list(range(count))
    assert max(sizes) - min(sizes) <= 1


def test_pool_runs_every_rank_once():
    pool = WorkerPool(4)
    seen = []
    lock = threading.Lock()

    def body(ctx):
        with lock:
            seen.append(ctx.rank)

    pool.run(body)
    assert pool.size == 4
    assert sorted(seen) == [0, 1, 2, 3]


def test_barrier_separates_phases():
    pool = WorkerPool(3)

    def body(ctx):
        if ctx.is_master:
            ctx.shared["slots"] = [None] * ctx.size
        ctx.barrier()
        ctx.shared["slots"][ctx.rank] = ctx.rank * 10
        ctx.barrier()
        if ctx.is_master:
            # every write of the previous phase is visible here
            ctx.shared["total"] = sum(ctx.shared["slots"])

    shared = pool.run(body)
    assert shared["total"] == 30


def test_thread_limit_reduces_actual_size():
    pool = WorkerPool(6, thread_limit=2)
    shared = pool.run(lambda ctx: ctx.shared.setdefault("size", ctx.size))
    assert pool.size == 2
    assert shared["size"] == 2
    assert pool.requested == 6


def test_worker_exception_propagates_without_deadlock():
    pool = WorkerPool(4)

    def body(ctx):
        if ctx.rank == 2:
            raise ZeroDivisionError("boom")
        ctx.barrier()
        ctx.barrier()

    with pytest.raises(ZeroDivisionError, match="boom"):
        pool.run(body)
