"""Fixed-size worker pool with a shared barrier.

A :class:`WorkerPool` runs one SPMD body on every worker thread for the whole
run: threads are started once, synchronised with ``ctx.barrier()`` between
phases, and joined at the end. Rank 0 is the master.

The stencil kernels release the GIL, so the threads execute the data-parallel
phases concurrently.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple


def static_chunk(count: int, parts: int, rank: int) -> Tuple[int, int]:
    """Contiguous share ``[start, stop)`` of ``count`` units for ``rank``.

    The first ``count % parts`` ranks receive one extra unit.
    """
    q, rem = divmod(int(count), int(parts))
    start = rank * q + min(rank, rem)
    stop = start + q + (1 if rank < rem else 0)
    return start, stop


@dataclass
class WorkerContext:
    rank: int
    size: int
    requested: int
    _barrier: threading.Barrier
    abort: threading.Event
    shared: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_master(self) -> bool:
        return self.rank == 0

    def barrier(self) -> None:
        self._barrier.wait()

    def chunk(self, count: int) -> Tuple[int, int]:
        return static_chunk(count, self.size, self.rank)


class WorkerPool:
    """Request ``requested`` workers; ``thread_limit`` caps what is started."""

    def __init__(self, requested: int, thread_limit: Optional[int] = None):
        self.requested = int(requested)
        self.thread_limit = None if thread_limit is None else int(thread_limit)
        self.size: Optional[int] = None  # actual worker count, known once started

    def run(self, body: Callable[[WorkerContext], None]) -> Dict[str, Any]:
        """Run ``body(ctx)`` on every worker; return the shared dict.

        The first exception raised by any worker is re-raised here after all
        workers have exited. A failing worker breaks the barrier so its peers
        do not wait forever.
        """

        target = self.requested
        if self.thread_limit is not None:
            target = max(1, min(target, self.thread_limit))

        go = threading.Event()
        abort = threading.Event()
        shared: Dict[str, Any] = {}
        failures: List[BaseException] = []
        broken: List[BaseException] = []
        failures_lock = threading.Lock()
        contexts: List[WorkerContext] = []

        def _worker(slot: int) -> None:
            go.wait()
            ctx = contexts[slot]
            try:
                body(ctx)
            except threading.BrokenBarrierError as exc:
                broken.append(exc)
            except BaseException as exc:
                with failures_lock:
                    failures.append(exc)
                ctx._barrier.abort()

        threads: List[threading.Thread] = []
        for slot in range(target):
            t = threading.Thread(target=_worker, args=(slot,), name=f"stencil-worker-{slot}", daemon=True)
            try:
                t.start()
            except RuntimeError:
                # the OS refused another thread; run with what was started
                break
            threads.append(t)

        self.size = len(threads)
        if self.size == 0:
            raise RuntimeError("could not start any worker thread")
        barrier = threading.Barrier(self.size)
        for rank in range(self.size):
            contexts.append(WorkerContext(rank, self.size, self.requested, barrier, abort, shared))
        go.set()

        for t in threads:
            t.join()

        if failures:
            raise failures[0]
        if broken:
            raise broken[0]
        return shared
