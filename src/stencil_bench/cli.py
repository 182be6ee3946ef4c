"""
Command Line Interface Module

    stencil-bench <threads> <iterations> <grid-dimension> [<tile-edge>]

Exit status 0 when the solution validates, 1 on any error.
"""

import argparse
import os
import sys
from typing import List, Optional

from .config import MAX_THREADS, PRECISIONS, SHAPES, StencilConfig
from .driver import run_stencil
from .errors import ConfigurationError, StencilError, WorkerCountError
from .pool import WorkerPool
from .report import print_result, print_run_header


# Caps the number of threads the pool may start (like OMP_THREAD_LIMIT).
THREAD_LIMIT_ENV = "STENCIL_THREAD_LIMIT"


class _Parser(argparse.ArgumentParser):
    """argparse with exit status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stdout)
        print(f"ERROR: {message}")
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="stencil-bench",
        description="Apply a divergence stencil to a 2D grid in parallel and report MFlops/s",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  stencil-bench 4 10 1000
  stencil-bench 4 10 1000 64 --shape compact --radius 3
  stencil-bench 1 5 200 --precision single --no-numba
        """,
    )
    parser.add_argument("threads", type=int, help=f"number of worker threads (1..{MAX_THREADS})")
    parser.add_argument("iterations", type=int, help="number of stencil rounds (>= 1)")
    parser.add_argument("n", type=int, metavar="grid-dimension", help="linear grid dimension")
    parser.add_argument(
        "tile_size",
        type=int,
        nargs="?",
        default=None,
        metavar="tile-edge",
        help="tile edge length (default: grid dimension, no tiling)",
    )
    parser.add_argument("--radius", type=int, default=2, help="stencil radius (default: 2)")
    parser.add_argument("--shape", default="star", choices=list(SHAPES), help="stencil shape (default: star)")
    parser.add_argument(
        "--precision",
        default="double",
        choices=list(PRECISIONS),
        help="floating-point precision (default: double)",
    )
    parser.add_argument("--no-numba", action="store_true", help="use the vectorised NumPy kernels")
    parser.add_argument("--verbose", action="store_true", help="print run header and norm values")
    return parser


def _thread_limit() -> Optional[int]:
    raw = os.environ.get(THREAD_LIMIT_ENV, "").strip()
    if not raw:
        return None
    try:
        limit = int(raw)
    except ValueError:
        raise ConfigurationError(f"{THREAD_LIMIT_ENV} must be an integer: {raw!r}") from None
    if limit < 1:
        raise ConfigurationError(f"{THREAD_LIMIT_ENV} must be positive: {limit}")
    return limit


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = StencilConfig(
        threads=args.threads,
        iterations=args.iterations,
        n=args.n,
        tile_size=args.tile_size,
        radius=args.radius,
        shape=args.shape,
        precision=args.precision,
        use_numba=not args.no_numba,
    )

    if args.verbose:
        print_run_header(f"stencil {config.shape} r={config.radius} n={config.n}")

    try:
        config.validate()
        result = run_stencil(config, pool=WorkerPool(config.threads, thread_limit=_thread_limit()))
    except WorkerCountError:
        # already reported by the master worker
        return 1
    except StencilError as e:
        print(f"ERROR: {e}")
        return 1

    print_result(result, verbose=args.verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())
