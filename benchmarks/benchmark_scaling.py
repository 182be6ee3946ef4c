"""
Thread and tile-size scaling sweep for the stencil benchmark.

Runs the validated stencil for every (threads, tile) combination at a fixed
grid size and records MFlops/s and per-round timings.

Usage:
    python -m benchmarks.benchmark_scaling --n 2000 --threads 1,2,4,8
    python -m benchmarks.benchmark_scaling --n 2000 --tiles 0,32,64,128 --shape compact
    python -m benchmarks.benchmark_scaling --plot
"""

import argparse
import csv
import sys
from pathlib import Path
from typing import Dict, List

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from stencil_bench import StencilConfig, StencilError, run_stencil


# ============================================================================
# Benchmark runner
# ============================================================================

def _quiet(*args, **kwargs) -> None:
    pass


def run_single_benchmark(
    n: int,
    threads: int,
    tile: int,
    iterations: int = 10,
    radius: int = 2,
    shape: str = "star",
    precision: str = "double",
    use_numba: bool = True,
) -> Dict:
    """
    Run one validated stencil configuration.

    Parameters
    ----------
    tile : int
        Tile edge; 0 means untiled.

    Returns
    -------
    benchmark : dict
        Keys: n, threads, tile, tiled, mflops, avg_s, min_s, max_s, validated
    """
    config = StencilConfig(
        threads=threads,
        iterations=iterations,
        n=n,
        tile_size=tile if tile > 0 else None,
        radius=radius,
        shape=shape,
        precision=precision,
        use_numba=use_numba,
    )

    print(f"[bench] n={n} threads={threads} tile={tile if tile > 0 else 'none'} shape={shape} r={radius}")

    try:
        result = run_stencil(config, out=_quiet)
    except StencilError as e:
        print(f"  ✗ {type(e).__name__}: {e}")
        return {
            'n': n, 'threads': threads, 'tile': tile, 'tiled': config.tiled,
            'mflops': 0.0, 'avg_s': 0.0, 'min_s': 0.0, 'max_s': 0.0,
            'validated': False,
        }

    t = result.timing
    print(f"  ✓ {result.mflops:.1f} MFlops/s  (min {t.min_time:.4g} s)")
    return {
        'n': n,
        'threads': threads,
        'tile': tile,
        'tiled': result.tiled,
        'mflops': result.mflops,
        'avg_s': t.avg_time,
        'min_s': t.min_time,
        'max_s': t.max_time,
        'validated': True,
    }


def run_scaling_benchmark(
    n: int,
    thread_counts: List[int],
    tiles: List[int],
    **kwargs,
) -> List[Dict]:
    """Run :func:`run_single_benchmark` for every (threads, tile) pair."""
    benchmarks = []
    for threads in thread_counts:
        for tile in tiles:
            benchmarks.append(run_single_benchmark(n, threads, tile, **kwargs))
    return benchmarks


def save_scaling_summary(benchmarks: List[Dict], output_file: str = "benchmarks/scaling_summary.csv"):
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fields = ['n', 'threads', 'tile', 'tiled', 'mflops', 'avg_s', 'min_s', 'max_s', 'validated']
    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fields)
        writer.writeheader()
        for b in benchmarks:
            writer.writerow({k: b[k] for k in fields})

    print(f"\n✓ Benchmark summary saved to: {output_path}")


def generate_scaling_report(benchmarks: List[Dict]) -> str:
    """Tabulate MFlops/s per configuration with speedup over one thread."""
    lines = []
    lines.append(f"\n{'='*70}")
    lines.append("SCALING BENCHMARK SUMMARY")
    lines.append(f"{'='*70}")
    lines.append(f"{'Threads':<10} {'Tile':<8} {'MFlops/s':<14} {'Min (s)':<12} {'Speedup':<10} {'OK':<4}")
    lines.append("-" * 70)

    base = {}
    for b in benchmarks:
        if b['threads'] == 1 and b['validated']:
            base[b['tile']] = b['mflops']

    for b in benchmarks:
        ref = base.get(b['tile'])
        speedup = f"{b['mflops'] / ref:.2f}" if ref else "n/a"
        ok_flag = "✓" if b['validated'] else "✗"
        tile = str(b['tile']) if b['tile'] > 0 else "-"
        lines.append(
            f"{b['threads']:<10} {tile:<8} {b['mflops']:<14.1f} "
            f"{b['min_s']:<12.4g} {speedup:<10} {ok_flag:<4}"
        )

    lines.append(f"{'='*70}\n")
    return "\n".join(lines)


# ============================================================================
# CLI
# ============================================================================

def main():
    parser = argparse.ArgumentParser(
        description="Stencil thread/tile scaling benchmarks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m benchmarks.benchmark_scaling --n 2000 --threads 1,2,4,8
  python -m benchmarks.benchmark_scaling --n 1000 --tiles 0,32,128 --shape compact --radius 3
        """
    )
    parser.add_argument('--n', type=int, default=1000, help='Grid dimension (default: 1000)')
    parser.add_argument('--iterations', type=int, default=10, help='Rounds per run (default: 10)')
    parser.add_argument('--threads', type=str, default='1,2,4', help='Comma-separated thread counts')
    parser.add_argument('--tiles', type=str, default='0', help='Comma-separated tile edges, 0 = untiled')
    parser.add_argument('--radius', type=int, default=2)
    parser.add_argument('--shape', type=str, default='star', choices=['star', 'compact'])
    parser.add_argument('--precision', type=str, default='double', choices=['single', 'double'])
    parser.add_argument('--no-numba', action='store_true', help='Use the NumPy kernels')
    parser.add_argument('--output', type=str, default='benchmarks/scaling_summary.csv')
    parser.add_argument('--plot', action='store_true', help='Generate scaling plot (requires matplotlib)')

    args = parser.parse_args()

    thread_counts = [int(t) for t in args.threads.split(',')]
    tiles = [int(t) for t in args.tiles.split(',')]

    benchmarks = run_scaling_benchmark(
        args.n,
        thread_counts,
        tiles,
        iterations=args.iterations,
        radius=args.radius,
        shape=args.shape,
        precision=args.precision,
        use_numba=not args.no_numba,
    )

    save_scaling_summary(benchmarks, args.output)
    print(generate_scaling_report(benchmarks))

    if args.plot:
        try:
            import matplotlib.pyplot as plt
        except ImportError:
            print("Warning: matplotlib not available, skipping plot")
            return

        fig, ax = plt.subplots(figsize=(8, 6))
        for tile in tiles:
            rows = [b for b in benchmarks if b['tile'] == tile and b['validated']]
            label = f"tile={tile}" if tile > 0 else "untiled"
            ax.plot([b['threads'] for b in rows], [b['mflops'] for b in rows], 'o-', label=label,
                    linewidth=2, markersize=8)

        ax.set_xlabel('Threads', fontsize=12)
        ax.set_ylabel('MFlops/s', fontsize=12)
        ax.set_title(f'Stencil scaling ({args.shape}, r={args.radius}, n={args.n})', fontsize=14)
        ax.legend(fontsize=10)
        ax.grid(True, alpha=0.3)

        plt.tight_layout()
        plot_file = str(Path(args.output).with_suffix('.png'))
        plt.savefig(plot_file, dpi=150)
        print(f"✓ Scaling plot saved to: {plot_file}")


if __name__ == '__main__':
    main()
