"""
Benchmarking module for thread and tile scaling analysis.

Provides tools for:
- MFlops/s and per-round timing across thread counts and tile sizes
- CSV summaries and an optional matplotlib scaling plot
"""

from .benchmark_scaling import run_scaling_benchmark, generate_scaling_report

__all__ = ['run_scaling_benchmark', 'generate_scaling_report']
