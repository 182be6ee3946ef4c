"""Analytic L1-norm check.

The input is seeded with the ramp ``COEFX*i + COEFY*j`` and every stencil is a
divergence-like difference scheme, so each pass adds exactly
``COEFX + COEFY`` to every interior output cell. The per-round refresh only
shifts the ramp by a constant, which the scheme cancels. After ``iterations``
passes the mean absolute interior output is therefore
``iterations * (COEFX + COEFY)`` for any grid size, radius or shape.
"""

from __future__ import annotations

from typing import Iterable

from stencil_bench.errors import ValidationError


def reference_norm(iterations: int, coefx: float, coefy: float) -> float:
    return float(iterations) * (float(coefx) + float(coefy))


def combine_partials(partials: Iterable[float], active_points: int) -> float:
    """Combine per-worker partial sums into the L1 norm per interior point."""
    total = 0.0
    for p in partials:
        total += float(p)
    return total / float(active_points)


def verify_norm(norm: float, reference: float, epsilon: float) -> float:
    """Return ``|norm - reference|``; raise :class:`ValidationError` above ``epsilon``."""
    err = abs(float(norm) - float(reference))
    if not err <= float(epsilon):
        raise ValidationError(norm, reference)
    return err
