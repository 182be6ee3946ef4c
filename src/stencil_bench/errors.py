"""Error taxonomy for stencil runs.

Every failure is fatal. The CLI turns any :class:`StencilError` into an
``ERROR:`` line and exit status 1.
"""

from __future__ import annotations


class StencilError(Exception):
    """Base class for all run failures."""


class ConfigurationError(StencilError, ValueError):
    """Invalid run parameters, detected before any buffer is allocated."""


class AllocationError(StencilError, MemoryError):
    """A grid buffer could not be allocated."""


class WorkerCountError(StencilError, RuntimeError):
    """The pool started a different number of workers than requested."""

    def __init__(self, requested: int, actual: int):
        self.requested = int(requested)
        self.actual = int(actual)
        super().__init__(
            f"number of requested threads {self.requested} does not equal "
            f"number of spawned threads {self.actual}"
        )


class ValidationError(StencilError):
    """Final L1 norm does not match the analytic reference."""

    def __init__(self, norm: float, reference: float):
        self.norm = float(norm)
        self.reference = float(reference)
        super().__init__(f"L1 norm = {self.norm:f}, Reference L1 norm = {self.reference:f}")
