from __future__ import annotations

"""Error taxonomy for resampling runs.

Configuration problems are raised before any fold work starts. Per-fold
problems are *recorded* (see :class:`tidyfolds.use_cases.resampling.types.FoldFailure`)
and only surface as an exception when nothing usable is left.
"""

from typing import Any, Sequence


class ResamplingError(Exception):
    """Base class for all errors raised by tidyfolds."""


class InvalidParameter(ResamplingError, ValueError):
    """A structurally invalid configuration (k too large, repeats < 1, ...)."""


class InsufficientStrataSize(InvalidParameter):
    """A stratum is too small to place at least one member in every partition.

    ``k`` is the number of partitions: the fold count, or 2 for a holdout split.
    """

    def __init__(self, stratum: Any, size: int, k: int):
        self.stratum = stratum
        self.size = int(size)
        self.k = int(k)
        super().__init__(
            f"Stratum {stratum!r} has {self.size} member(s); at least {self.k} "
            "are required so that every partition receives one."
        )


class AllFoldsFailed(ResamplingError, RuntimeError):
    """Every attempted fold failed at its fit or predict step."""

    def __init__(self, failures: Sequence[Any]):
        self.failures = tuple(failures)
        first = self.failures[0] if self.failures else None
        detail = f" First failure: {first.error}: {first.message}" if first is not None else ""
        super().__init__(
            f"All {len(self.failures)} fold(s) failed; no usable results.{detail}"
        )


class RunStateError(ResamplingError, RuntimeError):
    """A resampling run or fold assignment was used outside its lifecycle."""


class UndefinedMetric(UserWarning):
    """A metric has no contributing folds, so its aggregate is undefined."""


__all__ = [
    "ResamplingError",
    "InvalidParameter",
    "InsufficientStrataSize",
    "AllFoldsFailed",
    "RunStateError",
    "UndefinedMetric",
]
