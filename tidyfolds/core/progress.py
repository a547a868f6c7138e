from __future__ import annotations

"""Progress reporting primitives.

Resampling runs may optionally accept a progress callback to report how many
(repeat, fold) pairs have been attempted. Callbacks are always invoked from
the driver thread, never from workers.
"""

from typing import Protocol, Optional


class ProgressCallback(Protocol):
    """A minimal progress reporting interface."""

    def init(self, *, total: int, label: Optional[str] = None) -> None:  # pragma: no cover
        ...

    def update(self, *, current: int, label: Optional[str] = None) -> None:  # pragma: no cover
        ...

    def finalize(self, *, label: Optional[str] = None) -> None:  # pragma: no cover
        ...
