from __future__ import annotations

from threading import Event


class CancellationToken:
    """Cooperative cancellation signal for a resampling run.

    The run checks the token between fold iterations only; a fold that has
    already started is allowed to finish.
    """

    def __init__(self) -> None:
        self._event = Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"
