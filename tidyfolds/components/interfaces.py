from __future__ import annotations
from typing import Any, Callable, Protocol, Sequence, runtime_checkable

import pandas as pd


@runtime_checkable
class ModelProcedure(Protocol):
    """Capability interface for anything resampled by the harness."""

    def fit(self, analysis: pd.DataFrame) -> Any:
        """Train on the analysis rows only; return an opaque model handle.

        Must not retain state that leaks between folds.
        """
        ...

    def predict(self, handle: Any, assessment: pd.DataFrame) -> Sequence[Any]:
        """Return one prediction per assessment row, in row order."""
        ...


FitFn = Callable[[pd.DataFrame], Any]
PredictFn = Callable[[Any, pd.DataFrame], Sequence[Any]]
MetricFn = Callable[[Any, Any], float]
