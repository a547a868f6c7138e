from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.base import clone

from tidyfolds.components.interfaces import FitFn, ModelProcedure, PredictFn


@dataclass(frozen=True)
class FunctionModelProcedure(ModelProcedure):
    """Adapt a plain ``fit_fn`` / ``predict_fn`` pair to :class:`ModelProcedure`."""

    fit_fn: FitFn
    predict_fn: PredictFn

    def fit(self, analysis: pd.DataFrame) -> Any:
        return self.fit_fn(analysis)

    def predict(self, handle: Any, assessment: pd.DataFrame) -> Sequence[Any]:
        return self.predict_fn(handle, assessment)


@dataclass
class SklearnModelProcedure(ModelProcedure):
    """
    Resample a scikit-learn estimator (or Pipeline).

    - A fresh clone of ``estimator`` is fitted per fold, so nothing estimated
      on one fold's analysis rows is visible to another fold.
    - ``predictors`` defaults to every column except ``outcome``.
    - ``method="predict_proba"`` returns the ``positive_class`` column
      (default: the last class), which is what ``roc_auc`` and
      ``mn_log_loss`` expect.
    """

    estimator: Any
    outcome: str
    predictors: Optional[Sequence[str]] = None
    method: Literal["predict", "predict_proba"] = "predict"
    positive_class: Optional[Any] = None

    def _columns(self, frame: pd.DataFrame) -> list[str]:
        if self.predictors is not None:
            return list(self.predictors)
        return [c for c in frame.columns if c != self.outcome]

    def fit(self, analysis: pd.DataFrame) -> Any:
        model = clone(self.estimator)
        model.fit(analysis[self._columns(analysis)], analysis[self.outcome].to_numpy())
        return model

    def predict(self, handle: Any, assessment: pd.DataFrame) -> np.ndarray:
        X = assessment[self._columns(assessment)]
        if self.method == "predict":
            return np.asarray(handle.predict(X))

        if not hasattr(handle, "predict_proba"):
            raise ValueError(
                f"method='predict_proba' requested but {type(handle).__name__} has no predict_proba."
            )
        proba = np.asarray(handle.predict_proba(X))
        classes = list(getattr(handle, "classes_", range(proba.shape[1])))
        if self.positive_class is None:
            col = proba.shape[1] - 1
        else:
            try:
                col = classes.index(self.positive_class)
            except ValueError as e:
                raise ValueError(
                    f"positive_class={self.positive_class!r} not among fitted classes {classes}"
                ) from e
        return proba[:, col]
