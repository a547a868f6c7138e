from __future__ import annotations

"""Splitter return contracts.

Partitioning produces a single, stable payload (:class:`FoldAssignment`) from
which every (repeat, fold) :class:`Split` is derived. Splits only carry
positional row indices; subsetting the dataset is left to the caller so that
the partitioner never touches the data itself.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

import numpy as np
import pandas as pd

from tidyfolds.core.errors import InvalidParameter, RunStateError
from tidyfolds.core.shapes import take_rows


@dataclass(frozen=True)
class Split:
    """A single analysis/assessment split (one fold of one repeat).

    Notes
    -----
    - ``analysis`` / ``assessment`` are positional indices into the dataset.
    - They are disjoint and together cover every record of the repeat.
    """

    repeat_id: int
    fold_id: int
    analysis: np.ndarray
    assessment: np.ndarray

    @property
    def label(self) -> str:
        return f"Repeat{self.repeat_id + 1}/Fold{self.fold_id + 1:02d}"

    def analysis_data(self, dataset: pd.DataFrame) -> pd.DataFrame:
        return take_rows(dataset, self.analysis)

    def assessment_data(self, dataset: pd.DataFrame) -> pd.DataFrame:
        return take_rows(dataset, self.assessment)


@dataclass(eq=False)
class FoldAssignment:
    """Fold id per (repeat, record).

    ``folds[r, i]`` is the fold of record ``i`` in repeat ``r``. The array is
    read-only. An assignment can back exactly one resampling run; build a new
    one (same seed gives the same folds) to run again.
    """

    folds: np.ndarray
    k: int
    repeats: int
    seed: int
    strata: Optional[np.ndarray] = None
    _claimed_by: Optional[str] = field(default=None, repr=False)

    @property
    def n_records(self) -> int:
        return int(self.folds.shape[1])

    def __len__(self) -> int:
        return self.k * self.repeats

    def split(self, repeat_id: int, fold_id: int) -> Split:
        if not 0 <= repeat_id < self.repeats:
            raise InvalidParameter(f"repeat_id must be in [0, {self.repeats}); got {repeat_id}")
        if not 0 <= fold_id < self.k:
            raise InvalidParameter(f"fold_id must be in [0, {self.k}); got {fold_id}")
        row = self.folds[repeat_id]
        in_fold = row == fold_id
        return Split(
            repeat_id=int(repeat_id),
            fold_id=int(fold_id),
            analysis=np.flatnonzero(~in_fold),
            assessment=np.flatnonzero(in_fold),
        )

    def iter_splits(self) -> Iterator[Split]:
        """Yield every split in repeat-major order."""
        for r in range(self.repeats):
            for f in range(self.k):
                yield self.split(r, f)

    def fold_sizes(self, repeat_id: int = 0) -> np.ndarray:
        return np.bincount(self.folds[repeat_id], minlength=self.k)

    def to_frame(self) -> pd.DataFrame:
        """Long table with one row per (record, repeat)."""
        rows = np.tile(np.arange(self.n_records), self.repeats)
        reps = np.repeat(np.arange(self.repeats), self.n_records)
        return pd.DataFrame({".row": rows, "repeat": reps, "fold": self.folds.ravel()})

    @property
    def claimed(self) -> bool:
        return self._claimed_by is not None

    def claim(self, owner: str) -> None:
        if self._claimed_by is not None:
            raise RunStateError(
                f"This fold assignment already backs run {self._claimed_by!r}; "
                "make a new assignment (the same seed reproduces the same folds)."
            )
        self._claimed_by = owner


@dataclass(frozen=True)
class HoldoutSplit:
    """A single training/testing split of a dataset."""

    data: Any
    training_idx: np.ndarray
    testing_idx: np.ndarray

    def training(self) -> pd.DataFrame:
        return take_rows(self.data, self.training_idx)

    def testing(self) -> pd.DataFrame:
        return take_rows(self.data, self.testing_idx)

    def __repr__(self) -> str:
        n_tr, n_te = len(self.training_idx), len(self.testing_idx)
        return f"<Training/Testing/Total>\n<{n_tr}/{n_te}/{n_tr + n_te}>"
