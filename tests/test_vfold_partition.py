from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tidyfolds.api import (
    InsufficientStrataSize,
    InvalidParameter,
    VFoldConfig,
    make_folds,
    vfold_cv,
)
from tidyfolds.runtime.random.rng import RngManager


@pytest.mark.parametrize(
    "n_records,k,repeats",
    [(100, 10, 1), (23, 5, 3), (7, 7, 2), (2, 2, 1)],
)
def test_folds_are_disjoint_and_cover_every_record(n_records: int, k: int, repeats: int) -> None:
    folds = make_folds(n_records, k=k, repeats=repeats, seed=11)

    assert len(folds) == k * repeats
    for r in range(repeats):
        held_out: list[int] = []
        for f in range(k):
            split = folds.split(r, f)
            assert set(split.analysis).isdisjoint(split.assessment)
            both = np.sort(np.concatenate([split.analysis, split.assessment]))
            assert both.tolist() == list(range(n_records))
            held_out.extend(split.assessment.tolist())
        # every record is held out exactly once per repeat
        assert sorted(held_out) == list(range(n_records))


def test_fold_sizes_differ_by_at_most_one() -> None:
    folds = make_folds(103, k=10, repeats=3, seed=5)

    for r in range(3):
        sizes = folds.fold_sizes(r)
        assert sizes.sum() == 103
        assert sizes.max() - sizes.min() <= 1


def test_stratified_folds_keep_stratum_shares() -> None:
    strata = np.array(["majority"] * 70 + ["minority"] * 30)
    folds = make_folds(100, k=5, seed=3, strata=strata)

    for f in range(5):
        members = strata[folds.split(0, f).assessment]
        assert 13 <= int((members == "majority").sum()) <= 14
        assert 5 <= int((members == "minority").sum()) <= 7
    assert folds.fold_sizes(0).tolist() == [20] * 5


def test_uneven_strata_stay_balanced_overall() -> None:
    strata = ["a"] * 71 + ["b"] * 31
    folds = make_folds(102, k=5, repeats=2, seed=8, strata=strata)
    labels = np.asarray(strata)

    for r in range(2):
        sizes = folds.fold_sizes(r)
        assert sizes.max() - sizes.min() <= 1
        for f in range(5):
            members = labels[folds.split(r, f).assessment]
            assert set(members) == {"a", "b"}


def test_insufficient_stratum_is_named() -> None:
    strata = ["common"] * 20 + ["rare"] * 3

    with pytest.raises(InsufficientStrataSize) as excinfo:
        make_folds(23, k=5, seed=1, strata=strata)

    assert excinfo.value.stratum == "rare"
    assert excinfo.value.size == 3
    assert excinfo.value.k == 5
    assert isinstance(excinfo.value, ValueError)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(n_records=10, k=1),
        dict(n_records=10, k=11),
        dict(n_records=10, k=2, repeats=0),
        dict(n_records=0, k=2),
        dict(n_records=10, k=2.5),
        dict(n_records=10, k=2, strata=["a", "b"]),
    ],
)
def test_invalid_parameters_fail_fast(kwargs: dict) -> None:
    with pytest.raises(InvalidParameter):
        make_folds(**kwargs)


def test_same_seed_reproduces_folds() -> None:
    a = make_folds(100, k=10, repeats=2, seed=42)
    b = make_folds(100, k=10, repeats=2, seed=42)
    c = make_folds(100, k=10, repeats=2, seed=43)

    assert np.array_equal(a.folds, b.folds)
    assert not np.array_equal(a.folds, c.folds)


def test_repeats_use_independent_permutations() -> None:
    folds = make_folds(60, k=3, repeats=2, seed=0)
    assert not np.array_equal(folds.folds[0], folds.folds[1])


def test_missing_seed_is_deterministic() -> None:
    assert np.array_equal(make_folds(30, k=3).folds, make_folds(30, k=3, seed=0).folds)


def test_fold_array_is_read_only() -> None:
    folds = make_folds(20, k=4, seed=2)
    with pytest.raises(ValueError):
        folds.folds[0, 0] = 3


def test_numeric_strata_are_binned_into_quantiles() -> None:
    values = np.linspace(0.0, 1.0, 200)
    folds = make_folds(200, k=5, seed=9, strata=values)

    assert folds.strata is not None
    bins = set(folds.strata)
    assert len(bins) == 4
    for f in range(5):
        assert set(folds.strata[folds.split(0, f).assessment]) == bins


def test_vfold_cv_uses_column_and_config() -> None:
    frame = pd.DataFrame({"x": np.arange(40), "cls": ["p", "q"] * 20})

    from_cfg = vfold_cv(frame, VFoldConfig(v=4, repeats=2, strata="cls", seed=7))
    direct = make_folds(40, k=4, repeats=2, seed=7, strata=frame["cls"])

    assert np.array_equal(from_cfg.folds, direct.folds)
    assert from_cfg.to_frame().shape == (80, 3)


def test_vfold_cv_rejects_unknown_strata_column() -> None:
    frame = pd.DataFrame({"x": np.arange(10)})
    with pytest.raises(InvalidParameter):
        vfold_cv(frame, v=2, strata="nope")


def test_rng_child_seeds_are_stable_and_named() -> None:
    a = RngManager(42)
    b = RngManager(42)

    assert a.repeat_seeds(3) == b.repeat_seeds(3)
    assert len(set(a.repeat_seeds(3))) == 3
    assert a.child_seed("holdout") != a.child_seed("vfold/repeat0")


def test_vfold_cv_pools_rare_levels() -> None:
    frame = pd.DataFrame({"x": np.arange(100), "g": ["a"] * 90 + ["b"] * 5 + ["c"] * 5})

    with pytest.warns(UserWarning, match="pooling"):
        pooled = vfold_cv(frame, v=5, strata="g", seed=1, pool=0.1)
    raw = vfold_cv(frame, v=5, strata="g", seed=1, pool=0.0)

    assert set(pooled.strata) == {"a", "pooled"}
    assert set(raw.strata) == {"a", "b", "c"}
    for f in range(5):
        members = pooled.strata[pooled.split(0, f).assessment]
        assert int((members == "pooled").sum()) == 2


def test_strata_sizes_are_checked_after_pooling() -> None:
    strata = ["a"] * 95 + ["b"] * 3 + ["c"] * 2

    with pytest.raises(InsufficientStrataSize) as excinfo:
        make_folds(100, k=5, seed=1, strata=strata, pool=0.0)
    assert excinfo.value.stratum in {"b", "c"}

    with pytest.warns(UserWarning):
        folds = make_folds(100, k=5, seed=1, strata=strata)
    assert set(folds.strata) == {"a"}
