from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tidyfolds.api import (
    HoldoutConfig,
    InsufficientStrataSize,
    InvalidParameter,
    initial_split,
    make_strata,
)


def test_make_strata_bins_numeric_values() -> None:
    labels = make_strata(np.arange(400, dtype=float), breaks=4)

    assert labels.shape == (400,)
    counts = pd.Series(labels).value_counts()
    assert len(counts) == 4
    assert counts.min() >= 99


def test_make_strata_falls_back_to_single_stratum_for_small_data() -> None:
    with pytest.warns(UserWarning):
        labels = make_strata(np.arange(30, dtype=float), breaks=4, depth=20)

    assert set(labels) == {"strata1"}


def test_make_strata_keeps_few_distinct_numbers_as_groups() -> None:
    labels = make_strata([0, 1] * 25)
    assert set(labels) == {0, 1}


def test_make_strata_pools_rare_levels() -> None:
    x = ["a"] * 80 + ["c"] * 6 + ["d"] * 6 + ["e"] * 8

    with pytest.warns(UserWarning, match="pooling"):
        labels = make_strata(x, pool=0.1)

    assert set(labels) == {"a", "pooled"}
    assert int((labels == "pooled").sum()) == 20


def test_make_strata_merges_tiny_pool_into_smallest_level() -> None:
    x = ["a"] * 60 + ["b"] * 35 + ["c"] * 3 + ["d"] * 2

    with pytest.warns(UserWarning):
        labels = make_strata(x, pool=0.1)

    assert set(labels) == {"a", "b"}
    assert int((labels == "b").sum()) == 40


def _houses(n: int = 100) -> pd.DataFrame:
    rng = np.random.default_rng(0)
    return pd.DataFrame(
        {
            "area": rng.lognormal(7.0, 0.3, size=n),
            "kind": ["house"] * 70 + ["condo"] * 30,
        }
    )


def test_initial_split_proportions_and_disjointness() -> None:
    split = initial_split(_houses(), prop=0.8, seed=502)

    train, test = split.training(), split.testing()
    assert len(train) == 80
    assert len(test) == 20
    assert set(train.index).isdisjoint(test.index)
    assert "<80/20/100>" in repr(split)


def test_initial_split_stratified_by_category() -> None:
    split = initial_split(_houses(), HoldoutConfig(prop=0.8, strata="kind", seed=1))

    kinds = split.training()["kind"].value_counts()
    assert abs(int(kinds["house"]) - 56) <= 1
    assert abs(int(kinds["condo"]) - 24) <= 1


def test_initial_split_is_reproducible() -> None:
    a = initial_split(_houses(), prop=0.75, strata="area", seed=3)
    b = initial_split(_houses(), prop=0.75, strata="area", seed=3)
    assert np.array_equal(a.training_idx, b.training_idx)


@pytest.mark.parametrize("prop", [0.0, 1.0, 1.5])
def test_initial_split_rejects_bad_prop(prop: float) -> None:
    with pytest.raises(InvalidParameter):
        initial_split(_houses(), prop=prop)


def test_initial_split_names_a_singleton_stratum() -> None:
    frame = pd.DataFrame({"x": np.arange(51), "g": ["a"] * 50 + ["b"]})

    with pytest.raises(InsufficientStrataSize) as excinfo:
        initial_split(frame, prop=0.8, strata="g", pool=0.0)

    assert excinfo.value.stratum == "b"
    assert excinfo.value.size == 1
    assert isinstance(excinfo.value, InvalidParameter)


def test_initial_split_pools_a_singleton_stratum_by_default() -> None:
    frame = pd.DataFrame({"x": np.arange(51), "g": ["a"] * 50 + ["b"]})

    with pytest.warns(UserWarning, match="pooling"):
        split = initial_split(frame, prop=0.8, strata="g", seed=2)

    assert len(split.training()) == 40
    assert len(split.testing()) == 11


def test_initial_split_rejects_prop_leaving_too_few_records_per_side() -> None:
    with pytest.raises(InvalidParameter, match="strata"):
        initial_split(_houses(), prop=0.99, strata="kind")
