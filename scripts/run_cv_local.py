# scripts/run_cv_local.py
from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestRegressor
from sklearn.linear_model import LinearRegression

from tidyfolds.api import (
    ControlResamples,
    SklearnModelProcedure,
    VFoldConfig,
    collect_metrics,
    collect_predictions,
    initial_split,
    metric_set,
    run_resampling,
    vfold_cv,
)

# ==== EDIT THESE AS YOU LIKE ==================================================
N_HOUSES = 1500
OUTCOME = "sale_price"

SPLIT = VFoldConfig(
    v=10,
    repeats=1,
    strata=None,          # e.g. "sale_price" to stratify on price quartiles
    seed=1001,
)

CONTROL = ControlResamples(
    save_pred=True,
    n_jobs=1,             # each worker holds one analysis set in memory
)

METRICS = metric_set("rmse", "rsq")
# ============================================================================


def make_houses(n: int, seed: int = 502) -> pd.DataFrame:
    """Synthetic housing data: log10 sale price from living area, age and location."""
    rng = np.random.default_rng(seed)
    living_area = rng.lognormal(mean=7.2, sigma=0.3, size=n)
    year_built = rng.integers(1900, 2010, size=n)
    latitude = rng.normal(42.03, 0.02, size=n)
    longitude = rng.normal(-93.64, 0.03, size=n)
    log_price = (
        2.2
        + 0.45 * np.log10(living_area)
        + 0.004 * (year_built - 1900)
        - 3.0 * (latitude - 42.03) ** 2
        + rng.normal(0.0, 0.07, size=n)
    )
    return pd.DataFrame(
        {
            "gr_liv_area": living_area,
            "year_built": year_built,
            "latitude": latitude,
            "longitude": longitude,
            OUTCOME: log_price,
        }
    )


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    houses = make_houses(N_HOUSES)
    split = initial_split(houses, prop=0.80, strata=OUTCOME, seed=502)
    train = split.training()
    print(split)

    models = {
        "linear_reg": SklearnModelProcedure(LinearRegression(), outcome=OUTCOME),
        "rand_forest": SklearnModelProcedure(
            RandomForestRegressor(n_estimators=300, random_state=1003),
            outcome=OUTCOME,
        ),
    }

    for name, procedure in models.items():
        # one fold assignment per run; the same seed reproduces the same folds
        folds = vfold_cv(train, SPLIT)
        result = run_resampling(
            train,
            folds,
            metric_fns=METRICS,
            outcome=OUTCOME,
            model=procedure,
            control=CONTROL,
        )

        print(f"\n=== {name} ({result.state.value}) ===")
        print(collect_metrics(result).to_string(index=False))
        if result.failures:
            print("Failures:")
            for f in result.failures:
                print(f"- repeat {f.repeat_id} fold {f.fold_id} [{f.stage}] {f.error}: {f.message}")

        preds = collect_predictions(result)
        print(f"Out-of-fold predictions: {len(preds)} rows")


if __name__ == "__main__":
    main()
