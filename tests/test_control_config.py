from __future__ import annotations

import pytest
from pydantic import ValidationError

from tidyfolds.api import ControlResamples, HoldoutConfig, VFoldConfig


def test_defaults() -> None:
    control = ControlResamples()
    assert control.save_pred is False
    assert control.backend == "loky"

    cfg = VFoldConfig()
    assert (cfg.v, cfg.repeats, cfg.strata, cfg.breaks, cfg.pool) == (10, 1, None, 4, 0.1)
    assert HoldoutConfig().prop == 0.75


def test_n_jobs_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIDYFOLDS_N_JOBS", "3")
    assert ControlResamples().n_jobs == 3

    monkeypatch.setenv("TIDYFOLDS_N_JOBS", "many")
    assert ControlResamples().n_jobs == 1


def test_zero_jobs_rejected() -> None:
    with pytest.raises(ValidationError):
        ControlResamples(n_jobs=0)


def test_blank_strata_means_none() -> None:
    assert VFoldConfig(strata="").strata is None


@pytest.mark.parametrize("kwargs", [dict(v=1), dict(repeats=0)])
def test_vfold_config_ranges(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        VFoldConfig(**kwargs)
