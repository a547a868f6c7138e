from __future__ import annotations

from typing import Callable, Dict, Mapping, Sequence, Union

from tidyfolds.core.errors import InvalidParameter
from tidyfolds.registries.base import Registry

MetricFn = Callable[..., float]

_METRICS: Registry[MetricFn] = Registry(_name="metrics")

_BUILTINS_LOADED = False


def register_metric(name: str, *, replace: bool = False) -> Callable[[MetricFn], MetricFn]:
    return _METRICS.register(name, replace=replace)


def _ensure_builtins() -> None:
    global _BUILTINS_LOADED
    if _BUILTINS_LOADED:
        return
    from tidyfolds.registries.builtins import metrics as _  # noqa: F401
    _BUILTINS_LOADED = True


def get_metric(name: str) -> MetricFn:
    _ensure_builtins()
    if name not in _METRICS:
        raise InvalidParameter(f"Unknown metric: {name!r}. Registered: {list_metrics()}")
    return _METRICS.get(name)


def list_metrics() -> list[str]:
    _ensure_builtins()
    return _METRICS.names()


def metric_set(*names: str) -> Dict[str, MetricFn]:
    """Bundle registered metrics into an ordered name -> fn mapping."""
    if not names:
        raise InvalidParameter("metric_set requires at least one metric name.")
    return {Registry.normalize(n): get_metric(n) for n in names}


def resolve_metrics(
    metrics: Union[Mapping[str, MetricFn], Sequence[str], str],
) -> Dict[str, MetricFn]:
    """Accept a name -> fn mapping or registered metric name(s)."""
    if isinstance(metrics, str):
        return metric_set(metrics)
    if isinstance(metrics, Mapping):
        out: Dict[str, MetricFn] = {}
        for name, fn in metrics.items():
            if not callable(fn):
                raise InvalidParameter(f"Metric {name!r} is not callable.")
            out[str(name)] = fn
        if not out:
            raise InvalidParameter("At least one metric function is required.")
        return out
    return metric_set(*metrics)
