"""Configuration and result contracts.

Keep module imports explicit in most of the codebase:
    from tidyfolds.contracts.split_configs import VFoldConfig

The names re-exported here are a small set of convenience imports for
callers that prefer a single namespace.
"""

from .control_configs import ControlResamples, default_n_jobs
from .split_configs import HoldoutConfig, VFoldConfig
from .results.resampling import MetricSummary, RepeatSummary, ResampleSummary

__all__ = [
    "ControlResamples",
    "default_n_jobs",
    "HoldoutConfig",
    "VFoldConfig",
    "MetricSummary",
    "RepeatSummary",
    "ResampleSummary",
]
