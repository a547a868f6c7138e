"""Registries.

Add a new implementation, register it, and the rest of the system stays
closed for modification.
"""

from .metrics import get_metric, list_metrics, metric_set, register_metric, resolve_metrics
