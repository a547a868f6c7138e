"""Built-in metric registrations."""

from __future__ import annotations

from tidyfolds.components.evaluation import metrics as m
from tidyfolds.registries.metrics import register_metric

register_metric("rmse")(m.rmse)
register_metric("mae")(m.mae)
register_metric("mape")(m.mape)
register_metric("rsq")(m.rsq)
register_metric("rsq_trad")(m.rsq_trad)
register_metric("accuracy")(m.accuracy)
register_metric("kap")(m.kap)
register_metric("roc_auc")(m.roc_auc)
register_metric("mn_log_loss")(m.mn_log_loss)
