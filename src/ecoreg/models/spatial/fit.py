"""Result container and metrics shared by the presence/absence models."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd
from sklearn.metrics import brier_score_loss, log_loss, roc_auc_score


@dataclass
class SpatialFit:
    method: str
    coef: dict[str, float]
    se: dict[str, float]
    aic: float
    deviance: float
    n_obs: int
    fitted: np.ndarray
    extra: dict[str, Any] = field(default_factory=dict)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                'method': self.method,
                'term': list(self.coef),
                'estimate': list(self.coef.values()),
                'std_error': [self.se.get(name, np.nan) for name in self.coef],
            }
        )


def build_formula(response: str, predictors: Iterable[str]) -> str:
    predictors = list(predictors)
    rhs = ' + '.join(predictors) if predictors else '1'
    return f'{response} ~ {rhs}'


def classification_metrics(y_true, p) -> dict[str, float]:
    """ROC AUC, Brier score, log-loss and explained deviance of predicted probabilities."""
    y_true = np.asarray(y_true, dtype=int).ravel()
    p = np.clip(np.asarray(p, dtype=float).ravel(), 1e-12, 1 - 1e-12)
    if y_true.size != p.size:
        raise ValueError(f'y has {y_true.size} rows but p has {p.size}')

    loss = log_loss(y_true, p, labels=[0, 1])
    prevalence = np.full_like(p, y_true.mean())
    null_loss = log_loss(y_true, np.clip(prevalence, 1e-12, 1 - 1e-12), labels=[0, 1])
    both_classes = np.unique(y_true).size == 2
    return {
        'auc': float(roc_auc_score(y_true, p)) if both_classes else float('nan'),
        'brier': float(brier_score_loss(y_true, p)),
        'log_loss': float(loss),
        'explained_deviance': float(1 - loss / null_loss) if null_loss > 0 else float('nan'),
    }


def compare_spatial_models(fits: Iterable[SpatialFit], y_true) -> pd.DataFrame:
    """One row per model with AIC, deviance and classification metrics."""
    rows = []
    for fit in fits:
        metrics = classification_metrics(y_true, fit.fitted)
        rows.append(
            {
                'method': fit.method,
                'aic': fit.aic,
                'deviance': fit.deviance,
                'n_obs': fit.n_obs,
                **metrics,
            }
        )
    table = pd.DataFrame(rows)
    table['delta_aic'] = table['aic'] - table['aic'].min()
    return table
