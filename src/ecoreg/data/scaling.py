"""Standardization of predictors before model fitting."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class ScaledVariable:
    """Centre and scale recorded for one predictor so fits can be mapped back."""

    name: str
    mean: float
    sd: float

    def transform(self, values) -> np.ndarray:
        return (np.asarray(values, dtype=float) - self.mean) / self.sd

    def inverse(self, values) -> np.ndarray:
        return np.asarray(values, dtype=float) * self.sd + self.mean


def fit_scaler(values, name: str = 'x') -> ScaledVariable:
    """Record mean and sample standard deviation (ddof=1) of ``values``."""
    arr = np.asarray(values, dtype=float)
    finite = arr[np.isfinite(arr)]
    if finite.size < 2:
        raise ValueError(f"Column '{name}' needs at least two finite values to be scaled")
    sd = float(np.std(finite, ddof=1))
    if sd == 0.0:
        raise ValueError(f"Column '{name}' has zero variance and cannot be scaled")
    return ScaledVariable(name=name, mean=float(np.mean(finite)), sd=sd)


def standardize(values) -> np.ndarray:
    """Subtract the mean and divide by the standard deviation."""
    return fit_scaler(values).transform(values)


def standardize_columns(
    df: pd.DataFrame,
    columns: Iterable[str],
    suffix: str = '_z',
) -> tuple[pd.DataFrame, dict[str, ScaledVariable]]:
    """Add ``<column><suffix>`` scaled copies of ``columns`` to a copy of ``df``."""
    columns = list(columns)
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(f'Missing columns for scaling: {missing}')

    out = df.copy()
    scalers: dict[str, ScaledVariable] = {}
    for col in columns:
        scaler = fit_scaler(out[col], name=col)
        out[f'{col}{suffix}'] = scaler.transform(out[col])
        scalers[col] = scaler
    return out, scalers
