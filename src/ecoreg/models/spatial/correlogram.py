"""Moran's I correlograms of model residuals over centroid distance classes."""

from __future__ import annotations

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist, squareform


def morans_i(values, weights: np.ndarray) -> float:
    """Moran's I of ``values`` for a symmetric weight matrix with a zero diagonal."""
    values = np.asarray(values, dtype=float).ravel()
    weights = np.asarray(weights, dtype=float)
    if weights.shape != (values.size, values.size):
        raise ValueError(f'weights must be {values.size}x{values.size}, got {weights.shape}')
    total_weight = weights.sum()
    if total_weight == 0:
        return float('nan')
    z = values - values.mean()
    denom = np.sum(z**2)
    if denom == 0:
        return float('nan')
    return float(values.size / total_weight * (z @ weights @ z) / denom)


def correlogram(values, coords, increment: float, n_classes: int = 10) -> pd.DataFrame:
    """Moran's I for consecutive distance classes of width ``increment``.

    Each class uses binary weights for pairs whose distance lies in
    ``(lower, upper]``; the first class starts at zero and excludes self-pairs.
    """
    if increment <= 0:
        raise ValueError(f'increment must be positive, got {increment}')
    values = np.asarray(values, dtype=float).ravel()
    coords = np.asarray(coords, dtype=float)
    if coords.ndim != 2 or coords.shape[0] != values.size:
        raise ValueError('coords must be an (n, 2) array matching values')

    condensed = pdist(coords)
    distances = squareform(condensed)
    off_diagonal = ~np.eye(values.size, dtype=bool)

    rows = []
    for k in range(n_classes):
        lower = k * increment
        upper = (k + 1) * increment
        in_class = (distances > lower) & (distances <= upper) & off_diagonal
        n_pairs = int(in_class.sum() // 2)
        in_condensed = (condensed > lower) & (condensed <= upper)
        rows.append(
            {
                'lower': lower,
                'upper': upper,
                'mean_distance': float(condensed[in_condensed].mean()) if n_pairs else np.nan,
                'n_pairs': n_pairs,
                'morans_i': morans_i(values, in_class.astype(float)) if n_pairs else np.nan,
            }
        )
    return pd.DataFrame(rows)
