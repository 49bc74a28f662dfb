"""Result container and design matrix shared by the Poisson fitting methods."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd


@dataclass
class PoissonFit:
    """Coefficient estimates from one fitting method.

    ``coef`` and ``se`` are keyed by the names from :func:`coef_names` so the
    GLM, optimizer and MCMC fits line up row for row.
    """

    method: str
    coef: dict[str, float]
    se: dict[str, float]
    loglik: float
    aic: float
    converged: bool
    n_obs: int
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def params(self) -> np.ndarray:
        return np.array(list(self.coef.values()), dtype=float)

    @property
    def degree(self) -> int:
        return len(self.coef) - 1

    def predict(self, x) -> np.ndarray:
        """Expected count ``exp(X b)`` at predictor values ``x``."""
        return np.exp(design_matrix(x, self.degree) @ self.params)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                'method': self.method,
                'term': list(self.coef),
                'estimate': list(self.coef.values()),
                'std_error': [self.se.get(name, np.nan) for name in self.coef],
            }
        )


def coef_names(degree: int) -> list[str]:
    """``['intercept', 'x', 'x2', ...]`` for a polynomial of ``degree``."""
    if degree < 0:
        raise ValueError(f'degree must be non-negative, got {degree}')
    return ['intercept'] + ['x' if power == 1 else f'x{power}' for power in range(1, degree + 1)]


def design_matrix(x, degree: int) -> np.ndarray:
    """Polynomial design matrix with columns ``1, x, x**2, ..., x**degree``."""
    x = np.asarray(x, dtype=float).ravel()
    return np.column_stack([x**power for power in range(degree + 1)])


def check_counts(y) -> np.ndarray:
    """Return ``y`` as a float array after checking it holds non-negative integers."""
    y = np.asarray(y, dtype=float).ravel()
    if y.size == 0:
        raise ValueError('Count vector is empty')
    if not np.all(np.isfinite(y)):
        raise ValueError('Counts must be finite')
    if np.any(y < 0) or np.any(y != np.round(y)):
        raise ValueError('Counts must be non-negative integers')
    return y


def aic(loglik: float, n_params: int) -> float:
    return float(2 * n_params - 2 * loglik)
