"""Maximum-likelihood Poisson regression through statsmodels' GLM (IRLS)."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import pandas as pd
import statsmodels.api as sm

from ...utils import get_logger, json_log
from .fit import PoissonFit, check_counts, coef_names, design_matrix

log = get_logger(__name__)


def fit_poisson_glm(y, x, degree: int = 2):
    """Fit ``log(lambda) = b0 + b1*x + ... + bk*x**k`` and return ``(PoissonFit, results)``."""
    y = check_counts(y)
    X = design_matrix(x, degree)
    if X.shape[0] != y.size:
        raise ValueError(f'x has {X.shape[0]} rows but y has {y.size}')
    names = coef_names(degree)

    results = sm.GLM(y, X, family=sm.families.Poisson()).fit()

    fit = PoissonFit(
        method='glm',
        coef=dict(zip(names, map(float, results.params), strict=True)),
        se=dict(zip(names, map(float, results.bse), strict=True)),
        loglik=float(results.llf),
        aic=float(results.aic),
        converged=bool(getattr(results, 'converged', True)),
        n_obs=int(y.size),
        extra={
            'deviance': float(results.deviance),
            'null_deviance': float(results.null_deviance),
            'df_resid': float(results.df_resid),
        },
    )
    log.info(
        json_log(
            'poisson.glm.completed',
            component='models.poisson',
            degree=degree,
            coef=fit.coef,
            aic=fit.aic,
        )
    )
    return fit, results


def predict_glm(results, x_new, degree: int = 2, alpha: float = 0.05) -> pd.DataFrame:
    """Expected counts with a confidence band built on the link scale."""
    X_new = design_matrix(x_new, degree)
    frame = results.get_prediction(X_new).summary_frame(alpha=alpha)
    return pd.DataFrame(
        {
            'x': np.asarray(x_new, dtype=float).ravel(),
            'mean': frame['mean'].to_numpy(),
            'lower': frame['mean_ci_lower'].to_numpy(),
            'upper': frame['mean_ci_upper'].to_numpy(),
        }
    )


def compare_degrees(y, x, degrees: Iterable[int] = (1, 2)) -> pd.DataFrame:
    """AIC and deviance of polynomial Poisson GLMs of increasing degree."""
    rows = []
    for degree in degrees:
        fit, _ = fit_poisson_glm(y, x, degree=degree)
        rows.append(
            {
                'degree': degree,
                'n_params': degree + 1,
                'loglik': fit.loglik,
                'aic': fit.aic,
                'deviance': fit.extra['deviance'],
            }
        )
    table = pd.DataFrame(rows)
    table['delta_aic'] = table['aic'] - table['aic'].min()
    return table
