"""Poisson regression by direct minimisation of the negative log-likelihood."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd
from scipy import optimize, stats
from statsmodels.tools.numdiff import approx_hess

from ...utils import get_logger, json_log
from .fit import PoissonFit, aic, check_counts, coef_names, design_matrix

log = get_logger(__name__)


def poisson_negloglik(params: Sequence[float], y, x) -> float:
    """Negative log-likelihood of counts ``y`` under ``lambda = exp(X @ params)``.

    The polynomial degree is ``len(params) - 1``.
    """
    params = np.asarray(params, dtype=float)
    X = design_matrix(x, params.size - 1)
    mu = np.exp(X @ params)
    return float(-np.sum(stats.poisson.logpmf(y, mu)))


def _default_init(y: np.ndarray, degree: int) -> np.ndarray:
    init = np.zeros(degree + 1)
    init[0] = np.log(max(y.mean(), 1e-8))
    return init


def fit_poisson_optim(
    y,
    x,
    degree: int = 2,
    init: Sequence[float] | None = None,
    method: str = 'Nelder-Mead',
    maxiter: int = 5000,
) -> PoissonFit:
    """Minimise :func:`poisson_negloglik` with ``scipy.optimize.minimize``.

    Standard errors come from the inverse of a finite-difference Hessian at the
    optimum. A non-converged optimizer run is returned with ``converged=False``.
    """
    y = check_counts(y)
    x = np.asarray(x, dtype=float).ravel()
    if x.size != y.size:
        raise ValueError(f'x has {x.size} rows but y has {y.size}')

    start = _default_init(y, degree) if init is None else np.asarray(init, dtype=float)
    if start.size != degree + 1:
        raise ValueError(f'init needs {degree + 1} values, got {start.size}')

    options: dict[str, float] = {'maxiter': maxiter}
    if method == 'Nelder-Mead':
        options.update(xatol=1e-8, fatol=1e-10, maxfev=maxiter * 4)

    def objective(params: np.ndarray) -> float:
        return poisson_negloglik(params, y, x)

    result = optimize.minimize(objective, start, method=method, options=options)
    if not result.success:
        log.warning(
            json_log(
                'poisson.optim.not_converged',
                component='models.poisson',
                method=method,
                detail=str(result.message),
            )
        )

    names = coef_names(degree)
    hessian = approx_hess(result.x, objective)
    try:
        cov = np.linalg.inv(hessian)
        se = np.sqrt(np.diag(cov))
    except np.linalg.LinAlgError:
        log.warning(
            json_log('poisson.optim.singular_hessian', component='models.poisson', method=method)
        )
        se = np.full(degree + 1, np.nan)

    loglik = -float(result.fun)
    fit = PoissonFit(
        method='optim',
        coef=dict(zip(names, map(float, result.x), strict=True)),
        se=dict(zip(names, map(float, se), strict=True)),
        loglik=loglik,
        aic=aic(loglik, degree + 1),
        converged=bool(result.success),
        n_obs=int(y.size),
        extra={
            'optimizer': method,
            'n_iterations': int(getattr(result, 'nit', 0)),
            'n_evaluations': int(getattr(result, 'nfev', 0)),
            'message': str(result.message),
        },
    )
    log.info(
        json_log(
            'poisson.optim.completed',
            component='models.poisson',
            method=method,
            coef=fit.coef,
            negloglik=float(result.fun),
        )
    )
    return fit


def likelihood_profile(
    y,
    x,
    fit: PoissonFit,
    param: str,
    width: float | None = None,
    n: int = 101,
) -> pd.DataFrame:
    """Negative log-likelihood along one coefficient with the others held at ``fit``."""
    if param not in fit.coef:
        raise ValueError(f"Unknown coefficient '{param}', expected one of {list(fit.coef)}")
    y = check_counts(y)
    index = list(fit.coef).index(param)
    centre = fit.coef[param]
    if width is None:
        se = fit.se.get(param, np.nan)
        width = 4 * se if np.isfinite(se) and se > 0 else 1.0

    values = np.linspace(centre - width, centre + width, n)
    params = fit.params.copy()
    nll = []
    for value in values:
        params[index] = value
        nll.append(poisson_negloglik(params, y, x))
    nll = np.asarray(nll)
    return pd.DataFrame(
        {
            'param': param,
            'value': values,
            'negloglik': nll,
            'delta': nll - nll.min(),
        }
    )
