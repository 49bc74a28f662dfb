"""Bayesian Poisson regression sampled with PyMC.

Priors are independent ``Normal(0, prior_sd)`` on every coefficient. The
default ``prior_sd`` of 31.62 matches a ``dnorm(0, 0.001)`` precision prior.
"""

from __future__ import annotations

from typing import Any

import arviz as az
import numpy as np
import pandas as pd
import pymc as pm

from ...config import MCMCConfig
from ...utils import get_logger, json_log
from .fit import PoissonFit, aic, check_counts, coef_names, design_matrix
from .likelihood import poisson_negloglik

log = get_logger(__name__)

RHAT_THRESHOLD = 1.01


def build_poisson_model(y, x, degree: int = 2, prior_sd: float = 31.62) -> pm.Model:
    """Declare the log-linear Poisson model with vague normal priors."""
    y = check_counts(y).astype(int)
    X = design_matrix(x, degree)
    if X.shape[0] != y.size:
        raise ValueError(f'x has {X.shape[0]} rows but y has {y.size}')

    with pm.Model(coords={'coef': coef_names(degree), 'obs': np.arange(y.size)}) as model:
        beta = pm.Normal('beta', mu=0.0, sigma=prior_sd, dims='coef')
        lam = pm.Deterministic('lambda', pm.math.exp(pm.math.dot(X, beta)), dims='obs')
        pm.Poisson('y', mu=lam, observed=y, dims='obs')
    return model


def posterior_samples(idata) -> np.ndarray:
    """Coefficient draws as an array shaped ``(chain, draw, coef)``."""
    return idata.posterior['beta'].transpose('chain', 'draw', 'coef').to_numpy()


def summarize_posterior(idata, interval_prob: float = 0.95) -> pd.DataFrame:
    """Posterior mean, sd, equal-tailed interval, R-hat and bulk ESS per coefficient."""
    samples = posterior_samples(idata)
    names = [str(name) for name in idata.posterior['beta'].coords['coef'].to_numpy()]
    tail = (1.0 - interval_prob) / 2
    rows: list[dict[str, Any]] = []
    for j, name in enumerate(names):
        draws = samples[:, :, j]
        flat = draws.ravel()
        rows.append(
            {
                'term': name,
                'mean': float(flat.mean()),
                'sd': float(flat.std(ddof=1)),
                'lower': float(np.quantile(flat, tail)),
                'upper': float(np.quantile(flat, 1.0 - tail)),
                'r_hat': float(az.rhat(draws)) if draws.shape[0] > 1 else np.nan,
                'ess_bulk': float(az.ess(draws, method='bulk')),
            }
        )
    return pd.DataFrame(rows)


def fit_poisson_mcmc(y, x, config: MCMCConfig | None = None, degree: int = 2):
    """Sample the posterior and return ``(PoissonFit, InferenceData)``.

    ``PoissonFit.coef`` holds posterior means and ``se`` posterior standard
    deviations; intervals and convergence diagnostics live in ``extra``.
    """
    config = config or MCMCConfig()
    y_arr = check_counts(y)
    model = build_poisson_model(y_arr, x, degree=degree, prior_sd=config.prior_sd)

    log.info(
        json_log(
            'poisson.mcmc.start',
            component='models.poisson',
            chains=config.chains,
            draws=config.draws,
            tune=config.tune,
        )
    )
    with model:
        idata = pm.sample(
            draws=config.draws,
            tune=config.tune,
            chains=config.chains,
            cores=1,
            target_accept=config.target_accept,
            random_seed=config.seed,
            progressbar=False,
            compute_convergence_checks=False,
        )

    summary = summarize_posterior(idata, interval_prob=config.interval_prob)
    max_rhat = float(summary['r_hat'].max())
    if np.isfinite(max_rhat) and max_rhat > RHAT_THRESHOLD:
        log.warning(
            json_log(
                'poisson.mcmc.rhat_high',
                component='models.poisson',
                max_rhat=max_rhat,
                threshold=RHAT_THRESHOLD,
            )
        )

    coef = dict(zip(summary['term'], summary['mean'].astype(float), strict=True))
    loglik = -poisson_negloglik(list(coef.values()), y_arr, x)
    fit = PoissonFit(
        method='mcmc',
        coef=coef,
        se=dict(zip(summary['term'], summary['sd'].astype(float), strict=True)),
        loglik=loglik,
        aic=aic(loglik, degree + 1),
        converged=not (np.isfinite(max_rhat) and max_rhat > RHAT_THRESHOLD),
        n_obs=int(y_arr.size),
        extra={
            'interval_prob': config.interval_prob,
            'lower': dict(zip(summary['term'], summary['lower'].astype(float), strict=True)),
            'upper': dict(zip(summary['term'], summary['upper'].astype(float), strict=True)),
            'r_hat': dict(zip(summary['term'], summary['r_hat'].astype(float), strict=True)),
            'ess_bulk': dict(zip(summary['term'], summary['ess_bulk'].astype(float), strict=True)),
            'prior_sd': config.prior_sd,
        },
    )
    log.info(
        json_log(
            'poisson.mcmc.completed',
            component='models.poisson',
            coef=fit.coef,
            max_rhat=max_rhat,
        )
    )
    return fit, idata


def posterior_curve(idata, x_new, degree: int = 2, interval_prob: float = 0.95) -> pd.DataFrame:
    """Posterior mean and equal-tailed band of ``lambda`` over ``x_new``."""
    samples = posterior_samples(idata).reshape(-1, degree + 1)
    X_new = design_matrix(x_new, degree)
    lam = np.exp(samples @ X_new.T)
    tail = (1.0 - interval_prob) / 2
    return pd.DataFrame(
        {
            'x': np.asarray(x_new, dtype=float).ravel(),
            'mean': lam.mean(axis=0),
            'lower': np.quantile(lam, tail, axis=0),
            'upper': np.quantile(lam, 1.0 - tail, axis=0),
        }
    )
