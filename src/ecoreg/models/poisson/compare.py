"""Side-by-side comparison of Poisson fits from different methods."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from .fit import PoissonFit


def compare_fits(fits: Iterable[PoissonFit]) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Return ``(tidy, wide)`` tables of estimates.

    ``tidy`` has one row per (method, term); ``wide`` has one row per term and
    one estimate column per method plus the largest absolute difference
    between methods.
    """
    fits = list(fits)
    if not fits:
        raise ValueError('No fits to compare')
    terms = list(fits[0].coef)
    for fit in fits[1:]:
        if list(fit.coef) != terms:
            raise ValueError(
                f"Fit '{fit.method}' has terms {list(fit.coef)}, expected {terms}"
            )

    tidy = pd.concat([fit.to_frame() for fit in fits], ignore_index=True)
    wide = tidy.pivot(index='term', columns='method', values='estimate')
    wide = wide.loc[terms, [fit.method for fit in fits]]
    wide['max_abs_diff'] = wide.max(axis=1) - wide.min(axis=1)
    wide = wide.reset_index()
    wide.columns.name = None
    return tidy, wide


def fit_summary(fits: Iterable[PoissonFit]) -> pd.DataFrame:
    """One row per method with log-likelihood, AIC and convergence flag."""
    return pd.DataFrame(
        [
            {
                'method': fit.method,
                'loglik': fit.loglik,
                'aic': fit.aic,
                'converged': fit.converged,
                'n_obs': fit.n_obs,
            }
            for fit in fits
        ]
    )
