"""Logistic GAM with B-spline smooths of the region centroid coordinates.

The spatial surface is additive, ``s(x) + s(y)``, with one penalised
B-spline basis per coordinate from ``statsmodels.gam``.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.gam.api import BSplines, GLMGam

from ...config.birds import DEFAULT_ALPHA_GRID
from ...utils import get_logger, json_log
from .fit import SpatialFit, build_formula

log = get_logger(__name__)


def _smoother(df: pd.DataFrame, coords: Sequence[str], df_spline: int, degree: int) -> BSplines:
    return BSplines(
        df[list(coords)].to_numpy(dtype=float),
        df=[df_spline] * len(coords),
        degree=[degree] * len(coords),
        variable_names=list(coords),
    )


def _fit_once(formula: str, df: pd.DataFrame, smoother: BSplines, alpha: float, n_smooths: int):
    model = GLMGam.from_formula(
        formula,
        data=df,
        smoother=smoother,
        alpha=[alpha] * n_smooths,
        family=sm.families.Binomial(),
    )
    return model.fit()


def fit_spatial_gam(
    df: pd.DataFrame,
    response: str,
    predictors: Sequence[str],
    coords: Sequence[str] = ('x', 'y'),
    df_spline: int = 8,
    degree: int = 3,
    alpha: float | None = None,
    alpha_grid: Sequence[float] = DEFAULT_ALPHA_GRID,
):
    """Fit the spatial GAM and return ``(SpatialFit, results)``.

    With ``alpha=None`` the penalty weight is picked from ``alpha_grid`` by AIC;
    a pick at either end of the grid is logged as a warning.
    """
    if df_spline <= degree:
        raise ValueError(f'df_spline ({df_spline}) must exceed degree ({degree})')
    formula = build_formula(response, predictors)
    smoother = _smoother(df, coords, df_spline, degree)
    n_smooths = len(coords)

    candidates = [alpha] if alpha is not None else list(alpha_grid)
    if not candidates:
        raise ValueError('alpha_grid must contain at least one penalty weight')

    selection = []
    best = None
    best_alpha = None
    for candidate in candidates:
        results = _fit_once(formula, df, smoother, float(candidate), n_smooths)
        selection.append({'alpha': float(candidate), 'aic': float(results.aic)})
        log.debug(
            json_log(
                'spatial.gam.candidate',
                component='models.spatial',
                alpha=float(candidate),
                aic=float(results.aic),
            )
        )
        if best is None or results.aic < best.aic:
            best, best_alpha = results, float(candidate)

    on_boundary = len(candidates) > 1 and best_alpha in (min(candidates), max(candidates))
    if on_boundary:
        log.warning(
            json_log(
                'spatial.gam.alpha_on_boundary',
                component='models.spatial',
                alpha=best_alpha,
                grid_min=float(min(candidates)),
                grid_max=float(max(candidates)),
            )
        )

    smooth_names = set(smoother.col_names)
    parametric = [name for name in best.params.index if name not in smooth_names]
    fit = SpatialFit(
        method='gam',
        coef={name: float(best.params[name]) for name in parametric},
        se={name: float(best.bse[name]) for name in parametric},
        aic=float(best.aic),
        deviance=float(best.deviance),
        n_obs=int(best.nobs),
        fitted=np.asarray(best.fittedvalues, dtype=float),
        extra={
            'formula': f'{formula} + s({coords[0]}) + s({coords[1]})',
            'alpha': best_alpha,
            'alpha_selection': selection,
            'alpha_on_boundary': on_boundary,
            'df_spline': df_spline,
            'degree': degree,
            'edf': float(np.sum(best.edf)) if hasattr(best, 'edf') else None,
            'null_deviance': float(best.null_deviance),
        },
    )
    log.info(
        json_log(
            'spatial.gam.completed',
            component='models.spatial',
            alpha=best_alpha,
            aic=fit.aic,
            coef=fit.coef,
        )
    )
    return fit, best


def predict_gam(results, df: pd.DataFrame, coords: Sequence[str] = ('x', 'y')) -> np.ndarray:
    """Predicted presence probabilities for the rows of ``df``."""
    exog_smooth = df[list(coords)].to_numpy(dtype=float)
    return np.asarray(results.predict(df, exog_smooth=exog_smooth), dtype=float)
