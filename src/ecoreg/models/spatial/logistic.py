"""Non-spatial logistic regression of presence on environmental covariates."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf

from ...utils import get_logger, json_log
from .fit import SpatialFit, build_formula

log = get_logger(__name__)


def fit_logistic_glm(df: pd.DataFrame, response: str, predictors: Sequence[str]):
    """Fit a binomial GLM with logit link and return ``(SpatialFit, results)``."""
    formula = build_formula(response, predictors)
    log.info(json_log('spatial.glm.start', component='models.spatial', formula=formula))
    results = smf.glm(formula=formula, data=df, family=sm.families.Binomial()).fit()

    fit = SpatialFit(
        method='glm',
        coef={name: float(value) for name, value in results.params.items()},
        se={name: float(value) for name, value in results.bse.items()},
        aic=float(results.aic),
        deviance=float(results.deviance),
        n_obs=int(results.nobs),
        fitted=np.asarray(results.fittedvalues, dtype=float),
        extra={
            'formula': formula,
            'null_deviance': float(results.null_deviance),
            'pvalues': {name: float(value) for name, value in results.pvalues.items()},
        },
    )
    log.info(
        json_log(
            'spatial.glm.completed',
            component='models.spatial',
            aic=fit.aic,
            coef=fit.coef,
        )
    )
    return fit, results
