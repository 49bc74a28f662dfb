"""Poisson log-linear regression fitted by GLM, direct likelihood and MCMC.

The MCMC functions live in :mod:`ecoreg.models.poisson.mcmc` and are not
imported here, so PyMC is only loaded when sampling is requested.
"""

from .compare import compare_fits, fit_summary
from .fit import PoissonFit, coef_names, design_matrix
from .glm import compare_degrees, fit_poisson_glm, predict_glm
from .likelihood import fit_poisson_optim, likelihood_profile, poisson_negloglik

__all__ = [
    'compare_fits',
    'fit_summary',
    'PoissonFit',
    'coef_names',
    'design_matrix',
    'compare_degrees',
    'fit_poisson_glm',
    'predict_glm',
    'fit_poisson_optim',
    'likelihood_profile',
    'poisson_negloglik',
]
