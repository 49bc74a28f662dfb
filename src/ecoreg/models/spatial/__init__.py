"""Presence/absence models with and without spatial smooth terms."""

from .correlogram import correlogram, morans_i
from .fit import SpatialFit, build_formula, classification_metrics, compare_spatial_models
from .gam import fit_spatial_gam, predict_gam
from .logistic import fit_logistic_glm

__all__ = [
    'correlogram',
    'morans_i',
    'SpatialFit',
    'build_formula',
    'classification_metrics',
    'compare_spatial_models',
    'fit_spatial_gam',
    'predict_gam',
    'fit_logistic_glm',
]
