"""Data loading, binning and scaling for ecoreg."""

from .birds import load_regions, prepare_regions, validate_regions
from .sample import (
    simulate_bird_atlas,
    simulate_elevation,
    simulate_tree_plot,
    write_sample_data,
)
from .scaling import ScaledVariable, fit_scaler, standardize, standardize_columns
from .trees import (
    Grid,
    aggregate_raster,
    build_cell_table,
    count_points,
    load_elevation,
    load_tree_points,
)

__all__ = [
    'load_regions',
    'prepare_regions',
    'validate_regions',
    'simulate_bird_atlas',
    'simulate_elevation',
    'simulate_tree_plot',
    'write_sample_data',
    'ScaledVariable',
    'fit_scaler',
    'standardize',
    'standardize_columns',
    'Grid',
    'aggregate_raster',
    'build_cell_table',
    'count_points',
    'load_elevation',
    'load_tree_points',
]
