"""Figures and persisted artifacts for analysis runs."""

from .artifacts import create_run_dir, generate_run_id, write_run_artifacts
from .plots import (
    plot_correlogram,
    plot_count_grid,
    plot_counts_vs_elevation,
    plot_likelihood_profile,
    plot_mcmc_traces,
    plot_region_map,
)

__all__ = [
    'create_run_dir',
    'generate_run_id',
    'write_run_artifacts',
    'plot_correlogram',
    'plot_count_grid',
    'plot_counts_vs_elevation',
    'plot_likelihood_profile',
    'plot_mcmc_traces',
    'plot_region_map',
]
