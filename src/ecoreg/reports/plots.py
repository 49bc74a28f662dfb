"""
Figures for the tree-count and bird-presence analyses.

Uses Agg backend for CI/headless compatibility.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import matplotlib

matplotlib.use('Agg')  # Headless backend for CI
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..utils.logging import get_logger, json_log

log = get_logger(__name__)

# Consistent styling
FIGURE_DPI = 150
METHOD_COLORS = {
    'glm': '#1f77b4',
    'optim': '#ff7f0e',
    'mcmc': '#2ca02c',
    'gam': '#d62728',
}
COLOR_OBSERVED = '#7f7f7f'


def _save_figure(fig: plt.Figure, path: Path) -> Path:
    """Save figure with consistent settings."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=FIGURE_DPI, bbox_inches='tight', facecolor='white')
    plt.close(fig)
    log.info(json_log('plots.saved', component='reports', path=str(path)))
    return path


def _method_color(method: str, index: int) -> str:
    return METHOD_COLORS.get(method, f'C{index}')


# =============================================================================
# Tree counts
# =============================================================================


def plot_count_grid(
    cells: pd.DataFrame,
    output_path: Path,
    value: str = 'count',
    title: str | None = None,
) -> Path:
    """Raster image of a per-cell value (tree count or elevation) at cell centres."""
    pivot = cells.pivot_table(index='y', columns='x', values=value)
    fig, ax = plt.subplots(figsize=(10, 5))
    x = pivot.columns.to_numpy(dtype=float)
    y = pivot.index.to_numpy(dtype=float)
    mesh = ax.pcolormesh(x, y, pivot.to_numpy(), shading='nearest', cmap='viridis')
    fig.colorbar(mesh, ax=ax, label=value)
    ax.set_aspect('equal')
    ax.set_xlabel('x (m)', fontsize=11)
    ax.set_ylabel('y (m)', fontsize=11)
    ax.set_title(title or f'{value} per cell', fontsize=12, fontweight='bold')
    return _save_figure(fig, output_path)


def plot_counts_vs_elevation(
    x,
    y,
    curves: Mapping[str, pd.DataFrame],
    output_path: Path,
    xlabel: str = 'Elevation (standardized)',
) -> Path:
    """
    Observed counts with one fitted mean curve per method.

    Args:
        x: Predictor value per cell
        y: Observed count per cell
        curves: Method name -> DataFrame with ``x``, ``mean`` and optional
            ``lower``/``upper`` columns
        output_path: Path to save figure

    Returns:
        Path to saved figure
    """
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.scatter(x, y, s=12, color=COLOR_OBSERVED, alpha=0.6, label='observed')

    for i, (method, curve) in enumerate(curves.items()):
        curve = curve.sort_values('x')
        color = _method_color(method, i)
        ax.plot(curve['x'], curve['mean'], color=color, linewidth=2, label=method)
        if {'lower', 'upper'} <= set(curve.columns):
            ax.fill_between(curve['x'], curve['lower'], curve['upper'], color=color, alpha=0.15)

    ax.set_xlabel(xlabel, fontsize=11)
    ax.set_ylabel('Trees per cell', fontsize=11)
    ax.set_title('Tree counts against elevation', fontsize=12, fontweight='bold')
    ax.legend(loc='best')
    ax.grid(alpha=0.3)
    return _save_figure(fig, output_path)


def plot_likelihood_profile(profile: pd.DataFrame, output_path: Path) -> Path:
    """Negative log-likelihood along one coefficient with the 95% cut-off (delta = 1.92)."""
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(profile['value'], profile['delta'], color=METHOD_COLORS['optim'], linewidth=2)
    ax.axhline(1.92, color='k', linestyle='--', linewidth=1, alpha=0.5)
    best = profile.loc[profile['delta'].idxmin(), 'value']
    ax.axvline(best, color='k', linestyle=':', linewidth=1, alpha=0.5)
    ax.set_xlabel(str(profile['param'].iloc[0]), fontsize=11)
    ax.set_ylabel('Negative log-likelihood (minus minimum)', fontsize=11)
    ax.set_title('Likelihood profile', fontsize=12, fontweight='bold')
    ax.grid(alpha=0.3)
    return _save_figure(fig, output_path)


def plot_mcmc_traces(samples: np.ndarray, names: list[str], output_path: Path) -> Path:
    """
    Trace and pooled posterior histogram per coefficient.

    Args:
        samples: Draws shaped (chain, draw, coef)
        names: Coefficient names
        output_path: Path to save figure

    Returns:
        Path to saved figure
    """
    samples = np.asarray(samples, dtype=float)
    if samples.ndim != 3 or samples.shape[2] != len(names):
        raise ValueError('samples must be shaped (chain, draw, coef) matching names')

    n_coef = len(names)
    fig, axes = plt.subplots(n_coef, 2, figsize=(11, 2.6 * n_coef), squeeze=False)
    for j, name in enumerate(names):
        trace_ax, hist_ax = axes[j]
        for chain in range(samples.shape[0]):
            trace_ax.plot(samples[chain, :, j], linewidth=0.6, alpha=0.8, label=f'chain {chain}')
            hist_ax.hist(samples[chain, :, j], bins=40, alpha=0.4, density=True)
        trace_ax.set_ylabel(name, fontsize=10)
        hist_ax.axvline(samples[:, :, j].mean(), color='k', linestyle='--', linewidth=1)
    axes[0][0].set_title('Trace', fontsize=11, fontweight='bold')
    axes[0][1].set_title('Posterior density', fontsize=11, fontweight='bold')
    axes[-1][0].set_xlabel('Draw', fontsize=10)
    fig.tight_layout()
    return _save_figure(fig, output_path)


# =============================================================================
# Bird presence
# =============================================================================


def plot_region_map(
    regions: pd.DataFrame,
    value: str,
    output_path: Path,
    coords: tuple[str, str] = ('x', 'y'),
    title: str | None = None,
) -> Path:
    """Survey-region centroids coloured by presence or predicted probability."""
    x_col, y_col = coords
    fig, ax = plt.subplots(figsize=(7, 6))
    points = ax.scatter(
        regions[x_col],
        regions[y_col],
        c=regions[value],
        cmap='RdYlGn',
        vmin=0.0,
        vmax=1.0,
        s=45,
        marker='s',
        edgecolors='none',
    )
    fig.colorbar(points, ax=ax, label=value)
    ax.set_aspect('equal')
    ax.set_xlabel(x_col, fontsize=11)
    ax.set_ylabel(y_col, fontsize=11)
    ax.set_title(title or value, fontsize=12, fontweight='bold')
    return _save_figure(fig, output_path)


def plot_correlogram(correlograms: Mapping[str, pd.DataFrame], output_path: Path) -> Path:
    """Moran's I of residuals per distance class, one line per model."""
    fig, ax = plt.subplots(figsize=(8, 5))
    for i, (method, table) in enumerate(correlograms.items()):
        centres = (table['lower'] + table['upper']) / 2
        ax.plot(
            centres,
            table['morans_i'],
            marker='o',
            linewidth=2,
            color=_method_color(method, i),
            label=method,
        )
    ax.axhline(0.0, color='k', linewidth=1, alpha=0.5)
    ax.set_xlabel('Distance class centre', fontsize=11)
    ax.set_ylabel("Moran's I of residuals", fontsize=11)
    ax.set_title('Residual spatial correlogram', fontsize=12, fontweight='bold')
    ax.legend(loc='best')
    ax.grid(alpha=0.3)
    return _save_figure(fig, output_path)
