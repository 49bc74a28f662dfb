"""Unit tests for reports plots module."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from ecoreg.reports.plots import (
    plot_correlogram,
    plot_count_grid,
    plot_counts_vs_elevation,
    plot_likelihood_profile,
    plot_mcmc_traces,
    plot_region_map,
)


@pytest.fixture
def cells() -> pd.DataFrame:
    xx, yy = np.meshgrid([25.0, 75.0, 125.0], [25.0, 75.0])
    return pd.DataFrame(
        {
            'x': xx.ravel(),
            'y': yy.ravel(),
            'elev': [120.0, 125.0, 131.0, 118.0, 122.0, 140.0],
            'count': [3, 5, 8, 2, 4, 1],
        }
    )


@pytest.fixture
def curves() -> dict[str, pd.DataFrame]:
    x = np.linspace(-2, 2, 20)
    mean = np.exp(1.0 + 0.3 * x - 0.4 * x**2)
    return {
        'glm': pd.DataFrame({'x': x, 'mean': mean, 'lower': mean * 0.9, 'upper': mean * 1.1}),
        'optim': pd.DataFrame({'x': x, 'mean': mean}),
    }


class TestTreePlots:
    def test_count_grid(self, cells: pd.DataFrame, tmp_path: Path):
        result = plot_count_grid(cells, tmp_path / 'counts.png')

        assert result.exists()
        assert result.suffix == '.png'
        assert result.stat().st_size > 0

    def test_elevation_grid(self, cells: pd.DataFrame, tmp_path: Path):
        result = plot_count_grid(cells, tmp_path / 'nested' / 'elev.png', value='elev')

        assert result.exists()

    def test_counts_vs_elevation(self, curves, tmp_path: Path):
        x = np.linspace(-2, 2, 30)
        y = np.arange(30) % 5

        result = plot_counts_vs_elevation(x, y, curves, tmp_path / 'fit.png')

        assert result.exists()

    def test_likelihood_profile(self, tmp_path: Path):
        values = np.linspace(-1, 1, 21)
        profile = pd.DataFrame(
            {'param': 'x2', 'value': values, 'negloglik': values**2 + 10, 'delta': values**2}
        )

        result = plot_likelihood_profile(profile, tmp_path / 'profile.png')

        assert result.exists()

    def test_mcmc_traces(self, tmp_path: Path):
        samples = np.random.default_rng(0).normal(size=(2, 50, 3))

        result = plot_mcmc_traces(samples, ['intercept', 'x', 'x2'], tmp_path / 'trace.png')

        assert result.exists()

    def test_mcmc_traces_shape_mismatch(self, tmp_path: Path):
        samples = np.zeros((2, 50, 3))

        with pytest.raises(ValueError, match='samples'):
            plot_mcmc_traces(samples, ['intercept', 'x'], tmp_path / 'trace.png')


class TestBirdPlots:
    def test_region_map(self, tmp_path: Path):
        regions = pd.DataFrame(
            {'x': [5.0, 15.0, 5.0, 15.0], 'y': [5.0, 5.0, 15.0, 15.0], 'p': [0.1, 0.4, 0.6, 0.9]}
        )

        result = plot_region_map(regions, 'p', tmp_path / 'map.png')

        assert result.exists()

    def test_correlogram(self, tmp_path: Path):
        table = pd.DataFrame(
            {
                'lower': [0.0, 10.0, 20.0],
                'upper': [10.0, 20.0, 30.0],
                'morans_i': [0.3, 0.1, np.nan],
            }
        )

        result = plot_correlogram({'glm': table, 'gam': table * 0.5}, tmp_path / 'corr.png')

        assert result.exists()
