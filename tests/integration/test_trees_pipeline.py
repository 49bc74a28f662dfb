"""Integration tests for the tree-count analysis end-to-end."""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from ecoreg.config import load_trees_config
from ecoreg.data import write_sample_data
from ecoreg.pipeline import run_tree_analysis


@pytest.fixture
def trees_config_path(tmp_path: Path) -> Path:
    """Sample data plus a config pointing at it, relative to the config directory."""
    write_sample_data(tmp_path / 'data', seed=11)
    config_path = tmp_path / 'configs' / 'trees.yaml'
    config_path.parent.mkdir()
    config_path.write_text(
        '\n'.join(
            [
                'paths:',
                '  points_csv: ../data/tree_points.csv',
                '  elevation_csv: ../data/elevation.csv',
                '  output_dir: ../artifacts',
                'grid:',
                '  cell_size: 50.0',
                'model:',
                '  degree: 2',
                'optimizer:',
                '  method: Nelder-Mead',
                '  maxiter: 5000',
            ]
        ),
        encoding='utf-8',
    )
    return config_path


def test_tree_analysis_without_mcmc(trees_config_path: Path):
    config = load_trees_config(trees_config_path)

    result = run_tree_analysis(config, skip_mcmc=True)

    assert set(result.fits) == {'glm', 'optim'}
    assert len(result.cells) == 200
    assert result.cells['count'].sum() > 0

    glm, optim = result.fits['glm'], result.fits['optim']
    for term in glm.coef:
        assert optim.coef[term] == pytest.approx(glm.coef[term], abs=5e-3)
    assert optim.loglik == pytest.approx(glm.loglik, abs=1e-3)
    # simulated intensity is concave in elevation
    assert glm.coef['x2'] < 0

    comparison = result.comparison
    assert list(comparison['term']) == ['intercept', 'x', 'x2']
    assert (comparison['max_abs_diff'] < 5e-3).all()


def test_tree_analysis_writes_artifacts(trees_config_path: Path):
    config = load_trees_config(trees_config_path)

    result = run_tree_analysis(config, skip_mcmc=True)

    run_dir = result.run_dir
    assert run_dir.parent == trees_config_path.parent.parent / 'artifacts'
    assert run_dir.name.startswith('trees.')
    for name in (
        'metadata.json',
        'cells.csv',
        'coefficients.csv',
        'comparison.csv',
        'fit_summary.csv',
        'degree_comparison.csv',
        'likelihood_profile.csv',
        'curve_glm.csv',
        'curve_optim.csv',
        'glm_results.joblib',
    ):
        assert (run_dir / name).exists(), name

    metadata = json.loads((run_dir / 'metadata.json').read_text(encoding='utf-8'))
    assert metadata['analysis'] == 'trees'
    assert metadata['n_cells'] == 200
    assert set(metadata['fits']) == {'glm', 'optim'}

    assert set(result.figures) == {'counts', 'elevation', 'fitted_curves', 'likelihood_profile'}
    assert all(path.exists() for path in result.figures.values())

    degrees = pd.read_csv(run_dir / 'degree_comparison.csv')
    assert list(degrees['degree']) == [1, 2]
    assert degrees['delta_aic'].min() == 0.0

    profile = pd.read_csv(run_dir / 'likelihood_profile.csv')
    assert (profile['param'] == 'x2').all()
    assert profile['delta'].min() == pytest.approx(0.0, abs=1e-2)


def test_tree_analysis_runs_increment(trees_config_path: Path):
    config = load_trees_config(trees_config_path)

    first = run_tree_analysis(config, skip_mcmc=True)
    second = run_tree_analysis(config, skip_mcmc=True)

    assert first.run_dir != second.run_dir
    np.testing.assert_allclose(
        list(first.fits['glm'].coef.values()),
        list(second.fits['glm'].coef.values()),
    )
