"""Deterministic sample datasets standing in for the bundled course data.

The tree plot mimics a 1000 m x 500 m tropical forest census with a 5 m
elevation raster; the bird atlas is a square grid of survey regions with
environmental covariates and a spatially structured presence signal.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from ..utils import get_logger, json_log
from .scaling import fit_scaler
from .trees import Grid

log = get_logger(__name__)

TREE_PLOT = Grid(xmin=0.0, xmax=1000.0, ymin=0.0, ymax=500.0, cell_size=5.0)

# log-intensity per square metre as a quadratic in standardized elevation
DEFAULT_TREE_COEFS = (-5.0, 0.4, -0.6)


def simulate_elevation(grid: Grid = TREE_PLOT, seed: int = 0) -> pd.DataFrame:
    """Return a long-format raster (``x``, ``y``, ``elev``) sampled at cell centres."""
    rng = np.random.default_rng(seed)
    x_centres, y_centres = grid.centres()
    xx, yy = np.meshgrid(x_centres, y_centres)
    width = grid.xmax - grid.xmin

    elev = 120.0 + 0.02 * (xx - grid.xmin) + 0.01 * (yy - grid.ymin)
    for _ in range(6):
        cx = rng.uniform(grid.xmin, grid.xmax)
        cy = rng.uniform(grid.ymin, grid.ymax)
        amplitude = rng.uniform(-12.0, 18.0)
        spread = rng.uniform(0.08, 0.25) * width
        elev += amplitude * np.exp(-((xx - cx) ** 2 + (yy - cy) ** 2) / (2 * spread**2))

    return pd.DataFrame({'x': xx.ravel(), 'y': yy.ravel(), 'elev': elev.ravel()})


def simulate_tree_plot(
    seed: int = 0,
    coefs: tuple[float, float, float] = DEFAULT_TREE_COEFS,
    grid: Grid = TREE_PLOT,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Return ``(points, raster)`` from an inhomogeneous Poisson process on elevation."""
    rng = np.random.default_rng(seed)
    raster = simulate_elevation(grid, seed=seed)
    z = fit_scaler(raster['elev'], name='elev').transform(raster['elev'])
    b0, b1, b2 = coefs
    intensity = np.exp(b0 + b1 * z + b2 * z**2)
    expected = intensity * grid.cell_size**2
    n_per_pixel = rng.poisson(expected)

    half = grid.cell_size / 2
    px = np.repeat(raster['x'].to_numpy(), n_per_pixel)
    py = np.repeat(raster['y'].to_numpy(), n_per_pixel)
    px = px + rng.uniform(-half, half, size=px.size)
    py = py + rng.uniform(-half, half, size=py.size)
    points = pd.DataFrame(
        {
            'x': np.clip(px, grid.xmin, grid.xmax),
            'y': np.clip(py, grid.ymin, grid.ymax),
        }
    )
    log.info(
        json_log(
            'sample.tree_plot',
            component='data.sample',
            seed=seed,
            trees=int(len(points)),
            pixels=int(len(raster)),
        )
    )
    return points, raster


def simulate_bird_atlas(
    seed: int = 0,
    n_side: int = 20,
    cell_km: float = 10.0,
) -> pd.DataFrame:
    """Return one row per square survey region with covariates and a presence flag."""
    if n_side < 2:
        raise ValueError('n_side must be at least 2')
    rng = np.random.default_rng(seed)
    centres = (np.arange(n_side) + 0.5) * cell_km
    xx, yy = np.meshgrid(centres, centres)
    x = xx.ravel()
    y = yy.ravel()
    extent = n_side * cell_km
    u = x / extent
    v = y / extent

    elevation = 300.0 + 900.0 * v + 150.0 * np.sin(3 * np.pi * u) + rng.normal(0, 40.0, x.size)
    temperature = 14.0 - 0.0065 * elevation + rng.normal(0, 0.4, x.size)
    ndvi = np.clip(0.55 + 0.15 * np.cos(2 * np.pi * u) + rng.normal(0, 0.06, x.size), 0.0, 1.0)

    def z(values: np.ndarray) -> np.ndarray:
        return (values - values.mean()) / values.std(ddof=1)

    # additive in x and y, orthogonal to the covariate patterns along x
    spatial_trend = 1.6 * np.sin(2 * np.pi * u) + 0.8 * np.sin(2 * np.pi * v)
    eta = -0.3 + 1.1 * z(temperature) + 0.6 * z(ndvi) + spatial_trend
    p = 1.0 / (1.0 + np.exp(-eta))
    presence = rng.binomial(1, p)

    table = pd.DataFrame(
        {
            'region_id': np.arange(x.size),
            'x': x,
            'y': y,
            'temperature': temperature,
            'ndvi': ndvi,
            'elevation': elevation,
            'presence': presence,
        }
    )
    log.info(
        json_log(
            'sample.bird_atlas',
            component='data.sample',
            seed=seed,
            regions=int(len(table)),
            prevalence=float(presence.mean()),
        )
    )
    return table


def write_sample_data(output_dir: str | Path, seed: int = 0) -> dict[str, Path]:
    """Write the sample tree and bird datasets as CSVs into ``output_dir``."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    points, raster = simulate_tree_plot(seed=seed)
    regions = simulate_bird_atlas(seed=seed)

    paths = {
        'tree_points': output_dir / 'tree_points.csv',
        'elevation': output_dir / 'elevation.csv',
        'bird_regions': output_dir / 'bird_regions.csv',
    }
    points.to_csv(paths['tree_points'], index=False)
    raster.to_csv(paths['elevation'], index=False)
    regions.to_csv(paths['bird_regions'], index=False)

    log.info(
        json_log(
            'sample.written',
            component='data.sample',
            output_dir=str(output_dir),
            files=[str(p) for p in paths.values()],
        )
    )
    return paths
