"""Binning of a tree point pattern and an elevation raster onto a grid of cells."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from ..utils import get_logger, json_log

log = get_logger(__name__)

POINT_COLUMNS = ('x', 'y')
RASTER_COLUMNS = ('x', 'y', 'elev')


@dataclass(frozen=True)
class Grid:
    """Regular square-cell grid over a rectangular plot."""

    xmin: float
    xmax: float
    ymin: float
    ymax: float
    cell_size: float

    def __post_init__(self) -> None:
        if self.cell_size <= 0:
            raise ValueError(f'cell_size must be positive, got {self.cell_size}')
        if self.xmax <= self.xmin or self.ymax <= self.ymin:
            raise ValueError(
                f'Empty grid extent: x=[{self.xmin}, {self.xmax}], y=[{self.ymin}, {self.ymax}]'
            )

    @property
    def nx(self) -> int:
        return int(np.ceil((self.xmax - self.xmin) / self.cell_size - 1e-9))

    @property
    def ny(self) -> int:
        return int(np.ceil((self.ymax - self.ymin) / self.cell_size - 1e-9))

    @property
    def n_cells(self) -> int:
        return self.nx * self.ny

    def edges(self) -> tuple[np.ndarray, np.ndarray]:
        x_edges = self.xmin + np.arange(self.nx + 1) * self.cell_size
        y_edges = self.ymin + np.arange(self.ny + 1) * self.cell_size
        x_edges[-1] = self.xmax
        y_edges[-1] = self.ymax
        return x_edges, y_edges

    def centres(self) -> tuple[np.ndarray, np.ndarray]:
        x_edges, y_edges = self.edges()
        return (x_edges[:-1] + x_edges[1:]) / 2, (y_edges[:-1] + y_edges[1:]) / 2


def _require_columns(df: pd.DataFrame, columns: tuple[str, ...], what: str) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(f'{what} is missing required columns: {missing}')


def _inside(df: pd.DataFrame, grid: Grid) -> np.ndarray:
    x = df['x'].to_numpy(dtype=float)
    y = df['y'].to_numpy(dtype=float)
    return (x >= grid.xmin) & (x <= grid.xmax) & (y >= grid.ymin) & (y <= grid.ymax)


def count_points(points: pd.DataFrame, grid: Grid) -> np.ndarray:
    """Return an ``(ny, nx)`` integer array of points per cell.

    Points on the upper plot edge fall in the last cell; points outside the
    extent are dropped.
    """
    _require_columns(points, POINT_COLUMNS, 'Point table')
    inside = _inside(points, grid)
    n_outside = int((~inside).sum())
    if n_outside:
        log.info(
            json_log(
                'trees.points_outside_extent',
                component='data.trees',
                dropped=n_outside,
                total=int(len(points)),
            )
        )
    x_edges, y_edges = grid.edges()
    counts, _, _ = np.histogram2d(
        points.loc[inside, 'y'].to_numpy(dtype=float),
        points.loc[inside, 'x'].to_numpy(dtype=float),
        bins=[y_edges, x_edges],
    )
    return counts.astype(int)


def aggregate_raster(raster: pd.DataFrame, grid: Grid, value: str = 'elev') -> np.ndarray:
    """Return an ``(ny, nx)`` array with the mean pixel value per cell (NaN when empty)."""
    _require_columns(raster, ('x', 'y', value), 'Raster table')
    inside = _inside(raster, grid)
    subset = raster.loc[inside]
    x_edges, y_edges = grid.edges()
    ys = subset['y'].to_numpy(dtype=float)
    xs = subset['x'].to_numpy(dtype=float)
    totals, _, _ = np.histogram2d(
        ys, xs, bins=[y_edges, x_edges], weights=subset[value].to_numpy(dtype=float)
    )
    n_pixels, _, _ = np.histogram2d(ys, xs, bins=[y_edges, x_edges])
    with np.errstate(invalid='ignore', divide='ignore'):
        means = totals / n_pixels
    means[n_pixels == 0] = np.nan
    return means


def build_cell_table(points: pd.DataFrame, raster: pd.DataFrame, grid: Grid) -> pd.DataFrame:
    """Return one row per grid cell with its centre, mean elevation and tree count."""
    counts = count_points(points, grid)
    elev = aggregate_raster(raster, grid, value='elev')
    x_centres, y_centres = grid.centres()
    xx, yy = np.meshgrid(x_centres, y_centres)

    table = pd.DataFrame(
        {
            'cell_id': np.arange(grid.n_cells),
            'x': xx.ravel(),
            'y': yy.ravel(),
            'elev': elev.ravel(),
            'count': counts.ravel(),
        }
    )
    missing_elev = table['elev'].isna()
    if missing_elev.any():
        trees_dropped = int(table.loc[missing_elev, 'count'].sum())
        level = logging.WARNING if trees_dropped else logging.INFO
        log.log(
            level,
            json_log(
                'trees.cells_without_elevation',
                component='data.trees',
                dropped=int(missing_elev.sum()),
                trees_dropped=trees_dropped,
            ),
        )
        table = table.loc[~missing_elev].reset_index(drop=True)
    if table.empty:
        raise ValueError('No grid cells with elevation data; check the raster extent')

    log.info(
        json_log(
            'trees.cells_built',
            component='data.trees',
            cells=int(len(table)),
            nx=grid.nx,
            ny=grid.ny,
            trees=int(table['count'].sum()),
        )
    )
    return table


def load_tree_points(path: str | Path) -> pd.DataFrame:
    """Read a tree point pattern CSV with ``x`` and ``y`` columns."""
    df = pd.read_csv(path)
    _require_columns(df, POINT_COLUMNS, f'Point file {path}')
    if df[list(POINT_COLUMNS)].isna().any().any():
        raise ValueError(f'Point file {path} contains missing coordinates')
    return df


def load_elevation(path: str | Path) -> pd.DataFrame:
    """Read a long-format elevation raster CSV with ``x``, ``y`` and ``elev`` columns."""
    df = pd.read_csv(path)
    _require_columns(df, RASTER_COLUMNS, f'Elevation file {path}')
    return df.dropna(subset=list(RASTER_COLUMNS)).reset_index(drop=True)
