from __future__ import annotations

import json
import logging

import numpy as np
import pandas as pd
import pytest

from ecoreg.data.trees import (
    Grid,
    aggregate_raster,
    build_cell_table,
    count_points,
    load_elevation,
    load_tree_points,
)


@pytest.fixture
def grid() -> Grid:
    return Grid(xmin=0.0, xmax=100.0, ymin=0.0, ymax=50.0, cell_size=10.0)


@pytest.fixture
def raster(grid: Grid) -> pd.DataFrame:
    """5 m pixels with elevation equal to x."""
    xs = np.arange(2.5, 100.0, 5.0)
    ys = np.arange(2.5, 50.0, 5.0)
    xx, yy = np.meshgrid(xs, ys)
    return pd.DataFrame({'x': xx.ravel(), 'y': yy.ravel(), 'elev': xx.ravel()})


def test_grid_dimensions(grid: Grid):
    assert grid.nx == 10
    assert grid.ny == 5
    assert grid.n_cells == 50
    x_edges, y_edges = grid.edges()
    assert x_edges[0] == 0.0 and x_edges[-1] == 100.0
    assert y_edges[-1] == 50.0


def test_grid_partial_last_cell():
    grid = Grid(xmin=0.0, xmax=105.0, ymin=0.0, ymax=50.0, cell_size=10.0)

    assert grid.nx == 11
    assert grid.edges()[0][-1] == 105.0


@pytest.mark.parametrize(
    'kwargs',
    [
        {'xmin': 0.0, 'xmax': 0.0, 'ymin': 0.0, 'ymax': 1.0, 'cell_size': 1.0},
        {'xmin': 0.0, 'xmax': 1.0, 'ymin': 0.0, 'ymax': 1.0, 'cell_size': 0.0},
    ],
)
def test_grid_rejects_invalid(kwargs):
    with pytest.raises(ValueError):
        Grid(**kwargs)


def test_count_points_bins_and_drops_outside(grid: Grid):
    points = pd.DataFrame(
        {
            'x': [5.0, 15.0, 16.0, 100.0, -1.0, 50.0],
            'y': [5.0, 5.0, 6.0, 50.0, 3.0, 60.0],
        }
    )

    counts = count_points(points, grid)

    assert counts.shape == (5, 10)
    assert counts.dtype.kind == 'i'
    assert counts.sum() == 4
    assert counts[0, 0] == 1
    assert counts[0, 1] == 2
    # upper plot edge belongs to the last cell
    assert counts[4, 9] == 1


def test_count_points_requires_columns(grid: Grid):
    with pytest.raises(ValueError, match='missing required columns'):
        count_points(pd.DataFrame({'lon': [1.0]}), grid)


def test_aggregate_raster_means(grid: Grid, raster: pd.DataFrame):
    elev = aggregate_raster(raster, grid)

    assert elev.shape == (5, 10)
    # two pixel columns (x=2.5, 7.5) per 10 m cell
    assert elev[0, 0] == pytest.approx(5.0)
    assert elev[3, 9] == pytest.approx(95.0)


def test_aggregate_raster_empty_cells_are_nan(grid: Grid, raster: pd.DataFrame):
    partial = raster.loc[raster['x'] < 50.0]

    elev = aggregate_raster(partial, grid)

    assert np.isnan(elev[:, 5:]).all()
    assert np.isfinite(elev[:, :5]).all()


def test_build_cell_table(grid: Grid, raster: pd.DataFrame):
    points = pd.DataFrame({'x': [5.0, 5.0, 95.0], 'y': [5.0, 8.0, 45.0]})

    cells = build_cell_table(points, raster, grid)

    assert list(cells.columns) == ['cell_id', 'x', 'y', 'elev', 'count']
    assert len(cells) == 50
    assert cells['count'].sum() == 3
    first = cells.loc[cells['cell_id'] == 0].iloc[0]
    assert first['x'] == pytest.approx(5.0)
    assert first['y'] == pytest.approx(5.0)
    assert first['count'] == 2


def test_build_cell_table_drops_cells_without_elevation(grid: Grid, raster: pd.DataFrame):
    partial = raster.loc[raster['x'] < 50.0]
    points = pd.DataFrame({'x': [5.0], 'y': [5.0]})

    cells = build_cell_table(points, partial, grid)

    assert len(cells) == 25
    assert cells['elev'].notna().all()


def test_build_cell_table_reports_trees_in_dropped_cells(
    grid: Grid, raster: pd.DataFrame, caplog
):
    partial = raster.loc[raster['x'] < 50.0]
    points = pd.DataFrame({'x': [5.0, 55.0, 95.0], 'y': [5.0, 25.0, 45.0]})

    with caplog.at_level(logging.INFO, logger='ecoreg.data.trees'):
        cells = build_cell_table(points, partial, grid)

    assert cells['count'].sum() == 1
    dropped = [
        record
        for record in caplog.records
        if record.name == 'ecoreg.data.trees'
        and json.loads(record.getMessage())['msg'] == 'trees.cells_without_elevation'
    ]
    assert len(dropped) == 1
    assert dropped[0].levelno == logging.WARNING
    payload = json.loads(dropped[0].getMessage())
    assert payload['dropped'] == 25
    assert payload['trees_dropped'] == 2


def test_build_cell_table_without_any_elevation(grid: Grid):
    raster = pd.DataFrame({'x': [500.0], 'y': [500.0], 'elev': [1.0]})
    points = pd.DataFrame({'x': [5.0], 'y': [5.0]})

    with pytest.raises(ValueError, match='No grid cells'):
        build_cell_table(points, raster, grid)


def test_loaders_validate_columns(tmp_path):
    points_csv = tmp_path / 'points.csv'
    points_csv.write_text('x,y\n1.0,2.0\n3.0,4.0\n')
    bad_csv = tmp_path / 'bad.csv'
    bad_csv.write_text('x,z\n1.0,2.0\n')
    raster_csv = tmp_path / 'elev.csv'
    raster_csv.write_text('x,y,elev\n1.0,2.0,130.0\n3.0,4.0,\n')

    assert len(load_tree_points(points_csv)) == 2
    assert len(load_elevation(raster_csv)) == 1
    with pytest.raises(ValueError, match='missing required columns'):
        load_tree_points(bad_csv)
