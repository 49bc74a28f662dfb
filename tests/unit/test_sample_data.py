from __future__ import annotations

import pandas as pd

from ecoreg.data.sample import (
    TREE_PLOT,
    simulate_bird_atlas,
    simulate_elevation,
    simulate_tree_plot,
    write_sample_data,
)


def test_simulate_elevation_covers_plot():
    raster = simulate_elevation(seed=3)

    assert list(raster.columns) == ['x', 'y', 'elev']
    assert len(raster) == TREE_PLOT.n_cells
    assert raster['x'].between(TREE_PLOT.xmin, TREE_PLOT.xmax).all()
    assert raster['elev'].std() > 0


def test_simulate_tree_plot_is_deterministic():
    points_a, raster_a = simulate_tree_plot(seed=7)
    points_b, raster_b = simulate_tree_plot(seed=7)

    pd.testing.assert_frame_equal(points_a, points_b)
    pd.testing.assert_frame_equal(raster_a, raster_b)
    assert len(points_a) > 500
    assert points_a['x'].between(0.0, 1000.0).all()
    assert points_a['y'].between(0.0, 500.0).all()


def test_simulate_bird_atlas_shape_and_values():
    regions = simulate_bird_atlas(seed=1, n_side=10)

    assert len(regions) == 100
    assert set(regions['presence'].unique()) <= {0, 1}
    assert regions['ndvi'].between(0.0, 1.0).all()
    assert {'region_id', 'x', 'y', 'temperature', 'elevation'} <= set(regions.columns)
    # temperature falls with elevation
    assert regions['temperature'].corr(regions['elevation']) < 0


def test_write_sample_data(tmp_path):
    paths = write_sample_data(tmp_path / 'raw', seed=2)

    assert set(paths) == {'tree_points', 'elevation', 'bird_regions'}
    for path in paths.values():
        assert path.exists()
    regions = pd.read_csv(paths['bird_regions'])
    assert len(regions) == 400
