from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from ecoreg.data.birds import load_regions, prepare_regions, validate_regions

COVARIATES = ['temperature', 'ndvi']
COORDS = ['x', 'y']


@pytest.fixture
def regions() -> pd.DataFrame:
    return pd.DataFrame(
        {
            'region_id': [1, 2, 3, 4, 5],
            'x': [5.0, 15.0, 25.0, 5.0, 15.0],
            'y': [5.0, 5.0, 5.0, 15.0, 15.0],
            'temperature': [8.0, 9.5, 7.0, 6.5, 10.0],
            'ndvi': [0.4, 0.6, 0.5, 0.3, 0.7],
            'presence': [1, 0, 1, 0, 1],
        }
    )


def test_validate_regions_keeps_complete_rows(regions: pd.DataFrame):
    clean = validate_regions(regions, 'presence', COVARIATES, COORDS)

    assert len(clean) == 5
    assert clean['presence'].dtype.kind == 'i'


def test_validate_regions_drops_incomplete_rows(regions: pd.DataFrame):
    regions.loc[2, 'ndvi'] = np.nan

    clean = validate_regions(regions, 'presence', COVARIATES, COORDS)

    assert len(clean) == 4
    assert 3 not in clean['region_id'].tolist()


def test_validate_regions_rejects_non_binary(regions: pd.DataFrame):
    regions.loc[0, 'presence'] = 2

    with pytest.raises(ValueError, match='must be binary'):
        validate_regions(regions, 'presence', COVARIATES, COORDS)


def test_validate_regions_accepts_booleans(regions: pd.DataFrame):
    regions['presence'] = regions['presence'].astype(bool)

    clean = validate_regions(regions, 'presence', COVARIATES, COORDS)

    assert clean['presence'].tolist() == [1, 0, 1, 0, 1]


def test_validate_regions_missing_column(regions: pd.DataFrame):
    with pytest.raises(ValueError, match='missing required columns'):
        validate_regions(regions, 'presence', ['elevation'], COORDS)


def test_validate_regions_rejects_infinite_covariate(regions: pd.DataFrame):
    regions.loc[1, 'temperature'] = np.inf

    with pytest.raises(ValueError, match='non-finite'):
        validate_regions(regions, 'presence', COVARIATES, COORDS)


def test_prepare_regions_adds_scaled_columns(regions: pd.DataFrame):
    prepared, scalers = prepare_regions(regions, 'presence', COVARIATES, COORDS)

    assert {'temperature_z', 'ndvi_z'} <= set(prepared.columns)
    assert prepared['ndvi_z'].mean() == pytest.approx(0.0, abs=1e-12)
    assert scalers['ndvi'].mean == pytest.approx(0.5)
    # coordinates stay in original units
    assert prepared['x'].tolist() == regions['x'].tolist()


def test_load_regions_csv(tmp_path, regions: pd.DataFrame):
    path = tmp_path / 'regions.csv'
    regions.to_csv(path, index=False)

    loaded = load_regions(path)

    pd.testing.assert_frame_equal(loaded, regions)


def test_load_regions_shapefile_computes_centroids(tmp_path, regions: pd.DataFrame):
    gpd = pytest.importorskip('geopandas')
    from shapely.geometry import box

    geometry = [box(x - 5, y - 5, x + 5, y + 5) for x, y in zip(regions['x'], regions['y'])]
    gdf = gpd.GeoDataFrame(regions.drop(columns=COORDS), geometry=geometry)
    path = tmp_path / 'regions.gpkg'
    gdf.to_file(path, driver='GPKG')

    loaded = load_regions(path)

    np.testing.assert_allclose(loaded['x'], regions['x'])
    np.testing.assert_allclose(loaded['y'], regions['y'])
    assert 'geometry' not in loaded.columns
