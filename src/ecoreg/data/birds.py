"""Loading and validation of bird survey-region records."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import numpy as np
import pandas as pd

from ..utils import get_logger, json_log
from .scaling import ScaledVariable, standardize_columns

log = get_logger(__name__)

VECTOR_SUFFIXES = {'.shp', '.gpkg', '.geojson', '.json'}


def load_regions(
    path: str | Path,
    coords: tuple[str, str] = ('x', 'y'),
) -> pd.DataFrame:
    """Read survey regions from a CSV or a vector file (shapefile, GeoPackage, GeoJSON).

    For vector files the polygon centroids are stored in the ``coords`` columns
    unless the attribute table already carries them.
    """
    path = Path(path)
    if path.suffix.lower() not in VECTOR_SUFFIXES:
        return pd.read_csv(path)

    # geopandas is an optional extra; only vector inputs need it
    import geopandas as gpd

    gdf = gpd.read_file(path)
    x_col, y_col = coords
    df = pd.DataFrame(gdf.drop(columns=gdf.geometry.name))
    if x_col not in df.columns or y_col not in df.columns:
        centroids = gdf.geometry.centroid
        df[x_col] = centroids.x.to_numpy()
        df[y_col] = centroids.y.to_numpy()
    log.info(
        json_log(
            'birds.regions_loaded',
            component='data.birds',
            path=str(path),
            rows=int(len(df)),
            crs=str(gdf.crs) if gdf.crs is not None else None,
        )
    )
    return df


def validate_regions(
    df: pd.DataFrame,
    response: str,
    covariates: Sequence[str],
    coords: Sequence[str],
) -> pd.DataFrame:
    """Return a cleaned copy with a 0/1 integer response and finite covariates."""
    required = [response, *covariates, *coords]
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f'Region table is missing required columns: {missing}')

    out = df.copy()
    incomplete = out[required].isna().any(axis=1)
    if incomplete.any():
        log.info(
            json_log(
                'birds.incomplete_rows_dropped',
                component='data.birds',
                dropped=int(incomplete.sum()),
            )
        )
        out = out.loc[~incomplete].reset_index(drop=True)
    if out.empty:
        raise ValueError('Region table has no complete rows')

    values = set(pd.unique(out[response]))
    if not values <= {0, 1, True, False}:
        raise ValueError(
            f"Response column '{response}' must be binary 0/1, found {sorted(map(str, values))}"
        )
    out[response] = out[response].astype(int)

    for col in [*covariates, *coords]:
        arr = pd.to_numeric(out[col], errors='raise').to_numpy(dtype=float)
        if not np.all(np.isfinite(arr)):
            raise ValueError(f"Column '{col}' contains non-finite values")
        out[col] = arr
    return out


def prepare_regions(
    df: pd.DataFrame,
    response: str,
    covariates: Sequence[str],
    coords: Sequence[str],
) -> tuple[pd.DataFrame, dict[str, ScaledVariable]]:
    """Validate regions and add standardized ``<covariate>_z`` columns."""
    clean = validate_regions(df, response, covariates, coords)
    scaled, scalers = standardize_columns(clean, covariates)
    log.info(
        json_log(
            'birds.regions_prepared',
            component='data.birds',
            rows=int(len(scaled)),
            prevalence=float(scaled[response].mean()),
            covariates=list(covariates),
        )
    )
    return scaled, scalers
