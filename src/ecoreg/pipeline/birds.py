"""Bird presence analysis: logistic GLM against a spatial GAM and their residual correlograms."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from pathlib import Path

import pandas as pd

from ..config import BirdsConfig
from ..data import load_regions, prepare_regions
from ..models.spatial import (
    SpatialFit,
    compare_spatial_models,
    correlogram,
    fit_logistic_glm,
    fit_spatial_gam,
)
from ..reports import create_run_dir, plot_correlogram, plot_region_map, write_run_artifacts
from ..utils import get_logger, json_log

log = get_logger(__name__)


@dataclass
class BirdAnalysisResult:
    run_dir: Path
    fits: dict[str, SpatialFit]
    comparison: pd.DataFrame
    correlograms: dict[str, pd.DataFrame]
    regions: pd.DataFrame
    figures: dict[str, Path] = field(default_factory=dict)


def run_bird_analysis(config: BirdsConfig) -> BirdAnalysisResult:
    """Fit non-spatial and spatial presence models and compare their residual autocorrelation."""
    start = time.perf_counter()
    data_cfg = config.data
    log.info(
        json_log(
            'pipeline.birds.start',
            component='pipeline.birds',
            regions=str(config.paths.regions),
            response=data_cfg.response,
            covariates=list(data_cfg.covariates),
        )
    )

    raw = load_regions(config.paths.regions, coords=data_cfg.coords)
    regions, scalers = prepare_regions(
        raw, data_cfg.response, data_cfg.covariates, data_cfg.coords
    )
    predictors = [f'{name}_z' for name in data_cfg.covariates]

    glm_fit, glm_results = fit_logistic_glm(regions, data_cfg.response, predictors)
    gam_fit, gam_results = fit_spatial_gam(
        regions,
        data_cfg.response,
        predictors,
        coords=data_cfg.coords,
        df_spline=config.gam.df,
        degree=config.gam.degree,
        alpha=config.gam.alpha,
        alpha_grid=config.gam.alpha_grid,
    )
    fits = {'glm': glm_fit, 'gam': gam_fit}

    y = regions[data_cfg.response].to_numpy()
    comparison = compare_spatial_models(fits.values(), y)

    coords = regions[list(data_cfg.coords)].to_numpy(dtype=float)
    correlograms = {
        'glm': correlogram(
            glm_results.resid_pearson,
            coords,
            increment=config.correlogram.increment,
            n_classes=config.correlogram.n_classes,
        ),
        'gam': correlogram(
            gam_results.resid_pearson,
            coords,
            increment=config.correlogram.increment,
            n_classes=config.correlogram.n_classes,
        ),
    }

    regions['p_glm'] = glm_fit.fitted
    regions['p_gam'] = gam_fit.fitted

    run_dir = create_run_dir(config.paths.output_dir, prefix='birds')
    figures = {
        'observed': plot_region_map(
            regions,
            data_cfg.response,
            run_dir / 'presence_observed.png',
            coords=data_cfg.coords,
            title='Observed presence',
        ),
        'glm': plot_region_map(
            regions,
            'p_glm',
            run_dir / 'presence_glm.png',
            coords=data_cfg.coords,
            title='GLM predicted probability',
        ),
        'gam': plot_region_map(
            regions,
            'p_gam',
            run_dir / 'presence_gam.png',
            coords=data_cfg.coords,
            title='Spatial GAM predicted probability',
        ),
        'correlogram': plot_correlogram(correlograms, run_dir / 'residual_correlogram.png'),
    }

    coefficients = pd.concat([fit.to_frame() for fit in fits.values()], ignore_index=True)
    write_run_artifacts(
        run_dir,
        metadata={
            'analysis': 'birds',
            'config': asdict(config),
            'scalers': {name: asdict(scaler) for name, scaler in scalers.items()},
            'n_regions': int(len(regions)),
            'prevalence': float(y.mean()),
            'fits': {
                name: {key: value for key, value in asdict(fit).items() if key != 'fitted'}
                for name, fit in fits.items()
            },
            'elapsed_seconds': time.perf_counter() - start,
        },
        tables={
            'regions': regions,
            'coefficients': coefficients,
            'model_comparison': comparison,
            'correlogram_glm': correlograms['glm'],
            'correlogram_gam': correlograms['gam'],
        },
        models={'fits': fits},
    )

    log.info(
        json_log(
            'pipeline.birds.completed',
            component='pipeline.birds',
            run_dir=str(run_dir),
            aic={name: fit.aic for name, fit in fits.items()},
            elapsed_seconds=time.perf_counter() - start,
        )
    )
    return BirdAnalysisResult(
        run_dir=run_dir,
        fits=fits,
        comparison=comparison,
        correlograms=correlograms,
        regions=regions,
        figures=figures,
    )
