"""Tree-count analysis: bin, scale, fit by GLM, optimizer and MCMC, compare."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from pathlib import Path

import numpy as np
import pandas as pd

from ..config import TreesConfig
from ..data import Grid, build_cell_table, fit_scaler, load_elevation, load_tree_points
from ..models.poisson import (
    PoissonFit,
    compare_degrees,
    compare_fits,
    fit_poisson_glm,
    fit_poisson_optim,
    fit_summary,
    likelihood_profile,
    predict_glm,
)
from ..reports import (
    create_run_dir,
    plot_count_grid,
    plot_counts_vs_elevation,
    plot_likelihood_profile,
    plot_mcmc_traces,
    write_run_artifacts,
)
from ..utils import get_logger, json_log

log = get_logger(__name__)

CURVE_POINTS = 200


@dataclass
class TreeAnalysisResult:
    run_dir: Path
    fits: dict[str, PoissonFit]
    comparison: pd.DataFrame
    cells: pd.DataFrame
    figures: dict[str, Path] = field(default_factory=dict)


def run_tree_analysis(config: TreesConfig, skip_mcmc: bool = False) -> TreeAnalysisResult:
    """Run the Poisson regression of tree counts on elevation end to end."""
    start = time.perf_counter()
    log.info(
        json_log(
            'pipeline.trees.start',
            component='pipeline.trees',
            points=str(config.paths.points_csv),
            elevation=str(config.paths.elevation_csv),
            skip_mcmc=skip_mcmc,
        )
    )

    points = load_tree_points(config.paths.points_csv)
    raster = load_elevation(config.paths.elevation_csv)
    grid = Grid(
        xmin=config.grid.xmin,
        xmax=config.grid.xmax,
        ymin=config.grid.ymin,
        ymax=config.grid.ymax,
        cell_size=config.grid.cell_size,
    )
    cells = build_cell_table(points, raster, grid)

    scaler = fit_scaler(cells['elev'], name='elev')
    cells['elev_z'] = scaler.transform(cells['elev'])
    y = cells['count'].to_numpy()
    x = cells['elev_z'].to_numpy()
    degree = config.model.degree

    glm_fit, glm_results = fit_poisson_glm(y, x, degree=degree)
    optim_fit = fit_poisson_optim(
        y,
        x,
        degree=degree,
        init=config.optimizer.init,
        method=config.optimizer.method,
        maxiter=config.optimizer.maxiter,
    )
    fits: dict[str, PoissonFit] = {'glm': glm_fit, 'optim': optim_fit}

    x_grid = np.linspace(x.min(), x.max(), CURVE_POINTS)
    curves = {
        'glm': predict_glm(glm_results, x_grid, degree=degree),
        'optim': pd.DataFrame({'x': x_grid, 'mean': optim_fit.predict(x_grid)}),
    }

    run_dir = create_run_dir(config.paths.output_dir, prefix='trees')
    figures: dict[str, Path] = {}

    if not skip_mcmc:
        # PyMC is heavy to import; load it only when sampling
        from ..models.poisson.mcmc import fit_poisson_mcmc, posterior_curve, posterior_samples

        mcmc_fit, idata = fit_poisson_mcmc(y, x, config=config.mcmc, degree=degree)
        fits['mcmc'] = mcmc_fit
        curves['mcmc'] = posterior_curve(
            idata, x_grid, degree=degree, interval_prob=config.mcmc.interval_prob
        )
        figures['mcmc_traces'] = plot_mcmc_traces(
            posterior_samples(idata), list(mcmc_fit.coef), run_dir / 'mcmc_traces.png'
        )

    tidy, wide = compare_fits(fits.values())
    summary = fit_summary(fits.values())
    degrees = compare_degrees(y, x, degrees=sorted({1, 2, degree}))
    profile = likelihood_profile(y, x, optim_fit, param=list(optim_fit.coef)[-1])

    figures['counts'] = plot_count_grid(
        cells, run_dir / 'tree_counts.png', value='count', title='Trees per cell'
    )
    figures['elevation'] = plot_count_grid(
        cells, run_dir / 'elevation.png', value='elev', title='Mean elevation per cell (m)'
    )
    figures['fitted_curves'] = plot_counts_vs_elevation(
        x, y, curves, run_dir / 'counts_vs_elevation.png'
    )
    figures['likelihood_profile'] = plot_likelihood_profile(
        profile, run_dir / 'likelihood_profile.png'
    )

    write_run_artifacts(
        run_dir,
        metadata={
            'analysis': 'trees',
            'config': asdict(config),
            'scaler': asdict(scaler),
            'n_cells': int(len(cells)),
            'n_trees': int(cells['count'].sum()),
            'fits': {name: asdict(fit) for name, fit in fits.items()},
            'elapsed_seconds': time.perf_counter() - start,
        },
        tables={
            'cells': cells,
            'coefficients': tidy,
            'comparison': wide,
            'fit_summary': summary,
            'degree_comparison': degrees,
            'likelihood_profile': profile,
            **{f'curve_{name}': curve for name, curve in curves.items()},
        },
        models={'glm_results': glm_results},
    )

    log.info(
        json_log(
            'pipeline.trees.completed',
            component='pipeline.trees',
            run_dir=str(run_dir),
            methods=list(fits),
            elapsed_seconds=time.perf_counter() - start,
        )
    )
    return TreeAnalysisResult(
        run_dir=run_dir,
        fits=fits,
        comparison=wide,
        cells=cells,
        figures=figures,
    )
