"""Config models and loader for the tree-count Poisson analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .paths import read_yaml, resolve_path


@dataclass(frozen=True)
class TreePathConfig:
    points_csv: Path
    elevation_csv: Path
    output_dir: Path


@dataclass(frozen=True)
class GridConfig:
    cell_size: float = 50.0
    xmin: float = 0.0
    xmax: float = 1000.0
    ymin: float = 0.0
    ymax: float = 500.0


@dataclass(frozen=True)
class PoissonModelConfig:
    degree: int = 2


@dataclass(frozen=True)
class OptimizerConfig:
    method: str = 'Nelder-Mead'
    init: tuple[float, ...] | None = None
    maxiter: int = 5000


@dataclass(frozen=True)
class MCMCConfig:
    chains: int = 3
    draws: int = 1000
    tune: int = 1000
    prior_sd: float = 31.62
    target_accept: float = 0.9
    seed: int = 42
    interval_prob: float = 0.95


@dataclass(frozen=True)
class TreesConfig:
    paths: TreePathConfig
    grid: GridConfig = field(default_factory=GridConfig)
    model: PoissonModelConfig = field(default_factory=PoissonModelConfig)
    optimizer: OptimizerConfig = field(default_factory=OptimizerConfig)
    mcmc: MCMCConfig = field(default_factory=MCMCConfig)


def load_trees_config(config_path: str | Path) -> TreesConfig:
    """Load a tree analysis config YAML file."""
    data, base_dir = read_yaml(config_path)

    paths_section = data.get('paths') or {}
    grid_section = data.get('grid') or {}
    model_section = data.get('model') or {}
    optimizer_section = data.get('optimizer') or {}
    mcmc_section = data.get('mcmc') or {}

    for key in ('points_csv', 'elevation_csv'):
        if not paths_section.get(key):
            raise ValueError(f'paths.{key} must be set in trees config')

    paths = TreePathConfig(
        points_csv=resolve_path(base_dir, paths_section['points_csv']),
        elevation_csv=resolve_path(base_dir, paths_section['elevation_csv']),
        output_dir=resolve_path(base_dir, paths_section.get('output_dir', 'artifacts/trees')),
    )

    grid = GridConfig(
        cell_size=float(grid_section.get('cell_size', 50.0)),
        xmin=float(grid_section.get('xmin', 0.0)),
        xmax=float(grid_section.get('xmax', 1000.0)),
        ymin=float(grid_section.get('ymin', 0.0)),
        ymax=float(grid_section.get('ymax', 500.0)),
    )
    if grid.cell_size <= 0:
        raise ValueError('grid.cell_size must be positive')

    model = PoissonModelConfig(degree=int(model_section.get('degree', 2)))
    if model.degree < 1:
        raise ValueError('model.degree must be at least 1')

    init = optimizer_section.get('init')
    optimizer = OptimizerConfig(
        method=str(optimizer_section.get('method', 'Nelder-Mead')),
        init=tuple(float(v) for v in init) if init is not None else None,
        maxiter=int(optimizer_section.get('maxiter', 5000)),
    )
    if optimizer.init is not None and len(optimizer.init) != model.degree + 1:
        raise ValueError(
            f'optimizer.init needs {model.degree + 1} values for degree {model.degree}, '
            f'got {len(optimizer.init)}'
        )

    mcmc = MCMCConfig(
        chains=int(mcmc_section.get('chains', 3)),
        draws=int(mcmc_section.get('draws', 1000)),
        tune=int(mcmc_section.get('tune', 1000)),
        prior_sd=float(mcmc_section.get('prior_sd', 31.62)),
        target_accept=float(mcmc_section.get('target_accept', 0.9)),
        seed=int(mcmc_section.get('seed', 42)),
        interval_prob=float(mcmc_section.get('interval_prob', 0.95)),
    )
    if not 0.0 < mcmc.interval_prob < 1.0:
        raise ValueError('mcmc.interval_prob must be between 0 and 1')

    return TreesConfig(
        paths=paths,
        grid=grid,
        model=model,
        optimizer=optimizer,
        mcmc=mcmc,
    )
