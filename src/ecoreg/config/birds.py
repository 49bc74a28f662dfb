"""Config models and loader for the spatial bird presence analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .paths import ensure_tuple, read_yaml, resolve_path

# penalty weights one decade apart, 1e-2 to 1e10
DEFAULT_ALPHA_GRID = tuple(10.0**k for k in range(-2, 11))


@dataclass(frozen=True)
class BirdPathConfig:
    regions: Path
    output_dir: Path


@dataclass(frozen=True)
class BirdDataConfig:
    response: str = 'presence'
    covariates: tuple[str, ...] = ('temperature', 'ndvi', 'elevation')
    coords: tuple[str, str] = ('x', 'y')


@dataclass(frozen=True)
class GamConfig:
    df: int = 8
    degree: int = 3
    alpha: float | None = None
    alpha_grid: tuple[float, ...] = DEFAULT_ALPHA_GRID


@dataclass(frozen=True)
class CorrelogramConfig:
    increment: float = 20.0
    n_classes: int = 10


@dataclass(frozen=True)
class BirdsConfig:
    paths: BirdPathConfig
    data: BirdDataConfig = field(default_factory=BirdDataConfig)
    gam: GamConfig = field(default_factory=GamConfig)
    correlogram: CorrelogramConfig = field(default_factory=CorrelogramConfig)


def load_birds_config(config_path: str | Path) -> BirdsConfig:
    """Load a bird analysis config YAML file."""
    data, base_dir = read_yaml(config_path)

    paths_section = data.get('paths') or {}
    data_section = data.get('data') or {}
    gam_section = data.get('gam') or {}
    correlogram_section = data.get('correlogram') or {}

    regions = paths_section.get('regions')
    if not regions:
        raise ValueError('paths.regions must be set in birds config')

    paths = BirdPathConfig(
        regions=resolve_path(base_dir, regions),
        output_dir=resolve_path(base_dir, paths_section.get('output_dir', 'artifacts/birds')),
    )

    coords = ensure_tuple(data_section.get('coords', ['x', 'y']))
    if len(coords) != 2:
        raise ValueError('data.coords must name exactly two columns')
    covariates = ensure_tuple(
        data_section.get('covariates', ['temperature', 'ndvi', 'elevation']),
    )
    if not covariates:
        raise ValueError('data.covariates must list at least one column')

    bird_data = BirdDataConfig(
        response=str(data_section.get('response', 'presence')),
        covariates=covariates,
        coords=(coords[0], coords[1]),
    )

    alpha = gam_section.get('alpha')
    gam = GamConfig(
        df=int(gam_section.get('df', 8)),
        degree=int(gam_section.get('degree', 3)),
        alpha=float(alpha) if alpha is not None else None,
        alpha_grid=tuple(
            float(v) for v in gam_section.get('alpha_grid', DEFAULT_ALPHA_GRID)
        ),
    )
    if gam.df <= gam.degree:
        raise ValueError('gam.df must exceed gam.degree')
    if gam.alpha is None and not gam.alpha_grid:
        raise ValueError('gam.alpha_grid must be non-empty when gam.alpha is null')

    correlogram = CorrelogramConfig(
        increment=float(correlogram_section.get('increment', 20.0)),
        n_classes=int(correlogram_section.get('n_classes', 10)),
    )
    if correlogram.increment <= 0 or correlogram.n_classes < 1:
        raise ValueError('correlogram.increment and correlogram.n_classes must be positive')

    return BirdsConfig(
        paths=paths,
        data=bird_data,
        gam=gam,
        correlogram=correlogram,
    )
