"""Configuration utilities for ecoreg."""

from .birds import (
    BirdDataConfig,
    BirdPathConfig,
    BirdsConfig,
    CorrelogramConfig,
    GamConfig,
    load_birds_config,
)
from .trees import (
    GridConfig,
    MCMCConfig,
    OptimizerConfig,
    PoissonModelConfig,
    TreePathConfig,
    TreesConfig,
    load_trees_config,
)

__all__ = [
    'BirdDataConfig',
    'BirdPathConfig',
    'BirdsConfig',
    'CorrelogramConfig',
    'GamConfig',
    'load_birds_config',
    'GridConfig',
    'MCMCConfig',
    'OptimizerConfig',
    'PoissonModelConfig',
    'TreePathConfig',
    'TreesConfig',
    'load_trees_config',
]
