"""Command-line interface for ecoreg."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import load_birds_config, load_trees_config
from ..data import write_sample_data
from ..pipeline import run_bird_analysis, run_tree_analysis
from ..utils import get_logger, json_log

app = typer.Typer(help='Ecological regression workflows', no_args_is_help=True)
data_app = typer.Typer(help='Sample data commands', no_args_is_help=True)
trees_app = typer.Typer(help='Tree count Poisson regression', no_args_is_help=True)
birds_app = typer.Typer(help='Bird presence spatial logistic regression', no_args_is_help=True)
app.add_typer(data_app, name='data')
app.add_typer(trees_app, name='trees')
app.add_typer(birds_app, name='birds')

log = get_logger(__name__)


@data_app.command('simulate')
def simulate(
    output_dir: Annotated[
        Path,
        typer.Option(
            '--output-dir',
            '-o',
            help='Directory for the generated CSVs.',
        ),
    ] = Path('data/raw'),
    seed: Annotated[
        int,
        typer.Option('--seed', help='Random seed for the simulated datasets.'),
    ] = 0,
) -> None:
    """Write the sample tree plot and bird atlas datasets."""
    log.info(json_log('cli.simulate.start', component='cli', output_dir=str(output_dir), seed=seed))
    paths = write_sample_data(output_dir, seed=seed)
    for name, path in paths.items():
        typer.echo(f'{name}: {path}')


@trees_app.command('run')
def trees_run(
    config: Annotated[
        Path,
        typer.Option(
            '--config',
            '-c',
            exists=True,
            readable=True,
            help='Path to trees configuration YAML.',
        ),
    ] = Path('configs/trees.yaml'),
    skip_mcmc: Annotated[
        bool,
        typer.Option('--skip-mcmc', help='Fit only the GLM and optimizer models.'),
    ] = False,
) -> None:
    """Fit tree counts against elevation by GLM, optimizer and MCMC."""
    log.info(
        json_log('cli.trees.start', component='cli', config=str(config), skip_mcmc=skip_mcmc)
    )
    cfg = load_trees_config(config)
    result = run_tree_analysis(cfg, skip_mcmc=skip_mcmc)

    typer.echo(result.comparison.to_string(index=False))
    typer.echo(f'Artifacts written to: {result.run_dir}')


@birds_app.command('run')
def birds_run(
    config: Annotated[
        Path,
        typer.Option(
            '--config',
            '-c',
            exists=True,
            readable=True,
            help='Path to birds configuration YAML.',
        ),
    ] = Path('configs/birds.yaml'),
) -> None:
    """Fit bird presence with a logistic GLM and a spatial GAM."""
    log.info(json_log('cli.birds.start', component='cli', config=str(config)))
    cfg = load_birds_config(config)
    result = run_bird_analysis(cfg)

    typer.echo(result.comparison.to_string(index=False))
    typer.echo(f'Artifacts written to: {result.run_dir}')


if __name__ == '__main__':
    app()
