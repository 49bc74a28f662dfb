"""Run directories and persisted outputs for analysis runs."""

from __future__ import annotations

import json
import platform
import subprocess
from collections.abc import Mapping
from datetime import UTC, datetime
from importlib import metadata
from pathlib import Path
from typing import Any

import joblib
import numpy as np
import pandas as pd

from ..utils import get_logger, json_log

log = get_logger(__name__)

OPTIONAL_PACKAGES = ('pymc', 'arviz', 'geopandas')


def get_git_info() -> dict[str, Any]:
    """Get current git commit and dirty status, or ``None`` values outside a repo."""
    try:
        commit = subprocess.check_output(  # noqa: S603, S607
            ['git', 'rev-parse', 'HEAD'],
            stderr=subprocess.DEVNULL,
            text=True,
        ).strip()
        dirty_output = subprocess.check_output(  # noqa: S603, S607
            ['git', 'status', '--porcelain'],
            stderr=subprocess.DEVNULL,
            text=True,
        ).strip()
        return {'git_commit': commit, 'git_dirty': len(dirty_output) > 0}
    except (subprocess.CalledProcessError, FileNotFoundError):
        return {'git_commit': None, 'git_dirty': None}


def get_environment_info() -> dict[str, str]:
    """Python and fitting-library versions, plus optional extras that are installed."""
    import scipy
    import statsmodels

    info = {
        'python_version': platform.python_version(),
        'numpy_version': np.__version__,
        'pandas_version': pd.__version__,
        'scipy_version': scipy.__version__,
        'statsmodels_version': statsmodels.__version__,
    }
    for package in OPTIONAL_PACKAGES:
        try:
            info[f'{package}_version'] = metadata.version(package)
        except metadata.PackageNotFoundError:
            continue
    return info


def generate_run_id(base_dir: Path, prefix: str = 'run') -> str:
    """Return ``<prefix>.<YYYY-MM-DD>_<NNN>``, one past the last run of the day."""
    base_dir = Path(base_dir)
    today = datetime.now(UTC).strftime('%Y-%m-%d')
    existing = (
        sorted(
            p.name
            for p in base_dir.iterdir()
            if p.is_dir() and p.name.startswith(f'{prefix}.{today}_')
        )
        if base_dir.exists()
        else []
    )
    last_idx = int(existing[-1].split('_')[-1]) if existing else 0
    return f'{prefix}.{today}_{last_idx + 1:03d}'


def create_run_dir(base_dir: Path, prefix: str = 'run') -> Path:
    base_dir = Path(base_dir)
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / generate_run_id(base_dir, prefix=prefix)
    run_dir.mkdir(parents=True, exist_ok=False)
    return run_dir


def _to_builtin(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, Path):
        return str(value)
    return str(value)


def write_run_artifacts(
    run_dir: Path,
    metadata: Mapping[str, Any],
    tables: Mapping[str, pd.DataFrame] | None = None,
    models: Mapping[str, Any] | None = None,
) -> dict[str, Path]:
    """Write ``metadata.json``, one CSV per table and one joblib file per fitted model."""
    run_dir = Path(run_dir)
    run_dir.mkdir(parents=True, exist_ok=True)
    written: dict[str, Path] = {}

    payload = {
        'run_id': run_dir.name,
        'timestamp': datetime.now(UTC).isoformat(),
        'environment': get_environment_info(),
        'git': get_git_info(),
        **metadata,
    }
    metadata_path = run_dir / 'metadata.json'
    metadata_path.write_text(
        json.dumps(payload, indent=2, ensure_ascii=False, default=_to_builtin),
        encoding='utf-8',
    )
    written['metadata'] = metadata_path

    for name, table in (tables or {}).items():
        path = run_dir / f'{name}.csv'
        table.to_csv(path, index=False)
        written[name] = path

    for name, model in (models or {}).items():
        path = run_dir / f'{name}.joblib'
        joblib.dump(model, path, compress=3)
        written[name] = path

    log.info(
        json_log(
            'artifacts.written',
            component='reports',
            run_dir=str(run_dir),
            files=sorted(p.name for p in written.values()),
        )
    )
    return written
