"""Path helpers shared by config loaders."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml


def read_yaml(config_path: str | Path) -> tuple[dict[str, Any], Path]:
    """Read a YAML config and return its mapping plus the directory it lives in."""
    cfg_path = Path(config_path).expanduser().resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f'Config file not found: {cfg_path}')

    with cfg_path.open('r', encoding='utf-8') as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f'Config root must be a mapping: {cfg_path}')
    return data, cfg_path.parent


def resolve_path(base: Path, value: str | Path) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base / path).resolve()
    return path


def ensure_tuple(items: Iterable[Any] | None) -> tuple[str, ...]:
    if not items:
        return tuple()
    if isinstance(items, str):
        return (items,)
    return tuple(str(item) for item in items)
