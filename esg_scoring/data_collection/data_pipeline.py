from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "scoring_config.yaml"
METRICS_FILENAME = "sample_metrics.csv"


@dataclass(frozen=True)
class PipelinePaths:
    data_dir: Path = Path("data")
    reports_dir: Path = Path("reports")

    @property
    def metrics_csv(self) -> Path:
        return self.data_dir / METRICS_FILENAME

    @property
    def tables_dir(self) -> Path:
        return self.reports_dir / "tables"


def load_yaml(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Read a YAML mapping; an empty file reads as ``{}``."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level, got {type(data).__name__}")
    return data


def ensure_dirs(paths: PipelinePaths) -> None:
    """Create the output directories; the data directory is input only."""
    paths.tables_dir.mkdir(parents=True, exist_ok=True)


def find_config_path(filename: str = CONFIG_FILENAME) -> Path | None:
    """Locate ``config/<filename>`` from the CWD upwards, then next to the package."""
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        candidate = parent / "config" / filename
        if candidate.exists():
            return candidate

    project_root = Path(__file__).resolve().parent.parent.parent
    candidate = project_root / "config" / filename
    if candidate.exists():
        return candidate
    return None


def load_config(path: str | os.PathLike[str] | None = None) -> dict[str, Any]:
    """Load the scoring configuration.

    If ``path`` is not provided, searches for ``config/scoring_config.yaml``
    relative to the project root. When no file is found an empty dict is
    returned and every consumer falls back to its built-in defaults.
    """
    if path is None:
        path = find_config_path()
        if path is None:
            return {}
    return load_yaml(path)
