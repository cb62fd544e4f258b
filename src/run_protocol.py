"""Run folders for exported projections.

Layout of one run::

    <runs_root>/<YYYYmmdd_HHMMSS_ffffff>_<slug>/
        config.json  metrics.json  manifest.json  summary.md
        artifacts/
    <runs_root>/latest -> newest run
"""

from __future__ import annotations

import json
import os
import re
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict

import numpy as np

LATEST_NAME = "latest"
LATEST_MARKER = "latest_run.txt"


@dataclass
class RunPaths:
    run_id: str
    run_dir: Path
    artifacts_dir: Path
    config_path: Path
    manifest_path: Path
    metrics_path: Path
    summary_path: Path

    def artifact(self, filename: str) -> Path:
        return self.artifacts_dir / filename


def slugify(value: str) -> str:
    """Lower-case, dash-separated form of *value* for directory names."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.strip().lower()).strip("-")
    return slug or "run"


def create_run_id(name: str) -> str:
    # Microseconds keep back-to-back exports of the same name apart.
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
    return f"{stamp}_{slugify(name)}"


def prepare_run_dir(runs_root: str, name: str) -> RunPaths:
    run_id = create_run_id(name)
    run_dir = Path(runs_root) / run_id
    paths = RunPaths(
        run_id=run_id,
        run_dir=run_dir,
        artifacts_dir=run_dir / "artifacts",
        config_path=run_dir / "config.json",
        manifest_path=run_dir / "manifest.json",
        metrics_path=run_dir / "metrics.json",
        summary_path=run_dir / "summary.md",
    )
    paths.artifacts_dir.mkdir(parents=True, exist_ok=True)
    return paths


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    raise TypeError(f"{type(value).__name__} is not JSON serialisable")


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    """Pretty-printed JSON; numpy values and enums are converted."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, default=_json_default) + "\n", encoding="utf-8")


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def update_latest_pointer(runs_root: str, run_dir: Path) -> None:
    """Point ``<runs_root>/latest`` at *run_dir*.

    A relative symlink where the filesystem allows it, otherwise a directory
    holding a marker file with the run's name.
    """
    runs_path = Path(runs_root)
    latest = runs_path / LATEST_NAME

    if latest.is_symlink() or latest.is_file():
        latest.unlink()
    elif latest.is_dir():
        shutil.rmtree(latest)

    try:
        latest.symlink_to(os.path.relpath(run_dir, runs_path))
    except OSError:
        latest.mkdir(parents=True, exist_ok=True)
        write_text(latest / LATEST_MARKER, run_dir.name)
