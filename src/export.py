"""Projection export: config -> projected mesh + texture -> run artifacts."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import trimesh

from diagnostic_texture import generate_diagnostic_texture
from projection_config import Projection, ProjectionConfig, axis_label
from run_protocol import (
    prepare_run_dir,
    update_latest_pointer,
    write_json,
    write_text,
)
from session import ProjectionResult, ProjectionSession
from tiling_policy import ViewerTexture, resolve_viewer_texture
from uv_projection import uv_bounds

logger = logging.getLogger(__name__)


@dataclass
class ExportConfig:
    runs_dir: str = "runs"
    export_glb: bool = True
    export_uvs: bool = True
    export_texture: bool = True
    max_atlas_size: int = 2048


@dataclass
class ExportResult:
    run_id: str
    run_dir: str
    config_path: str
    metrics_path: str
    summary_path: str
    manifest_path: str
    glb_path: Optional[str] = None
    uvs_path: Optional[str] = None
    texture_path: Optional[str] = None
    viewer_texture_path: Optional[str] = None
    artifacts: Dict[str, str] = field(default_factory=dict)


def build_viewer_mesh(
    result: ProjectionResult,
    max_atlas_size: int = 2048,
) -> tuple[trimesh.Trimesh, ViewerTexture]:
    """Textured trimesh for a glTF renderer, boundary policy already applied."""
    viewer_texture = resolve_viewer_texture(
        generate_diagnostic_texture(),
        result.sample_uvs,
        result.policy,
        max_size=max_atlas_size,
    )
    mesh = result.geometry.to_trimesh(
        texture=viewer_texture.image, uvs=viewer_texture.uvs,
    )
    return mesh, viewer_texture


def write_viewer_glb(result: ProjectionResult, path: str, max_atlas_size: int = 2048) -> str:
    """Write the textured, projected mesh as a binary glTF file.

    The file is written under a temporary name in the same directory and
    moved into place, so readers never see a partial GLB at *path*.
    """
    mesh, _ = build_viewer_mesh(result, max_atlas_size=max_atlas_size)
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{target.stem}.", suffix=".tmp", dir=str(target.parent),
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(mesh.export(file_type="glb"))
        os.replace(tmp_path, target)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    return str(target)


def export_projection(
    projection_config: ProjectionConfig,
    name: str = "projection",
    config: Optional[ExportConfig] = None,
) -> ExportResult:
    if config is None:
        config = ExportConfig()

    started = time.perf_counter()
    paths = prepare_run_dir(config.runs_dir, name)
    result = ProjectionSession(projection_config).result

    write_json(paths.config_path, projection_config.to_dict())
    artifacts: Dict[str, str] = {}

    glb_path = None
    viewer_texture_path = None
    if config.export_glb:
        mesh, viewer_texture = build_viewer_mesh(result, config.max_atlas_size)
        glb_path = str(paths.artifact("projection.glb"))
        mesh.export(glb_path, file_type="glb")
        artifacts["glb"] = glb_path
        viewer_texture_path = str(paths.artifact("viewer_texture.png"))
        viewer_texture.image.save(viewer_texture_path)
        artifacts["viewer_texture"] = viewer_texture_path

    uvs_path = None
    if config.export_uvs:
        uvs_path = str(paths.artifact("uvs.npy"))
        np.save(uvs_path, result.geometry.uvs)
        artifacts["uvs"] = uvs_path

    texture_path = None
    if config.export_texture:
        texture_path = str(paths.artifact("texture.png"))
        generate_diagnostic_texture().save(texture_path)
        artifacts["texture"] = texture_path

    elapsed = time.perf_counter() - started
    (u_min, v_min), (u_max, v_max) = uv_bounds(result.geometry.uvs)
    metrics = {
        "run_id": paths.run_id,
        "elapsed_s": round(elapsed, 3),
        "projection_ms": round(result.elapsed_ms, 3),
        "vertex_count": result.geometry.vertex_count,
        "face_count": result.geometry.face_count,
        "uv_bounds": {"min": [u_min, v_min], "max": [u_max, v_max]},
        "out_of_range_vertices": result.out_of_range_count,
    }
    write_json(paths.metrics_path, metrics)
    write_text(paths.summary_path, _build_summary(result, paths.run_id, metrics))

    manifest = {
        "run_id": paths.run_id,
        "name": name,
        "created_utc": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": projection_config.to_dict(),
        "artifacts": {
            "config": str(paths.config_path),
            "metrics": str(paths.metrics_path),
            "summary": str(paths.summary_path),
            **artifacts,
        },
    }
    write_json(paths.manifest_path, manifest)
    update_latest_pointer(config.runs_dir, paths.run_dir)
    logger.info("Exported %s to %s", name, paths.run_dir)

    return ExportResult(
        run_id=paths.run_id,
        run_dir=str(paths.run_dir),
        config_path=str(paths.config_path),
        metrics_path=str(paths.metrics_path),
        summary_path=str(paths.summary_path),
        manifest_path=str(paths.manifest_path),
        glb_path=glb_path,
        uvs_path=uvs_path,
        texture_path=texture_path,
        viewer_texture_path=viewer_texture_path,
        artifacts=artifacts,
    )


def _build_summary(result: ProjectionResult, run_id: str, metrics: dict) -> str:
    cfg = result.config
    if cfg.projection is Projection.BOX:
        axis_text = "n/a (box)"
    else:
        axis_text = axis_label(cfg.axis, cfg.alternate_convention)
    bounds = metrics["uv_bounds"]

    lines = [
        f"# Projection {run_id}",
        "",
        f"- Shape: {cfg.shape.value}",
        f"- Projection: {cfg.projection.value}",
        f"- Axis: {axis_text}",
        f"- Convention: {'blender (Z up)' if cfg.alternate_convention else 'standard (Y up)'}",
        f"- Offsets: ({cfg.offset_x:+.2f}, {cfg.offset_y:+.2f}, {cfg.offset_z:+.2f})",
        f"- Tiling: {cfg.tiling}x, repeat {'on' if cfg.repeat_texture else 'off'}",
        f"- Vertices: {metrics['vertex_count']}",
        f"- UV range: u [{bounds['min'][0]:.3f}, {bounds['max'][0]:.3f}], "
        f"v [{bounds['min'][1]:.3f}, {bounds['max'][1]:.3f}]",
        f"- Out-of-range vertices: {metrics['out_of_range_vertices']}",
    ]
    return "\n".join(lines) + "\n"
