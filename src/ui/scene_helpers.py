"""
Helpers for showing a projected primitive in a NiceGUI scene.

NiceGUI scene API notes:
- gltf(url) is a method on the Scene object, not on Group.
- Objects created inside a `with scene.group()` context are parented to that group.
- The NiceGUI camera is Z-up; the primitives are built Y-up, so the mesh
  sits in a group rotated +90 degrees about X.
"""

import hashlib
import json
import logging
import math
import os
import threading
from collections import OrderedDict
from typing import List

from nicegui import ui

from export import write_viewer_glb
from session import ProjectionResult

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = "#0f172a"

# GLB files kept on disk for the viewer, across all tabs.
MAX_CACHED_ASSETS = 24

# Camera at (4, 4, 6) in Y-up terms, expressed Z-up.
CAMERA_POSITION = (4.0, -6.0, 4.0)


def projection_asset_name(result: ProjectionResult) -> str:
    """Stable file name per configuration (auto-rotate does not matter)."""
    payload = result.config.to_dict()
    payload.pop("auto_rotate", None)
    digest = hashlib.sha1(
        json.dumps(payload, sort_keys=True).encode("utf-8")
    ).hexdigest()[:16]
    return f"{result.config.shape.value}_{digest}.glb"


class ProjectionAssetStore:
    """GLB files served to the viewer, capped by least-recent use.

    Shared by every tab and called from worker threads. Files are published
    atomically, so a tab asking for a name another tab is still writing
    never gets a partial GLB.
    """

    def __init__(self, output_dir: str, max_assets: int = MAX_CACHED_ASSETS):
        if max_assets < 1:
            raise ValueError(f"max_assets must be >= 1, got {max_assets}")
        self.output_dir = output_dir
        self.max_assets = max_assets
        self._names: "OrderedDict[str, None]" = OrderedDict()
        self._lock = threading.Lock()
        os.makedirs(output_dir, exist_ok=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)

    def names(self) -> List[str]:
        """Published names, least recently used first."""
        with self._lock:
            return list(self._names)

    def clear(self) -> int:
        """Delete every GLB and leftover temp file in the output directory."""
        removed = 0
        with self._lock:
            self._names.clear()
            for entry in os.scandir(self.output_dir):
                if entry.is_file() and entry.name.endswith((".glb", ".tmp")):
                    os.remove(entry.path)
                    removed += 1
        if removed:
            logger.info("Removed %d stale projection assets from %s", removed, self.output_dir)
        return removed

    def publish(self, result: ProjectionResult) -> str:
        """Write (or reuse) the GLB for *result*; returns its file name."""
        name = projection_asset_name(result)
        path = os.path.join(self.output_dir, name)
        with self._lock:
            if name in self._names and os.path.isfile(path):
                self._names.move_to_end(name)
                return name

        write_viewer_glb(result, path)

        with self._lock:
            self._names[name] = None
            self._names.move_to_end(name)
            evicted = []
            while len(self._names) > self.max_assets:
                evicted.append(self._names.popitem(last=False)[0])
            for old in evicted:
                try:
                    os.remove(os.path.join(self.output_dir, old))
                except FileNotFoundError:
                    pass
        if evicted:
            logger.debug("Evicted %d projection assets", len(evicted))
        return name


def render_projection(scene: ui.scene, mesh_url: str, rotation: float = 0.0):
    """Load the projected mesh into *scene*.

    Returns the outer group so the caller can spin it about the vertical
    axis.
    """
    with scene:
        with scene.group().rotate(0, 0, rotation) as spinner:
            with scene.group().rotate(math.pi / 2, 0, 0):
                scene.gltf(mesh_url)
    return spinner


def place_camera(scene: ui.scene) -> None:
    x, y, z = CAMERA_POSITION
    scene.move_camera(x=x, y=y, z=z, look_at_x=0, look_at_y=0, look_at_z=0, duration=0)
