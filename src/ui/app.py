"""
Main NiceGUI application: full-screen 3D viewer with floating overlays.

Layout:
- Full-viewport 3D scene showing the projected cube or sphere
- Left overlay: projection controls
- Bottom-right overlay: current-mode readout

Run with:
    python scripts/run_ui.py
"""

import logging
import math
from pathlib import Path

from nicegui import app, run as nicegui_run, ui

from projection_config import ProjectionConfig
from session import ProjectionSession
from ui.components import build_control_panel, build_mode_indicator
from ui.scene_helpers import (
    BACKGROUND_COLOR,
    ProjectionAssetStore,
    place_camera,
    render_projection,
)
from ui.state import ViewerState
from ui.workers import SERVE_PREFIX, refresh_projection

logger = logging.getLogger(__name__)

# Directories
BASE_DIR = Path(__file__).resolve().parent.parent.parent
OUTPUT_DIR = BASE_DIR / "output" / "projections"

# One full turn every 30 s.
AUTO_ROTATE_SPEED = 2.0 * math.pi / 30.0
AUTO_ROTATE_INTERVAL_S = 0.05

# CSS for floating overlay panels
OVERLAY_CSS = (
    "position:fixed; z-index:100; backdrop-filter:blur(12px); "
    "border-radius:12px; box-shadow:0 4px 24px rgba(0,0,0,0.15); overflow-y:auto;"
)
CONTROLS_OVERLAY_STYLE = (
    OVERLAY_CSS
    + " background:rgba(255,255,255,0.92); top:64px; left:16px; width:320px;"
    " max-height:calc(100vh - 80px);"
)
INDICATOR_OVERLAY_STYLE = (
    OVERLAY_CSS
    + " background:rgba(0,0,0,0.4); color:white; bottom:24px; right:24px;"
    " max-width:20rem; text-align:right; pointer-events:none;"
)


# ═══════════════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════════════

def main(port: int = 8080) -> None:
    store = ProjectionAssetStore(str(OUTPUT_DIR))
    store.clear()
    _patch_nicegui_run_setup()

    app.add_static_files(SERVE_PREFIX, str(OUTPUT_DIR))

    @ui.page("/")
    def index():
        _build_page(store)

    ui.run(title="UV Projection Lab", port=port, reload=False)


def _patch_nicegui_run_setup() -> None:
    """Patch NiceGUI startup so missing process semaphores don't crash UI."""
    if getattr(nicegui_run.setup, "_uvlab_safe_patch", False):
        return

    original_setup = nicegui_run.setup

    def _safe_setup() -> None:
        try:
            original_setup()
        except (NotImplementedError, PermissionError, OSError) as exc:
            logger.warning(
                "Process pool unavailable; continuing with thread workers only: %s",
                exc,
            )
            nicegui_run.process_pool = None

    _safe_setup._uvlab_safe_patch = True  # type: ignore[attr-defined]
    nicegui_run.setup = _safe_setup


# ═══════════════════════════════════════════════════════════════════════════
# Page builder
# ═══════════════════════════════════════════════════════════════════════════

def _build_page(store: ProjectionAssetStore) -> None:
    state = ViewerState()
    state.session = ProjectionSession(state.config)

    # ── Thin header bar ─────────────────────────────────────────────────
    with ui.header().classes(
        "bg-slate-800 text-white items-center h-12 px-4"
    ).style("min-height:48px"):
        ui.label("UV Projection Lab").classes("text-lg font-bold")
        ui.space()
        ui.label("Try every way of mapping a texture").classes("text-xs text-gray-300")

    # ── Full-screen 3D scene ────────────────────────────────────────────
    with ui.element("div").classes("w-full").style(
        "position:fixed; top:48px; left:0; right:0; bottom:0;"
    ) as scene_container:
        _build_main_scene(state)

    # ── Controls overlay (left) ─────────────────────────────────────────
    with ui.element("div").style(CONTROLS_OVERLAY_STYLE).classes("p-3"):
        ui.label("Texture Mapping").classes("text-xl font-bold text-gray-800")
        controls_container = ui.element("div").classes("w-full")

    # ── Mode indicator (bottom-right) ───────────────────────────────────
    with ui.element("div").style(INDICATOR_OVERLAY_STYLE).classes("p-4") as indicator:
        build_mode_indicator(state.config)

    def refresh_indicator():
        indicator.clear()
        with indicator:
            build_mode_indicator(state.config, state.error)

    def refresh_scene():
        scene_container.clear()
        with scene_container:
            _build_main_scene(state)
        refresh_indicator()

    def rebuild_controls():
        controls_container.clear()
        with controls_container:
            build_control_panel(lambda: state.config, apply_config)

    async def apply_config(config: ProjectionConfig, rebuild_panel: bool = False):
        previous = state.config
        state.config = config
        if rebuild_panel:
            rebuild_controls()
        refresh_indicator()
        if config.with_changes(auto_rotate=previous.auto_rotate) == previous:
            return  # only the spin toggle changed
        await refresh_projection(state, store, notify=refresh_scene)

    rebuild_controls()

    ui.timer(AUTO_ROTATE_INTERVAL_S, lambda: _spin(state))
    ui.timer(
        0.1,
        lambda: refresh_projection(state, store, notify=refresh_scene),
        once=True,
    )


# ═══════════════════════════════════════════════════════════════════════════
# Sub-builders
# ═══════════════════════════════════════════════════════════════════════════

def _build_main_scene(state: ViewerState) -> None:
    """Full-viewport 3D scene with the current projection, if any."""
    with ui.scene(
        grid=True, background_color=BACKGROUND_COLOR,
    ).classes("w-full h-full") as scene:
        if state.glb_url:
            state.spinner = render_projection(scene, state.glb_url, state.rotation)
        else:
            state.spinner = None
        place_camera(scene)


def _spin(state: ViewerState) -> None:
    if not state.config.auto_rotate or state.spinner is None:
        return
    state.rotation = (
        state.rotation + AUTO_ROTATE_SPEED * AUTO_ROTATE_INTERVAL_S
    ) % (2.0 * math.pi)
    state.spinner.rotate(0, 0, state.rotation)
