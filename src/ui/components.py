"""
Reusable UI builder functions for the NiceGUI control panel.

Every control reports a whole new ProjectionConfig through ``on_change``;
builders never mutate the config they were given.
"""

from typing import Callable, Optional

from nicegui import ui

from projection_config import (
    OFFSET_RANGE,
    TILING_RANGE,
    Axis,
    Projection,
    ProjectionConfig,
    Shape,
    axis_label,
)

_SHAPE_LABELS = {Shape.CUBE.value: "Cube", Shape.SPHERE.value: "Sphere"}

_PROJECTION_LABELS = {
    Projection.PLANAR.value: "Planar",
    Projection.BOX.value: "Box (cubic)",
    Projection.CYLINDRICAL.value: "Cylindrical",
    Projection.SPHERICAL.value: "Spherical",
}


def build_control_panel(get_config: Callable, on_change: Callable) -> None:
    """Shape, projection, axis, offsets, tiling and convention controls.

    *get_config* returns the page's current config; sliders keep firing
    after other controls changed it, so every update builds on that value
    rather than on the config the panel was built with. *on_change* takes
    the new config and a flag asking for the panel to be rebuilt.
    """
    cfg = get_config()
    _section("3D Object")
    ui.toggle(
        _SHAPE_LABELS,
        value=cfg.shape.value,
        on_change=lambda e: on_change(get_config().with_changes(shape=Shape(e.value))),
    ).classes("w-full")

    _section("Projection")
    ui.toggle(
        _PROJECTION_LABELS,
        value=cfg.projection.value,
        on_change=lambda e: on_change(
            get_config().with_changes(projection=Projection(e.value)), True,
        ),
    ).props("spread no-caps").classes("w-full")

    if cfg.projection is not Projection.BOX:
        _section("Projection Axis")
        ui.toggle(
            {a.value: axis_label(a, cfg.alternate_convention) for a in Axis},
            value=cfg.axis.value,
            on_change=lambda e: on_change(get_config().with_changes(axis=Axis(e.value))),
        ).props("no-caps").classes("w-full")

    _section("Position")
    for attr, label in (("offset_x", "Move X"), ("offset_y", "Move Y"), ("offset_z", "Move Z")):
        _slider(
            label, getattr(cfg, attr), OFFSET_RANGE[0], OFFSET_RANGE[1], 0.01,
            lambda v, a=attr: on_change(get_config().with_changes(**{a: v})),
        )

    _section("Tiling")
    _slider(
        "Repeat", cfg.tiling, TILING_RANGE[0], TILING_RANGE[1], 1,
        lambda v: on_change(get_config().with_changes(tiling=int(v))),
        fmt="x",
    )
    ui.switch(
        "Repeat texture",
        value=cfg.repeat_texture,
        on_change=lambda e: on_change(
            get_config().with_changes(repeat_texture=e.value),
        ),
    )
    ui.label(
        "Off: regions outside the image show in green."
    ).classes("text-[10px] text-gray-400")

    ui.button(
        "Reset values",
        icon="restart_alt",
        on_click=lambda: on_change(get_config().reset_values(), True),
    ).props("flat dense size=sm").classes("w-full mt-2")

    ui.separator().classes("my-2")
    ui.switch(
        "Blender mode (Z up)",
        value=cfg.alternate_convention,
        on_change=lambda e: on_change(
            get_config().with_changes(alternate_convention=e.value), True,
        ),
    )
    ui.switch(
        "Auto-rotate",
        value=cfg.auto_rotate,
        on_change=lambda e: on_change(
            get_config().with_changes(auto_rotate=e.value),
        ),
    )


def build_mode_indicator(cfg: ProjectionConfig, error: Optional[str] = None) -> None:
    """Current-mode readout shown over the viewport."""
    ui.label("Current mode").classes(
        "text-xs text-gray-400 uppercase tracking-widest font-bold"
    )
    ui.label(_PROJECTION_LABELS[cfg.projection.value]).classes("text-xl font-bold")
    ui.label(f"Object: {_SHAPE_LABELS[cfg.shape.value]}").classes("text-sm text-gray-300")
    if cfg.projection is not Projection.BOX:
        ui.label(
            f"Axis: {axis_label(cfg.axis, cfg.alternate_convention)}"
        ).classes("text-sm text-blue-400 font-bold")
    if cfg.alternate_convention:
        ui.label("BLENDER MODE ON").classes(
            "text-xs font-bold text-orange-500 mt-2"
        )
    if error:
        ui.label(error).classes("text-xs text-red-400 mt-2")


def _section(title: str) -> None:
    ui.label(title).classes(
        "text-xs font-bold text-gray-500 uppercase tracking-wider mt-3 mb-1"
    )


def _slider(
    label: str,
    value: float,
    min_val: float,
    max_val: float,
    step: float,
    on_change: Callable,
    fmt: str = "",
) -> None:
    def _format(v):
        return f"{int(v)}x" if fmt == "x" else f"{v:.2f}"

    with ui.row().classes("w-full items-center gap-1"):
        ui.label(label).classes("text-xs w-16")
        val_label = ui.label(_format(value)).classes("text-xs w-12 text-right")

        def _on_slide(e, cb=on_change):
            val_label.text = _format(e.value)
            return cb(e.value)

        ui.slider(
            min=min_val, max=max_val, step=step, value=value,
            on_change=_on_slide,
        ).classes("flex-grow")
