"""
Axis remapping between the two "which way is up" conventions.

The primitives are built Y-up (the WebGL convention). In the alternate
("blender") convention the user thinks Z-up, so the logical up and depth
axes trade places with the native Y and Z axes:

    user X -> native X       offset_x -> x
    user Y -> native Z       offset_y -> z
    user Z -> native Y       offset_z -> y
"""

from dataclasses import dataclass
from typing import Tuple

from projection_config import Axis, ProjectionConfig, coerce_axis

_ALTERNATE_AXES = {Axis.X: Axis.X, Axis.Y: Axis.Z, Axis.Z: Axis.Y}


@dataclass(frozen=True)
class ResolvedAxes:
    """Computation axis plus the offsets to add to native (x, y, z)."""
    axis: Axis
    offsets: Tuple[float, float, float]


def resolve_axes(
    axis: Axis,
    offsets: Tuple[float, float, float],
    alternate_convention: bool = False,
) -> ResolvedAxes:
    """Map the user-facing axis and offset triple into the primitive's frame."""
    axis = coerce_axis(axis)
    ox, oy, oz = (float(o) for o in offsets)
    if not alternate_convention:
        return ResolvedAxes(axis=axis, offsets=(ox, oy, oz))
    return ResolvedAxes(axis=_ALTERNATE_AXES[axis], offsets=(ox, oz, oy))


def resolve_config(config: ProjectionConfig) -> ResolvedAxes:
    return resolve_axes(config.axis, config.offsets, config.alternate_convention)
