"""
Projection configuration: the closed enumerations and the immutable
ProjectionConfig value that drives every recomputation.

The UI and the CLI both hand loose values (strings, camelCase keys, slider
floats) to ``ProjectionConfig.from_dict``; the rest of the code only ever
sees enum members and a frozen dataclass.
"""

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Tuple

import logging
import math

logger = logging.getLogger(__name__)

# Slider bounds of the control panel.
OFFSET_RANGE: Tuple[float, float] = (-2.0, 2.0)
TILING_RANGE: Tuple[int, int] = (1, 10)


class Shape(Enum):
    """Procedural primitives that can be projected onto."""
    CUBE = "cube"
    SPHERE = "sphere"


class Projection(Enum):
    """UV projection formula families."""
    PLANAR = "planar"
    BOX = "box"
    CYLINDRICAL = "cylindrical"
    SPHERICAL = "spherical"


class Axis(Enum):
    X = "x"
    Y = "y"
    Z = "z"


# Role of each axis in the control panel, per convention.
_AXIS_ROLES_STANDARD = {Axis.X: "Side", Axis.Y: "Up", Axis.Z: "Depth"}
_AXIS_ROLES_ALTERNATE = {Axis.X: "Side", Axis.Y: "Depth", Axis.Z: "Up"}

# camelCase keys accepted from web front ends.
_KEY_ALIASES = {
    "offsetX": "offset_x",
    "offsetY": "offset_y",
    "offsetZ": "offset_z",
    "repeatTexture": "repeat_texture",
    "alternateConvention": "alternate_convention",
    "blenderMode": "alternate_convention",
    "blender_mode": "alternate_convention",
    "autoRotate": "auto_rotate",
}


def _coerce(enum_cls, value, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        logger.warning(
            "Unrecognised %s %r; falling back to %s",
            enum_cls.__name__, value, default.value,
        )
        return default


def coerce_shape(value) -> Shape:
    return _coerce(Shape, value, Shape.CUBE)


def coerce_projection(value) -> Projection:
    """Return a Projection, falling back to planar for unknown values."""
    return _coerce(Projection, value, Projection.PLANAR)


def coerce_axis(value) -> Axis:
    """Return an Axis, falling back to Z for unknown values."""
    return _coerce(Axis, value, Axis.Z)


def axis_label(axis: Axis, alternate_convention: bool = False) -> str:
    """Control-panel label, e.g. ``"Z (Up)"`` in blender mode."""
    axis = coerce_axis(axis)
    roles = _AXIS_ROLES_ALTERNATE if alternate_convention else _AXIS_ROLES_STANDARD
    return f"{axis.value.upper()} ({roles[axis]})"


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def _parse_bool(value, name: str) -> bool:
    """Bool from a switch value, a number or a string like ``"false"``."""
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"{name} must be a boolean, got {value!r}")
    return bool(value)


def _clamp(value: float, bounds) -> float:
    lo, hi = bounds
    return min(max(value, lo), hi)


@dataclass(frozen=True)
class ProjectionConfig:
    """Everything a recomputation depends on.

    ``auto_rotate`` is only read by the viewer; the engine ignores it.
    Offsets are unconstrained here; only ``from_dict`` applies the UI range.
    """

    shape: Shape = Shape.CUBE
    projection: Projection = Projection.PLANAR
    axis: Axis = Axis.Z
    offset_x: float = 0.0
    offset_y: float = 0.0
    offset_z: float = 0.0
    tiling: int = 1
    repeat_texture: bool = True
    alternate_convention: bool = False
    auto_rotate: bool = True

    def __post_init__(self):
        if int(self.tiling) != self.tiling or self.tiling < 1:
            raise ValueError(f"tiling must be an integer >= 1, got {self.tiling!r}")
        for name, value in zip(("offset_x", "offset_y", "offset_z"), self.offsets):
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")

    @property
    def offsets(self) -> Tuple[float, float, float]:
        return (self.offset_x, self.offset_y, self.offset_z)

    def with_changes(self, **changes) -> "ProjectionConfig":
        return replace(self, **changes)

    def reset_values(self) -> "ProjectionConfig":
        """Zero the offsets and restore tiling/repeat defaults."""
        return replace(
            self,
            offset_x=0.0,
            offset_y=0.0,
            offset_z=0.0,
            tiling=1,
            repeat_texture=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["shape"] = self.shape.value
        data["projection"] = self.projection.value
        data["axis"] = self.axis.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectionConfig":
        """Build a config from loose UI/CLI values.

        Accepts enum names as strings and either snake_case or the front
        end's camelCase keys. Offsets and tiling are clamped to the slider
        ranges; unknown keys are ignored. Non-finite offsets and switch values
        that are not recognisable booleans raise ValueError.
        """
        values: Dict[str, Any] = {}
        for key, value in data.items():
            key = _KEY_ALIASES.get(key, key)
            values[key] = value

        defaults = cls()
        kwargs: Dict[str, Any] = {
            "shape": coerce_shape(values.get("shape", defaults.shape)),
            "projection": coerce_projection(
                values.get("projection", defaults.projection)
            ),
            "axis": coerce_axis(values.get("axis", defaults.axis)),
        }
        for name in ("offset_x", "offset_y", "offset_z"):
            value = float(values.get(name, getattr(defaults, name)))
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")
            kwargs[name] = _clamp(value, OFFSET_RANGE)
        kwargs["tiling"] = int(
            _clamp(int(round(float(values.get("tiling", defaults.tiling)))), TILING_RANGE)
        )
        for name in ("repeat_texture", "alternate_convention", "auto_rotate"):
            kwargs[name] = _parse_bool(values.get(name, getattr(defaults, name)), name)
        return cls(**kwargs)
