"""
UV projection engine.

Computes one (u, v) per vertex from the vertex positions, a computation
axis, an offset triple and a projection mode. Every mode works on the
offset working copy ``p = position + offsets``; modes that need a direction
use ``n = p / |p|``.

The constant 1.5 and divisor 3 used by the linear modes map the +/-1.5 unit
extent of both primitives into [0, 1] at zero offset.

All functions are vectorised over an (N, 3) array and pure: identical input
gives bit-identical output.
"""

from typing import Callable, Dict, Optional, Tuple

import logging
import math
import numpy as np

from axis_remap import resolve_config
from mesh_generator import Geometry, check_uv_buffer
from projection_config import Axis, Projection, ProjectionConfig, coerce_axis, coerce_projection

logger = logging.getLogger(__name__)

EXTENT_HALF = 1.5
EXTENT = 3.0
TWO_PI = 2.0 * math.pi


def _linear(component: np.ndarray) -> np.ndarray:
    return (component + EXTENT_HALF) / EXTENT


def _normalize(p: np.ndarray) -> np.ndarray:
    """Row-wise unit vectors; a zero row stays zero."""
    length = np.linalg.norm(p, axis=1)
    length = np.where(length == 0.0, 1.0, length)
    return p / length[:, None]


def planar_uvs(p: np.ndarray, axis: Axis) -> np.ndarray:
    """Project onto the plane perpendicular to *axis*."""
    x, y, z = p[:, 0], p[:, 1], p[:, 2]
    if axis is Axis.X:
        u, v = _linear(z), _linear(y)
    elif axis is Axis.Y:
        u, v = _linear(x), _linear(z)
    else:
        u, v = _linear(x), _linear(y)
    return np.column_stack([u, v])


def spherical_uvs(p: np.ndarray, axis: Axis) -> np.ndarray:
    """Equirectangular longitude/latitude mapping with a selectable pole.

    The direction is reordered so that the chosen axis lands in the polar
    (second) slot. Where the longitude is undefined (exactly on the pole)
    u is pinned to 0.5.
    """
    n = _normalize(p)
    if axis is Axis.X:
        n = n[:, [1, 0, 2]]
    elif axis is Axis.Z:
        n = n[:, [0, 2, 1]]

    on_pole = (n[:, 0] == 0.0) & (n[:, 2] == 0.0)
    u = np.where(on_pole, 0.5, 0.5 + np.arctan2(n[:, 2], n[:, 0]) / TWO_PI)
    v = 0.5 + np.arcsin(np.clip(n[:, 1], -1.0, 1.0)) / math.pi
    return np.column_stack([u, v])


def cylindrical_uvs(p: np.ndarray, axis: Axis) -> np.ndarray:
    """Angle around *axis* for u, signed height along it for v."""
    x, y, z = p[:, 0], p[:, 1], p[:, 2]
    if axis is Axis.X:
        angle, height = np.arctan2(z, y), x
    elif axis is Axis.Y:
        angle, height = np.arctan2(x, z), y
    else:
        angle, height = np.arctan2(x, y), z
    u = (angle + math.pi) / TWO_PI
    return np.column_stack([u, _linear(height)])


def box_uvs(p: np.ndarray, axis: Optional[Axis] = None) -> np.ndarray:
    """Cubic projection: planar per dominant face of the direction.

    *axis* is accepted for a uniform signature and ignored. Ties resolve
    X, then Y, then Z. Opposite faces are flipped so they do not mirror.
    """
    x, y, z = p[:, 0], p[:, 1], p[:, 2]
    n = _normalize(p)
    a = np.abs(n)
    largest = a.max(axis=1)

    x_dom = a[:, 0] == largest
    y_dom = ~x_dom & (a[:, 1] == largest)

    u_x = _linear(z)
    u_x = np.where(n[:, 0] > 0, 1.0 - u_x, u_x)
    v_x = _linear(y)

    u_y = _linear(x)
    v_y = _linear(z)
    v_y = np.where(n[:, 1] < 0, 1.0 - v_y, v_y)

    u_z = _linear(x)
    u_z = np.where(n[:, 2] < 0, 1.0 - u_z, u_z)
    v_z = _linear(y)

    u = np.where(x_dom, u_x, np.where(y_dom, u_y, u_z))
    v = np.where(x_dom, v_x, np.where(y_dom, v_y, v_z))
    return np.column_stack([u, v])


_PROJECTORS: Dict[Projection, Callable[[np.ndarray, Axis], np.ndarray]] = {
    Projection.PLANAR: planar_uvs,
    Projection.BOX: box_uvs,
    Projection.CYLINDRICAL: cylindrical_uvs,
    Projection.SPHERICAL: spherical_uvs,
}


def project_uvs(
    positions: np.ndarray,
    projection: Projection,
    axis: Axis,
    offsets: Tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> np.ndarray:
    """Compute the (N, 2) UV buffer for *positions*.

    *axis* and *offsets* must already be resolved into the primitive's
    native frame (see ``axis_remap.resolve_axes``). Unknown projection or
    axis values fall back to planar / Z.
    """
    positions = np.asarray(positions, dtype=np.float64)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise ValueError(f"positions must have shape (N, 3), got {positions.shape}")

    projector = _PROJECTORS[coerce_projection(projection)]
    p = positions + np.asarray(offsets, dtype=np.float64)
    return projector(p, coerce_axis(axis))


def recompute_uvs(geometry: Geometry, config: ProjectionConfig) -> Geometry:
    """Return a new Geometry whose UV buffer matches *config*.

    The axis remap is resolved once and used for both the formula and the
    offset swap. The input geometry is not modified.
    """
    check_uv_buffer(geometry.positions, geometry.uvs)
    resolved = resolve_config(config)
    uvs = project_uvs(
        geometry.positions, config.projection, resolved.axis, resolved.offsets,
    )
    return geometry.with_uvs(uvs)


def uv_bounds(uvs: np.ndarray) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """((u_min, v_min), (u_max, v_max)) of a UV buffer."""
    if len(uvs) == 0:
        return (0.0, 0.0), (0.0, 0.0)
    lo = uvs.min(axis=0)
    hi = uvs.max(axis=0)
    return (float(lo[0]), float(lo[1])), (float(hi[0]), float(hi[1]))
