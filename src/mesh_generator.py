"""
Procedural primitives for the projection engine.

Two shapes only, both generated on a fixed, fairly dense grid so that the
curved projections (cylindrical, spherical) produce smooth gradients even on
the flat faces of the cube:

- Cube: 2 x 2 x 2 box, 32 segments per edge, each face owning its vertices.
- Sphere: UV-sphere of radius 1.2, 64 x 64 segments, Y as the polar axis.

Vertex and triangle order follow the usual WebGL primitive builders so the
buffers can be handed to a three.js-based viewer unchanged.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import logging
import numpy as np
import trimesh

from projection_config import Shape

logger = logging.getLogger(__name__)

CUBE_SIZE = 2.0
CUBE_SEGMENTS = 32
SPHERE_RADIUS = 1.2
SPHERE_SEGMENTS = 64


class GeometryInvariantError(RuntimeError):
    """The UV buffer no longer matches the vertex buffer.

    This is a programming error, never a recoverable condition.
    """


@dataclass
class Geometry:
    """Vertex positions, triangles and a parallel per-vertex UV buffer."""

    positions: np.ndarray              # (N, 3) float64, read-only
    faces: np.ndarray                  # (M, 3) int64, read-only
    uvs: Optional[np.ndarray] = None   # (N, 2) float64
    shape: Optional[Shape] = None

    def __post_init__(self):
        if self.uvs is None:
            self.uvs = np.zeros((len(self.positions), 2), dtype=np.float64)
        check_uv_buffer(self.positions, self.uvs)

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def face_count(self) -> int:
        return int(self.faces.shape[0])

    def with_uvs(self, uvs: np.ndarray) -> "Geometry":
        """Return a new Geometry with *uvs*; positions and faces are shared."""
        uvs = np.asarray(uvs, dtype=np.float64)
        check_uv_buffer(self.positions, uvs)
        return Geometry(
            positions=self.positions,
            faces=self.faces,
            uvs=uvs,
            shape=self.shape,
        )

    def to_trimesh(self, texture=None, uvs: Optional[np.ndarray] = None) -> trimesh.Trimesh:
        """Build a trimesh without merging vertices.

        Args:
            texture: optional PIL image attached through TextureVisuals
            uvs: optional replacement UV buffer (e.g. tiled coordinates)
        """
        uv = self.uvs if uvs is None else np.asarray(uvs, dtype=np.float64)
        check_uv_buffer(self.positions, uv)
        mesh = trimesh.Trimesh(
            vertices=np.array(self.positions),
            faces=np.array(self.faces),
            process=False,
        )
        if texture is not None:
            material = trimesh.visual.material.PBRMaterial(
                baseColorTexture=texture,
                metallicFactor=0.1,
                roughnessFactor=0.3,
                doubleSided=True,
            )
            mesh.visual = trimesh.visual.TextureVisuals(uv=np.array(uv), material=material)
        return mesh


def check_uv_buffer(positions: np.ndarray, uvs: np.ndarray) -> None:
    """Raise GeometryInvariantError unless there is exactly one UV per vertex."""
    if uvs.ndim != 2 or uvs.shape[1] != 2:
        raise GeometryInvariantError(f"UV buffer must be (N, 2), got {uvs.shape}")
    if len(uvs) != len(positions):
        raise GeometryInvariantError(
            f"UV buffer length {len(uvs)} != vertex count {len(positions)}"
        )


def _freeze(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


# ─── Box ─────────────────────────────────────────────────────────────────────

def _build_plane(
    u_idx: int,
    v_idx: int,
    w_idx: int,
    udir: float,
    vdir: float,
    width: float,
    height: float,
    depth: float,
    grid_x: int,
    grid_y: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """One face of the box: a (grid_x+1) x (grid_y+1) vertex lattice.

    Components *u_idx* / *v_idx* span the face, *w_idx* is the face normal
    axis placed at ``depth / 2``.
    """
    xs = np.arange(grid_x + 1, dtype=np.float64) * (width / grid_x) - width / 2.0
    ys = np.arange(grid_y + 1, dtype=np.float64) * (height / grid_y) - height / 2.0
    grid_u, grid_v = np.meshgrid(xs, ys, indexing="xy")  # row-major over iy

    verts = np.empty((grid_u.size, 3), dtype=np.float64)
    verts[:, u_idx] = grid_u.reshape(-1) * udir
    verts[:, v_idx] = grid_v.reshape(-1) * vdir
    verts[:, w_idx] = depth / 2.0

    row = grid_x + 1
    iy, ix = np.meshgrid(np.arange(grid_y), np.arange(grid_x), indexing="ij")
    a = (ix + row * iy).reshape(-1)
    b = (ix + row * (iy + 1)).reshape(-1)
    c = (ix + 1 + row * (iy + 1)).reshape(-1)
    d = (ix + 1 + row * iy).reshape(-1)
    # Two triangles per quad, interleaved per quad: (a, b, d), (b, c, d)
    faces = np.stack(
        [np.stack([a, b, d], axis=1), np.stack([b, c, d], axis=1)], axis=1,
    ).reshape(-1, 3)
    return verts, faces


def box_geometry(
    width: float = CUBE_SIZE,
    height: float = CUBE_SIZE,
    depth: float = CUBE_SIZE,
    segments: int = CUBE_SEGMENTS,
) -> Geometry:
    """Axis-aligned box centred at the origin, subdivided on every face."""
    if segments < 1:
        raise ValueError(f"segments must be >= 1, got {segments}")

    x, y, z = 0, 1, 2
    planes = [
        (z, y, x, -1, -1, depth, height, width),    # +X
        (z, y, x, 1, -1, depth, height, -width),    # -X
        (x, z, y, 1, 1, width, depth, height),      # +Y
        (x, z, y, 1, -1, width, depth, -height),    # -Y
        (x, y, z, 1, -1, width, height, depth),     # +Z
        (x, y, z, -1, -1, width, height, -depth),   # -Z
    ]

    all_verts: List[np.ndarray] = []
    all_faces: List[np.ndarray] = []
    offset = 0
    for u_idx, v_idx, w_idx, udir, vdir, pw, ph, pd in planes:
        verts, faces = _build_plane(
            u_idx, v_idx, w_idx, udir, vdir, pw, ph, pd, segments, segments,
        )
        all_verts.append(verts)
        all_faces.append(faces + offset)
        offset += len(verts)

    return Geometry(
        positions=_freeze(np.concatenate(all_verts)),
        faces=_freeze(np.concatenate(all_faces).astype(np.int64)),
        shape=Shape.CUBE,
    )


# ─── Sphere ──────────────────────────────────────────────────────────────────

def sphere_geometry(
    radius: float = SPHERE_RADIUS,
    width_segments: int = SPHERE_SEGMENTS,
    height_segments: int = SPHERE_SEGMENTS,
) -> Geometry:
    """UV-sphere with Y up.

    Row 0 is the top pole, row ``height_segments`` the bottom pole; each row
    repeats its first vertex at the end to close the seam.
    """
    if width_segments < 3 or height_segments < 2:
        raise ValueError("sphere needs width_segments >= 3 and height_segments >= 2")

    phi = np.arange(width_segments + 1, dtype=np.float64) / width_segments * 2.0 * np.pi
    theta = np.arange(height_segments + 1, dtype=np.float64) / height_segments * np.pi
    phi_grid, theta_grid = np.meshgrid(phi, theta, indexing="xy")

    sin_theta = np.sin(theta_grid)
    positions = np.column_stack([
        (-radius * np.cos(phi_grid) * sin_theta).reshape(-1),
        (radius * np.cos(theta_grid)).reshape(-1),
        (radius * np.sin(phi_grid) * sin_theta).reshape(-1),
    ])

    row = width_segments + 1
    faces = []
    for iy in range(height_segments):
        for ix in range(width_segments):
            a = iy * row + ix + 1
            b = iy * row + ix
            c = (iy + 1) * row + ix
            d = (iy + 1) * row + ix + 1
            if iy != 0:
                faces.append((a, b, d))
            if iy != height_segments - 1:
                faces.append((b, c, d))

    return Geometry(
        positions=_freeze(positions),
        faces=_freeze(np.array(faces, dtype=np.int64)),
        shape=Shape.SPHERE,
    )


def generate_geometry(shape: Shape) -> Geometry:
    """Fresh geometry for *shape* at the fixed viewer resolution."""
    if shape is Shape.SPHERE:
        geometry = sphere_geometry()
    else:
        geometry = box_geometry()
    logger.debug(
        "Generated %s: %d vertices, %d faces",
        shape.value, geometry.vertex_count, geometry.face_count,
    )
    return geometry
