"""
Boundary / tiling policy: how projected UVs turn into texture samples.

Projected coordinates are multiplied by the tiling factor. At sampling time
each pixel then either wraps modulo 1 (repeat on) or, when its coordinate
falls outside the closed unit square, shows a flat green diagnostic colour
instead of a texel (repeat off). The decision is per pixel: tiling scales
coordinates that are interpolated across triangles, so out-of-range regions
can start anywhere between vertices.

``sample_texture`` is the reference per-pixel sampler. Renderers that can't
run custom per-pixel logic (plain glTF viewers) use
``resolve_viewer_texture``, which bakes the same decision into an atlas.
"""

from dataclasses import dataclass
from typing import Tuple

import logging
import numpy as np
from PIL import Image

from projection_config import ProjectionConfig

logger = logging.getLogger(__name__)

DIAGNOSTIC_COLOR: Tuple[int, int, int] = (0, 255, 0)
MAX_ATLAS_SIZE = 2048


@dataclass(frozen=True)
class SamplingPolicy:
    """Tiling factor and wrap behaviour handed to the renderer."""

    tiling: int = 1
    repeat_texture: bool = True

    def __post_init__(self):
        if self.tiling < 1:
            raise ValueError(f"tiling must be >= 1, got {self.tiling}")

    @classmethod
    def from_config(cls, config: ProjectionConfig) -> "SamplingPolicy":
        return cls(tiling=config.tiling, repeat_texture=config.repeat_texture)


@dataclass
class ViewerTexture:
    """Texture image and UVs ready for a renderer with a REPEAT sampler."""

    image: Image.Image
    uvs: np.ndarray
    baked: bool = False
    atlas_origin: Tuple[float, float] = (0.0, 0.0)
    atlas_span: Tuple[float, float] = (1.0, 1.0)


def sampling_coordinates(uvs: np.ndarray, tiling: int) -> np.ndarray:
    """Raw projected UVs scaled by the tiling factor (new array)."""
    return np.asarray(uvs, dtype=np.float64) * float(tiling)


def out_of_range_mask(sample_uvs: np.ndarray) -> np.ndarray:
    """True where a sample coordinate lies outside [0, 1] x [0, 1]."""
    uv = np.asarray(sample_uvs, dtype=np.float64)
    u, v = uv[..., 0], uv[..., 1]
    return (u < 0.0) | (u > 1.0) | (v < 0.0) | (v > 1.0)


def diagnostic_mask(raw_uvs: np.ndarray, policy: SamplingPolicy) -> np.ndarray:
    """Per-vertex flag: would this vertex render in the diagnostic colour."""
    raw = np.asarray(raw_uvs, dtype=np.float64)
    if policy.repeat_texture:
        return np.zeros(raw.shape[:-1], dtype=bool)
    return out_of_range_mask(sampling_coordinates(raw, policy.tiling))


def _pixels(texture) -> np.ndarray:
    pixels = np.asarray(texture)
    if pixels.ndim != 3 or pixels.shape[2] < 3:
        raise ValueError(f"texture must be an RGB image, got shape {pixels.shape}")
    return pixels[..., :3]


def sample_texture(texture, sample_uvs: np.ndarray, repeat_texture: bool) -> np.ndarray:
    """Nearest-texel colours for sample coordinates of any leading shape.

    ``v = 0`` is the bottom image row and ``v = 1`` the top row. Returns a
    uint8 array of shape ``sample_uvs.shape[:-1] + (3,)``.
    """
    pixels = _pixels(texture)
    height, width = pixels.shape[:2]
    uv = np.asarray(sample_uvs, dtype=np.float64)
    u, v = uv[..., 0], uv[..., 1]

    if repeat_texture:
        u = u - np.floor(u)
        v = v - np.floor(v)

    cols = np.clip(np.floor(u * width), 0, width - 1).astype(np.intp)
    rows = np.clip(np.floor((1.0 - v) * height), 0, height - 1).astype(np.intp)
    colors = np.array(pixels[rows, cols], dtype=np.uint8)

    if not repeat_texture:
        colors[out_of_range_mask(uv)] = DIAGNOSTIC_COLOR
    return colors


def resolve_viewer_texture(
    texture: Image.Image,
    sample_uvs: np.ndarray,
    policy: SamplingPolicy,
    max_size: int = MAX_ATLAS_SIZE,
) -> ViewerTexture:
    """Prepare texture + UVs for a renderer that only wraps or clamps.

    Repeat on: the renderer's REPEAT sampler already does the right thing,
    so the texture and tiled UVs pass through.

    Repeat off: an atlas is baked over the integer-aligned bounding box of
    the tiled UVs by running ``sample_texture`` at each atlas pixel centre,
    and the UVs are remapped affinely into it. Interpolating the remapped
    UVs across a triangle lands on the same atlas pixel the per-pixel test
    would have chosen, down to the atlas resolution.
    """
    sample = np.asarray(sample_uvs, dtype=np.float64)
    if policy.repeat_texture:
        return ViewerTexture(image=texture, uvs=sample)

    if len(sample):
        lo_raw = np.minimum(sample.min(axis=0), 0.0)
        hi_raw = np.maximum(sample.max(axis=0), 1.0)
    else:
        lo_raw, hi_raw = np.zeros(2), np.ones(2)
    lo = np.floor(lo_raw)
    hi = np.ceil(hi_raw)
    span = hi - lo

    px_per_unit = max(1, min(texture.width, int(max_size // span.max())))
    width = int(span[0]) * px_per_unit
    height = int(span[1]) * px_per_unit

    us = lo[0] + (np.arange(width) + 0.5) / px_per_unit
    vs = hi[1] - (np.arange(height) + 0.5) / px_per_unit
    grid_u, grid_v = np.meshgrid(us, vs, indexing="xy")
    atlas = sample_texture(texture, np.stack([grid_u, grid_v], axis=-1), False)

    logger.debug(
        "Baked %dx%d boundary atlas over u[%g, %g] v[%g, %g]",
        width, height, lo[0], hi[0], lo[1], hi[1],
    )
    return ViewerTexture(
        image=Image.fromarray(atlas),
        uvs=(sample - lo) / span,
        baked=True,
        atlas_origin=(float(lo[0]), float(lo[1])),
        atlas_span=(float(span[0]), float(span[1])),
    )

