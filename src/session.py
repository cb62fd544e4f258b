"""
Projection session: owns the current geometry and the latest result.

Each ``update`` produces a complete new ``ProjectionResult`` and swaps a
single reference, so a reader on another thread sees either the previous
result or the new one, never a half-written UV buffer. The geometry is
regenerated only when the shape changes and is never mutated in place.
"""

from dataclasses import dataclass
from typing import Optional

import logging
import time
import numpy as np
from PIL import Image

from diagnostic_texture import generate_diagnostic_texture
from mesh_generator import Geometry, generate_geometry
from projection_config import ProjectionConfig
from tiling_policy import SamplingPolicy, diagnostic_mask, sampling_coordinates
from uv_projection import recompute_uvs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionResult:
    """Everything the renderer needs for one configuration."""

    config: ProjectionConfig
    geometry: Geometry             # positions + raw projected UVs
    policy: SamplingPolicy
    sample_uvs: np.ndarray         # raw UVs * tiling
    diagnostic_mask: np.ndarray    # per-vertex: renders as diagnostic colour
    elapsed_ms: float

    @property
    def out_of_range_count(self) -> int:
        return int(np.count_nonzero(self.diagnostic_mask))


def compute_projection(geometry: Geometry, config: ProjectionConfig) -> ProjectionResult:
    """Pure recomputation of the UV buffer and sampling data for *config*."""
    started = time.perf_counter()
    projected = recompute_uvs(geometry, config)
    policy = SamplingPolicy.from_config(config)
    sample_uvs = sampling_coordinates(projected.uvs, policy.tiling)
    mask = diagnostic_mask(projected.uvs, policy)
    for array in (projected.uvs, sample_uvs, mask):
        array.flags.writeable = False
    return ProjectionResult(
        config=config,
        geometry=projected,
        policy=policy,
        sample_uvs=sample_uvs,
        diagnostic_mask=mask,
        elapsed_ms=(time.perf_counter() - started) * 1000.0,
    )


class ProjectionSession:
    """One logical viewer session."""

    def __init__(self, config: Optional[ProjectionConfig] = None):
        self._geometry: Optional[Geometry] = None
        self._result: Optional[ProjectionResult] = None
        self.update(config or ProjectionConfig())

    @property
    def result(self) -> ProjectionResult:
        return self._result

    @property
    def config(self) -> ProjectionConfig:
        return self._result.config

    @property
    def geometry(self) -> Geometry:
        return self._result.geometry

    @property
    def texture(self) -> Image.Image:
        """Shared diagnostic texture (read-only)."""
        return generate_diagnostic_texture()

    def update(self, config: ProjectionConfig) -> ProjectionResult:
        """Recompute for *config* and publish the new result."""
        geometry = self._geometry
        if geometry is None or geometry.shape is not config.shape:
            logger.info("Generating %s geometry", config.shape.value)
            geometry = generate_geometry(config.shape)
            self._geometry = geometry

        result = compute_projection(geometry, config)
        self._result = result
        logger.debug(
            "Projected %d vertices (%s, axis %s) in %.1f ms, %d out of range",
            geometry.vertex_count, config.projection.value, config.axis.value,
            result.elapsed_ms, result.out_of_range_count,
        )
        return result
