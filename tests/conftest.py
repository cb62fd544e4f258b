"""
Shared test fixtures for the projection engine tests.
"""
import sys
from pathlib import Path

import numpy as np
import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mesh_generator import box_geometry, sphere_geometry
from projection_config import ProjectionConfig


@pytest.fixture(scope="session")
def cube_geometry():
    """The viewer cube: 2 x 2 x 2, 32 segments per edge."""
    return box_geometry()


@pytest.fixture(scope="session")
def sphere_geometry_default():
    """The viewer sphere: radius 1.2, 64 x 64 segments."""
    return sphere_geometry()


@pytest.fixture
def default_config():
    return ProjectionConfig()


@pytest.fixture
def probe_points():
    """Hand-picked positions off the generated grids."""
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0],
        [-1.0, 0.5, 0.2],
        [0.0, -2.0, 0.5],
        [0.2, 0.1, -1.0],
        [0.3, -0.7, 0.9],
    ])


def find_vertices(positions: np.ndarray, point) -> np.ndarray:
    """Indices of every vertex at *point* (cube corners appear on 3 faces)."""
    hits = np.where(np.all(np.isclose(positions, point, atol=1e-12), axis=1))[0]
    assert len(hits) > 0, f"no vertex at {point}"
    return hits
