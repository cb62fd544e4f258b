"""Tests for mesh_generator module."""
import numpy as np
import pytest

from conftest import find_vertices
from mesh_generator import (
    Geometry,
    GeometryInvariantError,
    box_geometry,
    generate_geometry,
    sphere_geometry,
)
from projection_config import Shape


class TestBoxGeometry:

    def test_counts(self, cube_geometry):
        assert cube_geometry.vertex_count == 6 * 33 * 33
        assert cube_geometry.face_count == 6 * 32 * 32 * 2
        assert cube_geometry.uvs.shape == (cube_geometry.vertex_count, 2)
        assert not cube_geometry.uvs.any()

    def test_extent_is_two_units(self, cube_geometry):
        assert np.allclose(cube_geometry.positions.min(axis=0), -1.0)
        assert np.allclose(cube_geometry.positions.max(axis=0), 1.0)

    def test_corner_shared_by_three_faces(self, cube_geometry):
        hits = find_vertices(cube_geometry.positions, [1.0, 1.0, 1.0])
        assert len(hits) == 3

    def test_every_vertex_on_surface(self, cube_geometry):
        max_abs = np.abs(cube_geometry.positions).max(axis=1)
        assert np.allclose(max_abs, 1.0)

    def test_face_order_starts_with_positive_x(self):
        geo = box_geometry(segments=1)
        assert geo.vertex_count == 24
        assert np.allclose(geo.positions[:4, 0], 1.0)
        assert np.allclose(geo.positions[4:8, 0], -1.0)
        assert np.allclose(geo.positions[8:12, 1], 1.0)
        assert np.allclose(geo.positions[20:24, 2], -1.0)

    def test_faces_reference_valid_vertices(self, cube_geometry):
        assert cube_geometry.faces.min() == 0
        assert cube_geometry.faces.max() == cube_geometry.vertex_count - 1

    def test_positions_are_read_only(self, cube_geometry):
        with pytest.raises(ValueError):
            cube_geometry.positions[0, 0] = 5.0

    def test_invalid_segments(self):
        with pytest.raises(ValueError):
            box_geometry(segments=0)


class TestSphereGeometry:

    def test_counts(self, sphere_geometry_default):
        geo = sphere_geometry_default
        assert geo.vertex_count == 65 * 65
        # Pole rows contribute one triangle per quad instead of two.
        assert geo.face_count == 64 * 64 * 2 - 2 * 64

    def test_radius(self, sphere_geometry_default):
        radii = np.linalg.norm(sphere_geometry_default.positions, axis=1)
        assert np.allclose(radii, 1.2)

    def test_top_pole_on_axis(self, sphere_geometry_default):
        top = sphere_geometry_default.positions[:65]
        assert np.all(top[:, 1] == 1.2)
        assert np.all(top[:, 0] == 0.0)
        assert np.all(top[:, 2] == 0.0)

    def test_no_degenerate_triangles(self, sphere_geometry_default):
        faces = sphere_geometry_default.faces
        assert np.all(faces[:, 0] != faces[:, 1])
        assert np.all(faces[:, 1] != faces[:, 2])
        assert np.all(faces[:, 0] != faces[:, 2])

    def test_invalid_segments(self):
        with pytest.raises(ValueError):
            sphere_geometry(width_segments=2)


class TestGeometry:

    def test_generate_dispatch(self):
        assert generate_geometry(Shape.CUBE).shape is Shape.CUBE
        assert generate_geometry(Shape.SPHERE).shape is Shape.SPHERE

    def test_generate_returns_fresh_geometry(self):
        a = generate_geometry(Shape.CUBE)
        b = generate_geometry(Shape.CUBE)
        assert a is not b
        assert np.array_equal(a.positions, b.positions)

    def test_with_uvs_shares_positions(self, cube_geometry):
        uvs = np.ones((cube_geometry.vertex_count, 2))
        updated = cube_geometry.with_uvs(uvs)
        assert updated.positions is cube_geometry.positions
        assert updated.faces is cube_geometry.faces
        assert not cube_geometry.uvs.any()

    def test_with_uvs_length_mismatch_is_fatal(self, cube_geometry):
        with pytest.raises(GeometryInvariantError):
            cube_geometry.with_uvs(np.zeros((cube_geometry.vertex_count - 1, 2)))

    def test_constructor_rejects_bad_uv_shape(self):
        with pytest.raises(GeometryInvariantError):
            Geometry(
                positions=np.zeros((3, 3)),
                faces=np.array([[0, 1, 2]]),
                uvs=np.zeros((3, 3)),
            )

    def test_to_trimesh_keeps_vertex_order(self, cube_geometry):
        mesh = cube_geometry.to_trimesh()
        assert len(mesh.vertices) == cube_geometry.vertex_count
        assert np.array_equal(mesh.vertices, cube_geometry.positions)
        assert len(mesh.faces) == cube_geometry.face_count
