"""Tests for the GLB asset helpers used by the viewer."""
import os
import typing

import pytest

pytest.importorskip("nicegui")

from projection_config import ProjectionConfig, Shape
from session import compute_projection
from ui.scene_helpers import ProjectionAssetStore, projection_asset_name


def test_asset_name_ignores_auto_rotate(cube_geometry):
    a = compute_projection(cube_geometry, ProjectionConfig(auto_rotate=True))
    b = compute_projection(cube_geometry, ProjectionConfig(auto_rotate=False))
    assert projection_asset_name(a) == projection_asset_name(b)


def test_asset_name_changes_with_config(cube_geometry):
    a = compute_projection(cube_geometry, ProjectionConfig(offset_x=0.1))
    b = compute_projection(cube_geometry, ProjectionConfig(offset_x=0.2))
    assert projection_asset_name(a) != projection_asset_name(b)
    assert projection_asset_name(a).startswith("cube_")


class TestProjectionAssetStore:

    def test_publish_reuses_file(self, tmp_path, sphere_geometry_default):
        store = ProjectionAssetStore(str(tmp_path))
        result = compute_projection(
            sphere_geometry_default, ProjectionConfig(shape=Shape.SPHERE),
        )
        name = store.publish(result)
        path = tmp_path / name
        assert path.is_file()
        mtime = os.path.getmtime(path)

        assert store.publish(result) == name
        assert os.path.getmtime(path) == mtime
        assert len(store) == 1

    def test_slider_drag_keeps_bounded_set(self, tmp_path, cube_geometry):
        store = ProjectionAssetStore(str(tmp_path), max_assets=2)
        names = [
            store.publish(
                compute_projection(cube_geometry, ProjectionConfig(offset_x=i / 100))
            )
            for i in range(5)
        ]

        on_disk = sorted(p.name for p in tmp_path.iterdir())
        assert on_disk == sorted(names[-2:])
        assert store.names() == names[-2:]

    def test_reuse_refreshes_recency(self, tmp_path, cube_geometry):
        store = ProjectionAssetStore(str(tmp_path), max_assets=2)
        results = [
            compute_projection(cube_geometry, ProjectionConfig(offset_y=i / 10))
            for i in range(3)
        ]
        first = store.publish(results[0])
        store.publish(results[1])
        store.publish(results[0])
        store.publish(results[2])

        assert first in store.names()
        assert (tmp_path / first).is_file()
        assert len(list(tmp_path.iterdir())) == 2

    def test_clear_removes_stale_files(self, tmp_path):
        (tmp_path / "cube_0123456789abcdef.glb").write_bytes(b"glTF")
        (tmp_path / ".cube_0123.abc.tmp").write_bytes(b"")
        (tmp_path / "notes.txt").write_text("keep")

        store = ProjectionAssetStore(str(tmp_path))
        assert store.clear() == 2
        assert [p.name for p in tmp_path.iterdir()] == ["notes.txt"]

    def test_rejects_empty_cap(self, tmp_path):
        with pytest.raises(ValueError):
            ProjectionAssetStore(str(tmp_path), max_assets=0)


def test_mode_indicator_error_is_optional():
    from ui.components import build_mode_indicator

    hints = typing.get_type_hints(build_mode_indicator)
    assert hints["error"] == typing.Optional[str]
