"""Tests for the axis remapper."""
import pytest

from axis_remap import ResolvedAxes, resolve_axes, resolve_config
from projection_config import Axis, ProjectionConfig


class TestStandardConvention:

    @pytest.mark.parametrize("axis", list(Axis))
    def test_axis_unchanged(self, axis):
        assert resolve_axes(axis, (0.0, 0.0, 0.0)).axis is axis

    def test_offsets_unchanged(self):
        resolved = resolve_axes(Axis.Y, (0.1, -0.2, 0.3))
        assert resolved == ResolvedAxes(axis=Axis.Y, offsets=(0.1, -0.2, 0.3))


class TestAlternateConvention:

    def test_up_and_depth_swap(self):
        assert resolve_axes(Axis.Z, (0, 0, 0), True).axis is Axis.Y
        assert resolve_axes(Axis.Y, (0, 0, 0), True).axis is Axis.Z
        assert resolve_axes(Axis.X, (0, 0, 0), True).axis is Axis.X

    def test_y_and_z_offsets_swap(self):
        resolved = resolve_axes(Axis.X, (1.0, 2.0, 3.0), True)
        assert resolved.offsets == (1.0, 3.0, 2.0)

    def test_remap_twice_is_identity(self):
        once = resolve_axes(Axis.Z, (0.5, -1.0, 1.5), True)
        twice = resolve_axes(once.axis, once.offsets, True)
        assert twice == ResolvedAxes(axis=Axis.Z, offsets=(0.5, -1.0, 1.5))


def test_resolve_config_uses_all_fields():
    cfg = ProjectionConfig(
        axis=Axis.Y, offset_x=0.25, offset_y=-0.5, offset_z=0.75,
        alternate_convention=True,
    )
    resolved = resolve_config(cfg)
    assert resolved.axis is Axis.Z
    assert resolved.offsets == (0.25, 0.75, -0.5)


def test_unknown_axis_falls_back_to_z():
    assert resolve_axes("w", (0, 0, 0)).axis is Axis.Z
