#!/usr/bin/env python3
"""
Export one UV projection of the cube or sphere as a run folder.

Writes the projected mesh (GLB with the diagnostic texture and the boundary
policy applied), the raw UV buffer, the texture and a short summary.

Usage:
    python scripts/export_projection.py --shape cube --projection planar --axis z
    python scripts/export_projection.py --shape sphere --projection spherical --axis y --tiling 3 --no-repeat
    python scripts/export_projection.py --projection cylindrical --axis z --blender-mode --offset-z 0.5
"""
import sys
import argparse
import logging
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from export import ExportConfig, export_projection
from projection_config import Axis, Projection, ProjectionConfig, Shape


def main():
    parser = argparse.ArgumentParser(
        description="Export a UV projection of a procedural primitive.",
    )
    parser.add_argument(
        "--shape", default=Shape.CUBE.value,
        choices=[s.value for s in Shape],
        help="Primitive to project onto (default: cube)",
    )
    parser.add_argument(
        "--projection", default=Projection.PLANAR.value,
        choices=[p.value for p in Projection],
        help="Projection mode (default: planar)",
    )
    parser.add_argument(
        "--axis", default=Axis.Z.value,
        choices=[a.value for a in Axis],
        help="Projection axis, ignored for box (default: z)",
    )
    parser.add_argument("--offset-x", type=float, default=0.0, help="X offset, -2..2")
    parser.add_argument("--offset-y", type=float, default=0.0, help="Y offset, -2..2")
    parser.add_argument("--offset-z", type=float, default=0.0, help="Z offset, -2..2")
    parser.add_argument(
        "--tiling", type=int, default=1,
        help="Texture repeat factor, 1..10 (default: 1)",
    )
    parser.add_argument(
        "--no-repeat", action="store_true",
        help="Show out-of-range regions in green instead of wrapping",
    )
    parser.add_argument(
        "--blender-mode", action="store_true",
        help="Use the Z-up axis convention",
    )
    parser.add_argument(
        "--name", default=None,
        help="Run name (default: <shape>-<projection>)",
    )
    parser.add_argument(
        "--runs-dir", default="runs",
        help="Root directory for run folders (default: runs)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = ProjectionConfig.from_dict({
        "shape": args.shape,
        "projection": args.projection,
        "axis": args.axis,
        "offset_x": args.offset_x,
        "offset_y": args.offset_y,
        "offset_z": args.offset_z,
        "tiling": args.tiling,
        "repeat_texture": not args.no_repeat,
        "alternate_convention": args.blender_mode,
    })
    name = args.name or f"{config.shape.value}-{config.projection.value}"

    result = export_projection(
        config, name=name, config=ExportConfig(runs_dir=args.runs_dir),
    )

    print(f"\nExported {name} -> {result.run_dir}")
    for key, path in sorted(result.artifacts.items()):
        print(f"  {key}: {path}")
    print(f"  summary: {result.summary_path}")


if __name__ == "__main__":
    main()
