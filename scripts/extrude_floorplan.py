#!/usr/bin/env python3
"""
Extrude annotated floorplan polygons into 3D prism meshes.

Reads a JSON annotation file of labeled shapes and writes one mesh file per
polygon, named <label>_<index>.<format>, into the output directory.

Usage:
    python scripts/extrude_floorplan.py --input input.json
    python scripts/extrude_floorplan.py --input plan.json --output out/ --label room --roof-z 3.0
    python scripts/extrude_floorplan.py --input plan.json --mode planar --min-vertex-policy skip
"""
import sys
import argparse
import logging
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from annotation_source import MinVertexPolicy, SourceConfig
from floorplan_geometry import (
    DEFAULT_FLOOR_Z,
    DEFAULT_ROOF_Z,
    ExtrusionConfig,
    FloorplanError,
    MeshMode,
)
from mesh_exporter import SUPPORTED_FORMATS, ExportConfig, MeshGrouping
from pipeline import PipelineConfig, run_pipeline_from_annotations

logger = logging.getLogger("extrude_floorplan")


def main():
    parser = argparse.ArgumentParser(
        description="Extrude annotated floorplan polygons into 3D meshes.",
    )
    parser.add_argument(
        "--input", default="input.json",
        help="Path to the JSON annotation file (default: input.json)",
    )
    parser.add_argument(
        "--output", default="data",
        help="Output directory (default: data)",
    )
    parser.add_argument(
        "--label", default="wall",
        help="Base name for output files (default: wall)",
    )
    parser.add_argument(
        "--format", dest="file_format", default="obj", choices=list(SUPPORTED_FORMATS),
        help="Output mesh format (default: obj)",
    )
    parser.add_argument(
        "--mode", default=MeshMode.PRISM.value, choices=[m.value for m in MeshMode],
        help="prism: extrude between floor and roof; planar: single flat face",
    )
    parser.add_argument(
        "--floor-z", type=float, default=DEFAULT_FLOOR_Z,
        help=f"Floor elevation (default: {DEFAULT_FLOOR_Z})",
    )
    parser.add_argument(
        "--roof-z", type=float, default=DEFAULT_ROOF_Z,
        help=f"Roof elevation (default: {DEFAULT_ROOF_Z})",
    )
    parser.add_argument(
        "--min-vertex-policy", default=MinVertexPolicy.PASS_THROUGH.value,
        choices=[p.value for p in MinVertexPolicy],
        help="Handling of polygons with fewer than 3 points (default: pass_through)",
    )
    parser.add_argument(
        "--no-grouping", action="store_true",
        help="Do not write a face group line in OBJ output",
    )
    parser.add_argument(
        "--no-manifest", action="store_true",
        help="Skip writing manifest.json",
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

    config = PipelineConfig(
        output_dir=args.output,
        label=args.label,
        file_format=args.file_format,
        mode=MeshMode(args.mode),
        extrusion=ExtrusionConfig(floor_z=args.floor_z, roof_z=args.roof_z),
        export=ExportConfig(
            grouping=MeshGrouping.NONE if args.no_grouping else MeshGrouping.BY_COLOR,
        ),
        source=SourceConfig(policy=MinVertexPolicy(args.min_vertex_policy)),
        write_manifest=not args.no_manifest,
    )

    try:
        result = run_pipeline_from_annotations(args.input, config)
    except FloorplanError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    print(f"Exported {len(result.artifacts)} mesh file(s) to {result.output_dir}")
    for artifact in result.artifacts:
        flag = " (degenerate)" if artifact.degenerate else ""
        print(f"  {artifact.path}: {artifact.vertex_count} vertices, "
              f"{artifact.face_count} faces{flag}")


if __name__ == "__main__":
    main()
