"""Floorplan pipeline: annotation file -> per-polygon meshes -> exported files."""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from shapely.geometry import Polygon

from annotation_source import (
    MIN_PRISM_POINTS,
    SourceConfig,
    read_floorplan,
)
from floorplan_geometry import (
    ExtrusionConfig,
    MeshAssembly,
    MeshMode,
    Point2D,
    check_mesh_invariants,
)
from mesh_exporter import ExportConfig, ExportError, export_mesh
from planar_mesher import planar_mesh
from prism_extruder import extrude_polygon
from run_protocol import artifact_name, artifact_path, prepare_output_dir, safe_label, write_json

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    output_dir: str = "data"
    label: str = "wall"
    file_format: str = "obj"
    mode: MeshMode = MeshMode.PRISM
    extrusion: ExtrusionConfig = field(default_factory=ExtrusionConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    write_manifest: bool = True


@dataclass
class PolygonArtifact:
    index: int
    path: str
    point_count: int
    vertex_count: int
    face_count: int
    degenerate: bool
    footprint_area: Optional[float] = None
    perimeter: Optional[float] = None


@dataclass
class PipelineResult:
    output_dir: str
    artifacts: List[PolygonArtifact] = field(default_factory=list)
    manifest_path: Optional[str] = None

    @property
    def paths(self) -> List[str]:
        return [a.path for a in self.artifacts]


def build_mesh(
    points: Sequence[Point2D],
    mode: MeshMode = MeshMode.PRISM,
    extrusion: Optional[ExtrusionConfig] = None,
) -> MeshAssembly:
    """Mesh one polygon in the requested mode."""
    if mode == MeshMode.PLANAR:
        return planar_mesh(points)
    return extrude_polygon(points, extrusion)


def process_shapes(
    polygons: Sequence[Sequence[Point2D]],
    mode: MeshMode = MeshMode.PRISM,
    extrusion: Optional[ExtrusionConfig] = None,
) -> List[MeshAssembly]:
    """Mesh every polygon, in input order. No I/O."""
    return [build_mesh(points, mode, extrusion) for points in polygons]


def run_pipeline(
    polygons: Sequence[Sequence[Point2D]],
    config: Optional[PipelineConfig] = None,
) -> PipelineResult:
    """Mesh and export each polygon, one file per polygon, in input order.

    The first export failure aborts the run; files already written stay.

    Raises:
        ExportError: If an output file or the manifest cannot be written.
    """
    if config is None:
        config = PipelineConfig()

    started = time.perf_counter()
    label = safe_label(config.label)
    try:
        output_dir = prepare_output_dir(config.output_dir)
    except OSError as exc:
        raise ExportError(f"Cannot create output directory {config.output_dir}: {exc}") from exc

    result = PipelineResult(output_dir=str(output_dir))
    for index, points in enumerate(polygons):
        mesh = build_mesh(points, config.mode, config.extrusion)
        issues = check_mesh_invariants(mesh)
        if issues:
            logger.warning("Polygon %d mesh is degenerate: %s", index, "; ".join(issues))

        path = artifact_path(config.output_dir, label, index, config.file_format)
        export_mesh(
            mesh,
            path,
            name=artifact_name(label, index),
            config=config.export,
        )
        result.artifacts.append(_describe(index, str(path), points, mesh))

    elapsed = time.perf_counter() - started
    logger.info(
        "Exported %d mesh(es) to %s in %.2fs",
        len(result.artifacts), output_dir, elapsed,
    )

    if config.write_manifest:
        manifest_path = output_dir / "manifest.json"
        try:
            write_json(manifest_path, _build_manifest(config, label, result))
        except OSError as exc:
            raise ExportError(f"Failed writing {manifest_path}: {exc}") from exc
        result.manifest_path = str(manifest_path)

    return result


def run_pipeline_from_annotations(
    annotation_path: str,
    config: Optional[PipelineConfig] = None,
) -> PipelineResult:
    """Read an annotation file and export one mesh per polygon.

    Raises:
        SourceReadError: Annotation file missing or unreadable.
        SourceParseError: Malformed annotations (or a short polygon under
            MinVertexPolicy.REJECT).
        ExportError: An output file cannot be written.
    """
    if config is None:
        config = PipelineConfig()

    floorplan = read_floorplan(annotation_path)
    polygons = floorplan.polygons(config.source)
    logger.info("Processing %d polygon(s) from %s", len(polygons), annotation_path)
    return run_pipeline(polygons, config)


# ─── Internal helpers ────────────────────────────────────────────────────────

def _describe(
    index: int,
    path: str,
    points: Sequence[Point2D],
    mesh: MeshAssembly,
) -> PolygonArtifact:
    artifact = PolygonArtifact(
        index=index,
        path=path,
        point_count=len(points),
        vertex_count=len(mesh.vertices),
        face_count=len(mesh.faces),
        degenerate=len(points) < MIN_PRISM_POINTS,
    )
    if not artifact.degenerate:
        footprint = Polygon([(p.x, p.y) for p in points])
        artifact.footprint_area = float(footprint.area)
        artifact.perimeter = float(footprint.length)
    return artifact


def _build_manifest(
    config: PipelineConfig,
    label: str,
    result: PipelineResult,
) -> Dict[str, Any]:
    return {
        "label": label,
        "mode": config.mode.value,
        "file_format": config.file_format,
        "floor_z": config.extrusion.floor_z,
        "roof_z": config.extrusion.roof_z,
        "min_vertex_policy": config.source.policy.value,
        "created_utc": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "polygons": [asdict(a) for a in result.artifacts],
    }
