"""
Mesh export for extruded floorplans.

OBJ is written directly so that face index groups reach the file exactly as
built (1-based, same order, quads and N-gons kept whole). Other formats
(STL, PLY, OFF, GLB) go through trimesh, which needs triangles: faces are
fan-triangulated, so those formats are only correct for convex outlines.

Grouping "by colour" puts every face of a mesh under one ``g`` group named
after the mesh's colour, or ``config.group_name`` when it has none.
"""
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
import trimesh

from floorplan_geometry import FloorplanError, MeshAssembly

logger = logging.getLogger(__name__)

TRIMESH_FORMATS = ("stl", "ply", "off", "glb")
SUPPORTED_FORMATS = ("obj",) + TRIMESH_FORMATS


class ExportError(FloorplanError):
    """An output artifact could not be created or written."""
    pass


class MeshGrouping(Enum):
    """How faces are grouped in the exported file."""
    BY_COLOR = "by_color"
    NONE = "none"


@dataclass
class ExportConfig:
    """Configuration for mesh export."""
    grouping: MeshGrouping = MeshGrouping.BY_COLOR
    # colour name -> RGB in 0..1; None disables the material library
    export_colors: Optional[Dict[str, Tuple[float, float, float]]] = None
    precision: int = 6
    group_name: str = "default"


def export_mesh(
    mesh: MeshAssembly,
    filepath: Union[str, Path],
    name: Optional[str] = None,
    config: Optional[ExportConfig] = None,
    color: Optional[str] = None,
) -> str:
    """Export one mesh to a file; the format follows the file suffix.

    Args:
        mesh: PlanarMesh or PrismMesh.
        filepath: Output path (.obj, .stl, .ply, .off or .glb).
        name: Object name written into the file (default: file stem).
        config: Export settings.
        color: Colour name for by-colour grouping; must be a key of
            ``config.export_colors`` when that table is set.

    Returns:
        Path to the created file.

    Raises:
        ExportError: Unsupported format, unknown colour or I/O failure.
    """
    if config is None:
        config = ExportConfig()

    filepath = str(filepath)
    fmt = Path(filepath).suffix.lower().lstrip(".")
    if fmt not in SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported export format {fmt!r} for {filepath}; "
            f"expected one of {', '.join(SUPPORTED_FORMATS)}"
        )
    if color is not None and config.export_colors is not None:
        if color not in config.export_colors:
            raise ExportError(f"Colour {color!r} is not in the export colour table")

    try:
        os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
        if fmt == "obj":
            write_obj(mesh, filepath, name=name, config=config, color=color)
        else:
            to_trimesh(mesh).export(filepath, file_type=fmt)
    except (OSError, ValueError) as exc:
        raise ExportError(f"Failed writing {filepath}: {exc}") from exc

    logger.info("Exported %s: %s", fmt.upper(), filepath)
    return filepath


def write_obj(
    mesh: MeshAssembly,
    filepath: str,
    name: Optional[str] = None,
    config: Optional[ExportConfig] = None,
    color: Optional[str] = None,
) -> None:
    """Write a mesh as Wavefront OBJ, keeping face indices verbatim."""
    if config is None:
        config = ExportConfig()
    if name is None:
        name = Path(filepath).stem

    vertices = mesh.vertex_array()
    use_materials = config.export_colors is not None and color is not None

    lines = [
        "# Floorplan extrusion",
        f"# Vertices: {len(vertices)}",
        f"# Faces: {len(mesh.faces)}",
    ]
    if use_materials:
        mtl_path = str(Path(filepath).with_suffix(".mtl"))
        _write_mtl(mtl_path, config.export_colors, config.precision)
        lines.append(f"mtllib {Path(mtl_path).name}")

    lines.append(f"o {name}")
    lines.extend(_vertex_lines(vertices, config.precision))

    if config.grouping == MeshGrouping.BY_COLOR:
        lines.append(f"g {color or config.group_name}")
    if use_materials:
        lines.append(f"usemtl {color}")
    lines.extend(_face_lines(mesh.faces))

    with open(filepath, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")


def to_trimesh(mesh: MeshAssembly) -> trimesh.Trimesh:
    """Fan-triangulate a mesh into a trimesh.Trimesh (0-based faces).

    Vertex order is kept and nothing is merged.
    """
    triangles: List[Tuple[int, int, int]] = []
    for face in mesh.faces:
        anchor = face[0] - 1
        for a, b in zip(face[1:-1], face[2:]):
            triangles.append((anchor, a - 1, b - 1))
    faces = np.array(triangles, dtype=np.int64).reshape(-1, 3)
    return trimesh.Trimesh(vertices=mesh.vertex_array(), faces=faces, process=False)


# ─── Internal helpers ────────────────────────────────────────────────────────

def _vertex_lines(vertices: np.ndarray, precision: int) -> List[str]:
    return [
        f"v {x:.{precision}f} {y:.{precision}f} {z:.{precision}f}"
        for x, y, z in vertices
    ]


def _face_lines(faces) -> List[str]:
    # OBJ indices are 1-based, same as the mesh faces
    return ["f " + " ".join(str(idx) for idx in face) for face in faces]


def _write_mtl(
    filepath: str,
    colors: Dict[str, Tuple[float, float, float]],
    precision: int,
) -> None:
    lines = []
    for color_name, (r, g, b) in colors.items():
        lines.append(f"newmtl {color_name}")
        lines.append(f"Kd {r:.{precision}f} {g:.{precision}f} {b:.{precision}f}")
        lines.append("")
    with open(filepath, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
