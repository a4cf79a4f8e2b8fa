"""
Core geometry types for floorplan extrusion.

Point2D / Point3D are plain coordinate values. PlanarMesh and PrismMesh are
the two mesh assemblies handed to the exporter: a vertex list plus a list of
faces, where each face is a tuple of 1-based indices into the vertex list.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Tuple, Union

import numpy as np

DEFAULT_FLOOR_Z = 0.0
DEFAULT_ROOF_Z = 10.0

# 1-based vertex indices, order encodes winding
Face = Tuple[int, ...]


class FloorplanError(Exception):
    """Base exception for reading, meshing and exporting floorplans."""
    pass


class MeshMode(Enum):
    """How a polygon is turned into a mesh."""
    PLANAR = "planar"
    PRISM = "prism"


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float

    @classmethod
    def floor(cls, x: float, y: float, z: float = DEFAULT_FLOOR_Z) -> "Point3D":
        return cls(x, y, z)

    @classmethod
    def roof(cls, x: float, y: float, z: float = DEFAULT_ROOF_Z) -> "Point3D":
        return cls(x, y, z)


@dataclass(frozen=True)
class ExtrusionConfig:
    """Elevations used when lifting a polygon into a prism."""
    floor_z: float = DEFAULT_FLOOR_Z
    roof_z: float = DEFAULT_ROOF_Z


@dataclass(frozen=True)
class PlanarMesh:
    """Flat mesh: the polygon's own points and a single ring face."""
    vertices: Tuple[Point2D, ...] = field(default_factory=tuple)
    faces: Tuple[Face, ...] = field(default_factory=tuple)

    def vertex_array(self) -> np.ndarray:
        """(N, 3) float array with z = 0."""
        if not self.vertices:
            return np.zeros((0, 3), dtype=float)
        return np.array([(v.x, v.y, 0.0) for v in self.vertices], dtype=float)


@dataclass(frozen=True)
class PrismMesh:
    """Closed prism: roof ring, floor ring, top/side/bottom faces."""
    vertices: Tuple[Point3D, ...] = field(default_factory=tuple)
    faces: Tuple[Face, ...] = field(default_factory=tuple)

    def vertex_array(self) -> np.ndarray:
        """(2N, 3) float array in vertex-list order."""
        if not self.vertices:
            return np.zeros((0, 3), dtype=float)
        return np.array([(v.x, v.y, v.z) for v in self.vertices], dtype=float)


MeshAssembly = Union[PlanarMesh, PrismMesh]


def to_points(coords: Sequence[Sequence[float]]) -> List[Point2D]:
    """Convert (x, y) pairs to Point2D values, keeping order and duplicates."""
    return [Point2D(float(c[0]), float(c[1])) for c in coords]


def check_mesh_invariants(mesh: MeshAssembly) -> List[str]:
    """Check face indexing rules.

    Returns list of issue strings (empty = ok).
    """
    issues = []
    vertex_count = len(mesh.vertices)
    for i, face in enumerate(mesh.faces):
        if len(face) < 3:
            issues.append(f"Face {i} has {len(face)} indices (need >= 3)")
        out_of_range = [idx for idx in face if idx < 1 or idx > vertex_count]
        if out_of_range:
            issues.append(
                f"Face {i} has indices outside [1, {vertex_count}]: {out_of_range}"
            )
        if len(set(face)) != len(face):
            issues.append(f"Face {i} repeats an index: {list(face)}")
    return issues
