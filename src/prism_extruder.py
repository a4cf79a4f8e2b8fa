"""
Polygon extrusion into closed prism meshes.

Vertex layout for an N-point polygon:
  1..N     roof ring (z = roof_z), input order
  N+1..2N  floor ring (z = floor_z), input order

Face layout: top cap, one quad per polygon edge (closing edge included),
bottom cap. Indices are 1-based, as consumed by the OBJ writer.
"""
import logging
from typing import List, Optional, Sequence

from floorplan_geometry import ExtrusionConfig, Face, Point2D, Point3D, PrismMesh

logger = logging.getLogger(__name__)


def extrude_polygon(
    points: Sequence[Point2D],
    config: Optional[ExtrusionConfig] = None,
) -> PrismMesh:
    """Extrude an ordered polygon between the floor and roof elevations.

    Args:
        points: Polygon outline; the last point connects back to the first.
        config: Floor/roof elevations (defaults: 0.0 / 10.0).

    Returns:
        PrismMesh with 2N vertices and N + 2 faces.
    """
    if config is None:
        config = ExtrusionConfig()

    n = len(points)
    if n == 0:
        return PrismMesh()
    if n < 3:
        logger.debug("Extruding degenerate polygon with %d point(s)", n)

    roof = [Point3D.roof(p.x, p.y, config.roof_z) for p in points]
    floor = [Point3D.floor(p.x, p.y, config.floor_z) for p in points]

    faces: List[Face] = [tuple(range(1, n + 1))]
    faces.extend(side_faces(n))
    faces.append(tuple(range(n + 1, 2 * n + 1)))

    return PrismMesh(vertices=tuple(roof + floor), faces=tuple(faces))


def side_faces(n: int) -> List[Face]:
    """Quads joining each roof edge (i, next) to its floor counterpart."""
    faces = []
    for i in range(1, n + 1):
        nxt = 1 if i == n else i + 1
        faces.append((i, nxt, nxt + n, i + n))
    return faces
