"""Flat meshing: one polygon -> one ring face over its own points."""
from typing import Sequence

from floorplan_geometry import PlanarMesh, Point2D


def planar_mesh(points: Sequence[Point2D]) -> PlanarMesh:
    """Build a single-face mesh from an ordered polygon.

    The vertices are the input points unchanged; the face visits them in
    order as ``(1, 2, ..., N)``. An empty polygon gives an empty mesh.
    """
    vertices = tuple(points)
    if not vertices:
        return PlanarMesh()
    face = tuple(range(1, len(vertices) + 1))
    return PlanarMesh(vertices=vertices, faces=(face,))
