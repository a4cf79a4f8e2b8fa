"""Tests for mesh_exporter module."""
import os

import pytest
import trimesh

from floorplan_geometry import ExtrusionConfig
from mesh_exporter import (
    ExportConfig,
    ExportError,
    MeshGrouping,
    export_mesh,
    to_trimesh,
    write_obj,
)
from planar_mesher import planar_mesh
from prism_extruder import extrude_polygon


def _lines(path, prefix):
    with open(path, encoding="utf-8") as f:
        return [line.rstrip("\n") for line in f if line.startswith(prefix)]


class TestObjExport:
    """Native OBJ writer."""

    def test_hexagon_faces_written_verbatim(self, hexagon, tmp_path):
        filepath = str(tmp_path / "wall_0.obj")
        result = export_mesh(extrude_polygon(hexagon), filepath)

        assert result == filepath
        assert _lines(filepath, "f ") == [
            "f 1 2 3 4 5 6",
            "f 1 2 8 7",
            "f 2 3 9 8",
            "f 3 4 10 9",
            "f 4 5 11 10",
            "f 5 6 12 11",
            "f 6 1 7 12",
            "f 7 8 9 10 11 12",
        ]

    def test_vertices_untranslated(self, hexagon, tmp_path):
        filepath = str(tmp_path / "wall_0.obj")
        export_mesh(extrude_polygon(hexagon), filepath)
        vertices = _lines(filepath, "v ")
        assert len(vertices) == 12
        assert vertices[0] == "v 0.000000 0.000000 10.000000"
        assert vertices[6] == "v 0.000000 0.000000 0.000000"
        assert vertices[8] == "v 5.000000 5.000000 0.000000"

    def test_by_color_grouping_without_colors(self, square, tmp_path):
        filepath = str(tmp_path / "room.obj")
        export_mesh(extrude_polygon(square), filepath, name="room_3")
        assert _lines(filepath, "o ") == ["o room_3"]
        assert _lines(filepath, "g ") == ["g default"]
        assert _lines(filepath, "mtllib") == []
        assert not os.path.exists(tmp_path / "room.mtl")

    def test_no_grouping(self, square, tmp_path):
        filepath = str(tmp_path / "room.obj")
        config = ExportConfig(grouping=MeshGrouping.NONE)
        export_mesh(extrude_polygon(square), filepath, config=config)
        assert _lines(filepath, "g ") == []

    def test_color_table_writes_mtl(self, square, tmp_path):
        filepath = str(tmp_path / "room.obj")
        config = ExportConfig(export_colors={"brick": (0.7, 0.2, 0.1)})
        write_obj(extrude_polygon(square), filepath, config=config, color="brick")

        assert _lines(filepath, "mtllib") == ["mtllib room.mtl"]
        assert _lines(filepath, "usemtl") == ["usemtl brick"]
        assert _lines(filepath, "g ") == ["g brick"]
        mtl = (tmp_path / "room.mtl").read_text(encoding="utf-8")
        assert "newmtl brick" in mtl

    def test_unknown_color_rejected(self, square, tmp_path):
        config = ExportConfig(export_colors={"brick": (0.7, 0.2, 0.1)})
        with pytest.raises(ExportError):
            export_mesh(extrude_polygon(square), str(tmp_path / "a.obj"),
                        config=config, color="glass")

    def test_planar_mesh_at_zero(self, hexagon, tmp_path):
        filepath = str(tmp_path / "flat.obj")
        export_mesh(planar_mesh(hexagon), filepath)
        assert _lines(filepath, "f ") == ["f 1 2 3 4 5 6"]
        assert all(line.endswith(" 0.000000") for line in _lines(filepath, "v "))

    def test_creates_parent_directory(self, square, tmp_path):
        filepath = str(tmp_path / "nested" / "dir" / "wall_0.obj")
        export_mesh(extrude_polygon(square), filepath)
        assert os.path.isfile(filepath)

    def test_custom_precision(self, square, tmp_path):
        filepath = str(tmp_path / "p.obj")
        export_mesh(extrude_polygon(square), filepath, config=ExportConfig(precision=2))
        assert _lines(filepath, "v ")[0] == "v 0.00 0.00 10.00"


class TestExportErrors:
    """Failures surface as ExportError."""

    def test_unsupported_format(self, square, tmp_path):
        with pytest.raises(ExportError, match="Unsupported"):
            export_mesh(extrude_polygon(square), str(tmp_path / "wall.fbx"))

    def test_unwritable_path(self, square, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(ExportError):
            export_mesh(extrude_polygon(square), str(blocker / "wall_0.obj"))


class TestTrimeshFormats:
    """Fan-triangulated export through trimesh."""

    def test_square_prism_is_watertight(self, square):
        tm = to_trimesh(extrude_polygon(square))
        assert len(tm.vertices) == 8
        assert len(tm.faces) == 12
        assert tm.is_watertight

    def test_stl_export_roundtrip(self, square, tmp_path):
        filepath = str(tmp_path / "wall_0.stl")
        mesh = extrude_polygon(square, ExtrusionConfig(floor_z=0.0, roof_z=3.0))
        export_mesh(mesh, filepath)

        loaded = trimesh.load(filepath, force="mesh")
        assert len(loaded.faces) == 12
        assert loaded.bounds[1][2] == pytest.approx(3.0)

    def test_empty_mesh_converts(self):
        tm = to_trimesh(planar_mesh([]))
        assert len(tm.faces) == 0
