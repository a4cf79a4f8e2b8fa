"""
Shared test fixtures for floorplan extrusion tests.
"""
import json
import sys
from pathlib import Path

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from floorplan_geometry import Point2D


HEXAGON_COORDS = [(0, 0), (0, 5), (5, 5), (5, 4), (1, 4), (1, 0)]


@pytest.fixture
def hexagon():
    """The L-shaped six-point floor outline."""
    return [Point2D(float(x), float(y)) for x, y in HEXAGON_COORDS]


@pytest.fixture
def square():
    return [Point2D(0.0, 0.0), Point2D(4.0, 0.0), Point2D(4.0, 4.0), Point2D(0.0, 4.0)]


@pytest.fixture
def write_annotations(tmp_path: Path):
    """Write a list of annotation items to a JSON file and return its path."""
    def _write(items, name="input.json") -> str:
        path = tmp_path / name
        path.write_text(json.dumps(items), encoding="utf-8")
        return str(path)
    return _write


def polygon_item(coords):
    return {
        "type": "polygonlabels",
        "value": {"points": [list(c) for c in coords], "polygonlabels": ["Wall"]},
    }


def rectangle_item():
    return {
        "type": "rectanglelabels",
        "value": {"x": 1, "y": 2, "width": 3, "height": 4, "rectanglelabels": ["Door"]},
    }
