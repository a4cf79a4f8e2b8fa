"""
Annotation file reader for labeled floorplan shapes.

The file is a JSON array of labeled items:

    [
      {"type": "polygonlabels", "value": {"points": [[0, 0], [0, 5], ...]}},
      {"type": "rectanglelabels", "value": {...}}
    ]

Only polygon items become floor outlines; rectangle items are recognised and
ignored. Anything else is a parse error.
"""
import json
import math
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union

from floorplan_geometry import FloorplanError, Point2D, to_points

logger = logging.getLogger(__name__)

POLYGON_TYPE = "polygonlabels"
RECTANGLE_TYPE = "rectanglelabels"
KNOWN_TYPES = (POLYGON_TYPE, RECTANGLE_TYPE)

# Fewest points for a non-degenerate prism
MIN_PRISM_POINTS = 3


class SourceReadError(FloorplanError):
    """Annotation file is missing or unreadable."""
    pass


class SourceParseError(FloorplanError):
    """Annotation file content has the wrong structure."""
    pass


class MinVertexPolicy(Enum):
    """What to do with polygons that have 1 or 2 points."""
    PASS_THROUGH = "pass_through"
    SKIP = "skip"
    REJECT = "reject"


@dataclass
class SourceConfig:
    """Configuration for turning annotation items into polygons."""
    policy: MinVertexPolicy = MinVertexPolicy.PASS_THROUGH


@dataclass
class LabeledShape:
    """One annotation item."""
    kind: str
    points: List[Point2D] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)

    @property
    def is_polygon(self) -> bool:
        return self.kind == POLYGON_TYPE


@dataclass
class Floorplan:
    """All labeled shapes read from one annotation file."""
    items: List[LabeledShape] = field(default_factory=list)
    source_path: Optional[str] = None

    def polygons(self, config: Optional[SourceConfig] = None) -> List[List[Point2D]]:
        """Polygon outlines in file order.

        Empty polygons are always dropped. Polygons with fewer than three
        points are handled according to ``config.policy``.

        Raises:
            SourceParseError: A short polygon under MinVertexPolicy.REJECT.
        """
        if config is None:
            config = SourceConfig()

        result = []
        for position, item in enumerate(self.items):
            if not item.is_polygon or not item.points:
                continue
            if len(item.points) < MIN_PRISM_POINTS:
                if config.policy == MinVertexPolicy.REJECT:
                    raise SourceParseError(
                        f"Polygon at item {position} has {len(item.points)} "
                        f"point(s); at least {MIN_PRISM_POINTS} required"
                    )
                if config.policy == MinVertexPolicy.SKIP:
                    logger.warning(
                        "Skipping polygon at item %d with %d point(s)",
                        position, len(item.points),
                    )
                    continue
                logger.warning(
                    "Polygon at item %d has %d point(s); output will be degenerate",
                    position, len(item.points),
                )
            result.append(list(item.points))
        return result


def read_floorplan(path: Union[str, Path]) -> Floorplan:
    """Read and parse an annotation file.

    Args:
        path: Path to the JSON annotation file.

    Returns:
        Floorplan with every item of the file, in order.

    Raises:
        SourceReadError: If the file is missing or cannot be read.
        SourceParseError: If the content is not valid annotation JSON.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"Cannot read annotation file {path}: {exc}") from exc

    try:
        payload = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise SourceParseError(f"Invalid JSON in {path}: {exc}") from exc

    floorplan = parse_floorplan(payload)
    floorplan.source_path = str(path)
    logger.info("Read %d annotation item(s) from %s", len(floorplan.items), path)
    return floorplan


def parse_floorplan(payload: Any) -> Floorplan:
    """Build a Floorplan from already-decoded JSON."""
    if not isinstance(payload, list):
        raise SourceParseError(
            f"Expected a list of annotation items, got {type(payload).__name__}"
        )
    return Floorplan(items=[_parse_item(i, item) for i, item in enumerate(payload)])


# ─── Internal helpers ────────────────────────────────────────────────────────

def _parse_item(position: int, item: Any) -> LabeledShape:
    if not isinstance(item, dict):
        raise SourceParseError(f"Item {position} is not an object")

    kind = item.get("type")
    if kind not in KNOWN_TYPES:
        raise SourceParseError(f"Item {position} has unknown type {kind!r}")

    value = item.get("value", {})
    if not isinstance(value, dict):
        raise SourceParseError(f"Item {position} has a non-object 'value'")

    labels = value.get(kind, [])
    if not isinstance(labels, list):
        labels = []

    if kind == RECTANGLE_TYPE:
        return LabeledShape(kind=kind, labels=[str(label) for label in labels])

    raw_points = value.get("points", [])
    if not isinstance(raw_points, list):
        raise SourceParseError(f"Item {position} has non-list 'points'")
    for j, pt in enumerate(raw_points):
        if not _is_pair(pt):
            raise SourceParseError(
                f"Item {position} point {j} is not an [x, y] pair: {pt!r}"
            )

    return LabeledShape(
        kind=kind,
        points=to_points(raw_points),
        labels=[str(label) for label in labels],
    )


def _is_pair(pt: Any) -> bool:
    if not isinstance(pt, (list, tuple)) or len(pt) != 2:
        return False
    return all(
        isinstance(c, (int, float)) and not isinstance(c, bool) and math.isfinite(c)
        for c in pt
    )


def _reject_constant(name: str) -> float:
    # NaN / Infinity are not JSON
    raise SourceParseError(f"Non-finite number {name} in annotation file")
