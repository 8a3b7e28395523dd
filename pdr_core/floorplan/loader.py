"""
Floor-plan JSON loading.

A floor document bundles the three record lists of one floor:

    {
        "walls":     [{"x1": .., "y1": .., "x2": .., "y2": ..}, ...],
        "stairs":    [{"x1": .., "y1": .., "x2": .., "y2": ..,
                       "type": "stairs", "stair_polygon_id": 1,
                       "floors_connected": [1, 2]}, ...],
        "entrances": [{"id": 1, "x": .., "y": .., "stairs": false}, ...]
    }

Each list may also be loaded on its own from a file holding just the JSON
array. A record that cannot be parsed is skipped with a UserWarning; the
rest of the floor still loads.
"""

import json
import logging
import math
import warnings
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar, Union

from pdr_core.floorplan.polygon import build_polygons
from pdr_core.floorplan.types import Entrance, FloorPlan, LineSegment, Wall

logger = logging.getLogger(__name__)

T = TypeVar('T')
PathLike = Union[str, Path]


def _coord(record: Dict[str, Any], key: str) -> float:
    value = float(record[key])
    if not math.isfinite(value):
        raise ValueError(f"{key} is not finite: {record[key]!r}")
    return value


def _integer(record: Dict[str, Any], key: str) -> int:
    value = record[key]
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{key} is not an integer: {value!r}")
    return int(value)


def parse_wall(record: Dict[str, Any]) -> Wall:
    """Parse a wall record {x1, y1, x2, y2}."""
    return Wall(
        x1=_coord(record, 'x1'), y1=_coord(record, 'y1'),
        x2=_coord(record, 'x2'), y2=_coord(record, 'y2'),
    )


def parse_stair_line(record: Dict[str, Any]) -> LineSegment:
    """
    Parse a stair-line record.

    Required: x1, y1, x2, y2, stair_polygon_id. Optional: type (default
    ''), floors_connected (default empty).
    """
    floors = record.get('floors_connected') or ()
    return LineSegment(
        x1=_coord(record, 'x1'), y1=_coord(record, 'y1'),
        x2=_coord(record, 'x2'), y2=_coord(record, 'y2'),
        group_id=_integer(record, 'stair_polygon_id'),
        kind=str(record.get('type', '')),
        connected_floors=tuple(float(f) for f in floors),
    )


def parse_entrance(record: Dict[str, Any]) -> Entrance:
    """Parse an entrance record {id, x, y, stairs}."""
    return Entrance(
        id=_integer(record, 'id'),
        x=_coord(record, 'x'),
        y=_coord(record, 'y'),
        is_stair_link=bool(record.get('stairs', False)),
    )


def parse_records(
    records: Optional[Iterable[Dict[str, Any]]],
    parser: Callable[[Dict[str, Any]], T],
    kind: str,
) -> List[T]:
    """
    Parse a list of records, skipping the ones that fail.

    Args:
        records: Raw JSON objects (None is treated as empty).
        parser: Record parser, e.g. parse_wall.
        kind: Name used in warnings.

    Returns:
        Parsed records in input order.
    """
    parsed: List[T] = []
    for i, record in enumerate(records or ()):
        try:
            if not isinstance(record, dict):
                raise TypeError(f"expected an object, got {type(record).__name__}")
            parsed.append(parser(record))
        except (KeyError, TypeError, ValueError) as e:
            message = f"Skipping malformed {kind} record #{i}: {e!r}"
            logger.warning(message)
            warnings.warn(message, UserWarning)
    return parsed


def floor_plan_from_dict(document: Dict[str, Any], precision: Optional[int] = None) -> FloorPlan:
    """
    Build a FloorPlan from a parsed floor document.

    Args:
        document: Dictionary with optional 'walls', 'stairs' and
                  'entrances' lists.
        precision: Endpoint matching precision for stairwell tracing.
    """
    walls = parse_records(document.get('walls'), parse_wall, 'wall')
    stair_lines = parse_records(document.get('stairs'), parse_stair_line, 'stair line')
    entrances = parse_records(document.get('entrances'), parse_entrance, 'entrance')

    stairwells = build_polygons(stair_lines, precision)
    for poly in stairwells:
        if not poly.closed:
            logger.warning(
                "Stairwell %s did not close (%d points traced)", poly.group_id, len(poly)
            )

    logger.info(
        "Floor plan: %d walls, %d stairwells, %d entrances",
        len(walls), len(stairwells), len(entrances),
    )
    return FloorPlan(walls=walls, stairwells=stairwells, entrances=entrances, stair_lines=stair_lines)


def _load_json(path: PathLike) -> Any:
    with open(path) as f:
        return json.load(f)


def load_floor_plan(path: PathLike, precision: Optional[int] = None) -> FloorPlan:
    """Load a floor document JSON file."""
    document = _load_json(path)
    if not isinstance(document, dict):
        raise ValueError(f"{path}: floor document must be a JSON object")
    return floor_plan_from_dict(document, precision)


def load_walls(path: PathLike) -> List[Wall]:
    """Load a JSON array of wall records."""
    return parse_records(_load_json(path), parse_wall, 'wall')


def load_stair_lines(path: PathLike) -> List[LineSegment]:
    """Load a JSON array of stair-line records."""
    return parse_records(_load_json(path), parse_stair_line, 'stair line')


def load_entrances(path: PathLike) -> List[Entrance]:
    """Load a JSON array of entrance records."""
    return parse_records(_load_json(path), parse_entrance, 'entrance')


def floor_plan_to_dict(plan: FloorPlan) -> Dict[str, Any]:
    """Serialize a FloorPlan back to the floor document layout."""
    return {
        'walls': [
            {'x1': w.x1, 'y1': w.y1, 'x2': w.x2, 'y2': w.y2} for w in plan.walls
        ],
        'stairs': [
            {
                'x1': s.x1, 'y1': s.y1, 'x2': s.x2, 'y2': s.y2,
                'type': s.kind,
                'stair_polygon_id': s.group_id,
                'floors_connected': list(s.connected_floors),
            }
            for s in plan.stair_lines
        ],
        'entrances': [
            {'id': e.id, 'x': e.x, 'y': e.y, 'stairs': e.is_stair_link}
            for e in plan.entrances
        ],
    }
