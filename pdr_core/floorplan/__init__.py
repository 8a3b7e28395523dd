"""Floor-plan geometry: records, stairwell polygon tracing and JSON loading."""

from pdr_core.floorplan.loader import (
    floor_plan_from_dict,
    floor_plan_to_dict,
    load_entrances,
    load_floor_plan,
    load_stair_lines,
    load_walls,
    parse_entrance,
    parse_stair_line,
    parse_wall,
)
from pdr_core.floorplan.polygon import (
    build_ordered_polygon,
    build_polygons,
    group_segments,
    trace_outline,
)
from pdr_core.floorplan.types import Entrance, FloorPlan, LineSegment, Polygon, Wall

__all__ = [
    "Entrance",
    "FloorPlan",
    "LineSegment",
    "Polygon",
    "Wall",
    "build_ordered_polygon",
    "build_polygons",
    "floor_plan_from_dict",
    "floor_plan_to_dict",
    "group_segments",
    "load_entrances",
    "load_floor_plan",
    "load_stair_lines",
    "load_walls",
    "parse_entrance",
    "parse_stair_line",
    "parse_wall",
    "trace_outline",
]
