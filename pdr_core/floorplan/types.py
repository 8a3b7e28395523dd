"""
Floor-plan records.

Geometry arrives as flat records in map units (the same screen units the
path is drawn in):

    Wall        {x1, y1, x2, y2}
    stair line  {x1, y1, x2, y2, type, stair_polygon_id, floors_connected}
    Entrance    {id, x, y, stairs}

Stair lines are the unordered outline edges of stairwells; they are traced
into Polygons grouped by stair_polygon_id.
"""

from dataclasses import dataclass, field
from typing import Hashable, List, Optional, Tuple

Point = Tuple[float, float]


@dataclass(frozen=True)
class Wall:
    """One wall segment."""

    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def endpoints(self) -> Tuple[Point, Point]:
        return (self.x1, self.y1), (self.x2, self.y2)


@dataclass(frozen=True)
class LineSegment:
    """
    One outline edge of a stairwell polygon.

    Attributes:
        x1, y1, x2, y2: Endpoints in map units.
        group_id: Polygon this edge belongs to (stair_polygon_id).
        kind: Free-form type tag of the record (e.g. 'stairs').
        connected_floors: Floors the stairwell connects.
    """

    x1: float
    y1: float
    x2: float
    y2: float
    group_id: Hashable = 0
    kind: str = ''
    connected_floors: Tuple[float, ...] = ()

    @property
    def endpoints(self) -> Tuple[Point, Point]:
        return (self.x1, self.y1), (self.x2, self.y2)


@dataclass(frozen=True)
class Entrance:
    """
    A doorway or stairwell entrance.

    Attributes:
        id: Entrance identifier.
        x, y: Position in map units.
        is_stair_link: True if the entrance leads into a stairwell.
    """

    id: int
    x: float
    y: float
    is_stair_link: bool = False


@dataclass(frozen=True)
class Polygon:
    """
    Ordered outline traced from unordered segments.

    Attributes:
        group_id: Group the segments shared.
        points: Vertices in walk order; the start is not repeated at the end.
        closed: True if the trace returned to its start with >= 3 points.
        kind: Type tag copied from the group's first segment.
        connected_floors: Copied from the group's first segment.
    """

    group_id: Optional[Hashable] = None
    points: Tuple[Point, ...] = ()
    closed: bool = False
    kind: str = ''
    connected_floors: Tuple[float, ...] = ()

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class FloorPlan:
    """Everything loaded for one floor."""

    walls: List[Wall] = field(default_factory=list)
    stairwells: List[Polygon] = field(default_factory=list)
    entrances: List[Entrance] = field(default_factory=list)
    stair_lines: List[LineSegment] = field(default_factory=list)
