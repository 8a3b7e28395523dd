"""
Polygon reconstruction from unordered line segments.

Stairwell outlines are stored as a bag of edges with no ordering. To fill
them they are traced back into a vertex sequence by walking the adjacency
graph of their endpoints:

    1. adjacency: endpoint -> neighbours (both directions, insertion order)
    2. start at the first endpoint of the first segment
    3. repeatedly move to the first neighbour reached over an unused edge
       (an edge is the unordered pair of its endpoints)
    4. stop on returning to the start, when no unused edge is left, or
       after 2 * len(segments) vertices

The trace never raises on malformed topology (open chains, branches,
duplicate edges); it returns the best partial outline and reports whether
it closed.

Endpoints are matched exactly by default. With ``precision=k`` they are
matched on round(v * 10**k), which joins endpoints that differ by float
noise; the returned coordinates are the first-seen originals.
"""

from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from pdr_core.floorplan.types import LineSegment, Point, Polygon

Key = Tuple[float, float]


def _point_key(p: Point, precision: Optional[int]) -> Key:
    if precision is None:
        return (p[0], p[1])
    scale = 10 ** precision
    return (round(p[0] * scale), round(p[1] * scale))


def _adjacency(
    segments: Sequence[LineSegment],
    precision: Optional[int],
) -> Tuple[Dict[Key, List[Key]], Dict[Key, Point]]:
    adjacency: Dict[Key, List[Key]] = {}
    coords: Dict[Key, Point] = {}
    for seg in segments:
        p1, p2 = seg.endpoints
        k1, k2 = _point_key(p1, precision), _point_key(p2, precision)
        coords.setdefault(k1, p1)
        coords.setdefault(k2, p2)
        adjacency.setdefault(k1, []).append(k2)
        adjacency.setdefault(k2, []).append(k1)
    return adjacency, coords


def trace_outline(
    segments: Sequence[LineSegment],
    precision: Optional[int] = None,
) -> Tuple[List[Point], bool]:
    """
    Walk the segment graph from its first endpoint.

    Args:
        segments: Outline edges in any order and orientation.
        precision: Decimal digits used to match endpoints, None for exact.

    Returns:
        (points, closed): the visited vertices (start not repeated) and
        whether the walk returned to the start with at least 3 vertices.
    """
    if not segments:
        return [], False

    adjacency, coords = _adjacency(segments, precision)
    start = _point_key(segments[0].endpoints[0], precision)
    max_points = 2 * len(segments)

    used = set()
    trace = [start]
    current = start
    returned = False
    while len(trace) <= max_points:
        nxt = None
        for neighbour in adjacency[current]:
            edge = frozenset((current, neighbour))
            if edge not in used:
                used.add(edge)
                nxt = neighbour
                break
        if nxt is None:
            break
        if nxt == start:
            returned = True
            break
        trace.append(nxt)
        current = nxt

    closed = returned and len(trace) >= 3
    return [coords[k] for k in trace], closed


def build_ordered_polygon(
    segments: Sequence[LineSegment],
    precision: Optional[int] = None,
) -> Polygon:
    """
    Trace one polygon from its unordered outline segments.

    Args:
        segments: Edges of a single outline.
        precision: Decimal digits used to match endpoints, None for exact.

    Returns:
        Polygon with group_id/kind/connected_floors from the first segment.
        Empty input gives an empty, open polygon.

    Example:
        >>> square = [LineSegment(0, 0, 1, 0), LineSegment(1, 1, 0, 1),
        ...           LineSegment(1, 0, 1, 1), LineSegment(0, 1, 0, 0)]
        >>> poly = build_ordered_polygon(square)
        >>> poly.points, poly.closed
        (((0, 0), (1, 0), (1, 1), (0, 1)), True)
    """
    if not segments:
        return Polygon()

    points, closed = trace_outline(segments, precision)
    first = segments[0]
    return Polygon(
        group_id=first.group_id,
        points=tuple(points),
        closed=closed,
        kind=first.kind,
        connected_floors=tuple(first.connected_floors),
    )


def group_segments(segments: Iterable[LineSegment]) -> Dict[Hashable, List[LineSegment]]:
    """Group segments by group_id, keeping first-seen group order."""
    groups: Dict[Hashable, List[LineSegment]] = {}
    for seg in segments:
        groups.setdefault(seg.group_id, []).append(seg)
    return groups


def build_polygons(
    segments: Iterable[LineSegment],
    precision: Optional[int] = None,
) -> List[Polygon]:
    """
    Trace one polygon per group_id.

    Returns:
        Polygons in first-seen group order.
    """
    return [
        build_ordered_polygon(group, precision)
        for group in group_segments(segments).values()
    ]
