"""
Planarity checks for connections on the ground plane.

Positions are 3-D ``(x, y, z)`` tuples; every test projects them onto the
horizontal ``(x, z)`` plane first.  Two segments that share an endpoint
(within :data:`ENDPOINT_EPSILON`) never count as crossing, so connections
may fan in and out of a node freely.
"""

from __future__ import annotations

import logging
import math
from itertools import combinations
from typing import Iterable, Optional, Sequence

from levelforge.graph import Edge, LevelGraph, Position

logger = logging.getLogger(__name__)

ENDPOINT_EPSILON = 0.01

Segment = tuple[Position, Position]


def _ground(p: Position) -> tuple[float, float]:
    return (p[0], p[2])


def _cross(ax: float, ay: float, bx: float, by: float) -> float:
    """z component of the 3-D cross product of two ground vectors."""
    return ax * by - ay * bx


def segments_intersect(p1: Position, p2: Position, p3: Position, p4: Position) -> bool:
    """
    Return True if segment p1-p2 properly crosses segment p3-p4.

    Touching at a shared endpoint is allowed.  Collinear overlaps are not
    reported as crossings, since each orientation test must see a strict
    sign change.
    """
    a, b, c, d = _ground(p1), _ground(p2), _ground(p3), _ground(p4)

    if (
        math.dist(a, c) < ENDPOINT_EPSILON
        or math.dist(a, d) < ENDPOINT_EPSILON
        or math.dist(b, c) < ENDPOINT_EPSILON
        or math.dist(b, d) < ENDPOINT_EPSILON
    ):
        return False

    abx, aby = b[0] - a[0], b[1] - a[1]
    cdx, cdy = d[0] - c[0], d[1] - c[1]

    d1 = _cross(c[0] - a[0], c[1] - a[1], abx, aby)
    d2 = _cross(d[0] - a[0], d[1] - a[1], abx, aby)
    d3 = _cross(a[0] - c[0], a[1] - c[1], cdx, cdy)
    d4 = _cross(b[0] - c[0], b[1] - c[1], cdx, cdy)

    return ((d1 > 0 > d2) or (d1 < 0 < d2)) and ((d3 > 0 > d4) or (d3 < 0 < d4))


def would_intersect(a: Position, b: Position, segments: Iterable[Segment]) -> bool:
    """Check a candidate segment a-b against existing segments."""
    return any(segments_intersect(a, b, start, end) for start, end in segments)


def connection_segments(graph: LevelGraph, edges: Optional[Iterable[Edge]] = None) -> list[Segment]:
    """
    Segments for *edges* (defaults to every mapping edge of *graph*).

    Edges that reference unknown nodes are ignored.
    """
    if edges is None:
        edges = graph.mapping_edges()
    segments: list[Segment] = []
    for source, target in edges:
        u, v = graph.get_node(source), graph.get_node(target)
        if u is None or v is None:
            continue
        segments.append((u.position, v.position))
    return segments


def would_connection_intersect(
    graph: LevelGraph,
    from_id: str,
    to_id: str,
    edges: Optional[Iterable[Edge]] = None,
) -> bool:
    """
    Would a connection from_id → to_id cross any of *edges*?

    *edges* defaults to the mapping table, which is what generation checks
    against; runtime play passes the realized connections instead.  Unknown
    node ids are treated as intersecting so the caller rejects the edge.
    """
    u, v = graph.get_node(from_id), graph.get_node(to_id)
    if u is None or v is None:
        return True
    return would_intersect(u.position, v.position, connection_segments(graph, edges))


def find_crossings(
    graph: LevelGraph,
    edges: Optional[Sequence[Edge]] = None,
) -> list[tuple[Edge, Edge]]:
    """Full O(E²) pass: every pair of edges whose segments cross."""
    if edges is None:
        edges = graph.mapping_edges()

    located = [
        (edge, graph.get_node(edge[0]), graph.get_node(edge[1]))
        for edge in edges
    ]
    located = [(edge, u, v) for edge, u, v in located if u is not None and v is not None]

    crossings: list[tuple[Edge, Edge]] = []
    for (e1, u1, v1), (e2, u2, v2) in combinations(located, 2):
        if segments_intersect(u1.position, v1.position, u2.position, v2.position):
            crossings.append((e1, e2))

    if crossings:
        logger.debug("Found %d crossing edge pair(s)", len(crossings))
    return crossings
