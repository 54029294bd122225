"""Segment crossing, ring self-intersection and segment overlap tests.

Crossing uses the orientation (2-D cross product) test and only reports
proper crossings: segments that merely touch at an endpoint, or are
collinear, do not cross.

Overlap is a separate proximity heuristic over traced edge segments,
not an exact collinearity test.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from roof_measure.geometry.geodesic import haversine_distance_ft, midpoint

if TYPE_CHECKING:
    from roof_measure.models.measurement import EdgeSegment

#: A planar point as ``(x, y)``.  Geographic coordinates use ``(lng, lat)``.
Point = tuple[float, float]

DEFAULT_OVERLAP_MIDPOINT_RATIO = 0.3
DEFAULT_OVERLAP_LENGTH_DELTA_FT = 5.0


def direction(p: Point, q: Point, r: Point) -> float:
    """Orientation of *r* relative to the directed line *p* → *q*.

    ``(r.x − p.x)(q.y − p.y) − (q.x − p.x)(r.y − p.y)``; the sign tells
    which side of the line *r* lies on, zero means collinear.
    """
    return (r[0] - p[0]) * (q[1] - p[1]) - (q[0] - p[0]) * (r[1] - p[1])


def segments_cross(a1: Point, a2: Point, b1: Point, b2: Point) -> bool:
    """Return ``True`` if segment *a1a2* properly crosses segment *b1b2*."""
    d1 = direction(b1, b2, a1)
    d2 = direction(b1, b2, a2)
    d3 = direction(a1, a2, b1)
    d4 = direction(a1, a2, b2)
    return _opposite_signs(d1, d2) and _opposite_signs(d3, d4)


def ring_self_intersects(ring: Sequence[Point]) -> bool:
    """Return ``True`` if any two non-adjacent edges of *ring* cross.

    Tests every non-adjacent edge pair, O(n²) in the vertex count.  Rings
    with fewer than four vertices cannot self-intersect.
    """
    n = len(ring)
    if n < 4:
        return False

    for i in range(n):
        a1 = ring[i]
        a2 = ring[(i + 1) % n]
        for j in range(i + 2, n):
            # Edge j shares vertex i with edge i when it is the closing edge
            if (j + 1) % n == i:
                continue
            if segments_cross(a1, a2, ring[j], ring[(j + 1) % n]):
                return True
    return False


def segments_overlap(
    s1: EdgeSegment,
    s2: EdgeSegment,
    *,
    midpoint_ratio: float = DEFAULT_OVERLAP_MIDPOINT_RATIO,
    length_delta_ft: float = DEFAULT_OVERLAP_LENGTH_DELTA_FT,
) -> bool:
    """Proximity heuristic for two traced segments describing the same edge.

    Two segments overlap when their midpoints are closer than
    *midpoint_ratio* of their average length and their lengths differ by
    less than *length_delta_ft*.
    """
    mid_distance = haversine_distance_ft(
        midpoint(s1.start, s1.end),
        midpoint(s2.start, s2.end),
    )
    avg_length = (s1.length_ft + s2.length_ft) / 2
    return (
        mid_distance < avg_length * midpoint_ratio
        and abs(s1.length_ft - s2.length_ft) < length_delta_ft
    )


def _opposite_signs(a: float, b: float) -> bool:
    return (a > 0 and b < 0) or (a < 0 and b > 0)
