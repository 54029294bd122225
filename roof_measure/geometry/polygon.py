"""Polygon area, perimeter and closure for geographic rings.

Area uses the Shoelace formula on the local planar projection; perimeter
sums Haversine distances between consecutive vertices.  Both treat the
ring as implicitly closed (last vertex connects back to the first), so
an explicitly repeated closing vertex contributes nothing.

Rings with fewer than three vertices measure zero rather than raising.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from roof_measure.core.constants import MIN_POLYGON_VERTICES
from roof_measure.geometry.geodesic import haversine_distance_ft
from roof_measure.geometry.projection import project_to_local_feet

if TYPE_CHECKING:
    from roof_measure.models.geometry import CartesianPoint, Coordinate


def shoelace_area(points: Sequence[CartesianPoint]) -> float:
    """Return the unsigned area of a planar ring (wraparound indexing)."""
    n = len(points)
    if n < MIN_POLYGON_VERTICES:
        return 0.0

    twice_area = 0.0
    for i in range(n):
        j = (i + 1) % n
        twice_area += points[i].x * points[j].y - points[j].x * points[i].y
    return abs(twice_area) / 2


def polygon_area_sqft(ring: Sequence[Coordinate]) -> float:
    """Return the flat (plan-view) area of a geographic ring in square feet."""
    if len(ring) < MIN_POLYGON_VERTICES:
        return 0.0
    return shoelace_area(project_to_local_feet(ring))


def polygon_perimeter_ft(ring: Sequence[Coordinate]) -> float:
    """Return the perimeter of a geographic ring in feet, closing edge included."""
    n = len(ring)
    if n < MIN_POLYGON_VERTICES:
        return 0.0
    return sum(haversine_distance_ft(ring[i], ring[(i + 1) % n]) for i in range(n))


def closure_gap_ft(ring: Sequence[Coordinate]) -> float:
    """Distance between the first and last vertex, in feet.

    An explicitly closed ring has a gap of zero.
    """
    if not ring:
        return 0.0
    return haversine_distance_ft(ring[0], ring[-1])
