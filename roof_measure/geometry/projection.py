"""Approximate local planar projection in feet.

The first vertex of a ring is the anchor.  Each vertex's east offset is
the Haversine distance from the anchor along the anchor's parallel to
the vertex longitude, and its north offset the distance along the
anchor's meridian to the vertex latitude.  Signs follow the direction
of travel from the anchor.

This is a small-angle approximation that treats the two axes
independently; it is neither equal-area nor conformal.  It is accurate
for rings spanning at most a few hundred feet (a single roof) and must
not be used for larger geometry.  Swap in a proper projection behind
``project_to_local_feet`` if that scope is ever needed.
"""

from __future__ import annotations

from collections.abc import Sequence

from roof_measure.geometry.geodesic import haversine_distance_ft
from roof_measure.models.geometry import CartesianPoint, Coordinate


def project_to_local_feet(ring: Sequence[Coordinate]) -> list[CartesianPoint]:
    """Project a ring of coordinates to feet, anchored at its first vertex.

    Args:
        ring: Vertices in order.  May be empty.

    Returns:
        One ``CartesianPoint`` per vertex; the anchor maps to ``(0, 0)``.
    """
    if not ring:
        return []

    anchor = ring[0]
    points: list[CartesianPoint] = []
    for vertex in ring:
        east = haversine_distance_ft(anchor, Coordinate(lat=anchor.lat, lng=vertex.lng))
        north = haversine_distance_ft(anchor, Coordinate(lat=vertex.lat, lng=anchor.lng))
        x = east if vertex.lng >= anchor.lng else -east
        y = north if vertex.lat >= anchor.lat else -north
        points.append(CartesianPoint(x=x, y=y))
    return points
