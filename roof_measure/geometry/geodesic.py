"""Great-circle distance on a spherical Earth.

Uses the Haversine formula with a mean Earth radius in feet.  There are
no error conditions: NaN inputs propagate to a NaN distance, and input
validation is the caller's job (``Coordinate`` does it at construction).
"""

from __future__ import annotations

import math

from roof_measure.core.constants import EARTH_RADIUS_FT
from roof_measure.models.geometry import Coordinate


def haversine_distance_ft(a: Coordinate, b: Coordinate) -> float:
    """Return the great-circle distance between *a* and *b* in feet.

    ``a = sin²(Δlat/2) + cos(lat1)·cos(lat2)·sin²(Δlng/2)``,
    ``d = 2·R·atan2(√a, √(1−a))``.
    """
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_FT * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def midpoint(a: Coordinate, b: Coordinate) -> Coordinate:
    """Arithmetic midpoint in degrees (adequate at roof scale)."""
    return Coordinate(lat=(a.lat + b.lat) / 2, lng=(a.lng + b.lng) / 2)
