"""Per-facet measurement.

Turns one traced facet polygon and its pitch into a ``Facet`` with flat
area, pitch-adjusted surface area and perimeter.

Degenerate polygons (fewer than three vertices, zero area) are measured
as zero rather than rejected: whether such a facet is acceptable is a
data-quality question answered by the validation pipeline.  Only input
that is not a ring of coordinates at all raises.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from roof_measure.core.exceptions import ContractError
from roof_measure.geometry.polygon import polygon_area_sqft, polygon_perimeter_ft
from roof_measure.measurement.pitch import adjusted_area_sqft
from roof_measure.models.geometry import Coordinate
from roof_measure.models.measurement import Facet

logger = logging.getLogger("roof_measure.measurement.facets")

_COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


class FacetMeasurementError(ContractError):
    """Raised when a facet polygon is not a sequence of ``Coordinate``."""

    default_stage = "measure_facet"
    default_code = "FACET_POLYGON_INVALID"


def measure_facet(
    facet_id: str,
    polygon: Sequence[Coordinate],
    pitch: str,
    *,
    orientation: str = "",
    azimuth_deg: float | None = None,
) -> Facet:
    """Measure a facet polygon.

    Args:
        facet_id: Facet identifier.
        polygon: Facet ring; closure is not required.
        pitch: Pitch in ``rise/12`` notation or ``"flat"``.
        orientation: Compass direction the facet faces.
        azimuth_deg: Downslope azimuth in degrees clockwise from north.
            When given and *orientation* is empty, the orientation is
            derived from it with ``cardinal_direction``.

    Returns:
        A ``Facet`` with flat area, adjusted area and perimeter.

    Raises:
        FacetMeasurementError: If *polygon* is not a sequence of
            ``Coordinate`` or *pitch* is not a string.
    """
    ring = _as_ring(facet_id, polygon)
    if not isinstance(pitch, str):
        msg = f"Facet '{facet_id}': pitch must be a string, got {type(pitch).__name__}"
        raise FacetMeasurementError(msg)

    if not orientation and azimuth_deg is not None:
        orientation = cardinal_direction(azimuth_deg)

    flat_area = polygon_area_sqft(ring)
    adjusted_area = adjusted_area_sqft(flat_area, pitch)
    perimeter = polygon_perimeter_ft(ring)

    logger.debug(
        "Facet measured | id=%s | vertices=%d | pitch=%s | flat=%.1f sqft | "
        "adjusted=%.1f sqft | perimeter=%.1f ft",
        facet_id,
        len(ring),
        pitch,
        flat_area,
        adjusted_area,
        perimeter,
    )

    return Facet(
        id=facet_id,
        polygon=ring,
        pitch=pitch,
        orientation=orientation,
        flat_area_sqft=flat_area,
        adjusted_area_sqft=adjusted_area,
        perimeter_ft=perimeter,
    )


def cardinal_direction(azimuth_deg: float) -> str:
    """Return the 8-point compass direction for an azimuth in degrees.

    Each point covers a 45 degree sector centred on it, so ``N`` spans
    337.5 up to (not including) 22.5.  Azimuths outside 0-360 wrap.
    """
    sector = math.floor(((azimuth_deg % 360) + 22.5) / 45) % 8
    return _COMPASS_POINTS[sector]


def _as_ring(facet_id: str, polygon: Sequence[Coordinate]) -> tuple[Coordinate, ...]:
    """Validate that *polygon* is a sequence of coordinates and freeze it."""
    if isinstance(polygon, (str, bytes)) or not isinstance(polygon, Sequence):
        msg = (
            f"Facet '{facet_id}': polygon must be a sequence of Coordinate, "
            f"got {type(polygon).__name__}"
        )
        raise FacetMeasurementError(msg)
    for index, vertex in enumerate(polygon):
        if not isinstance(vertex, Coordinate):
            msg = (
                f"Facet '{facet_id}': vertex {index} must be a Coordinate, "
                f"got {type(vertex).__name__}"
            )
            raise FacetMeasurementError(msg)
    return tuple(polygon)
