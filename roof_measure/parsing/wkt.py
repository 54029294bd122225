"""WKT geometry boundary.

Traced outlines often arrive as WKT with ``lng lat`` axis order:
``POLYGON((lng lat, ...))`` for perimeters and facets,
``LINESTRING(lng lat, lng lat)`` for edges.  Parsing uses shapely and
returns a ``ParseOutcome`` instead of raising, so one malformed geometry
never aborts a batch.

Only the exterior ring of a polygon is kept; roof outlines have no holes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

import shapely.wkt
from shapely.errors import GEOSException
from shapely.geometry import LineString, Polygon
from shapely.geometry.base import BaseGeometry

from roof_measure.core.constants import MIN_POLYGON_VERTICES
from roof_measure.core.exceptions import ContractError, GeometryParseError
from roof_measure.models.geometry import Coordinate

logger = logging.getLogger("roof_measure.parsing.wkt")

T = TypeVar("T")

#: Douglas-Peucker tolerance in degrees (about half a metre).
DEFAULT_SIMPLIFY_TOLERANCE_DEG = 0.000005


@dataclass(frozen=True, slots=True)
class ParseOutcome(Generic[T]):
    """Either a parsed value or the error that prevented parsing."""

    value: T | None = None
    error: ContractError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the stored error if parsing failed."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_wkt_polygon(text: object) -> ParseOutcome[tuple[Coordinate, ...]]:
    """Parse a WKT ``POLYGON`` into its exterior ring.

    The ring is returned closed (first vertex repeated last), as WKT
    stores it.
    """
    geometry = _load(text, "Polygon")
    if isinstance(geometry, GeometryParseError):
        return ParseOutcome(error=geometry)

    if not isinstance(geometry, Polygon):
        return ParseOutcome(error=_unsupported(geometry, "Polygon"))
    if len(geometry.interiors):
        logger.warning(
            "Dropping interior rings from polygon | interiors=%d", len(geometry.interiors)
        )

    outcome = _to_coordinates(geometry.exterior.coords)
    if outcome.ok and len(outcome.value or ()) <= MIN_POLYGON_VERTICES:
        return ParseOutcome(
            error=GeometryParseError(
                f"Polygon needs at least {MIN_POLYGON_VERTICES} distinct vertices"
            )
        )
    return outcome


def parse_wkt_linestring(text: object) -> ParseOutcome[tuple[Coordinate, ...]]:
    """Parse a WKT ``LINESTRING`` into its vertices."""
    geometry = _load(text, "LineString")
    if isinstance(geometry, GeometryParseError):
        return ParseOutcome(error=geometry)

    if not isinstance(geometry, LineString):
        return ParseOutcome(error=_unsupported(geometry, "LineString"))
    return _to_coordinates(geometry.coords)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def ring_to_wkt_polygon(ring: tuple[Coordinate, ...] | list[Coordinate]) -> str:
    """Format a ring as WKT ``POLYGON``; fewer than three vertices gives ``""``."""
    if len(ring) < MIN_POLYGON_VERTICES:
        return ""
    return Polygon([v.as_xy() for v in ring]).wkt


def simplify_ring(
    ring: tuple[Coordinate, ...] | list[Coordinate],
    tolerance_deg: float = DEFAULT_SIMPLIFY_TOLERANCE_DEG,
) -> tuple[Coordinate, ...]:
    """Remove jagged vertices from a traced outline (Douglas-Peucker).

    Topology is preserved, so the result never self-intersects when the
    input did not.  Rings too small to simplify are returned unchanged.
    """
    if len(ring) <= MIN_POLYGON_VERTICES:
        return tuple(ring)

    simplified = Polygon([v.as_xy() for v in ring]).simplify(
        tolerance_deg, preserve_topology=True
    )
    if simplified.is_empty or not isinstance(simplified, Polygon):
        return tuple(ring)

    result = tuple(Coordinate(lat=lat, lng=lng) for lng, lat in simplified.exterior.coords)
    logger.debug("Ring simplified | before=%d | after=%d", len(ring), len(result))
    return result


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load(text: object, expected: str) -> BaseGeometry | GeometryParseError:
    if not isinstance(text, str) or not text.strip():
        return GeometryParseError(f"Expected WKT {expected} text, got {type(text).__name__}")
    try:
        geometry = shapely.wkt.loads(text)
    except (GEOSException, ValueError) as exc:
        logger.warning("WKT parse failed | expected=%s | error=%s", expected, exc)
        return GeometryParseError(f"Not valid WKT: {exc}")
    if geometry.is_empty:
        return GeometryParseError(f"WKT {expected} is empty")
    return geometry


def _unsupported(geometry: BaseGeometry, expected: str) -> GeometryParseError:
    return GeometryParseError(f"Unsupported geometry type {geometry.geom_type}, expected {expected}")


def _to_coordinates(points: object) -> ParseOutcome[tuple[Coordinate, ...]]:
    """Convert shapely ``(lng, lat[, z])`` tuples to coordinates."""
    try:
        coords = tuple(Coordinate(lat=point[1], lng=point[0]) for point in points)  # type: ignore[attr-defined]
    except ContractError as exc:
        return ParseOutcome(error=exc)
    return ParseOutcome(value=coords)
