"""Linear feature aggregation.

Sums traced edge-segment lengths per category.  Ridge, hip, valley,
eave and rake are the headline categories used for material and labour
estimates; step, wall and unknown segments are tallied separately and
never counted toward the headline totals.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from roof_measure.geometry.geodesic import haversine_distance_ft
from roof_measure.models.geometry import Coordinate
from roof_measure.models.measurement import EdgeSegment, EdgeType

logger = logging.getLogger("roof_measure.measurement.linear")


@dataclass(frozen=True, slots=True)
class LinearTotals:
    """Summed segment lengths per category, in feet."""

    ridge_total: float = 0.0
    hip_total: float = 0.0
    valley_total: float = 0.0
    eave_total: float = 0.0
    rake_total: float = 0.0
    step_total: float = 0.0
    wall_total: float = 0.0
    unknown_total: float = 0.0
    segment_count: int = 0

    @property
    def hips_and_ridges(self) -> float:
        return self.hip_total + self.ridge_total

    @property
    def eaves_and_rakes(self) -> float:
        return self.eave_total + self.rake_total

    @property
    def headline_total(self) -> float:
        """Ridge + hip + valley + eave + rake."""
        return (
            self.ridge_total
            + self.hip_total
            + self.valley_total
            + self.eave_total
            + self.rake_total
        )


def build_edge_segment(
    edge_type: EdgeType | str,
    start: Coordinate,
    end: Coordinate,
    *,
    length_ft: float | None = None,
    facets_connected: Iterable[str] = (),
) -> EdgeSegment:
    """Build an ``EdgeSegment``, deriving its length when not supplied.

    Args:
        edge_type: Edge category; free-form strings are mapped with
            ``EdgeType.parse``.
        start: First endpoint.
        end: Second endpoint.
        length_ft: Measured length.  Defaults to the Haversine distance
            between the endpoints.
        facets_connected: Ids of facets sharing this edge.
    """
    if length_ft is None:
        length_ft = haversine_distance_ft(start, end)
    return EdgeSegment(
        type=EdgeType.parse(edge_type),
        start=start,
        end=end,
        length_ft=length_ft,
        facets_connected=tuple(facets_connected),
    )


def aggregate_linear_features(segments: Iterable[EdgeSegment]) -> LinearTotals:
    """Group segments by type and sum their lengths.

    Empty input yields all-zero totals.
    """
    sums = dict.fromkeys(EdgeType, 0.0)
    count = 0
    for segment in segments:
        sums[segment.type] += segment.length_ft
        count += 1

    totals = LinearTotals(
        ridge_total=sums[EdgeType.RIDGE],
        hip_total=sums[EdgeType.HIP],
        valley_total=sums[EdgeType.VALLEY],
        eave_total=sums[EdgeType.EAVE],
        rake_total=sums[EdgeType.RAKE],
        step_total=sums[EdgeType.STEP],
        wall_total=sums[EdgeType.WALL],
        unknown_total=sums[EdgeType.UNKNOWN],
        segment_count=count,
    )
    logger.debug(
        "Linear features aggregated | segments=%d | ridge=%.1f | hip=%.1f | "
        "valley=%.1f | eave=%.1f | rake=%.1f ft",
        count,
        totals.ridge_total,
        totals.hip_total,
        totals.valley_total,
        totals.eave_total,
        totals.rake_total,
    )
    return totals
