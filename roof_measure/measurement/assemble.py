"""Measurement set assembly.

Merges the two independent measurement branches, per-facet areas and
per-category linear totals, into one ``MeasurementSet`` ready for
validation.  Totals that the caller does not declare explicitly are
derived from the facets and segments.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from roof_measure.measurement.linear import aggregate_linear_features
from roof_measure.measurement.pitch import FLAT_PITCH
from roof_measure.models.geometry import Coordinate
from roof_measure.models.measurement import EdgeSegment, Facet, GroundTruth, MeasurementSet

logger = logging.getLogger("roof_measure.measurement.assemble")


def build_measurement_set(
    facets: Iterable[Facet],
    linear_features: Iterable[EdgeSegment],
    perimeter: Sequence[Coordinate],
    *,
    pitch: str | None = None,
    total_area: float | None = None,
    ground_truth: GroundTruth | None = None,
) -> MeasurementSet:
    """Assemble a ``MeasurementSet`` from measured facets and segments.

    Args:
        facets: Measured facets (see ``measure_facet``).
        linear_features: Traced edge segments.
        perimeter: Outer roof outline ring.
        pitch: Predominant roof pitch.  Defaults to the pitch covering
            the most facet area.
        total_area: Declared total surface area.  Defaults to the sum of
            facet surface areas.
        ground_truth: Optional independent reference values.

    Returns:
        The assembled, immutable measurement set.
    """
    facet_tuple = tuple(facets)
    segment_tuple = tuple(linear_features)
    totals = aggregate_linear_features(segment_tuple)

    if total_area is None:
        total_area = sum(f.adjusted_area_sqft for f in facet_tuple)
    if pitch is None:
        pitch = predominant_pitch(facet_tuple)

    logger.info(
        "Measurement set assembled | facets=%d | segments=%d | area=%.1f sqft | pitch=%s | "
        "ground_truth=%s",
        len(facet_tuple),
        totals.segment_count,
        total_area,
        pitch,
        ground_truth is not None,
    )

    return MeasurementSet(
        facets=facet_tuple,
        linear_features=segment_tuple,
        total_area=total_area,
        ridge_total=totals.ridge_total,
        hip_total=totals.hip_total,
        valley_total=totals.valley_total,
        eave_total=totals.eave_total,
        rake_total=totals.rake_total,
        pitch=pitch,
        perimeter=tuple(perimeter),
        ground_truth=ground_truth,
    )


def predominant_pitch(facets: Sequence[Facet]) -> str:
    """Return the pitch covering the largest surface area.

    Ties go to the pitch seen first.  No facets means ``"flat"``.
    """
    if not facets:
        return FLAT_PITCH

    area_by_pitch: dict[str, float] = defaultdict(float)
    for facet in facets:
        area_by_pitch[facet.pitch] += facet.adjusted_area_sqft
    return max(area_by_pitch, key=lambda p: area_by_pitch[p])
