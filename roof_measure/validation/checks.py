"""Validation rules.

Each rule inspects a ``MeasurementSet`` independently and returns a
``CheckOutcome`` (status, details, measured value, threshold).  Rule
metadata, including identifier, category, criticality, and the error or
warning it raises, lives in the ``CHECK_RULES`` registry, which also
fixes the order checks appear in a ``ValidationResult``.

Critical rules report violations as ``FAILED``; advisory rules report
them as ``WARNING`` and never block delivery.  Optional rules return
``None`` when the reference data they need (ground truth) is absent, and
are then left out of the result entirely.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from itertools import combinations
from typing import TYPE_CHECKING

from roof_measure.core import constants as c
from roof_measure.geometry.geodesic import haversine_distance_ft
from roof_measure.geometry.intersection import ring_self_intersects, segments_overlap
from roof_measure.geometry.polygon import closure_gap_ft, polygon_perimeter_ft
from roof_measure.measurement.pitch import parse_pitch_rise
from roof_measure.models.validation import CheckCategory, CheckStatus, Severity

if TYPE_CHECKING:
    from roof_measure.core.config import ValidationThresholds
    from roof_measure.models.measurement import EdgeSegment, MeasurementSet

    RuleFn = Callable[[MeasurementSet, ValidationThresholds], "CheckOutcome | None"]

PASSED = CheckStatus.PASSED
FAILED = CheckStatus.FAILED
WARNING = CheckStatus.WARNING


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    """What a rule found, before rule metadata is attached."""

    status: CheckStatus
    details: str
    value: float | None = None
    threshold: float | None = None


@dataclass(frozen=True, slots=True)
class CheckRule:
    """Registry entry binding a rule function to its metadata.

    Attributes:
        id: Stable check identifier.
        name: Human-readable check name.
        category: Check category.
        is_critical: Critical rules block delivery when they fail.
        evaluate: The rule function.
        issue_code: Code of the blocking error or warning the rule raises.
        severity: Severity of that error (critical/high) or warning (medium/low).
        message: Builds the issue message from the measurement set.
        suggested_fix: Remediation hint attached to blocking errors.
    """

    id: str
    name: str
    category: CheckCategory
    is_critical: bool
    evaluate: RuleFn
    issue_code: str
    severity: Severity
    message: Callable[[MeasurementSet], str]
    suggested_fix: str = ""


# ---------------------------------------------------------------------------
# Topology
# ---------------------------------------------------------------------------


def check_perimeter_closed(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """The perimeter's first and last vertices must coincide."""
    if len(m.perimeter) < c.MIN_POLYGON_VERTICES:
        return CheckOutcome(FAILED, "Perimeter has fewer than 3 vertices")

    gap = closure_gap_ft(m.perimeter)
    closed = gap < t.closure_tolerance_ft
    details = (
        "Perimeter is properly closed"
        if closed
        else f"Gap of {gap:.1f}ft between first and last vertex"
    )
    return CheckOutcome(PASSED if closed else FAILED, details, gap, t.closure_tolerance_ft)


def check_segments_connected(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """Every segment must share an endpoint with at least one other segment."""
    segments = m.linear_features
    disconnected = sum(
        1
        for i, segment in enumerate(segments)
        if not any(
            _endpoints_touch(segment, other, t.connection_radius_ft)
            for j, other in enumerate(segments)
            if j != i
        )
    )
    details = (
        "All segments are properly connected"
        if disconnected == 0
        else f"{disconnected} disconnected segment(s) found"
    )
    return CheckOutcome(PASSED if disconnected == 0 else FAILED, details, disconnected, 0)


def check_no_overlapping_segments(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """No two segments may describe the same edge twice."""
    overlaps = sum(
        1
        for s1, s2 in combinations(m.linear_features, 2)
        if segments_overlap(
            s1,
            s2,
            midpoint_ratio=t.overlap_midpoint_ratio,
            length_delta_ft=t.overlap_length_delta_ft,
        )
    )
    details = (
        "No overlapping segments detected"
        if overlaps == 0
        else f"{overlaps} overlapping segment pair(s) found"
    )
    return CheckOutcome(PASSED if overlaps == 0 else FAILED, details, overlaps, 0)


def check_ridge_is_highest(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """A ridge should exist; its absence suggests a flat or single-plane roof.

    Elevations are not traced, so "highest" is inferred from topology:
    a measured ridge is taken to be the peak.
    """
    if m.ridge_total > 0:
        return CheckOutcome(PASSED, "Ridge line detected and topology validated", m.ridge_total)
    return CheckOutcome(WARNING, "No ridge detected - flat or simple roof", m.ridge_total)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


def check_valid_facet_polygons(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """Every facet needs at least three vertices and a positive area."""
    invalid = sum(1 for f in m.facets if not f.is_geometrically_valid)
    details = (
        f"All {len(m.facets)} facets are valid"
        if invalid == 0
        else f"{invalid} invalid facet(s) detected"
    )
    return CheckOutcome(PASSED if invalid == 0 else FAILED, details, invalid, 0)


def check_facets_cover_perimeter(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """Facet areas must add up to the declared total within a narrow band."""
    if m.total_area <= 0:
        return CheckOutcome(FAILED, f"Declared total area {m.total_area} is not positive")

    ratio = m.facet_area_sum / m.total_area
    covered = t.coverage_min_ratio <= ratio <= t.coverage_max_ratio
    return CheckOutcome(
        PASSED if covered else FAILED,
        f"Facets cover {ratio * 100:.1f}% of total area",
        ratio * 100,
        t.coverage_min_ratio * 100,
    )


def check_no_self_intersections(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """Neither the perimeter nor any facet ring may cross itself."""
    perimeter_crosses = ring_self_intersects([v.as_xy() for v in m.perimeter])
    facet_crossings = sum(
        1 for f in m.facets if ring_self_intersects([v.as_xy() for v in f.polygon])
    )

    if perimeter_crosses or facet_crossings:
        details = (
            f"Self-intersecting: perimeter={str(perimeter_crosses).lower()}, "
            f"facets={facet_crossings}"
        )
        return CheckOutcome(FAILED, details, facet_crossings + int(perimeter_crosses), 0)
    return CheckOutcome(PASSED, "No self-intersecting polygons detected", 0, 0)


# ---------------------------------------------------------------------------
# Area
# ---------------------------------------------------------------------------


def check_area_sum_matches_total(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """Sum of facet areas must be within tolerance of the declared total."""
    if m.total_area <= 0:
        return CheckOutcome(FAILED, f"Declared total area {m.total_area} is not positive")

    facet_sum = m.facet_area_sum
    diff_pct = abs(facet_sum - m.total_area) / m.total_area * 100
    return CheckOutcome(
        PASSED if diff_pct <= t.area_sum_tolerance_pct else FAILED,
        f"Sum of facets: {facet_sum:.0f}, Total: {m.total_area:.0f}, Diff: {diff_pct:.2f}%",
        diff_pct,
        t.area_sum_tolerance_pct,
    )


def check_area_against_ground_truth(
    m: MeasurementSet, t: ValidationThresholds
) -> CheckOutcome | None:
    """Declared total area must be within tolerance of the reference area.

    A missing or zero reference area means "not measured".
    """
    if m.ground_truth is None or not m.ground_truth.total_area:
        return None

    truth = m.ground_truth.total_area
    if truth <= 0:
        return CheckOutcome(FAILED, f"Ground-truth area {truth} is not positive")

    diff_pct = abs(m.total_area - truth) / truth * 100
    return CheckOutcome(
        PASSED if diff_pct <= t.area_ground_truth_tolerance_pct else FAILED,
        f"Calculated: {m.total_area:.0f}, Ground Truth: {truth:.0f}, Diff: {diff_pct:.2f}%",
        diff_pct,
        t.area_ground_truth_tolerance_pct,
    )


def check_reasonable_area(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """Roof area should fall within the range of buildings we measure."""
    reasonable = t.min_reasonable_area_sqft <= m.total_area <= t.max_reasonable_area_sqft
    verdict = "within typical range" if reasonable else "unusual size, verify"
    return CheckOutcome(
        PASSED if reasonable else WARNING,
        f"{m.total_area:.0f} sq ft - {verdict}",
        m.total_area,
    )


# ---------------------------------------------------------------------------
# Linear features
# ---------------------------------------------------------------------------


def check_linear_sum_matches_total(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """Traced segment lengths must add up to the declared category totals."""
    segment_sum = sum(s.length_ft for s in m.linear_features)
    declared = m.declared_linear_total
    diff_pct = abs(segment_sum - declared) / declared * 100 if declared > 0 else 0.0
    return CheckOutcome(
        PASSED if diff_pct <= t.linear_sum_tolerance_pct else WARNING,
        f"Sum: {segment_sum:.0f}ft, Declared: {declared:.0f}ft, Diff: {diff_pct:.1f}%",
        diff_pct,
        t.linear_sum_tolerance_pct,
    )


def check_eave_rake_matches_perimeter(
    m: MeasurementSet, t: ValidationThresholds
) -> CheckOutcome:
    """Eaves and rakes together should trace the whole outline."""
    perimeter = polygon_perimeter_ft(m.perimeter)
    eave_rake = m.eave_total + m.rake_total
    diff_pct = abs(perimeter - eave_rake) / perimeter * 100 if perimeter > 0 else 0.0
    return CheckOutcome(
        PASSED if diff_pct <= t.perimeter_match_tolerance_pct else WARNING,
        f"Perimeter: {perimeter:.0f}ft, Eave+Rake: {eave_rake:.0f}ft",
        diff_pct,
        t.perimeter_match_tolerance_pct,
    )


def check_linear_against_ground_truth(
    m: MeasurementSet, t: ValidationThresholds
) -> CheckOutcome | None:
    """Every provided reference length must be matched within tolerance.

    Applies whenever ground truth is attached; with no linear reference
    values there is nothing to miss, so the check passes.
    """
    if m.ground_truth is None:
        return None
    references = m.ground_truth.linear_values()

    failures = [
        edge_type.value
        for edge_type, truth in references.items()
        if abs(m.declared_total(edge_type) - truth) > t.linear_ground_truth_tolerance_ft
    ]
    tolerance = f"{t.linear_ground_truth_tolerance_ft:g}ft"
    details = (
        f"All linear features within {tolerance} of ground truth"
        if not failures
        else f"{len(failures)} linear feature(s) exceed {tolerance} tolerance: "
        + ", ".join(failures)
    )
    return CheckOutcome(PASSED if not failures else FAILED, details, len(failures), 0)


# ---------------------------------------------------------------------------
# Pitch
# ---------------------------------------------------------------------------


def check_valid_pitch_range(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """Roof pitch rise must lie within the buildable range."""
    rise = parse_pitch_rise(m.pitch)
    valid = t.min_pitch_rise <= rise <= t.max_pitch_rise
    details = (
        f"Pitch {m.pitch} is within valid range"
        if valid
        else f"Pitch {m.pitch} is outside valid range "
        f"({t.min_pitch_rise}-{t.max_pitch_rise}/12)"
    )
    return CheckOutcome(PASSED if valid else FAILED, details, rise, t.max_pitch_rise)


def check_facet_pitch_consistency(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
    """Facet pitches on one roof should not vary wildly."""
    rises = [parse_pitch_rise(f.pitch) for f in m.facets]
    spread = max(rises) - min(rises) if rises else 0
    return CheckOutcome(
        PASSED if spread <= t.pitch_spread_tolerance else WARNING,
        f"{len(set(rises))} unique pitches, max difference: {spread}/12",
        spread,
        t.pitch_spread_tolerance,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _endpoints_touch(a: EdgeSegment, b: EdgeSegment, radius_ft: float) -> bool:
    return any(
        haversine_distance_ft(p, q) < radius_ft
        for p in (a.start, a.end)
        for q in (b.start, b.end)
    )


# ---------------------------------------------------------------------------
# Registry (defines result order)
# ---------------------------------------------------------------------------

CHECK_RULES: tuple[CheckRule, ...] = (
    CheckRule(
        id=c.CHECK_PERIMETER_CLOSED,
        name="Perimeter Polygon Closed",
        category=CheckCategory.TOPOLOGY,
        is_critical=True,
        evaluate=check_perimeter_closed,
        issue_code=c.PERIMETER_NOT_CLOSED,
        severity=Severity.CRITICAL,
        message=lambda m: "Perimeter polygon is not closed",
        suggested_fix="Connect first and last perimeter vertices",
    ),
    CheckRule(
        id=c.CHECK_SEGMENTS_CONNECTED,
        name="All Segments Connected",
        category=CheckCategory.TOPOLOGY,
        is_critical=True,
        evaluate=check_segments_connected,
        issue_code=c.DISCONNECTED_SEGMENTS,
        severity=Severity.CRITICAL,
        message=lambda m: "One or more linear features are not connected to the roof structure",
        suggested_fix="Snap dangling segment endpoints onto the adjoining edge",
    ),
    CheckRule(
        id=c.CHECK_NO_OVERLAPS,
        name="No Overlapping Segments",
        category=CheckCategory.TOPOLOGY,
        is_critical=True,
        evaluate=check_no_overlapping_segments,
        issue_code=c.OVERLAPPING_SEGMENTS,
        severity=Severity.HIGH,
        message=lambda m: "Detected overlapping linear features",
        suggested_fix="Delete the duplicate trace of each overlapping edge",
    ),
    CheckRule(
        id=c.CHECK_RIDGE_HIGHEST,
        name="Ridge at Highest Point",
        category=CheckCategory.TOPOLOGY,
        is_critical=False,
        evaluate=check_ridge_is_highest,
        issue_code=c.RIDGE_NOT_HIGHEST,
        severity=Severity.MEDIUM,
        message=lambda m: "Ridge line may not be at the highest point",
    ),
    CheckRule(
        id=c.CHECK_VALID_FACETS,
        name="Valid Facet Polygons",
        category=CheckCategory.GEOMETRY,
        is_critical=True,
        evaluate=check_valid_facet_polygons,
        issue_code=c.INVALID_FACETS,
        severity=Severity.CRITICAL,
        message=lambda m: "One or more facet polygons are invalid",
        suggested_fix="Retrace facets with fewer than 3 vertices or zero area",
    ),
    CheckRule(
        id=c.CHECK_FACETS_COVER,
        name="Facets Cover Perimeter",
        category=CheckCategory.GEOMETRY,
        is_critical=True,
        evaluate=check_facets_cover_perimeter,
        issue_code=c.FACETS_NOT_COVERING,
        severity=Severity.HIGH,
        message=lambda m: "Facets do not fully cover the roof perimeter",
        suggested_fix="Add missing facets or trim facets that extend past the outline",
    ),
    CheckRule(
        id=c.CHECK_NO_SELF_INTERSECT,
        name="No Self-Intersecting Polygons",
        category=CheckCategory.GEOMETRY,
        is_critical=True,
        evaluate=check_no_self_intersections,
        issue_code=c.SELF_INTERSECTING,
        severity=Severity.CRITICAL,
        message=lambda m: "Detected self-intersecting polygon",
        suggested_fix="Reorder the vertices of the crossing polygon",
    ),
    CheckRule(
        id=c.CHECK_AREA_SUM_MATCH,
        name="Area Sum Matches Total",
        category=CheckCategory.AREA,
        is_critical=True,
        evaluate=check_area_sum_matches_total,
        issue_code=c.AREA_SUM_MISMATCH,
        severity=Severity.HIGH,
        message=lambda m: f"Total area ({m.total_area:g}) doesn't match sum of facets",
        suggested_fix="Recompute the total area from the facet areas",
    ),
    CheckRule(
        id=c.CHECK_AREA_GROUND_TRUTH,
        name="Area Matches Ground Truth (±1%)",
        category=CheckCategory.AREA,
        is_critical=True,
        evaluate=check_area_against_ground_truth,
        issue_code=c.AREA_ACCURACY_FAILED,
        severity=Severity.CRITICAL,
        message=lambda m: "Area deviation from ground truth exceeds tolerance",
        suggested_fix="Remeasure the roof; the traced outline disagrees with the reference",
    ),
    CheckRule(
        id=c.CHECK_REASONABLE_AREA,
        name="Area Within Typical Range",
        category=CheckCategory.AREA,
        is_critical=False,
        evaluate=check_reasonable_area,
        issue_code=c.UNUSUAL_AREA,
        severity=Severity.MEDIUM,
        message=lambda m: f"Total area ({m.total_area:g} sq ft) is outside typical range",
    ),
    CheckRule(
        id=c.CHECK_LINEAR_SUM_MATCH,
        name="Linear Features Sum Matches",
        category=CheckCategory.LINEAR,
        is_critical=False,
        evaluate=check_linear_sum_matches_total,
        issue_code=c.LINEAR_SUM_MISMATCH,
        severity=Severity.MEDIUM,
        message=lambda m: "Sum of linear features doesn't match expected totals",
    ),
    CheckRule(
        id=c.CHECK_PERIMETER_MATCH,
        name="Eave + Rake Matches Perimeter",
        category=CheckCategory.LINEAR,
        is_critical=False,
        evaluate=check_eave_rake_matches_perimeter,
        issue_code=c.PERIMETER_MISMATCH,
        severity=Severity.MEDIUM,
        message=lambda m: "Eave + Rake total differs from calculated perimeter",
    ),
    CheckRule(
        id=c.CHECK_LINEAR_GROUND_TRUTH,
        name="Linear Features Match Ground Truth (±1ft)",
        category=CheckCategory.LINEAR,
        is_critical=True,
        evaluate=check_linear_against_ground_truth,
        issue_code=c.LINEAR_ACCURACY_FAILED,
        severity=Severity.HIGH,
        message=lambda m: "Linear feature deviation from ground truth exceeds tolerance",
        suggested_fix="Retrace the edges whose lengths disagree with the reference",
    ),
    CheckRule(
        id=c.CHECK_VALID_PITCH,
        name="Valid Pitch Range",
        category=CheckCategory.PITCH,
        is_critical=True,
        evaluate=check_valid_pitch_range,
        issue_code=c.INVALID_PITCH,
        severity=Severity.HIGH,
        message=lambda m: f"Pitch value {m.pitch} is outside valid range",
        suggested_fix="Enter the pitch as rise/12 with a rise between 0 and 24",
    ),
    CheckRule(
        id=c.CHECK_PITCH_CONSISTENCY,
        name="Facet Pitch Consistency",
        category=CheckCategory.PITCH,
        is_critical=False,
        evaluate=check_facet_pitch_consistency,
        issue_code=c.INCONSISTENT_PITCHES,
        severity=Severity.LOW,
        message=lambda m: "Significant variation in facet pitches detected",
    ),
)
