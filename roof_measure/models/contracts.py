"""Canonical payload contracts for the plain-data boundary.

Upstream geometry producers hand the core JSON-shaped dicts, and the
downstream persistence layer receives the same.  Every such shape is
defined here as a ``TypedDict`` so field names have a single source of
truth.

Design notes:
- ``TypedDict`` rather than ``dataclass``: payloads are JSON dicts on
  both sides and need no conversion.
- Input payloads accept camelCase aliases as produced by the tracing
  front end (``lengthFt``, ``groundTruth`` ...); the parser in
  ``roof_measure.parsing.payload`` normalises them.
"""

from __future__ import annotations

from typing import TypedDict

# ---------------------------------------------------------------------------
# Inputs (upstream tracer → core)
# ---------------------------------------------------------------------------


class CoordinatePayload(TypedDict):
    lat: float
    lng: float


class FacetPayload(TypedDict, total=False):
    """A traced facet: polygon and pitch, optionally pre-measured.

    The parser re-measures ``flat_area_sqft`` and ``perimeter_ft`` from
    the polygon.  ``adjusted_area_sqft`` (front-end alias ``area``)
    overrides the computed surface area.  ``azimuth_deg`` fills in
    ``orientation`` when that is absent.
    """

    id: str
    polygon: list[CoordinatePayload]
    pitch: str
    orientation: str
    flat_area_sqft: float
    adjusted_area_sqft: float
    perimeter_ft: float


class EdgeSegmentPayload(TypedDict, total=False):
    """A traced linear feature.  ``length_ft`` is derived when absent."""

    type: str
    start: CoordinatePayload
    end: CoordinatePayload
    length_ft: float
    facets_connected: list[str]


class GroundTruthPayload(TypedDict, total=False):
    total_area: float
    ridge_total: float
    hip_total: float
    valley_total: float
    eave_total: float
    rake_total: float


class MeasurementSetPayload(TypedDict, total=False):
    """A complete measurement set.  Totals are derived when absent."""

    facets: list[FacetPayload]
    linear_features: list[EdgeSegmentPayload]
    total_area: float
    ridge_total: float
    hip_total: float
    valley_total: float
    eave_total: float
    rake_total: float
    pitch: str
    perimeter: list[CoordinatePayload]
    ground_truth: GroundTruthPayload | None


# ---------------------------------------------------------------------------
# Outputs (core → persistence / reporting)
# ---------------------------------------------------------------------------


class ValidationCheckPayload(TypedDict):
    id: str
    name: str
    category: str
    status: str
    is_critical: bool
    details: str
    value: float | None
    threshold: float | None


class BlockingErrorPayload(TypedDict):
    code: str
    message: str
    severity: str
    suggested_fix: str
    location: CoordinatePayload | None


class ValidationWarningPayload(TypedDict):
    code: str
    message: str
    severity: str
    can_proceed: bool


class ValidationResultPayload(TypedDict):
    """Output of ``ValidationResult.to_dict()``."""

    is_valid: bool
    overall_score: float
    critical_checks_passed: bool
    checks: list[ValidationCheckPayload]
    blocking_errors: list[BlockingErrorPayload]
    warnings: list[ValidationWarningPayload]
    requires_human_override: bool
    override_justification_required: str | None
