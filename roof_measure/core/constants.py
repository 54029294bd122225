"""Shared constants: single source of truth.

Physical constants, check identifiers and error codes used by the
geometry, measurement and validation modules.  Business-tuned
thresholds live in ``roof_measure.core.config`` instead, so they can
be overridden without touching these names.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Physical constants
# ---------------------------------------------------------------------------

EARTH_RADIUS_FT: float = 20_902_231.0
"""Mean Earth radius in feet (spherical model)."""

MIN_POLYGON_VERTICES: int = 3
"""Fewest vertices a facet or perimeter ring may have."""

PITCH_RUN: int = 12
"""Pitch is expressed as rise over a 12-unit run."""

FLAT_PITCH_MAX_DEGREES: float = 2.0
"""Slopes shallower than this are reported as ``"flat"``."""

SQFT_PER_SQUARE: float = 100.0
"""One roofing square covers 100 sq ft of surface."""

# ---------------------------------------------------------------------------
# Check identifiers (stable, appear in ValidationResult.checks)
# ---------------------------------------------------------------------------

CHECK_PERIMETER_CLOSED = "perimeter_closed"
CHECK_SEGMENTS_CONNECTED = "segments_connected"
CHECK_NO_OVERLAPS = "no_overlaps"
CHECK_RIDGE_HIGHEST = "ridge_highest"
CHECK_VALID_FACETS = "valid_facets"
CHECK_FACETS_COVER = "facets_cover"
CHECK_NO_SELF_INTERSECT = "no_self_intersect"
CHECK_AREA_SUM_MATCH = "area_sum_match"
CHECK_AREA_GROUND_TRUTH = "area_ground_truth"
CHECK_REASONABLE_AREA = "reasonable_area"
CHECK_LINEAR_SUM_MATCH = "linear_sum_match"
CHECK_PERIMETER_MATCH = "perimeter_match"
CHECK_LINEAR_GROUND_TRUTH = "linear_ground_truth"
CHECK_VALID_PITCH = "valid_pitch"
CHECK_PITCH_CONSISTENCY = "pitch_consistency"

# ---------------------------------------------------------------------------
# Error / warning codes
# ---------------------------------------------------------------------------

PERIMETER_NOT_CLOSED = "PERIMETER_NOT_CLOSED"
DISCONNECTED_SEGMENTS = "DISCONNECTED_SEGMENTS"
OVERLAPPING_SEGMENTS = "OVERLAPPING_SEGMENTS"
RIDGE_NOT_HIGHEST = "RIDGE_NOT_HIGHEST"
INVALID_FACETS = "INVALID_FACETS"
FACETS_NOT_COVERING = "FACETS_NOT_COVERING"
SELF_INTERSECTING = "SELF_INTERSECTING"
AREA_SUM_MISMATCH = "AREA_SUM_MISMATCH"
AREA_ACCURACY_FAILED = "AREA_ACCURACY_FAILED"
UNUSUAL_AREA = "UNUSUAL_AREA"
LINEAR_SUM_MISMATCH = "LINEAR_SUM_MISMATCH"
PERIMETER_MISMATCH = "PERIMETER_MISMATCH"
LINEAR_ACCURACY_FAILED = "LINEAR_ACCURACY_FAILED"
INVALID_PITCH = "INVALID_PITCH"
INCONSISTENT_PITCHES = "INCONSISTENT_PITCHES"

OVERRIDE_JUSTIFICATION_PROMPT = (
    "Please provide justification for proceeding despite validation errors"
)
