"""Data models and schemas.

Defines the data structures used throughout the core:
- Coordinate / CartesianPoint: geographic and local planar points
- Facet / EdgeSegment / MeasurementSet: measured roof geometry
- ValidationCheck / ValidationResult: audit outcome
- ValidationReportRecord: persisted report schema
"""

from roof_measure.models.geometry import CartesianPoint, Coordinate, ModelValidationError
from roof_measure.models.measurement import (
    EdgeSegment,
    EdgeType,
    Facet,
    GroundTruth,
    MeasurementSet,
)
from roof_measure.models.validation import (
    BlockingError,
    CheckCategory,
    CheckStatus,
    Severity,
    ValidationCheck,
    ValidationResult,
    ValidationWarning,
)

__all__ = [
    "BlockingError",
    "CartesianPoint",
    "CheckCategory",
    "CheckStatus",
    "Coordinate",
    "EdgeSegment",
    "EdgeType",
    "Facet",
    "GroundTruth",
    "MeasurementSet",
    "ModelValidationError",
    "Severity",
    "ValidationCheck",
    "ValidationResult",
    "ValidationWarning",
]
