"""Unified exception taxonomy.

Data-quality problems in a measurement set are never raised: the
validation pipeline reports them as failed checks.  Exceptions are
reserved for callers that hand the core something structurally wrong
(a polygon that is not a ring of coordinate pairs, a payload missing
its facets) and for bad configuration.

Taxonomy categories
-------------------
- ``ContractError``: caller-contract violations at the boundary.
- ``ConfigValidationError``: thresholds outside their valid range
  (defined in ``roof_measure.core.config``).

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging and API error bodies.
"""

from __future__ import annotations


class MeasurementError(Exception):
    """Base exception for all roof-measurement errors.

    Attributes:
        message: Human-readable error description.
        stage: Stage where the error occurred
            (e.g. ``"parse_payload"``, ``"measure_facet"``).
        code: Machine-readable error code (e.g. ``"PAYLOAD_INVALID"``).
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        return "measurement"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
        }


# ---------------------------------------------------------------------------
# Contract violations
# ---------------------------------------------------------------------------


class ContractError(MeasurementError):
    """Structurally invalid input supplied by a collaborator."""

    default_code = "CONTRACT_VIOLATION"


class PayloadError(ContractError):
    """A plain-data payload does not have the expected shape.

    Attributes:
        path: Dotted location of the offending value
            (e.g. ``"facets[2].polygon"``).
    """

    default_stage = "parse_payload"
    default_code = "PAYLOAD_INVALID"

    def __init__(self, message: str = "", *, path: str = "", **kwargs: str) -> None:
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message, **kwargs)


class GeometryParseError(ContractError):
    """A textual geometry (WKT) could not be parsed or has an unsupported type."""

    default_stage = "parse_wkt"
    default_code = "GEOMETRY_PARSE_FAILED"
