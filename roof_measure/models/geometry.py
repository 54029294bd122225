"""Geometric primitives: geographic coordinates and local planar points.

Design notes:
- All models are frozen dataclasses for immutability.
- Geographic coordinates are WGS 84 degrees on a spherical Earth.
- Planar points are feet relative to an anchor chosen by a single
  projection call; they are meaningless outside that call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real

from roof_measure.core.exceptions import ContractError

# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


class ModelValidationError(ValueError, ContractError):
    """Raised when a domain model is constructed with invalid field values.

    Attributes:
        model: Name of the model class that failed validation.
        field_name: The field that violated the invariant.
        value: The invalid value.
    """

    default_stage = "model_validation"
    default_code = "MODEL_VALIDATION_FAILED"

    def __init__(self, model: str, field_name: str, value: object, message: str) -> None:
        self.model = model
        self.field_name = field_name
        self.value = value
        formatted = f"{model}.{field_name}={value!r}: {message}"
        ContractError.__init__(self, formatted)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A geographic point in decimal degrees.

    Attributes:
        lat: Latitude in degrees, ``[-90, 90]``.
        lng: Longitude in degrees, ``[-180, 180]``.
    """

    lat: float
    lng: float

    def __post_init__(self) -> None:
        _check_number("Coordinate", "lat", self.lat)
        _check_number("Coordinate", "lng", self.lng)
        _check_range("Coordinate", "lat", self.lat, MIN_LATITUDE, MAX_LATITUDE)
        _check_range("Coordinate", "lng", self.lng, MIN_LONGITUDE, MAX_LONGITUDE)

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Coordinate:
        """Build a coordinate from a ``{"lat", "lng"}`` mapping.

        Raises:
            ModelValidationError: If a key is missing or a value is not
                a finite number within WGS 84 bounds.
        """
        for key in ("lat", "lng"):
            if key not in data:
                raise ModelValidationError("Coordinate", key, None, "is required")
        return cls(lat=data["lat"], lng=data["lng"])  # type: ignore[arg-type]

    def as_xy(self) -> tuple[float, float]:
        """Return ``(lng, lat)`` for planar orientation tests."""
        return (self.lng, self.lat)


@dataclass(frozen=True, slots=True)
class CartesianPoint:
    """A planar point in feet, relative to a projection anchor."""

    x: float
    y: float

    def as_xy(self) -> tuple[float, float]:
        return (self.x, self.y)


# ---------------------------------------------------------------------------
# Validation helpers (module-private)
# ---------------------------------------------------------------------------


def _check_number(model: str, field_name: str, value: object) -> None:
    """Raise `ModelValidationError` unless *value* is a finite real number."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ModelValidationError(model, field_name, value, "must be a number")
    if not math.isfinite(value):
        raise ModelValidationError(model, field_name, value, "must be finite")


def _check_range(model: str, field_name: str, value: float, lo: float, hi: float) -> None:
    """Raise `ModelValidationError` if *value* falls outside [lo, hi]."""
    if value < lo or value > hi:
        raise ModelValidationError(model, field_name, value, f"must be between {lo} and {hi}")
