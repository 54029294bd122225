"""Data models for roof measurements.

A ``Facet`` is one planar section of a roof, measured from its traced
polygon and pitch.  An ``EdgeSegment`` is one traced linear feature.
A ``MeasurementSet`` bundles every facet and segment of one roof with
the declared per-category totals, the outer perimeter ring and optional
ground-truth reference values.  It is the sole input of the validation
pipeline.

All areas are square feet and all lengths are feet.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from roof_measure.core.constants import MIN_POLYGON_VERTICES, SQFT_PER_SQUARE
from roof_measure.models.geometry import Coordinate, ModelValidationError

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class EdgeType(str, enum.Enum):
    """Category of a linear roof feature."""

    RIDGE = "ridge"
    HIP = "hip"
    VALLEY = "valley"
    EAVE = "eave"
    RAKE = "rake"
    STEP = "step"
    WALL = "wall"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> EdgeType:
        """Map a free-form type string onto an ``EdgeType``.

        Unrecognised values become ``UNKNOWN`` rather than failing; the
        aggregator simply does not count them toward any category.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


# ---------------------------------------------------------------------------
# Facets and edges
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Facet:
    """A measured roof facet.

    Built by ``roof_measure.measurement.facets.measure_facet`` from a
    polygon and pitch.  Areas are never edited in place: re-measure the
    polygon to get a new facet.

    Attributes:
        id: Facet identifier, unique within a measurement set.
        polygon: Ring of vertices; closure is checked, not assumed.
        pitch: Pitch in rise/12 notation (e.g. ``"6/12"``) or ``"flat"``.
        orientation: Compass direction the facet faces (e.g. ``"south"``).
        flat_area_sqft: Plan-view (footprint) area.
        adjusted_area_sqft: True surface area after pitch correction.
        perimeter_ft: Ring perimeter including the closing edge.
    """

    id: str
    polygon: tuple[Coordinate, ...] = ()
    pitch: str = "flat"
    orientation: str = ""
    flat_area_sqft: float = 0.0
    adjusted_area_sqft: float = 0.0
    perimeter_ft: float = 0.0

    @property
    def vertex_count(self) -> int:
        return len(self.polygon)

    @property
    def is_geometrically_valid(self) -> bool:
        """At least three vertices and a positive area."""
        return self.vertex_count >= MIN_POLYGON_VERTICES and self.adjusted_area_sqft > 0

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "polygon": [c.to_dict() for c in self.polygon],
            "pitch": self.pitch,
            "orientation": self.orientation,
            "flat_area_sqft": self.flat_area_sqft,
            "adjusted_area_sqft": self.adjusted_area_sqft,
            "perimeter_ft": self.perimeter_ft,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Facet:
        """Deserialise from the ``to_dict`` shape.

        Stored areas and perimeter are restored as-is, not re-measured.

        Raises:
            ModelValidationError: If ``id`` is missing or a field has the
                wrong type.
        """
        if data.get("id") is None:
            raise ModelValidationError("Facet", "id", None, "is required")
        return cls(
            id=str(data["id"]),
            polygon=_coordinates("Facet", "polygon", data.get("polygon", [])),
            pitch=str(data.get("pitch", "flat")),
            orientation=str(data.get("orientation", "")),
            flat_area_sqft=_float("Facet", "flat_area_sqft", data.get("flat_area_sqft", 0.0)),
            adjusted_area_sqft=_float(
                "Facet", "adjusted_area_sqft", data.get("adjusted_area_sqft", 0.0)
            ),
            perimeter_ft=_float("Facet", "perimeter_ft", data.get("perimeter_ft", 0.0)),
        )


@dataclass(frozen=True, slots=True)
class EdgeSegment:
    """A traced linear roof feature.

    Attributes:
        type: Edge category.
        start: First endpoint.
        end: Second endpoint.
        length_ft: Segment length in feet.
        facets_connected: Ids of the facets sharing this edge.
    """

    type: EdgeType
    start: Coordinate
    end: Coordinate
    length_ft: float = 0.0
    facets_connected: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.length_ft < 0:
            raise ModelValidationError("EdgeSegment", "length_ft", self.length_ft, "must be >= 0")

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type.value,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "length_ft": self.length_ft,
            "facets_connected": list(self.facets_connected),
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> EdgeSegment:
        """Deserialise from the ``to_dict`` shape.

        Raises:
            ModelValidationError: If an endpoint is missing or a field has
                the wrong type.
        """
        endpoints = {}
        for key in ("start", "end"):
            value = data.get(key)
            if not isinstance(value, dict):
                raise ModelValidationError("EdgeSegment", key, value, "must be a coordinate object")
            endpoints[key] = Coordinate.from_dict(value)

        connected = data.get("facets_connected", [])
        if not isinstance(connected, list):
            raise ModelValidationError("EdgeSegment", "facets_connected", connected, "must be a list")

        return cls(
            type=EdgeType.parse(data.get("type")),
            length_ft=_float("EdgeSegment", "length_ft", data.get("length_ft", 0.0)),
            facets_connected=tuple(str(f) for f in connected),
            **endpoints,
        )


# ---------------------------------------------------------------------------
# Measurement set
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GroundTruth:
    """Independently measured reference values.

    Any subset may be provided; ``None`` or ``0`` means "not measured".
    """

    total_area: float | None = None
    ridge_total: float | None = None
    hip_total: float | None = None
    valley_total: float | None = None
    eave_total: float | None = None
    rake_total: float | None = None

    def linear_values(self) -> dict[EdgeType, float]:
        """Return the measured (non-zero) linear reference values by category."""
        values = {
            EdgeType.RIDGE: self.ridge_total,
            EdgeType.HIP: self.hip_total,
            EdgeType.VALLEY: self.valley_total,
            EdgeType.EAVE: self.eave_total,
            EdgeType.RAKE: self.rake_total,
        }
        return {edge_type: v for edge_type, v in values.items() if v}

    def to_dict(self) -> dict[str, float | None]:
        return {
            "total_area": self.total_area,
            "ridge_total": self.ridge_total,
            "hip_total": self.hip_total,
            "valley_total": self.valley_total,
            "eave_total": self.eave_total,
            "rake_total": self.rake_total,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> GroundTruth:
        """Deserialise from the ``to_dict`` shape.  Missing keys are ``None``.

        Raises:
            ModelValidationError: If a present value is not a number.
        """
        return cls(
            **{
                name: _optional_float("GroundTruth", name, data.get(name))
                for name in _GROUND_TRUTH_FIELDS
            }
        )


@dataclass(frozen=True, slots=True)
class MeasurementSet:
    """Every measurement of one roof, as handed to the validation pipeline.

    Attributes:
        facets: Measured facets.
        linear_features: Traced edge segments.
        total_area: Declared total roof surface area (sq ft).
        ridge_total: Declared ridge length (ft).
        hip_total: Declared hip length (ft).
        valley_total: Declared valley length (ft).
        eave_total: Declared eave length (ft).
        rake_total: Declared rake length (ft).
        pitch: Predominant roof pitch (e.g. ``"6/12"``).
        perimeter: Outer roof outline ring.
        ground_truth: Optional independent reference values.
    """

    facets: tuple[Facet, ...] = ()
    linear_features: tuple[EdgeSegment, ...] = ()
    total_area: float = 0.0
    ridge_total: float = 0.0
    hip_total: float = 0.0
    valley_total: float = 0.0
    eave_total: float = 0.0
    rake_total: float = 0.0
    pitch: str = "flat"
    perimeter: tuple[Coordinate, ...] = ()
    ground_truth: GroundTruth | None = field(default=None)

    @property
    def facet_area_sum(self) -> float:
        """Sum of facet surface areas."""
        return sum(f.adjusted_area_sqft for f in self.facets)

    @property
    def squares(self) -> float:
        """Declared total area in roofing squares (100 sq ft each)."""
        return self.total_area / SQFT_PER_SQUARE

    @property
    def declared_linear_total(self) -> float:
        """Ridge + hip + valley + eave + rake, as declared."""
        return (
            self.ridge_total
            + self.hip_total
            + self.valley_total
            + self.eave_total
            + self.rake_total
        )

    def declared_total(self, edge_type: EdgeType) -> float:
        """Declared length for one of the five headline categories."""
        return {
            EdgeType.RIDGE: self.ridge_total,
            EdgeType.HIP: self.hip_total,
            EdgeType.VALLEY: self.valley_total,
            EdgeType.EAVE: self.eave_total,
            EdgeType.RAKE: self.rake_total,
        }.get(edge_type, 0.0)

    def to_dict(self) -> dict[str, object]:
        return {
            "facets": [f.to_dict() for f in self.facets],
            "linear_features": [s.to_dict() for s in self.linear_features],
            "total_area": self.total_area,
            "ridge_total": self.ridge_total,
            "hip_total": self.hip_total,
            "valley_total": self.valley_total,
            "eave_total": self.eave_total,
            "rake_total": self.rake_total,
            "pitch": self.pitch,
            "perimeter": [c.to_dict() for c in self.perimeter],
            "ground_truth": self.ground_truth.to_dict() if self.ground_truth else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> MeasurementSet:
        """Deserialise from the ``to_dict`` shape.

        Every stored value is restored verbatim; nothing is re-measured or
        re-derived.  Use ``roof_measure.parsing.payload`` for front-end
        payloads that still need measuring.

        Raises:
            ModelValidationError: If a field has the wrong type.
        """
        facets = _records("MeasurementSet", "facets", data.get("facets", []))
        segments = _records("MeasurementSet", "linear_features", data.get("linear_features", []))

        truth = data.get("ground_truth")
        if truth is not None and not isinstance(truth, dict):
            raise ModelValidationError("MeasurementSet", "ground_truth", truth, "must be an object")

        return cls(
            facets=tuple(Facet.from_dict(f) for f in facets),
            linear_features=tuple(EdgeSegment.from_dict(s) for s in segments),
            total_area=_float("MeasurementSet", "total_area", data.get("total_area", 0.0)),
            pitch=str(data.get("pitch", "flat")),
            perimeter=_coordinates("MeasurementSet", "perimeter", data.get("perimeter", [])),
            ground_truth=None if truth is None else GroundTruth.from_dict(truth),
            **{
                name: _float("MeasurementSet", name, data.get(name, 0.0))
                for name in _LINEAR_TOTAL_FIELDS
            },
        )


# ---------------------------------------------------------------------------
# Deserialisation helpers (module-private)
# ---------------------------------------------------------------------------

_LINEAR_TOTAL_FIELDS = ("ridge_total", "hip_total", "valley_total", "eave_total", "rake_total")
_GROUND_TRUTH_FIELDS = ("total_area", *_LINEAR_TOTAL_FIELDS)


def _float(model: str, field_name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ModelValidationError(model, field_name, value, "must be a number")
    return float(value)


def _optional_float(model: str, field_name: str, value: object) -> float | None:
    return None if value is None else _float(model, field_name, value)


def _records(model: str, field_name: str, value: object) -> list[dict[str, object]]:
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ModelValidationError(model, field_name, value, "must be a list of objects")
    return value


def _coordinates(model: str, field_name: str, value: object) -> tuple[Coordinate, ...]:
    return tuple(Coordinate.from_dict(item) for item in _records(model, field_name, value))
