"""Plain-data payload parsing.

Builds a ``MeasurementSet`` from the JSON-shaped dicts produced by the
tracing front end (see ``roof_measure.models.contracts``).  Keys may be
snake_case or camelCase.  Coordinates may be ``{"lat", "lng"}`` objects
(``latitude``/``longitude``/``lon`` are also accepted) or GeoJSON-style
``[lng, lat]`` pairs.

Structural problems raise ``PayloadError`` with the dotted path of the
offending value.  Measurement-quality problems (open rings, totals that
do not add up) are left for the validation pipeline to report.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from roof_measure.core.exceptions import ContractError, PayloadError
from roof_measure.measurement.assemble import build_measurement_set
from roof_measure.measurement.facets import measure_facet
from roof_measure.measurement.linear import aggregate_linear_features, build_edge_segment
from roof_measure.measurement.pitch import FLAT_PITCH
from roof_measure.models.geometry import Coordinate
from roof_measure.models.measurement import EdgeSegment, Facet, GroundTruth, MeasurementSet

logger = logging.getLogger("roof_measure.parsing.payload")

_LINEAR_TOTAL_FIELDS = ("ridge_total", "hip_total", "valley_total", "eave_total", "rake_total")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def measurement_set_from_dict(data: Mapping[str, object]) -> MeasurementSet:
    """Parse a measurement-set payload.

    Facets are measured from their polygons; a facet's
    ``adjusted_area_sqft`` (or ``area``) value, when present, overrides
    the computed surface area, so ``MeasurementSet.to_dict`` output
    parses back to an equal set.  Segment lengths
    are derived from their endpoints when absent.  Declared totals
    default to the values derived from facets and segments.

    Raises:
        PayloadError: If the payload is structurally invalid.
    """
    if not isinstance(data, Mapping):
        raise PayloadError(f"expected an object, got {type(data).__name__}")

    facets = tuple(
        _facet_from_payload(item, f"facets[{i}]")
        for i, item in enumerate(_list(data, "facets"))
    )
    segments = tuple(
        _segment_from_payload(item, f"linear_features[{i}]")
        for i, item in enumerate(_list(data, "linear_features", "linearFeatures"))
    )
    perimeter = ring_from_payload(_get(data, "perimeter") or [], path="perimeter")

    ground_truth_data = _get(data, "ground_truth", "groundTruth")
    ground_truth = (
        None
        if ground_truth_data is None
        else _ground_truth_from_payload(ground_truth_data, "ground_truth")
    )

    pitch = _get(data, "pitch")
    if pitch is not None and not isinstance(pitch, str):
        raise PayloadError(f"must be a string, got {type(pitch).__name__}", path="pitch")

    measurement = build_measurement_set(
        facets,
        segments,
        perimeter,
        pitch=pitch,  # type: ignore[arg-type]
        total_area=_optional_number(data, "total_area", "totalArea"),
        ground_truth=ground_truth,
    )

    declared = {
        name: _optional_number(data, name, _camel(name)) for name in _LINEAR_TOTAL_FIELDS
    }
    overrides = {name: value for name, value in declared.items() if value is not None}
    if overrides:
        measurement = _with_declared_totals(measurement, overrides)

    logger.info(
        "Payload parsed | facets=%d | segments=%d | perimeter_vertices=%d | declared_totals=%s",
        len(facets),
        len(segments),
        len(perimeter),
        ",".join(sorted(overrides)) or "derived",
    )
    return measurement


def coordinate_from_payload(value: object, *, path: str = "") -> Coordinate:
    """Parse one coordinate from an object or a ``[lng, lat]`` pair.

    Raises:
        PayloadError: If the value has neither shape or is out of range.
    """
    if isinstance(value, Mapping):
        lat = _first_present(value, "lat", "latitude")
        lng = _first_present(value, "lng", "lon", "longitude")
        if lat is None or lng is None:
            raise PayloadError("coordinate needs lat/lng or latitude/longitude", path=path)
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        if len(value) != 2:
            raise PayloadError("coordinate arrays must have exactly 2 elements [lng, lat]", path=path)
        lng, lat = value
    else:
        raise PayloadError(
            f"coordinate must be an object or [lng, lat] pair, got {type(value).__name__}",
            path=path,
        )

    try:
        return Coordinate(lat=lat, lng=lng)  # type: ignore[arg-type]
    except ContractError as exc:
        raise PayloadError(exc.message, path=path) from exc


def ring_from_payload(value: object, *, path: str = "") -> tuple[Coordinate, ...]:
    """Parse a list of coordinates.  The ring may be open or closed.

    Raises:
        PayloadError: If *value* is not a list or a vertex is invalid.
    """
    if isinstance(value, Mapping) and "coordinates" in value:
        value = value["coordinates"]
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise PayloadError(f"must be a list of coordinates, got {type(value).__name__}", path=path)
    return tuple(
        coordinate_from_payload(vertex, path=f"{path}[{i}]") for i, vertex in enumerate(value)
    )


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def _facet_from_payload(value: object, path: str) -> Facet:
    data = _mapping(value, path)
    facet_id = _get(data, "id")
    if facet_id is None:
        facet_id = path
    polygon = ring_from_payload(_get(data, "polygon") or [], path=f"{path}.polygon")

    pitch = _get(data, "pitch")
    if pitch is None:
        pitch = FLAT_PITCH
    if not isinstance(pitch, str):
        raise PayloadError(f"must be a string, got {type(pitch).__name__}", path=f"{path}.pitch")

    orientation = _get(data, "orientation") or ""
    azimuth = _optional_number(
        data, "azimuth_deg", "azimuthDeg", "azimuthDegrees", "azimuth", path=f"{path}.azimuth_deg"
    )
    facet = measure_facet(
        str(facet_id), polygon, pitch, orientation=str(orientation), azimuth_deg=azimuth
    )

    area = _optional_number(
        data, "adjusted_area_sqft", "adjustedAreaSqft", "area", path=f"{path}.area"
    )
    if area is not None and area != facet.adjusted_area_sqft:
        logger.debug(
            "Facet area supplied | id=%s | supplied=%.1f | computed=%.1f",
            facet.id,
            area,
            facet.adjusted_area_sqft,
        )
        facet = _replace_area(facet, area)
    return facet


def _segment_from_payload(value: object, path: str) -> EdgeSegment:
    data = _mapping(value, path)
    for key in ("start", "end"):
        if _get(data, key) is None:
            raise PayloadError("is required", path=f"{path}.{key}")

    start = coordinate_from_payload(_get(data, "start"), path=f"{path}.start")
    end = coordinate_from_payload(_get(data, "end"), path=f"{path}.end")
    length = _optional_number(data, "length_ft", "lengthFt", "length", path=f"{path}.length_ft")
    if length is not None and length < 0:
        raise PayloadError(f"must be >= 0, got {length}", path=f"{path}.length_ft")

    connected = _get(data, "facets_connected", "facetsConnected") or []
    if isinstance(connected, (str, bytes)) or not isinstance(connected, Sequence):
        raise PayloadError("must be a list of facet ids", path=f"{path}.facets_connected")

    return build_edge_segment(
        _get(data, "type") or "unknown",  # type: ignore[arg-type]
        start,
        end,
        length_ft=length,
        facets_connected=[str(f) for f in connected],
    )


def _ground_truth_from_payload(value: object, path: str) -> GroundTruth:
    data = _mapping(value, path)
    fields = ("total_area", *_LINEAR_TOTAL_FIELDS)
    return GroundTruth(
        **{
            name: _optional_number(data, name, _camel(name), path=f"{path}.{name}")
            for name in fields
        }
    )


def _with_declared_totals(measurement: MeasurementSet, overrides: dict[str, float]) -> MeasurementSet:
    """Replace derived linear totals with explicitly declared ones."""
    derived = aggregate_linear_features(measurement.linear_features)
    values = {name: getattr(derived, name) for name in _LINEAR_TOTAL_FIELDS}
    values.update(overrides)
    return MeasurementSet(
        facets=measurement.facets,
        linear_features=measurement.linear_features,
        total_area=measurement.total_area,
        pitch=measurement.pitch,
        perimeter=measurement.perimeter,
        ground_truth=measurement.ground_truth,
        **values,
    )


def _replace_area(facet: Facet, area: float) -> Facet:
    return Facet(
        id=facet.id,
        polygon=facet.polygon,
        pitch=facet.pitch,
        orientation=facet.orientation,
        flat_area_sqft=facet.flat_area_sqft,
        adjusted_area_sqft=area,
        perimeter_ft=facet.perimeter_ft,
    )


# ---------------------------------------------------------------------------
# Field access helpers
# ---------------------------------------------------------------------------


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _get(data: Mapping[str, object], *keys: str) -> object:
    """Return the first key present (not ``None``) among *keys*."""
    return _first_present(data, *keys)


def _first_present(data: Mapping[str, object], *keys: str) -> object:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _mapping(value: object, path: str) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise PayloadError(f"expected an object, got {type(value).__name__}", path=path)
    return value


def _list(data: Mapping[str, object], *keys: str) -> Sequence[object]:
    value = _get(data, *keys)
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise PayloadError(f"must be a list, got {type(value).__name__}", path=keys[0])
    return value


def _optional_number(data: Mapping[str, object], *keys: str, path: str = "") -> float | None:
    value = _get(data, *keys)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadError(f"must be a number, got {type(value).__name__}", path=path or keys[0])
    return float(value)
