"""Tests for the unified exception taxonomy.

Validates:
- MeasurementError base attributes and defaults
- Category classification (contract vs. measurement)
- ``to_error_dict()`` produces stable payload keys
- All custom exceptions are MeasurementError subclasses
"""

from __future__ import annotations

from typing import ClassVar

import pytest

from roof_measure.core.config import ConfigValidationError
from roof_measure.core.exceptions import (
    ContractError,
    GeometryParseError,
    MeasurementError,
    PayloadError,
)
from roof_measure.measurement.facets import FacetMeasurementError
from roof_measure.models.geometry import ModelValidationError


class TestMeasurementErrorBase:
    """MeasurementError base class behavior."""

    def test_default_attributes(self) -> None:
        err = MeasurementError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""

    def test_custom_attributes(self) -> None:
        err = MeasurementError("fail", stage="measure_facet", code="FACET_FAILED")
        assert err.stage == "measure_facet"
        assert err.code == "FACET_FAILED"

    def test_str_is_message(self) -> None:
        assert str(MeasurementError("human-readable error")) == "human-readable error"

    def test_to_error_dict_keys(self) -> None:
        d = MeasurementError("x", stage="s", code="C").to_error_dict()
        assert set(d.keys()) == {"category", "code", "stage", "message"}
        assert d["message"] == "x"
        assert d["stage"] == "s"
        assert d["code"] == "C"
        assert d["category"] == "measurement"


class TestContractErrors:
    """Caller-contract violations."""

    def test_contract_category(self) -> None:
        err = ContractError("schema drift")
        assert err.category == "contract"
        assert err.code == "CONTRACT_VIOLATION"

    def test_payload_error_prefixes_path(self) -> None:
        err = PayloadError("must be a number", path="facets[2].area")
        assert err.path == "facets[2].area"
        assert err.message == "facets[2].area: must be a number"
        assert err.stage == "parse_payload"
        assert err.code == "PAYLOAD_INVALID"

    def test_payload_error_without_path(self) -> None:
        assert PayloadError("bad").message == "bad"

    def test_geometry_parse_error_defaults(self) -> None:
        err = GeometryParseError("Not valid WKT")
        assert err.stage == "parse_wkt"
        assert err.code == "GEOMETRY_PARSE_FAILED"
        assert err.category == "contract"

    def test_model_validation_error_is_value_error(self) -> None:
        err = ModelValidationError("Coordinate", "lat", 91.0, "must be between -90.0 and 90.0")
        assert isinstance(err, ValueError)
        assert isinstance(err, ContractError)
        assert err.message == "Coordinate.lat=91.0: must be between -90.0 and 90.0"
        assert err.field_name == "lat"
        assert err.to_error_dict()["code"] == "MODEL_VALIDATION_FAILED"

    def test_facet_error_overrides_code(self) -> None:
        err = FacetMeasurementError("bad polygon", code="CUSTOM")
        assert err.code == "CUSTOM"
        assert err.stage == "measure_facet"


class TestConfigError:
    """Configuration errors are not contract violations."""

    def test_category_and_message(self) -> None:
        err = ConfigValidationError("ROOF_MAX_PITCH_RISE", -1, "must be >= 0")
        assert err.category == "measurement"
        assert err.message == "Invalid configuration ROOF_MAX_PITCH_RISE=-1: must be >= 0"


class TestAllExceptionsAreMeasurementError:
    """Every custom exception inherits from MeasurementError."""

    EXCEPTION_CLASSES: ClassVar[list[type[MeasurementError]]] = [
        ContractError,
        PayloadError,
        GeometryParseError,
        ModelValidationError,
        FacetMeasurementError,
        ConfigValidationError,
    ]

    @pytest.mark.parametrize("exc_class", EXCEPTION_CLASSES)
    def test_subclass(self, exc_class: type[MeasurementError]) -> None:
        assert issubclass(exc_class, MeasurementError)

    @pytest.mark.parametrize("exc_class", EXCEPTION_CLASSES)
    def test_has_default_code(self, exc_class: type[MeasurementError]) -> None:
        assert exc_class.default_code
