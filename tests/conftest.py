"""Shared pytest fixtures for the roof measurement test suite."""

from __future__ import annotations

import math
from collections.abc import Callable

import pytest

from roof_measure.core.constants import EARTH_RADIUS_FT
from roof_measure.measurement.assemble import build_measurement_set
from roof_measure.measurement.facets import measure_facet
from roof_measure.measurement.linear import build_edge_segment
from roof_measure.models.geometry import Coordinate
from roof_measure.models.measurement import MeasurementSet

# ---------------------------------------------------------------------------
# Coordinate builders
# ---------------------------------------------------------------------------

FeetToCoordinate = Callable[[float, float], Coordinate]


def _at_feet(x_ft: float, y_ft: float) -> Coordinate:
    """Coordinate *x_ft* east and *y_ft* north of (0, 0).

    Anchored on the equator, so east offsets run along the equator and
    the local projection recovers the inputs almost exactly.
    """
    return Coordinate(
        lat=math.degrees(y_ft / EARTH_RADIUS_FT),
        lng=math.degrees(x_ft / EARTH_RADIUS_FT),
    )


@pytest.fixture()
def at_feet() -> FeetToCoordinate:
    """Return a builder mapping local (x, y) feet to a ``Coordinate``."""
    return _at_feet


@pytest.fixture()
def rectangle_ring() -> Callable[[float, float], list[Coordinate]]:
    """Return a builder for an open ``w`` × ``h`` ft rectangle ring."""

    def build(width_ft: float, height_ft: float) -> list[Coordinate]:
        return [
            _at_feet(0, 0),
            _at_feet(width_ft, 0),
            _at_feet(width_ft, height_ft),
            _at_feet(0, height_ft),
        ]

    return build


# ---------------------------------------------------------------------------
# Measurement sets
# ---------------------------------------------------------------------------

GABLE_WIDTH_FT = 40.0
GABLE_DEPTH_FT = 30.0


@pytest.fixture()
def gable_measurement() -> MeasurementSet:
    """A consistent 40 × 30 ft gable roof at 6/12.

    Closed perimeter, one facet whose area is the declared total, two
    eaves, four rake halves meeting the ridge, and a ridge across the
    middle.  Every check passes.
    """
    w, d, half = GABLE_WIDTH_FT, GABLE_DEPTH_FT, GABLE_DEPTH_FT / 2
    corners = [_at_feet(0, 0), _at_feet(w, 0), _at_feet(w, d), _at_feet(0, d)]
    facet = measure_facet("F1", corners, "6/12", orientation="south")

    segments = [
        build_edge_segment("eave", _at_feet(0, 0), _at_feet(w, 0), facets_connected=["F1"]),
        build_edge_segment("eave", _at_feet(0, d), _at_feet(w, d), facets_connected=["F1"]),
        build_edge_segment("rake", _at_feet(0, 0), _at_feet(0, half)),
        build_edge_segment("rake", _at_feet(0, half), _at_feet(0, d)),
        build_edge_segment("rake", _at_feet(w, 0), _at_feet(w, half)),
        build_edge_segment("rake", _at_feet(w, half), _at_feet(w, d)),
        build_edge_segment("ridge", _at_feet(0, half), _at_feet(w, half)),
    ]

    return build_measurement_set(
        [facet],
        segments,
        [*corners, corners[0]],
        pitch="6/12",
    )
