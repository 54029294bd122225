"""Unit tests for pitch parsing and pitch-adjusted area."""

from __future__ import annotations

import math

import pytest

from roof_measure.measurement.pitch import (
    DEFAULT_PITCH_MULTIPLIER,
    PITCH_MULTIPLIERS,
    adjusted_area_sqft,
    normalize_pitch,
    parse_pitch_rise,
    pitch_degrees,
    pitch_from_degrees,
    pitch_multiplier,
)


class TestPitchMultiplierTable:
    """PITCH_MULTIPLIERS."""

    def test_flat_is_exactly_one(self) -> None:
        assert pitch_multiplier("flat") == 1.000

    def test_strictly_increasing_with_rise(self) -> None:
        values = [pitch_multiplier("flat")] + [pitch_multiplier(f"{r}/12") for r in range(1, 21)]
        assert all(a < b for a, b in zip(values, values[1:], strict=False))

    @pytest.mark.parametrize("rise", range(1, 21))
    def test_matches_secant_of_slope(self, rise: int) -> None:
        """Table values are sec(atan(rise/12)) rounded to four decimals."""
        expected = round(1 / math.cos(math.atan(rise / 12)), 4)
        assert PITCH_MULTIPLIERS[f"{rise}/12"] == pytest.approx(expected, abs=1e-9)

    def test_known_values(self) -> None:
        assert pitch_multiplier("6/12") == 1.118
        assert pitch_multiplier("1/12") == 1.0035
        assert pitch_multiplier("12/12") == 1.4142
        assert pitch_multiplier("20/12") == 1.9437


class TestPitchMultiplierLookup:
    """pitch_multiplier() lookup and fallback."""

    def test_unknown_pitch_uses_default(self) -> None:
        assert pitch_multiplier("steep") == DEFAULT_PITCH_MULTIPLIER
        assert pitch_multiplier("30/12") == DEFAULT_PITCH_MULTIPLIER

    def test_default_is_six_twelve(self) -> None:
        assert DEFAULT_PITCH_MULTIPLIER == 1.118

    def test_whitespace_and_case_ignored(self) -> None:
        assert pitch_multiplier(" 8 / 12 ") == 1.2019
        assert pitch_multiplier("FLAT") == 1.000

    def test_zero_twelve_is_flat(self) -> None:
        assert normalize_pitch("0/12") == "flat"
        assert pitch_multiplier("0/12") == 1.000


class TestParsePitchRise:
    """parse_pitch_rise() leading-integer parsing."""

    @pytest.mark.parametrize(
        ("pitch", "expected"),
        [
            ("6/12", 6),
            ("12/12", 12),
            ("30/12", 30),
            ("7", 7),
            ("  9/12", 9),
            ("8.5/12", 8),
            ("flat", 0),
            ("", 0),
            ("abc/12", 0),
            ("-3/12", -3),
        ],
    )
    def test_parses_leading_integer(self, pitch: str, expected: int) -> None:
        assert parse_pitch_rise(pitch) == expected

    def test_non_string_is_zero(self) -> None:
        assert parse_pitch_rise(None) == 0
        assert parse_pitch_rise(6) == 0


class TestAdjustedArea:
    """adjusted_area_sqft() and pitch_degrees()."""

    def test_flat_area_unchanged(self) -> None:
        assert adjusted_area_sqft(1200.0, "flat") == 1200.0

    def test_six_twelve(self) -> None:
        assert adjusted_area_sqft(1000.0, "6/12") == pytest.approx(1118.0)

    def test_unknown_pitch_fallback(self) -> None:
        assert adjusted_area_sqft(1000.0, "mystery") == pytest.approx(1118.0)

    def test_pitch_degrees(self) -> None:
        assert pitch_degrees("12/12") == pytest.approx(45.0)
        assert pitch_degrees("flat") == 0.0
        assert pitch_degrees("6/12") == pytest.approx(26.565, abs=1e-3)


class TestPitchFromDegrees:
    """pitch_from_degrees() slope angle to rise/12."""

    @pytest.mark.parametrize(
        ("degrees", "expected"),
        [
            (0.0, "flat"),
            (1.99, "flat"),
            (2.0, "0/12"),
            (26.57, "6/12"),
            (45.0, "12/12"),
            (18.0, "4/12"),
            (63.43, "24/12"),
        ],
    )
    def test_nearest_rise(self, degrees: float, expected: str) -> None:
        assert pitch_from_degrees(degrees) == expected

    @pytest.mark.parametrize("rise", [1, 4, 6, 9, 12, 20])
    def test_inverse_of_pitch_degrees(self, rise: int) -> None:
        pitch = f"{rise}/12"
        assert pitch_from_degrees(pitch_degrees(pitch)) == pitch
