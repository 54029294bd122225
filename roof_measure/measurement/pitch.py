"""Pitch parsing and pitch-adjusted (true surface) area.

A sloped plane's surface area exceeds its plan-view footprint by the
secant of its slope angle: ``1 / cos(atan(rise / 12))``.  The multipliers
are kept as a lookup table (four decimals, as used on estimating
worksheets) rather than computed, so reported areas match the figures
crews see on paper.
"""

from __future__ import annotations

import logging
import math
import re

from roof_measure.core.constants import FLAT_PITCH_MAX_DEGREES, PITCH_RUN

logger = logging.getLogger("roof_measure.measurement.pitch")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FLAT_PITCH = "flat"

PITCH_MULTIPLIERS: dict[str, float] = {
    FLAT_PITCH: 1.0000,
    "1/12": 1.0035,
    "2/12": 1.0138,
    "3/12": 1.0308,
    "4/12": 1.0541,
    "5/12": 1.0833,
    "6/12": 1.1180,
    "7/12": 1.1577,
    "8/12": 1.2019,
    "9/12": 1.2500,
    "10/12": 1.3017,
    "11/12": 1.3566,
    "12/12": 1.4142,
    "13/12": 1.4743,
    "14/12": 1.5366,
    "15/12": 1.6008,
    "16/12": 1.6667,
    "17/12": 1.7341,
    "18/12": 1.8028,
    "19/12": 1.8727,
    "20/12": 1.9437,
}

#: Fallback for pitches missing from the table (the 6/12 multiplier).
DEFAULT_PITCH_MULTIPLIER = PITCH_MULTIPLIERS["6/12"]

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize_pitch(pitch: str) -> str:
    """Canonical table key for *pitch*: lower-case, no whitespace.

    ``"0/12"`` is an alias for ``"flat"``.
    """
    key = re.sub(r"\s+", "", pitch).lower()
    return FLAT_PITCH if key == "0/12" else key


def parse_pitch_rise(pitch: object) -> int:
    """Return the rise (numerator) of a ``rise/12`` pitch string.

    Reads the leading integer before the slash.  Anything non-numeric,
    including ``"flat"`` and non-string values, parses as ``0``.
    """
    if not isinstance(pitch, str):
        return 0
    match = _LEADING_INTEGER.match(pitch.split("/")[0])
    return int(match.group(1)) if match else 0


def pitch_multiplier(pitch: str) -> float:
    """Return the surface-area multiplier for *pitch*.

    Unknown pitch strings fall back to ``DEFAULT_PITCH_MULTIPLIER``
    instead of failing.
    """
    multiplier = PITCH_MULTIPLIERS.get(normalize_pitch(pitch))
    if multiplier is None:
        logger.debug(
            "Unknown pitch %r, using default multiplier %.4f",
            pitch,
            DEFAULT_PITCH_MULTIPLIER,
        )
        return DEFAULT_PITCH_MULTIPLIER
    return multiplier


def adjusted_area_sqft(flat_area_sqft: float, pitch: str) -> float:
    """Return the true surface area for a plan-view area at *pitch*."""
    return flat_area_sqft * pitch_multiplier(pitch)


def pitch_degrees(pitch: str) -> float:
    """Return the slope angle of *pitch* in degrees."""
    return math.degrees(math.atan(parse_pitch_rise(pitch) / PITCH_RUN))


def pitch_from_degrees(degrees: float) -> str:
    """Return the nearest ``rise/12`` pitch for a slope angle in degrees.

    Slopes under ``FLAT_PITCH_MAX_DEGREES`` are ``"flat"``.  The rise is
    rounded half up to a whole number.
    """
    if degrees < FLAT_PITCH_MAX_DEGREES:
        return FLAT_PITCH
    rise = math.floor(math.tan(math.radians(degrees)) * PITCH_RUN + 0.5)
    return f"{rise}/{PITCH_RUN}"
