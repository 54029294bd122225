"""Validation thresholds loaded from defaults or environment variables.

The values are business-tuned constants, not derived from theory.  The
defaults reproduce the production behaviour exactly; overriding them is
meant for controlled tuning experiments.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range, so bad configuration is caught at
    startup rather than producing silently skewed audits.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from roof_measure.core.exceptions import MeasurementError


class ConfigValidationError(MeasurementError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ValidationThresholds:
    """Immutable set of validation thresholds.

    Attributes:
        closure_tolerance_ft: Max gap between first and last perimeter vertex.
        connection_radius_ft: Endpoint distance under which two segments connect.
        overlap_midpoint_ratio: Midpoint distance, as a fraction of the average
            segment length, under which two segments may overlap.
        overlap_length_delta_ft: Max length difference for two overlapping segments.
        coverage_min_ratio: Lowest accepted facet-area / total-area ratio.
        coverage_max_ratio: Highest accepted facet-area / total-area ratio.
        area_sum_tolerance_pct: Max facet-sum vs. total-area deviation (percent).
        area_ground_truth_tolerance_pct: Max total-area vs. ground-truth deviation (percent).
        min_reasonable_area_sqft: Smallest roof area accepted without a warning.
        max_reasonable_area_sqft: Largest roof area accepted without a warning.
        linear_sum_tolerance_pct: Max segment-sum vs. declared-total deviation (percent).
        perimeter_match_tolerance_pct: Max eave+rake vs. perimeter deviation (percent).
        linear_ground_truth_tolerance_ft: Max per-category deviation from ground truth.
        min_pitch_rise: Lowest valid pitch numerator (rise per 12).
        max_pitch_rise: Highest valid pitch numerator (rise per 12).
        pitch_spread_tolerance: Max spread between facet pitch numerators.
    """

    closure_tolerance_ft: float = 1.0
    connection_radius_ft: float = 3.0
    overlap_midpoint_ratio: float = 0.3
    overlap_length_delta_ft: float = 5.0
    coverage_min_ratio: float = 0.98
    coverage_max_ratio: float = 1.02
    area_sum_tolerance_pct: float = 1.0
    area_ground_truth_tolerance_pct: float = 1.0
    min_reasonable_area_sqft: float = 500.0
    max_reasonable_area_sqft: float = 50_000.0
    linear_sum_tolerance_pct: float = 5.0
    perimeter_match_tolerance_pct: float = 5.0
    linear_ground_truth_tolerance_ft: float = 1.0
    min_pitch_rise: int = 0
    max_pitch_rise: int = 24
    pitch_spread_tolerance: int = 4

    @classmethod
    def from_env(cls) -> ValidationThresholds:
        """Load and validate thresholds from ``ROOF_*`` environment variables.

        Unset variables keep their defaults.

        Raises:
            ConfigValidationError: If a value is out of range.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``ROOF_CLOSURE_TOLERANCE_FT=abc``).
        """
        defaults = cls()
        config = cls(
            closure_tolerance_ft=_env_float("ROOF_CLOSURE_TOLERANCE_FT", defaults.closure_tolerance_ft),
            connection_radius_ft=_env_float("ROOF_CONNECTION_RADIUS_FT", defaults.connection_radius_ft),
            overlap_midpoint_ratio=_env_float(
                "ROOF_OVERLAP_MIDPOINT_RATIO", defaults.overlap_midpoint_ratio
            ),
            overlap_length_delta_ft=_env_float(
                "ROOF_OVERLAP_LENGTH_DELTA_FT", defaults.overlap_length_delta_ft
            ),
            coverage_min_ratio=_env_float("ROOF_COVERAGE_MIN_RATIO", defaults.coverage_min_ratio),
            coverage_max_ratio=_env_float("ROOF_COVERAGE_MAX_RATIO", defaults.coverage_max_ratio),
            area_sum_tolerance_pct=_env_float(
                "ROOF_AREA_SUM_TOLERANCE_PCT", defaults.area_sum_tolerance_pct
            ),
            area_ground_truth_tolerance_pct=_env_float(
                "ROOF_AREA_GROUND_TRUTH_TOLERANCE_PCT", defaults.area_ground_truth_tolerance_pct
            ),
            min_reasonable_area_sqft=_env_float(
                "ROOF_MIN_REASONABLE_AREA_SQFT", defaults.min_reasonable_area_sqft
            ),
            max_reasonable_area_sqft=_env_float(
                "ROOF_MAX_REASONABLE_AREA_SQFT", defaults.max_reasonable_area_sqft
            ),
            linear_sum_tolerance_pct=_env_float(
                "ROOF_LINEAR_SUM_TOLERANCE_PCT", defaults.linear_sum_tolerance_pct
            ),
            perimeter_match_tolerance_pct=_env_float(
                "ROOF_PERIMETER_MATCH_TOLERANCE_PCT", defaults.perimeter_match_tolerance_pct
            ),
            linear_ground_truth_tolerance_ft=_env_float(
                "ROOF_LINEAR_GROUND_TRUTH_TOLERANCE_FT", defaults.linear_ground_truth_tolerance_ft
            ),
            min_pitch_rise=int(os.getenv("ROOF_MIN_PITCH_RISE", str(defaults.min_pitch_rise))),
            max_pitch_rise=int(os.getenv("ROOF_MAX_PITCH_RISE", str(defaults.max_pitch_rise))),
            pitch_spread_tolerance=int(
                os.getenv("ROOF_PITCH_SPREAD_TOLERANCE", str(defaults.pitch_spread_tolerance))
            ),
        )
        _validate(config)
        return config


def _env_float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def _validate(config: ValidationThresholds) -> None:
    """Validate threshold ranges.  Raises ``ConfigValidationError``."""
    for key, value in (
        ("ROOF_CLOSURE_TOLERANCE_FT", config.closure_tolerance_ft),
        ("ROOF_CONNECTION_RADIUS_FT", config.connection_radius_ft),
        ("ROOF_OVERLAP_MIDPOINT_RATIO", config.overlap_midpoint_ratio),
        ("ROOF_LINEAR_GROUND_TRUTH_TOLERANCE_FT", config.linear_ground_truth_tolerance_ft),
    ):
        if value <= 0:
            raise ConfigValidationError(key, value, "must be > 0")

    if config.overlap_length_delta_ft < 0:
        raise ConfigValidationError(
            "ROOF_OVERLAP_LENGTH_DELTA_FT",
            config.overlap_length_delta_ft,
            "must be >= 0 (feet)",
        )

    if not 0 < config.coverage_min_ratio <= 1.0 <= config.coverage_max_ratio:
        raise ConfigValidationError(
            "ROOF_COVERAGE_MIN_RATIO",
            config.coverage_min_ratio,
            f"must satisfy 0 < min <= 1 <= max (max={config.coverage_max_ratio})",
        )

    for key, value in (
        ("ROOF_AREA_SUM_TOLERANCE_PCT", config.area_sum_tolerance_pct),
        ("ROOF_AREA_GROUND_TRUTH_TOLERANCE_PCT", config.area_ground_truth_tolerance_pct),
        ("ROOF_LINEAR_SUM_TOLERANCE_PCT", config.linear_sum_tolerance_pct),
        ("ROOF_PERIMETER_MATCH_TOLERANCE_PCT", config.perimeter_match_tolerance_pct),
    ):
        if not 0.0 <= value <= 100.0:
            raise ConfigValidationError(key, value, "must be between 0 and 100 (percentage)")

    if not 0 <= config.min_reasonable_area_sqft < config.max_reasonable_area_sqft:
        raise ConfigValidationError(
            "ROOF_MIN_REASONABLE_AREA_SQFT",
            config.min_reasonable_area_sqft,
            f"must be >= 0 and below ROOF_MAX_REASONABLE_AREA_SQFT "
            f"({config.max_reasonable_area_sqft})",
        )

    if not 0 <= config.min_pitch_rise <= config.max_pitch_rise:
        raise ConfigValidationError(
            "ROOF_MIN_PITCH_RISE",
            config.min_pitch_rise,
            f"must be >= 0 and <= ROOF_MAX_PITCH_RISE ({config.max_pitch_rise})",
        )

    if config.pitch_spread_tolerance < 0:
        raise ConfigValidationError(
            "ROOF_PITCH_SPREAD_TOLERANCE",
            config.pitch_spread_tolerance,
            "must be >= 0 (rise per 12)",
        )
