"""Unit tests for the validation pipeline.

Covers:
- Happy path: consistent gable roof scores 100 and is deliverable
- Failed checks become blocking errors, warnings become warnings
- Human-override decision and justification prompt
- Optional ground-truth checks are left out when no reference exists
- Malformed input degrades to check statuses instead of raising
- Thread-pool evaluation returns the same result in the same order
"""

from __future__ import annotations

import logging
from dataclasses import replace

import pytest

from roof_measure.core import constants as c
from roof_measure.core.config import ValidationThresholds
from roof_measure.models.measurement import Facet, GroundTruth, MeasurementSet
from roof_measure.models.validation import (
    BlockingError,
    CheckCategory,
    CheckStatus,
    Severity,
    ValidationCheck,
)
from roof_measure.validation.checks import CHECK_RULES, CheckOutcome, CheckRule
from roof_measure.validation.pipeline import aggregate_result, round_half_up, validate_measurement


def with_single_facet_area(m: MeasurementSet, area: float, total: float) -> MeasurementSet:
    facet = replace(m.facets[0], adjusted_area_sqft=area)
    return replace(m, facets=(facet,), total_area=total)


def codes(errors: tuple) -> list[str]:
    return [e.code for e in errors]


class TestHappyPath:
    """A consistent measurement set passes every check."""

    def test_valid_with_perfect_score(self, gable_measurement) -> None:
        result = validate_measurement(gable_measurement)
        assert result.is_valid is True
        assert result.overall_score == 100.0
        assert result.requires_human_override is False
        assert result.override_justification_required is None
        assert result.critical_checks_passed is True
        assert result.blocking_errors == ()
        assert result.warnings == ()

    def test_optional_checks_omitted_without_ground_truth(self, gable_measurement) -> None:
        result = validate_measurement(gable_measurement)
        ids = [check.id for check in result.checks]
        assert len(ids) == 13
        assert c.CHECK_AREA_GROUND_TRUTH not in ids
        assert c.CHECK_LINEAR_GROUND_TRUTH not in ids

    def test_all_fifteen_checks_with_ground_truth(self, gable_measurement) -> None:
        truth = GroundTruth(
            total_area=gable_measurement.total_area,
            ridge_total=40.0,
            eave_total=80.0,
            rake_total=60.0,
        )
        result = validate_measurement(replace(gable_measurement, ground_truth=truth))
        assert [check.id for check in result.checks] == [rule.id for rule in CHECK_RULES]
        assert result.overall_score == 100.0

    def test_area_only_ground_truth_still_counts_linear_check(self, gable_measurement) -> None:
        truth = GroundTruth(total_area=gable_measurement.total_area)
        m = replace(gable_measurement, ridge_total=0.0, ground_truth=truth)
        result = validate_measurement(m)
        assert len(result.checks) == 15
        assert result.get_check(c.CHECK_LINEAR_GROUND_TRUTH).status is CheckStatus.PASSED  # type: ignore[union-attr]
        assert result.overall_score == 86.7

    def test_zero_ground_truth_area_does_not_block(self, gable_measurement) -> None:
        result = validate_measurement(
            replace(gable_measurement, ground_truth=GroundTruth(total_area=0.0))
        )
        assert result.is_valid is True
        assert c.AREA_ACCURACY_FAILED not in codes(result.blocking_errors)
        assert result.get_check(c.CHECK_AREA_GROUND_TRUTH) is None

    def test_checks_carry_rule_metadata(self, gable_measurement) -> None:
        result = validate_measurement(gable_measurement)
        check = result.get_check(c.CHECK_AREA_SUM_MATCH)
        assert check is not None
        assert check.name == "Area Sum Matches Total"
        assert check.category is CheckCategory.AREA
        assert check.is_critical is True
        assert check.threshold == 1.0


class TestBlockingErrors:
    """Failed checks and the delivery decision."""

    def test_area_mismatch(self, gable_measurement) -> None:
        m = with_single_facet_area(gable_measurement, 970.0, 1000.0)
        result = validate_measurement(m)
        check = result.get_check(c.CHECK_AREA_SUM_MATCH)
        assert check is not None
        assert check.status is CheckStatus.FAILED
        assert c.AREA_SUM_MISMATCH in codes(result.blocking_errors)
        assert result.is_valid is False

    def test_ground_truth_deviation_denies_override(self, gable_measurement) -> None:
        m = with_single_facet_area(gable_measurement, 5000.0, 5000.0)
        m = replace(m, ground_truth=GroundTruth(total_area=5060.0))
        result = validate_measurement(m)
        error = next(e for e in result.blocking_errors if e.code == c.AREA_ACCURACY_FAILED)
        assert error.severity is Severity.CRITICAL
        assert result.is_valid is False
        assert result.requires_human_override is False
        assert result.override_justification_required is None
        assert result.critical_checks_passed is False

    def test_pitch_out_of_range(self, gable_measurement) -> None:
        result = validate_measurement(replace(gable_measurement, pitch="30/12"))
        check = result.get_check(c.CHECK_VALID_PITCH)
        assert check is not None
        assert check.status is CheckStatus.FAILED
        assert codes(result.blocking_errors) == [c.INVALID_PITCH]
        assert result.is_valid is False

    def test_high_only_blockers_offer_override(self, gable_measurement) -> None:
        result = validate_measurement(replace(gable_measurement, pitch="30/12"))
        assert result.blocking_errors[0].severity is Severity.HIGH
        assert result.requires_human_override is True
        assert result.override_justification_required == c.OVERRIDE_JUSTIFICATION_PROMPT

    def test_blocking_errors_carry_suggested_fix(self, gable_measurement) -> None:
        result = validate_measurement(replace(gable_measurement, pitch="30/12"))
        error = result.blocking_errors[0]
        assert error.message == "Pitch value 30/12 is outside valid range"
        assert error.suggested_fix

    def test_one_blocking_error_per_failed_check(self, gable_measurement, at_feet) -> None:
        open_ring = (*gable_measurement.perimeter[:-1], at_feet(0, 5))
        m = replace(gable_measurement, perimeter=open_ring, pitch="30/12")
        result = validate_measurement(m)
        assert result.failed_count == len(result.blocking_errors)
        assert codes(result.blocking_errors) == [c.PERIMETER_NOT_CLOSED, c.INVALID_PITCH]


class TestWarnings:
    """Advisory findings never block delivery."""

    def test_missing_ridge_warns_only(self, gable_measurement) -> None:
        result = validate_measurement(replace(gable_measurement, ridge_total=0.0))
        assert c.RIDGE_NOT_HIGHEST in codes(result.warnings)
        assert result.is_valid is True
        assert all(w.can_proceed for w in result.warnings)

    def test_perimeter_mismatch_warns(self, gable_measurement) -> None:
        result = validate_measurement(replace(gable_measurement, rake_total=0.0))
        assert c.PERIMETER_MISMATCH in codes(result.warnings)
        assert result.is_valid is True

    def test_small_roof_warns_but_is_valid(self, gable_measurement) -> None:
        m = with_single_facet_area(gable_measurement, 400.0, 400.0)
        result = validate_measurement(m)
        assert codes(result.warnings) == [c.UNUSUAL_AREA]
        assert result.warnings[0].severity is Severity.MEDIUM
        assert result.is_valid is True
        assert result.critical_checks_passed is True

    def test_warnings_lower_the_score(self, gable_measurement) -> None:
        m = with_single_facet_area(gable_measurement, 400.0, 400.0)
        result = validate_measurement(m)
        assert result.overall_score == round_half_up(12 / 13 * 100)
        assert result.overall_score == 92.3


class TestScore:
    """overall_score rounding and aggregation."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(92.30769, 92.3), (66.66667, 66.7), (12.25, 12.3), (0.0, 0.0), (100.0, 100.0)],
    )
    def test_round_half_up(self, value: float, expected: float) -> None:
        assert round_half_up(value) == expected

    def test_empty_checks_score_zero(self) -> None:
        result = aggregate_result([], [], [])
        assert result.overall_score == 0.0
        assert result.is_valid is True
        assert result.critical_checks_passed is True

    def test_skipped_checks_count_against_score(self) -> None:
        checks = [
            ValidationCheck("a", "A", CheckCategory.AREA, CheckStatus.PASSED, True, ""),
            ValidationCheck("b", "B", CheckCategory.AREA, CheckStatus.SKIPPED, False, ""),
        ]
        assert aggregate_result(checks, [], []).overall_score == 50.0

    def test_override_requires_invalid_result(self) -> None:
        result = aggregate_result([], [], [])
        assert result.requires_human_override is False

    def test_critical_blocker_denies_override(self) -> None:
        blockers = [
            BlockingError("X", "x", Severity.HIGH),
            BlockingError("Y", "y", Severity.CRITICAL),
        ]
        result = aggregate_result([], blockers, [])
        assert result.is_valid is False
        assert result.requires_human_override is False


class TestRobustness:
    """The pipeline never raises for data-quality problems."""

    def test_empty_measurement_set(self) -> None:
        result = validate_measurement(MeasurementSet())
        assert result.is_valid is False
        assert {e.code for e in result.blocking_errors} >= {
            c.PERIMETER_NOT_CLOSED,
            c.FACETS_NOT_COVERING,
            c.AREA_SUM_MISMATCH,
        }
        assert result.get_check(c.CHECK_PITCH_CONSISTENCY).status is CheckStatus.PASSED  # type: ignore[union-attr]
        assert result.skipped_count == 0

    def test_garbage_facet_degrades_critical_check_to_failed(
        self, gable_measurement, caplog: pytest.LogCaptureFixture
    ) -> None:
        broken = Facet(id="broken", polygon=None)  # type: ignore[arg-type]
        m = replace(gable_measurement, facets=(*gable_measurement.facets, broken))
        with caplog.at_level(logging.WARNING, logger="roof_measure.validation.pipeline"):
            result = validate_measurement(m)
        check = result.get_check(c.CHECK_VALID_FACETS)
        assert check is not None
        assert check.status is CheckStatus.FAILED
        assert check.details.startswith("Check could not be evaluated")
        assert "Check could not be evaluated | check=valid_facets" in caplog.text

    def test_raising_advisory_rule_is_skipped(self, gable_measurement) -> None:
        def explode(m: MeasurementSet, t: ValidationThresholds) -> CheckOutcome:
            raise ZeroDivisionError("boom")

        rule = CheckRule(
            id="explodes",
            name="Explodes",
            category=CheckCategory.CONSISTENCY,
            is_critical=False,
            evaluate=explode,
            issue_code="EXPLODED",
            severity=Severity.LOW,
            message=lambda m: "exploded",
        )
        result = validate_measurement(gable_measurement, rules=(*CHECK_RULES, rule))
        check = result.get_check("explodes")
        assert check is not None
        assert check.status is CheckStatus.SKIPPED
        assert result.is_valid is True
        assert "EXPLODED" not in codes(result.warnings)


class TestConcurrency:
    """max_workers evaluates rules on a thread pool."""

    def test_same_result_as_sequential(self, gable_measurement) -> None:
        m = with_single_facet_area(gable_measurement, 970.0, 1000.0)
        sequential = validate_measurement(m)
        parallel = validate_measurement(m, max_workers=4)
        assert parallel == sequential

    def test_registry_order_preserved(self, gable_measurement) -> None:
        truth = GroundTruth(total_area=1.0, ridge_total=1.0)
        m = replace(gable_measurement, ground_truth=truth)
        result = validate_measurement(m, max_workers=8)
        assert [check.id for check in result.checks] == [rule.id for rule in CHECK_RULES]


class TestThresholds:
    """Custom thresholds flow into every rule."""

    def test_loosened_tolerance_accepts_mismatch(self, gable_measurement) -> None:
        m = with_single_facet_area(gable_measurement, 970.0, 1000.0)
        loose = ValidationThresholds(area_sum_tolerance_pct=5.0, coverage_min_ratio=0.95)
        result = validate_measurement(m, thresholds=loose)
        assert result.is_valid is True

    def test_logs_summary_line(self, gable_measurement, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="roof_measure.validation.pipeline"):
            validate_measurement(gable_measurement)
        assert "Validation complete | valid=True | score=100.0" in caplog.text
