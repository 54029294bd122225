"""Validation pipeline: audit a measurement set before customer delivery.

Runs every rule in ``CHECK_RULES`` against one ``MeasurementSet`` and
aggregates the outcomes into a ``ValidationResult``:

- each ``FAILED`` check emits a blocking error (critical or high);
- each ``WARNING`` check emits an advisory warning (medium or low);
- ``overall_score`` is the share of checks that passed, one decimal;
- ``requires_human_override`` is offered only when the result is invalid
  and no blocking error is critical.

Engineering standards:
- Never raises for data-quality problems.  A rule that trips over
  malformed input degrades to ``FAILED`` (critical rules) or ``SKIPPED``
  (advisory rules) and the run continues.
- Pure: the result depends only on the measurement set and thresholds.
- Deterministic: checks appear in registry order, also when evaluated on
  a thread pool.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from roof_measure.core.config import ValidationThresholds
from roof_measure.core.constants import OVERRIDE_JUSTIFICATION_PROMPT
from roof_measure.models.validation import (
    BlockingError,
    CheckStatus,
    Severity,
    ValidationCheck,
    ValidationResult,
    ValidationWarning,
)
from roof_measure.validation.checks import CHECK_RULES, CheckOutcome, CheckRule

if TYPE_CHECKING:
    from collections.abc import Sequence

    from roof_measure.models.measurement import MeasurementSet

logger = logging.getLogger("roof_measure.validation.pipeline")

_PASSING_STATUSES = (CheckStatus.PASSED, CheckStatus.WARNING)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_measurement(
    measurement: MeasurementSet,
    *,
    thresholds: ValidationThresholds | None = None,
    max_workers: int | None = None,
    rules: Sequence[CheckRule] = CHECK_RULES,
) -> ValidationResult:
    """Audit *measurement* and return a complete ``ValidationResult``.

    Args:
        measurement: The measurement set to audit.
        thresholds: Rule thresholds.  Defaults to ``ValidationThresholds()``.
        max_workers: Evaluate rules on a thread pool of this size.
            ``None`` evaluates them sequentially.
        rules: Rule registry, in result order.

    Returns:
        The aggregated validation result.
    """
    thresholds = thresholds or ValidationThresholds()

    if max_workers is None:
        evaluated = [_run_rule(rule, measurement, thresholds) for rule in rules]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # map() yields in submission order, which keeps registry order
            evaluated = list(
                executor.map(lambda rule: _run_rule(rule, measurement, thresholds), rules)
            )

    checks: list[ValidationCheck] = []
    blocking_errors: list[BlockingError] = []
    warnings: list[ValidationWarning] = []

    for rule, check in zip(rules, evaluated, strict=True):
        if check is None:
            continue
        checks.append(check)
        if check.status is CheckStatus.FAILED:
            blocking_errors.append(_blocking_error(rule, measurement))
        elif check.status is CheckStatus.WARNING:
            warnings.append(_warning(rule, measurement))

    result = aggregate_result(checks, blocking_errors, warnings)

    logger.info(
        "Validation complete | valid=%s | score=%.1f | checks=%d | blocking=%d | "
        "warnings=%d | override=%s",
        result.is_valid,
        result.overall_score,
        len(result.checks),
        len(result.blocking_errors),
        len(result.warnings),
        result.requires_human_override,
    )
    for error in result.blocking_errors:
        logger.warning("Blocking error | code=%s | severity=%s", error.code, error.severity.value)

    return result


def aggregate_result(
    checks: Sequence[ValidationCheck],
    blocking_errors: Sequence[BlockingError],
    warnings: Sequence[ValidationWarning],
) -> ValidationResult:
    """Combine check outcomes into a ``ValidationResult``."""
    critical_checks_passed = all(c.status in _PASSING_STATUSES for c in checks if c.is_critical)

    passed = sum(1 for c in checks if c.status is CheckStatus.PASSED)
    score = round_half_up(passed / len(checks) * 100, 1) if checks else 0.0

    is_valid = not blocking_errors
    requires_override = not is_valid and all(
        e.severity is not Severity.CRITICAL for e in blocking_errors
    )

    return ValidationResult(
        is_valid=is_valid,
        overall_score=score,
        critical_checks_passed=critical_checks_passed,
        checks=tuple(checks),
        blocking_errors=tuple(blocking_errors),
        warnings=tuple(warnings),
        requires_human_override=requires_override,
        override_justification_required=(
            OVERRIDE_JUSTIFICATION_PROMPT if requires_override else None
        ),
    )


def round_half_up(value: float, digits: int = 1) -> float:
    """Round half away from zero for non-negative values (``round`` rounds half to even)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_rule(
    rule: CheckRule,
    measurement: MeasurementSet,
    thresholds: ValidationThresholds,
) -> ValidationCheck | None:
    """Evaluate one rule, degrading malformed-input errors to a check status."""
    try:
        outcome = rule.evaluate(measurement, thresholds)
    except (ArithmeticError, AttributeError, TypeError, ValueError) as exc:
        logger.warning(
            "Check could not be evaluated | check=%s | error=%s: %s",
            rule.id,
            type(exc).__name__,
            exc,
        )
        status = CheckStatus.FAILED if rule.is_critical else CheckStatus.SKIPPED
        outcome = CheckOutcome(status, f"Check could not be evaluated: {exc}")

    if outcome is None:
        logger.debug("Check not applicable | check=%s", rule.id)
        return None

    logger.debug("Check evaluated | check=%s | status=%s", rule.id, outcome.status.value)
    return ValidationCheck(
        id=rule.id,
        name=rule.name,
        category=rule.category,
        status=outcome.status,
        is_critical=rule.is_critical,
        details=outcome.details,
        value=outcome.value,
        threshold=outcome.threshold,
    )


def _blocking_error(rule: CheckRule, measurement: MeasurementSet) -> BlockingError:
    return BlockingError(
        code=rule.issue_code,
        message=_message(rule, measurement),
        severity=rule.severity,
        suggested_fix=rule.suggested_fix,
    )


def _warning(rule: CheckRule, measurement: MeasurementSet) -> ValidationWarning:
    return ValidationWarning(
        code=rule.issue_code,
        message=_message(rule, measurement),
        severity=rule.severity,
        can_proceed=True,
    )


def _message(rule: CheckRule, measurement: MeasurementSet) -> str:
    try:
        return rule.message(measurement)
    except (TypeError, ValueError):
        return rule.name
