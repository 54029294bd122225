"""Validation result models.

One ``ValidationCheck`` is produced per rule on every pipeline run.
Failed checks become ``BlockingError`` entries; advisory findings become
``ValidationWarning`` entries.  ``ValidationResult`` aggregates them with
the overall score and the human-override decision.

All models are frozen dataclasses: a result is never mutated after the
pipeline returns it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roof_measure.models.geometry import Coordinate


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class CheckCategory(str, enum.Enum):
    """Area of the measurement a rule inspects."""

    TOPOLOGY = "topology"
    GEOMETRY = "geometry"
    AREA = "area"
    LINEAR = "linear"
    PITCH = "pitch"
    CONSISTENCY = "consistency"


class CheckStatus(str, enum.Enum):
    """Outcome of a single rule.

    Values:
        PASSED:  The rule holds.
        FAILED:  The rule is violated; produces a blocking error.
        WARNING: Advisory finding; produces a warning, never blocks.
        SKIPPED: The rule could not be evaluated on this input.
    """

    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"
    SKIPPED = "skipped"


class Severity(str, enum.Enum):
    """Severity of a blocking error (critical/high) or warning (medium/low)."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ValidationCheck:
    """Result of one validation rule.

    Attributes:
        id: Stable rule identifier (e.g. ``"area_sum_match"``).
        name: Human-readable rule name.
        category: Rule category.
        status: Rule outcome.
        is_critical: Whether a failure can never be downgraded to a warning.
        details: Human-readable explanation of the outcome.
        value: Measured quantity the rule compared, when there is one.
        threshold: Limit the value was compared against, when there is one.
    """

    id: str
    name: str
    category: CheckCategory
    status: CheckStatus
    is_critical: bool
    details: str
    value: float | None = None
    threshold: float | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "status": self.status.value,
            "is_critical": self.is_critical,
            "details": self.details,
            "value": self.value,
            "threshold": self.threshold,
        }


@dataclass(frozen=True, slots=True)
class BlockingError:
    """A failure that prevents delivery without an explicit override."""

    code: str
    message: str
    severity: Severity
    suggested_fix: str = ""
    location: Coordinate | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "suggested_fix": self.suggested_fix,
            "location": self.location.to_dict() if self.location else None,
        }


@dataclass(frozen=True, slots=True)
class ValidationWarning:
    """An advisory finding; delivery may proceed."""

    code: str
    message: str
    severity: Severity
    can_proceed: bool = True

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "can_proceed": self.can_proceed,
        }


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Aggregate outcome of one validation run.

    Attributes:
        is_valid: ``True`` when there are no blocking errors.
        overall_score: Percentage of checks that passed, one decimal, ``[0, 100]``.
        critical_checks_passed: Every critical check passed or only warned.
        checks: One record per evaluated rule, in rule order.
        blocking_errors: One entry per failed check.
        warnings: One entry per check that ended in a warning.
        requires_human_override: Invalid, but every blocker is ``high`` severity.
        override_justification_required: Prompt shown to the reviewer when an
            override is offered, otherwise ``None``.
    """

    is_valid: bool
    overall_score: float
    critical_checks_passed: bool
    checks: tuple[ValidationCheck, ...]
    blocking_errors: tuple[BlockingError, ...]
    warnings: tuple[ValidationWarning, ...]
    requires_human_override: bool
    override_justification_required: str | None = None

    def _count(self, status: CheckStatus) -> int:
        return sum(1 for c in self.checks if c.status is status)

    @property
    def passed_count(self) -> int:
        return self._count(CheckStatus.PASSED)

    @property
    def failed_count(self) -> int:
        return self._count(CheckStatus.FAILED)

    @property
    def warning_count(self) -> int:
        return self._count(CheckStatus.WARNING)

    @property
    def skipped_count(self) -> int:
        return self._count(CheckStatus.SKIPPED)

    def get_check(self, check_id: str) -> ValidationCheck | None:
        """Return the check with *check_id*, or ``None`` if it was not run."""
        return next((c for c in self.checks if c.id == check_id), None)

    def to_dict(self) -> dict[str, object]:
        return {
            "is_valid": self.is_valid,
            "overall_score": self.overall_score,
            "critical_checks_passed": self.critical_checks_passed,
            "checks": [c.to_dict() for c in self.checks],
            "blocking_errors": [e.to_dict() for e in self.blocking_errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "requires_human_override": self.requires_human_override,
            "override_justification_required": self.override_justification_required,
        }
