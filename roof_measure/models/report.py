"""Pydantic report model for persisted validation results.

The downstream persistence and report-rendering layers store one
``ValidationReportRecord`` per validation run.  It is the audit trail
for a delivery decision: what was checked, what failed, and whether a
human override was offered.

Engineering standards:
- Deterministic: the same result and timestamp produce the same JSON.
- Explicit units: square feet and feet throughout.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

# Schema version for forward compatibility
SCHEMA_VERSION = "roof-validation-v1"


class CheckRecord(BaseModel):
    """One rule outcome, flattened for storage."""

    id: str
    name: str
    category: str
    status: str
    is_critical: bool
    details: str = ""
    value: float | None = None
    threshold: float | None = None


class IssueRecord(BaseModel):
    """A blocking error or a warning, flattened for storage.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable description.
        severity: ``critical``/``high`` for blockers, ``medium``/``low`` for warnings.
        blocking: Whether the issue prevents delivery.
        suggested_fix: Remediation hint, if any.
    """

    code: str
    message: str
    severity: str
    blocking: bool
    suggested_fix: str = ""


class CheckCounts(BaseModel):
    """Check tallies by status."""

    passed: int = 0
    failed: int = 0
    warning: int = 0
    skipped: int = 0


class ValidationReportRecord(BaseModel):
    """Top-level persisted validation report.

    Attributes:
        schema_version: Schema identifier for forward compatibility.
        measurement_id: Identifier of the audited measurement.
        generated_at: Report timestamp (ISO 8601).
        is_valid: Delivery gate.
        overall_score: Percentage of checks passed.
        critical_checks_passed: Whether all critical checks passed or warned.
        requires_human_override: Whether a reviewer may override the blockers.
        override_justification_required: Reviewer prompt, if an override is offered.
        counts: Check tallies by status.
        checks: Every rule outcome in rule order.
        issues: Blocking errors followed by warnings.
    """

    schema_version: str = Field(default=SCHEMA_VERSION, alias="$schema")
    measurement_id: str = ""
    generated_at: str = ""
    is_valid: bool = False
    overall_score: float = 0.0
    critical_checks_passed: bool = False
    requires_human_override: bool = False
    override_justification_required: str | None = None
    counts: CheckCounts = Field(default_factory=CheckCounts)
    checks: list[CheckRecord] = Field(default_factory=list)
    issues: list[IssueRecord] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_result(
        cls,
        result: object,
        *,
        measurement_id: str = "",
        timestamp: str = "",
    ) -> ValidationReportRecord:
        """Construct a report record from a ``ValidationResult``.

        Args:
            result: A ``ValidationResult`` from the validation pipeline.
            measurement_id: Identifier of the audited measurement.
            timestamp: Report timestamp (ISO 8601).  If empty, uses the
                current UTC time.

        Returns:
            A fully populated ``ValidationReportRecord``.
        """
        from roof_measure.models.validation import ValidationResult

        if not isinstance(result, ValidationResult):
            msg = f"Expected ValidationResult instance, got {type(result).__name__}"
            raise TypeError(msg)

        if not timestamp:
            timestamp = datetime.now(UTC).isoformat()

        issues = [
            IssueRecord(
                code=e.code,
                message=e.message,
                severity=e.severity.value,
                blocking=True,
                suggested_fix=e.suggested_fix,
            )
            for e in result.blocking_errors
        ]
        issues.extend(
            IssueRecord(
                code=w.code,
                message=w.message,
                severity=w.severity.value,
                blocking=False,
            )
            for w in result.warnings
        )

        return cls(
            measurement_id=measurement_id,
            generated_at=timestamp,
            is_valid=result.is_valid,
            overall_score=result.overall_score,
            critical_checks_passed=result.critical_checks_passed,
            requires_human_override=result.requires_human_override,
            override_justification_required=result.override_justification_required,
            counts=CheckCounts(
                passed=result.passed_count,
                failed=result.failed_count,
                warning=result.warning_count,
                skipped=result.skipped_count,
            ),
            checks=[CheckRecord(**c.to_dict()) for c in result.checks],
            issues=issues,
        )

    def to_json(self, *, indent: int = 2) -> str:
        """Serialise to a JSON string using the ``$schema`` alias."""
        return self.model_dump_json(indent=indent, by_alias=True)

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)  # type: ignore[return-value]
