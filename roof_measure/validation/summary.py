"""Human-readable validation summary.

Renders a ``ValidationResult`` as Markdown for reviewers: status line,
blocking errors with their suggested fixes, warnings, and check counts.
Pure string assembly.
"""

from __future__ import annotations

from roof_measure.models.validation import ValidationResult


def generate_validation_summary(result: ValidationResult) -> str:
    """Render *result* as a Markdown summary."""
    lines = [
        "# Validation Summary",
        "",
        f"Overall Score: {result.overall_score:.1f}%",
        f"Status: {'✅ VALID' if result.is_valid else '❌ INVALID'}",
        "",
    ]

    if result.blocking_errors:
        lines.append(f"## Blocking Errors ({len(result.blocking_errors)})")
        for error in result.blocking_errors:
            lines.append(f"- [{error.severity.value.upper()}] {error.code}: {error.message}")
            if error.suggested_fix:
                lines.append(f"  Fix: {error.suggested_fix}")
        lines.append("")

    if result.warnings:
        lines.append(f"## Warnings ({len(result.warnings)})")
        for warning in result.warnings:
            lines.append(f"- [{warning.severity.value.upper()}] {warning.code}: {warning.message}")
        lines.append("")

    if result.requires_human_override and result.override_justification_required:
        lines.append("## Human Override Required")
        lines.append(result.override_justification_required)
        lines.append("")

    lines.append("## Checks Summary")
    lines.append(
        f"Passed: {result.passed_count}, Failed: {result.failed_count}, "
        f"Warnings: {result.warning_count}"
    )
    if result.skipped_count:
        lines.append(f"Skipped: {result.skipped_count}")

    return "\n".join(lines) + "\n"
