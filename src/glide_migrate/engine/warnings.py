"""Conversion warnings, suggested validation tests and migration notes.

Warnings produced for every conversion:
- manual-review: one per pattern rated complex
- behavior-change: one per risk named by the selected strategy
"""

from __future__ import annotations

from glide_migrate.engine.models import (
    ConversionStrategy,
    ConversionWarning,
    DetectedPattern,
    PatternComplexity,
    PatternType,
    StepOutcome,
    WarningSeverity,
    WarningType,
)

# Suggested tests per pattern type; types not listed get none
VALIDATION_TESTS: dict[PatternType, tuple[str, ...]] = {
    PatternType.PIPELINE: (
        "Test pipeline execution order",
        "Verify error handling in pipeline",
        "Check result array structure",
    ),
    PatternType.TRANSACTION: (
        "Test transaction atomicity",
        "Verify rollback behavior",
        "Check error handling",
    ),
    PatternType.CLUSTERING: (
        "Test cluster connectivity",
        "Verify failover behavior",
        "Check slot distribution",
    ),
}

MANUAL_REVIEW_MESSAGE = (
    "Complex pattern detected - manual review recommended. "
    "Replacements were applied to every literal match in the file, "
    "not only inside the detected occurrences."
)


class WarningGenerator:
    """Derives warnings, validation tests and notes for a conversion."""

    def generate_warnings(
        self,
        pattern: DetectedPattern,
        strategy: ConversionStrategy,
    ) -> list[ConversionWarning]:
        """Warnings for converting ``pattern`` with ``strategy``."""
        line = pattern.occurrences[0].line + 1 if pattern.occurrences else 1
        warnings: list[ConversionWarning] = []

        if pattern.complexity == PatternComplexity.COMPLEX:
            warnings.append(
                ConversionWarning(
                    type=WarningType.MANUAL_REVIEW,
                    severity=WarningSeverity.WARNING,
                    message=MANUAL_REVIEW_MESSAGE,
                    line=line,
                    suggestion="Review converted code carefully and test thoroughly",
                )
            )

        for risk in strategy.risks:
            warnings.append(
                ConversionWarning(
                    type=WarningType.BEHAVIOR_CHANGE,
                    severity=WarningSeverity.WARNING,
                    message=risk,
                    line=line,
                )
            )

        return warnings

    def generate_validation_tests(self, pattern: DetectedPattern) -> list[str]:
        """Fixed test suggestions for the pattern type (possibly empty)."""
        return list(VALIDATION_TESTS.get(pattern.type, ()))

    def generate_migration_notes(
        self,
        pattern: DetectedPattern,
        strategy: ConversionStrategy,
        steps: list[StepOutcome] | None = None,
    ) -> list[str]:
        """Human-readable notes summarizing a conversion."""
        notes = [
            f"Pattern: {pattern.type.value} ({pattern.complexity.value} complexity)",
            f"Strategy: {strategy.name}",
            f"Confidence: {pattern.confidence * 100:.1f}%",
        ]
        for requirement in pattern.migration_requirements:
            notes.append(f"{requirement.type.value}: {requirement.description}")
        if steps:
            applied = sum(1 for s in steps if s.applied)
            notes.append(f"Steps applied: {applied}/{len(steps)}")
        return notes
