"""Complexity, risk and effort assessment.

Scores a source unit from its size, dialect density and detected-pattern mix,
classifies the score into a bucket, and derives a migration-strategy skeleton
and an hours-based effort estimate from that bucket.
"""

from __future__ import annotations

import re

from glide_migrate.config import ComplexityConfig, EffortConfig, PlanConfig, ScannerConfig
from glide_migrate.engine.models import (
    CodeComplexity,
    ComplexityBucket,
    ComplexityFactor,
    DetectedPattern,
    EffortBreakdown,
    EffortEstimate,
    MigrationApproach,
    MigrationPhase,
    MigrationStrategy,
    PatternComplexity,
    RiskAssessment,
    Severity,
)

APPROACH_BY_BUCKET = {
    ComplexityBucket.LOW: MigrationApproach.BIG_BANG,
    ComplexityBucket.MEDIUM: MigrationApproach.INCREMENTAL,
    ComplexityBucket.HIGH: MigrationApproach.PARALLEL,
    ComplexityBucket.VERY_HIGH: MigrationApproach.PARALLEL,
}

EFFORT_ASSUMPTIONS = [
    "Existing test coverage",
    "Development team familiarity",
    "No major architectural changes",
]

# (name, description, rating, duration, deliverable)
INCREMENTAL_PHASES = [
    ("Phase 1", "Simple patterns", PatternComplexity.SIMPLE, "1-2 days", "Updated connection code"),
    ("Phase 2", "Moderate patterns", PatternComplexity.MODERATE, "3-5 days", "Converted patterns"),
    ("Phase 3", "Complex patterns", PatternComplexity.COMPLEX, "1-2 weeks", "Full migration"),
]


class ComplexityAssessor:
    """Computes complexity, migration strategy and effort for a source unit."""

    def __init__(
        self,
        complexity: ComplexityConfig | None = None,
        effort: EffortConfig | None = None,
        scanner: ScannerConfig | None = None,
        plan: PlanConfig | None = None,
    ) -> None:
        self.complexity_config = complexity or ComplexityConfig()
        self.effort_config = effort or EffortConfig()
        self.plan_config = plan or PlanConfig()
        self._relevance_re = re.compile((scanner or ScannerConfig()).relevance_pattern)

    # -------------------------------------------------------------------------
    # Complexity
    # -------------------------------------------------------------------------

    def pattern_weight(self, complexity: PatternComplexity) -> float:
        cfg = self.complexity_config
        return {
            PatternComplexity.SIMPLE: cfg.simple_weight,
            PatternComplexity.MODERATE: cfg.moderate_weight,
            PatternComplexity.COMPLEX: cfg.complex_weight,
        }[complexity]

    def count_relevant_lines(self, lines: list[str], patterns: list[DetectedPattern]) -> int:
        """Lines matching the relevance regex or lying inside an occurrence window."""
        covered: set[int] = set()
        for pattern in patterns:
            for occurrence in pattern.occurrences:
                covered.update(range(occurrence.start_line, occurrence.end_line + 1))
        return sum(
            1
            for index, line in enumerate(lines)
            if index in covered or self._relevance_re.search(line)
        )

    def score_factors(
        self,
        patterns: list[DetectedPattern],
        total_lines: int,
        relevant_lines: int,
    ) -> list[ComplexityFactor]:
        """Named contributions whose impacts sum to the unclamped score."""
        cfg = self.complexity_config
        pattern_impact = sum(
            self.pattern_weight(p.complexity) + cfg.occurrence_weight * len(p.occurrences)
            for p in patterns
        )
        size_impact = min(total_lines / cfg.size_divisor, cfg.size_cap)
        density = relevant_lines / total_lines if total_lines else 0.0
        return [
            ComplexityFactor(
                factor="Pattern Complexity",
                impact=pattern_impact,
                description="Complexity and repetition of detected patterns",
            ),
            ComplexityFactor(
                factor="Code Size",
                impact=size_impact,
                description="Total lines of code",
            ),
            ComplexityFactor(
                factor="Dialect Usage",
                impact=density * cfg.density_weight,
                description="Share of lines touching the source client library",
            ),
        ]

    def calculate_score(
        self,
        patterns: list[DetectedPattern],
        total_lines: int,
        relevant_lines: int,
    ) -> float:
        """Complexity score clamped to [0, max_score]."""
        raw = sum(f.impact for f in self.score_factors(patterns, total_lines, relevant_lines))
        return max(0.0, min(raw, self.complexity_config.max_score))

    def classify(self, score: float) -> ComplexityBucket:
        """Map a score to its bucket; each cut point belongs to the upper bucket."""
        cfg = self.complexity_config
        if score < cfg.medium_at:
            return ComplexityBucket.LOW
        if score < cfg.high_at:
            return ComplexityBucket.MEDIUM
        if score < cfg.very_high_at:
            return ComplexityBucket.HIGH
        return ComplexityBucket.VERY_HIGH

    def analyze_complexity(
        self,
        source_code: str,
        patterns: list[DetectedPattern],
    ) -> CodeComplexity:
        """Build the CodeComplexity record for a source unit."""
        lines = source_code.split("\n") if source_code else []
        total_lines = len(lines)
        relevant_lines = self.count_relevant_lines(lines, patterns)
        factors = self.score_factors(patterns, total_lines, relevant_lines)
        score = self.calculate_score(patterns, total_lines, relevant_lines)
        return CodeComplexity(
            total_lines=total_lines,
            relevant_lines=relevant_lines,
            complexity=self.classify(score),
            score=score,
            factors=factors,
        )

    # -------------------------------------------------------------------------
    # Strategy and risk
    # -------------------------------------------------------------------------

    def determine_strategy(
        self,
        patterns: list[DetectedPattern],
        complexity: CodeComplexity,
    ) -> MigrationStrategy:
        """Pick the approach from the bucket and attach phases and risks."""
        approach = APPROACH_BY_BUCKET[complexity.complexity]
        phases: list[MigrationPhase] = []

        if approach == MigrationApproach.INCREMENTAL:
            previous: str | None = None
            for name, description, rating, duration, deliverable in INCREMENTAL_PHASES:
                phases.append(
                    MigrationPhase(
                        name=name,
                        description=description,
                        patterns=[p.type.value for p in patterns if p.complexity == rating],
                        estimated_duration=duration,
                        dependencies=[previous] if previous else [],
                        deliverables=[deliverable],
                    )
                )
                previous = name

        return MigrationStrategy(
            approach=approach,
            phases=phases,
            dependencies=[self.plan_config.target_package],
            risks=self.derive_risks(patterns, complexity),
        )

    def derive_risks(
        self,
        patterns: list[DetectedPattern],
        complexity: CodeComplexity,
    ) -> list[RiskAssessment]:
        """Risks from high-severity requirements and large migration surfaces."""
        risks: list[RiskAssessment] = []
        for pattern in patterns:
            probability = Severity.HIGH if pattern.confidence >= 0.8 else Severity.MEDIUM
            for requirement in pattern.migration_requirements:
                if requirement.severity.rank < Severity.HIGH.rank:
                    continue
                risks.append(
                    RiskAssessment(
                        risk=f"{pattern.type.value}: {requirement.description}",
                        probability=probability,
                        impact=requirement.severity,
                        mitigation=requirement.solution,
                    )
                )

        if complexity.complexity in (ComplexityBucket.HIGH, ComplexityBucket.VERY_HIGH):
            risks.append(
                RiskAssessment(
                    risk=(
                        f"Large migration surface: {complexity.relevant_lines} dialect-touching "
                        f"lines across {len(patterns)} pattern types"
                    ),
                    probability=Severity.MEDIUM,
                    impact=Severity.HIGH,
                    mitigation="Run old and new clients side by side and compare results before cutover",
                )
            )
        return risks

    # -------------------------------------------------------------------------
    # Effort
    # -------------------------------------------------------------------------

    def base_hours(self, bucket: ComplexityBucket) -> float:
        cfg = self.effort_config
        return {
            ComplexityBucket.LOW: cfg.low_base_hours,
            ComplexityBucket.MEDIUM: cfg.medium_base_hours,
            ComplexityBucket.HIGH: cfg.high_base_hours,
            ComplexityBucket.VERY_HIGH: cfg.very_high_base_hours,
        }[bucket]

    def pattern_hours(self, complexity: PatternComplexity) -> float:
        cfg = self.effort_config
        return {
            PatternComplexity.SIMPLE: cfg.simple_pattern_hours,
            PatternComplexity.MODERATE: cfg.moderate_pattern_hours,
            PatternComplexity.COMPLEX: cfg.complex_pattern_hours,
        }[complexity]

    def estimate_effort(
        self,
        patterns: list[DetectedPattern],
        complexity: CodeComplexity,
    ) -> EffortEstimate:
        """Hours by bucket plus per-occurrence hours, split into fixed shares."""
        cfg = self.effort_config
        total = self.base_hours(complexity.complexity)
        for pattern in patterns:
            total += self.pattern_hours(pattern.complexity) * len(pattern.occurrences)

        breakdown = EffortBreakdown(
            analysis=total * cfg.analysis_share,
            conversion=total * cfg.conversion_share,
            testing=total * cfg.testing_share,
            validation=total * cfg.validation_share,
            documentation=total * cfg.documentation_share,
        )
        return EffortEstimate(
            total_hours=total,
            breakdown=breakdown,
            confidence=cfg.confidence,
            assumptions=list(EFFORT_ASSUMPTIONS),
        )
