"""Pattern detector - composes scanning, scoring, conversion and assessment.

Usage:
    from glide_migrate.engine import PatternDetector

    detector = PatternDetector()
    analysis = detector.analyze_source(source, "ioredis")
    for pattern in analysis.detected_patterns:
        result = detector.convert_pattern(pattern, source, analysis.source_dialect)
        print(result.converted_code)
"""

from __future__ import annotations

import logging

from glide_migrate.config import GlideMigrateConfig
from glide_migrate.engine.assessor import ComplexityAssessor
from glide_migrate.engine.catalog import SignatureCatalog, default_catalog
from glide_migrate.engine.models import (
    ConversionResult,
    DetectedPattern,
    SourceAnalysis,
    SourceDialect,
)
from glide_migrate.engine.scanner import OccurrenceScanner
from glide_migrate.engine.scorer import ConfidenceScorer
from glide_migrate.engine.transformer import TextTransformer, select_strategy
from glide_migrate.engine.warnings import WarningGenerator

logger = logging.getLogger(__name__)


class PatternDetector:
    """Detects Redis-client usage patterns and converts them to GLIDE.

    All work is synchronous and pure: the same text and dialect always give
    the same result, and no state is shared between calls.
    """

    def __init__(
        self,
        catalog: SignatureCatalog | None = None,
        config: GlideMigrateConfig | None = None,
    ) -> None:
        """Initialize the detector.

        Args:
            catalog: Signature catalog; defaults to the built-in one.
            config: Engine configuration; defaults to built-in values.
        """
        self.catalog = catalog or default_catalog()
        self.config = config or GlideMigrateConfig()
        self.scanner = OccurrenceScanner(self.catalog, self.config.scanner)
        self.scorer = ConfidenceScorer(self.config.scoring)
        self.transformer = TextTransformer()
        self.warnings = WarningGenerator()
        self.assessor = ComplexityAssessor(
            complexity=self.config.complexity,
            effort=self.config.effort,
            scanner=self.config.scanner,
            plan=self.config.plan,
        )

    def analyze_source(
        self,
        source_code: str | None,
        dialect: SourceDialect | str,
    ) -> SourceAnalysis:
        """Analyze one source unit.

        Args:
            source_code: Raw source text; None or "" yields an empty analysis.
                Whitespace-only text is analyzed like any other text.
            dialect: Declared source dialect.

        Returns:
            SourceAnalysis with patterns, complexity, strategy and effort.

        Raises:
            InputError: If the dialect is missing or unknown.
        """
        source_dialect = SourceDialect.parse(dialect)
        if not source_code:
            return SourceAnalysis.empty(source_dialect)

        patterns = self.detect_patterns(source_code, source_dialect)
        complexity = self.assessor.analyze_complexity(source_code, patterns)
        strategy = self.assessor.determine_strategy(patterns, complexity)
        effort = self.assessor.estimate_effort(patterns, complexity)

        logger.debug(
            "Analysis: %d patterns, complexity=%s (%.1f), %.1fh",
            len(patterns),
            complexity.complexity.value,
            complexity.score,
            effort.total_hours,
        )

        return SourceAnalysis(
            source_dialect=source_dialect,
            detected_patterns=patterns,
            code_complexity=complexity,
            migration_strategy=strategy,
            estimated_effort=effort,
        )

    def detect_patterns(
        self,
        source_code: str,
        dialect: SourceDialect | str,
    ) -> list[DetectedPattern]:
        """Detect and score every catalog pattern present in the text.

        Returns:
            Patterns sorted by confidence descending; ties keep catalog order.
        """
        source_dialect = SourceDialect.parse(dialect)
        found = self.scanner.scan(source_code, source_dialect)
        min_confidence = self.config.scoring.min_confidence

        patterns: list[DetectedPattern] = []
        for signature in self.catalog:
            occurrences = found.get(signature.pattern_type)
            if not occurrences:
                continue
            confidence = self.scorer.score(occurrences, signature)
            if confidence < min_confidence:
                logger.debug(
                    "Dropping %s: confidence %.2f below %.2f",
                    signature.pattern_type.value,
                    confidence,
                    min_confidence,
                )
                continue
            patterns.append(
                DetectedPattern(
                    type=signature.pattern_type,
                    confidence=confidence,
                    occurrences=occurrences,
                    complexity=signature.complexity,
                    migration_requirements=signature.migration_requirements,
                    conversion_strategies=signature.conversion_strategies,
                )
            )

        return sorted(patterns, key=lambda p: p.confidence, reverse=True)

    def convert_pattern(
        self,
        pattern: DetectedPattern,
        source_code: str,
        dialect: SourceDialect | str | None = None,
    ) -> ConversionResult:
        """Convert one detected pattern across the whole source text.

        Args:
            pattern: The pattern to convert.
            source_code: Full source text.
            dialect: Source dialect used to select the strategy; without it
                the pattern's first strategy is used.
        """
        source_dialect = SourceDialect.parse(dialect) if dialect is not None else None
        strategy = select_strategy(pattern, source_dialect)
        outcome = self.transformer.apply(source_code, strategy)

        return ConversionResult(
            original_code=source_code,
            converted_code=outcome.text,
            pattern=pattern,
            strategy=strategy,
            warnings=tuple(self.warnings.generate_warnings(pattern, strategy)),
            validation_tests=tuple(self.warnings.generate_validation_tests(pattern)),
            migration_notes=tuple(
                self.warnings.generate_migration_notes(pattern, strategy, outcome.steps)
            ),
            step_outcomes=tuple(outcome.steps),
        )

    def convert_all(
        self,
        source_code: str,
        dialect: SourceDialect | str,
    ) -> list[ConversionResult]:
        """One ConversionResult per detected pattern, each against the original text."""
        source_dialect = SourceDialect.parse(dialect)
        return [
            self.convert_pattern(pattern, source_code, source_dialect)
            for pattern in self.detect_patterns(source_code, source_dialect)
        ]
