"""Engine - Pattern detection and conversion for GLIDE migrations.

This package turns raw source text written against a legacy Redis client
into an explainable migration analysis:

- Signature Catalog: Known usage patterns per source dialect
- Occurrence Scanner: Line-level matches with surrounding context
- Confidence Scorer: Occurrence count and context keyword heuristics
- Text Transformer: Ordered literal rewrites toward the GLIDE API
- Complexity Assessor: Score, bucket, strategy, risks and effort
- Migration Orchestrator: Plan, converted files, guide and time estimate

Usage:
    from glide_migrate.engine import PatternDetector, SourceDialect

    detector = PatternDetector()
    analysis = detector.analyze_source(source, SourceDialect.IOREDIS)

    # Convert the highest-confidence pattern
    result = detector.convert_pattern(analysis.detected_patterns[0], source)
"""

from glide_migrate.engine.catalog import SignatureCatalog, builtin_signatures, default_catalog
from glide_migrate.engine.collaborators import (
    DependencyAnalysis,
    DependencyPhase,
    DependencyRisk,
    OptimizationRecommendation,
    OptimizationReport,
    load_collaborator_file,
)
from glide_migrate.engine.detector import PatternDetector
from glide_migrate.engine.models import (
    CodeComplexity,
    CodeContext,
    ComplexityBucket,
    ConversionResult,
    ConversionStep,
    ConversionStrategy,
    ConversionWarning,
    DetectedPattern,
    EffortEstimate,
    MigrationApproach,
    MigrationRequirement,
    MigrationStrategy,
    PatternComplexity,
    PatternOccurrence,
    PatternSignature,
    PatternType,
    Severity,
    SourceAnalysis,
    SourceDialect,
    StepAction,
    StepOutcome,
)
from glide_migrate.engine.orchestrator import (
    ComprehensiveMigrationResult,
    MigrationOptions,
    MigrationOrchestrator,
    MigrationRequest,
    MigrationScope,
    SourceUnit,
)

__all__ = [
    "CodeComplexity",
    "CodeContext",
    "ComplexityBucket",
    "ComprehensiveMigrationResult",
    "ConversionResult",
    "ConversionStep",
    "ConversionStrategy",
    "ConversionWarning",
    "DependencyAnalysis",
    "DependencyPhase",
    "DependencyRisk",
    "DetectedPattern",
    "EffortEstimate",
    "MigrationApproach",
    "MigrationOptions",
    "MigrationOrchestrator",
    "MigrationRequest",
    "MigrationRequirement",
    "MigrationScope",
    "MigrationStrategy",
    "OptimizationRecommendation",
    "OptimizationReport",
    "PatternComplexity",
    "PatternDetector",
    "PatternOccurrence",
    "PatternSignature",
    "PatternType",
    "Severity",
    "SignatureCatalog",
    "SourceAnalysis",
    "SourceDialect",
    "SourceUnit",
    "StepAction",
    "StepOutcome",
    "builtin_signatures",
    "default_catalog",
    "load_collaborator_file",
]
