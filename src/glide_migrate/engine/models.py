"""Data models for the pattern detection and conversion engine.

Defines enums and dataclasses for catalog entries, detected patterns,
conversion results and source analyses. Every record serializes to plain
JSON-safe values through ``to_dict()``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from glide_migrate.errors import InputError, UnsupportedDialectError


class SourceDialect(Enum):
    """Legacy client libraries that can be migrated from."""

    IOREDIS = "ioredis"
    NODE_REDIS = "node-redis"

    @classmethod
    def parse(cls, value: str | SourceDialect | None) -> SourceDialect:
        """Resolve a dialect name, failing fast on missing or unknown values.

        Raises:
            InputError: If ``value`` is empty or names no known dialect.
        """
        if isinstance(value, SourceDialect):
            return value
        if value is None or not str(value).strip():
            raise InputError("Source dialect is required", supported=[d.value for d in cls])

        normalized = str(value).strip().lower().replace("_", "-")
        for dialect in cls:
            if dialect.value == normalized:
                return dialect
        raise UnsupportedDialectError(str(value), [d.value for d in cls])


class PatternType(Enum):
    """Usage idioms the engine can recognize."""

    PIPELINE = "pipeline"
    TRANSACTION = "transaction"
    CLUSTERING = "clustering"
    PUBSUB = "pubsub"
    STREAMING = "streaming"
    CONNECTION = "connection"


class PatternComplexity(Enum):
    """How hard a pattern is to migrate."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


class Severity(Enum):
    """Severity / priority / likelihood levels shared by requirements, risks and recommendations."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Numeric rank, higher is more severe."""
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: str | Severity | None, default: Severity | None = None) -> Severity:
        """Parse a severity string.

        Raises:
            InputError: If the value is unknown and no default is given.
        """
        if isinstance(value, Severity):
            return value
        if value is None and default is not None:
            return default
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            if default is not None:
                return default
            raise InputError(f"Invalid severity: {value!r}", value=value) from e


_SEVERITY_RANK = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


class RequirementType(Enum):
    """Kind of change a migration requirement implies."""

    API_CHANGE = "api-change"
    SYNTAX_CHANGE = "syntax-change"
    BEHAVIORAL_CHANGE = "behavioral-change"
    DEPENDENCY_CHANGE = "dependency-change"


class StepAction(Enum):
    """Edit performed by a conversion step."""

    REPLACE = "replace"
    ADD = "add"
    REMOVE = "remove"
    MODIFY = "modify"
    WRAP = "wrap"


class WarningType(Enum):
    """Categories of conversion warnings."""

    BEHAVIOR_CHANGE = "behavior-change"
    PERFORMANCE_IMPACT = "performance-impact"
    BREAKING_CHANGE = "breaking-change"
    MANUAL_REVIEW = "manual-review"


class WarningSeverity(Enum):
    """Severity of a conversion warning."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ComplexityBucket(Enum):
    """Discrete complexity classification of a source unit."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"


class MigrationApproach(Enum):
    """Overall migration approach."""

    INCREMENTAL = "incremental"
    BIG_BANG = "big-bang"
    PARALLEL = "parallel"
    FEATURE_FLAG = "feature-flag"


# =============================================================================
# Catalog entries
# =============================================================================


@dataclass(frozen=True)
class MigrationRequirement:
    """A known change that migrating a pattern requires."""

    type: RequirementType
    severity: Severity
    description: str
    impact: str
    solution: str
    code_example: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "description": self.description,
            "impact": self.impact,
            "solution": self.solution,
            "code_example": self.code_example,
        }


@dataclass(frozen=True)
class ConversionStep:
    """One ordered text edit within a conversion strategy."""

    order: int
    """Position within the strategy; strictly increasing."""

    action: StepAction
    target: str
    """Literal text to look for."""

    new_code: str
    """Replacement (or inserted) text."""

    explanation: str
    preserve_comments: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "order": self.order,
            "action": self.action.value,
            "target": self.target,
            "new_code": self.new_code,
            "explanation": self.explanation,
            "preserve_comments": self.preserve_comments,
        }


@dataclass(frozen=True)
class ConversionStrategy:
    """An ordered recipe of text edits rewriting one idiom into the target dialect."""

    name: str
    description: str
    applicability: tuple[SourceDialect, ...] = ()
    steps: tuple[ConversionStep, ...] = ()
    risks: tuple[str, ...] = ()
    validation: tuple[str, ...] = ()

    def applies_to(self, dialect: SourceDialect) -> bool:
        """Whether this strategy declares support for ``dialect``."""
        return dialect in self.applicability

    def ordered_steps(self) -> list[ConversionStep]:
        """Steps in ascending ``order``."""
        return sorted(self.steps, key=lambda s: s.order)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "applicability": [d.value for d in self.applicability],
            "steps": [s.to_dict() for s in self.ordered_steps()],
            "risks": list(self.risks),
            "validation": list(self.validation),
        }


@dataclass(frozen=True)
class PatternSignature:
    """Catalog entry describing how to recognize and convert one pattern type."""

    pattern_type: PatternType
    signatures: Mapping[SourceDialect, tuple[re.Pattern[str], ...]]
    """Per-dialect regexes; a dialect with no entry is never scanned for this pattern."""

    context_requirements: tuple[str, ...]
    """Keywords that corroborate the pattern when found near a match."""

    complexity: PatternComplexity
    migration_requirements: tuple[MigrationRequirement, ...] = ()
    conversion_strategies: tuple[ConversionStrategy, ...] = ()

    def patterns_for(self, dialect: SourceDialect) -> tuple[re.Pattern[str], ...]:
        """Regexes registered for ``dialect`` (empty if none)."""
        return self.signatures.get(dialect, ())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.pattern_type.value,
            "signatures": {
                dialect.value: [p.pattern for p in patterns]
                for dialect, patterns in self.signatures.items()
            },
            "context_requirements": list(self.context_requirements),
            "complexity": self.complexity.value,
            "migration_requirements": [r.to_dict() for r in self.migration_requirements],
            "conversion_strategies": [s.to_dict() for s in self.conversion_strategies],
        }


# =============================================================================
# Scan results
# =============================================================================


@dataclass
class CodeContext:
    """Control-flow context surrounding an occurrence."""

    async_context: bool = False
    error_handling: bool = False
    loop_context: bool = False
    conditional_context: bool = False
    class_name: str | None = None
    """Nearest enclosing class above the matched line, if any."""

    method_name: str | None = None
    """Nearest enclosing function or method above the matched line, if any."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "async_context": self.async_context,
            "error_handling": self.error_handling,
            "loop_context": self.loop_context,
            "conditional_context": self.conditional_context,
            "class_name": self.class_name,
            "method_name": self.method_name,
        }


@dataclass
class PatternOccurrence:
    """One located instance of a pattern signature."""

    start_line: int
    """First line of the context window (0-indexed)."""

    end_line: int
    """Last line of the context window (0-indexed, inclusive)."""

    line: int
    """The line that matched (0-indexed)."""

    source_code: str
    methods: list[str] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    context: CodeContext = field(default_factory=CodeContext)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "start_line": self.start_line,
            "end_line": self.end_line,
            "line": self.line,
            "source_code": self.source_code,
            "methods": self.methods,
            "variables": self.variables,
            "dependencies": self.dependencies,
            "context": self.context.to_dict(),
        }


@dataclass
class DetectedPattern:
    """A pattern found at least once in a source unit."""

    type: PatternType
    confidence: float
    """Detection confidence (0.0 to 1.0)."""

    occurrences: list[PatternOccurrence]
    complexity: PatternComplexity
    migration_requirements: tuple[MigrationRequirement, ...] = ()
    conversion_strategies: tuple[ConversionStrategy, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type.value,
            "confidence": round(self.confidence, 3),
            "occurrences": [o.to_dict() for o in self.occurrences],
            "complexity": self.complexity.value,
            "migration_requirements": [r.to_dict() for r in self.migration_requirements],
            "conversion_strategies": [s.to_dict() for s in self.conversion_strategies],
        }


# =============================================================================
# Conversion results
# =============================================================================


@dataclass(frozen=True)
class StepOutcome:
    """What a single conversion step did to the text.

    A step whose target was found but whose rewrite leaves the text as it
    was (``.exec()`` to ``.exec()``) is neither applied nor skipped.
    """

    order: int
    action: StepAction
    target: str
    new_code: str
    explanation: str
    replacements: int
    """Number of literal matches rewritten (0 when skipped or unchanged)."""

    matches: int | None = None
    """Literal matches of the target found; defaults to ``replacements``."""

    @property
    def found(self) -> bool:
        matches = self.replacements if self.matches is None else self.matches
        return matches > 0

    @property
    def applied(self) -> bool:
        return self.replacements > 0

    @property
    def skipped(self) -> bool:
        return not self.found

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "order": self.order,
            "action": self.action.value,
            "target": self.target,
            "new_code": self.new_code,
            "explanation": self.explanation,
            "replacements": self.replacements,
            "applied": self.applied,
            "skipped": self.skipped,
        }


@dataclass(frozen=True)
class ConversionWarning:
    """A severity-tagged note attached to a conversion."""

    type: WarningType
    severity: WarningSeverity
    message: str
    line: int = 1
    """1-indexed line of the related occurrence."""

    column: int = 1
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "location": {"line": self.line, "column": self.column},
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of converting one detected pattern in one source text."""

    original_code: str
    converted_code: str
    pattern: DetectedPattern
    strategy: ConversionStrategy
    warnings: tuple[ConversionWarning, ...] = ()
    validation_tests: tuple[str, ...] = ()
    migration_notes: tuple[str, ...] = ()
    step_outcomes: tuple[StepOutcome, ...] = ()

    @property
    def applied_steps(self) -> int:
        """Steps that rewrote the text."""
        return sum(1 for s in self.step_outcomes if s.applied)

    @property
    def skipped_steps(self) -> int:
        """Steps whose target was not found."""
        return sum(1 for s in self.step_outcomes if s.skipped)

    @property
    def changed(self) -> bool:
        return self.converted_code != self.original_code

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "original_code": self.original_code,
            "converted_code": self.converted_code,
            "pattern": self.pattern.to_dict(),
            "strategy": self.strategy.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
            "validation_tests": list(self.validation_tests),
            "migration_notes": list(self.migration_notes),
            "step_outcomes": [s.to_dict() for s in self.step_outcomes],
            "applied_steps": self.applied_steps,
            "skipped_steps": self.skipped_steps,
        }


# =============================================================================
# Assessment
# =============================================================================


@dataclass
class ComplexityFactor:
    """A named contribution to the complexity score."""

    factor: str
    impact: float
    description: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "factor": self.factor,
            "impact": round(self.impact, 2),
            "description": self.description,
        }


@dataclass
class CodeComplexity:
    """Size and difficulty profile of a source unit."""

    total_lines: int
    relevant_lines: int
    """Lines touching the source dialect."""

    complexity: ComplexityBucket
    score: float = 0.0
    """Clamped score the bucket was derived from (0 to 100)."""

    factors: list[ComplexityFactor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_lines": self.total_lines,
            "relevant_lines": self.relevant_lines,
            "complexity": self.complexity.value,
            "score": round(self.score, 2),
            "factors": [f.to_dict() for f in self.factors],
        }


@dataclass
class MigrationPhase:
    """A phase of the migration-strategy skeleton."""

    name: str
    description: str
    patterns: list[str] = field(default_factory=list)
    estimated_duration: str = ""
    dependencies: list[str] = field(default_factory=list)
    deliverables: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "patterns": self.patterns,
            "estimated_duration": self.estimated_duration,
            "dependencies": self.dependencies,
            "deliverables": self.deliverables,
        }


@dataclass
class RiskAssessment:
    """A migration risk with likelihood and mitigation."""

    risk: str
    probability: Severity
    impact: Severity
    mitigation: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "risk": self.risk,
            "probability": self.probability.value,
            "impact": self.impact.value,
            "mitigation": self.mitigation,
        }


@dataclass
class MigrationStrategy:
    """Phased migration skeleton derived from the complexity bucket."""

    approach: MigrationApproach
    phases: list[MigrationPhase] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    risks: list[RiskAssessment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "approach": self.approach.value,
            "phases": [p.to_dict() for p in self.phases],
            "dependencies": self.dependencies,
            "risks": [r.to_dict() for r in self.risks],
        }


@dataclass
class EffortBreakdown:
    """Split of total hours by activity."""

    analysis: float = 0.0
    conversion: float = 0.0
    testing: float = 0.0
    validation: float = 0.0
    documentation: float = 0.0

    @property
    def total(self) -> float:
        return self.analysis + self.conversion + self.testing + self.validation + self.documentation

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "analysis": round(self.analysis, 2),
            "conversion": round(self.conversion, 2),
            "testing": round(self.testing, 2),
            "validation": round(self.validation, 2),
            "documentation": round(self.documentation, 2),
        }


@dataclass
class EffortEstimate:
    """Hours-based effort estimate."""

    total_hours: float
    breakdown: EffortBreakdown = field(default_factory=EffortBreakdown)
    confidence: float = 0.0
    assumptions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_hours": round(self.total_hours, 2),
            "breakdown": self.breakdown.to_dict(),
            "confidence": round(self.confidence, 3),
            "assumptions": self.assumptions,
        }


@dataclass
class SourceAnalysis:
    """Everything the engine learned about one source unit."""

    source_dialect: SourceDialect
    detected_patterns: list[DetectedPattern]
    code_complexity: CodeComplexity
    migration_strategy: MigrationStrategy
    estimated_effort: EffortEstimate

    @classmethod
    def empty(cls, dialect: SourceDialect) -> SourceAnalysis:
        """A well-formed analysis for a unit with no source text."""
        return cls(
            source_dialect=dialect,
            detected_patterns=[],
            code_complexity=CodeComplexity(
                total_lines=0,
                relevant_lines=0,
                complexity=ComplexityBucket.LOW,
            ),
            migration_strategy=MigrationStrategy(approach=MigrationApproach.BIG_BANG),
            estimated_effort=EffortEstimate(total_hours=0.0),
        )

    def get_pattern(self, pattern_type: PatternType) -> DetectedPattern | None:
        """Return the detected pattern of ``pattern_type``, if present."""
        for pattern in self.detected_patterns:
            if pattern.type == pattern_type:
                return pattern
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source_dialect": self.source_dialect.value,
            "detected_patterns": [p.to_dict() for p in self.detected_patterns],
            "code_complexity": self.code_complexity.to_dict(),
            "migration_strategy": self.migration_strategy.to_dict(),
            "estimated_effort": self.estimated_effort.to_dict(),
        }
