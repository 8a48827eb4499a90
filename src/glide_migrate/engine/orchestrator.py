"""Migration orchestrator - turns analyses into one comprehensive migration result.

Combines the engine's SourceAnalysis with externally supplied dependency and
optimization analyses into:
- a ranked recommendation list (stable by priority)
- a multi-phase migration plan
- converted source files with every change recorded
- a migration guide and a time estimate

Usage:
    from glide_migrate.engine.orchestrator import MigrationOrchestrator, MigrationRequest

    orchestrator = MigrationOrchestrator()
    result = orchestrator.perform_migration(
        MigrationRequest(source_dialect="ioredis", source_code=source),
    )
    print(json.dumps(result.to_dict(), indent=2))
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from glide_migrate.config import GlideMigrateConfig
from glide_migrate.engine.collaborators import DependencyAnalysis, OptimizationReport
from glide_migrate.engine.detector import PatternDetector
from glide_migrate.engine.models import (
    ComplexityBucket,
    ConversionResult,
    PatternComplexity,
    PatternType,
    Severity,
    SourceAnalysis,
    SourceDialect,
)

logger = logging.getLogger(__name__)


class MigrationScope(Enum):
    """Granularity of the analyzed source unit."""

    FILE = "file"
    MODULE = "module"
    PROJECT = "project"


class RecommendationSource(Enum):
    """Where a ranked recommendation came from."""

    PATTERN = "pattern"
    DEPENDENCY = "dependency"
    OPTIMIZATION = "optimization"


class ChangeType(Enum):
    """Kind of recorded change in a converted file."""

    METHOD_RENAME = "method-rename"
    PARAMETER_CHANGE = "parameter-change"
    API_REPLACEMENT = "api-replacement"
    PATTERN_CONVERSION = "pattern-conversion"


@dataclass(frozen=True)
class MethodRename:
    """A dialect-specific literal method rename."""

    pattern: str
    replacement: str
    reason: str


_CAMEL_CASE_REASON = "Convert camelCase to lowercase"

# node-redis v4 exposes camelCase commands; GLIDE uses lowercase names
DIALECT_RENAMES: dict[SourceDialect, tuple[MethodRename, ...]] = {
    SourceDialect.NODE_REDIS: tuple(
        MethodRename(f".{name}(", f".{name.lower()}(", _CAMEL_CASE_REASON)
        for name in (
            "hSet",
            "hGet",
            "hGetAll",
            "hDel",
            "lPush",
            "rPush",
            "sAdd",
            "sMembers",
            "zAdd",
            "zRange",
        )
    ),
    SourceDialect.IOREDIS: (),
}

SCOPE_MULTIPLIER = {
    MigrationScope.FILE: 1,
    MigrationScope.MODULE: 3,
    MigrationScope.PROJECT: 10,
}


# =============================================================================
# Request / result records
# =============================================================================


@dataclass
class MigrationOptions:
    """Caller preferences for a migration run."""

    include_optimizations: bool = True
    generate_tests: bool = True


@dataclass
class MigrationRequest:
    """One migration request. The dialect is validated on construction."""

    source_dialect: SourceDialect | str
    source_code: str | None = None
    file_name: str = "input.ts"
    scope: MigrationScope = MigrationScope.FILE
    options: MigrationOptions = field(default_factory=MigrationOptions)

    def __post_init__(self) -> None:
        self.source_dialect = SourceDialect.parse(self.source_dialect)


@dataclass
class SourceUnit:
    """A named piece of source text for batch analysis."""

    name: str
    source_code: str | None
    dialect: SourceDialect | str

    def __post_init__(self) -> None:
        self.dialect = SourceDialect.parse(self.dialect)


@dataclass
class RankedRecommendation:
    """A recommendation merged from any analysis, ranked by priority."""

    source: RecommendationSource
    title: str
    description: str
    priority: Severity
    action_items: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source": self.source.value,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "action_items": self.action_items,
        }


@dataclass
class PlanPhase:
    """A numbered phase of the migration plan or guide."""

    phase: int
    title: str
    description: str
    tasks: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    estimated_time: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "phase": self.phase,
            "title": self.title,
            "description": self.description,
            "tasks": self.tasks,
            "dependencies": self.dependencies,
            "estimated_time": self.estimated_time,
        }


@dataclass
class MigrationPlan:
    """Multi-phase plan merged from all analyses."""

    phases: list[PlanPhase] = field(default_factory=list)
    total_steps: int = 0
    estimated_time: str = ""
    dependencies: list[str] = field(default_factory=list)
    validation_checkpoints: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "phases": [p.to_dict() for p in self.phases],
            "total_steps": self.total_steps,
            "estimated_time": self.estimated_time,
            "dependencies": self.dependencies,
            "validation_checkpoints": self.validation_checkpoints,
        }


@dataclass
class CodeChange:
    """A single recorded edit in a converted file."""

    type: ChangeType
    line: int
    """1-indexed line of the (first) edited location."""

    original: str
    converted: str
    reasoning: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type.value,
            "line": self.line,
            "original": self.original,
            "converted": self.converted,
            "reasoning": self.reasoning,
        }


@dataclass
class ConvertedFile:
    """A source file after every detected pattern has been converted."""

    original_file: str
    converted_code: str
    changes: list[CodeChange] = field(default_factory=list)
    confidence: float = 1.0
    """Conversion confidence (0.0 to 1.0)."""

    warnings: list[str] = field(default_factory=list)
    skipped_steps: int = 0
    """Conversion steps whose target was not found in the text."""

    conversions: list[ConversionResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "original_file": self.original_file,
            "converted_code": self.converted_code,
            "changes": [c.to_dict() for c in self.changes],
            "confidence": round(self.confidence, 3),
            "warnings": self.warnings,
            "skipped_steps": self.skipped_steps,
            "conversions": [
                {
                    "pattern": c.pattern.type.value,
                    "strategy": c.strategy.name,
                    "warnings": [w.to_dict() for w in c.warnings],
                    "validation_tests": list(c.validation_tests),
                    "migration_notes": list(c.migration_notes),
                    "applied_steps": c.applied_steps,
                    "skipped_steps": c.skipped_steps,
                }
                for c in self.conversions
            ],
        }


@dataclass
class MigrationGuide:
    """Narrative guide accompanying the plan."""

    overview: str
    phases: list[PlanPhase] = field(default_factory=list)
    critical_steps: list[str] = field(default_factory=list)
    rollback_plan: list[str] = field(default_factory=list)
    validation_steps: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "overview": self.overview,
            "phases": [p.to_dict() for p in self.phases],
            "critical_steps": self.critical_steps,
            "rollback_plan": self.rollback_plan,
            "validation_steps": self.validation_steps,
        }


@dataclass
class TimeEstimate:
    """Scope-scaled time estimate for the whole migration."""

    total_hours: int
    analysis: float = 0.0
    code_changes: float = 0.0
    testing: float = 0.0
    validation: float = 0.0
    confidence: str = "high"
    factors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_hours": self.total_hours,
            "breakdown": {
                "analysis": round(self.analysis, 2),
                "code_changes": round(self.code_changes, 2),
                "testing": round(self.testing, 2),
                "validation": round(self.validation, 2),
            },
            "confidence": self.confidence,
            "factors": self.factors,
        }


@dataclass
class ComprehensiveMigrationResult:
    """Everything produced by one orchestrated migration run."""

    source_analysis: SourceAnalysis
    dependency_analysis: DependencyAnalysis
    optimization_report: OptimizationReport
    recommendations: list[RankedRecommendation]
    migration_plan: MigrationPlan
    converted_files: list[ConvertedFile]
    migration_guide: MigrationGuide
    time_estimate: TimeEstimate
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source_analysis": self.source_analysis.to_dict(),
            "dependency_analysis": self.dependency_analysis.to_dict(),
            "optimization_report": self.optimization_report.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "migration_plan": self.migration_plan.to_dict(),
            "converted_files": [f.to_dict() for f in self.converted_files],
            "migration_guide": self.migration_guide.to_dict(),
            "time_estimate": self.time_estimate.to_dict(),
            "generated_at": self.generated_at.isoformat(),
        }


DependencyProvider = Callable[[], Awaitable[DependencyAnalysis]]
OptimizationProvider = Callable[[SourceAnalysis], Awaitable[OptimizationReport]]


# =============================================================================
# Orchestrator
# =============================================================================


class MigrationOrchestrator:
    """Composes pattern analysis with collaborator analyses into one result.

    Example:
        >>> orchestrator = MigrationOrchestrator()
        >>> result = orchestrator.perform_migration(
        ...     MigrationRequest(source_dialect="node-redis", source_code=code),
        ...     dependency_analysis=DependencyAnalysis.from_dict(deps),
        ... )
        >>> result.migration_plan.total_steps
        3
    """

    def __init__(
        self,
        detector: PatternDetector | None = None,
        config: GlideMigrateConfig | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            detector: Pattern detector; one is built from ``config`` if omitted.
            config: Configuration; defaults to the detector's.
        """
        if detector is None:
            detector = PatternDetector(config=config)
        self.detector = detector
        self.config = config or detector.config

    def perform_migration(
        self,
        request: MigrationRequest,
        dependency_analysis: DependencyAnalysis | None = None,
        optimization_report: OptimizationReport | None = None,
    ) -> ComprehensiveMigrationResult:
        """Run a full migration analysis synchronously."""
        analysis = self.detector.analyze_source(request.source_code, request.source_dialect)
        return self.assemble(
            request,
            analysis,
            dependency_analysis or DependencyAnalysis(),
            optimization_report or OptimizationReport(),
        )

    async def perform_migration_async(
        self,
        request: MigrationRequest,
        dependency_provider: DependencyProvider | None = None,
        optimization_provider: OptimizationProvider | None = None,
    ) -> ComprehensiveMigrationResult:
        """Run pattern analysis and dependency analysis concurrently, then merge.

        The optimization provider receives the finished SourceAnalysis, so it
        runs after the join.
        """

        async def no_dependencies() -> DependencyAnalysis:
            return DependencyAnalysis()

        analysis, dependency_analysis = await asyncio.gather(
            asyncio.to_thread(
                self.detector.analyze_source,
                request.source_code,
                request.source_dialect,
            ),
            dependency_provider() if dependency_provider else no_dependencies(),
        )
        optimization_report = (
            await optimization_provider(analysis) if optimization_provider else OptimizationReport()
        )
        return self.assemble(request, analysis, dependency_analysis, optimization_report)

    async def analyze_units(
        self,
        units: Sequence[SourceUnit],
        concurrency: int = 4,
    ) -> list[SourceAnalysis]:
        """Analyze many units concurrently.

        Args:
            units: Source units to analyze.
            concurrency: Maximum analyses in flight.

        Returns:
            Analyses in the same order as ``units``, regardless of completion order.
        """
        if not units:
            return []

        semaphore = asyncio.Semaphore(max(1, concurrency))
        results: list[SourceAnalysis | None] = [None] * len(units)

        async def process_one(index: int, unit: SourceUnit) -> None:
            async with semaphore:
                results[index] = await asyncio.to_thread(
                    self.detector.analyze_source,
                    unit.source_code,
                    unit.dialect,
                )

        await asyncio.gather(*(process_one(i, u) for i, u in enumerate(units)))
        return [r for r in results if r is not None]

    def assemble(
        self,
        request: MigrationRequest,
        analysis: SourceAnalysis,
        dependency_analysis: DependencyAnalysis,
        optimization_report: OptimizationReport,
    ) -> ComprehensiveMigrationResult:
        """Merge finished analyses into the comprehensive result."""
        converted_files = (
            [self.convert_source(request.source_code, analysis, request.file_name)]
            if request.source_code
            else []
        )
        return ComprehensiveMigrationResult(
            source_analysis=analysis,
            dependency_analysis=dependency_analysis,
            optimization_report=optimization_report,
            recommendations=self.rank_recommendations(
                analysis, dependency_analysis, optimization_report
            ),
            migration_plan=self.create_migration_plan(
                analysis, dependency_analysis, optimization_report, request.options
            ),
            converted_files=converted_files,
            migration_guide=self.generate_migration_guide(
                analysis, dependency_analysis, optimization_report, request.options
            ),
            time_estimate=self.estimate_migration_time(
                analysis, dependency_analysis, request.scope
            ),
        )

    # -------------------------------------------------------------------------
    # Recommendations and plan
    # -------------------------------------------------------------------------

    def rank_recommendations(
        self,
        analysis: SourceAnalysis,
        dependency_analysis: DependencyAnalysis,
        optimization_report: OptimizationReport,
    ) -> list[RankedRecommendation]:
        """Merge recommendations from all sources, highest priority first.

        Input order is pattern requirements, dependency risks, then
        optimization recommendations; equal priorities keep that order.
        """
        merged: list[RankedRecommendation] = []

        for pattern in analysis.detected_patterns:
            for requirement in pattern.migration_requirements:
                merged.append(
                    RankedRecommendation(
                        source=RecommendationSource.PATTERN,
                        title=f"{pattern.type.value}: {requirement.description}",
                        description=requirement.impact,
                        priority=requirement.severity,
                        action_items=[requirement.solution],
                    )
                )

        for risk in dependency_analysis.risks:
            merged.append(
                RankedRecommendation(
                    source=RecommendationSource.DEPENDENCY,
                    title=f"{risk.dependency}: {risk.risk}" if risk.dependency else risk.risk,
                    description=risk.risk,
                    priority=risk.impact,
                    action_items=[risk.mitigation] if risk.mitigation else [],
                )
            )

        for recommendation in optimization_report.recommendations:
            merged.append(
                RankedRecommendation(
                    source=RecommendationSource.OPTIMIZATION,
                    title=recommendation.title,
                    description=recommendation.description,
                    priority=recommendation.priority,
                    action_items=list(recommendation.action_items),
                )
            )

        return sorted(merged, key=lambda r: r.priority.rank, reverse=True)

    def create_migration_plan(
        self,
        analysis: SourceAnalysis,
        dependency_analysis: DependencyAnalysis,
        optimization_report: OptimizationReport,
        options: MigrationOptions,
    ) -> MigrationPlan:
        """Strategy phases, then dependency phases, then optimization phases."""
        plan_config = self.config.plan
        phases: list[PlanPhase] = []

        for phase in analysis.migration_strategy.phases:
            phases.append(
                PlanPhase(
                    phase=len(phases) + 1,
                    title=phase.name,
                    description=phase.description,
                    tasks=[f"Convert {name} pattern" for name in phase.patterns]
                    or list(phase.deliverables),
                    dependencies=list(phase.dependencies),
                    estimated_time=phase.estimated_duration,
                )
            )

        for dep_phase in dependency_analysis.phases:
            phases.append(
                PlanPhase(
                    phase=len(phases) + 1,
                    title=dep_phase.name,
                    description=f"Dependency migration: {dep_phase.name}",
                    tasks=list(dep_phase.actions),
                    dependencies=list(dep_phase.dependencies),
                    estimated_time=plan_config.phase_estimate,
                )
            )

        optimizations = (
            sorted(optimization_report.recommendations, key=lambda r: r.priority.rank, reverse=True)
            if options.include_optimizations
            else []
        )
        for recommendation in optimizations:
            phases.append(
                PlanPhase(
                    phase=len(phases) + 1,
                    title=f"Apply {recommendation.title}",
                    description=recommendation.description,
                    tasks=list(recommendation.action_items),
                    estimated_time=plan_config.phase_estimate,
                )
            )

        base_hours = analysis.estimated_effort.total_hours or plan_config.default_plan_hours
        total_hours = math.ceil(base_hours + plan_config.optimization_hours * len(optimizations))

        return MigrationPlan(
            phases=phases,
            total_steps=len(phases),
            estimated_time=f"{total_hours}-{math.ceil(total_hours * 1.5)} hours",
            dependencies=list(dict.fromkeys(analysis.migration_strategy.dependencies)),
            validation_checkpoints=[f"Validate {p.title}" for p in phases],
        )

    # -------------------------------------------------------------------------
    # Code conversion
    # -------------------------------------------------------------------------

    def convert_source(
        self,
        source_code: str,
        analysis: SourceAnalysis,
        file_name: str = "input.ts",
    ) -> ConvertedFile:
        """Convert every detected pattern, then apply dialect method renames."""
        text = source_code
        changes: list[CodeChange] = []
        conversions: list[ConversionResult] = []

        for pattern in analysis.detected_patterns:
            result = self.detector.convert_pattern(pattern, text, analysis.source_dialect)
            conversions.append(result)
            fallback_line = pattern.occurrences[0].line + 1
            for step in result.step_outcomes:
                if not step.applied:
                    continue
                index = result.original_code.find(step.target)
                line = result.original_code.count("\n", 0, index) + 1 if index >= 0 else fallback_line
                changes.append(
                    CodeChange(
                        type=ChangeType.PATTERN_CONVERSION,
                        line=line,
                        original=step.target,
                        converted=step.new_code,
                        reasoning=(
                            f"{result.strategy.name}: {step.explanation} "
                            f"({step.replacements} occurrence(s))"
                        ),
                    )
                )
            text = result.converted_code

        text, renames = self.apply_method_renames(text, analysis.source_dialect)
        changes.extend(renames)

        skipped_steps = sum(c.skipped_steps for c in conversions)
        return ConvertedFile(
            original_file=file_name,
            converted_code=text,
            changes=changes,
            confidence=self.conversion_confidence(changes, analysis, skipped_steps),
            warnings=self.file_warnings(changes, analysis, conversions),
            skipped_steps=skipped_steps,
            conversions=conversions,
        )

    def apply_method_renames(
        self,
        source_code: str,
        dialect: SourceDialect,
    ) -> tuple[str, list[CodeChange]]:
        """Apply literal per-line method renames for the dialect."""
        lines = source_code.split("\n")
        changes: list[CodeChange] = []
        for rename in DIALECT_RENAMES.get(dialect, ()):
            for index, line in enumerate(lines):
                if rename.pattern not in line:
                    continue
                converted = line.replace(rename.pattern, rename.replacement)
                changes.append(
                    CodeChange(
                        type=ChangeType.METHOD_RENAME,
                        line=index + 1,
                        original=line,
                        converted=converted,
                        reasoning=rename.reason,
                    )
                )
                lines[index] = converted
        return "\n".join(lines), changes

    def conversion_confidence(
        self,
        changes: list[CodeChange],
        analysis: SourceAnalysis,
        skipped_steps: int = 0,
    ) -> float:
        """Heuristic confidence in a converted file (0.0 to 1.0)."""
        if not changes and not skipped_steps:
            return 1.0

        cfg = self.config.conversion
        complex_patterns = sum(
            1 for p in analysis.detected_patterns if p.complexity == PatternComplexity.COMPLEX
        )
        renames = sum(1 for c in changes if c.type == ChangeType.METHOD_RENAME)
        score = (
            cfg.base_confidence
            - cfg.complex_pattern_penalty * complex_patterns
            + cfg.rename_bonus * renames
            - cfg.skipped_step_penalty * skipped_steps
        )
        return max(cfg.min_confidence, min(cfg.max_confidence, score)) / 100

    def file_warnings(
        self,
        changes: list[CodeChange],
        analysis: SourceAnalysis,
        conversions: list[ConversionResult],
    ) -> list[str]:
        """File-level warnings plus the deduplicated per-pattern warning messages."""
        warnings: list[str] = []
        detected = {p.type for p in analysis.detected_patterns}

        if PatternType.PIPELINE in detected:
            warnings.append("Pipeline operations detected - requires manual review")
        if PatternType.STREAMING in detected:
            warnings.append("Stream operations detected - parameter format changes required")
        if any(c.type == ChangeType.PATTERN_CONVERSION for c in changes):
            warnings.append("Complex pattern conversions applied - thorough testing recommended")

        for conversion in conversions:
            warnings.extend(w.message for w in conversion.warnings)
        return list(dict.fromkeys(warnings))

    # -------------------------------------------------------------------------
    # Guide and estimate
    # -------------------------------------------------------------------------

    def generate_migration_guide(
        self,
        analysis: SourceAnalysis,
        dependency_analysis: DependencyAnalysis,
        optimization_report: OptimizationReport,
        options: MigrationOptions,
    ) -> MigrationGuide:
        """Canned four-phase guide, plus an optimization phase when requested."""
        target_package = self.config.plan.target_package
        dependency_tasks = [
            p.name for p in dependency_analysis.phases if "dependency" in p.name.lower()
        ] or [f"Replace {analysis.source_dialect.value} with {target_package}"]

        phases = [
            PlanPhase(
                phase=1,
                title="Preparation and Analysis",
                description="Analyze current codebase and prepare for migration",
                tasks=[
                    "Backup current codebase",
                    "Document current Redis usage patterns",
                    "Set up development environment",
                    "Create migration branch",
                ],
                estimated_time="2-4 hours",
            ),
            PlanPhase(
                phase=2,
                title="Dependency Migration",
                description="Update package dependencies and configuration",
                tasks=dependency_tasks,
                dependencies=["Phase 1"],
                estimated_time="1-2 hours",
            ),
            PlanPhase(
                phase=3,
                title="Code Conversion",
                description="Convert Redis operations to GLIDE API",
                tasks=[
                    "Update import statements",
                    "Convert method calls",
                    "Update parameter formats",
                    "Handle breaking changes",
                ],
                dependencies=["Phase 2"],
                estimated_time="4-8 hours",
            ),
            PlanPhase(
                phase=4,
                title="Testing and Validation",
                description="Ensure converted code works correctly",
                tasks=[
                    "Run existing tests",
                    "Add migration-specific tests",
                    "Validate Redis operations",
                    "Performance testing",
                ],
                dependencies=["Phase 3"],
                estimated_time="2-6 hours",
            ),
        ]

        if options.include_optimizations:
            phases.append(
                PlanPhase(
                    phase=5,
                    title="Performance Optimization",
                    description="Apply performance improvements",
                    tasks=[r.title for r in optimization_report.recommendations],
                    dependencies=["Phase 4"],
                    estimated_time="2-4 hours",
                )
            )

        return MigrationGuide(
            overview=(
                f"Migration from {analysis.source_dialect.value} to GLIDE with "
                f"{len(analysis.detected_patterns)} patterns detected"
            ),
            phases=phases,
            critical_steps=[
                "Backup codebase before starting",
                "Test each converted component individually",
                "Validate Redis connections and operations",
                "Monitor performance after migration",
            ],
            rollback_plan=[
                "Restore from backup",
                "Revert dependency changes",
                "Switch back to previous Redis client",
                "Validate system functionality",
            ],
            validation_steps=[
                "All tests pass",
                "Redis operations work correctly",
                "Performance meets requirements",
                "No critical warnings or errors",
            ],
        )

    def estimate_migration_time(
        self,
        analysis: SourceAnalysis,
        dependency_analysis: DependencyAnalysis,
        scope: MigrationScope,
    ) -> TimeEstimate:
        """Scope-scaled estimate, doubled for code changes in high-complexity units."""
        base_multiplier = SCOPE_MULTIPLIER[scope]
        complexity_multiplier = (
            2
            if analysis.code_complexity.complexity
            in (ComplexityBucket.HIGH, ComplexityBucket.VERY_HIGH)
            else 1
        )

        pattern_count = len(analysis.detected_patterns)
        analysis_hours = 2 * base_multiplier
        code_changes = pattern_count * 0.5 * complexity_multiplier
        testing = code_changes * 0.5
        validation = analysis_hours * 0.5
        total_hours = math.ceil(analysis_hours + code_changes + testing + validation)

        if total_hours < 8:
            confidence = "high"
        elif total_hours < 20:
            confidence = "medium"
        else:
            confidence = "low"

        return TimeEstimate(
            total_hours=total_hours,
            analysis=analysis_hours,
            code_changes=code_changes,
            testing=testing,
            validation=validation,
            confidence=confidence,
            factors=[
                f"{pattern_count} patterns detected",
                f"{analysis.code_complexity.complexity.value} complexity",
                f"{scope.value} scope",
                f"{len(dependency_analysis.phases)} dependency phases",
            ],
        )
