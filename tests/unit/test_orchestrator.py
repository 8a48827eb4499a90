"""Tests for the migration orchestrator."""

from __future__ import annotations

import json

import pytest

from glide_migrate.engine.collaborators import (
    DependencyAnalysis,
    DependencyPhase,
    DependencyRisk,
    OptimizationRecommendation,
    OptimizationReport,
)
from glide_migrate.engine.detector import PatternDetector
from glide_migrate.engine.models import (
    PatternType,
    Severity,
    SourceAnalysis,
    SourceDialect,
)
from glide_migrate.engine.orchestrator import (
    ChangeType,
    MigrationOptions,
    MigrationOrchestrator,
    MigrationRequest,
    MigrationScope,
    RecommendationSource,
    SourceUnit,
)
from glide_migrate.errors import InputError, UnsupportedDialectError


@pytest.fixture
def orchestrator() -> MigrationOrchestrator:
    return MigrationOrchestrator()


@pytest.fixture
def dependency_analysis() -> DependencyAnalysis:
    return DependencyAnalysis(
        phases=[
            DependencyPhase(name="Dependency swap", order=1, actions=["npm uninstall ioredis"]),
            DependencyPhase(name="Config update", order=2, actions=["Update env vars"]),
        ],
        risks=[
            DependencyRisk(
                dependency="ioredis",
                risk="Transitive consumers pin ioredis",
                impact=Severity.HIGH,
                mitigation="Audit lockfile",
            )
        ],
    )


@pytest.fixture
def optimization_report() -> OptimizationReport:
    return OptimizationReport(
        recommendations=[
            OptimizationRecommendation(title="Enable read from replica", priority=Severity.LOW),
            OptimizationRecommendation(
                title="Batch writes",
                priority=Severity.MEDIUM,
                action_items=["Group writes into a Transaction"],
            ),
        ]
    )


class TestMigrationRequest:
    """Tests for request validation."""

    def test_dialect_parsed(self) -> None:
        """String dialects are resolved on construction."""
        request = MigrationRequest(source_dialect="ioredis")
        assert request.source_dialect == SourceDialect.IOREDIS
        assert request.scope == MigrationScope.FILE
        assert request.options.include_optimizations

    def test_unknown_dialect(self) -> None:
        """Unknown dialects fail at construction."""
        with pytest.raises(UnsupportedDialectError):
            MigrationRequest(source_dialect="predis")

    def test_source_unit_requires_dialect(self) -> None:
        """Units without a dialect are rejected."""
        with pytest.raises(InputError):
            SourceUnit("a.ts", "code", "")


class TestRankRecommendations:
    """Tests for recommendation merging."""

    def test_stable_priority_order(
        self,
        orchestrator: MigrationOrchestrator,
        make_pattern,
        dependency_analysis: DependencyAnalysis,
        optimization_report: OptimizationReport,
    ) -> None:
        """Higher priority first; equal priorities keep source order."""
        analysis = SourceAnalysis.empty(SourceDialect.IOREDIS)
        analysis.detected_patterns = [make_pattern(PatternType.PIPELINE)]

        ranked = orchestrator.rank_recommendations(
            analysis, dependency_analysis, optimization_report
        )

        assert [(r.source, r.priority) for r in ranked] == [
            (RecommendationSource.DEPENDENCY, Severity.HIGH),
            (RecommendationSource.PATTERN, Severity.MEDIUM),
            (RecommendationSource.OPTIMIZATION, Severity.MEDIUM),
            (RecommendationSource.OPTIMIZATION, Severity.LOW),
        ]
        assert ranked[0].title == "ioredis: Transitive consumers pin ioredis"
        assert ranked[0].action_items == ["Audit lockfile"]

    def test_empty_inputs(self, orchestrator: MigrationOrchestrator) -> None:
        """No inputs, no recommendations."""
        analysis = SourceAnalysis.empty(SourceDialect.IOREDIS)
        assert orchestrator.rank_recommendations(
            analysis, DependencyAnalysis(), OptimizationReport()
        ) == []


class TestMigrationPlan:
    """Tests for plan construction."""

    def test_phase_order_and_numbering(
        self,
        orchestrator: MigrationOrchestrator,
        dependency_analysis: DependencyAnalysis,
        optimization_report: OptimizationReport,
    ) -> None:
        """Dependency phases come before optimization phases."""
        analysis = SourceAnalysis.empty(SourceDialect.IOREDIS)
        plan = orchestrator.create_migration_plan(
            analysis, dependency_analysis, optimization_report, MigrationOptions()
        )

        assert [p.phase for p in plan.phases] == [1, 2, 3, 4]
        assert [p.title for p in plan.phases] == [
            "Dependency swap",
            "Config update",
            "Apply Batch writes",
            "Apply Enable read from replica",
        ]
        assert plan.total_steps == 4
        assert plan.validation_checkpoints[0] == "Validate Dependency swap"
        assert len(plan.validation_checkpoints) == 4
        assert plan.estimated_time == "12-18 hours"

    def test_without_optimizations(
        self,
        orchestrator: MigrationOrchestrator,
        dependency_analysis: DependencyAnalysis,
        optimization_report: OptimizationReport,
    ) -> None:
        """Optimization phases can be left out."""
        analysis = SourceAnalysis.empty(SourceDialect.IOREDIS)
        plan = orchestrator.create_migration_plan(
            analysis,
            dependency_analysis,
            optimization_report,
            MigrationOptions(include_optimizations=False),
        )
        assert plan.total_steps == 2
        assert plan.estimated_time == "8-12 hours"

    def test_strategy_phases_first(self, orchestrator: MigrationOrchestrator) -> None:
        """Incremental strategy phases lead the plan."""
        source = "\n".join(
            ["const redis = new Redis();", "const p = redis.pipeline();", "await p.exec();"]
            + [f"const x{i} = {i};" for i in range(200)]
        )
        analysis = PatternDetector().analyze_source(source, "ioredis")
        assert analysis.migration_strategy.phases
        assert analysis.migration_strategy.phases[1].patterns == ["pipeline", "transaction"]

        plan = orchestrator.create_migration_plan(
            analysis, DependencyAnalysis(), OptimizationReport(), MigrationOptions()
        )
        assert plan.phases[0].title == "Phase 1"
        assert plan.dependencies == ["@valkey/valkey-glide"]


class TestConvertSource:
    """Tests for whole-file conversion."""

    def test_node_redis_renames(
        self, orchestrator: MigrationOrchestrator, node_redis_source: str
    ) -> None:
        """camelCase node-redis commands are lowercased and recorded."""
        analysis = orchestrator.detector.analyze_source(node_redis_source, "node-redis")
        converted = orchestrator.convert_source(node_redis_source, analysis, "cache.ts")

        assert ".hset('user:1'" in converted.converted_code
        assert ".hget('user:1'" in converted.converted_code
        renames = [c for c in converted.changes if c.type == ChangeType.METHOD_RENAME]
        assert [c.line for c in renames] == [3, 4]
        assert converted.skipped_steps == 1
        assert converted.confidence == pytest.approx(0.89)
        assert converted.warnings == ["Configuration option mapping"]

    def test_ioredis_patterns_chained(
        self, orchestrator: MigrationOrchestrator, ioredis_source: str
    ) -> None:
        """Each pattern's strategy runs on the previous output."""
        analysis = orchestrator.detector.analyze_source(ioredis_source, "ioredis")
        converted = orchestrator.convert_source(ioredis_source, analysis)

        assert "client.multi()" in converted.converted_code
        assert "await GlideClient.createClient()" in converted.converted_code
        conversions = [c for c in converted.changes if c.type == ChangeType.PATTERN_CONVERSION]
        assert [(c.line, c.original) for c in conversions] == [
            (5, "redis.pipeline()"),
            (2, "new Redis("),
        ]
        assert converted.confidence == pytest.approx(0.85)
        assert "Pipeline operations detected - requires manual review" in converted.warnings

    def test_confidence_bounds(self, orchestrator: MigrationOrchestrator) -> None:
        """Confidence stays within [0.5, 1.0]."""
        source = "\n".join(
            [
                "const c = new Redis.Cluster([]);",
                "await redis.xadd('s', '*', 'a', 1);",
                "await redis.xread('STREAMS', 's', 0);",
            ]
        )
        analysis = orchestrator.detector.analyze_source(source, "ioredis")
        converted = orchestrator.convert_source(source, analysis)
        assert 0.5 <= converted.confidence <= 1.0

    def test_nothing_to_change(self, orchestrator: MigrationOrchestrator) -> None:
        """Files without patterns convert to themselves with full confidence."""
        source = "const x = 1;"
        analysis = orchestrator.detector.analyze_source(source, "ioredis")
        converted = orchestrator.convert_source(source, analysis)
        assert converted.converted_code == source
        assert converted.changes == []
        assert converted.confidence == 1.0


class TestGuideAndEstimate:
    """Tests for the migration guide and time estimate."""

    def test_guide_phases(self, orchestrator: MigrationOrchestrator) -> None:
        """Four canned phases plus an optional optimization phase."""
        analysis = SourceAnalysis.empty(SourceDialect.NODE_REDIS)
        report = OptimizationReport([OptimizationRecommendation(title="Use pipelines")])

        guide = orchestrator.generate_migration_guide(
            analysis, DependencyAnalysis(), report, MigrationOptions()
        )
        assert len(guide.phases) == 5
        assert guide.phases[-1].tasks == ["Use pipelines"]
        assert guide.overview == "Migration from node-redis to GLIDE with 0 patterns detected"
        assert guide.phases[1].tasks == ["Replace node-redis with @valkey/valkey-glide"]

        guide = orchestrator.generate_migration_guide(
            analysis, DependencyAnalysis(), report, MigrationOptions(include_optimizations=False)
        )
        assert len(guide.phases) == 4

    def test_guide_uses_dependency_phases(
        self, orchestrator: MigrationOrchestrator, dependency_analysis: DependencyAnalysis
    ) -> None:
        """Dependency-named phases become the dependency tasks."""
        analysis = SourceAnalysis.empty(SourceDialect.IOREDIS)
        guide = orchestrator.generate_migration_guide(
            analysis, dependency_analysis, OptimizationReport(), MigrationOptions()
        )
        assert guide.phases[1].tasks == ["Dependency swap"]

    @pytest.mark.parametrize(
        ("scope", "hours", "confidence"),
        [
            (MigrationScope.FILE, 3, "high"),
            (MigrationScope.MODULE, 9, "medium"),
            (MigrationScope.PROJECT, 30, "low"),
        ],
    )
    def test_time_estimate_by_scope(
        self,
        orchestrator: MigrationOrchestrator,
        scope: MigrationScope,
        hours: int,
        confidence: str,
    ) -> None:
        """Scope multiplies the analysis share of the estimate."""
        analysis = SourceAnalysis.empty(SourceDialect.IOREDIS)
        estimate = orchestrator.estimate_migration_time(analysis, DependencyAnalysis(), scope)
        assert estimate.total_hours == hours
        assert estimate.confidence == confidence
        assert f"{scope.value} scope" in estimate.factors


class TestPerformMigration:
    """Tests for the end-to-end synchronous entry point."""

    def test_blank_source(self, orchestrator: MigrationOrchestrator) -> None:
        """A request without source still yields a complete result."""
        result = orchestrator.perform_migration(MigrationRequest(source_dialect="ioredis"))

        assert result.source_analysis.detected_patterns == []
        assert result.source_analysis.estimated_effort.total_hours == 0
        assert result.converted_files == []
        assert result.migration_plan.estimated_time == "8-12 hours"

    def test_whitespace_only_source(self, orchestrator: MigrationOrchestrator) -> None:
        """Whitespace-only source is analyzed and converted, not treated as missing."""
        request = MigrationRequest(source_dialect="ioredis", source_code="\n\n\n")
        result = orchestrator.perform_migration(request)

        assert result.source_analysis.code_complexity.total_lines == 4
        assert result.source_analysis.estimated_effort.total_hours == 8.0
        (converted,) = result.converted_files
        assert converted.converted_code == "\n\n\n"
        assert converted.changes == []
        assert converted.confidence == 1.0

    def test_full_result_serializes(
        self,
        orchestrator: MigrationOrchestrator,
        ioredis_source: str,
        dependency_analysis: DependencyAnalysis,
        optimization_report: OptimizationReport,
    ) -> None:
        """The comprehensive result is plain JSON."""
        request = MigrationRequest(
            source_dialect="ioredis",
            source_code=ioredis_source,
            file_name="users.ts",
            scope=MigrationScope.MODULE,
        )
        result = orchestrator.perform_migration(request, dependency_analysis, optimization_report)
        payload = json.loads(json.dumps(result.to_dict()))

        assert payload["source_analysis"]["source_dialect"] == "ioredis"
        assert payload["converted_files"][0]["original_file"] == "users.ts"
        assert payload["recommendations"][0]["priority"] == "high"
        assert payload["migration_plan"]["total_steps"] == 4
        assert payload["generated_at"].endswith("+00:00")
