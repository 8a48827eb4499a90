"""Tests for conversion warnings, validation tests and migration notes."""

from __future__ import annotations

from glide_migrate.engine.detector import PatternDetector
from glide_migrate.engine.models import PatternType, StepAction, StepOutcome, WarningType
from glide_migrate.engine.transformer import select_strategy
from glide_migrate.engine.warnings import MANUAL_REVIEW_MESSAGE, WarningGenerator


class TestGenerateWarnings:
    """Tests for WarningGenerator.generate_warnings."""

    def test_complex_pattern_needs_manual_review(self, make_pattern) -> None:
        """Complex patterns always get a manual-review warning first."""
        pattern = make_pattern(PatternType.CLUSTERING, first_line=4)
        warnings = WarningGenerator().generate_warnings(pattern, select_strategy(pattern))

        assert warnings[0].type == WarningType.MANUAL_REVIEW
        assert warnings[0].message == MANUAL_REVIEW_MESSAGE
        assert "every literal match" in warnings[0].message
        assert warnings[0].line == 5

    def test_behavior_change_per_risk(self, make_pattern) -> None:
        """Each strategy risk becomes a behavior-change warning."""
        pattern = make_pattern(PatternType.CLUSTERING)
        strategy = select_strategy(pattern)
        warnings = WarningGenerator().generate_warnings(pattern, strategy)

        behavior = [w for w in warnings if w.type == WarningType.BEHAVIOR_CHANGE]
        assert [w.message for w in behavior] == list(strategy.risks)

    def test_simple_pattern_has_no_manual_review(self, make_pattern) -> None:
        """Non-complex patterns only carry risk warnings."""
        pattern = make_pattern(PatternType.CONNECTION)
        warnings = WarningGenerator().generate_warnings(pattern, select_strategy(pattern))
        assert all(w.type != WarningType.MANUAL_REVIEW for w in warnings)
        assert len(warnings) == 1

    def test_to_dict_location(self, make_pattern) -> None:
        """Warnings serialize their location as a line/column pair."""
        pattern = make_pattern(PatternType.STREAMING, first_line=9)
        warning = WarningGenerator().generate_warnings(pattern, select_strategy(pattern))[0]
        assert warning.to_dict()["location"] == {"line": 10, "column": 1}


class TestValidationTests:
    """Tests for WarningGenerator.generate_validation_tests."""

    def test_known_types(self, make_pattern) -> None:
        """Pipeline, transaction and clustering have canned tests."""
        generator = WarningGenerator()
        for pattern_type in (PatternType.PIPELINE, PatternType.TRANSACTION, PatternType.CLUSTERING):
            assert len(generator.generate_validation_tests(make_pattern(pattern_type))) == 3

    def test_other_types_empty(self, make_pattern) -> None:
        """Other pattern types get no suggestions."""
        generator = WarningGenerator()
        assert generator.generate_validation_tests(make_pattern(PatternType.PUBSUB)) == []


class TestMigrationNotes:
    """Tests for WarningGenerator.generate_migration_notes."""

    def test_notes(self, make_pattern) -> None:
        """Notes summarize pattern, strategy, confidence and steps."""
        pattern = make_pattern(PatternType.PIPELINE, confidence=0.7)
        strategy = select_strategy(pattern)
        steps = [
            StepOutcome(1, StepAction.REPLACE, "a", "b", "x", replacements=2),
            StepOutcome(2, StepAction.MODIFY, "c", "c", "y", replacements=0),
        ]
        notes = WarningGenerator().generate_migration_notes(pattern, strategy, steps)

        assert notes[0] == "Pattern: pipeline (moderate complexity)"
        assert notes[1] == "Strategy: ioredis-pipeline-conversion"
        assert notes[2] == "Confidence: 70.0%"
        assert "api-change: Pipeline API syntax differs between libraries" in notes
        assert notes[-1] == "Steps applied: 1/2"


class TestWarningKinds:
    """Only manual-review and behavior-change warnings are produced."""

    def test_control_flow_context_adds_no_warnings(self) -> None:
        """Error handling and loops around a match do not add warning kinds."""
        source = (
            "try {\n"
            "  for (const user of users) {\n"
            "    const cluster = new Redis.Cluster(nodes);\n"
            "  }\n"
            "} catch (e) {}\n"
        )
        detector = PatternDetector()
        pattern = detector.analyze_source(source, "ioredis").get_pattern(PatternType.CLUSTERING)
        assert pattern is not None
        assert pattern.occurrences[0].context.error_handling
        assert pattern.occurrences[0].context.loop_context

        result = detector.convert_pattern(pattern, source, "ioredis")

        types = [w.type for w in result.warnings]
        assert set(types) <= {WarningType.MANUAL_REVIEW, WarningType.BEHAVIOR_CHANGE}
        assert types.count(WarningType.BEHAVIOR_CHANGE) == len(result.strategy.risks)
        assert types.count(WarningType.MANUAL_REVIEW) <= 1
