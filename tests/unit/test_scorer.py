"""Tests for confidence scoring."""

from __future__ import annotations

import pytest

from glide_migrate.config import ScoringConfig
from glide_migrate.engine.catalog import default_catalog
from glide_migrate.engine.models import PatternOccurrence, PatternType
from glide_migrate.engine.scorer import ConfidenceScorer


def _occurrences(*snippets: str) -> list[PatternOccurrence]:
    return [
        PatternOccurrence(start_line=i, end_line=i, line=i, source_code=s)
        for i, s in enumerate(snippets)
    ]


@pytest.fixture
def pipeline_signature():
    return default_catalog().get(PatternType.PIPELINE)


class TestConfidenceScorer:
    """Tests for ConfidenceScorer.score."""

    def test_single_occurrence(self, pipeline_signature) -> None:
        """One sighting without context scores base + one increment."""
        scorer = ConfidenceScorer()
        assert scorer.score(_occurrences("redis.pipeline()"), pipeline_signature) == pytest.approx(0.6)

    def test_occurrence_bonus_is_capped(self, pipeline_signature) -> None:
        """Repetition stops helping after the cap."""
        scorer = ConfidenceScorer()
        many = _occurrences(*["p.exec()"] * 10)
        assert scorer.score(many, pipeline_signature) == pytest.approx(0.8)

    def test_context_bonus_applied_once(self, pipeline_signature) -> None:
        """Keywords are matched case-insensitively and rewarded once."""
        scorer = ConfidenceScorer()
        occurrences = _occurrences(
            "// Batch Execution of writes\nredis.pipeline()",
            "// batch execution again\np.exec()",
        )
        assert scorer.score(occurrences, pipeline_signature) == pytest.approx(0.9)

    def test_clamped_to_one(self, pipeline_signature) -> None:
        """Scores never exceed 1.0 even with aggressive weights."""
        scorer = ConfidenceScorer(ScoringConfig(base_confidence=0.9))
        occurrences = _occurrences(*["multiple commands"] * 5)
        assert scorer.score(occurrences, pipeline_signature) == 1.0

    def test_clamped_to_zero(self, pipeline_signature) -> None:
        """Negative weights cannot push the score below zero."""
        scorer = ConfidenceScorer(ScoringConfig(base_confidence=-1.0))
        assert scorer.score(_occurrences("p.exec()"), pipeline_signature) == 0.0

    def test_has_required_context(self, pipeline_signature) -> None:
        """Context detection looks at every snippet."""
        assert ConfidenceScorer.has_required_context(
            _occurrences("nothing", "MULTIPLE COMMANDS"), pipeline_signature
        )
        assert not ConfidenceScorer.has_required_context(
            _occurrences("nothing"), pipeline_signature
        )
