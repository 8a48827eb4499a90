"""Confidence scoring for detected patterns."""

from __future__ import annotations

from glide_migrate.config import ScoringConfig
from glide_migrate.engine.models import PatternOccurrence, PatternSignature


class ConfidenceScorer:
    """Turns occurrence counts and context corroboration into a [0, 1] confidence.

    Repetition is rewarded up to a cap; corroborating context keywords are
    rewarded once, not per occurrence. The scorer never drops a pattern;
    thresholding is left to the caller.
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or ScoringConfig()

    def score(
        self,
        occurrences: list[PatternOccurrence],
        signature: PatternSignature,
    ) -> float:
        """Compute the confidence for one pattern's occurrences."""
        cfg = self.config
        confidence = cfg.base_confidence
        confidence += min(len(occurrences) * cfg.occurrence_weight, cfg.occurrence_cap)
        if self.has_required_context(occurrences, signature):
            confidence += cfg.context_bonus
        return max(0.0, min(confidence, 1.0))

    @staticmethod
    def has_required_context(
        occurrences: list[PatternOccurrence],
        signature: PatternSignature,
    ) -> bool:
        """Whether any snippet mentions any required keyword (case-insensitive)."""
        keywords = [k.lower() for k in signature.context_requirements]
        return any(
            keyword in occurrence.source_code.lower()
            for keyword in keywords
            for occurrence in occurrences
        )
