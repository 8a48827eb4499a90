"""Strategy selection and literal text transformation.

Conversion steps are applied as literal, whole-text substring replacements.
Every occurrence of a step's target in the file is rewritten, including
occurrences outside the window where the pattern was detected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from glide_migrate.engine.models import (
    ConversionStep,
    ConversionStrategy,
    DetectedPattern,
    SourceDialect,
    StepAction,
    StepOutcome,
)

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY = ConversionStrategy(
    name="default-conversion",
    description="Default conversion strategy",
    applicability=(),
    steps=(),
    risks=(),
    validation=(),
)


def select_strategy(
    pattern: DetectedPattern,
    dialect: SourceDialect | None = None,
) -> ConversionStrategy:
    """Pick the conversion strategy for a pattern.

    The first candidate declaring ``dialect`` wins. Without a match, the first
    candidate is used; a pattern with no candidates gets an empty strategy.
    """
    if dialect is not None:
        for strategy in pattern.conversion_strategies:
            if strategy.applies_to(dialect):
                return strategy
    if pattern.conversion_strategies:
        return pattern.conversion_strategies[0]
    return DEFAULT_STRATEGY


@dataclass
class TransformOutcome:
    """Converted text and a record of every step attempted."""

    text: str
    steps: list[StepOutcome] = field(default_factory=list)

    @property
    def applied_steps(self) -> int:
        return sum(1 for s in self.steps if s.applied)

    @property
    def skipped_steps(self) -> int:
        return sum(1 for s in self.steps if s.skipped)


def apply_step(text: str, step: ConversionStep) -> tuple[str, int]:
    """Apply one step to ``text``.

    Returns:
        The new text and the number of literal matches rewritten. A missing
        target leaves the text unchanged and reports zero matches.
    """
    if not step.target:
        return text, 0
    count = text.count(step.target)
    if count == 0:
        return text, 0

    match step.action:
        case StepAction.REMOVE:
            replacement = ""
        case StepAction.ADD:
            replacement = step.target + step.new_code
        case _:
            replacement = step.new_code
    return text.replace(step.target, replacement), count


class TextTransformer:
    """Applies a strategy's ordered steps to source text."""

    def apply(self, source_code: str, strategy: ConversionStrategy) -> TransformOutcome:
        """Run every step in ascending order; later steps see earlier output."""
        outcome = TransformOutcome(text=source_code)
        for step in strategy.ordered_steps():
            text, matches = apply_step(outcome.text, step)
            # A rewrite that leaves the text as it was is not counted as applied
            replacements = matches if text != outcome.text else 0
            if not matches:
                logger.debug("Step %d of %s skipped: %r not found", step.order, strategy.name, step.target)
            elif not replacements:
                logger.debug("Step %d of %s left the text unchanged", step.order, strategy.name)
            outcome.text = text
            outcome.steps.append(
                StepOutcome(
                    order=step.order,
                    action=step.action,
                    target=step.target,
                    new_code=step.new_code,
                    explanation=step.explanation,
                    replacements=replacements,
                    matches=matches,
                )
            )
        return outcome
