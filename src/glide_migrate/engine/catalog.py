"""Signature catalog - the read-only registry of recognizable patterns.

Each entry maps a pattern type to per-dialect regex signatures, corroborating
context keywords, a complexity rating, known migration requirements and
candidate conversion strategies.

Usage:
    from glide_migrate.engine.catalog import default_catalog

    catalog = default_catalog()
    signature = catalog.get("pipeline")
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from functools import lru_cache
from types import MappingProxyType

from glide_migrate.engine.models import (
    ConversionStep,
    ConversionStrategy,
    MigrationRequirement,
    PatternComplexity,
    PatternSignature,
    PatternType,
    RequirementType,
    Severity,
    SourceDialect,
    StepAction,
)
from glide_migrate.errors import CatalogError

IOREDIS = SourceDialect.IOREDIS
NODE_REDIS = SourceDialect.NODE_REDIS
BOTH = (IOREDIS, NODE_REDIS)


class SignatureCatalog:
    """Immutable registry of pattern signatures, keyed by pattern type.

    Entries keep their registration order, which is also the order patterns
    are scanned and reported in when confidences tie.
    """

    def __init__(self, signatures: Iterable[PatternSignature]) -> None:
        """Build the catalog.

        Args:
            signatures: Catalog entries in registration order.

        Raises:
            CatalogError: On a duplicate pattern type or a strategy whose
                step orders are not strictly increasing.
        """
        entries: dict[PatternType, PatternSignature] = {}
        for signature in signatures:
            if signature.pattern_type in entries:
                raise CatalogError(
                    f"Duplicate pattern type registered: {signature.pattern_type.value}",
                    pattern_type=signature.pattern_type.value,
                )
            for strategy in signature.conversion_strategies:
                _check_step_order(strategy)
            entries[signature.pattern_type] = signature
        self._entries = MappingProxyType(entries)

    def get(self, pattern_type: PatternType | str) -> PatternSignature | None:
        """Look up a signature by type or type name.

        Returns:
            The signature, or None for unknown names.
        """
        if isinstance(pattern_type, str):
            try:
                pattern_type = PatternType(pattern_type.strip().lower())
            except ValueError:
                return None
        return self._entries.get(pattern_type)

    def all(self) -> list[PatternSignature]:
        """All signatures in registration order."""
        return list(self._entries.values())

    def find_strategy(self, name: str) -> ConversionStrategy | None:
        """Find a conversion strategy by name across all entries."""
        for signature in self._entries.values():
            for strategy in signature.conversion_strategies:
                if strategy.name == name:
                    return strategy
        return None

    def __contains__(self, pattern_type: object) -> bool:
        if isinstance(pattern_type, (PatternType, str)):
            return self.get(pattern_type) is not None
        return False

    def __iter__(self) -> Iterator[PatternSignature]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


def _check_step_order(strategy: ConversionStrategy) -> None:
    orders = [step.order for step in strategy.steps]
    if any(b <= a for a, b in zip(orders, orders[1:])):
        raise CatalogError(
            f"Strategy {strategy.name!r} has non-increasing step orders: {orders}",
            strategy=strategy.name,
            orders=orders,
        )


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


def _signatures(
    ioredis: tuple[str, ...],
    node_redis: tuple[str, ...],
) -> MappingProxyType[SourceDialect, tuple[re.Pattern[str], ...]]:
    return MappingProxyType({IOREDIS: _compile(*ioredis), NODE_REDIS: _compile(*node_redis)})


def builtin_signatures() -> list[PatternSignature]:
    """The built-in Redis-client pattern definitions."""
    return [
        PatternSignature(
            pattern_type=PatternType.PIPELINE,
            signatures=_signatures(
                ioredis=(r"\.pipeline\(\)", r"\.multi\(\)", r"\.exec\(\)"),
                node_redis=(r"\.multi\(\)", r"\.exec\(\)"),
            ),
            context_requirements=("multiple commands", "batch execution"),
            complexity=PatternComplexity.MODERATE,
            migration_requirements=(
                MigrationRequirement(
                    type=RequirementType.API_CHANGE,
                    severity=Severity.MEDIUM,
                    description="Pipeline API syntax differs between libraries",
                    impact="Method calls and result handling need updates",
                    solution="Use GLIDE pipeline API with transaction semantics",
                ),
            ),
            conversion_strategies=(
                ConversionStrategy(
                    name="ioredis-pipeline-conversion",
                    description="Convert ioredis pipeline to GLIDE transaction",
                    applicability=(IOREDIS,),
                    steps=(
                        ConversionStep(
                            order=1,
                            action=StepAction.REPLACE,
                            target="redis.pipeline()",
                            new_code="client.multi()",
                            explanation="Replace pipeline creation with multi",
                        ),
                        ConversionStep(
                            order=2,
                            action=StepAction.MODIFY,
                            target=".exec()",
                            new_code=".exec()",
                            explanation="Update exec() call syntax",
                        ),
                    ),
                    risks=("Result array structure may differ",),
                    validation=("Test result parsing", "Verify error handling"),
                ),
                ConversionStrategy(
                    name="node-redis-multi-conversion",
                    description="Convert node-redis multi() batches to a GLIDE transaction",
                    applicability=(NODE_REDIS,),
                    steps=(
                        ConversionStep(
                            order=1,
                            action=StepAction.REPLACE,
                            target="client.multi()",
                            new_code="new Transaction()",
                            explanation="Build a GLIDE Transaction instead of a client-bound multi",
                        ),
                        ConversionStep(
                            order=2,
                            action=StepAction.MODIFY,
                            target=".exec()",
                            new_code=".exec()",
                            explanation="Execute the batch with client.exec(transaction)",
                        ),
                    ),
                    risks=("Result array structure may differ",),
                    validation=("Test result parsing", "Verify error handling"),
                ),
            ),
        ),
        PatternSignature(
            pattern_type=PatternType.TRANSACTION,
            signatures=_signatures(
                ioredis=(r"\.multi\(\)", r"\.exec\(\)", r"\.discard\(\)"),
                node_redis=(r"\.multi\(\)", r"\.exec\(\)", r"\.discard\(\)"),
            ),
            context_requirements=("atomic operations", "ACID semantics"),
            complexity=PatternComplexity.MODERATE,
            migration_requirements=(
                MigrationRequirement(
                    type=RequirementType.BEHAVIORAL_CHANGE,
                    severity=Severity.MEDIUM,
                    description="Transaction result handling may differ",
                    impact="Result array structure and error handling",
                    solution="Update result processing logic",
                ),
            ),
            conversion_strategies=(
                ConversionStrategy(
                    name="transaction-conversion",
                    description="Convert transaction blocks to GLIDE format",
                    applicability=BOTH,
                    steps=(
                        ConversionStep(
                            order=1,
                            action=StepAction.REPLACE,
                            target="redis.multi()",
                            new_code="client.multi()",
                            explanation="Update multi() call",
                        ),
                    ),
                    risks=("Error handling differences",),
                    validation=("Test transaction rollback", "Verify ACID properties"),
                ),
            ),
        ),
        PatternSignature(
            pattern_type=PatternType.CLUSTERING,
            signatures=_signatures(
                ioredis=(r"new Redis\.Cluster", r"\.nodes\(\)", r"\.slots\(\)"),
                node_redis=(r"createCluster", r"\.masters", r"\.replicas"),
            ),
            context_requirements=("cluster deployment", "sharding"),
            complexity=PatternComplexity.COMPLEX,
            migration_requirements=(
                MigrationRequirement(
                    type=RequirementType.API_CHANGE,
                    severity=Severity.HIGH,
                    description="Cluster initialization and management APIs differ significantly",
                    impact="Complete cluster setup and management code needs rewriting",
                    solution="Use GLIDE cluster client with updated configuration",
                ),
            ),
            conversion_strategies=(
                ConversionStrategy(
                    name="cluster-migration",
                    description="Migrate cluster setup to GLIDE cluster client",
                    applicability=BOTH,
                    steps=(
                        ConversionStep(
                            order=1,
                            action=StepAction.REPLACE,
                            target="new Redis.Cluster",
                            new_code="GlideClusterClient.createClient",
                            explanation="Replace cluster initialization",
                        ),
                        ConversionStep(
                            order=2,
                            action=StepAction.REPLACE,
                            target="createCluster(",
                            new_code="GlideClusterClient.createClient(",
                            explanation="Replace node-redis cluster factory",
                        ),
                    ),
                    risks=("Configuration format changes", "Node discovery differences"),
                    validation=("Test cluster connectivity", "Verify failover behavior"),
                ),
            ),
        ),
        PatternSignature(
            pattern_type=PatternType.PUBSUB,
            signatures=_signatures(
                ioredis=(
                    r"\.subscribe\(",
                    r"\.publish\(",
                    r"\.on\('message'",
                    r"\.psubscribe\(",
                ),
                node_redis=(r"\.subscribe\(", r"\.publish\(", r"\.on\('message'"),
            ),
            context_requirements=("message publishing", "subscription handling"),
            complexity=PatternComplexity.MODERATE,
            migration_requirements=(
                MigrationRequirement(
                    type=RequirementType.API_CHANGE,
                    severity=Severity.MEDIUM,
                    description="Pub/Sub event handling and subscription management",
                    impact="Event listener registration and message handling",
                    solution="Update to GLIDE pub/sub API",
                ),
            ),
            conversion_strategies=(
                ConversionStrategy(
                    name="pubsub-conversion",
                    description="Convert pub/sub implementation to GLIDE",
                    applicability=BOTH,
                    steps=(
                        ConversionStep(
                            order=1,
                            action=StepAction.MODIFY,
                            target=".subscribe(",
                            new_code=".subscribe(",
                            explanation="Update subscription syntax",
                        ),
                    ),
                    risks=("Event handling differences",),
                    validation=("Test message delivery", "Verify subscription management"),
                ),
            ),
        ),
        PatternSignature(
            pattern_type=PatternType.STREAMING,
            signatures=_signatures(
                ioredis=(r"\.xadd\(", r"\.xread\(", r"\.xgroup\(", r"\.xreadgroup\("),
                node_redis=(r"\.xAdd\(", r"\.xRead\(", r"\.xGroup", r"\.xReadGroup\("),
            ),
            context_requirements=("stream processing", "consumer groups"),
            complexity=PatternComplexity.COMPLEX,
            migration_requirements=(
                MigrationRequirement(
                    type=RequirementType.SYNTAX_CHANGE,
                    severity=Severity.HIGH,
                    description="Stream command parameter formats differ significantly",
                    impact="Stream entry format and consumer group management",
                    solution="Rewrite stream operations with GLIDE parameter formats",
                ),
            ),
            conversion_strategies=(
                ConversionStrategy(
                    name="stream-conversion",
                    description="Convert stream operations to GLIDE format",
                    applicability=BOTH,
                    steps=(
                        ConversionStep(
                            order=1,
                            action=StepAction.REPLACE,
                            target="xadd(",
                            new_code="xadd(",
                            explanation="Update stream add syntax",
                        ),
                        ConversionStep(
                            order=2,
                            action=StepAction.REPLACE,
                            target=".xAdd(",
                            new_code=".xadd(",
                            explanation="Lowercase node-redis stream add",
                        ),
                        ConversionStep(
                            order=3,
                            action=StepAction.REPLACE,
                            target=".xReadGroup(",
                            new_code=".xreadgroup(",
                            explanation="Lowercase node-redis consumer-group read",
                        ),
                        ConversionStep(
                            order=4,
                            action=StepAction.REPLACE,
                            target=".xRead(",
                            new_code=".xread(",
                            explanation="Lowercase node-redis stream read",
                        ),
                    ),
                    risks=("Parameter format changes", "Entry structure differences"),
                    validation=("Test stream operations", "Verify consumer group behavior"),
                ),
            ),
        ),
        PatternSignature(
            pattern_type=PatternType.CONNECTION,
            signatures=_signatures(
                ioredis=(
                    r"new Redis\(",
                    r"\.connect\(",
                    r"\.disconnect\(",
                    r"\.on\('connect'",
                ),
                node_redis=(
                    r"createClient\(",
                    r"\.connect\(",
                    r"\.disconnect\(",
                    r"\.on\('connect'",
                ),
            ),
            context_requirements=("connection management", "configuration"),
            complexity=PatternComplexity.SIMPLE,
            migration_requirements=(
                MigrationRequirement(
                    type=RequirementType.API_CHANGE,
                    severity=Severity.LOW,
                    description="Connection initialization and configuration format",
                    impact="Client creation and connection options",
                    solution="Update to GLIDE client creation pattern",
                ),
            ),
            conversion_strategies=(
                ConversionStrategy(
                    name="connection-conversion",
                    description="Convert connection setup to GLIDE client",
                    applicability=BOTH,
                    steps=(
                        ConversionStep(
                            order=1,
                            action=StepAction.REPLACE,
                            target="new Redis(",
                            new_code="await GlideClient.createClient(",
                            explanation="Replace Redis constructor with GLIDE factory",
                        ),
                    ),
                    risks=("Configuration option mapping",),
                    validation=("Test connection establishment", "Verify configuration options"),
                ),
            ),
        ),
    ]


@lru_cache(maxsize=1)
def default_catalog() -> SignatureCatalog:
    """The shared catalog built from the built-in definitions."""
    return SignatureCatalog(builtin_signatures())
