"""Shared fixtures for glide-migrate tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from glide_migrate.engine.catalog import default_catalog
from glide_migrate.engine.models import DetectedPattern, PatternOccurrence, PatternType

IOREDIS_PIPELINE_SOURCE = """\
const Redis = require('ioredis');
const redis = new Redis();

async function saveUser(user) {
  const pipeline = redis.pipeline();
  pipeline.set('user:name', user.name);
  pipeline.set('user:email', user.email);
  const results = await pipeline.exec();
  return results;
}
"""

NODE_REDIS_HASH_SOURCE = """\
const client = createClient();
await client.connect();
await client.hSet('user:1', 'name', 'alice');
const name = await client.hGet('user:1', 'name');
"""


@pytest.fixture
def ioredis_source() -> str:
    """ioredis module using a pipeline, a connection and exec()."""
    return IOREDIS_PIPELINE_SOURCE


@pytest.fixture
def node_redis_source() -> str:
    """node-redis module using camelCase hash commands."""
    return NODE_REDIS_HASH_SOURCE


@pytest.fixture
def make_pattern() -> Callable[..., DetectedPattern]:
    """Factory for DetectedPattern records backed by the built-in catalog."""

    def _make(
        pattern_type: PatternType,
        occurrences: int = 1,
        confidence: float = 0.6,
        first_line: int = 0,
    ) -> DetectedPattern:
        signature = default_catalog().get(pattern_type)
        assert signature is not None
        return DetectedPattern(
            type=pattern_type,
            confidence=confidence,
            occurrences=[
                PatternOccurrence(
                    start_line=first_line + i,
                    end_line=first_line + i,
                    line=first_line + i,
                    source_code="",
                )
                for i in range(occurrences)
            ],
            complexity=signature.complexity,
            migration_requirements=signature.migration_requirements,
            conversion_strategies=signature.conversion_strategies,
        )

    return _make
