"""Tests for the occurrence scanner and its extractors."""

from __future__ import annotations

import re
import time

import pytest

from glide_migrate.config import ScannerConfig
from glide_migrate.engine import scanner as scanner_module
from glide_migrate.engine.catalog import default_catalog
from glide_migrate.engine.models import PatternType, SourceDialect
from glide_migrate.engine.scanner import (
    OccurrenceScanner,
    analyze_code_context,
    enclosing_names,
    extract_dependencies,
    extract_methods,
    extract_variables,
)


class TestExtractors:
    """Tests for the secondary regex extractors."""

    def test_methods_deduplicated_in_order(self) -> None:
        """Method names appear once, in first-seen order."""
        code = "p.set('a'); p.get('a'); p.set('b'); p.exec()"
        assert extract_methods(code) == ["set", "get", "exec"]

    def test_variables(self) -> None:
        """const/let/var declarations are captured."""
        code = "const a = 1;\nlet b = 2;\nvar c = 3;\nd = 4;"
        assert extract_variables(code) == ["a", "b", "c"]

    def test_dependencies(self) -> None:
        """import-from and require targets are captured once each."""
        code = (
            "import { createClient } from 'redis';\n"
            "const Redis = require('ioredis');\n"
            'const again = require("ioredis");\n'
        )
        assert extract_dependencies(code) == ["redis", "ioredis"]

    def test_context_flags_use_word_boundaries(self) -> None:
        """Keywords embedded in identifiers do not set flags."""
        code = "const platform = format(iffy, awaitable);"
        context = analyze_code_context(code)
        assert not context.loop_context
        assert not context.conditional_context
        assert not context.async_context

    def test_context_flags(self) -> None:
        """Control-flow keywords set the matching flags."""
        code = "try {\n  for (const k of keys) {\n    if (k) await redis.get(k);\n  }\n} catch (e) {}"
        context = analyze_code_context(code)
        assert context.async_context
        assert context.error_handling
        assert context.loop_context
        assert context.conditional_context


class TestEnclosingNames:
    """Tests for nearest class/function detection."""

    def test_method_inside_class(self) -> None:
        """A match inside a method reports both class and method."""
        lines = [
            "export class UserCache {",
            "  async save(user) {",
            "    if (user) {",
            "      const pipeline = redis.pipeline();",
            "    }",
            "  }",
            "}",
        ]
        assert enclosing_names(lines)[3] == ("UserCache", "save")

    def test_arrow_function(self) -> None:
        """Arrow functions bound to a const count as functions."""
        lines = ["const flush = async () => {", "  await redis.flushall();", "};"]
        assert enclosing_names(lines)[1] == (None, "flush")

    def test_top_level(self) -> None:
        """Top-level statements have no enclosing names."""
        lines = ["const redis = new Redis();"]
        assert enclosing_names(lines) == [(None, None)]

    def test_nearest_declaration_carried_forward(self) -> None:
        """Each line reports the most recent declaration at or above it."""
        lines = [
            "const redis = new Redis();",
            "class A {",
            "  load() {",
            "    redis.get('a');",
            "  }",
            "  save() {",
            "    redis.set('a', 1);",
        ]
        names = enclosing_names(lines)
        assert len(names) == len(lines)
        assert names[0] == (None, None)
        assert names[1] == ("A", None)
        assert names[3] == ("A", "load")
        assert names[6] == ("A", "save")


class _CountingPattern:
    """Wraps a compiled regex and counts search() calls."""

    def __init__(self, pattern: re.Pattern[str]) -> None:
        self.pattern = pattern
        self.calls = 0

    def search(self, text: str) -> re.Match[str] | None:
        self.calls += 1
        return self.pattern.search(text)


class TestScanScaling:
    """Scanning cost grows linearly with the number of lines."""

    @staticmethod
    def _source(lines: int) -> str:
        return "\n".join(["await client.connect();"] * lines)

    def test_declarations_searched_once_per_line(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Enclosing names are resolved in one pass, not once per match."""
        counter = _CountingPattern(scanner_module.FUNCTION_DECL_RE)
        monkeypatch.setattr(scanner_module, "FUNCTION_DECL_RE", counter)

        found = OccurrenceScanner(default_catalog()).scan(
            self._source(300), SourceDialect.IOREDIS
        )

        assert len(found[PatternType.CONNECTION]) == 300
        assert counter.calls == 300

    def test_time_grows_linearly(self) -> None:
        """Four times the lines costs less than eight times the time."""
        scanner = OccurrenceScanner(default_catalog())

        def best_of_three(lines: int) -> float:
            source = self._source(lines)
            timings = []
            for _ in range(3):
                start = time.perf_counter()
                scanner.scan(source, SourceDialect.IOREDIS)
                timings.append(time.perf_counter() - start)
            return min(timings)

        small = best_of_three(1000)
        large = best_of_three(4000)
        assert large / small < 8


class TestOccurrenceScanner:
    """Tests for OccurrenceScanner.scan."""

    def test_empty_text(self) -> None:
        """Empty text yields an empty mapping."""
        scanner = OccurrenceScanner(default_catalog())
        assert scanner.scan("", SourceDialect.IOREDIS) == {}

    def test_pipeline_occurrences(self, ioredis_source: str) -> None:
        """Each matching line yields one occurrence with a context window."""
        scanner = OccurrenceScanner(default_catalog())
        found = scanner.scan(ioredis_source, SourceDialect.IOREDIS)

        occurrences = found[PatternType.PIPELINE]
        assert [o.line for o in occurrences] == [4, 7]
        first = occurrences[0]
        assert (first.start_line, first.end_line) == (2, 9)
        assert "redis.pipeline()" in first.source_code
        assert "pipeline" in first.methods
        assert first.context.method_name == "saveUser"

    def test_window_clipped_to_file(self) -> None:
        """Context windows never extend past the file bounds."""
        scanner = OccurrenceScanner(default_catalog())
        found = scanner.scan("const r = new Redis();\nr.ping();", SourceDialect.IOREDIS)
        (occurrence,) = found[PatternType.CONNECTION]
        assert (occurrence.start_line, occurrence.end_line) == (0, 1)

    def test_configurable_window(self) -> None:
        """Window sizes come from ScannerConfig."""
        scanner = OccurrenceScanner(default_catalog(), ScannerConfig(context_before=0, context_after=0))
        found = scanner.scan("a\nconst r = new Redis();\nb", SourceDialect.IOREDIS)
        (occurrence,) = found[PatternType.CONNECTION]
        assert (occurrence.start_line, occurrence.end_line) == (1, 1)
        assert occurrence.source_code == "const r = new Redis();"

    def test_one_occurrence_per_line(self) -> None:
        """A line matching several regexes of one pattern counts once."""
        scanner = OccurrenceScanner(default_catalog())
        found = scanner.scan("redis.pipeline().exec();", SourceDialect.IOREDIS)
        assert len(found[PatternType.PIPELINE]) == 1

    def test_dialect_specific_signatures(self, node_redis_source: str) -> None:
        """Only the declared dialect's regexes are used."""
        scanner = OccurrenceScanner(default_catalog())
        assert PatternType.CONNECTION in scanner.scan(node_redis_source, SourceDialect.NODE_REDIS)

        streams = "await client.xAdd('s', '*', { a: '1' });"
        assert PatternType.STREAMING in scanner.scan(streams, SourceDialect.NODE_REDIS)
        assert PatternType.STREAMING not in scanner.scan(streams, SourceDialect.IOREDIS)

    def test_every_reported_pattern_has_occurrences(self, ioredis_source: str) -> None:
        """Patterns without matches are omitted, never reported empty."""
        scanner = OccurrenceScanner(default_catalog())
        for dialect in SourceDialect:
            for occurrences in scanner.scan(ioredis_source, dialect).values():
                assert occurrences

    def test_catalog_order(self, ioredis_source: str) -> None:
        """Result keys follow catalog order."""
        scanner = OccurrenceScanner(default_catalog())
        found = scanner.scan(ioredis_source, SourceDialect.IOREDIS)
        assert list(found) == [PatternType.PIPELINE, PatternType.TRANSACTION, PatternType.CONNECTION]
