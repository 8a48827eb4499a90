"""Occurrence scanner - line-by-line signature matching.

Walks source text against the catalog's signatures for one dialect and
captures a bounded context window plus light metadata for each match.
"""

from __future__ import annotations

import logging
import re

from glide_migrate.config import ScannerConfig
from glide_migrate.engine.catalog import SignatureCatalog
from glide_migrate.engine.models import (
    CodeContext,
    PatternOccurrence,
    PatternSignature,
    PatternType,
    SourceDialect,
)

logger = logging.getLogger(__name__)

# Secondary extractors run over each context window
METHOD_CALL_RE = re.compile(r"\.(\w+)\(")
VARIABLE_DECL_RE = re.compile(r"(?:const|let|var)\s+(\w+)")
IMPORT_FROM_RE = re.compile(r"import.*from\s+['\"]([^'\"]+)['\"]")
REQUIRE_RE = re.compile(r"require\(['\"]([^'\"]+)['\"]\)")

ASYNC_RE = re.compile(r"\b(?:async|await)\b")
ERROR_HANDLING_RE = re.compile(r"\b(?:try|catch|throw)\b")
LOOP_RE = re.compile(r"\b(?:for|while|forEach)\b")
CONDITIONAL_RE = re.compile(r"\b(?:if|else|switch)\b")

CLASS_DECL_RE = re.compile(r"^\s*(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+(\w+)")
FUNCTION_DECL_RE = re.compile(
    r"(?:^|\s)(?:async\s+)?function\s*\*?\s*(\w+)\s*\("
    r"|^\s*(?:public\s+|private\s+|protected\s+|static\s+)*(?:async\s+)?(\w+)\s*\([^)]*\)\s*(?::[^{]*)?\{"
    r"|(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?(?:function\b|\([^)]*\)\s*=>|\w+\s*=>)"
)
NOT_A_FUNCTION = frozenset({"if", "for", "while", "switch", "catch", "return", "function"})


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def extract_methods(code: str) -> list[str]:
    """Call-site identifiers (``.name(``), deduplicated in first-seen order."""
    return _unique(METHOD_CALL_RE.findall(code))


def extract_variables(code: str) -> list[str]:
    """Names declared with const/let/var, in source order."""
    return VARIABLE_DECL_RE.findall(code)


def extract_dependencies(code: str) -> list[str]:
    """Import and require targets, deduplicated."""
    return _unique(IMPORT_FROM_RE.findall(code) + REQUIRE_RE.findall(code))


def enclosing_names(lines: list[str]) -> list[tuple[str | None, str | None]]:
    """Nearest class and function declared at or above each line.

    One forward pass: the last declaration seen is carried down to every
    following line.
    """
    class_name: str | None = None
    method_name: str | None = None
    names: list[tuple[str | None, str | None]] = []
    for line in lines:
        match = FUNCTION_DECL_RE.search(line)
        if match:
            name = next((g for g in match.groups() if g), None)
            if name and name not in NOT_A_FUNCTION:
                method_name = name
        match = CLASS_DECL_RE.search(line)
        if match:
            class_name = match.group(1)
        names.append((class_name, method_name))
    return names


def analyze_code_context(
    code: str,
    enclosing: tuple[str | None, str | None] = (None, None),
) -> CodeContext:
    """Derive control-flow flags for a snippet; attach its enclosing names."""
    class_name, method_name = enclosing
    return CodeContext(
        async_context=bool(ASYNC_RE.search(code)),
        error_handling=bool(ERROR_HANDLING_RE.search(code)),
        loop_context=bool(LOOP_RE.search(code)),
        conditional_context=bool(CONDITIONAL_RE.search(code)),
        class_name=class_name,
        method_name=method_name,
    )


class OccurrenceScanner:
    """Finds pattern occurrences for a declared source dialect.

    Example:
        >>> scanner = OccurrenceScanner(default_catalog())
        >>> found = scanner.scan(source, SourceDialect.IOREDIS)
        >>> found[PatternType.PIPELINE][0].start_line
        0
    """

    def __init__(
        self,
        catalog: SignatureCatalog,
        config: ScannerConfig | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            catalog: Signature catalog to scan against.
            config: Optional context-window configuration.
        """
        self.catalog = catalog
        self.config = config or ScannerConfig()

    def scan(
        self,
        source_code: str,
        dialect: SourceDialect,
    ) -> dict[PatternType, list[PatternOccurrence]]:
        """Scan source text for every catalog pattern.

        Args:
            source_code: Raw source text.
            dialect: Declared source dialect.

        Returns:
            Occurrences grouped by pattern type, in catalog order. Patterns
            with no occurrences are omitted.
        """
        if not source_code:
            return {}

        lines = source_code.split("\n")
        enclosing = enclosing_names(lines)
        found: dict[PatternType, list[PatternOccurrence]] = {}

        for signature in self.catalog:
            occurrences = self.find_occurrences(lines, signature, dialect, enclosing)
            if occurrences:
                found[signature.pattern_type] = occurrences

        logger.debug(
            "Scanned %d lines for %s: %s",
            len(lines),
            dialect.value,
            {t.value: len(o) for t, o in found.items()},
        )
        return found

    def find_occurrences(
        self,
        lines: list[str],
        signature: PatternSignature,
        dialect: SourceDialect,
        enclosing: list[tuple[str | None, str | None]] | None = None,
    ) -> list[PatternOccurrence]:
        """Occurrences of one pattern; at most one per matching line.

        ``enclosing`` is the per-line output of :func:`enclosing_names`; it is
        computed here when the caller has not already done so.
        """
        patterns = signature.patterns_for(dialect)
        if not patterns:
            return []
        if enclosing is None:
            enclosing = enclosing_names(lines)

        occurrences: list[PatternOccurrence] = []
        last = len(lines) - 1
        for index, line in enumerate(lines):
            # First matching regex wins for this line
            if not any(p.search(line) for p in patterns):
                continue

            start = max(0, index - self.config.context_before)
            end = min(last, index + self.config.context_after)
            snippet = "\n".join(lines[start : end + 1])

            occurrences.append(
                PatternOccurrence(
                    start_line=start,
                    end_line=end,
                    line=index,
                    source_code=snippet,
                    methods=extract_methods(snippet),
                    variables=extract_variables(snippet),
                    dependencies=extract_dependencies(snippet),
                    context=analyze_code_context(snippet, enclosing[index]),
                )
            )

        return occurrences
