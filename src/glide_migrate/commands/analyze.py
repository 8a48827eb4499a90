"""CLI command for source analysis."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from glide_migrate.commands import dialect_option, read_source
from glide_migrate.logging import print_error, print_info, print_success, print_warning

if TYPE_CHECKING:
    from glide_migrate.cli import MigrateContext
    from glide_migrate.engine.models import SourceAnalysis


@click.command("analyze")
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@dialect_option()
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=4,
    help="Maximum files analyzed at once (default: 4)",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output as JSON",
)
@click.pass_obj
def analyze(
    ctx: MigrateContext,
    paths: tuple[Path, ...],
    dialect: str,
    concurrency: int,
    output_json: bool,
) -> None:
    """Detect migration patterns, complexity and effort in source files.

    Files that cannot be read are skipped and reported; the exit code is 2
    when some files were skipped.

    \b
    Examples:
        glide-migrate analyze src/cache.ts -d ioredis
        glide-migrate analyze src/*.ts -d node-redis --json
    """
    from glide_migrate.engine import MigrationOrchestrator, SourceDialect, SourceUnit
    from glide_migrate.errors import ExitCode, InputError, ProcessingResult

    try:
        source_dialect = SourceDialect.parse(dialect)
    except InputError as e:
        print_error(e.message)
        sys.exit(e.exit_code)

    processing = ProcessingResult()
    units: list[SourceUnit] = []
    for path in paths:
        try:
            units.append(SourceUnit(str(path), read_source(path), source_dialect))
        except InputError as e:
            processing.add_skipped(str(path), e.message)
            if not output_json:
                print_warning(f"Skipping {path}: {e.message}")

    orchestrator = MigrationOrchestrator(config=ctx.get_config())
    analyses = asyncio.run(orchestrator.analyze_units(units, concurrency=concurrency))
    for unit in units:
        processing.add_processed(unit.name)

    if output_json:
        output = {
            "results": [
                {"path": unit.name, "analysis": analysis.to_dict()}
                for unit, analysis in zip(units, analyses, strict=True)
            ],
            "summary": processing.to_dict(),
        }
        click.echo(json.dumps(output, indent=2))
    else:
        for unit, analysis in zip(units, analyses, strict=True):
            _print_analysis(unit.name, analysis)
        if processing.skipped:
            print_warning(f"{len(processing.skipped)} file(s) skipped")

    if processing.exit_code != ExitCode.SUCCESS:
        sys.exit(processing.exit_code)


def _print_analysis(name: str, analysis: SourceAnalysis) -> None:
    complexity = analysis.code_complexity
    effort = analysis.estimated_effort

    click.echo(click.style(name, bold=True))
    if not analysis.detected_patterns:
        print_info("  No migration patterns detected")
    else:
        print_success(f"  Found {len(analysis.detected_patterns)} pattern(s)")
        for pattern in analysis.detected_patterns:
            click.echo(
                click.style(f"    [{pattern.type.value}]", fg="cyan")
                + f" {len(pattern.occurrences)} occurrence(s)"
                + click.style("  Confidence: ", dim=True)
                + f"{pattern.confidence:.0%}"
                + click.style("  Complexity: ", dim=True)
                + pattern.complexity.value
            )
            for occurrence in pattern.occurrences[:3]:
                click.echo(click.style(f"      line {occurrence.line + 1}", dim=True))

    click.echo(
        click.style("  Complexity: ", dim=True)
        + f"{complexity.complexity.value} ({complexity.score:.1f})"
        + click.style("  Relevant lines: ", dim=True)
        + f"{complexity.relevant_lines}/{complexity.total_lines}"
    )
    click.echo(
        click.style("  Approach: ", dim=True)
        + analysis.migration_strategy.approach.value
        + click.style("  Effort: ", dim=True)
        + f"{effort.total_hours:.1f}h"
    )
    for risk in analysis.migration_strategy.risks:
        click.echo(click.style(f"    ! {risk.risk}", fg="yellow"))
    click.echo()


__all__ = ["analyze"]
