"""CLI command for comprehensive migration planning."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from glide_migrate.commands import dialect_option, read_source
from glide_migrate.logging import print_error

if TYPE_CHECKING:
    from glide_migrate.cli import MigrateContext
    from glide_migrate.engine.orchestrator import ComprehensiveMigrationResult


@click.command("plan")
@click.argument(
    "path",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@dialect_option()
@click.option(
    "--dependencies",
    "dependencies_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Dependency analysis (YAML or JSON)",
)
@click.option(
    "--optimizations",
    "optimizations_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Optimization report (YAML or JSON)",
)
@click.option(
    "--scope",
    type=click.Choice(["file", "module", "project"]),
    default="file",
    help="Size of the migrated unit, scales the time estimate",
)
@click.option(
    "--no-optimizations",
    is_flag=True,
    help="Leave optimization phases out of the plan",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output as JSON",
)
@click.pass_obj
def plan(
    ctx: MigrateContext,
    path: Path | None,
    dialect: str,
    dependencies_file: Path | None,
    optimizations_file: Path | None,
    scope: str,
    no_optimizations: bool,
    output_json: bool,
) -> None:
    """Build a migration plan, guide and time estimate.

    PATH is optional; without it only the collaborator analyses feed the plan.

    \b
    Examples:
        glide-migrate plan src/cache.ts -d ioredis
        glide-migrate plan src/cache.ts -d ioredis --dependencies deps.yaml
        glide-migrate plan -d node-redis --optimizations perf.json --scope project --json
    """
    from glide_migrate.engine import (
        DependencyAnalysis,
        MigrationOptions,
        MigrationOrchestrator,
        MigrationRequest,
        MigrationScope,
        OptimizationReport,
        load_collaborator_file,
    )
    from glide_migrate.errors import InputError

    try:
        request = MigrationRequest(
            source_dialect=dialect,
            source_code=read_source(path) if path else None,
            file_name=str(path) if path else "input.ts",
            scope=MigrationScope(scope),
            options=MigrationOptions(include_optimizations=not no_optimizations),
        )
        dependency_analysis = DependencyAnalysis.from_dict(
            load_collaborator_file(dependencies_file) if dependencies_file else None
        )
        optimization_report = OptimizationReport.from_dict(
            load_collaborator_file(optimizations_file) if optimizations_file else None
        )
    except InputError as e:
        print_error(e.message)
        sys.exit(e.exit_code)

    orchestrator = MigrationOrchestrator(config=ctx.get_config())
    result = orchestrator.perform_migration(request, dependency_analysis, optimization_report)

    if output_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    _print_result(result)


def _print_result(result: ComprehensiveMigrationResult) -> None:
    analysis = result.source_analysis
    plan_ = result.migration_plan

    click.echo(click.style("Migration Plan", bold=True))
    click.echo(
        click.style("  Dialect: ", dim=True)
        + analysis.source_dialect.value
        + click.style("  Patterns: ", dim=True)
        + str(len(analysis.detected_patterns))
        + click.style("  Complexity: ", dim=True)
        + analysis.code_complexity.complexity.value
    )
    click.echo(click.style("  Estimated: ", dim=True) + plan_.estimated_time)
    click.echo()

    for phase in plan_.phases:
        click.echo(click.style(f"  {phase.phase}. {phase.title}", fg="cyan") + f" ({phase.estimated_time})")
        for task in phase.tasks:
            click.echo(f"       - {task}")

    if result.recommendations:
        click.echo()
        click.echo(click.style("Recommendations", bold=True))
        colors = {"critical": "red", "high": "yellow", "medium": "blue", "low": "white"}
        for recommendation in result.recommendations:
            priority = recommendation.priority.value
            click.echo(
                click.style(f"  [{priority}]", fg=colors.get(priority, "white"))
                + f" {recommendation.title}"
            )

    estimate = result.time_estimate
    click.echo()
    click.echo(
        click.style("Time estimate: ", bold=True)
        + f"{estimate.total_hours}h ({estimate.confidence} confidence)"
    )
    for factor in estimate.factors:
        click.echo(click.style(f"  {factor}", dim=True))


__all__ = ["plan"]
