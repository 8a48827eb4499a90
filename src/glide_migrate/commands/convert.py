"""CLI command for converting source code to GLIDE."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from glide_migrate.commands import dialect_option, read_source
from glide_migrate.engine.models import PatternType
from glide_migrate.logging import print_error, print_info, print_success, print_warning

if TYPE_CHECKING:
    from glide_migrate.cli import MigrateContext


@click.command("convert")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@dialect_option()
@click.option(
    "-p",
    "--pattern",
    "pattern_name",
    type=click.Choice([t.value for t in PatternType], case_sensitive=False),
    help="Convert only this pattern type",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write converted code to this file (default: stdout)",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output as JSON",
)
@click.pass_obj
def convert(
    ctx: MigrateContext,
    path: Path,
    dialect: str,
    pattern_name: str | None,
    output: Path | None,
    output_json: bool,
) -> None:
    """Rewrite detected patterns in a source file to the GLIDE API.

    Replacements are literal and apply to every match in the file. Review
    the recorded changes and warnings before committing the result.

    \b
    Examples:
        glide-migrate convert src/cache.ts -d ioredis
        glide-migrate convert src/cache.ts -d ioredis -p pipeline
        glide-migrate convert src/cache.ts -d node-redis -o out.ts --json
    """
    from glide_migrate.engine import MigrationOrchestrator, SourceDialect
    from glide_migrate.errors import InputError

    try:
        source_dialect = SourceDialect.parse(dialect)
        source = read_source(path)
    except InputError as e:
        print_error(e.message)
        sys.exit(e.exit_code)

    orchestrator = MigrationOrchestrator(config=ctx.get_config())
    detector = orchestrator.detector
    analysis = detector.analyze_source(source, source_dialect)

    if pattern_name:
        pattern = analysis.get_pattern(PatternType(pattern_name.lower()))
        if pattern is None:
            if output_json:
                click.echo(json.dumps({"file": str(path), "conversion": None}, indent=2))
            else:
                print_warning(f"Pattern '{pattern_name}' not detected in {path}")
            return
        result = detector.convert_pattern(pattern, source, source_dialect)
        converted_code = result.converted_code
        payload = {"file": str(path), "conversion": result.to_dict()}
        warnings = [w.message for w in result.warnings]
    else:
        converted = orchestrator.convert_source(source, analysis, str(path))
        converted_code = converted.converted_code
        payload = {"file": str(path), "converted_file": converted.to_dict()}
        warnings = converted.warnings

    if output:
        output.write_text(converted_code, encoding="utf-8")
        if not output_json:
            print_success(f"Wrote converted code to {output}")

    if output_json:
        click.echo(json.dumps(payload, indent=2))
        return

    if not output:
        click.echo(converted_code)

    for message in warnings:
        print_warning(message)
    if not analysis.detected_patterns:
        print_info("No migration patterns detected; code left unchanged")


__all__ = ["convert"]
