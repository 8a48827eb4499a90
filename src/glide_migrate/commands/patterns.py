"""CLI command for listing the pattern catalog."""

from __future__ import annotations

import json
import sys

import click

from glide_migrate.logging import print_error


@click.command("patterns")
@click.option(
    "-d",
    "--dialect",
    help="Only show regexes for this source dialect",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output as JSON",
)
def patterns(dialect: str | None, output_json: bool) -> None:
    """List the built-in pattern signatures and conversion strategies.

    \b
    Examples:
        glide-migrate patterns
        glide-migrate patterns -d node-redis
        glide-migrate patterns --json
    """
    from glide_migrate.engine import SourceDialect, default_catalog
    from glide_migrate.errors import InputError

    try:
        dialects = [SourceDialect.parse(dialect)] if dialect else list(SourceDialect)
    except InputError as e:
        print_error(e.message)
        sys.exit(e.exit_code)

    catalog = default_catalog()

    if output_json:
        entries = []
        for signature in catalog:
            entry = signature.to_dict()
            entry["signatures"] = {
                d.value: [p.pattern for p in signature.patterns_for(d)] for d in dialects
            }
            entries.append(entry)
        click.echo(json.dumps({"patterns": entries, "total": len(entries)}, indent=2))
        return

    for signature in catalog:
        click.echo(
            click.style(f"  [{signature.pattern_type.value}]", fg="cyan")
            + f" {signature.complexity.value}"
        )
        for d in dialects:
            for regex in signature.patterns_for(d):
                click.echo(click.style(f"      {d.value}: ", dim=True) + regex.pattern)
        for strategy in signature.conversion_strategies:
            applies = ", ".join(a.value for a in strategy.applicability)
            click.echo(
                f"      -> {strategy.name}"
                + click.style(f" ({applies}, {len(strategy.steps)} steps)", dim=True)
            )
        click.echo()


__all__ = ["patterns"]
