"""glide-migrate CLI Commands - Subcommand implementations."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from glide_migrate.errors import InputError


def dialect_option(required: bool = True) -> Any:
    """Shared ``--dialect`` option; values are validated by SourceDialect.parse."""
    return click.option(
        "-d",
        "--dialect",
        required=required,
        envvar="GLIDE_MIGRATE_DIALECT",
        help="Source client library: ioredis or node-redis",
    )


def read_source(path: Path) -> str:
    """Read a source file as UTF-8 text.

    Raises:
        InputError: If the file cannot be read or decoded.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Failed to read file: {e}", file_path=str(path)) from e


__all__ = ["dialect_option", "read_source"]
