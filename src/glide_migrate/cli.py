"""glide-migrate CLI - migrate Redis-client source code to Valkey GLIDE."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from dotenv import load_dotenv

# Load .env file before any other imports that might use env vars
load_dotenv()

import click  # noqa: E402

from glide_migrate import __version__  # noqa: E402

if TYPE_CHECKING:
    from glide_migrate.config import GlideMigrateConfig

VerbosityLevel = Literal["quiet", "normal", "verbose"]


class MigrateContext:
    """Shared context for CLI commands."""

    def __init__(self) -> None:
        self.config: GlideMigrateConfig | None = None
        self.verbosity: VerbosityLevel = "normal"
        self.debug: bool = False

    def get_config(self) -> GlideMigrateConfig:
        """Loaded configuration, or built-in defaults if loading failed."""
        from glide_migrate.config import GlideMigrateConfig

        if self.config is None:
            self.config = GlideMigrateConfig()
        return self.config


pass_context = click.make_pass_decorator(MigrateContext, ensure=True)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output")
@click.option("--debug", is_flag=True, help="Show full tracebacks on errors")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.version_option(version=__version__, prog_name="glide-migrate")
@pass_context
def cli(
    ctx: MigrateContext,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config: Path | None,
) -> None:
    """glide-migrate - Redis client to Valkey GLIDE migration assistant.

    \b
    Commands:
      analyze      Detect patterns, complexity and effort
      convert      Rewrite detected patterns to GLIDE
      plan         Build a full migration plan and guide
      patterns     List the built-in pattern catalog

    Use 'glide-migrate <command> --help' for details.
    Use --debug to show full tracebacks on errors.
    """
    from glide_migrate.config import GlideMigrateConfig
    from glide_migrate.logging import print_error, setup_logging

    ctx.debug = debug

    if quiet:
        ctx.verbosity = "quiet"
    elif verbose or debug:
        ctx.verbosity = "verbose"
    else:
        ctx.verbosity = "normal"

    setup_logging(ctx.verbosity)

    try:
        ctx.config = GlideMigrateConfig.load(config)
    except Exception as e:
        if not quiet:
            print_error(f"Failed to load configuration: {e}")
            print_error("Falling back to built-in defaults")
        ctx.config = None


def _register_commands() -> None:
    from glide_migrate.commands.analyze import analyze
    from glide_migrate.commands.convert import convert
    from glide_migrate.commands.patterns import patterns
    from glide_migrate.commands.plan import plan

    for command in (analyze, convert, plan, patterns):
        cli.add_command(command)


_register_commands()


def main() -> None:
    """Entry point for the CLI."""
    import sys

    from glide_migrate.errors import ExitCode, MigrateError

    debug_mode = "--debug" in sys.argv

    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as e:
        sys.exit(e.exit_code)
    except click.Abort:
        sys.exit(130)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        sys.exit(130)
    except MigrateError as e:
        from glide_migrate.logging import print_error, print_info

        print_error(e.message)
        if "supported" in e.context:
            print_info(f"Supported dialects: {', '.join(e.context['supported'])}")
        sys.exit(e.exit_code)
    except Exception as e:
        from glide_migrate.logging import print_error, print_info

        print_error(f"Error: {e}")
        if debug_mode:
            print_info("")
            print_info("Full traceback (--debug mode):")
            import traceback

            traceback.print_exc()
        else:
            print_info("")
            print_info("Run with --debug for full traceback.")

        sys.exit(ExitCode.FATAL_ERROR)


if __name__ == "__main__":
    main()
