"""CLI interface for the migration progress console.

Commands render lifecycle events with the live console renderer:

\b
  migration-console replay events.jsonl   Render a recorded event log
  migration-console demo                  Render a synthetic run
"""

import importlib
import logging
import time
from enum import Enum
from pathlib import Path

import click
from dotenv import load_dotenv

from migration_console import __version__
from migration_console.events import EntityTransactionOutcome, MigrationRun
from migration_console.renderer import ConsoleProgressRenderer
from migration_console.replay import ITEM_EVENTS, ReplayError, dispatch_entry

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def load_outcomes(spec: str | None) -> type[Enum]:
    """Import an outcome enumeration given as ``module:EnumName``."""
    if not spec:
        return EntityTransactionOutcome
    module_name, _, attr = spec.partition(":")
    if not module_name or not attr:
        raise click.BadParameter(
            f"Expected 'module:EnumName', got {spec!r}", param_hint="--outcomes"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(str(e), param_hint="--outcomes") from e
    outcomes = getattr(module, attr, None)
    if not (isinstance(outcomes, type) and issubclass(outcomes, Enum)):
        raise click.BadParameter(
            f"{spec!r} is not an Enum class", param_hint="--outcomes"
        )
    return outcomes


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    help="Show the migration-console version and exit.",
)
@click.pass_context
def main(ctx: click.Context, version: bool) -> None:
    """Migration Console - live progress display for migration runs.

    \b
      migration-console replay events.jsonl   Render a recorded event log
      migration-console demo                  Render a synthetic run
    """
    if version:
        click.echo(__version__)
        ctx.exit()

    # If no subcommand, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command("replay")
@click.argument(
    "path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--outcomes",
    "outcomes_spec",
    default=None,
    help="Outcome enumeration as module:EnumName (default: sample outcomes).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log to stderr as well.")
def replay(path: Path, outcomes_spec: str | None, verbose: bool) -> None:
    """Render a recorded JSON-lines event log.

    Examples:
        migration-console replay run.jsonl
        migration-console replay run.jsonl --outcomes mypipeline.models:Outcome
    """
    from migration_console.cli.logging import configure_cli_logging
    from migration_console.replay import replay_file

    log_file = configure_cli_logging("replay", verbose=verbose)
    run = MigrationRun(outcomes=load_outcomes(outcomes_spec))
    renderer = ConsoleProgressRenderer(run)
    try:
        count = replay_file(path, run, [renderer])
    except (ReplayError, OSError) as e:
        logger.error(f"Replay of {path} failed: {e}")
        raise click.ClickException(str(e)) from e
    logger.info(f"Replayed {count} events, log at {log_file}")


@main.command("demo")
@click.option("--segments", default=2, show_default=True, type=click.IntRange(1))
@click.option("--entities", default=500, show_default=True, type=click.IntRange(1))
@click.option("--seed", default=None, type=int, help="Random seed.")
@click.option(
    "--delay",
    default=0.002,
    show_default=True,
    type=click.FloatRange(0),
    help="Seconds to pause after each processed item.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log to stderr as well.")
def demo(
    segments: int, entities: int, seed: int | None, delay: float, verbose: bool
) -> None:
    """Render a synthetic run to preview the display."""
    from migration_console.cli.logging import configure_cli_logging
    from migration_console.demo import generate_run

    configure_cli_logging("demo", verbose=verbose)
    run = MigrationRun(outcomes=EntityTransactionOutcome)
    renderer = ConsoleProgressRenderer(run)
    for entry in generate_run(segments=segments, entities=entities, seed=seed):
        event = dispatch_entry(entry, run, [renderer])
        if delay and event in ITEM_EVENTS:
            time.sleep(delay)
