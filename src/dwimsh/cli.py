"""Command-line interface for dwimsh."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from dwimsh.config import ShellConfig, split_search_path
from dwimsh.dispatch.builtins import BuiltinCommands
from dwimsh.errors import ConfigError
from dwimsh.index.catalog import CommandIndex
from dwimsh.recovery.dedup import deduplicate
from dwimsh.recovery.similarity import SimilarityEngine

console = Console()


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=False,
                show_path=False,
                markup=False,
            )
        ],
        force=True,
    )


def _build_index(config: ShellConfig) -> CommandIndex:
    return CommandIndex.build(config.search_path, max_commands=config.max_commands)


@click.group(invoke_without_command=True)
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="JSON configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--path", "search_path", help="Search path to index instead of $PATH")
@click.option("--max-commands", type=int, help="Maximum number of indexed commands")
@click.option("--max-recommendations", type=int, help="Maximum number of suggestions")
@click.option("--history-file", type=click.Path(dir_okay=False), help="History file location")
@click.option("--no-banner", is_flag=True, help="Skip the welcome banner")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    verbose: bool,
    search_path: str | None,
    max_commands: int | None,
    max_recommendations: int | None,
    history_file: str | None,
    no_banner: bool,
) -> None:
    """DWIMSH - Do What I Mean shell.

    Without a subcommand, starts the interactive shell.
    """
    configure_logging(verbose)

    overrides = {
        "search_path": split_search_path(search_path) if search_path is not None else None,
        "max_commands": max_commands,
        "max_recommendations": max_recommendations,
        "history_file": history_file,
        "show_banner": False if no_banner else None,
    }
    try:
        if config_path:
            config = ShellConfig.from_file(config_path, **overrides)
        else:
            config = ShellConfig.from_env(**overrides)
    except ConfigError as e:
        ctx.fail(str(e))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        from dwimsh.core import DwimShell

        shell = DwimShell(config, console=console)
        sys.exit(shell.run())


@cli.command()
@click.argument("token")
@click.pass_context
def suggest(ctx: click.Context, token: str) -> None:
    """Show the commands that would be suggested for TOKEN."""
    config: ShellConfig = ctx.obj["config"]
    index = _build_index(config)

    if index.contains(token):
        console.print(f"[green]'{escape(token)}' is a known command.[/green]")
        return

    engine = SimilarityEngine(
        max_recommendations=config.max_recommendations,
        levenshtein_threshold=config.levenshtein_threshold,
        hamming_ratio=config.hamming_ratio,
        min_candidate_length=config.min_candidate_length,
    )
    matches = deduplicate(engine.find_matches(token, index), key=lambda m: m.name)

    if not matches:
        console.print("[yellow]No similar commands found.[/yellow]")
        return

    console.print(Panel.fit(f"Unknown command: {escape(token)}"))

    table = Table(title="Suggestions")
    table.add_column("#", style="dim")
    table.add_column("Command", style="cyan")
    table.add_column("Rule", style="green")
    table.add_column("Similarity", style="yellow")

    for i, match in enumerate(matches, 1):
        table.add_row(str(i), escape(match.name), match.rule.value, f"{match.score:.0%}")

    console.print(table)


@cli.command("list")
@click.pass_context
def list_commands(ctx: click.Context) -> None:
    """List every indexed command."""
    index = _build_index(ctx.obj["config"])
    BuiltinCommands(console, commands=lambda: list(index)).list_commands()


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
