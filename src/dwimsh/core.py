"""Core shell loop."""

from __future__ import annotations

import logging
import signal
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from dwimsh import __version__
from dwimsh.config import ShellConfig
from dwimsh.dispatch.builtins import BuiltinCommands
from dwimsh.dispatch.dispatcher import DispatchStatus, Dispatcher, tokenize
from dwimsh.dispatch.process import ProcessRunner
from dwimsh.history import LineEditor
from dwimsh.index.catalog import CommandIndex
from dwimsh.recovery.dedup import deduplicate
from dwimsh.recovery.resolver import InteractiveResolver, ResolutionState, ResponseReader
from dwimsh.recovery.similarity import SimilarityEngine

logger = logging.getLogger(__name__)

__all__ = ["DwimShell", "tokenize"]


def _terminate(signum: int, frame: Any) -> None:
    raise SystemExit(0)


class DwimShell:
    """Main read-resolve-recover loop."""

    def __init__(
        self,
        config: ShellConfig | None = None,
        console: Console | None = None,
        index: CommandIndex | None = None,
        runner: ProcessRunner | None = None,
        editor: LineEditor | None = None,
        reader: ResponseReader | None = None,
    ) -> None:
        self.config = config or ShellConfig()
        self.console = console or Console()

        self.index = index or CommandIndex.build(
            self.config.search_path,
            max_commands=self.config.max_commands,
        )
        self.editor = editor or LineEditor(
            self.index,
            self.config.history_file,
            history_length=self.config.history_length,
            console=self.console,
        )
        self.builtins = BuiltinCommands(
            self.console,
            commands=lambda: list(self.index),
            history=self.editor.entries,
        )
        self.dispatcher = Dispatcher(self.index, self.builtins, runner=runner, console=self.console)
        self.engine = SimilarityEngine(
            max_recommendations=self.config.max_recommendations,
            levenshtein_threshold=self.config.levenshtein_threshold,
            hamming_ratio=self.config.hamming_ratio,
            min_candidate_length=self.config.min_candidate_length,
        )
        self.resolver = InteractiveResolver(self.dispatcher, console=self.console, reader=reader)

    def print_welcome(self) -> None:
        self.console.print(
            Panel.fit(
                f"[bold green]DWIMSH[/bold green] - Do What I Mean Shell v{__version__}\n"
                "[yellow]Type 'help' for available commands or 'exit' to quit[/yellow]",
                border_style="green",
            )
        )

    def handle_line(self, line: str) -> bool:
        """Process one input line.

        Args:
            line: Raw input line

        Returns:
            False if the shell should stop
        """
        if not line:
            return True

        self.editor.add(line)
        tokens = tokenize(line)
        if not tokens:
            return True

        status = self.dispatcher.resolve(tokens)
        if status is DispatchStatus.EXIT:
            return False
        if status is DispatchStatus.NOT_FOUND:
            return self.recover(tokens)
        return True

    def recover(self, tokens: Sequence[str]) -> bool:
        """Offer corrections for an unknown command.

        Returns:
            False if the dialogue ended the session
        """
        self.console.print(f"[red]Command not found: {escape(tokens[0])}[/red]")

        matches = self.engine.find_matches(tokens[0], self.index)
        if not matches:
            self.console.print("No similar commands found. Please try again.")
            return True

        matches = deduplicate(matches, key=lambda m: m.name)
        count = len(matches)
        self.console.print(
            f"[yellow]Found {count} possible command{'' if count == 1 else 's'}:[/yellow]"
        )

        resolution = self.resolver.resolve(
            [m.name for m in matches],
            tokens,
            scores=[m.score for m in matches],
        )
        logger.debug(f"Resolution ended in state {resolution.state.value}")

        if resolution.state is ResolutionState.ACCEPTED and resolution.status is DispatchStatus.NOT_FOUND:
            # Candidates come from the index, so this indicates a bug.
            logger.error(f"Accepted candidate {resolution.command} did not resolve")
        return not resolution.shutdown_requested

    def run(self) -> int:
        """Run until exit or end of input.

        Returns:
            Process exit status (always 0)
        """
        previous = signal.signal(signal.SIGTERM, _terminate)
        self.editor.setup()
        try:
            if self.config.show_banner:
                self.print_welcome()

            while True:
                try:
                    line = self.editor.read_line()
                except KeyboardInterrupt:
                    self.console.print()
                    continue

                if line is None:
                    self.console.print()
                    break

                try:
                    if not self.handle_line(line):
                        break
                except KeyboardInterrupt:
                    self.console.print()
        finally:
            self.shutdown()
            signal.signal(signal.SIGTERM, previous)

        return 0

    def shutdown(self) -> None:
        logger.debug("Shutting down, saving history")
        self.editor.save()
