"""Dispatcher - route a token sequence to a builtin or an external program."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from enum import Enum

from rich.console import Console
from rich.markup import escape

from dwimsh.dispatch.builtins import BuiltinCommands
from dwimsh.dispatch.process import ProcessRunner
from dwimsh.errors import SpawnError
from dwimsh.index.catalog import CommandIndex

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[ \t]+")


def tokenize(line: str) -> list[str]:
    """Split an input line on spaces and tabs, dropping empty tokens."""
    return [token for token in _SEPARATORS.split(line) if token]


class DispatchStatus(Enum):
    """Result of resolving a token sequence."""

    HANDLED = "handled"
    NOT_FOUND = "not_found"
    EXIT = "exit"


class Dispatcher:
    """Resolves token sequences against builtins and the command index."""

    def __init__(
        self,
        index: CommandIndex,
        builtins: BuiltinCommands,
        runner: ProcessRunner | None = None,
        console: Console | None = None,
    ) -> None:
        self.index = index
        self.builtins = builtins
        self.runner = runner or ProcessRunner()
        self.console = console or builtins.console

    def resolve(self, tokens: Sequence[str]) -> DispatchStatus:
        """Resolve and run a command.

        Builtins shadow external programs of the same name and skip the
        index check. External programs run in the foreground; their exit
        status does not affect the result.

        Args:
            tokens: Command name followed by its arguments

        Returns:
            DispatchStatus
        """
        if not tokens:
            return DispatchStatus.HANDLED

        name = tokens[0]
        if name in self.index.builtins:
            if name == "exit":
                return DispatchStatus.EXIT
            self.builtins.run(tokens)
            return DispatchStatus.HANDLED

        if not self.index.contains(name):
            logger.debug(f"Command not in index: {name}")
            return DispatchStatus.NOT_FOUND

        try:
            self.runner.run(tokens)
        except SpawnError as e:
            logger.warning(f"Failed to start {name}: {e.cause}")
            self.console.print(f"[red]Command execution error: {escape(str(e))}[/red]")

        return DispatchStatus.HANDLED
