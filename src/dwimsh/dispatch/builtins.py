"""Built-in commands handled inside the shell."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)

LIST_COLUMNS = 4


def format_columns(names: Sequence[str], columns: int = LIST_COLUMNS) -> list[str]:
    """Lay names out column-major, padded to the longest name plus two."""
    if not names:
        return []
    rows = (len(names) + columns - 1) // columns
    width = max(len(name) for name in names) + 2
    lines = []
    for row in range(rows):
        cells = []
        for col in range(columns):
            position = col * rows + row
            if position < len(names):
                cells.append(names[position].ljust(width))
        lines.append("".join(cells))
    return lines


class BuiltinCommands:
    """Actions for the shell's built-in command names."""

    def __init__(
        self,
        console: Console,
        commands: Callable[[], Sequence[str]],
        history: Callable[[], Iterable[str]] | None = None,
        history_base: int = 1,
    ) -> None:
        """Initialize builtins.

        Args:
            console: Output console
            commands: Returns the current command index entries
            history: Returns recorded input lines, oldest first
            history_base: Number shown next to the oldest history entry
        """
        self.console = console
        self._commands = commands
        self._history = history or (lambda: ())
        self.history_base = history_base
        self._actions: dict[str, Callable[[Sequence[str]], None]] = {
            "help": self.help,
            "clear": self.clear,
            "list": self.list_commands,
            "history": self.show_history,
        }

    def run(self, tokens: Sequence[str]) -> None:
        """Perform the action for ``tokens[0]``; ``exit`` is a no-op here."""
        action = self._actions.get(tokens[0])
        if action is not None:
            logger.debug(f"Running builtin {tokens[0]}")
            action(tokens)

    def help(self, tokens: Sequence[str] = ()) -> None:
        self.console.print("\n[bold]DWIMSH - Do What I Mean Shell[/bold]\n")
        self.console.print("Built-in commands:")
        for name, text in (
            ("exit", "Exit the shell"),
            ("help", "Display this help message"),
            ("clear", "Clear the screen"),
            ("list", "List all available commands"),
            ("history", "Show command history"),
        ):
            self.console.print(f"  [bold]{name:<13}[/bold] - {text}")
        self.console.print("\nFeatures:")
        for feature in (
            "Command correction using Hamming distance",
            "Command correction using Levenshtein distance",
            "Command correction using anagram detection",
            "Command correction using substring matching",
            "Command history with up/down arrow keys",
            "Tab completion for commands",
        ):
            self.console.print(f"  - {feature}")
        self.console.print()

    def clear(self, tokens: Sequence[str] = ()) -> None:
        self.console.clear()

    def list_commands(self, tokens: Sequence[str] = ()) -> None:
        names = list(self._commands())
        self.console.print(f"Available commands ({len(names)} total):")
        for line in format_columns(names):
            self.console.print(escape(line.rstrip()), highlight=False)

    def show_history(self, tokens: Sequence[str] = ()) -> None:
        for number, line in enumerate(self._history(), start=self.history_base):
            self.console.print(f"{number:5d}  {escape(line)}", highlight=False)
