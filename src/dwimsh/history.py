"""Line editing, persistent history and tab completion via readline."""

from __future__ import annotations

import io
import logging
import os
import re
import readline
from collections.abc import Iterator
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from dwimsh.index.catalog import CommandIndex

logger = logging.getLogger(__name__)

_SGR = re.compile(r"\x1b\[[0-9;]*m")


class CommandCompleter:
    """readline completer over command names.

    readline calls ``complete`` with state 0, 1, 2, ... until it returns
    None; state 0 restarts the prefix scan.
    """

    def __init__(self, index: CommandIndex) -> None:
        self.index = index
        self._matches: Iterator[str] = iter(())

    def complete(self, text: str, state: int) -> str | None:
        if state == 0:
            self._matches = self.index.prefix_matches(text)
        return next(self._matches, None)


def build_prompt(cwd: str | None = None, home: str | None = None) -> str:
    """Return the prompt as rich markup.

    Inside the home directory the path is shown relative to ``~``;
    elsewhere only the basename is shown.
    """
    if cwd is None:
        try:
            cwd = os.getcwd()
        except OSError:
            cwd = "unknown"
    home = (home if home is not None else str(Path.home())).rstrip("/")

    if home and (cwd == home or cwd.startswith(home + "/")):
        location = "~" + cwd[len(home):].rstrip("/")
    else:
        location = os.path.basename(cwd.rstrip("/")) or cwd

    return f"[green]dwimsh[/green][yellow]:[/yellow][blue]{escape(location)}[/blue]$ "


def render_prompt(markup: str, color: bool = True) -> str:
    """Render prompt markup to a string for ``input()``.

    Escape sequences are wrapped in ``\\001``/``\\002`` so readline leaves
    them out of the prompt width and can redraw the prompt itself.
    """
    if not color:
        return Text.from_markup(markup).plain
    buffer = io.StringIO()
    Console(file=buffer, force_terminal=True, color_system="standard", highlight=False).print(
        markup, end="", soft_wrap=True
    )
    return _SGR.sub(lambda match: f"\001{match.group(0)}\002", buffer.getvalue())


class LineEditor:
    """Reads input lines and keeps a bounded, persisted history."""

    def __init__(
        self,
        index: CommandIndex,
        history_file: str | Path,
        history_length: int = 1000,
        console: Console | None = None,
    ) -> None:
        self.history_file = Path(history_file)
        self.history_length = history_length
        self.console = console or Console()
        self.completer = CommandCompleter(index)

    def setup(self) -> None:
        """Install the completer and load saved history.

        Automatic history is turned off; only ``add`` records lines, so
        dialogue answers never enter the history.
        """
        readline.set_auto_history(False)
        readline.set_completer(self.completer.complete)
        readline.set_completer_delims(" \t\n")
        readline.parse_and_bind("tab: complete")
        readline.set_history_length(self.history_length)
        try:
            readline.read_history_file(self.history_file)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not read history file {self.history_file}: {e}")

    def save(self) -> None:
        readline.set_history_length(self.history_length)
        try:
            readline.write_history_file(self.history_file)
        except OSError as e:
            logger.warning(f"Could not write history file {self.history_file}: {e}")

    def read_line(self, prompt: str | None = None) -> str | None:
        """Read one line; None at end of input.

        KeyboardInterrupt propagates so the caller can redraw the prompt.
        """
        markup = prompt if prompt is not None else build_prompt()
        try:
            return input(render_prompt(markup, color=self.console.is_terminal))
        except EOFError:
            return None

    def add(self, line: str) -> None:
        readline.add_history(line)

    def entries(self) -> list[str]:
        """Return history lines, oldest first."""
        count = readline.get_current_history_length()
        items = (readline.get_history_item(i) for i in range(1, count + 1))
        return [item for item in items if item is not None]
