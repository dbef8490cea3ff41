"""Interactive accept/reject dialogue over recommendations."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from rich.console import Console
from rich.markup import escape

from dwimsh.dispatch.dispatcher import DispatchStatus, Dispatcher, tokenize

logger = logging.getLogger(__name__)

YES_RESPONSES = frozenset({"y", "yes", "yeah", "yep", "sure", "ok", "okay"})
NO_RESPONSES = frozenset({"n", "no", "nope", "nah"})


def is_yes(response: str) -> bool:
    return response.strip().lower() in YES_RESPONSES


def is_no(response: str) -> bool:
    return response.strip().lower() in NO_RESPONSES


class ResolutionState(Enum):
    """Terminal states of a dialogue."""

    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"
    EOF = "eof"


@dataclass
class Resolution:
    """Outcome of one dialogue."""

    state: ResolutionState
    index: int | None = None
    command: list[str] | None = None
    status: DispatchStatus | None = None

    @property
    def shutdown_requested(self) -> bool:
        """True if the shell should stop after this dialogue."""
        return self.state is ResolutionState.EOF or self.status is DispatchStatus.EXIT


# Returns the next response line, or None at end of input.
ResponseReader = Callable[[str], str | None]


def console_reader(console: Console) -> ResponseReader:
    """Read responses from the console, mapping EOF to None."""

    def read(prompt: str) -> str | None:
        while True:
            try:
                return console.input(prompt)
            except EOFError:
                return None
            except KeyboardInterrupt:
                console.print()

    return read


class InteractiveResolver:
    """Offers each candidate in turn until one is accepted.

    Accepting a candidate rebuilds the command line from the candidate and
    the original arguments and resolves it once more. Candidates come from
    the command index, so that second resolution never reports NOT_FOUND.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        console: Console | None = None,
        reader: ResponseReader | None = None,
        tokenizer: Callable[[str], list[str]] = tokenize,
    ) -> None:
        self.dispatcher = dispatcher
        self.console = console or Console()
        self.reader = reader or console_reader(self.console)
        self.tokenize = tokenizer

    def resolve(
        self,
        candidates: Sequence[str],
        tokens: Sequence[str],
        scores: Sequence[float] | None = None,
    ) -> Resolution:
        """Run the dialogue.

        Args:
            candidates: Deduplicated candidate names
            tokens: The token sequence that failed to resolve
            scores: Optional similarity per candidate, shown to the operator

        Returns:
            Resolution describing how the dialogue ended
        """
        arguments = list(tokens[1:])
        i = 0
        while i < len(candidates):
            line = " ".join([candidates[i], *arguments])
            hint = f" [dim]({scores[i]:.0%})[/dim]" if scores else ""
            prompt = f'[cyan]Did you mean: "[bold]{escape(line)}[/bold]"?{hint} \\[y/n] [/cyan]'

            response = self.reader(prompt)
            if response is None:
                logger.debug(f"End of input while presenting candidate {i}")
                self.console.print()
                return Resolution(ResolutionState.EOF, index=i)

            if is_yes(response):
                logger.debug(f"Accepted candidate {i}: {candidates[i]}")
                self.console.print(f"[green]Executing: {escape(line)}[/green]")
                command = self.tokenize(line)
                status = self.dispatcher.resolve(command)
                return Resolution(ResolutionState.ACCEPTED, index=i, command=command, status=status)

            if is_no(response):
                i += 1
                continue

            self.console.print("[red]Please enter 'y' or 'n'.[/red]")

        self.console.print("[yellow]No more suggestions.[/yellow]")
        return Resolution(ResolutionState.EXHAUSTED)
