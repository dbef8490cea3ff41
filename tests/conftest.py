"""Shared fixtures."""

from __future__ import annotations

import io
import os
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

import pytest
from rich.console import Console

from dwimsh.errors import SpawnError


class FakeRunner:
    """Records argv instead of starting processes."""

    def __init__(self, error: OSError | None = None) -> None:
        self.calls: list[list[str]] = []
        self.error = error

    def run(self, argv: Sequence[str]) -> int:
        self.calls.append(list(argv))
        if self.error is not None:
            raise SpawnError(list(argv), self.error)
        return 0


class FakeEditor:
    """Serves scripted input lines and keeps history in memory."""

    def __init__(self, lines: Iterable[str | BaseException] = ()) -> None:
        self.lines = list(lines)
        self.history: list[str] = []
        self.setup_called = False
        self.saved = False

    def setup(self) -> None:
        self.setup_called = True

    def save(self) -> None:
        self.saved = True

    def read_line(self, prompt: str | None = None) -> str | None:
        if not self.lines:
            return None
        line = self.lines.pop(0)
        if isinstance(line, BaseException):
            raise line
        return line

    def add(self, line: str) -> None:
        self.history.append(line)

    def entries(self) -> list[str]:
        return list(self.history)


def scripted_reader(responses: Iterable[str]) -> Callable[[str], str | None]:
    """Reader returning each response in turn, then None (end of input)."""
    pending = list(responses)

    def read(prompt: str) -> str | None:
        read.prompts.append(prompt)
        return pending.pop(0) if pending else None

    read.prompts = []
    return read


@pytest.fixture
def console() -> Console:
    """Console writing plain text to a buffer."""
    return Console(file=io.StringIO(), force_terminal=False, color_system=None, width=200)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def failing_runner() -> FakeRunner:
    return FakeRunner(error=FileNotFoundError(2, "No such file or directory"))


@pytest.fixture
def make_reader() -> Callable[[Iterable[str]], Callable[[str], str | None]]:
    return scripted_reader


@pytest.fixture
def make_editor() -> Callable[..., FakeEditor]:
    return FakeEditor


@pytest.fixture
def make_bin(tmp_path: Path) -> Callable[..., Path]:
    """Create a directory holding files with the given names and modes."""

    def make(name: str, executables: Iterable[str] = (), plain: Iterable[str] = ()) -> Path:
        directory = tmp_path / name
        directory.mkdir()
        for exe in executables:
            path = directory / exe
            path.write_text("#!/bin/sh\n")
            os.chmod(path, 0o755)
        for other in plain:
            path = directory / other
            path.write_text("data\n")
            os.chmod(path, 0o644)
        return directory

    return make
