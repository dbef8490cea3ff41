"""Tests for the dispatcher and process runner."""

import signal
import sys

import pytest

from dwimsh.dispatch.builtins import BuiltinCommands, format_columns
from dwimsh.dispatch.dispatcher import DispatchStatus, Dispatcher, tokenize
from dwimsh.dispatch.process import ProcessRunner
from dwimsh.errors import SpawnError
from dwimsh.index.catalog import CommandIndex


def make_dispatcher(console, runner, names=("ls", "cat"), history=None) -> Dispatcher:
    index = CommandIndex(names)
    builtins = BuiltinCommands(console, commands=lambda: list(index), history=history)
    return Dispatcher(index, builtins, runner=runner, console=console)


class TestTokenize:
    """Test input splitting."""

    def test_spaces_and_tabs(self) -> None:
        assert tokenize("ls  -la\t/tmp") == ["ls", "-la", "/tmp"]

    def test_blank(self) -> None:
        assert tokenize("") == []
        assert tokenize(" \t ") == []


class TestDispatcher:
    """Test routing decisions."""

    def test_empty_tokens(self, console, runner) -> None:
        dispatcher = make_dispatcher(console, runner)

        assert dispatcher.resolve([]) is DispatchStatus.HANDLED
        assert runner.calls == []

    def test_external_command(self, console, runner) -> None:
        """Test an indexed command is run with the full token list."""
        dispatcher = make_dispatcher(console, runner)

        assert dispatcher.resolve(["ls", "-la"]) is DispatchStatus.HANDLED
        assert runner.calls == [["ls", "-la"]]

    def test_not_found(self, console, runner) -> None:
        dispatcher = make_dispatcher(console, runner)

        assert dispatcher.resolve(["sl"]) is DispatchStatus.NOT_FOUND
        assert runner.calls == []

    def test_case_sensitive_lookup(self, console, runner) -> None:
        dispatcher = make_dispatcher(console, runner)

        assert dispatcher.resolve(["LS"]) is DispatchStatus.NOT_FOUND

    def test_builtin_shadows_external(self, console, runner) -> None:
        """Test `list` is handled internally even if an executable has that name."""
        dispatcher = make_dispatcher(console, runner, names=("list", "ls"))

        assert dispatcher.index.contains("list")
        assert dispatcher.resolve(["list"]) is DispatchStatus.HANDLED
        assert runner.calls == []
        assert "Available commands" in console.file.getvalue()

    def test_builtin_bypasses_index(self, console, runner) -> None:
        """Test builtins work even when the index was truncated before them."""
        index = CommandIndex(["ls"], max_commands=1)
        builtins = BuiltinCommands(console, commands=lambda: list(index))
        dispatcher = Dispatcher(index, builtins, runner=runner)

        assert not index.contains("help")
        assert dispatcher.resolve(["help"]) is DispatchStatus.HANDLED
        assert "Built-in commands" in console.file.getvalue()

    def test_exit(self, console, runner) -> None:
        dispatcher = make_dispatcher(console, runner)

        assert dispatcher.resolve(["exit"]) is DispatchStatus.EXIT

    def test_builtins_follow_index(self, console, runner) -> None:
        """Test only the index's builtin names are handled internally."""
        index = CommandIndex(["history", "ls"], builtins=("exit", "help"))
        dispatcher = Dispatcher(index, BuiltinCommands(console, commands=lambda: list(index)), runner=runner)

        assert dispatcher.resolve(["help"]) is DispatchStatus.HANDLED
        assert dispatcher.resolve(["history"]) is DispatchStatus.HANDLED
        assert runner.calls == [["history"]]
        assert dispatcher.resolve(["list"]) is DispatchStatus.NOT_FOUND
        assert dispatcher.resolve(["exit"]) is DispatchStatus.EXIT

    def test_exit_without_builtins_is_external(self, console, runner) -> None:
        index = CommandIndex(["exit"], builtins=())
        dispatcher = Dispatcher(index, BuiltinCommands(console, commands=lambda: list(index)), runner=runner)

        assert dispatcher.resolve(["exit"]) is DispatchStatus.HANDLED
        assert runner.calls == [["exit"]]

    def test_history_builtin(self, console, runner) -> None:
        dispatcher = make_dispatcher(console, runner, history=lambda: ["ls", "cat x"])

        dispatcher.resolve(["history"])

        out = console.file.getvalue()
        assert "    1  ls" in out
        assert "    2  cat x" in out

    def test_spawn_failure_reported(self, console, failing_runner) -> None:
        """Test a process that cannot start is reported but still handled."""
        dispatcher = make_dispatcher(console, failing_runner)

        assert dispatcher.resolve(["cat", "file"]) is DispatchStatus.HANDLED
        assert "Command execution error" in console.file.getvalue()


class TestFormatColumns:
    """Test column layout for the list builtin."""

    def test_column_major(self) -> None:
        lines = format_columns(["a", "b", "c", "d", "e"], columns=4)

        assert lines == ["a  c  e  ", "b  d  "]

    def test_empty(self) -> None:
        assert format_columns([]) == []


class TestProcessRunner:
    """Test real process execution."""

    def test_exit_status_returned(self) -> None:
        runner = ProcessRunner()

        assert runner.run([sys.executable, "-c", "raise SystemExit(3)"]) == 3

    def test_spawn_error(self) -> None:
        runner = ProcessRunner()

        with pytest.raises(SpawnError) as exc_info:
            runner.run(["dwimsh-test-no-such-program"])

        assert exc_info.value.argv == ["dwimsh-test-no-such-program"]
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_interrupts_ignored_while_waiting(self, monkeypatch) -> None:
        """Test SIGINT is ignored during the wait and restored afterwards."""
        seen = []

        class FakeProcess:
            def __init__(self, argv) -> None:
                self.argv = argv

            def wait(self) -> int:
                seen.append(signal.getsignal(signal.SIGINT))
                return 0

        def handler(signum, frame) -> None:
            pass

        monkeypatch.setattr("dwimsh.dispatch.process.subprocess.Popen", FakeProcess)
        previous = signal.signal(signal.SIGINT, handler)
        try:
            assert ProcessRunner().run(["true"]) == 0
            assert signal.getsignal(signal.SIGINT) is handler
        finally:
            signal.signal(signal.SIGINT, previous)

        assert seen == [signal.SIG_IGN]

    def test_handler_restored_when_wait_fails(self, monkeypatch) -> None:
        class FakeProcess:
            def __init__(self, argv) -> None:
                pass

            def wait(self) -> int:
                raise OSError("wait failed")

        monkeypatch.setattr("dwimsh.dispatch.process.subprocess.Popen", FakeProcess)
        previous = signal.getsignal(signal.SIGINT)

        with pytest.raises(OSError):
            ProcessRunner().run(["true"])

        assert signal.getsignal(signal.SIGINT) is previous
