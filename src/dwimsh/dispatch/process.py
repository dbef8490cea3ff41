"""Foreground execution of external commands."""

from __future__ import annotations

import logging
import signal
import subprocess
import threading
from collections.abc import Sequence

from dwimsh.errors import SpawnError

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Starts a program and blocks until it exits.

    The program is looked up on PATH and receives ``argv`` unchanged.
    While the child runs, this process ignores SIGINT so that an
    interrupt reaches the child with its default action instead.
    """

    def run(self, argv: Sequence[str]) -> int:
        """Run ``argv`` in the foreground.

        Args:
            argv: Argument vector; argv[0] names the program

        Returns:
            The child's exit status (negative for a signal)

        Raises:
            SpawnError: If the process could not be created
        """
        argv = list(argv)
        try:
            proc = subprocess.Popen(argv)
        except OSError as e:
            raise SpawnError(argv, e) from e

        in_main_thread = threading.current_thread() is threading.main_thread()
        if in_main_thread:
            previous = signal.getsignal(signal.SIGINT)
            signal.signal(signal.SIGINT, signal.SIG_IGN)
        try:
            returncode = proc.wait()
        finally:
            if in_main_thread:
                signal.signal(signal.SIGINT, previous if previous is not None else signal.default_int_handler)

        logger.debug(f"{argv[0]} exited with status {returncode}")
        return returncode
