"""Exception types for dwimsh."""

from __future__ import annotations


class DwimshError(Exception):
    """Base exception for dwimsh."""


class ConfigError(DwimshError):
    """Raised when configuration values are invalid."""


class SpawnError(DwimshError):
    """Raised when an external command could not be started."""

    def __init__(self, argv: list[str], cause: OSError) -> None:
        self.argv = list(argv)
        self.cause = cause
        super().__init__(f"{argv[0] if argv else '<empty>'}: {cause.strerror or cause}")
