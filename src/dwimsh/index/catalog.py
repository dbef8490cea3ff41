"""Command index - snapshot of executable names found on the search path."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Sequence

logger = logging.getLogger(__name__)

# Declaration order matters: builtins are appended after the sorted region.
BUILTIN_COMMANDS: tuple[str, ...] = ("exit", "help", "clear", "list", "history")

DEFAULT_MAX_COMMANDS = 2048


def scan_directory(directory: str) -> Iterator[str]:
    """Yield executable basenames in a directory, in directory order.

    An entry qualifies if it is a regular file or a symbolic link and the
    current user may execute it. Unreadable directories yield nothing.
    """
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    if not (entry.is_file(follow_symlinks=False) or entry.is_symlink()):
                        continue
                except OSError:
                    continue
                if os.access(entry.path, os.X_OK):
                    yield entry.name
    except OSError as e:
        logger.debug(f"Skipping unreadable directory {directory}: {e}")


class CommandIndex:
    """Immutable, ordered snapshot of command names.

    Discovered names come first, sorted by byte value and not
    deduplicated; builtin names follow in declaration order. The total
    size never exceeds ``max_commands``.
    """

    def __init__(
        self,
        names: Iterable[str],
        builtins: Sequence[str] = BUILTIN_COMMANDS,
        max_commands: int = DEFAULT_MAX_COMMANDS,
    ) -> None:
        discovered: list[str] = []
        self.truncated = False

        for name in names:
            if len(discovered) >= max_commands:
                self.truncated = True
                break
            discovered.append(name)

        discovered.sort(key=os.fsencode)

        for name in builtins:
            if len(discovered) >= max_commands:
                self.truncated = True
                break
            discovered.append(name)

        self._names: tuple[str, ...] = tuple(discovered)
        self.builtins: tuple[str, ...] = tuple(builtins)
        self.max_commands = max_commands

        if self.truncated:
            logger.debug(f"Command index truncated at {max_commands} entries")

    @classmethod
    def build(
        cls,
        search_path: Iterable[str],
        builtins: Sequence[str] = BUILTIN_COMMANDS,
        max_commands: int = DEFAULT_MAX_COMMANDS,
    ) -> CommandIndex:
        """Scan every directory in the search path and build an index.

        Args:
            search_path: Directories in lookup order
            builtins: Builtin names appended after sorting
            max_commands: Capacity cap; extra entries are dropped silently

        Returns:
            CommandIndex instance
        """

        def discover() -> Iterator[str]:
            for directory in search_path:
                yield from scan_directory(directory)

        index = cls(discover(), builtins=builtins, max_commands=max_commands)
        logger.info(f"Indexed {len(index)} commands (truncated={index.truncated})")
        return index

    def contains(self, name: str) -> bool:
        """Exact, case-sensitive membership test."""
        if not name:
            return False
        return any(entry == name for entry in self._names)

    def prefix_matches(self, prefix: str) -> Iterator[str]:
        """Lazily yield entries starting with ``prefix``.

        Each call returns a fresh iterator, so a consumer may restart the
        sequence by calling again.
        """
        return (name for name in self._names if name.startswith(prefix))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __getitem__(self, position: int) -> str:
        return self._names[position]

    def __repr__(self) -> str:
        return f"CommandIndex(size={len(self._names)}, truncated={self.truncated})"
