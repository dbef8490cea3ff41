"""Command index built from the search path."""

from .catalog import BUILTIN_COMMANDS, CommandIndex

__all__ = ["BUILTIN_COMMANDS", "CommandIndex"]
