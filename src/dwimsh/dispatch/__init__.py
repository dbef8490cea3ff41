"""Command dispatch to builtins and external programs."""

from .builtins import BuiltinCommands
from .dispatcher import DispatchStatus, Dispatcher, tokenize
from .process import ProcessRunner

__all__ = ["BuiltinCommands", "DispatchStatus", "Dispatcher", "ProcessRunner", "tokenize"]
