"""dwimsh - Do What I Mean shell with command correction."""

__version__ = "1.0.0"

# Core components - lazy imports
def __getattr__(name: str):
    """Lazy import of the main components."""
    if name == "CommandIndex":
        from dwimsh.index.catalog import CommandIndex
        return CommandIndex
    elif name == "SimilarityEngine":
        from dwimsh.recovery.similarity import SimilarityEngine
        return SimilarityEngine
    elif name == "InteractiveResolver":
        from dwimsh.recovery.resolver import InteractiveResolver
        return InteractiveResolver
    elif name == "Dispatcher":
        from dwimsh.dispatch.dispatcher import Dispatcher
        return Dispatcher
    elif name == "DwimShell":
        from dwimsh.core import DwimShell
        return DwimShell
    elif name == "ShellConfig":
        from dwimsh.config import ShellConfig
        return ShellConfig
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "CommandIndex",
    "SimilarityEngine",
    "InteractiveResolver",
    "Dispatcher",
    "DwimShell",
    "ShellConfig",
]
