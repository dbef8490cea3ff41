"""Shell configuration."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from dwimsh.errors import ConfigError

logger = logging.getLogger(__name__)

HISTORY_FILE = ".dwimsh_history"


def _default_search_path() -> list[str]:
    return split_search_path(os.getenv("PATH", ""))


def split_search_path(value: str) -> list[str]:
    """Split a PATH-style string, dropping empty components."""
    return [part for part in value.split(os.pathsep) if part]


@dataclass
class ShellConfig:
    """Configuration for a shell session."""

    # Command discovery
    search_path: list[str] = field(default_factory=_default_search_path)
    max_commands: int = 2048

    # Recommendations
    max_recommendations: int = 100
    levenshtein_threshold: float = 0.4
    hamming_ratio: float = 0.5
    min_candidate_length: int = 2

    # History
    history_file: Path = field(default_factory=lambda: Path.home() / HISTORY_FILE)
    history_length: int = 1000

    show_banner: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.history_file, (str, os.PathLike)):
            raise ConfigError("history_file must be a path")
        self.history_file = Path(self.history_file).expanduser()
        for name in ("max_commands", "max_recommendations", "history_length"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{name} must be a positive integer")
        for name in ("levenshtein_threshold", "hamming_ratio"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be between 0 and 1")
        length = self.min_candidate_length
        if not isinstance(length, int) or isinstance(length, bool) or length < 0:
            raise ConfigError("min_candidate_length must be a non-negative integer")
        if not isinstance(self.search_path, list) or not all(isinstance(d, str) for d in self.search_path):
            raise ConfigError("search_path must be a list of directories")
        if not isinstance(self.show_banner, bool):
            raise ConfigError("show_banner must be true or false")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> ShellConfig:
        """Build a config from DWIMSH_* environment variables.

        Args:
            environ: Environment mapping (defaults to os.environ)
            **overrides: Explicit values that take precedence

        Returns:
            ShellConfig instance
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        if "DWIMSH_PATH" in env:
            values["search_path"] = split_search_path(env["DWIMSH_PATH"])
        elif "PATH" in env:
            values["search_path"] = split_search_path(env["PATH"])

        int_vars = {
            "DWIMSH_MAX_COMMANDS": "max_commands",
            "DWIMSH_MAX_RECOMMENDATIONS": "max_recommendations",
            "DWIMSH_HISTORY_LENGTH": "history_length",
        }
        for var, name in int_vars.items():
            if var in env:
                try:
                    values[name] = int(env[var])
                except ValueError:
                    raise ConfigError(f"{var} must be an integer, got {env[var]!r}") from None

        if "DWIMSH_HISTORY_FILE" in env:
            values["history_file"] = Path(env["DWIMSH_HISTORY_FILE"])

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @classmethod
    def from_file(cls, path: str | Path, **overrides: Any) -> ShellConfig:
        """Load a config from a JSON file, layered over the environment."""
        path = Path(path)
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")

        if isinstance(data.get("search_path"), str):
            data["search_path"] = split_search_path(data["search_path"])

        logger.debug(f"Loaded config from {path}: {sorted(data)}")
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_env(**data)
