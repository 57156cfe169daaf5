"""Configuration loading and validation."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from defdeploy.errors import ConfigError, ConfigNotFoundError

__all__ = ["Config", "DEFAULTS"]

DEFAULTS: dict[str, Any] = {
    "definitions": {
        "root": "META-INF/cxs/",
        "extension": ".json",
    },
    "modules": {
        "dirs": ["./modules"],
    },
    "prompt": {
        # None keeps asking until a valid answer is given
        "max_attempts": None,
    },
    "services": {
        "factory": None,
    },
    "logging": {
        "level": "WARNING",
    },
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Configuration accessor with dot-path key support.

    Values passed in ``data`` are layered over :data:`DEFAULTS`.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = _deep_merge(copy.deepcopy(DEFAULTS), data or {})
        self._validate()

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """Load a YAML configuration file.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the file is not valid YAML or not a mapping.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigNotFoundError(config_path=str(path))

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in configuration file: {path}", cause=e) from e

        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise ConfigError(message=f"Configuration file must be a YAML mapping: {path}")
        return cls(parsed)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-path key, creating sections as needed."""
        parts = key.split(".")
        current = self._data
        for part in parts[:-1]:
            nxt = current.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                current[part] = nxt
            current = nxt
        current[parts[-1]] = value
        self._validate()

    def _validate(self) -> None:
        root = self.get("definitions.root")
        if not isinstance(root, str) or not root:
            raise ConfigError(message="definitions.root must be a non-empty string")
        if not root.endswith("/"):
            self._data["definitions"]["root"] = root + "/"

        extension = self.get("definitions.extension")
        if not isinstance(extension, str) or not extension.startswith("."):
            raise ConfigError(message="definitions.extension must be a string starting with '.'")

        dirs = self.get("modules.dirs")
        if isinstance(dirs, str):
            self._data["modules"]["dirs"] = [dirs]
        elif not isinstance(dirs, list):
            raise ConfigError(message="modules.dirs must be a list of paths")

        max_attempts = self.get("prompt.max_attempts")
        if max_attempts is not None and (
            isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1
        ):
            raise ConfigError(message="prompt.max_attempts must be a positive integer or null")
