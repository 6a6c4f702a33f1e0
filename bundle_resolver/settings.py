"""Settings management for bundle-resolver.

Simple, scope-aware YAML settings. The ``bundler`` section of the merged
settings is validated into BundlerOptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml
from pydantic import AliasChoices
from pydantic import ValidationError

from .errors import ConfigError
from .options import BundlerOptions

logger = logging.getLogger(__name__)

Scope = Literal["local", "project", "global"]

SETTINGS_DIR = ".bundle-resolver"


def option_keys() -> set[str]:
    """Keys accepted in the bundler section, including camelCase aliases."""
    keys = set()
    for name, info in BundlerOptions.model_fields.items():
        keys.add(name)
        if isinstance(info.validation_alias, AliasChoices):
            keys.update(choice for choice in info.validation_alias.choices if isinstance(choice, str))
    return keys


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths for the standard layout."""
        return cls(
            global_settings=Path.home() / SETTINGS_DIR / "settings.yaml",
            project_settings=Path.cwd() / SETTINGS_DIR / "settings.yaml",
            local_settings=Path.cwd() / SETTINGS_DIR / "settings.local.yaml",
        )


class BundlerSettings:
    """Scope-aware settings with deep merging.

    Scope priority (most specific wins):
    1. local (.bundle-resolver/settings.local.yaml) - gitignored, machine-specific
    2. project (.bundle-resolver/settings.yaml) - committed, team-shared
    3. global (~/.bundle-resolver/settings.yaml) - user defaults

    An explicit config file passed to load_options() overrides all scopes.

    Usage:
        settings = BundlerSettings()
        options = settings.load_options()
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self, extra_file: Path | None = None) -> dict[str, Any]:
        """Load and merge settings from all scopes, then extra_file if given."""
        result: dict[str, Any] = {}
        for path in [self.paths.global_settings, self.paths.project_settings, self.paths.local_settings]:
            result = self._deep_merge(result, self._read_file(path))
        if extra_file is not None:
            if not extra_file.exists():
                raise ConfigError(f"Config file not found: {extra_file}")
            result = self._deep_merge(result, self._read_file(extra_file))
        return result

    def load_options(self, extra_file: Path | None = None) -> BundlerOptions:
        """Build BundlerOptions from the merged ``bundler`` section.

        Raises:
            ConfigError: Unreadable YAML or options that fail validation
        """
        settings = self.get_merged_settings(extra_file)
        section = settings.get("bundler") or {}
        if not isinstance(section, dict):
            raise ConfigError("'bundler' settings must be a mapping")
        try:
            return BundlerOptions.model_validate(section)
        except ValidationError as e:
            raise ConfigError(f"Invalid bundler settings:\n{e}") from e

    def set_option(self, key: str, value: Any, scope: Scope = "project") -> None:
        """Set a key in the bundler section at the given scope.

        Raises:
            ConfigError: Unknown key or a value the option does not accept
        """
        if key not in option_keys():
            raise ConfigError(f"Unknown bundler option '{key}'")
        try:
            BundlerOptions.model_validate({key: value})
        except ValidationError as e:
            raise ConfigError(f"Invalid value for bundler.{key}:\n{e}") from e

        path = self._get_scope_path(scope)
        settings = self._read_file(path)
        settings = self._deep_merge(settings, {"bundler": {key: value}})
        self._write_file(path, settings)
        logger.info(f"Set bundler.{key} in {scope} settings")

    # ----- Scope utilities -----

    def _get_scope_path(self, scope: Scope) -> Path:
        return {
            "local": self.paths.local_settings,
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_file(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                content = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read settings from {path}: {e}") from e
        if not isinstance(content, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")
        return content

    def _write_file(self, path: Path, settings: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(settings, f, default_flow_style=False, sort_keys=False)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries; overlay takes precedence."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
