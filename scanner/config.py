"""
Configuration for discovery runs.

Settings can come from a YAML file, for example::

    root: src
    recurse: true
    inbound: false
    include-projects: Contoso.
    exclude-packages:
      - Microsoft.
      - System.

Keys may use hyphens or underscores. Filter values are either a
comma-separated string or a list. Values given on the command line override
the file.
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from graph.model import DiscoveryMode
from .filters import NamespaceFilter


CONFIG_PATH_ENV_VAR = "DEPMAP_CONFIG"

FILTER_KEYS = ("include_packages", "exclude_packages", "include_projects", "exclude_projects")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(frozen=True)
class DiscoveryConfig:
    """Inputs of one discovery run."""

    root: str = "."
    recurse: bool = True
    inbound: bool = False
    include_packages: Optional[str] = None
    exclude_packages: Optional[str] = None
    include_projects: Optional[str] = None
    exclude_projects: Optional[str] = None
    exclude_dirs: Tuple[str, ...] = ()
    max_depth: Optional[int] = None

    @property
    def mode(self) -> DiscoveryMode:
        return DiscoveryMode.INBOUND if self.inbound else DiscoveryMode.OUTBOUND

    def project_filter(self) -> NamespaceFilter:
        return NamespaceFilter.for_projects(self.include_projects, self.exclude_projects)

    def package_filter(self) -> NamespaceFilter:
        return NamespaceFilter.for_packages(self.include_packages, self.exclude_packages)

    def merge(self, **overrides: Any) -> "DiscoveryConfig":
        """Return a copy with every override that is not None applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "exclude_dirs" in changes:
            changes["exclude_dirs"] = tuple(changes["exclude_dirs"])
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiscoveryConfig":
        """Create a DiscoveryConfig from a mapping, validating every field."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}

        for raw_key, value in data.items():
            key = str(raw_key).replace("-", "_")
            if key not in known:
                raise ConfigError(f"Unknown configuration key '{raw_key}'")
            if value is None:
                continue

            if key in ("recurse", "inbound"):
                if not isinstance(value, bool):
                    raise ConfigError(f"'{raw_key}' must be a boolean")
            elif key == "root":
                if not isinstance(value, str):
                    raise ConfigError(f"'{raw_key}' must be a string")
            elif key == "max_depth":
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    raise ConfigError(f"'{raw_key}' must be a non-negative integer")
            elif key == "exclude_dirs":
                value = _as_list(raw_key, value)
            elif key in FILTER_KEYS:
                if isinstance(value, list):
                    value = ",".join(_as_list(raw_key, value))
                elif not isinstance(value, str):
                    raise ConfigError(f"'{raw_key}' must be a string or a list of strings")

            values[key] = value

        return cls().merge(**values)


def _as_list(key: Any, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a string or a list of strings")
    return tuple(value)


def load_config(path: Optional[Path] = None) -> DiscoveryConfig:
    """
    Load discovery settings from a YAML file.

    Args:
        path: Config file. When None, the file named by the DEPMAP_CONFIG
              environment variable is used; without it, defaults apply.

    Returns:
        The loaded configuration.

    Raises:
        ConfigError: If the file cannot be read or holds invalid settings.
    """
    if path is None:
        env_path = os.getenv(CONFIG_PATH_ENV_VAR, "").strip()
        if not env_path:
            return DiscoveryConfig()
        path = Path(env_path)

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return DiscoveryConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    return DiscoveryConfig.from_dict(data)
