"""Scanner module for project discovery and dependency graph construction."""

from .discovery import iter_directories
from .filters import NamespaceFilter
from .manifest import ManifestError, load_manifest, parse_manifest
from .builder import build_graph, discover
from .config import ConfigError, DiscoveryConfig, load_config

__all__ = [
    "iter_directories",
    "NamespaceFilter",
    "ManifestError",
    "load_manifest",
    "parse_manifest",
    "build_graph",
    "discover",
    "ConfigError",
    "DiscoveryConfig",
    "load_config",
]
