"""Loading of resolved NuGet manifests (obj/project.assets.json)."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from jsonschema import Draft202012Validator


logger = logging.getLogger(__name__)

PROJECT_FILE_EXTENSIONS = (".csproj", ".vbproj")
ASSETS_DIRECTORY = "obj"
ASSETS_FILE_NAME = "project.assets.json"
DEFAULT_PROJECT_VERSION = "1.0.0"
PACKAGE_TYPE = "package"

# Only the parts of the lock file format that discovery reads.
ASSETS_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["project"],
    "properties": {
        "version": {"type": "integer"},
        "libraries": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "type": {"type": "string"},
                },
            },
        },
        "project": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "version": {"type": "string"},
                "restore": {
                    "type": "object",
                    "properties": {
                        "projectName": {"type": "string"},
                    },
                },
            },
        },
    },
}

_validator = Draft202012Validator(ASSETS_SCHEMA)


class ManifestError(ValueError):
    """Raised when a resolved manifest cannot be read or is malformed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class LibraryEntry:
    """One resolved library of a project (package, project, ...)."""

    name: str
    version: str
    type: Optional[str] = None

    @property
    def is_package(self) -> bool:
        return self.type == PACKAGE_TYPE


@dataclass(frozen=True)
class ResolvedManifest:
    """Flattened view of a project.assets.json file."""

    name: Optional[str]
    version: str
    libraries: Tuple[LibraryEntry, ...] = ()

    @property
    def packages(self) -> Tuple[LibraryEntry, ...]:
        return tuple(library for library in self.libraries if library.is_package)


def has_project_file(directory: Path) -> bool:
    """Check if a directory directly contains a .csproj or .vbproj file."""
    for extension in PROJECT_FILE_EXTENSIONS:
        for entry in directory.glob(f"*{extension}"):
            try:
                if entry.is_file():
                    return True
            except OSError as e:
                logger.warning("Skipping inaccessible entry %s: %s", entry, e)
    return False


def assets_path(directory: Path) -> Path:
    return directory / ASSETS_DIRECTORY / ASSETS_FILE_NAME


def load_manifest(directory: Path) -> Optional[ResolvedManifest]:
    """
    Load the resolved manifest of a project directory.

    Args:
        directory: Directory that may hold a project file.

    Returns:
        The parsed manifest, or None if the directory has no project file
        or the project has not been restored.

    Raises:
        ManifestError: If the manifest exists but cannot be read or parsed.
    """
    if not has_project_file(directory):
        return None

    path = assets_path(directory)
    try:
        restored = path.is_file()
    except OSError as e:
        raise ManifestError(f"cannot access manifest: {e}", path) from e
    if not restored:
        logger.debug("No %s under %s", ASSETS_FILE_NAME, directory)
        return None

    return read_manifest(path)


def read_manifest(path: Path) -> ResolvedManifest:
    """Read and parse a project.assets.json file."""
    try:
        content = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"cannot read manifest: {e}", path) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestError(f"invalid JSON: {e}", path) from e

    try:
        return parse_manifest(data)
    except ManifestError as e:
        raise ManifestError(str(e), path) from e


def parse_manifest(data: Any) -> ResolvedManifest:
    """
    Build a ResolvedManifest from decoded project.assets.json content.

    Raises:
        ManifestError: If the content does not match the lock file layout.
    """
    errors = sorted(_validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        raise ManifestError(_format_errors(errors))

    project = data["project"]
    restore = project.get("restore") or {}
    name = restore.get("projectName") or project.get("name")
    version = project.get("version") or DEFAULT_PROJECT_VERSION

    libraries = tuple(
        _parse_library(key, meta) for key, meta in (data.get("libraries") or {}).items()
    )
    return ResolvedManifest(name=name, version=version, libraries=libraries)


def _parse_library(key: str, meta: Dict[str, Any]) -> LibraryEntry:
    # Keys are "<name>/<version>"; package ids never contain a slash.
    name, _, version = key.partition("/")
    return LibraryEntry(name=name, version=version, type=meta.get("type"))


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"{pointer or '<root>'}: {error.message}")
    return "; ".join(messages)
