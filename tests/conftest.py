"""Shared fixtures for building restored project trees on disk."""

import json
from pathlib import Path
from typing import Dict, Optional

import pytest


def assets_document(name: str, version: str, libraries: Optional[Dict[str, str]] = None) -> dict:
    """Build a minimal project.assets.json document.

    Args:
        name: Project name (restore.projectName).
        version: Project version.
        libraries: Mapping of "<name>/<version>" to library type.
    """
    return {
        "version": 3,
        "targets": {"net8.0": {}},
        "libraries": {
            key: {"type": kind, "path": key.lower()}
            for key, kind in (libraries or {}).items()
        },
        "project": {
            "version": version,
            "restore": {
                "projectUniqueName": f"/src/{name}/{name}.csproj",
                "projectName": name,
            },
        },
    }


@pytest.fixture
def make_project():
    """Factory writing a project file and, optionally, its restored manifest."""

    def _make(
        directory: Path,
        name: str,
        version: str = "1.0.0",
        libraries: Optional[Dict[str, str]] = None,
        extension: str = ".csproj",
        restored: bool = True,
    ) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / f"{name}{extension}").write_text("<Project Sdk=\"Microsoft.NET.Sdk\" />")
        if restored:
            obj = directory / "obj"
            obj.mkdir(exist_ok=True)
            (obj / "project.assets.json").write_text(
                json.dumps(assets_document(name, version, libraries)),
                encoding="utf-8",
            )
        return directory

    return _make
