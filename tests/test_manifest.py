"""Tests for resolved manifest loading."""

import json
import tempfile
from pathlib import Path

import pytest

from scanner.manifest import (
    LibraryEntry,
    ManifestError,
    has_project_file,
    load_manifest,
    parse_manifest,
    read_manifest,
)
from conftest import assets_document


class TestParseManifest:
    """Tests for turning lock file content into a manifest."""

    def test_parse_project_and_libraries(self):
        """Test reading name, version and libraries."""
        data = assets_document(
            "ProjectA",
            "1.2.3",
            {"Newtonsoft.Json/13.0.1": "package", "ProjectB/1.0.0": "project"},
        )

        manifest = parse_manifest(data)

        assert manifest.name == "ProjectA"
        assert manifest.version == "1.2.3"
        assert manifest.libraries == (
            LibraryEntry("Newtonsoft.Json", "13.0.1", "package"),
            LibraryEntry("ProjectB", "1.0.0", "project"),
        )
        assert manifest.packages == (LibraryEntry("Newtonsoft.Json", "13.0.1", "package"),)

    def test_default_version(self):
        """A project without a version is 1.0.0."""
        manifest = parse_manifest({"project": {"restore": {"projectName": "ProjectA"}}})
        assert manifest.version == "1.0.0"
        assert manifest.libraries == ()

    def test_name_falls_back_to_project_name(self):
        """Without restore metadata the project's own name is used."""
        manifest = parse_manifest({"project": {"name": "Legacy", "version": "0.1.0"}})
        assert manifest.name == "Legacy"

    def test_missing_name(self):
        """A project without any name is not an error."""
        manifest = parse_manifest({"project": {}})
        assert manifest.name is None

    def test_library_without_type(self):
        """Untyped libraries are kept but are not packages."""
        manifest = parse_manifest({"project": {}, "libraries": {"Foo/1.0.0": {}}})
        assert manifest.libraries[0].type is None
        assert manifest.packages == ()

    def test_missing_project_section(self):
        """The project section is required."""
        with pytest.raises(ManifestError, match="project"):
            parse_manifest({"version": 3, "libraries": {}})

    def test_wrong_libraries_type(self):
        """Libraries must be a mapping."""
        with pytest.raises(ManifestError, match="libraries"):
            parse_manifest({"project": {}, "libraries": ["Foo/1.0.0"]})

    def test_not_an_object(self):
        """Top-level arrays are rejected."""
        with pytest.raises(ManifestError, match="<root>"):
            parse_manifest([])


class TestLoadManifest:
    """Tests for locating manifests on disk."""

    def test_no_project_file(self):
        """Directories without a project file have no manifest."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "obj").mkdir()
            (root / "obj" / "project.assets.json").write_text(json.dumps(assets_document("A", "1.0.0")))

            assert not has_project_file(root)
            assert load_manifest(root) is None

    def test_project_not_restored(self, make_project):
        """A project without obj/project.assets.json has no manifest."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = make_project(Path(tmpdir), "ProjectA", restored=False)

            assert has_project_file(root)
            assert load_manifest(root) is None

    def test_csproj(self, make_project):
        """Test loading a restored C# project."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = make_project(Path(tmpdir), "ProjectA", "2.0.0", {"Serilog/3.1.1": "package"})

            manifest = load_manifest(root)

            assert manifest is not None
            assert manifest.name == "ProjectA"
            assert manifest.version == "2.0.0"

    def test_vbproj(self, make_project):
        """Visual Basic projects are recognized too."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = make_project(Path(tmpdir), "VbProject", extension=".vbproj")
            assert load_manifest(root).name == "VbProject"

    def test_other_project_types_ignored(self, make_project):
        """Only .csproj and .vbproj count as project files."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = make_project(Path(tmpdir), "FsProject", extension=".fsproj")
            assert load_manifest(root) is None

    def test_invalid_json(self, make_project):
        """Malformed manifests raise with the offending path."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = make_project(Path(tmpdir), "ProjectA")
            assets = root / "obj" / "project.assets.json"
            assets.write_text("{ not json")

            with pytest.raises(ManifestError, match="invalid JSON") as excinfo:
                load_manifest(root)
            assert excinfo.value.path == assets

    def test_schema_error_carries_path(self):
        """Schema violations are reported against the file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            assets = Path(tmpdir) / "project.assets.json"
            assets.write_text(json.dumps({"libraries": {}}))

            with pytest.raises(ManifestError) as excinfo:
                read_manifest(assets)
            assert str(assets) in str(excinfo.value)

    def test_inaccessible_project_file(self, make_project, monkeypatch):
        """A project file that cannot be stat'ed does not count."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = make_project(Path(tmpdir), "ProjectA")

            original = Path.is_file

            def fake_is_file(self):
                if self.suffix == ".csproj":
                    raise PermissionError("denied")
                return original(self)

            monkeypatch.setattr(Path, "is_file", fake_is_file)

            assert not has_project_file(root)
            assert load_manifest(root) is None

    def test_inaccessible_manifest(self, make_project, monkeypatch):
        """A manifest that cannot be reached is a manifest error."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = make_project(Path(tmpdir), "ProjectA")

            original = Path.is_file

            def fake_is_file(self):
                if self.name == "project.assets.json":
                    raise PermissionError("denied")
                return original(self)

            monkeypatch.setattr(Path, "is_file", fake_is_file)

            with pytest.raises(ManifestError, match="cannot access manifest"):
                load_manifest(root)

    def test_byte_order_mark(self):
        """Files written with a UTF-8 BOM are accepted."""
        with tempfile.TemporaryDirectory() as tmpdir:
            assets = Path(tmpdir) / "project.assets.json"
            assets.write_text(json.dumps(assets_document("A", "1.0.0")), encoding="utf-8-sig")

            assert read_manifest(assets).name == "A"
