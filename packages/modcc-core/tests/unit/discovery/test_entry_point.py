"""Unit tests for package.json loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from modcc_core.discovery.entry_point import get_entry_point_info, read_package_json
from modcc_core.errors import DiscoveryError
from modcc_core.models import EntryPointFormat


class TestReadPackageJson:
    """Tests for read_package_json."""

    def test_reads_object(self, tmp_path: Path) -> None:
        """A JSON object is returned as a dict."""
        manifest = tmp_path / "package.json"
        manifest.write_text('{"name": "a"}')
        assert read_package_json(manifest) == {"name": "a"}

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Malformed JSON raises DiscoveryError with the location."""
        manifest = tmp_path / "package.json"
        manifest.write_text('{"name": ')
        with pytest.raises(DiscoveryError, match="Invalid JSON in package manifest") as exc_info:
            read_package_json(manifest)
        assert exc_info.value.path == str(manifest)

    def test_non_object(self, tmp_path: Path) -> None:
        """A JSON array is not a manifest."""
        manifest = tmp_path / "package.json"
        manifest.write_text("[]")
        with pytest.raises(DiscoveryError, match="must be a JSON object"):
            read_package_json(manifest)

    def test_missing_file(self, tmp_path: Path) -> None:
        """An unreadable manifest raises DiscoveryError."""
        with pytest.raises(DiscoveryError, match="Cannot read package manifest"):
            read_package_json(tmp_path / "package.json")


class TestGetEntryPointInfo:
    """Tests for get_entry_point_info."""

    def test_primary_entry_point(self, node_modules: Path, write_package: Any) -> None:
        """A typed package becomes an entry point with resolved format paths."""
        package = write_package(node_modules, "@angular/common", formats=("fesm2015", "esm5"))

        entry_point = get_entry_point_info(node_modules, package, package)

        assert entry_point is not None
        assert entry_point.name == "@angular/common"
        assert entry_point.package_path == package
        assert entry_point.typings == package / "common.d.ts"
        assert set(entry_point.format_paths) == {EntryPointFormat.FESM2015, EntryPointFormat.ESM5}
        fesm2015 = entry_point.format_path(EntryPointFormat.FESM2015)
        assert fesm2015 == package / "fesm2015" / "common.js"

    def test_no_manifest(self, tmp_path: Path) -> None:
        """A folder without package.json is not an entry point."""
        assert get_entry_point_info(tmp_path, tmp_path, tmp_path) is None

    def test_untyped_package(self, node_modules: Path, write_package: Any) -> None:
        """A package without typings is not an entry point."""
        package = write_package(node_modules, "left-pad", typings=False)
        assert get_entry_point_info(node_modules, package, package) is None

    def test_types_alias(self, node_modules: Path, write_package: Any) -> None:
        """The "types" property is accepted in place of "typings"."""
        package = write_package(
            node_modules, "a", typings=False, formats=(), extra={"types": "index.d.ts"}
        )
        entry_point = get_entry_point_info(node_modules, package, package)
        assert entry_point is not None
        assert entry_point.typings == package / "index.d.ts"
        assert entry_point.format_paths == {}

    def test_linked_package_keeps_node_modules_paths(
        self, tmp_path: Path, node_modules: Path, write_package: Any
    ) -> None:
        """Format and typings paths of a symlinked package stay under node_modules."""
        write_package(tmp_path / "workspace", "linked")
        package = node_modules / "linked"
        package.symlink_to(tmp_path / "workspace" / "linked", target_is_directory=True)

        entry_point = get_entry_point_info(node_modules, package, package)

        assert entry_point is not None
        assert entry_point.typings == package / "linked.d.ts"
        assert entry_point.format_path(EntryPointFormat.ESM2015) == package / "esm2015" / "index.js"

    def test_name_falls_back_to_relative_path(
        self, node_modules: Path, write_package: Any
    ) -> None:
        """Secondary manifests without a name are named by their location."""
        package = write_package(node_modules, "@angular/common")
        http = package / "http"
        http.mkdir()
        (http / "package.json").write_text('{"typings": "http.d.ts"}')

        entry_point = get_entry_point_info(node_modules, package, http)

        assert entry_point is not None
        assert entry_point.name == "@angular/common/http"
        assert entry_point.package_path == package
