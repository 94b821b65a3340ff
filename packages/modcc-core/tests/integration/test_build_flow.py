"""Integration tests for a full build over an installed package tree.

These run the default filesystem collaborators (finder, markers, bundle
resolver, mirror transformer) end to end against a temporary tree.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from modcc_core import BuildSettings, FormatOutcome, run_build
from modcc_core.markers import marker_file_name
from modcc_core.models import EntryPointFormat

pytestmark = pytest.mark.integration


@pytest.fixture
def tree(node_modules: Path, write_package: Any) -> Path:
    """A small Angular-like tree with a secondary entry point and an ES5-only package."""
    write_package(node_modules, "@angular/core", imports=("tslib",))
    write_package(node_modules, "@angular/common", peer_dependencies={"@angular/core": "^9"})
    write_package(node_modules, "@angular/common/http", imports=("@angular/common",))
    write_package(node_modules, "legacy", formats=("esm5",))
    (node_modules / "tslib").mkdir()
    (node_modules / "tslib" / "tslib.js").write_text("module.exports = {};\n")
    return node_modules


class TestBuildFlow:
    """End-to-end build runs."""

    def test_build_into_separate_target(self, tree: Path, tmp_path: Path) -> None:
        """A first run builds every shipped format and marks every pair."""
        target = tmp_path / "dist"
        settings = BuildSettings(source=tree, target=target, formats=["fesm2015", "esm5"])

        result = run_build(settings)

        assert result.succeeded, result.error
        order = list(dict.fromkeys(r.entry_point for r in result.results))
        assert order == ["@angular/core", "@angular/common", "@angular/common/http", "legacy"]
        assert result.count(FormatOutcome.BUILT) == 7
        assert result.count(FormatOutcome.ABSENT) == 1

        assert (target / "@angular" / "core" / "fesm2015" / "core.js").is_file()
        assert (target / "@angular" / "core" / "core.d.ts").is_file()
        assert (target / "legacy" / "esm5" / "index.js").is_file()
        # legacy ships no fesm2015, so its absence is recorded rather than built
        assert (target / "legacy" / marker_file_name(EntryPointFormat.FESM2015)).is_file()
        assert not (tree / "legacy" / marker_file_name(EntryPointFormat.FESM2015)).exists()

    def test_linked_package_into_separate_target(
        self, tree: Path, tmp_path: Path, write_package: Any
    ) -> None:
        """A symlinked package builds into the target under its link name."""
        write_package(tmp_path / "workspace", "linked")
        (tree / "linked").symlink_to(tmp_path / "workspace" / "linked", target_is_directory=True)
        target = tmp_path / "dist"

        result = run_build(BuildSettings(source=tree, target=target, formats=["esm2015"]))

        assert result.succeeded, result.error
        built = {r.entry_point for r in result.results if r.outcome is FormatOutcome.BUILT}
        assert "linked" in built
        assert (target / "linked" / "esm2015" / "index.js").is_file()
        marker = marker_file_name(EntryPointFormat.ESM2015)
        assert (target / "linked" / marker).is_file()
        assert not (tmp_path / "workspace" / "linked" / marker).exists()

    def test_second_run_builds_nothing(self, tree: Path, tmp_path: Path) -> None:
        """A repeated run skips every pair."""
        settings = BuildSettings(source=tree, target=tmp_path / "dist")

        first = run_build(settings)
        second = run_build(settings)

        assert first.succeeded and second.succeeded
        assert first.count(FormatOutcome.ALREADY_DONE) == 0
        assert second.count(FormatOutcome.BUILT) == 0
        assert second.count(FormatOutcome.ALREADY_DONE) == len(second.results) == 16

    def test_in_place_build(self, tree: Path) -> None:
        """Without a target, markers are written into the source tree."""
        result = run_build(BuildSettings(source=tree, formats=["esm2015"]))

        assert result.succeeded
        assert (tree / "@angular" / "common" / "http" / marker_file_name(
            EntryPointFormat.ESM2015
        )).is_file()

    def test_missing_source_fails(self, tmp_path: Path) -> None:
        """A missing source root fails the run."""
        result = run_build(BuildSettings(source=tmp_path / "nowhere"))

        assert not result.succeeded
        assert result.exit_code == 1
        assert "Source root is not a directory" in (result.error or "")

    def test_invalid_entry_points_are_skipped(
        self, tree: Path, write_package: Any, tmp_path: Path
    ) -> None:
        """Entry points with missing dependencies are left out of the build."""
        write_package(tree, "orphan", dependencies={"not-installed": "1.0.0"})

        result = run_build(BuildSettings(source=tree, target=tmp_path / "dist"))

        assert result.succeeded
        assert "orphan" not in {r.entry_point for r in result.results}
