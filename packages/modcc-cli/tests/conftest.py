"""Shared test fixtures for modcc-cli tests.

Provides CliRunner fixtures, wide colorless consoles and a helper that
lays out an installed package tree.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Generator, Sequence
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from modcc_cli import output

FORMAT_FILES = {
    "fesm2015": "fesm2015/{base}.js",
    "esm2015": "esm2015/index.js",
    "fesm5": "fesm5/{base}.js",
    "esm5": "esm5/index.js",
}


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture(autouse=True)
def isolate_cli(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Isolate each test from the environment, console width and logging setup."""
    for name in ("SOURCE", "TARGET", "FORMATS", "CORE_PACKAGE_NAME", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"MODCC_{name}", raising=False)
    monkeypatch.chdir(tmp_path)

    # Wide consoles keep long messages on one line
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.setattr(output, "console", output.create_console(no_color=True))
    monkeypatch.setattr(output, "err_console", output.create_console(no_color=True, stderr=True))

    yield

    # Commands configure logging against the runner's streams
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


@pytest.fixture
def node_modules(tmp_path: Path) -> Path:
    """Return an empty node_modules folder inside tmp_path."""
    root = tmp_path / "node_modules"
    root.mkdir()
    return root


@pytest.fixture
def write_package() -> Callable[..., Path]:
    """Return a helper that writes a typed package under a root folder.

    The helper signature is
    ``write_package(root, name, formats=(all four), dependencies=None) -> Path``.
    """

    def _write(
        root: Path,
        name: str,
        formats: Sequence[str] = ("fesm2015", "esm2015", "fesm5", "esm5"),
        dependencies: dict[str, str] | None = None,
    ) -> Path:
        directory = root.joinpath(*name.split("/"))
        directory.mkdir(parents=True, exist_ok=True)
        base = name.split("/")[-1]

        manifest: dict[str, object] = {"name": name, "typings": f"{base}.d.ts"}
        (directory / f"{base}.d.ts").write_text("export {};\n")
        if dependencies:
            manifest["dependencies"] = dependencies
        for f in formats:
            relative = FORMAT_FILES[f].format(base=base)
            manifest[f] = f"./{relative}"
            file_path = directory / relative
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text("export const value = 1;\n")

        (directory / "package.json").write_text(json.dumps(manifest))
        return directory

    return _write
