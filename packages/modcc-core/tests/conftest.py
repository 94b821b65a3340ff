"""Shared pytest fixtures for modcc-core tests.

Provides structlog capture configuration, in-memory entry points and
helpers that lay out installed package trees in a temporary directory.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
import structlog

from modcc_core.models import EntryPoint, EntryPointFormat

PackageWriter = Callable[..., Path]
EntryPointFactory = Callable[..., EntryPoint]

# Relative entry file per format, as written by write_package
FORMAT_FILES = {
    "fesm2015": "fesm2015/{base}.js",
    "esm2015": "esm2015/index.js",
    "fesm5": "fesm5/{base}.js",
    "esm5": "esm5/index.js",
}


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture.

    Without this, structlog may use different processors depending on
    test execution order.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture
def make_entry_point() -> EntryPointFactory:
    """Return a factory for in-memory entry points (no files on disk).

    Returns:
        Callable ``(name, formats=("fesm2015", "esm2015"), root=Path("/src")) -> EntryPoint``.
    """

    def _make(
        name: str,
        formats: Sequence[str] = ("fesm2015", "esm2015"),
        root: Path = Path("/src"),
    ) -> EntryPoint:
        path = root.joinpath(*name.split("/"))
        return EntryPoint(
            name=name,
            package_path=path,
            path=path,
            typings=path / "index.d.ts",
            package_json={"name": name, "typings": "index.d.ts"},
            format_paths={
                EntryPointFormat(f): path / FORMAT_FILES[f].format(base="bundle") for f in formats
            },
        )

    return _make


@pytest.fixture
def write_package() -> PackageWriter:
    """Return a helper that writes an installed package under a root folder.

    The helper signature is::

        write_package(
            root, name,
            formats=("fesm2015", "esm2015", "fesm5", "esm5"),
            dependencies=None, peer_dependencies=None,
            imports=(), typings=True, write_files=True, extra=None,
        ) -> Path

    ``imports`` are bare specifiers written as ``import`` statements into
    every generated JavaScript file. With ``write_files=False`` the
    package.json still declares the formats but the files are not created.

    Returns:
        Callable returning the package (or entry point) directory.
    """

    def _write(
        root: Path,
        name: str,
        formats: Sequence[str] = ("fesm2015", "esm2015", "fesm5", "esm5"),
        dependencies: dict[str, str] | None = None,
        peer_dependencies: dict[str, str] | None = None,
        imports: Sequence[str] = (),
        typings: bool = True,
        write_files: bool = True,
        extra: dict[str, Any] | None = None,
    ) -> Path:
        directory = root.joinpath(*name.split("/"))
        directory.mkdir(parents=True, exist_ok=True)
        base = name.split("/")[-1]

        manifest: dict[str, Any] = {"name": name, "version": "1.0.0"}
        if typings:
            manifest["typings"] = f"{base}.d.ts"
            (directory / f"{base}.d.ts").write_text(f"export declare const {base}: string;\n")
        if dependencies:
            manifest["dependencies"] = dependencies
        if peer_dependencies:
            manifest["peerDependencies"] = peer_dependencies
        manifest.update(extra or {})

        source = "".join(f"import {{ x }} from '{spec}';\n" for spec in imports)
        source += f"export const {base.replace('-', '_')} = 1;\n"
        for f in formats:
            relative = FORMAT_FILES[f].format(base=base)
            manifest[f] = f"./{relative}"
            if write_files:
                file_path = directory / relative
                file_path.parent.mkdir(parents=True, exist_ok=True)
                file_path.write_text(source)
                file_path.with_name(file_path.name + ".map").write_text("{}")

        (directory / "package.json").write_text(json.dumps(manifest, indent=2))
        return directory

    return _write


@pytest.fixture
def node_modules(tmp_path: Path) -> Path:
    """Return an empty node_modules folder inside tmp_path."""
    root = tmp_path / "node_modules"
    root.mkdir()
    return root
