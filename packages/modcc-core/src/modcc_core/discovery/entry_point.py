"""Entry point manifest loading.

Reads a package.json and turns it into an EntryPoint when it describes a
typed entry point.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import structlog

from modcc_core.errors import DiscoveryError
from modcc_core.models import EntryPoint, EntryPointFormat

logger = structlog.get_logger(__name__)

PACKAGE_JSON = "package.json"


def read_package_json(path: Path) -> dict[str, Any]:
    """Read and parse a package.json file.

    Args:
        path: Path to the package.json file.

    Returns:
        Parsed manifest.

    Raises:
        DiscoveryError: If the file cannot be read or is not a JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise DiscoveryError(
            "Cannot read package manifest",
            path=str(path),
            internal_details=f"{type(e).__name__}: {e}",
        ) from e
    except json.JSONDecodeError as e:
        raise DiscoveryError(
            f"Invalid JSON in package manifest at line {e.lineno}, column {e.colno}",
            path=str(path),
            internal_details=e.msg,
        ) from e

    if not isinstance(data, dict):
        raise DiscoveryError("Package manifest must be a JSON object", path=str(path))
    return data


def get_entry_point_info(
    root: Path,
    package_path: Path,
    entry_point_path: Path,
) -> EntryPoint | None:
    """Build an EntryPoint from the package.json in ``entry_point_path``.

    Args:
        root: Source root the entry point was discovered under.
        package_path: Directory of the owning package.
        entry_point_path: Directory holding the entry point's package.json.

    Returns:
        EntryPoint, or None if there is no manifest or it declares no typings.

    Raises:
        DiscoveryError: If the manifest is malformed.
    """
    manifest_path = entry_point_path / PACKAGE_JSON
    if not manifest_path.is_file():
        return None

    package_json = read_package_json(manifest_path)

    typings = package_json.get("typings") or package_json.get("types")
    if not isinstance(typings, str):
        logger.debug("not_an_entry_point", path=str(entry_point_path), reason="no typings")
        return None

    name = package_json.get("name")
    if not isinstance(name, str) or not name:
        name = entry_point_path.relative_to(root).as_posix()

    format_paths: dict[EntryPointFormat, Path] = {}
    for format in EntryPointFormat:
        value = package_json.get(format.value)
        if isinstance(value, str) and value:
            format_paths[format] = _lexical(entry_point_path / value)

    return EntryPoint(
        name=name,
        package_path=package_path,
        path=entry_point_path,
        typings=_lexical(entry_point_path / typings),
        package_json=package_json,
        format_paths=format_paths,
    )


def _lexical(path: Path) -> Path:
    # Symlinked packages keep their node_modules path.
    return Path(os.path.normpath(path.absolute()))
