"""Entry point finder: walks a package tree and collects entry points."""

from __future__ import annotations

from pathlib import Path

import structlog

from modcc_core.discovery.entry_point import PACKAGE_JSON, get_entry_point_info
from modcc_core.discovery.host import DependencyHost
from modcc_core.discovery.resolver import DependencyResolver
from modcc_core.errors import DiscoveryError
from modcc_core.models import EntryPoint, SortedEntryPointsInfo

logger = structlog.get_logger(__name__)

NODE_MODULES = "node_modules"


class EntryPointFinder:
    """Finds entry points under a source root.

    Layout rules:
    - Top-level folders are packages; ``@scope`` folders hold packages.
    - Each package contributes its root entry point plus any nested folder
      with its own package.json (secondary entry points).
    - A package's own ``node_modules`` folder is walked as a nested root.

    Example:
        >>> finder = EntryPointFinder()
        >>> info = finder.find_entry_points(Path("node_modules"))
        >>> [ep.name for ep in info.entry_points]
        ['@angular/core', '@angular/common']
    """

    def __init__(self, resolver: DependencyResolver | None = None) -> None:
        """Initialize the finder.

        Args:
            resolver: Dependency resolver used to order results. Defaults to
                one that resolves bare specifiers under the source root.
        """
        self.resolver = resolver
        self._log = logger.bind(component="entry_point_finder")

    def find_entry_points(self, source_root: Path) -> SortedEntryPointsInfo:
        """Discover entry points and order them dependencies-first.

        Args:
            source_root: Folder containing installed packages.

        Returns:
            SortedEntryPointsInfo in build order.

        Raises:
            DiscoveryError: If the root is unreadable, a manifest is invalid,
                or the dependency graph has a cycle.
        """
        source_root = Path(source_root)
        if not source_root.is_dir():
            raise DiscoveryError("Source root is not a directory", path=str(source_root))

        try:
            entry_points = self._walk_directory(source_root)
        except OSError as e:
            raise DiscoveryError(
                "Cannot read source tree",
                path=str(source_root),
                internal_details=f"{type(e).__name__}: {e}",
            ) from e

        self._log.info("entry_points_found", count=len(entry_points), root=str(source_root))

        resolver = self.resolver or DependencyResolver(DependencyHost([source_root]))
        return resolver.sort_entry_points_by_dependency(entry_points)

    def _walk_directory(self, root: Path) -> list[EntryPoint]:
        entry_points: list[EntryPoint] = []
        for package_path in self._package_directories(root):
            entry_points.extend(self._entry_points_in_package(root, package_path))
            nested = package_path / NODE_MODULES
            if nested.is_dir():
                entry_points.extend(self._walk_directory(nested))
        return entry_points

    def _package_directories(self, root: Path) -> list[Path]:
        packages: list[Path] = []
        for child in sorted(p for p in root.iterdir() if p.is_dir()):
            if child.name.startswith("."):
                continue
            if child.name.startswith("@"):
                packages.extend(
                    sorted(p for p in child.iterdir() if p.is_dir() and not p.name.startswith("."))
                )
            else:
                packages.append(child)
        return packages

    def _entry_points_in_package(self, root: Path, package_path: Path) -> list[EntryPoint]:
        entry_points: list[EntryPoint] = []
        primary = get_entry_point_info(root, package_path, package_path)
        if primary is not None:
            entry_points.append(primary)

        for manifest in sorted(package_path.rglob(PACKAGE_JSON)):
            entry_point_path = manifest.parent
            if entry_point_path == package_path:
                continue
            relative_parts = entry_point_path.relative_to(package_path).parts
            if NODE_MODULES in relative_parts or any(p.startswith(".") for p in relative_parts):
                continue
            secondary = get_entry_point_info(root, package_path, entry_point_path)
            if secondary is not None:
                entry_points.append(secondary)

        return entry_points
