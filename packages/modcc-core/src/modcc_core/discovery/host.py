"""Dependency host: computes what an entry point depends on.

Dependencies come from two places:
- ``dependencies`` and ``peerDependencies`` in the entry point's package.json
- bare import specifiers in the entry point's ES2015 entry file
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable, Sequence
from pathlib import Path

import structlog

from modcc_core.models import DependencyInfo, EntryPoint, EntryPointFormat

logger = structlog.get_logger(__name__)

# import {a} from 'x'; export * from 'x';
_FROM_RE = re.compile(r"""\b(?:import|export)\b[^'"`;]*?\bfrom\s*(['"])([^'"]+)\1""")
# import 'x'; import('x')
_BARE_IMPORT_RE = re.compile(r"""\bimport\s*\(?\s*(['"])([^'"]+)\1""")

_MANIFEST_DEPENDENCY_KEYS = ("dependencies", "peerDependencies")
_SCANNED_FORMATS = (EntryPointFormat.ESM2015, EntryPointFormat.FESM2015)


def is_bare_specifier(specifier: str) -> bool:
    """Check if an import specifier refers to another package."""
    return not specifier.startswith((".", "/")) and ":" not in specifier


def extract_import_specifiers(source: str) -> set[str]:
    """Extract bare import specifiers from ES module source text.

    Args:
        source: JavaScript module source.

    Returns:
        Set of bare specifiers (relative imports are dropped).

    Example:
        >>> sorted(extract_import_specifiers("import {x} from '@scope/a'; import './b';"))
        ['@scope/a']
    """
    found = {m.group(2) for m in _FROM_RE.finditer(source)}
    found.update(m.group(2) for m in _BARE_IMPORT_RE.finditer(source))
    return {s for s in found if is_bare_specifier(s)}


class DependencyHost:
    """Classifies the dependencies of entry points.

    Bare specifiers are resolved like Node does: in the ``node_modules``
    folders above the entry point, then in the configured search roots.

    Attributes:
        search_roots: Extra directories in which bare specifiers are resolved.
    """

    def __init__(self, search_roots: Sequence[Path] = ()) -> None:
        """Initialize the host.

        Args:
            search_roots: Extra directories in which bare specifiers are
                resolved (typically the source root).
        """
        self.search_roots: list[Path] = list(search_roots)

    def compute_dependencies(
        self,
        entry_point: EntryPoint,
        known_entry_points: Collection[str],
    ) -> DependencyInfo:
        """Compute the dependencies of an entry point.

        Args:
            entry_point: Entry point to inspect.
            known_entry_points: Names of all discovered entry points.

        Returns:
            DependencyInfo separating real, missing and deep-import dependencies.
        """
        dependencies: set[str] = set()
        missing: set[str] = set()
        deep_imports: set[str] = set()

        for specifier in self._candidate_specifiers(entry_point):
            if specifier == entry_point.name:
                continue
            if specifier in known_entry_points:
                dependencies.add(specifier)
            elif self._resolves_on_disk(specifier, entry_point.path):
                deep_imports.add(specifier)
            else:
                missing.add(specifier)

        return DependencyInfo(
            dependencies=frozenset(dependencies),
            missing=frozenset(missing),
            deep_imports=frozenset(deep_imports),
        )

    def _candidate_specifiers(self, entry_point: EntryPoint) -> Iterable[str]:
        specifiers: set[str] = set()
        for key in _MANIFEST_DEPENDENCY_KEYS:
            declared = entry_point.package_json.get(key)
            if isinstance(declared, dict):
                specifiers.update(name for name in declared if isinstance(name, str))

        source_file = self._scanned_source(entry_point)
        if source_file is not None:
            try:
                specifiers.update(
                    extract_import_specifiers(source_file.read_text(encoding="utf-8"))
                )
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(
                    "import_scan_failed",
                    entry_point=entry_point.name,
                    path=str(source_file),
                    error=str(e),
                )
        return sorted(specifiers)

    def _scanned_source(self, entry_point: EntryPoint) -> Path | None:
        for format in _SCANNED_FORMATS:
            path = entry_point.format_path(format)
            if path is not None and path.is_file():
                return path
        return None

    def _resolves_on_disk(self, specifier: str, from_dir: Path) -> bool:
        parts = specifier.split("/")
        for root in self._lookup_roots(from_dir):
            candidate = root.joinpath(*parts)
            if candidate.is_dir() or candidate.with_name(candidate.name + ".js").is_file():
                return True
        return False

    def _lookup_roots(self, from_dir: Path) -> Iterable[Path]:
        # Node-style: nearest node_modules folders first, then the configured roots
        for ancestor in (from_dir, *from_dir.parents):
            if ancestor.name == "node_modules":
                yield ancestor
            elif (ancestor / "node_modules").is_dir():
                yield ancestor / "node_modules"
        yield from self.search_roots
