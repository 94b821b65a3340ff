"""Build markers: persisted records of handled (entry point, format) pairs.

A marker is a small JSON file written under the target root, at the
entry point's position relative to the source root. Its presence alone
means "done"; the contents are informational.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from modcc_core import __version__
from modcc_core.models import BuildMarker, EntryPoint, EntryPointFormat

logger = structlog.get_logger(__name__)

MARKER_PREFIX = "__processed_by_modcc_for_"
MARKER_SUFFIX = "__"


def marker_file_name(format: EntryPointFormat) -> str:
    """Return the marker file name for a format.

    Example:
        >>> marker_file_name(EntryPointFormat.ESM2015)
        '__processed_by_modcc_for_esm2015__'
    """
    return f"{MARKER_PREFIX}{format.value}{MARKER_SUFFIX}"


class FileMarkerStore:
    """MarkerStore that keeps markers as files under a target root.

    Attributes:
        source_root: Root the entry points were discovered under.

    Example:
        >>> store = FileMarkerStore(Path("node_modules"))
        >>> store.has_marker(entry_point, EntryPointFormat.ESM2015, Path("dist"))
        False
        >>> store.write_marker(entry_point, EntryPointFormat.ESM2015, Path("dist"))
        PosixPath('dist/@angular/common/__processed_by_modcc_for_esm2015__')
    """

    def __init__(self, source_root: Path) -> None:
        """Initialize the store.

        Args:
            source_root: Root the entry points were discovered under.
        """
        self.source_root = Path(source_root)

    def marker_path(
        self,
        entry_point: EntryPoint,
        format: EntryPointFormat,
        target_root: Path,
    ) -> Path:
        """Return where the marker for a pair lives under ``target_root``."""
        relative = entry_point.path.relative_to(self.source_root)
        return Path(target_root) / relative / marker_file_name(format)

    def has_marker(
        self,
        entry_point: EntryPoint,
        format: EntryPointFormat,
        target_root: Path,
    ) -> bool:
        """Check whether the pair has already been handled."""
        return self.marker_path(entry_point, format, target_root).is_file()

    def write_marker(
        self,
        entry_point: EntryPoint,
        format: EntryPointFormat,
        target_root: Path,
    ) -> Path:
        """Write the marker for a pair, leaving an existing one untouched.

        Returns:
            Path of the marker file.
        """
        path = self.marker_path(entry_point, format, target_root)
        if path.is_file():
            return path

        marker = BuildMarker(
            entry_point=entry_point.name,
            format=format,
            modcc_version=__version__,
        )
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(marker.model_dump_json(indent=2), encoding="utf-8")
        logger.debug("marker_written", entry_point=entry_point.name, format=format.value)
        return path

    def read_marker(
        self,
        entry_point: EntryPoint,
        format: EntryPointFormat,
        target_root: Path,
    ) -> BuildMarker | None:
        """Read a marker's contents.

        Returns:
            BuildMarker, or None if there is no marker or it cannot be parsed.
        """
        path = self.marker_path(entry_point, format, target_root)
        if not path.is_file():
            return None
        try:
            return BuildMarker.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("marker_unreadable", path=str(path), error=str(e))
            return None

    def list_markers(self, entry_point: EntryPoint, target_root: Path) -> set[EntryPointFormat]:
        """Return the formats marked for an entry point."""
        return {f for f in EntryPointFormat if self.has_marker(entry_point, f, target_root)}
