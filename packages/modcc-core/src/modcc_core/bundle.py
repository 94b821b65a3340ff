"""Bundle resolution for (entry point, format) pairs."""

from __future__ import annotations

import structlog

from modcc_core.models import EntryPoint, EntryPointBundle, EntryPointFormat

logger = structlog.get_logger(__name__)


def make_entry_point_bundle(
    entry_point: EntryPoint,
    is_core: bool,
    format: EntryPointFormat,
    transform_dts: bool,
) -> EntryPointBundle | None:
    """Create a bundle for one format of an entry point.

    Args:
        entry_point: Entry point to bundle.
        is_core: Whether the entry point is the core package.
        format: Requested format.
        transform_dts: Whether this bundle also carries the typings rewrite.

    Returns:
        EntryPointBundle, or None if the entry point does not ship the
        format (not declared in package.json, or the file is missing).
    """
    src_path = entry_point.format_path(format)
    if src_path is None:
        return None
    if not src_path.is_file():
        logger.debug(
            "format_file_missing",
            entry_point=entry_point.name,
            format=format.value,
            path=str(src_path),
        )
        return None

    return EntryPointBundle(
        format=format,
        is_core=is_core,
        is_flat=format.is_flat,
        src_path=src_path,
        root_dir=entry_point.package_path,
        dts_path=entry_point.typings if transform_dts else None,
    )


class FileBundleResolver:
    """BundleResolver backed by the entry point's package.json and the filesystem."""

    def resolve(
        self,
        entry_point: EntryPoint,
        is_core: bool,
        format: EntryPointFormat,
        transform_dts: bool,
    ) -> EntryPointBundle | None:
        """Resolve a bundle, or return None if the format is absent."""
        return make_entry_point_bundle(entry_point, is_core, format, transform_dts)
