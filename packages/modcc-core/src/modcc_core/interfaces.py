"""Collaborator contracts consumed by the build orchestrator.

The orchestrator depends only on these protocols, so discovery, marker
persistence, bundle resolution and transformation can each be swapped
out (or faked in tests) independently.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from modcc_core.models import (
    EntryPoint,
    EntryPointBundle,
    EntryPointFormat,
    SortedEntryPointsInfo,
)


@runtime_checkable
class EntryPointDiscovery(Protocol):
    """Finds entry points under a root, ordered dependencies first."""

    def find_entry_points(self, source_root: Path) -> SortedEntryPointsInfo:
        """Discover and order entry points.

        Raises:
            DiscoveryError: If the tree is unreadable or the graph is invalid.
        """
        ...


@runtime_checkable
class MarkerStore(Protocol):
    """Persisted per-(entry point, format) completion records."""

    def has_marker(
        self,
        entry_point: EntryPoint,
        format: EntryPointFormat,
        target_root: Path,
    ) -> bool:
        """Check whether the pair has already been handled for ``target_root``."""
        ...

    def write_marker(
        self,
        entry_point: EntryPoint,
        format: EntryPointFormat,
        target_root: Path,
    ) -> object:
        """Record the pair as handled for ``target_root``. Must be idempotent."""
        ...


@runtime_checkable
class BundleResolver(Protocol):
    """Builds compilation units for (entry point, format) pairs."""

    def resolve(
        self,
        entry_point: EntryPoint,
        is_core: bool,
        format: EntryPointFormat,
        transform_dts: bool,
    ) -> EntryPointBundle | None:
        """Resolve a bundle, or return None if the format is absent."""
        ...


@runtime_checkable
class Transformer(Protocol):
    """Rewrites a resolved bundle on disk."""

    def transform(
        self,
        entry_point: EntryPoint,
        is_core: bool,
        bundle: EntryPointBundle,
    ) -> None:
        """Transform the bundle.

        Raises:
            TransformError: If the bundle cannot be transformed.
        """
        ...
