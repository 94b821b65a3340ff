"""modcc-core: Entry point discovery and the build orchestrator for modcc.

This package provides:
- EntryPointFinder: Discover installed entry points in dependency order
- BuildOrchestrator: Skip/build/mark policy over entry points and formats
- Default filesystem collaborators (markers, bundles, transformer)
- BuildSettings: Environment-aware build configuration
"""

from __future__ import annotations

__version__ = "0.1.0"

from modcc_core.bundle import FileBundleResolver, make_entry_point_bundle
from modcc_core.config import CORE_PACKAGE_NAME, BuildSettings
from modcc_core.discovery import DependencyHost, DependencyResolver, EntryPointFinder
from modcc_core.errors import DiscoveryError, ModccError, TransformError
from modcc_core.interfaces import (
    BundleResolver,
    EntryPointDiscovery,
    MarkerStore,
    Transformer,
)
from modcc_core.markers import FileMarkerStore, marker_file_name
from modcc_core.models import (
    DEFAULT_FORMATS,
    BuildMarker,
    BuildResult,
    BuildStatus,
    EntryPoint,
    EntryPointBundle,
    EntryPointFormat,
    FormatOutcome,
    FormatResult,
    SortedEntryPointsInfo,
)
from modcc_core.orchestrator import (
    BuildOrchestrator,
    create_orchestrator,
    run_build,
    typings_carrier_format,
)
from modcc_core.transformer import MirrorTransformer

__all__ = [
    "__version__",
    # Orchestration
    "BuildOrchestrator",
    "create_orchestrator",
    "run_build",
    "typings_carrier_format",
    # Configuration
    "BuildSettings",
    "CORE_PACKAGE_NAME",
    # Collaborator contracts
    "BundleResolver",
    "EntryPointDiscovery",
    "MarkerStore",
    "Transformer",
    # Default collaborators
    "DependencyHost",
    "DependencyResolver",
    "EntryPointFinder",
    "FileBundleResolver",
    "FileMarkerStore",
    "MirrorTransformer",
    "make_entry_point_bundle",
    "marker_file_name",
    # Errors
    "ModccError",
    "DiscoveryError",
    "TransformError",
    # Models
    "DEFAULT_FORMATS",
    "BuildMarker",
    "BuildResult",
    "BuildStatus",
    "EntryPoint",
    "EntryPointBundle",
    "EntryPointFormat",
    "FormatOutcome",
    "FormatResult",
    "SortedEntryPointsInfo",
]
