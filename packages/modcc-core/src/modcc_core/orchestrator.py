"""Build orchestrator.

Drives a build run: for every entry point (dependencies first) and every
requested format, skip pairs already built, resolve a bundle, transform
it, and record a marker. The first error aborts the whole run; entry
points later in the order may depend on the one that failed.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from modcc_core.config import CORE_PACKAGE_NAME
from modcc_core.errors import ModccError, TransformError
from modcc_core.models import (
    BuildResult,
    BuildStatus,
    EntryPoint,
    EntryPointBundle,
    EntryPointFormat,
    FormatOutcome,
    FormatResult,
)
from modcc_core.observability import entry_point_operation, span

if TYPE_CHECKING:
    from modcc_core.config import BuildSettings
    from modcc_core.interfaces import (
        BundleResolver,
        EntryPointDiscovery,
        MarkerStore,
        Transformer,
    )

logger = structlog.get_logger(__name__)


def typings_carrier_format(entry_point: EntryPoint) -> EntryPointFormat:
    """Choose the format whose bundle also rewrites the entry point's typings.

    The flat ES2015 bundle is preferred because it is marginally faster to
    process; otherwise the ES2015 modules carry the typings. If the entry
    point ships neither, the chosen format resolves as absent and no
    typings rewrite happens.
    """
    if entry_point.exposes(EntryPointFormat.FESM2015):
        return EntryPointFormat.FESM2015
    return EntryPointFormat.ESM2015


class BuildOrchestrator:
    """Runs the skip/build/mark policy over entry points and formats.

    Attributes:
        finder: Discovers entry points in dependency order.
        marker_store: Persists per-pair completion markers.
        bundle_resolver: Resolves bundles for (entry point, format) pairs.
        transformer: Transforms resolved bundles.
        core_package_name: Entry point that receives core handling.

    Example:
        >>> orchestrator = BuildOrchestrator(
        ...     finder=EntryPointFinder(),
        ...     marker_store=FileMarkerStore(source_root),
        ...     bundle_resolver=FileBundleResolver(),
        ...     transformer=MirrorTransformer(source_root, target_root),
        ... )
        >>> result = orchestrator.run(source_root, DEFAULT_FORMATS, target_root)
        >>> result.exit_code
        0
    """

    def __init__(
        self,
        finder: EntryPointDiscovery,
        marker_store: MarkerStore,
        bundle_resolver: BundleResolver,
        transformer: Transformer,
        *,
        core_package_name: str = CORE_PACKAGE_NAME,
    ) -> None:
        """Initialize the orchestrator with its collaborators.

        Args:
            finder: Entry point discovery.
            marker_store: Marker persistence.
            bundle_resolver: Bundle resolution.
            transformer: Bundle transformation.
            core_package_name: Name of the core entry point.
        """
        self.finder = finder
        self.marker_store = marker_store
        self.bundle_resolver = bundle_resolver
        self.transformer = transformer
        self.core_package_name = core_package_name
        self._log = logger.bind(component="build_orchestrator")

    def run(
        self,
        source_root: Path,
        formats: Sequence[EntryPointFormat | str],
        target_root: Path | None = None,
    ) -> BuildResult:
        """Run a build.

        Args:
            source_root: Root folder containing the packages.
            formats: Formats to process, in order.
            target_root: Output root (defaults to the source root).

        Returns:
            BuildResult. On failure, results cover the pairs completed
            before the error and ``error`` holds its message.
        """
        start_time = time.monotonic()
        started_at = datetime.now(UTC)
        source_root = Path(source_root)
        target_root = Path(target_root) if target_root is not None else source_root
        results: list[FormatResult] = []
        error_message: str | None = None

        try:
            requested = [EntryPointFormat(f) for f in formats]
            self._log.info(
                "build_started",
                source_root=str(source_root),
                target_root=str(target_root),
                formats=[f.value for f in requested],
            )

            with span("modcc.find_entry_points", attributes={"source_root": str(source_root)}):
                info = self.finder.find_entry_points(source_root)

            for entry_point in info.entry_points:
                self.process_entry_point(entry_point, requested, target_root, results)

        except Exception as e:
            if isinstance(e, ModccError):
                error_message = e.user_message
            else:
                error_message = f"{type(e).__name__}: {e}"
            self._log.error("build_failed", error=error_message, exc_info=True)

        total_duration_ms = int((time.monotonic() - start_time) * 1000)
        result = BuildResult(
            results=results,
            status=BuildStatus.FAILED if error_message is not None else BuildStatus.SUCCEEDED,
            error=error_message,
            started_at=started_at,
            finished_at=datetime.now(UTC),
            total_duration_ms=total_duration_ms,
        )

        self._log.info(
            "build_completed",
            status=result.status.value,
            total_duration_ms=total_duration_ms,
            built=result.count(FormatOutcome.BUILT),
            absent=result.count(FormatOutcome.ABSENT),
            already_done=result.count(FormatOutcome.ALREADY_DONE),
        )
        return result

    def process_entry_point(
        self,
        entry_point: EntryPoint,
        formats: Sequence[EntryPointFormat],
        target_root: Path,
        results: list[FormatResult],
    ) -> None:
        """Process every requested format of one entry point, in order.

        Each FormatResult is appended to ``results`` as soon as its format
        completes, so a failure on a later format keeps the earlier ones.

        Raises:
            TransformError: If a bundle cannot be resolved or transformed.
        """
        is_core = entry_point.name == self.core_package_name
        dts_format = typings_carrier_format(entry_point)

        with entry_point_operation("process", entry_point=entry_point.name, is_core=is_core):
            for format in formats:
                results.append(
                    self.process_format(
                        entry_point,
                        is_core,
                        format,
                        transform_dts=format == dts_format,
                        target_root=target_root,
                    )
                )

    def process_format(
        self,
        entry_point: EntryPoint,
        is_core: bool,
        format: EntryPointFormat,
        *,
        transform_dts: bool,
        target_root: Path,
    ) -> FormatResult:
        """Apply the skip/build/mark policy to one (entry point, format) pair.

        Returns:
            FormatResult whose outcome says what happened:
            ALREADY_DONE (marker present, nothing written),
            ABSENT (format not shipped, marker written) or
            BUILT (bundle transformed, marker written).

        Raises:
            TransformError: If a bundle cannot be resolved or transformed.
        """
        start_time = time.monotonic()
        log = self._log.bind(entry_point=entry_point.name, format=format.value)

        if self.marker_store.has_marker(entry_point, format, target_root):
            log.info("format_skipped", reason="already built")
            outcome = FormatOutcome.ALREADY_DONE
        else:
            bundle = self._resolve_bundle(entry_point, is_core, format, transform_dts)
            if bundle is None:
                log.info("format_skipped", reason="no entry point file for this format")
                outcome = FormatOutcome.ABSENT
            else:
                self._transform(entry_point, is_core, bundle)
                log.info("format_built", is_core=is_core, typings=transform_dts)
                outcome = FormatOutcome.BUILT

            self.marker_store.write_marker(entry_point, format, target_root)

        return FormatResult(
            entry_point=entry_point.name,
            format=format,
            outcome=outcome,
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )

    def _resolve_bundle(
        self,
        entry_point: EntryPoint,
        is_core: bool,
        format: EntryPointFormat,
        transform_dts: bool,
    ) -> EntryPointBundle | None:
        try:
            return self.bundle_resolver.resolve(entry_point, is_core, format, transform_dts)
        except ModccError:
            raise
        except Exception as e:
            raise TransformError(
                "Failed to resolve bundle",
                entry_point=entry_point.name,
                format=format.value,
                internal_details=f"{type(e).__name__}: {e}",
            ) from e

    def _transform(self, entry_point: EntryPoint, is_core: bool, bundle: EntryPointBundle) -> None:
        with entry_point_operation(
            "transform", entry_point=entry_point.name, format=bundle.format.value, is_core=is_core
        ):
            try:
                self.transformer.transform(entry_point, is_core, bundle)
            except ModccError:
                raise
            except Exception as e:
                raise TransformError(
                    "Transform failed",
                    entry_point=entry_point.name,
                    format=bundle.format.value,
                    internal_details=f"{type(e).__name__}: {e}",
                ) from e


def create_orchestrator(settings: BuildSettings) -> BuildOrchestrator:
    """Create an orchestrator wired with the default filesystem collaborators.

    Args:
        settings: Build settings.

    Returns:
        BuildOrchestrator ready to run against ``settings.source_root``.
    """
    from modcc_core.bundle import FileBundleResolver
    from modcc_core.discovery import EntryPointFinder
    from modcc_core.markers import FileMarkerStore
    from modcc_core.transformer import MirrorTransformer

    return BuildOrchestrator(
        finder=EntryPointFinder(),
        marker_store=FileMarkerStore(settings.source_root),
        bundle_resolver=FileBundleResolver(),
        transformer=MirrorTransformer(settings.source_root, settings.target_root),
        core_package_name=settings.core_package_name,
    )


def run_build(settings: BuildSettings) -> BuildResult:
    """Run a build with the given settings.

    Convenience function that wires default collaborators and runs.

    Args:
        settings: Build settings.

    Returns:
        BuildResult for the run.

    Example:
        >>> result = run_build(BuildSettings(source=Path("node_modules")))
        >>> if result.succeeded:
        ...     print("Build complete")
    """
    orchestrator = create_orchestrator(settings)
    return orchestrator.run(settings.source_root, settings.formats, settings.target_root)
