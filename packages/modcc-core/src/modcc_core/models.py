"""Domain models for modcc-core.

Models for entry points, bundles, build markers and build results.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EntryPointFormat(str, Enum):
    """Module-distribution format of an entry point.

    The value matches the package.json property that points at the
    format's entry file.

    Attributes:
        FESM2015: Flattened ES2015 bundle
        ESM2015: ES2015 modules
        FESM5: Flattened ES5 bundle
        ESM5: ES5 modules
    """

    FESM2015 = "fesm2015"
    ESM2015 = "esm2015"
    FESM5 = "fesm5"
    ESM5 = "esm5"

    @property
    def is_flat(self) -> bool:
        """Whether the format is a single flattened bundle file."""
        return self.value.startswith("f")


DEFAULT_FORMATS: tuple[EntryPointFormat, ...] = (
    EntryPointFormat.FESM2015,
    EntryPointFormat.ESM2015,
    EntryPointFormat.FESM5,
    EntryPointFormat.ESM5,
)


class EntryPoint(BaseModel):
    """An installed library entry point.

    A package has one primary entry point at its root and may have
    secondary entry points in nested directories with their own package.json.

    Attributes:
        name: Unique entry point name (e.g., "@angular/common/http")
        package_path: Root directory of the owning package
        path: Directory containing the entry point's package.json
        typings: Absolute path to the .d.ts typings entry file
        package_json: Raw package.json contents
        format_paths: Absolute entry file path per declared format

    Example:
        >>> entry_point = EntryPoint(
        ...     name="@angular/common",
        ...     package_path=Path("node_modules/@angular/common"),
        ...     path=Path("node_modules/@angular/common"),
        ...     typings=Path("node_modules/@angular/common/common.d.ts"),
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Entry point name")
    package_path: Path = Field(..., description="Owning package directory")
    path: Path = Field(..., description="Entry point directory")
    typings: Path = Field(..., description="Typings entry file")
    package_json: dict[str, Any] = Field(default_factory=dict, description="Raw manifest")
    format_paths: dict[EntryPointFormat, Path] = Field(
        default_factory=dict, description="Entry file per declared format"
    )

    def exposes(self, format: EntryPointFormat) -> bool:
        """Check if the manifest declares the given format."""
        return format in self.format_paths

    def format_path(self, format: EntryPointFormat) -> Path | None:
        """Return the entry file for a format, or None if not declared."""
        return self.format_paths.get(format)


class EntryPointBundle(BaseModel):
    """Resolved compilation unit for one (entry point, format) pair.

    Bundles are transient: built by a BundleResolver, consumed by a
    Transformer, never persisted.

    Attributes:
        format: Format of the bundle
        is_core: Whether the bundle belongs to the core package
        is_flat: Whether the bundle is a single flattened file
        src_path: Entry file of the bundle
        root_dir: Owning package directory
        dts_path: Typings entry to rewrite alongside this bundle, if any
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    format: EntryPointFormat
    is_core: bool = False
    is_flat: bool = False
    src_path: Path
    root_dir: Path
    dts_path: Path | None = None

    @property
    def carries_type_declaration_rewrite(self) -> bool:
        """Whether this bundle also rewrites the entry point's typings."""
        return self.dts_path is not None


class BuildMarker(BaseModel):
    """Persisted record that an (entry point, format) pair has been handled."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    entry_point: str = Field(..., min_length=1)
    format: EntryPointFormat
    modcc_version: str
    built_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class InvalidEntryPoint(BaseModel):
    """An entry point excluded from the build because of missing dependencies."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    entry_point: EntryPoint
    missing_dependencies: list[str] = Field(default_factory=list)


class IgnoredDependency(BaseModel):
    """A dependency that resolved on disk but is not an entry point."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    entry_point: str
    dependency: str


class DependencyInfo(BaseModel):
    """Dependencies of a single entry point, classified by resolution.

    Attributes:
        dependencies: Names of known entry points this one depends on
        missing: Specifiers that could not be resolved at all
        deep_imports: Specifiers that resolved to non-entry-point directories
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dependencies: frozenset[str] = frozenset()
    missing: frozenset[str] = frozenset()
    deep_imports: frozenset[str] = frozenset()


class SortedEntryPointsInfo(BaseModel):
    """Entry points ordered so that dependencies precede dependents."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    entry_points: list[EntryPoint] = Field(default_factory=list)
    invalid_entry_points: list[InvalidEntryPoint] = Field(default_factory=list)
    ignored_dependencies: list[IgnoredDependency] = Field(default_factory=list)


class FormatOutcome(str, Enum):
    """Outcome of processing one (entry point, format) pair.

    Attributes:
        ALREADY_DONE: A marker existed; nothing was done
        BUILT: The bundle was transformed and a marker written
        ABSENT: The entry point does not ship the format; a marker was written
    """

    ALREADY_DONE = "already_done"
    BUILT = "built"
    ABSENT = "absent"

    @property
    def writes_marker(self) -> bool:
        """Whether this outcome persists a marker."""
        return self is not FormatOutcome.ALREADY_DONE


class FormatResult(BaseModel):
    """Result of processing one (entry point, format) pair."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    entry_point: str
    format: EntryPointFormat
    outcome: FormatOutcome
    duration_ms: int = Field(default=0, ge=0)


class BuildStatus(str, Enum):
    """Overall status of a build run."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


class BuildResult(BaseModel):
    """Aggregated result of a build run.

    Attributes:
        results: Per-pair results in processing order
        status: Overall build status
        error: Error message when the build failed
        started_at: When the build started
        finished_at: When the build finished
        total_duration_ms: Total duration in milliseconds

    Example:
        >>> result = BuildResult(status=BuildStatus.SUCCEEDED)
        >>> result.exit_code
        0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    results: list[FormatResult] = Field(default_factory=list)
    status: BuildStatus = BuildStatus.SUCCEEDED
    error: str | None = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None
    total_duration_ms: int = Field(default=0, ge=0)

    @property
    def succeeded(self) -> bool:
        """Check if every pair completed without a fatal error."""
        return self.status == BuildStatus.SUCCEEDED

    @property
    def exit_code(self) -> int:
        """Process exit status for this result."""
        return 0 if self.succeeded else 1

    def count(self, outcome: FormatOutcome) -> int:
        """Count results with the given outcome."""
        return sum(1 for r in self.results if r.outcome == outcome)
