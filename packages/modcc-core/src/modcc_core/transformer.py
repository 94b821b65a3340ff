"""Default transformer: writes a bundle's files into the target tree."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterator
from pathlib import Path

import structlog

from modcc_core.errors import TransformError
from modcc_core.models import EntryPoint, EntryPointBundle

logger = structlog.get_logger(__name__)

_MODULE_SUFFIXES = (".js", ".mjs", ".map")
_TYPINGS_SUFFIX = ".d.ts"


class MirrorTransformer:
    """Transformer that mirrors bundle output from the source tree to the target tree.

    Source rewriting is left to custom transformers implementing the
    Transformer protocol. When source and target roots are the same the
    files are already in place and nothing is written.

    Attributes:
        source_root: Root the entry points were discovered under.
        target_root: Root the output is written to.

    Example:
        >>> transformer = MirrorTransformer(Path("node_modules"), Path("dist"))
        >>> transformer.transform(entry_point, False, bundle)
    """

    def __init__(self, source_root: Path, target_root: Path | None = None) -> None:
        """Initialize the transformer.

        Args:
            source_root: Root the entry points were discovered under.
            target_root: Output root (defaults to the source root).
        """
        self.source_root = Path(source_root)
        self.target_root = Path(target_root) if target_root is not None else self.source_root
        self._log = logger.bind(component="mirror_transformer")

    @property
    def in_place(self) -> bool:
        """Whether output is written over the source tree."""
        return self.source_root.resolve() == self.target_root.resolve()

    def transform(
        self,
        entry_point: EntryPoint,
        is_core: bool,
        bundle: EntryPointBundle,
    ) -> None:
        """Write the bundle's files (and typings, if carried) under the target root.

        Raises:
            TransformError: If a file cannot be mapped or written.
        """
        if self.in_place:
            self._log.debug(
                "transform_in_place",
                entry_point=entry_point.name,
                format=bundle.format.value,
            )
            return

        written = 0
        try:
            for source_file in self._bundle_files(bundle):
                self._copy(source_file)
                written += 1
        except (OSError, ValueError) as e:
            raise TransformError(
                "Failed to write transformed output",
                entry_point=entry_point.name,
                format=bundle.format.value,
                internal_details=f"{type(e).__name__}: {e}",
            ) from e

        self._log.debug(
            "bundle_written",
            entry_point=entry_point.name,
            format=bundle.format.value,
            is_core=is_core,
            files=written,
            typings=bundle.carries_type_declaration_rewrite,
        )

    def _bundle_files(self, bundle: EntryPointBundle) -> Iterator[Path]:
        if bundle.is_flat:
            yield bundle.src_path
            source_map = bundle.src_path.with_name(bundle.src_path.name + ".map")
            if source_map.is_file():
                yield source_map
        else:
            yield from _files_under(bundle.src_path.parent, _MODULE_SUFFIXES)

        if bundle.dts_path is not None:
            yield from _files_under(bundle.dts_path.parent, (_TYPINGS_SUFFIX,))

    def _copy(self, source_file: Path) -> None:
        relative = _lexical(source_file).relative_to(_lexical(self.source_root))
        destination = self.target_root / relative
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source_file, destination)


def _files_under(directory: Path, suffixes: tuple[str, ...]) -> Iterator[Path]:
    for path in sorted(directory.rglob("*")):
        if "node_modules" in path.relative_to(directory).parts:
            continue
        if path.is_file() and path.name.endswith(suffixes):
            yield path


def _lexical(path: Path) -> Path:
    # Not resolve(): a linked package resolves outside the source root.
    return Path(os.path.normpath(path.absolute()))
