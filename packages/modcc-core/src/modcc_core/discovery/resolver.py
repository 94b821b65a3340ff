"""Dependency resolver: orders entry points so dependencies come first."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from modcc_core.discovery.host import DependencyHost
from modcc_core.errors import DiscoveryError
from modcc_core.models import (
    DependencyInfo,
    EntryPoint,
    IgnoredDependency,
    InvalidEntryPoint,
    SortedEntryPointsInfo,
)

logger = structlog.get_logger(__name__)

_VISITING = 1
_VISITED = 2


class DependencyResolver:
    """Sorts entry points by dependency and filters out unbuildable ones.

    An entry point is invalid when one of its dependencies cannot be
    resolved, or when it depends (transitively) on an invalid entry point.
    Invalid entry points are excluded from the sorted output.

    Example:
        >>> resolver = DependencyResolver(DependencyHost([Path("node_modules")]))
        >>> info = resolver.sort_entry_points_by_dependency(entry_points)
        >>> [ep.name for ep in info.entry_points]
        ['@angular/core', '@angular/common', '@angular/common/http']
    """

    def __init__(self, host: DependencyHost) -> None:
        """Initialize the resolver.

        Args:
            host: Dependency host used to compute per-entry-point dependencies.
        """
        self.host = host
        self._log = logger.bind(component="dependency_resolver")

    def sort_entry_points_by_dependency(
        self,
        entry_points: Sequence[EntryPoint],
    ) -> SortedEntryPointsInfo:
        """Order entry points dependencies-first.

        Ties are broken by the order in which entry points were given.

        Args:
            entry_points: Entry points in discovery order.

        Returns:
            SortedEntryPointsInfo with valid entry points in build order.

        Raises:
            DiscoveryError: If the valid entry points form a dependency cycle.
        """
        by_name: dict[str, EntryPoint] = {}
        for entry_point in entry_points:
            if entry_point.name in by_name:
                self._log.warning(
                    "duplicate_entry_point",
                    entry_point=entry_point.name,
                    kept=str(by_name[entry_point.name].path),
                    ignored=str(entry_point.path),
                )
                continue
            by_name[entry_point.name] = entry_point

        graph: dict[str, DependencyInfo] = {
            name: self.host.compute_dependencies(ep, by_name.keys())
            for name, ep in by_name.items()
        }

        invalid = self._find_invalid(graph)
        invalid_entry_points = [
            InvalidEntryPoint(entry_point=by_name[name], missing_dependencies=sorted(missing))
            for name, missing in invalid.items()
        ]
        for item in invalid_entry_points:
            self._log.warning(
                "invalid_entry_point",
                entry_point=item.entry_point.name,
                missing_dependencies=item.missing_dependencies,
            )

        valid_names = [name for name in by_name if name not in invalid]
        ignored_dependencies = [
            IgnoredDependency(entry_point=name, dependency=dep)
            for name in valid_names
            for dep in sorted(graph[name].deep_imports)
        ]

        ordered = self._topological_order(valid_names, graph)
        return SortedEntryPointsInfo(
            entry_points=[by_name[name] for name in ordered],
            invalid_entry_points=invalid_entry_points,
            ignored_dependencies=ignored_dependencies,
        )

    def _find_invalid(self, graph: dict[str, DependencyInfo]) -> dict[str, set[str]]:
        invalid: dict[str, set[str]] = {
            name: set(info.missing) for name, info in graph.items() if info.missing
        }
        changed = True
        while changed:
            changed = False
            for name, info in graph.items():
                if name in invalid:
                    continue
                broken = {dep for dep in info.dependencies if dep in invalid}
                if broken:
                    invalid[name] = broken
                    changed = True
        return invalid

    def _topological_order(
        self,
        names: list[str],
        graph: dict[str, DependencyInfo],
    ) -> list[str]:
        position = {name: index for index, name in enumerate(names)}
        state: dict[str, int] = {}
        ordered: list[str] = []

        def visit(name: str, trail: list[str]) -> None:
            if state.get(name) == _VISITED:
                return
            if state.get(name) == _VISITING:
                cycle = trail[trail.index(name) :] + [name]
                raise DiscoveryError(
                    f"Circular dependency between entry points: {' -> '.join(cycle)}"
                )
            state[name] = _VISITING
            trail.append(name)
            for dep in sorted(
                (d for d in graph[name].dependencies if d in position), key=position.__getitem__
            ):
                visit(dep, trail)
            trail.pop()
            state[name] = _VISITED
            ordered.append(name)

        for name in names:
            visit(name, [])
        return ordered
