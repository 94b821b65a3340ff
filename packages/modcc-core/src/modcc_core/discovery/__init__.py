"""Entry point discovery and dependency ordering.

This package finds the entry points in an installed package tree and
orders them so that every dependency precedes its dependents.
"""

from __future__ import annotations

from modcc_core.discovery.entry_point import get_entry_point_info, read_package_json
from modcc_core.discovery.finder import EntryPointFinder
from modcc_core.discovery.host import DependencyHost, extract_import_specifiers
from modcc_core.discovery.resolver import DependencyResolver

__all__ = [
    "DependencyHost",
    "DependencyResolver",
    "EntryPointFinder",
    "extract_import_specifiers",
    "get_entry_point_info",
    "read_package_json",
]
