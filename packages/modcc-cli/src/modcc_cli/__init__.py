"""modcc-cli: Command line interface for modcc."""

from __future__ import annotations

__version__ = "0.1.0"
