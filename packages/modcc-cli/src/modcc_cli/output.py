"""Console output for the modcc command line.

Reports go to stdout and errors to stderr. Colors are off when NO_COLOR
is set or ``--no-color`` is given.
"""

from __future__ import annotations

import json
import os
from typing import Any

from rich.console import Console

_NO_COLOR_ENV = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False, stderr: bool = False) -> Console:
    """Build a rich Console.

    Args:
        no_color: Disable colors (NO_COLOR disables them regardless).
        stderr: Write to stderr instead of stdout.
    """
    plain = no_color or _NO_COLOR_ENV
    return Console(
        force_terminal=False if plain else None,
        no_color=plain,
        stderr=stderr,
    )


console = create_console()
err_console = create_console(stderr=True)


def success(message: str, **kwargs: Any) -> None:
    """Print ``✓ message``.

    Example:
        >>> success("Build complete: 12 built, 0 already built, 4 not present (85ms)")
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print ``✗ message`` to stderr.

    Example:
        >>> error("Build failed: Transform failed (@angular/common : esm2015)")
    """
    err_console.print(f"[red]✗[/red] {message}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print ``⚠ message``; used for skipped formats and ignored entry points."""
    console.print(f"[yellow]⚠[/yellow] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    console.print(message, **kwargs)


def print_json(data: dict[str, Any], **kwargs: Any) -> None:
    """Print ``data`` as indented JSON."""
    console.print_json(json.dumps(data), **kwargs)


def set_no_color(no_color: bool) -> None:
    """Replace both module consoles, e.g. after ``--no-color`` is parsed."""
    global console, err_console
    console = create_console(no_color=no_color)
    err_console = create_console(no_color=no_color, stderr=True)
