"""modcc status command - Show which formats have been built per entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from rich.table import Table

from modcc_cli import output
from modcc_cli.errors import EXIT_FAILURE
from modcc_cli.settings import load_settings


@click.command("status")
@click.option(
    "-s",
    "--source",
    "source",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="A path to the root folder to inspect [default: ./node_modules]",
)
@click.option(
    "-t",
    "--target",
    "target",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Root folder holding the build markers [default: source]",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON.")
def status(source: Path | None, target: Path | None, as_json: bool) -> None:
    """Show entry points in build order and the formats already built.

    Examples:

        modcc status

        modcc status --target ./dist/node_modules --json
    """
    settings = load_settings(source=source, target=target)

    from modcc_core.discovery import EntryPointFinder
    from modcc_core.errors import ModccError
    from modcc_core.markers import FileMarkerStore
    from modcc_core.models import EntryPointFormat
    from modcc_core.observability import configure_logging

    # Only warnings are logged; stdout carries the report
    configure_logging(log_level="WARNING", json_format=settings.log_format == "json")

    try:
        info = EntryPointFinder().find_entry_points(settings.source_root)
    except ModccError as e:
        output.error(f"Discovery failed: {e.user_message}")
        raise SystemExit(EXIT_FAILURE) from None

    store = FileMarkerStore(settings.source_root)
    rows: list[dict[str, Any]] = []
    for entry_point in info.entry_points:
        marked = store.list_markers(entry_point, settings.target_root)
        rows.append(
            {
                "name": entry_point.name,
                "formats": {
                    f.value: {"declared": entry_point.exposes(f), "built": f in marked}
                    for f in EntryPointFormat
                },
            }
        )
    invalid = [
        {"name": item.entry_point.name, "missing_dependencies": item.missing_dependencies}
        for item in info.invalid_entry_points
    ]

    if as_json:
        output.print_json({"entry_points": rows, "invalid_entry_points": invalid})
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", width=4)
    table.add_column("Entry point", min_width=20)
    for f in EntryPointFormat:
        table.add_column(f.value, justify="center")

    for index, row in enumerate(rows, start=1):
        cells = [_format_cell(row["formats"][f.value]) for f in EntryPointFormat]
        table.add_row(str(index), row["name"], *cells)

    output.console.print(table)

    for item in invalid:
        output.warning(
            f"Ignoring {item['name']} "
            f"(missing dependencies: {', '.join(item['missing_dependencies'])})"
        )


def _format_cell(state: dict[str, bool]) -> str:
    if state["built"]:
        return "[green]built[/green]" if state["declared"] else "[dim]absent[/dim]"
    return "pending" if state["declared"] else "-"
