"""modcc build command - Compile installed packages for the downstream toolchain."""

from __future__ import annotations

from pathlib import Path

import click

from modcc_cli.errors import EXIT_FAILURE
from modcc_cli.output import error, info, success, warning
from modcc_cli.settings import load_settings

FORMAT_CHOICES = ["fesm2015", "esm2015", "fesm5", "esm5"]


@click.command("build")
@click.option(
    "-s",
    "--source",
    "source",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="A path to the root folder to compile [default: ./node_modules]",
)
@click.option(
    "-f",
    "--formats",
    "formats",
    type=click.Choice(FORMAT_CHOICES),
    multiple=True,
    help="A format to compile; repeat for several [default: all, in the order shown]",
)
@click.option(
    "-t",
    "--target",
    "target",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="A path to a root folder where the compiled files will be written [default: source]",
)
@click.option(
    "--core-package",
    "core_package_name",
    type=str,
    default=None,
    help="Name of the core runtime package [default: @angular/core]",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.option(
    "--log-format",
    "log_format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log output format [default: console]",
)
def build(
    source: Path | None,
    formats: tuple[str, ...],
    target: Path | None,
    core_package_name: str | None,
    verbose: bool,
    log_format: str | None,
) -> None:
    """Compile every entry point under the source folder.

    Entry points are processed dependencies first. Formats already built
    in a previous run, or not shipped by a package, are skipped. The first
    failure aborts the build.

    Examples:

        modcc build

        modcc build --source ./node_modules -f fesm2015 -f esm2015

        modcc build --target ./dist/node_modules
    """
    settings = load_settings(
        source=source,
        target=target,
        formats=formats,
        core_package_name=core_package_name,
        log_level="DEBUG" if verbose else None,
        log_format=log_format,
    )

    # Import here to avoid heavy imports at CLI startup
    from modcc_core.models import FormatOutcome
    from modcc_core.observability import configure_logging
    from modcc_core.orchestrator import run_build

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.log_format == "json",
    )

    if verbose:
        info(f"Compiling {settings.source_root} -> {settings.target_root}")
        info(f"Formats: {', '.join(f.value for f in settings.formats)}")

    result = run_build(settings)

    for item in result.results:
        if item.outcome == FormatOutcome.ALREADY_DONE:
            warning(f"Skipping {item.entry_point} : {item.format.value} (already built).")
        elif item.outcome == FormatOutcome.ABSENT:
            warning(
                f"Skipping {item.entry_point} : {item.format.value} "
                "(no entry point file for this format)."
            )

    if not result.succeeded:
        error(f"Build failed: {result.error}")
        raise SystemExit(EXIT_FAILURE)

    success(
        f"Build complete: {result.count(FormatOutcome.BUILT)} built, "
        f"{result.count(FormatOutcome.ALREADY_DONE)} already built, "
        f"{result.count(FormatOutcome.ABSENT)} not present "
        f"({result.total_duration_ms}ms)"
    )
