"""CLI entry point for modcc.

The ``modcc`` group resolves its subcommands on first use, so startup
and ``modcc --help`` never import modcc-core.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from modcc_cli import __version__
from modcc_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


def _split_target(cmd_name: str, target: str) -> tuple[str, str]:
    module_name, _, attribute = target.rpartition(".")
    if not module_name or not attribute:
        raise ValueError(
            f"Lazy command {cmd_name!r} needs a 'module.attribute' target, got {target!r}"
        )
    return module_name, attribute


class LazyGroup(rclick.RichGroup):
    """Rich-click group whose subcommands are imported by dotted path on demand.

    Targets are split into module and attribute when the group is built,
    so a malformed mapping fails at import of the CLI rather than at first
    use. A loaded command is registered on the group and never imported
    twice.

    Attributes:
        lazy_subcommands: Command name -> ``(module, attribute)``.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, tuple[str, str]] = {
            name: _split_target(name, target) for name, target in (lazy_subcommands or {}).items()
        }

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List eagerly registered and lazy commands together, sorted."""
        return sorted({*super().list_commands(ctx), *self.lazy_subcommands})

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Return the named command, importing and registering it if it is lazy.

        Returns:
            The command, or None when the name is unknown.
        """
        command = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if command is None and cmd_name in self.lazy_subcommands:
            command = self._load(cmd_name)
            self.add_command(command, cmd_name)
        return command

    def _load(self, cmd_name: str) -> click.Command:
        module_name, attribute = self.lazy_subcommands[cmd_name]
        command = getattr(importlib.import_module(module_name), attribute)
        if not isinstance(command, click.Command):
            raise TypeError(
                f"Lazy command {cmd_name!r} ({module_name}.{attribute}) is not a click command"
            )
        return command


LAZY_COMMANDS = {
    "build": "modcc_cli.commands.build.build",
    "status": "modcc_cli.commands.status.status",
}


def _apply_no_color(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if value:
        set_no_color(True)


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="modcc")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    is_eager=True,
    expose_value=False,
    callback=_apply_no_color,
    help="Disable colored output (NO_COLOR is honored too).",
)
def cli() -> None:
    """modcc - Module Compatibility Compiler.

    Compile installed library packages, published in several module
    formats, into a form consumable by the downstream toolchain.

    **Common commands:**

    - `modcc build` - Compile every entry point under ./node_modules
    - `modcc status` - Show which formats have been built
    """


if __name__ == "__main__":
    cli()
