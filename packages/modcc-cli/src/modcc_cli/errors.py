"""Error reporting and exit codes for the modcc command line.

Build failures are reported by the commands themselves; this module
covers problems with the options a command was given.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
from pydantic import ValidationError as PydanticValidationError

from modcc_cli.output import error

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


EXIT_SUCCESS = 0
EXIT_FAILURE = 1  # Any fatal error (invalid options, discovery, transform)


class CLIError(click.ClickException):
    """Click exception rendered through the rich error helper.

    Attributes:
        message: Text shown to the user.
        exit_code: Process exit status (EXIT_FAILURE unless overridden).
    """

    def __init__(self, message: str, exit_code: int = EXIT_FAILURE) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Print the message to stderr; ``file`` is accepted for Click and ignored."""
        error(self.format_message())


def _describe(detail: ErrorDetails) -> str:
    field = ".".join(str(part) for part in detail["loc"]) or "<settings>"
    return f"  - {field}: {detail['msg']}"


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Render a pydantic ValidationError as one line per offending field.

    Example:
        >>> print(format_pydantic_error(err))
        Validation failed:
          - formats.0: Input should be 'fesm2015', 'esm2015', 'fesm5' or 'esm5'
    """
    return "\n".join(["Validation failed:", *(_describe(d) for d in err.errors())])


def handle_validation_error(err: PydanticValidationError) -> NoReturn:
    """Turn invalid build settings into a CLIError.

    Raises:
        CLIError: Always.
    """
    raise CLIError(f"Invalid build options:\n{format_pydantic_error(err)}")
