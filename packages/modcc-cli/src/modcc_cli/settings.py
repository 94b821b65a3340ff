"""Build settings loading for CLI commands.

CLI options override MODCC_* environment variables; options left unset
fall back to the environment (or the defaults).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import SettingsError

from modcc_cli.errors import CLIError, handle_validation_error

if TYPE_CHECKING:
    from modcc_core.config import BuildSettings


def load_settings(**overrides: Any) -> BuildSettings:
    """Load BuildSettings, applying CLI overrides that were actually given.

    Args:
        **overrides: Option values; None and empty tuples mean "not given".

    Returns:
        Validated BuildSettings.

    Raises:
        CLIError: If the resulting settings are invalid.
    """
    from modcc_core.config import BuildSettings

    given = {k: v for k, v in overrides.items() if v is not None and v != ()}
    try:
        return BuildSettings(**given)
    except PydanticValidationError as e:
        handle_validation_error(e)
    except SettingsError as e:
        raise CLIError(f"Invalid build options: {e}") from None
