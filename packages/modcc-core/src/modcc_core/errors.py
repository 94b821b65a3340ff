"""Custom exception hierarchy for modcc-core.

This module defines the exception classes raised during a build:
- ModccError: Base exception for all modcc-related errors
- DiscoveryError: Entry point discovery or dependency ordering failed
- TransformError: Bundle resolution or transformation failed

Both concrete errors are fatal to a build run. Skipped formats (already
built, or not shipped by a package) are never reported through exceptions.

User-facing messages are safe to display; technical details are logged
internally via structlog.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)


class ModccError(Exception):
    """Base exception for modcc.

    All modcc exceptions inherit from this class.

    Args:
        user_message: Message to display to the user.
        internal_details: Optional technical details for logging.

    Example:
        >>> raise ModccError(
        ...     "Build failed",
        ...     internal_details="OSError: [Errno 13] Permission denied: '/out/fesm2015'"
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ModccError with user message and optional internal details.

        Args:
            user_message: Message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details

        if internal_details:
            logger.error(
                "modcc_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class DiscoveryError(ModccError):
    """Raised when entry points cannot be discovered or ordered.

    Use this exception when:
    - The source root does not exist or is not a directory
    - A package.json cannot be parsed
    - The dependency graph contains a cycle

    Attributes:
        path: Filesystem path involved in the failure (if known).

    Example:
        >>> raise DiscoveryError(
        ...     "Circular dependency between entry points: a -> b -> a",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize DiscoveryError.

        Args:
            user_message: Message to display to the user.
            path: Filesystem path involved in the failure (optional).
            internal_details: Technical details for internal logging only.
        """
        full_message = f"{user_message} ({path})" if path else user_message
        super().__init__(full_message, internal_details=internal_details)
        self.path = path


class TransformError(ModccError):
    """Raised when an entry point bundle cannot be resolved or transformed.

    Attributes:
        entry_point: Name of the entry point being processed.
        format: Format being processed.

    Example:
        >>> raise TransformError(
        ...     "Failed to write transformed output",
        ...     entry_point="@angular/common",
        ...     format="esm2015",
        ... )
        # User sees: "Failed to write transformed output (@angular/common : esm2015)"
    """

    def __init__(
        self,
        user_message: str,
        *,
        entry_point: str | None = None,
        format: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize TransformError with entry point context.

        Args:
            user_message: Message to display to the user.
            entry_point: Name of the entry point (optional).
            format: Format being processed (optional).
            internal_details: Technical details for internal logging only.
        """
        context_parts = [part for part in (entry_point, format) if part]
        if context_parts:
            full_message = f"{user_message} ({' : '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.entry_point = entry_point
        self.format = format
