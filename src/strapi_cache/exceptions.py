"""Exception hierarchy for strapi-cache.

All exceptions inherit from :class:`StrapiError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`strapi_cache.exit_codes`. Library callers catch the specific
subclasses; the CLI entry point in :func:`strapi_cache.app.main` catches
``StrapiError`` and exits with the matching code.

Subclass hierarchy::

    StrapiError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- PermissionDenied    (exit 3)
    +-- NotFound            (exit 4)
    +-- UnknownError        (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- ConfigError         (exit 1)
"""

from strapi_cache.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_PERMISSION_DENIED,
    EXIT_UNKNOWN_ERROR,
)


class StrapiError(Exception):
    """Base exception for all strapi-cache errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(StrapiError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class PermissionDenied(StrapiError):
    """Raised when Strapi returns a 403 status embedded in the JSON body."""

    exit_code = EXIT_PERMISSION_DENIED


class NotFound(StrapiError):
    """Raised when Strapi returns a literal ``null`` body."""

    exit_code = EXIT_NOT_FOUND


class UnknownError(StrapiError):
    """Raised when the body does not have the shape the operation expects."""

    exit_code = EXIT_UNKNOWN_ERROR


class ConnectionError_(StrapiError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(StrapiError):
    """Raised for configuration problems (missing URL, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
