"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~strapi_cache.exceptions.StrapiError` subclass.
Shell wrappers can inspect the exit code of ``strapi-cache`` to tell a
permission problem from a missing entry without parsing stderr.

Example::

    $ strapi-cache single homepage
    $ echo $?
    4   # EXIT_NOT_FOUND -- the singleton is not configured
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_PERMISSION_DENIED = 3
"""Strapi answered with a 403 error body."""

EXIT_NOT_FOUND = 4
"""Strapi answered with a null body."""

EXIT_UNKNOWN_ERROR = 5
"""Strapi answered with a body of an unexpected shape."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
