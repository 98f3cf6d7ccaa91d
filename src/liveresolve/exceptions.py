"""Exception hierarchy for liveresolve.

All exceptions raised by the package itself inherit from
:class:`LiveResolveError`, which carries an ``exit_code`` attribute mapped to
a constant from :mod:`liveresolve.exit_codes`. The typed errors that the
resolvers *explain* live in :mod:`liveresolve.live.errors`; they belong to
other subsystems and do not share this base class.

Subclass hierarchy::

    LiveResolveError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 1)
    +-- ResolverError       (exit 10)
"""

from liveresolve.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_RESOLVER_ERROR,
)


class LiveResolveError(Exception):
    """Base exception for all liveresolve errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`liveresolve.exit_codes`. When no resolver claims
    the error, the CLI boundary exits with this code.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(LiveResolveError):
    """Raised for invalid CLI arguments or unknown option values."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(LiveResolveError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class ResolverError(LiveResolveError):
    """Raised when a resolver cannot be registered or its template cannot be rendered.

    A malformed template is a programming error, so this is never produced
    for a well-formed template bound against its documented arguments.
    """

    exit_code = EXIT_RESOLVER_ERROR
