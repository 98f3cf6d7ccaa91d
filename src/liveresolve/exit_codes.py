"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a failure category. Resolvers that attach an explicit
exit code to a :class:`~liveresolve.models.ResolvedResult` use one of these
values, so external tooling (CI scripts, shell wrappers) can tell the failure
class apart without parsing stderr.

Example::

    $ liveresolve simulate timeout
    $ echo $?
    3   # EXIT_TIMEOUT -- resources did not reconcile in time
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An error occurred. Default for matched errors without an override and for unmatched errors."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_TIMEOUT = 3
"""Resources did not reach the desired condition before the timeout expired."""

EXIT_RESOLVER_ERROR = 10
"""A resolver failed to load, register, or render its template."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C (128 + SIGINT)."""
