"""Fallback policy between the resolver registry and the user.

The registry only answers "can anyone explain this error?". This module turns
that answer into what the CLI prints and the status it exits with:

* **matched** -- the resolver's message, verbatim, and its exit code override
  or :data:`~liveresolve.exit_codes.EXIT_GENERIC_FAILURE`;
* **unmatched** -- the error's own string form (or its type name when that is
  empty) and the generic failure code. The package's own
  :class:`~liveresolve.exceptions.LiveResolveError` subclasses keep their
  ``exit_code`` so usage and configuration errors stay distinguishable.

A resolver whose message template is broken leaves the error unresolved
with :data:`~liveresolve.exit_codes.EXIT_RESOLVER_ERROR`. The result is
never an empty message.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from liveresolve.exceptions import LiveResolveError, ResolverError
from liveresolve.exit_codes import EXIT_GENERIC_FAILURE, EXIT_RESOLVER_ERROR
from liveresolve.resolver.registry import ResolverRegistry

logger = logging.getLogger(__name__)


class Explanation(NamedTuple):
    """What the CLI boundary presents for one error."""

    message: str
    exit_code: int
    resolved: bool


def explain(err: object, registry: ResolverRegistry) -> Explanation:
    """Resolve *err* through *registry*, falling back to a generic explanation.

    If the matching resolver cannot render its message, the error is
    presented unresolved with :data:`~liveresolve.exit_codes.EXIT_RESOLVER_ERROR`.

    Args:
        err: The unhandled error. ``None`` is tolerated.
        registry: A populated (normally sealed) registry.

    Returns:
        An :class:`Explanation` with a non-empty message.
    """
    try:
        result, matched = registry.resolve(err)
    except ResolverError as exc:
        logger.warning("%s", exc)
        return Explanation(_fallback_message(err), EXIT_RESOLVER_ERROR, False)
    if matched and result.message:
        return Explanation(result.message, result.effective_exit_code(), True)

    exit_code = err.exit_code if isinstance(err, LiveResolveError) else EXIT_GENERIC_FAILURE
    return Explanation(_fallback_message(err), exit_code, False)


def _fallback_message(err: object) -> str:
    if err is None:
        return "Unknown error"
    return str(err) or type(err).__name__


def report_error(err: BaseException, registry: ResolverRegistry) -> int:
    """Explain *err* on stderr via the global output manager and return the exit code."""
    from liveresolve.output import get_output

    output = get_output()
    explanation = explain(err, registry)
    output.error_report(explanation.message, explanation.exit_code, explanation.resolved)
    if not explanation.resolved:
        output.debug(f"{type(err).__module__}.{type(err).__qualname__} was not matched by any resolver")
    return explanation.exit_code
