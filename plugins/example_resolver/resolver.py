"""Example third-party resolver that explains cluster connection failures.

Register it from another package with::

    [project.entry-points."liveresolve.resolvers"]
    example = "example_resolver.resolver:ExampleResolver"
"""

from __future__ import annotations

from typing import Any

from liveresolve.resolver import Rule, RuleResolver

CONNECTION_REFUSED_MSG = """
Error: Unable to connect to the cluster{% if address %} at {{ address }}{% endif %}.

Check that the cluster is running and that your kubeconfig points at it.
"""

CONNECTION_TIMEOUT_MSG = """
Error: Timed out connecting to the cluster.
"""


def _address(err: ConnectionRefusedError) -> dict[str, Any]:
    return {"address": err.filename or ""}


class ExampleResolver(RuleResolver):
    """Explains refused and timed-out connections to the API server."""

    rules = (
        Rule(ConnectionRefusedError, CONNECTION_REFUSED_MSG, arguments=_address),
        Rule(TimeoutError, CONNECTION_TIMEOUT_MSG),
    )

    @property
    def name(self) -> str:
        return "example"

    @property
    def description(self) -> str:
        return "Example resolver for cluster connection errors"
