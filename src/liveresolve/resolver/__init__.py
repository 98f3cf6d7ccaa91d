"""Error resolution -- resolver interface, registry, templates and built-ins.

Key names:

* :class:`ErrorResolver` -- Abstract base class every resolver extends.
* :class:`RuleResolver` / :class:`Rule` -- Table-driven resolver base.
* :class:`ResolverRegistry` -- Ordered, first-match-wins lookup.
* :func:`render_template` -- Default Jinja2 message renderer.
* :func:`build_registry` -- The explicit startup registration list.

Example:
    Typical usage from the CLI entry point::

        from liveresolve.resolver import build_registry

        registry = build_registry(config, discover=True)
        result, matched = registry.resolve(exc)
"""

from __future__ import annotations

from typing import Optional

from liveresolve.models import GlobalConfig
from liveresolve.resolver.base import ErrorResolver, Rule, RuleResolver
from liveresolve.resolver.chain import find_cause, iter_causes
from liveresolve.resolver.live import TIMEOUT_ERROR_EXIT_CODE, LiveErrorResolver
from liveresolve.resolver.registry import ENTRY_POINT_GROUP, ResolverRegistry
from liveresolve.resolver.template import TemplateRenderer, render_template

__all__ = [
    "ENTRY_POINT_GROUP",
    "ErrorResolver",
    "LiveErrorResolver",
    "ResolverRegistry",
    "Rule",
    "RuleResolver",
    "TIMEOUT_ERROR_EXIT_CODE",
    "TemplateRenderer",
    "build_registry",
    "default_resolvers",
    "find_cause",
    "iter_causes",
    "render_template",
]


def default_resolvers(renderer: TemplateRenderer = render_template) -> list[ErrorResolver]:
    """Return the built-in resolvers in match order."""
    return [
        LiveErrorResolver(renderer),
    ]


def build_registry(
    config: Optional[GlobalConfig] = None,
    discover: bool = False,
    renderer: TemplateRenderer = render_template,
) -> ResolverRegistry:
    """Create and seal the registry used for the lifetime of the process.

    Built-in resolvers are registered first, then (when *discover* is true)
    any third-party resolvers from the ``liveresolve.resolvers`` entry-point
    group, filtered by ``config.resolvers``.

    Args:
        config: Global configuration. Defaults to ``GlobalConfig()``.
        discover: Whether to load entry-point resolvers.
        renderer: Template renderer handed to the built-in resolvers.

    Returns:
        A sealed :class:`ResolverRegistry`.
    """
    registry = ResolverRegistry(default_resolvers(renderer))
    if discover:
        registry.discover(config or GlobalConfig())
    registry.seal()
    return registry
