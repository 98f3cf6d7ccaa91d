"""Resolver registry -- ordered lookup, entry-point discovery, and sealing.

This module contains :class:`ResolverRegistry`, the object the CLI boundary
asks to explain an error. Resolvers are tried in registration order and the
first one that recognises the error wins, so an earlier resolver whose types
are a superset of a later one's shadows it completely.

The registry is filled during startup and then sealed; after :meth:`seal`
it is read-only and may be shared between threads without locking.

Third-party packages contribute resolvers by declaring an entry point in the
``liveresolve.resolvers`` group::

    [project.entry-points."liveresolve.resolvers"]
    my-resolver = "my_package.resolver:MyResolver"
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Any, Iterator, Optional

from liveresolve.exceptions import ResolverError
from liveresolve.models import GlobalConfig, ResolvedResult
from liveresolve.resolver.base import ErrorResolver

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "liveresolve.resolvers"
"""The entry-point group name used for resolver discovery."""


class ResolverRegistry:
    """Ordered collection of :class:`~liveresolve.resolver.base.ErrorResolver` objects.

    Example:
        Typical usage::

            registry = ResolverRegistry()
            registry.register(LiveErrorResolver())
            registry.seal()
            result, matched = registry.resolve(exc)

    Args:
        resolvers: Optional initial resolvers, registered in order.
    """

    def __init__(self, resolvers: Optional[list[ErrorResolver]] = None) -> None:
        self._resolvers: list[ErrorResolver] = []
        self._sealed = False
        for resolver in resolvers or []:
            self.register(resolver)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, resolver: ErrorResolver) -> None:
        """Append *resolver* to the end of the match order.

        No deduplication is performed: registering the same resolver twice
        simply gives it two slots.

        Args:
            resolver: The resolver to add.

        Raises:
            ResolverError: If the registry has been sealed.
        """
        if self._sealed:
            raise ResolverError(
                f"Cannot register resolver '{resolver.name}': registry is sealed"
            )
        self._resolvers.append(resolver)
        logger.debug("Registered resolver '%s' at position %d", resolver.name, len(self._resolvers))

    def discover(self, config: GlobalConfig) -> list[str]:
        """Register third-party resolvers found in the ``liveresolve.resolvers`` group.

        The *enabled* and *disabled* lists in
        :class:`~liveresolve.models.ResolversConfig` act as an allowlist and a
        blocklist. When *enabled* is non-empty only those entry points are
        loaded; otherwise everything not in *disabled* is loaded. Discovered
        resolvers go after everything already registered.

        Args:
            config: The global configuration.

        Returns:
            Names of the entry points that were registered. Entry points that
            fail to load are logged as warnings and skipped.

        Raises:
            ResolverError: If the registry has been sealed.
        """
        if self._sealed:
            raise ResolverError("Cannot discover resolvers: registry is sealed")

        loaded_names: list[str] = []
        enabled_set = set(config.resolvers.enabled)
        disabled_set = set(config.resolvers.disabled)

        entry_points = importlib.metadata.entry_points()
        if hasattr(entry_points, "select"):
            eps = entry_points.select(group=ENTRY_POINT_GROUP)
        else:
            eps = entry_points.get(ENTRY_POINT_GROUP, [])  # type: ignore[union-attr]

        for ep in eps:
            name = ep.name

            if enabled_set and name not in enabled_set:
                logger.debug("Resolver '%s' not in enabled list, skipping", name)
                continue
            if name in disabled_set:
                logger.debug("Resolver '%s' is disabled, skipping", name)
                continue

            try:
                resolver_cls = ep.load()
                resolver = resolver_cls()
                if not isinstance(resolver, ErrorResolver):
                    raise TypeError(f"{resolver_cls!r} is not an ErrorResolver")
            except Exception as exc:
                logger.warning("Failed to load resolver '%s': %s", name, exc)
                continue
            self.register(resolver)
            loaded_names.append(name)
            logger.info("Loaded resolver '%s' from entry point", name)

        return loaded_names

    def seal(self) -> None:
        """Freeze the match order. Further registration raises :class:`ResolverError`."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        """Whether :meth:`seal` has been called."""
        return self._sealed

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, err: object) -> tuple[ResolvedResult, bool]:
        """Ask each resolver in registration order to explain *err*.

        A resolver that raises is logged as a warning and skipped, as is a
        match with an empty message. :class:`ResolverError` (a broken message
        template) is not caught.

        Args:
            err: The error to explain. ``None`` and non-exception values are
                reported as unmatched.

        Returns:
            The first ``(result, True)`` produced by a resolver, or
            ``(ResolvedResult(), False)`` if none recognised the error.

        Raises:
            ResolverError: If a resolver failed to render its message.
        """
        for resolver in self._resolvers:
            try:
                result, matched = resolver.resolve(err)
            except ResolverError:
                raise
            except Exception as exc:
                logger.warning("Resolver '%s' failed on %s: %s", resolver.name, type(err).__name__, exc)
                continue
            if matched and result.message:
                logger.debug("Error %r resolved by '%s'", type(err).__name__, resolver.name)
                return result, True
            if matched:
                logger.debug("Resolver '%s' matched with an empty message, skipping", resolver.name)
        return ResolvedResult(), False

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def list_resolvers(self) -> list[dict[str, Any]]:
        """List registered resolvers in match order.

        Returns:
            A list of dicts with ``"name"``, ``"description"`` and
            ``"recognizes"`` (error class names) keys.
        """
        return [
            {
                "name": resolver.name,
                "description": resolver.description,
                "recognizes": [t.__name__ for t in resolver.recognizes],
            }
            for resolver in self._resolvers
        ]

    def __iter__(self) -> Iterator[ErrorResolver]:
        return iter(list(self._resolvers))

    def __len__(self) -> int:
        return len(self._resolvers)
