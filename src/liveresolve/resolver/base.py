"""Abstract base class for error resolvers.

A resolver owns the knowledge of one family of typed errors and the message
template for each. Every resolver must subclass :class:`ErrorResolver` and
implement :attr:`~ErrorResolver.name` and :meth:`~ErrorResolver.resolve`.

Most resolvers are a fixed, ordered list of "if the chain contains this error
type, render that template" rules. :class:`RuleResolver` implements that
pattern once so subclasses only declare their :class:`Rule` list.

Example:
    Minimal rule-based resolver::

        class DiskResolver(RuleResolver):
            rules = (
                Rule(DiskFullError, "Error: The disk is full."),
            )

            @property
            def name(self) -> str:
                return "disk"
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

from liveresolve.models import ResolvedResult
from liveresolve.resolver.chain import find_cause
from liveresolve.resolver.template import TemplateRenderer, render_template


class ErrorResolver(ABC):
    """Base class for all error resolvers.

    Resolvers are stateless with respect to a single call and may be shared
    across threads once registered. They may hold immutable configuration set
    at construction (templates, an injected renderer).
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique resolver name used for listing and logging."""
        ...

    @property
    def description(self) -> str:
        """Return a one-line description. Defaults to ``""``."""
        return ""

    @property
    def recognizes(self) -> tuple[type[BaseException], ...]:
        """Return the error types this resolver claims, in match order.

        Informational only; the registry does not use it for dispatch.
        """
        return ()

    @abstractmethod
    def resolve(self, err: object) -> tuple[ResolvedResult, bool]:
        """Explain *err* if it (or anything it wraps) is a recognised error.

        Implementations must not raise for errors they do not recognise:
        "no match" is reported as ``(ResolvedResult(), False)``.

        Args:
            err: The error to explain. May wrap an arbitrary cause chain and
                may be ``None``.

        Returns:
            ``(result, True)`` with a non-empty message on a match,
            ``(ResolvedResult(), False)`` otherwise.
        """
        ...


@dataclass(frozen=True)
class Rule:
    """One recognised error type and how to explain it.

    Attributes:
        error_type: Exception class searched for in the cause chain.
        template: Jinja2 message template.
        exit_code: Optional exit code override for this family.
        arguments: Optional function building the template arguments from the
            matched error. Defaults to ``{"err": matched}``.
    """

    error_type: type[BaseException]
    template: str
    exit_code: Optional[int] = None
    arguments: Optional[Callable[[Any], dict[str, Any]]] = None


class RuleResolver(ErrorResolver):
    """Resolver driven by an ordered tuple of :class:`Rule` objects.

    Rules are tried in declaration order against the whole cause chain; the
    first one whose ``error_type`` is found wins.

    Args:
        renderer: Template renderer. Defaults to
            :func:`~liveresolve.resolver.template.render_template`.
    """

    rules: tuple[Rule, ...] = ()

    def __init__(self, renderer: TemplateRenderer = render_template) -> None:
        self._render = renderer

    @property
    def recognizes(self) -> tuple[type[BaseException], ...]:
        return tuple(rule.error_type for rule in self.rules)

    def resolve(self, err: object) -> tuple[ResolvedResult, bool]:
        for rule in self.rules:
            matched = find_cause(err, rule.error_type)
            if matched is None:
                continue
            args = rule.arguments(matched) if rule.arguments else {"err": matched}
            message = self._render(rule.template, args)
            return ResolvedResult(message=message, exit_code=rule.exit_code), True
        return ResolvedResult(), False
