"""Message template rendering.

Resolvers describe their messages as Jinja2 templates and render them through
a :data:`TemplateRenderer` -- any callable taking the template text and a
mapping of named arguments. :func:`render_template` is the default renderer;
tests and embedders may inject their own.

Rendering is deterministic and side-effect free. Undefined variables are an
error (``StrictUndefined``) and leading/trailing whitespace is stripped from
the result so templates can be written as indented blocks.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Callable, Mapping

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from liveresolve.exceptions import ResolverError

TemplateRenderer = Callable[[str, Mapping[str, Any]], str]
"""Signature of a template renderer: ``(template_text, arguments) -> message``."""

_env = Environment(
    autoescape=False,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


@lru_cache(maxsize=64)
def _compile(text: str) -> Template:
    return _env.from_string(text)


def render_template(text: str, args: Mapping[str, Any]) -> str:
    """Render *text* against *args* and strip surrounding whitespace.

    Args:
        text: Jinja2 template source.
        args: Values available to the template by name.

    Returns:
        The rendered message.

    Raises:
        ResolverError: If the template is malformed or references an
            argument that was not supplied.
    """
    try:
        return _compile(text).render(**args).strip()
    except TemplateError as exc:
        raise ResolverError(f"Failed to render message template: {exc}") from exc
