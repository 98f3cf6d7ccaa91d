"""Walk the chain of exceptions an error wraps.

Python links a wrapped error through ``__cause__`` (``raise ... from exc``)
or, implicitly, through ``__context__`` when an exception is raised while
another one is being handled. Resolvers use :func:`find_cause` to test the
whole chain by type, never by message text.
"""

from __future__ import annotations

from typing import Iterator, Optional, TypeVar

E = TypeVar("E", bound=BaseException)


def iter_causes(err: object) -> Iterator[BaseException]:
    """Yield *err* followed by every exception it wraps, outermost first.

    ``__cause__`` wins over ``__context__``; an implicit context is skipped
    when it was suppressed with ``raise ... from None``. Cycles are broken
    by identity. Anything that is not an exception (``None`` included)
    yields nothing.
    """
    seen: set[int] = set()
    current: Optional[BaseException] = err if isinstance(err, BaseException) else None
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None


def find_cause(err: object, error_type: type[E]) -> Optional[E]:
    """Return the first exception in the chain of *err* that is an *error_type*.

    Args:
        err: The error to inspect. May be ``None`` or any other object.
        error_type: The exception class to look for. Subclasses match too.

    Returns:
        The matching exception instance, or ``None``.
    """
    for exc in iter_causes(err):
        if isinstance(exc, error_type):
            return exc
    return None
