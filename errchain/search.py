"""Predicate search over an error chain, outermost wrapper first."""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from .chain import walk

Predicate = Callable[[BaseException], tuple[Any, bool]]
E = TypeVar("E", bound=BaseException)


def find_first(err: Optional[BaseException], predicate: Predicate) -> tuple[Any, bool]:
    """Return the first ``(value, True)`` produced by *predicate* along the chain.

    Nodes are visited from the outermost wrapper to the root cause, so when
    several nodes match, the most recently applied wrapper wins.

    Args:
        err: Chain to search; ``None`` never matches.
        predicate: Called with each node, returns ``(value, found)``.

    Returns:
        ``(value, True)`` for the first match, ``(None, False)`` otherwise.
    """
    for node in walk(err):
        value, found = predicate(node)
        if found:
            return value, True
    return None, False


def find_all(err: Optional[BaseException], predicate: Predicate) -> list:
    """Collect every matching value along the chain, outermost first."""
    values = []
    for node in walk(err):
        value, found = predicate(node)
        if found:
            values.append(value)
    return values


def find_type(err: Optional[BaseException], cls: type[E]) -> Optional[E]:
    """Return the outermost node that is an instance of *cls*."""
    node, _ = find_first(err, lambda e: (e, isinstance(e, cls)))
    return node


def contains_type(err: Optional[BaseException], cls: type[BaseException]) -> bool:
    return find_type(err, cls) is not None
