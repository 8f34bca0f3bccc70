"""Simple and verbose rendering of error chains.

Verbs follow the familiar printf style: ``s`` and ``v`` give the single-line
form, ``q`` the quoted single-line form, ``+v`` the numbered multi-frame
listing. Nodes opt into extra output through two optional capabilities:

* :class:`DetailFormatter` - ``error_details()`` returns lines shown under the
  node's frame in verbose mode.
* :class:`SafeMessager` - ``safe_message()`` returns the node's message when it
  is fit for disclosure, or ``None``.
"""

from __future__ import annotations

import json
from typing import Optional, Protocol, Sequence, runtime_checkable

from .chain import message_of, walk
from .registry import type_key_of

SEPARATOR = ": "
VERBS = frozenset({"s", "v", "q", "+v"})


@runtime_checkable
class DetailFormatter(Protocol):
    def error_details(self) -> Sequence[str]: ...


@runtime_checkable
class SafeMessager(Protocol):
    def safe_message(self) -> Optional[str]: ...


def type_name(err: BaseException) -> str:
    """Dynamic type identity shown in verbose output."""
    return type_key_of(err)


def format_simple(err: Optional[BaseException]) -> str:
    """Join the non-empty node messages with ``": "``, outermost first."""
    if err is None:
        return "None"
    return SEPARATOR.join(m for m in (message_of(n) for n in walk(err)) if m)


def format_quoted(err: Optional[BaseException]) -> str:
    return json.dumps(format_simple(err), ensure_ascii=False)


def format_verbose(err: Optional[BaseException]) -> str:
    """Render every frame with its detail lines and a trailing type index.

    Example::

        loading config: file missing
        (1) loading config
        Wraps: (2) file missing
          | not found
        Error types: (1) errchain.chain.WithMessage (2) app.NotFound
    """
    if err is None:
        return "None"
    nodes = list(walk(err))
    lines = [format_simple(err)]
    for position, node in enumerate(nodes, start=1):
        first, *rest = message_of(node).split("\n")
        header = f"({position}) {first}" if first else f"({position})"
        lines.append(header if position == 1 else f"Wraps: {header}")
        lines.extend(_detail_line(extra) for extra in rest)
        for detail in _details_of(node):
            lines.extend(_detail_line(piece) for piece in str(detail).split("\n"))
    index = " ".join(f"({pos}) {type_name(n)}" for pos, n in enumerate(nodes, start=1))
    lines.append(f"Error types: {index}")
    return "\n".join(lines)


def format_redacted(err: Optional[BaseException], placeholder: str = "×") -> str:
    """Simple form with *placeholder* standing in for undeclared-safe messages."""
    if err is None:
        return "None"
    parts = []
    for node in walk(err):
        if not message_of(node):
            continue
        safe = node.safe_message() if isinstance(node, SafeMessager) else None
        parts.append(placeholder if safe is None else safe)
    return SEPARATOR.join(parts)


def format_error(err: Optional[BaseException], verb: str = "v") -> str:
    """Render *err* according to a printf-style *verb*.

    Raises:
        ValueError: On a verb outside ``s``, ``v``, ``q`` and ``+v``.
    """
    if verb not in VERBS:
        raise ValueError(f"unsupported format verb: {verb!r}")
    if verb == "+v":
        return format_verbose(err)
    if verb == "q":
        return format_quoted(err)
    return format_simple(err)


def _details_of(node: BaseException) -> Sequence[str]:
    if isinstance(node, DetailFormatter):
        return node.error_details()
    return ()


def _detail_line(text: str) -> str:
    return f"  | {text}" if text else "  |"
