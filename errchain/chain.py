"""Error chain model: wrappers around a single cause.

Any ``BaseException`` is a chain node. Library wrappers derive from
:class:`Wrapper` and hold their cause explicitly; for plain exceptions the
cause is the explicit ``__cause__`` set by ``raise ... from ...``. ``None`` is
the "no error" value and wrapping it yields ``None``.
"""

from __future__ import annotations

from typing import Iterator, Optional

from .config import get_settings
from .errors import StructuralViolation


class Wrapper(Exception):
    """Base class for chain nodes built by this library.

    ``message`` is this node's own contribution (possibly empty); ``str()``
    renders the whole chain in simple form. Instances are read-only once
    constructed.
    """

    def __init__(self, cause: Optional[BaseException] = None, message: str = ""):
        super().__init__(message)
        self._cause = cause
        self._message = message
        if cause is not None:
            # Keeps Python tracebacks showing the same chain.
            self.__cause__ = cause

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    @property
    def message(self) -> str:
        return self._message

    def __str__(self) -> str:
        from .formatting import format_simple

        return format_simple(self)

    def __format__(self, spec: str) -> str:
        if not spec:
            return str(self)
        from .formatting import format_error

        return format_error(self, spec)

    def __reduce__(self):
        # Subclass constructors differ, so rebuild from state rather than args.
        return _restore_wrapper, (type(self), self.args, dict(self.__dict__))


def _restore_wrapper(cls: type, args: tuple, state: dict) -> Wrapper:
    err = cls.__new__(cls, *args)
    err.__dict__.update(state)
    if err._cause is not None:
        err.__cause__ = err._cause
    return err


class LeafError(Wrapper):
    """Root cause carrying only a message."""

    def __init__(self, message: str, *, safe: bool = False):
        super().__init__(None, message)
        self._safe = safe

    @property
    def safe(self) -> bool:
        return self._safe

    def safe_message(self) -> Optional[str]:
        return self._message if self._safe else None


class WithMessage(Wrapper):
    """Wrapper prefixing its cause with a message."""

    def __init__(self, cause: BaseException, message: str, *, safe: bool = False):
        super().__init__(cause, message)
        self._safe = safe

    @property
    def safe(self) -> bool:
        return self._safe

    def safe_message(self) -> Optional[str]:
        return self._message if self._safe else None


class WithDetail(Wrapper):
    """Wrapper adding a verbose-only detail line; contributes no message."""

    def __init__(self, cause: BaseException, detail: str):
        super().__init__(cause, "")
        self._detail = detail

    @property
    def detail(self) -> str:
        return self._detail

    def error_details(self) -> list[str]:
        return [self._detail]


def new(message: str, *, safe: bool = False) -> LeafError:
    """Create a root cause with *message*.

    ``safe=True`` declares the message fit for disclosure in redacted output.
    """
    return LeafError(message, safe=safe)


def wrap(
    cause: Optional[BaseException], message: str, *, safe: bool = False
) -> Optional[WithMessage]:
    """Wrap *cause* with *message*; ``wrap(None, ...)`` is ``None``."""
    if cause is None:
        return None
    return WithMessage(cause, message, safe=safe)


def with_detail(cause: Optional[BaseException], detail: str) -> Optional[WithDetail]:
    """Attach a verbose-only *detail* line; ``None`` stays ``None``."""
    if cause is None:
        return None
    return WithDetail(cause, detail)


def get_cause(err: Optional[BaseException]) -> Optional[BaseException]:
    """Return the immediate predecessor of *err*, or ``None`` at the root."""
    if err is None:
        return None
    if isinstance(err, Wrapper):
        return err.cause
    return err.__cause__


def has_cause(err: Optional[BaseException]) -> bool:
    return get_cause(err) is not None


def message_of(err: Optional[BaseException]) -> str:
    """Return the node's own message, not concatenated with its causes."""
    if err is None:
        return ""
    if isinstance(err, Wrapper):
        return err.message
    return str(err)


def walk(err: Optional[BaseException]) -> Iterator[BaseException]:
    """Yield *err* and each of its causes, outermost first.

    Raises:
        StructuralViolation: On a cycle or a chain longer than
            ``Settings.max_chain_depth``.
    """
    limit = get_settings().max_chain_depth
    seen: set[int] = set()
    while err is not None:
        if id(err) in seen:
            raise StructuralViolation(
                f"cycle detected in error chain at {type(err).__qualname__}"
            )
        if len(seen) >= limit:
            raise StructuralViolation(f"error chain longer than {limit} nodes")
        seen.add(id(err))
        yield err
        err = get_cause(err)


def unwrap_all(err: Optional[BaseException]) -> Optional[BaseException]:
    """Return the root cause of *err*."""
    root = None
    for node in walk(err):
        root = node
    return root


def chain_length(err: Optional[BaseException]) -> int:
    return sum(1 for _ in walk(err))
