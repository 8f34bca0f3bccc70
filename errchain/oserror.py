"""OS error classification over error chains, and an ``OSError`` codec.

The predicates look through every node of the chain, so they keep working
after the error has been wrapped or sent to another process.
"""

from __future__ import annotations

import base64
import errno
from typing import Optional, Sequence

from .canonicaljson import canonicalize, load_object
from .registry import DEFAULT_REGISTRY, Registry
from .search import find_first

OS_ERRORS = (
    OSError,
    BlockingIOError,
    ChildProcessError,
    ConnectionError,
    BrokenPipeError,
    ConnectionAbortedError,
    ConnectionRefusedError,
    ConnectionResetError,
    FileExistsError,
    FileNotFoundError,
    InterruptedError,
    IsADirectoryError,
    NotADirectoryError,
    PermissionError,
    ProcessLookupError,
    TimeoutError,
)

_PERMISSION_ERRNOS = frozenset({errno.EACCES, errno.EPERM})
_EXIST_ERRNOS = frozenset({errno.EEXIST, errno.ENOTEMPTY})
_NOT_EXIST_ERRNOS = frozenset({errno.ENOENT})
_TIMEOUT_ERRNOS = frozenset({errno.ETIMEDOUT, errno.EAGAIN, errno.EWOULDBLOCK})


def _classify(err, cls: type, errnos: frozenset) -> bool:
    def match(node: BaseException):
        if isinstance(node, cls):
            return None, True
        return None, isinstance(node, OSError) and node.errno in errnos

    _, found = find_first(err, match)
    return found


def is_permission(err: Optional[BaseException]) -> bool:
    """True if some node in the chain reports a permission failure."""
    return _classify(err, PermissionError, _PERMISSION_ERRNOS)


def is_exist(err: Optional[BaseException]) -> bool:
    """True if some node reports that a file or directory already exists."""
    return _classify(err, FileExistsError, _EXIST_ERRNOS)


def is_not_exist(err: Optional[BaseException]) -> bool:
    return _classify(err, FileNotFoundError, _NOT_EXIST_ERRNOS)


def is_timeout(err: Optional[BaseException]) -> bool:
    return _classify(err, TimeoutError, _TIMEOUT_ERRNOS)


def _dump_filename(value):
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return {"bytes": base64.b64encode(value).decode("ascii")}
    if isinstance(value, int) and not isinstance(value, bool):
        return {"fd": value}
    raise TypeError(f"unsupported filename type {type(value).__name__}")


def _load_filename(value):
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("bytes"), str):
        return base64.b64decode(value["bytes"], validate=True)
    if isinstance(value, dict) and type(value.get("fd")) is int:
        return value["fd"]
    raise ValueError(f"invalid filename field: {value!r}")


def encode_os_error(err: OSError) -> tuple[str, list[str], bytes]:
    if not isinstance(err.errno, int):
        return str(err), [], b""
    fields = {"errno": err.errno, "strerror": err.strerror}
    try:
        for name in ("filename", "filename2"):
            fields[name] = _dump_filename(getattr(err, name))
    except TypeError:
        # Only the text can travel; the decoder rebuilds from the message.
        return str(err), [], b""
    details = [f"errno {errno.errorcode.get(err.errno, err.errno)}"]
    return str(err), details, canonicalize(fields)


def _os_error_decoder(cls: type):
    def decode(cause, message, details, payload):
        if payload:
            fields = load_object(payload)
            code = fields.get("errno")
            if not isinstance(code, int) or isinstance(code, bool):
                raise ValueError("payload.errno must be an integer")
            exc = cls(
                code,
                fields.get("strerror"),
                _load_filename(fields.get("filename")),
                None,
                _load_filename(fields.get("filename2")),
            )
        else:
            exc = cls(message)
        if cause is not None:
            exc.__cause__ = cause
        return exc

    decode.__name__ = f"decode_{cls.__name__}"
    return decode


_OS_ERROR_DECODERS = {cls: _os_error_decoder(cls) for cls in OS_ERRORS}


def register(registry: Registry = DEFAULT_REGISTRY) -> None:
    for cls, decoder in _OS_ERROR_DECODERS.items():
        registry.register_type(cls, encode_os_error, decoder)


register()
