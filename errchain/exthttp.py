"""HTTP status code annotation for error chains.

Shows how a wrapper type unknown to the rest of the library plugs into the
formatter and the wire registry.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .canonicaljson import canonicalize, load_object
from .chain import Wrapper
from .registry import DEFAULT_REGISTRY, Registry
from .search import find_first


class WithHTTPCode(Wrapper):
    """Wrapper carrying an HTTP status code; contributes no message."""

    def __init__(self, cause: BaseException, code: int):
        super().__init__(cause, "")
        self._code = code

    @property
    def code(self) -> int:
        return self._code

    def error_details(self) -> list[str]:
        return [f"http code: {self._code}"]


def wrap_with_http_code(err: Optional[BaseException], code: int) -> Optional[WithHTTPCode]:
    """Attach *code* to *err*; ``None`` stays ``None``."""
    if err is None:
        return None
    return WithHTTPCode(err, code)


def get_http_code(err: Optional[BaseException], default_code: int) -> int:
    """Return the outermost HTTP code in the chain, or *default_code*."""
    code, found = find_first(
        err, lambda e: (e.code, True) if isinstance(e, WithHTTPCode) else (None, False)
    )
    return code if found else default_code


def encode_with_http_code(err: WithHTTPCode) -> tuple[str, list[str], bytes]:
    return "", [f"HTTP {err.code}"], canonicalize({"code": err.code})


def decode_with_http_code(
    cause: Optional[BaseException], message: str, details: Sequence[str], payload: bytes
) -> WithHTTPCode:
    if cause is None:
        raise ValueError("HTTP code wrapper requires a cause")
    code = load_object(payload).get("code")
    if not isinstance(code, int) or isinstance(code, bool):
        raise ValueError("payload.code must be an integer")
    return WithHTTPCode(cause, code)


def register(registry: Registry = DEFAULT_REGISTRY) -> None:
    registry.register_type(WithHTTPCode, encode_with_http_code, decode_with_http_code)


register()
