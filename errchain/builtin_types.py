"""Codecs for the core wrappers and common built-in exceptions."""

from __future__ import annotations

from typing import Optional, Sequence

from .canonicaljson import canonicalize, load_object
from .chain import LeafError, WithDetail, WithMessage
from .registry import DEFAULT_REGISTRY, Registry

# Exceptions whose str() round-trips through cls(message). KeyError is left
# out because its str() quotes the key.
BUILTIN_EXCEPTIONS = (
    Exception,
    ArithmeticError,
    AssertionError,
    AttributeError,
    EOFError,
    IndexError,
    LookupError,
    NotImplementedError,
    OverflowError,
    RecursionError,
    RuntimeError,
    TypeError,
    UnicodeError,
    ValueError,
    ZeroDivisionError,
)


def _load_payload(payload: bytes) -> dict:
    return load_object(payload) if payload else {}


def _safe_payload(safe: bool) -> bytes:
    return canonicalize({"safe": True}) if safe else b""


def encode_leaf(err: LeafError) -> tuple[str, list[str], bytes]:
    return err.message, [], _safe_payload(err.safe)


def decode_leaf(
    cause: Optional[BaseException], message: str, details: Sequence[str], payload: bytes
) -> LeafError:
    if cause is not None:
        raise ValueError("leaf error cannot wrap a cause")
    return LeafError(message, safe=bool(_load_payload(payload).get("safe", False)))


def encode_with_message(err: WithMessage) -> tuple[str, list[str], bytes]:
    return err.message, [], _safe_payload(err.safe)


def decode_with_message(
    cause: Optional[BaseException], message: str, details: Sequence[str], payload: bytes
) -> WithMessage:
    if cause is None:
        raise ValueError("message wrapper requires a cause")
    return WithMessage(cause, message, safe=bool(_load_payload(payload).get("safe", False)))


def encode_with_detail(err: WithDetail) -> tuple[str, list[str], bytes]:
    return "", [err.detail], canonicalize({"detail": err.detail})


def decode_with_detail(
    cause: Optional[BaseException], message: str, details: Sequence[str], payload: bytes
) -> WithDetail:
    if cause is None:
        raise ValueError("detail wrapper requires a cause")
    detail = _load_payload(payload).get("detail")
    if not isinstance(detail, str):
        raise ValueError("payload.detail must be a string")
    return WithDetail(cause, detail)


def encode_builtin(err: BaseException) -> tuple[str, list[str], bytes]:
    return str(err), [], b""


def _builtin_decoder(cls: type):
    def decode(cause, message, details, payload):
        exc = cls(message)
        if cause is not None:
            exc.__cause__ = cause
        return exc

    decode.__name__ = f"decode_{cls.__name__}"
    return decode


_BUILTIN_DECODERS = {cls: _builtin_decoder(cls) for cls in BUILTIN_EXCEPTIONS}


def register(registry: Registry = DEFAULT_REGISTRY) -> None:
    """Register the core wrappers and the built-in exceptions in *registry*."""
    registry.register_type(LeafError, encode_leaf, decode_leaf)
    registry.register_type(WithMessage, encode_with_message, decode_with_message)
    registry.register_type(WithDetail, encode_with_detail, decode_with_detail)
    for cls, decoder in _BUILTIN_DECODERS.items():
        registry.register_type(cls, encode_builtin, decoder)
