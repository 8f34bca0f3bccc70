"""errchain: causal error chains with verbose formatting and wire round-tripping."""

import logging

from . import builtin_types
from .chain import (
    LeafError,
    WithDetail,
    WithMessage,
    Wrapper,
    chain_length,
    get_cause,
    has_cause,
    message_of,
    new,
    unwrap_all,
    walk,
    with_detail,
    wrap,
)
from .config import Settings, configure, get_settings
from .errors import (
    CanonicalizationError,
    DoubleRegistration,
    ErrChainError,
    MalformedPayload,
    RegistryError,
    RegistryFrozen,
    StructuralViolation,
    WireFormatError,
)
from .formatting import (
    DetailFormatter,
    SafeMessager,
    format_error,
    format_quoted,
    format_redacted,
    format_simple,
    format_verbose,
)
from .opaque import OpaqueError
from .registry import DEFAULT_REGISTRY, Registry, type_key_of
from .search import contains_type, find_all, find_first, find_type
from .wire import (
    WireRecord,
    decode_error,
    decode_from_bytes,
    encode_error,
    encode_to_bytes,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

builtin_types.register(DEFAULT_REGISTRY)

__all__ = [
    "Wrapper",
    "LeafError",
    "WithMessage",
    "WithDetail",
    "new",
    "wrap",
    "with_detail",
    "get_cause",
    "has_cause",
    "message_of",
    "walk",
    "unwrap_all",
    "chain_length",
    "find_first",
    "find_all",
    "find_type",
    "contains_type",
    "DetailFormatter",
    "SafeMessager",
    "format_error",
    "format_simple",
    "format_verbose",
    "format_quoted",
    "format_redacted",
    "Registry",
    "DEFAULT_REGISTRY",
    "type_key_of",
    "OpaqueError",
    "WireRecord",
    "encode_error",
    "decode_error",
    "encode_to_bytes",
    "decode_from_bytes",
    "Settings",
    "configure",
    "get_settings",
    "ErrChainError",
    "StructuralViolation",
    "RegistryError",
    "DoubleRegistration",
    "RegistryFrozen",
    "MalformedPayload",
    "WireFormatError",
    "CanonicalizationError",
]
