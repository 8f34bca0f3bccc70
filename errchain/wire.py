"""Chain encoding to wire records and reconstruction on the receiving side.

A chain of N nodes encodes to N :class:`WireRecord` values, outermost first.
Decoding runs root first so each decoder receives its already rebuilt cause;
records whose type key is not registered locally become
:class:`~errchain.opaque.OpaqueError` nodes.

Byte framing (canonical JSON, RFC 8785)::

    {"records": [{"details": [...], "message": "...",
                  "payload": "<standard base64>", "type_key": "..."}],
     "version": "0.1"}
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .canonicaljson import canonicalize, load_object
from .chain import message_of, walk
from .config import get_settings
from .errors import MalformedPayload, StructuralViolation, WireFormatError
from .opaque import OpaqueError
from .registry import DEFAULT_REGISTRY, Registry, type_key_of

_LOG = logging.getLogger(__name__)

WIRE_VERSION = "0.1"
_RECORD_FIELDS = frozenset({"type_key", "message", "details", "payload"})
_BASE64_STANDARD_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")


@dataclass(frozen=True)
class WireRecord:
    """One encoded chain node."""

    type_key: str
    message: str = ""
    details: tuple[str, ...] = ()
    payload: bytes = b""

    def to_dict(self) -> dict:
        return {
            "type_key": self.type_key,
            "message": self.message,
            "details": list(self.details),
            "payload": base64.b64encode(self.payload).decode("ascii"),
        }

    @classmethod
    def from_dict(cls, raw: dict, position: int = 0) -> "WireRecord":
        """Validate and build a record from its JSON form.

        Raises:
            WireFormatError: On any structural violation.
        """
        where = f"records[{position}]"
        if not isinstance(raw, dict):
            raise WireFormatError(f"{where} must be an object")
        missing = _RECORD_FIELDS - set(raw.keys())
        if missing:
            raise WireFormatError(f"{where} missing fields: {sorted(missing)}")
        if not isinstance(raw["type_key"], str) or not raw["type_key"]:
            raise WireFormatError(f"{where}.type_key must be a non-empty string")
        if not isinstance(raw["message"], str):
            raise WireFormatError(f"{where}.message must be a string")
        details = raw["details"]
        if not isinstance(details, list) or not all(isinstance(d, str) for d in details):
            raise WireFormatError(f"{where}.details must be a list of strings")
        payload = _decode_base64_standard(raw["payload"], f"{where}.payload")
        return cls(raw["type_key"], raw["message"], tuple(details), payload)


def encode_error(
    err: Optional[BaseException], registry: Optional[Registry] = None
) -> list[WireRecord]:
    """Encode the chain of *err* into records, outermost first.

    Nodes without a registered encoder still travel: their message becomes
    both the record message and its only detail, with an empty payload.
    """
    if registry is None:
        registry = DEFAULT_REGISTRY
    return [_encode_node(node, registry) for node in walk(err)]


def decode_error(
    records: Iterable[WireRecord], registry: Optional[Registry] = None
) -> Optional[BaseException]:
    """Rebuild a chain from records produced by :func:`encode_error`.

    Returns:
        The outermost reconstructed node, or ``None`` for no records.

    Raises:
        MalformedPayload: A registered decoder failed; nothing is returned.
        StructuralViolation: More records than ``Settings.max_chain_depth``.
    """
    if registry is None:
        registry = DEFAULT_REGISTRY
    records = list(records)
    limit = get_settings().max_chain_depth
    if len(records) > limit:
        raise StructuralViolation(f"encoded chain has {len(records)} records, limit {limit}")

    cause: Optional[BaseException] = None
    for position in reversed(range(len(records))):
        record = records[position]
        entry = registry.lookup(record.type_key)
        if entry is None:
            _LOG.debug("no codec for %s at record %d, using opaque node", record.type_key, position)
            cause = OpaqueError(
                cause, record.type_key, record.message, record.details, record.payload
            )
            continue
        try:
            cause = entry.decoder(cause, record.message, record.details, record.payload)
        except Exception as e:
            _LOG.warning("decoder for %s failed at record %d: %s", record.type_key, position, e)
            raise MalformedPayload(record.type_key, position, str(e)) from e
    return cause


def to_bytes(records: Iterable[WireRecord]) -> bytes:
    """Serialize records to canonical JSON bytes."""
    return canonicalize(
        {"version": WIRE_VERSION, "records": [r.to_dict() for r in records]}
    )


def from_bytes(data: bytes) -> list[WireRecord]:
    """Parse bytes produced by :func:`to_bytes`.

    Raises:
        WireFormatError: If the framing is not valid.
    """
    try:
        obj = load_object(data)
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise WireFormatError(f"Invalid encoded chain: {e}") from e

    if obj.get("version") != WIRE_VERSION:
        raise WireFormatError(f"Unsupported wire version: {obj.get('version')}")
    raw_records = obj.get("records")
    if not isinstance(raw_records, list):
        raise WireFormatError("records must be a list")
    return [WireRecord.from_dict(raw, i) for i, raw in enumerate(raw_records)]


def encode_to_bytes(err: Optional[BaseException], registry: Optional[Registry] = None) -> bytes:
    return to_bytes(encode_error(err, registry))


def decode_from_bytes(data: bytes, registry: Optional[Registry] = None) -> Optional[BaseException]:
    return decode_error(from_bytes(data), registry)


def _encode_node(node: BaseException, registry: Registry) -> WireRecord:
    if isinstance(node, OpaqueError):
        # Forward what was received, under the original key.
        return WireRecord(node.original_type_key, node.message, node.details, node.payload)

    key = type_key_of(node)
    entry = registry.lookup(key)
    if entry is None:
        message = message_of(node)
        return WireRecord(key, message, (message,), b"")
    message, details, payload = entry.encoder(node)
    return WireRecord(key, message, tuple(details), bytes(payload))


def _decode_base64_standard(value, field_name: str) -> bytes:
    """Decode standard base64 (RFC 4648 §4). Rejects URL-safe."""
    if not isinstance(value, str):
        raise WireFormatError(f"{field_name} must be a string")
    if "-" in value or "_" in value:
        raise WireFormatError(f"{field_name} uses URL-safe base64; standard base64 required")
    if not _BASE64_STANDARD_RE.match(value):
        raise WireFormatError(f"{field_name} is not valid base64")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise WireFormatError(f"{field_name} base64 decode failed: {e}") from e
