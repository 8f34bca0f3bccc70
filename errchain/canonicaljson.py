"""Canonical JSON bytes for encoded chains and codec payloads.

The byte framing of an encoded chain and the payloads written by the built-in
codecs go through :func:`canonicalize`, so equal chains encode to equal bytes
and relayed records can be compared byte for byte. ``jcs`` does the RFC 8785
work.
"""

import json

import jcs as _jcs

from .errors import CanonicalizationError


def canonicalize(obj: dict) -> bytes:
    """Serialize a payload or wire frame to canonical UTF-8 JSON bytes.

    Args:
        obj: A JSON-serializable dictionary.

    Raises:
        CanonicalizationError: If the input cannot be canonicalized.
    """
    if not isinstance(obj, dict):
        raise CanonicalizationError("Input must be a JSON object (dict)")
    try:
        return _jcs.canonicalize(obj)
    except Exception as e:
        raise CanonicalizationError(f"Canonicalization failed: {e}") from e


def load_object(data: bytes) -> dict:
    """Parse UTF-8 JSON bytes that must hold a single object.

    Raises:
        ValueError: If the bytes are not JSON or not an object.
    """
    obj = json.loads(data.decode("utf-8"))
    if not isinstance(obj, dict):
        raise ValueError("expected a JSON object")
    return obj
