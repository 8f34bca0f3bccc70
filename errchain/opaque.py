"""Stand-in for chain nodes whose type is not registered locally."""

from __future__ import annotations

from typing import Optional, Sequence

from .chain import Wrapper

OPAQUE_PREFIX = "opaque:"


class OpaqueError(Wrapper):
    """Decoded node of an unknown type.

    Keeps the transmitted message and detail strings for display. The payload
    is kept only as raw bytes so the node can be forwarded unchanged; it is
    never interpreted here. Its type identity is ``"opaque:<original key>"``,
    so type-based predicates for the original type never match it.
    """

    def __init__(
        self,
        cause: Optional[BaseException],
        original_type_key: str,
        message: str,
        details: Sequence[str] = (),
        payload: bytes = b"",
    ):
        super().__init__(cause, message)
        self._original_type_key = original_type_key
        self._details = tuple(details)
        self._payload = bytes(payload)

    @property
    def original_type_key(self) -> str:
        return self._original_type_key

    @property
    def error_type_key(self) -> str:
        return OPAQUE_PREFIX + self._original_type_key

    @property
    def details(self) -> tuple[str, ...]:
        return self._details

    @property
    def payload(self) -> bytes:
        return self._payload

    def error_details(self) -> list[str]:
        return list(self._details)
