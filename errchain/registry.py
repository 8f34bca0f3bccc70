"""Type-keyed encoder/decoder table for chain serialization.

Each wrapper type registers one ``(encoder, decoder)`` pair under a stable type
key, normally when its module is imported. Registration belongs to process
start-up: once a registry is in use by concurrent readers it must not change,
and :meth:`Registry.freeze` lets the host enforce that.

Contract:
    encoder(node) -> (message, details, payload)
    decoder(cause, message, details, payload) -> node
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, Sequence

from .errors import DoubleRegistration, RegistryFrozen

_LOG = logging.getLogger(__name__)

Encoder = Callable[[BaseException], tuple[str, Sequence[str], bytes]]
Decoder = Callable[[Optional[BaseException], str, Sequence[str], bytes], BaseException]


def type_key_of(obj) -> str:
    """Return the stable type key of an error instance or class.

    The key is ``"<module>.<qualname>"`` of the class. An instance may carry
    its own ``error_type_key`` string, which takes precedence.
    """
    if isinstance(obj, type):
        cls = obj
    else:
        override = getattr(obj, "error_type_key", None)
        if isinstance(override, str):
            return override
        cls = type(obj)
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass(frozen=True)
class RegistryEntry:
    type_key: str
    encoder: Encoder
    decoder: Decoder


class Registry:
    """Mapping of type keys to codec entries."""

    def __init__(self, entries: Iterable[RegistryEntry] = ()):
        self._entries: dict[str, RegistryEntry] = {e.type_key: e for e in entries}
        self._frozen = False

    def register(self, type_key: str, encoder: Encoder, decoder: Decoder) -> None:
        """Register a codec for *type_key*.

        Registering the same pair again is a no-op.

        Raises:
            DoubleRegistration: If *type_key* already maps to another pair.
            RegistryFrozen: If :meth:`freeze` was called.
        """
        if not type_key:
            raise ValueError("type_key must be a non-empty string")
        existing = self._entries.get(type_key)
        if existing is not None:
            if existing.encoder == encoder and existing.decoder == decoder:
                return
            raise DoubleRegistration(
                f"type key {type_key!r} is already registered with a different codec"
            )
        if self._frozen:
            raise RegistryFrozen(f"cannot register {type_key!r}: registry is frozen")
        self._entries[type_key] = RegistryEntry(type_key, encoder, decoder)
        _LOG.debug("registered error codec for %s", type_key)

    def register_type(self, cls: type, encoder: Encoder, decoder: Decoder) -> str:
        """Register a codec under the key derived from *cls*; returns the key."""
        key = type_key_of(cls)
        self.register(key, encoder, decoder)
        return key

    def lookup(self, type_key: str) -> Optional[RegistryEntry]:
        return self._entries.get(type_key)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def without(self, *type_keys: str) -> "Registry":
        """Return an unfrozen copy lacking *type_keys*.

        Useful to model a peer built without some wrapper packages.
        """
        dropped = set(type_keys)
        return Registry(e for k, e in self._entries.items() if k not in dropped)

    def copy(self) -> "Registry":
        return self.without()

    def __contains__(self, type_key: object) -> bool:
        return type_key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


DEFAULT_REGISTRY = Registry()
"""Process-wide registry used when callers do not pass their own."""
