"""Failure categories raised by the errchain library itself."""


class ErrChainError(Exception):
    """Base exception for all errchain errors."""


class StructuralViolation(ErrChainError):
    """Chain traversal hit a cycle or exceeded the configured depth."""


class RegistryError(ErrChainError):
    """Invalid operation on a type registry."""


class DoubleRegistration(RegistryError):
    """A type key was registered twice with a different encoder/decoder."""


class RegistryFrozen(RegistryError):
    """Registration attempted after the registry was frozen."""


class WireFormatError(ErrChainError):
    """Serialized chain bytes do not follow the wire schema."""


class CanonicalizationError(WireFormatError):
    """JSON canonicalization failed."""


class MalformedPayload(ErrChainError):
    """A registered decoder could not rebuild its node from a wire record.

    The whole chain decode fails; ``type_key`` and ``position`` (0-based,
    outermost record = 0) identify the offending record.
    """

    def __init__(self, type_key: str, position: int, reason: str):
        super().__init__(
            f"cannot decode record {position} (type {type_key!r}): {reason}"
        )
        self.type_key = type_key
        self.position = position
