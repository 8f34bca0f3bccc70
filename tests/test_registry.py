"""Tests for codec registration and type keys."""

import pytest

from errchain import (
    DEFAULT_REGISTRY,
    DoubleRegistration,
    LeafError,
    OpaqueError,
    Registry,
    RegistryFrozen,
    WithMessage,
    new,
    type_key_of,
)


def _encode(err):
    return err.message, [], b""


def _decode(cause, message, details, payload):
    return LeafError(message)


def _other_decode(cause, message, details, payload):
    return LeafError(message.upper())


class TestTypeKey:
    def test_key_from_class(self):
        assert type_key_of(LeafError) == "errchain.chain.LeafError"

    def test_key_from_instance(self):
        assert type_key_of(new("x")) == "errchain.chain.LeafError"

    def test_builtin_key(self):
        assert type_key_of(ValueError("x")) == "builtins.ValueError"

    def test_opaque_instance_override(self):
        err = OpaqueError(None, "remote.pkg.Thing", "msg")
        assert type_key_of(err) == "opaque:remote.pkg.Thing"
        assert type_key_of(OpaqueError) == "errchain.opaque.OpaqueError"


class TestRegister:
    def test_register_and_lookup(self):
        reg = Registry()
        reg.register("app.Thing", _encode, _decode)
        entry = reg.lookup("app.Thing")
        assert entry.encoder is _encode
        assert entry.decoder is _decode
        assert "app.Thing" in reg
        assert len(reg) == 1

    def test_lookup_missing(self):
        assert Registry().lookup("app.Missing") is None

    def test_identical_reregistration_is_noop(self):
        reg = Registry()
        reg.register("app.Thing", _encode, _decode)
        reg.register("app.Thing", _encode, _decode)
        assert len(reg) == 1

    def test_conflicting_reregistration_fails(self):
        reg = Registry()
        reg.register("app.Thing", _encode, _decode)
        with pytest.raises(DoubleRegistration, match="app.Thing"):
            reg.register("app.Thing", _encode, _other_decode)
        assert reg.lookup("app.Thing").decoder is _decode

    def test_empty_key_rejected(self):
        with pytest.raises(ValueError):
            Registry().register("", _encode, _decode)

    def test_register_type_derives_key(self):
        reg = Registry()
        key = reg.register_type(LeafError, _encode, _decode)
        assert key == "errchain.chain.LeafError"
        assert key in reg


class TestFreeze:
    def test_register_after_freeze_fails(self):
        reg = Registry()
        reg.freeze()
        assert reg.frozen
        with pytest.raises(RegistryFrozen):
            reg.register("app.Thing", _encode, _decode)

    def test_identical_reregistration_allowed_when_frozen(self):
        reg = Registry()
        reg.register("app.Thing", _encode, _decode)
        reg.freeze()
        reg.register("app.Thing", _encode, _decode)

    def test_without_returns_unfrozen_copy(self):
        reg = Registry()
        reg.register("a", _encode, _decode)
        reg.register("b", _encode, _decode)
        reg.freeze()
        smaller = reg.without("a")
        assert "a" not in smaller
        assert "b" in smaller
        assert "a" in reg
        assert not smaller.frozen


class TestDefaultRegistry:
    def test_core_types_registered(self):
        assert type_key_of(LeafError) in DEFAULT_REGISTRY
        assert type_key_of(WithMessage) in DEFAULT_REGISTRY
        assert "builtins.ValueError" in DEFAULT_REGISTRY

    def test_key_error_not_registered(self):
        assert "builtins.KeyError" not in DEFAULT_REGISTRY
