"""Tests for chain construction, cause traversal, and traversal guards."""

import copy
import pickle

import pytest

from errchain import (
    LeafError,
    OpaqueError,
    Settings,
    StructuralViolation,
    WithMessage,
    chain_length,
    configure,
    format_redacted,
    format_verbose,
    get_cause,
    has_cause,
    message_of,
    new,
    unwrap_all,
    walk,
    with_detail,
    wrap,
)
from errchain.exthttp import get_http_code, wrap_with_http_code


@pytest.fixture
def shallow_settings():
    previous = configure(Settings(max_chain_depth=3))
    yield
    configure(previous)


def _raise_chained() -> RuntimeError:
    try:
        try:
            raise ValueError("inner")
        except ValueError as e:
            raise RuntimeError("outer") from e
    except RuntimeError as e:
        return e


class TestIdentityLaw:
    def test_wrap_none_is_none(self):
        assert wrap(None, "loading config") is None

    def test_wrap_none_with_empty_message(self):
        assert wrap(None, "") is None

    def test_with_detail_none_is_none(self):
        assert with_detail(None, "hint") is None


class TestWrap:
    def test_wrap_builds_new_outer_node(self):
        root = new("file missing")
        err = wrap(root, "loading config")
        assert isinstance(err, WithMessage)
        assert get_cause(err) is root
        assert message_of(err) == "loading config"
        assert message_of(root) == "file missing"

    def test_wrap_sets_python_cause(self):
        root = ValueError("boom")
        err = wrap(root, "ctx")
        assert err.__cause__ is root

    def test_root_has_no_cause(self):
        root = new("root")
        assert get_cause(root) is None
        assert not has_cause(root)
        assert has_cause(wrap(root, "x"))

    def test_str_renders_whole_chain(self):
        err = wrap(wrap(new("c"), "b"), "a")
        assert str(err) == "a: b: c"

    def test_nodes_are_read_only(self):
        err = wrap(new("root"), "ctx")
        with pytest.raises(AttributeError):
            err.message = "other"
        with pytest.raises(AttributeError):
            err.cause = None

    def test_detail_wrapper_has_empty_message(self):
        err = with_detail(new("root"), "try again later")
        assert message_of(err) == ""
        assert err.detail == "try again later"
        assert str(err) == "root"

    def test_safe_flag(self):
        assert new("public", safe=True).safe_message() == "public"
        assert new("private").safe_message() is None


class TestPlainExceptions:
    def test_explicit_cause_is_followed(self):
        err = _raise_chained()
        cause = get_cause(err)
        assert isinstance(cause, ValueError)
        assert message_of(cause) == "inner"

    def test_implicit_context_is_not_followed(self):
        try:
            try:
                raise ValueError("inner")
            except ValueError:
                raise RuntimeError("outer")
        except RuntimeError as e:
            err = e
        assert err.__context__ is not None
        assert get_cause(err) is None

    def test_message_of_plain_exception_is_str(self):
        assert message_of(KeyError("k")) == "'k'"

    def test_message_of_none(self):
        assert message_of(None) == ""

    def test_wrap_plain_exception(self):
        err = wrap(_raise_chained(), "handler")
        assert [message_of(n) for n in walk(err)] == ["handler", "outer", "inner"]


class TestWalk:
    def test_walk_order_outer_to_root(self):
        root = new("root")
        mid = wrap(root, "mid")
        top = wrap(mid, "top")
        assert list(walk(top)) == [top, mid, root]

    def test_walk_none_is_empty(self):
        assert list(walk(None)) == []

    def test_unwrap_all_returns_root(self):
        root = new("root")
        assert unwrap_all(wrap(wrap(root, "a"), "b")) is root
        assert unwrap_all(root) is root
        assert unwrap_all(None) is None

    def test_chain_length(self):
        assert chain_length(wrap(wrap(new("r"), "a"), "b")) == 3
        assert chain_length(None) == 0

    def test_cycle_is_detected(self):
        a = ValueError("a")
        b = ValueError("b")
        a.__cause__ = b
        b.__cause__ = a
        with pytest.raises(StructuralViolation, match="cycle"):
            list(walk(a))

    def test_depth_limit(self, shallow_settings):
        err = wrap(wrap(wrap(new("r"), "a"), "b"), "c")
        with pytest.raises(StructuralViolation, match="longer than 3"):
            list(walk(err))

    def test_depth_limit_allows_exact_length(self, shallow_settings):
        err = wrap(wrap(new("r"), "a"), "b")
        assert chain_length(err) == 3

    def test_leaf_is_root(self):
        assert isinstance(unwrap_all(wrap(new("r"), "a")), LeafError)


class TestCopyAndPickle:
    def _chain(self):
        return wrap(with_detail(wrap(new("root"), "inner", safe=True), "hint"), "outer")

    def test_copy_keeps_text(self):
        err = self._chain()
        dup = copy.copy(err)
        assert dup is not err
        assert str(dup) == str(err)
        assert format_verbose(dup) == format_verbose(err)

    def test_deepcopy_rebuilds_causes(self):
        err = self._chain()
        dup = copy.deepcopy(err)
        assert get_cause(dup) is not get_cause(err)
        assert dup.__cause__ is get_cause(dup)
        assert format_verbose(dup) == format_verbose(err)

    def test_pickle_round_trip(self):
        err = self._chain()
        restored = pickle.loads(pickle.dumps(err))
        assert isinstance(restored, WithMessage)
        assert chain_length(restored) == chain_length(err)
        assert format_verbose(restored) == format_verbose(err)
        assert format_redacted(restored) == format_redacted(err)

    def test_pickle_http_code_and_opaque(self):
        err = wrap_with_http_code(
            OpaqueError(new("root"), "app.Custom", "custom", ("extra",), b"{}"), 404
        )
        restored = pickle.loads(pickle.dumps(err))
        assert get_http_code(restored, 0) == 404
        assert restored.cause.error_type_key == "opaque:app.Custom"
        assert format_verbose(restored) == format_verbose(err)
