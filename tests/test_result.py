"""Tests for ParseResult and FieldError."""

import pytest

from fjson import Failure, FieldError, MissingValueError, Success, field_error
from fjson.types import failure, sequence, success


def err(path, message, *args):
    return field_error(message, *args, path=path)


class TestParseResult:
    """Test Success / Failure behaviour."""

    def test_success_accessors(self):
        result = success(3)
        assert result.is_success()
        assert not result.is_error()
        assert result.get() == 3
        assert result.errors == ()

    def test_failure_accessors(self):
        result = failure(err("a", "string.expected"))
        assert result.is_error()
        assert result.errors == (FieldError("a", "string.expected"),)
        assert result.get_or_else(lambda: "fallback") == "fallback"

    def test_failure_requires_errors(self):
        with pytest.raises(ValueError):
            Failure(())

    def test_get_on_failure_raises(self):
        with pytest.raises(MissingValueError, match="string.expected"):
            failure(err(None, "string.expected")).get()

    def test_map_and_flat_map(self):
        assert success(2).map(lambda x: x * 10) == Success(20)
        assert success(2).flat_map(lambda x: failure(err(None, "error"))).is_error()
        bad = failure(err(None, "error"))
        assert bad.map(lambda x: x * 10) == bad
        assert bad.flat_map(lambda x: success(x)) == bad

    def test_map_error(self):
        result = failure(err("value", "path.not.found")).map_error(
            lambda errors: [e.repath("inner") for e in errors]
        )
        assert result.errors == (FieldError("inner.value", "path.not.found"),)

    def test_fold(self):
        assert success(1).fold(lambda e: "bad", lambda v: f"ok {v}") == "ok 1"
        assert failure(err(None, "error")).fold(lambda e: len(e), lambda v: v) == 1


class TestCombine:
    """Test applicative combination and error accumulation."""

    def test_both_success(self):
        assert success(1).and_(success(2), lambda a, b: a + b) == Success(3)

    def test_both_failure_keeps_order(self):
        left = failure(err("a", "string.expected"))
        right = failure(err("b", "number.expected"), err("c", "path.not.found"))
        combined = left.and_(right, lambda a, b: (a, b))
        assert combined.errors == (
            FieldError("a", "string.expected"),
            FieldError("b", "number.expected"),
            FieldError("c", "path.not.found"),
        )

    def test_single_failure_side(self):
        bad = failure(err("a", "error"))
        assert success(1).and_(bad, lambda a, b: a).errors == bad.errors
        assert bad.and_(success(1), lambda a, b: a).errors == bad.errors

    def test_and_operator_pairs(self):
        assert (success("a") & success(1)) == Success(("a", 1))

    def test_sequence(self):
        assert sequence([success(1), success(2)]) == Success([1, 2])
        assert sequence([]) == Success([])
        result = sequence([failure(err("[0]", "x")), success(2), failure(err("[2]", "y"))])
        assert [e.path for e in result.errors] == ["[0]", "[2]"]

    def test_to_json(self):
        assert success(1).to_json() == {"value": 1}
        assert failure(err("a", "invalid.enum.value", "red")).to_json() == {
            "errors": [{"path": "a", "message": "invalid.enum.value", "args": ["red"]}]
        }


class TestFieldError:
    """Test error paths and rendering."""

    def test_repath_untagged(self):
        assert FieldError(None, "error").repath("field").path == "field"

    def test_repath_nested_field(self):
        assert FieldError("value", "error").repath("pojos[1]").path == "pojos[1].value"

    def test_repath_index(self):
        assert FieldError("[2]", "error").repath("a[0]").path == "a[0][2]"
        assert FieldError("[2]", "error").repath("tags").path == "tags[2]"

    def test_args_are_strings(self):
        assert field_error("no.reader.found", 42).args == ("42",)

    def test_str_and_json(self):
        assert str(FieldError("a.b", "path.not.found")) == "a.b: path.not.found"
        assert str(FieldError(None, "error")) == "error"
        assert FieldError(None, "error").to_json() == {"message": "error", "args": []}
