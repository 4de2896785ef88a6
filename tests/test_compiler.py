"""
Tests for compiling single steps.
"""

import math

import pytest

from valchain import (
    Caught,
    Enum,
    Err,
    Expected,
    Found,
    Indexed,
    Object,
    Ok,
    OneOf,
    Optional,
    Predicate,
    SchemaError,
    Unexpected,
    ValidationError,
    compile,
    fail,
    ok,
)


class TestCompilation:
    def test_basic_names(self):
        for name in ["array", "boolean", "number", "string"]:
            assert callable(compile(name))

    def test_unknown_basic_name(self):
        with pytest.raises(SchemaError) as info:
            compile("strung")
        assert info.value.message == "Unknown basic validator"
        assert info.value.details == Found("strung")
        with pytest.raises(SchemaError):
            compile("")

    def test_unexpected_values(self):
        for schema in [ok("eh?"), 7, {}, None, 1.5]:
            with pytest.raises(SchemaError):
                compile(schema)

    def test_error_message_has_path(self):
        with pytest.raises(SchemaError) as info:
            compile(Object({"a": Object({"b": "strung"})}))
        assert info.value.path == ("a", "b")
        assert str(info.value) == 'At `a`: At `b`: Unknown basic validator, found: "strung"'


class TestBasic:
    def test_boolean(self):
        v = compile("boolean")
        assert v(True) == Ok(True)
        assert v(False) == Ok(False)
        for bad in [0, "hello", [], {}, None]:
            assert v(bad) == fail("Not a boolean")

    def test_number(self):
        v = compile("number")
        for good in [0, 42, -3.5, math.inf, 10**400]:
            assert v(good) == Ok(good)
        for bad in [math.nan, False, "hello", [], {}, None]:
            assert v(bad) == fail("Not a number")

    def test_string(self):
        v = compile("string")
        assert v("hello") == Ok("hello")
        for bad in [0, False, [], {}, None]:
            assert v(bad) == fail("Not a string")

    def test_array(self):
        v = compile("array")
        assert v([]) == Ok([])
        assert v((1, 2)) == Ok((1, 2))
        for bad in ["abc", {}, None, 3]:
            assert v(bad) == fail("Not an array")


class TestPredicate:
    def test_accepts_and_rejects(self):
        v = compile(Predicate(lambda x: x > 0, "Must be positive"))
        assert v(5) == Ok(5)
        assert v(-5) == fail("Must be positive")

    def test_only_true_passes(self):
        v = compile(Predicate(lambda x: x, "Must be True"))
        assert v(True) == Ok(True)
        assert v(1) == fail("Must be True")
        assert v("yes") == fail("Must be True")

    def test_custom_details(self):
        v = compile(Predicate(lambda x: x in (1, 2), "Bad", Expected([1, 2])))
        assert v(3) == fail("Bad", None, Expected([1, 2]))

    def test_catches_exceptions(self):
        v = compile(Predicate(lambda x: x > 0, "Must be positive"))
        result = v("a")
        assert isinstance(result, Err)
        [error] = result.errors
        assert error.message == "Predicate function threw an error"
        assert isinstance(error.details, Caught)
        assert isinstance(error.details.error, TypeError)

    def test_requires_message(self):
        with pytest.raises(SchemaError):
            compile(Predicate(lambda x: True, ""))


class TestFunction:
    def test_passes_through_result(self):
        v = compile(ok)
        assert v("a") == Ok("a")
        assert v(1) == Ok(1)

    def test_transforms(self):
        v = compile(lambda x: ok(x * 2))
        assert v(28) == Ok(56)

    def test_non_result(self):
        v = compile(lambda x: True)
        assert v("a") == fail("Validation function did not return a Result", None, Found(True))

    def test_catches_exceptions(self):
        def boom(x):
            raise RuntimeError("oops")

        [error] = compile(boom)("a").errors
        assert error.message == "Validation function threw an error"
        assert str(error) == "Validation function threw an error, inner error: RuntimeError: oops"

    def test_exception_without_message_keeps_type(self):
        def parse(x):
            raise ValueError()

        [error] = compile(parse)("a").errors
        assert str(error) == "Validation function threw an error, inner error: ValueError: "

    def test_rebases_nested_errors(self):
        inner = compile(Object({"n": "number"}))
        v = compile(Object({"wrapped": inner}))
        result = v({"wrapped": {"n": "1"}})
        assert result == fail("Not a number", ["wrapped", "n"])


class TestOptional:
    @pytest.fixture
    def v(self):
        return compile(Optional("boolean", False))

    def test_fallback_for_none(self, v):
        assert v(None) == Ok(False)

    def test_inner_for_other_values(self, v):
        assert v(True) == Ok(True)
        for bad in [7, "test", [], {}]:
            assert v(bad) == fail("Not a boolean")

    def test_fallback_must_validate(self):
        with pytest.raises(SchemaError) as info:
            compile(Optional("boolean", 0))
        assert info.value.details == (ValidationError((), "Not a boolean"),)
        assert str(info.value) == (
            "Fallback for optional value does not meet its own requirements:\n"
            "  Not a boolean"
        )

    def test_returns_validated_fallback(self):
        v = compile(Optional(lambda s: ok(s.upper()), "n/a"))
        assert v(None) == Ok("N/A")
        assert v("x") == Ok("X")


class TestEnum:
    @pytest.fixture
    def v(self):
        return compile(Enum([False, 1, "two"]))

    def test_accepts_options(self, v):
        assert v(False) == Ok(False)
        assert v(1) == Ok(1)
        assert v("two") == Ok("two")

    def test_rejects_others(self, v):
        failure = fail("Unexpected value", None, Expected([False, 1, "two"]))
        for bad in ["false", "1", 0, True, "hello", [], {}, None]:
            assert v(bad) == failure

    def test_rendering(self, v):
        assert str(v(3).errors[0]) == 'Unexpected value, expected: false, 1, "two"'

    def test_options_must_be_a_list(self):
        with pytest.raises(SchemaError):
            compile(Enum("abc"))

    def test_options_must_be_literals(self):
        with pytest.raises(SchemaError) as info:
            compile(Enum(["a", None, ["b"]]))
        assert info.value.details == Unexpected([None, ["b"]])


class TestObject:
    @pytest.fixture
    def v(self):
        return compile(
            Object(
                {
                    "x": "number",
                    "y": "number",
                    "polar": Optional("boolean", False),
                }
            )
        )

    def test_accepts_valid(self, v):
        assert v({"x": 0, "y": 0, "polar": False}) == Ok({"x": 0, "y": 0, "polar": False})
        assert v({"x": 6.6, "y": 18, "polar": True}) == Ok({"x": 6.6, "y": 18, "polar": True})

    def test_fills_optional(self, v):
        assert v({"x": 1, "y": 2}) == Ok({"x": 1, "y": 2, "polar": False})
        assert v({"x": 1, "y": 2, "polar": None}) == Ok({"x": 1, "y": 2, "polar": False})

    def test_invalid_field(self, v):
        assert v({"x": 0, "y": 0, "polar": "maybe"}) == fail("Not a boolean", ["polar"])

    def test_collects_every_field_error(self, v):
        result = v({"x": "0", "y": "0"})
        assert [str(e) for e in result.errors] == ["At `x`: Not a number", "At `y`: Not a number"]

    def test_missing_before_field_checks(self, v):
        assert v({"x": 0}) == fail("Missing expected properties", None, Expected(["y"]))
        assert v({"x": "bad", "extra": 1}) == fail(
            "Missing expected properties", None, Expected(["y"])
        )

    def test_unexpected_before_field_checks(self, v):
        result = v({"x": "bad", "y": 0, "extra": "extra", "evenMore": True})
        assert result == fail(
            "Found unexpected properties", None, Unexpected(["extra", "evenMore"])
        )

    def test_not_a_dict(self, v):
        assert v([1, 2]) == fail("Not an object")
        assert v(None) == fail("Not an object")

    def test_nested_paths(self):
        v = compile(Object({"user": Object({"name": "string"})}))
        assert v({"user": {"name": 3}}) == fail("Not a string", ["user", "name"])


class TestIndexed:
    @pytest.fixture
    def v(self):
        return compile(Indexed(["number", "boolean"]))

    def test_accepts_valid(self, v):
        assert v([1, True]) == Ok([1, True])
        assert v([99, False]) == Ok([99, False])

    def test_invalid_entries(self, v):
        assert v(["0", True]) == fail("Not a number", [0])
        assert v(["0", 5]) == Err(
            (
                ValidationError((0,), "Not a number"),
                ValidationError((1,), "Not a boolean"),
            )
        )

    def test_wrong_length(self, v):
        failure = fail("Expected array with 2 entries", None, Found(1))
        assert v([0]) == failure
        assert v([0, True, "extra"]) == fail("Expected array with 2 entries", None, Found(3))

    def test_singular_wording(self):
        v = compile(Indexed(["string"]))
        assert v([]) == fail("Expected array with one entry", None, Found(0))

    def test_not_a_list(self, v):
        assert v("ab") == fail("Not an array")


class TestOneOf:
    @pytest.fixture
    def v(self):
        return compile(OneOf(["string", "number"]))

    def test_first_success(self, v):
        assert v("a") == Ok("a")
        assert v(2) == Ok(2)

    def test_reports_every_branch(self, v):
        assert v(True) == Err(
            (
                ValidationError(("Branch 0",), "Not a string"),
                ValidationError(("Branch 1",), "Not a number"),
            )
        )

    def test_first_branch_wins(self):
        v = compile(OneOf([lambda x: ok("first"), lambda x: ok("second")]))
        assert v(None) == Ok("first")

    def test_requires_branches(self):
        with pytest.raises(SchemaError):
            compile(OneOf([]))
