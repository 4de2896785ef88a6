"""
Tests for error rendering and printing configuration.
"""

import math

import pytest

from valchain import (
    Caught,
    Enum,
    Expected,
    Found,
    Object,
    Unexpected,
    ValidationError,
    compile,
    printing_context,
)
from valchain.context import max_value_length
from valchain.printer import print_error, print_value, print_values


class TestPrintValue:
    def test_literals(self):
        assert print_value(None) == "null"
        assert print_value(True) == "true"
        assert print_value(42) == "42"
        assert print_value(1.5) == "1.5"
        assert print_value("two") == '"two"'

    def test_lists(self):
        assert print_value([1, "a", [False]]) == '[1, "a", [false]]'

    def test_dict(self):
        assert print_value({"a": 1}) == '{"a": 1}'

    def test_non_ascii_text_is_kept(self):
        assert print_value("café") == '"café"'
        assert print_value({"名前": ["ü"]}) == '{"名前": ["ü"]}'

    def test_non_finite_numbers(self):
        assert print_value(math.inf) == "Infinity"

    def test_function(self):
        def parse(x):
            return x

        assert print_value(parse).startswith("<function ")
        assert "parse" in print_value(parse)

    def test_other_objects(self):
        assert print_value(set()) == "<set> set()"

    def test_print_values(self):
        assert print_values([1, 2]) == "1, 2"
        assert print_values("solo") == '"solo"'


class TestPrintError:
    def test_plain(self):
        assert print_error((), "Is empty") == "Is empty"

    def test_found(self):
        assert (
            print_error((), "Expected array with 2 entries", Found(1))
            == "Expected array with 2 entries, found: 1"
        )

    def test_unexpected(self):
        assert (
            print_error(("a",), "Found unexpected properties", Unexpected(["x", "y"]))
            == 'At `a`: Found unexpected properties, unexpected: "x", "y"'
        )

    def test_expected(self):
        assert (
            print_error((), "Unexpected value", Expected([1, "b"]))
            == 'Unexpected value, expected: 1, "b"'
        )

    def test_nested_errors(self):
        errors = [ValidationError(("a",), "Not a boolean"), ValidationError((), "Is empty")]
        assert print_error(("x",), "Header", errors) == (
            "At `x`: Header:\n  At `a`: Not a boolean\n  Is empty"
        )

    def test_caught_names_exception_type(self):
        assert (
            print_error((), "Validation function threw an error", Caught(ValueError()))
            == "Validation function threw an error, inner error: ValueError: "
        )

    def test_non_ascii_expected_values(self):
        result = compile(Enum(["café", "thé"]))("tea")
        assert str(result.errors[0]) == 'Unexpected value, expected: "café", "thé"'


class TestPrintingContext:
    def test_default_is_unlimited(self):
        assert max_value_length() is None

    def test_truncates_inside_context(self):
        with printing_context(max_length=5):
            assert max_value_length() == 5
            assert print_value("abcdefgh") == '"abcd...'
            assert print_value("ab") == '"ab"'
        assert max_value_length() is None
        assert print_value("abcdefgh") == '"abcdefgh"'

    def test_rejects_negative(self):
        with pytest.raises(ValueError):
            with printing_context(max_length=-1):
                pass

    def test_applies_to_rendered_errors(self):
        check = compile(Object({"id": "string"}))
        result = check({"id": "1", "x" * 100: None})
        with printing_context(max_length=12):
            rendered = str(result.errors[0])
        assert rendered == 'Found unexpected properties, unexpected: "xxxxxxxxxxx...'
