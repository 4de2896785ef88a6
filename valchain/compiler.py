"""
Schema compiler for valchain.

Turns a schema (one step or a chain of steps) into a single check function
`value -> Result`. Malformed schemas raise SchemaError here, at compile time;
the compiled check itself never raises.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Sequence

from .errors import SchemaError
from .lib.chain_helpers import flatten_chain, is_compatible, merge_steps
from .path import Path, extend_path
from .printer import print_code
from .steps import (
    EnumStep,
    IndexedStep,
    Kind,
    ObjectStep,
    OneOfStep,
    OptionalStep,
    PredicateStep,
    Schema,
    check_enum_options,
    is_optional,
    is_refinement,
    step_kind,
)
from .types import (
    CheckFn,
    Caught,
    Err,
    ErrorDetail,
    Expected,
    Found,
    Ok,
    Result,
    Unexpected,
    fail,
    gather,
)

logger = logging.getLogger(__name__)

MAX_SAFE_INTEGER = 2**53 - 1


def _basic(
    test: Callable[[Any], bool],
    err: str,
    path: Path,
    details: ErrorDetail | None = None,
) -> CheckFn:
    def check(x: Any) -> Result:
        return Ok(x) if test(x) else fail(err, path, details)

    return check


def _is_number(x: Any) -> bool:
    if isinstance(x, bool):
        return False
    if isinstance(x, float):
        return not math.isnan(x)
    return isinstance(x, int)


def _is_integer(x: Any) -> bool:
    if isinstance(x, float):
        return math.isfinite(x) and x.is_integer() and abs(x) <= MAX_SAFE_INTEGER
    return _is_number(x) and abs(x) <= MAX_SAFE_INTEGER


def _is_non_empty(x: Any) -> bool:
    return isinstance(x, (str, list, tuple)) and len(x) > 0


def _is_array(x: Any) -> bool:
    return isinstance(x, (list, tuple))


BASIC_CHECKS: dict[Kind, tuple[Callable[[Any], bool], str]] = {
    Kind.ARRAY: (_is_array, "Not an array"),
    Kind.BOOLEAN: (lambda x: isinstance(x, bool), "Not a boolean"),
    Kind.NUMBER: (_is_number, "Not a number"),
    Kind.INTEGER: (_is_integer, "Not an integer"),
    Kind.STRING: (lambda x: isinstance(x, str), "Not a string"),
    Kind.NON_EMPTY: (_is_non_empty, "Is empty"),
}


def compile_basic(name: str, path: Path) -> CheckFn:
    test, err = BASIC_CHECKS[step_kind(name, path)]
    return _basic(test, err, path)


def compile_predicate(
    fn: Callable[[Any], bool], err: str, details: ErrorDetail | None, path: Path
) -> CheckFn:
    if not err:
        raise SchemaError(path, "Predicate validator requires an error message")

    def check(x: Any) -> Result:
        try:
            passed = fn(x) is True
        except Exception as e:
            return fail("Predicate function threw an error", path, Caught(e))
        return Ok(x) if passed else fail(err, path, details)

    return check


def compile_function(fn: Callable[[Any], Any], path: Path) -> CheckFn:
    def check(x: Any) -> Result:
        try:
            result = fn(x)
        except Exception as e:
            return fail("Validation function threw an error", path, Caught(e))
        if isinstance(result, Result):
            return result.at(path)
        return fail("Validation function did not return a Result", path, Found(result))

    return check


def compile_optional(inner: Schema, fallback: Any, path: Path) -> CheckFn:
    v = _compile(inner, path)
    validated = v(fallback)
    if isinstance(validated, Err):
        msg = "Fallback for optional value does not meet its own requirements"
        raise SchemaError(path, msg, validated.errors)
    default = validated.unwrap()

    def check(x: Any) -> Result:
        return Ok(default) if x is None else v(x)

    return check


def _same_literal(x: Any, option: Any) -> bool:
    # True == 1 in Python, but an enum of numbers must not accept booleans
    return isinstance(x, bool) == isinstance(option, bool) and x == option


def compile_enum(options: Any, path: Path) -> CheckFn:
    options = check_enum_options(options, path)
    return _basic(
        lambda x: any(_same_literal(x, o) for o in options),
        "Unexpected value",
        path,
        Expected(options),
    )


def compile_object(fields: Sequence[tuple[str, Schema]], path: Path) -> CheckFn:
    expected_keys = [k for k, _ in fields]
    required_keys = [k for k, v in fields if not is_optional(v)]
    prop_validators = [(k, _compile(v, extend_path(path, k))) for k, v in fields]

    def check(x: Any) -> Result:
        if not isinstance(x, dict):
            return fail("Not an object", path)
        missing_keys = [k for k in required_keys if k not in x]
        if missing_keys:
            return fail("Missing expected properties", path, Expected(missing_keys))
        unexpected_keys = [k for k in x if k not in expected_keys]
        if unexpected_keys:
            return fail("Found unexpected properties", path, Unexpected(unexpected_keys))
        results = [v(x.get(k)).map(lambda y, k=k: (k, y)) for k, v in prop_validators]
        return gather(results).map(dict)

    return check


def compile_indexed(entries: Sequence[Schema], path: Path) -> CheckFn:
    if not isinstance(entries, (list, tuple)):
        raise SchemaError(path, "`Indexed` expects a list of entries", Found(entries))
    expected_length = len(entries)
    indexed_validators = [_compile(v, extend_path(path, ix)) for ix, v in enumerate(entries)]
    err = (
        "Expected array with one entry"
        if expected_length == 1
        else f"Expected array with {expected_length} entries"
    )

    def check(x: Any) -> Result:
        if not _is_array(x):
            return fail("Not an array", path)
        if len(x) != expected_length:
            return fail(err, path, Found(len(x)))
        return gather(v(item) for v, item in zip(indexed_validators, x))

    return check


def compile_one_of(branches: Sequence[Schema], path: Path) -> CheckFn:
    if not isinstance(branches, (list, tuple)) or not branches:
        raise SchemaError(path, "`OneOf` expects a non-empty list of branches", Found(branches))
    vs = [_compile(v, extend_path(path, f"Branch {ix}")) for ix, v in enumerate(branches)]

    def check(x: Any) -> Result:
        errors = []
        for v in vs:
            result = v(x)
            if isinstance(result, Ok):
                return result
            errors.extend(result.errors)
        return Err(tuple(errors))

    return check


def compile_step(step: Any, path: Path) -> CheckFn:
    match step:
        case str():
            return compile_basic(step, path)
        case PredicateStep(fn, err, details):
            return compile_predicate(fn, err, details, path)
        case OptionalStep(inner, fallback):
            return compile_optional(inner, fallback, path)
        case EnumStep(options):
            return compile_enum(options, path)
        case ObjectStep(fields):
            return compile_object(fields, path)
        case IndexedStep(entries):
            return compile_indexed(entries, path)
        case OneOfStep(branches):
            return compile_one_of(branches, path)
        case _ if callable(step):
            return compile_function(step, path)
    raise SchemaError(path, "Could not compile unrecognised validator step", Found(step))


def check_start(step: Any, path: Path) -> None:
    if not is_refinement(step):
        return
    msg = f"Validator type {print_code(step_kind(step, path))} cannot appear at the start of a chain"
    raise SchemaError(path, msg)


def compile_chain(steps: Sequence[Any], path: Path) -> CheckFn:
    """
    Compile a chain into one check that runs each step on the previous
    step's output, stopping at the first failure.

    Adjacent object steps are merged into one (as are adjacent enum steps)
    before every neighbouring pair is checked for compatibility.
    """
    if not steps:
        raise SchemaError(path, "Cannot compile an empty chain")
    check_start(steps[0], path)
    if len(steps) == 1:
        return compile_step(steps[0], path)

    merged_steps = merge_steps(steps, path)

    kinds = [step_kind(step, path) for step in merged_steps]
    for prev, curr in zip(kinds, kinds[1:]):
        if not is_compatible(prev, curr):
            msg = f"Validator type {print_code(curr)} cannot follow {print_code(prev)}"
            raise SchemaError(path, msg)

    compiled_steps = [compile_step(step, path) for step in merged_steps]
    logger.debug(
        "Compiled chain of %d steps (%d after merging) at %s",
        len(steps),
        len(compiled_steps),
        path,
    )

    def check(x: Any) -> Result:
        result: Result = Ok(x)
        for v in compiled_steps:
            if isinstance(result, Err):
                break
            result = v(result.value)
        return result

    return check


def _compile(schema: Schema, path: Path) -> CheckFn:
    if isinstance(schema, list):
        return compile_chain(flatten_chain(schema), path)
    check_start(schema, path)
    return compile_step(schema, path)


def compile(schema: Schema) -> CheckFn:
    """
    Compile a schema into a check function.

    Args:
        schema: A single step or a list of steps

    Returns:
        A function mapping any value to Ok(validated) or Err(errors)

    Raises:
        SchemaError: If the schema is malformed

    Usage:
        check = compile(Object({
            "name": ["string", "non-empty"],
            "age": ["number", "integer"],
            "admin": Optional("boolean", False),
        }))
        check({"name": "Ada", "age": 36})  # Ok({"name": "Ada", "age": 36, "admin": False})
    """
    return _compile(schema, ())
