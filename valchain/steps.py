"""
Schema steps for valchain.

A schema is a single step or a list of steps (a chain). Steps are plain data:
- basic kind names: "array", "boolean", "number", "integer", "string", "non-empty"
- any callable: a raw transform returning a Result
- the frozen dataclasses below, built with the PascalCase factories
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Mapping, Sequence, Union

from .errors import SchemaError
from .path import Path
from .types import ErrorDetail, Found, Unexpected


class Kind(str, enum.Enum):
    """Step kinds, used only while compiling chains."""

    ARRAY = "array"
    BOOLEAN = "boolean"
    NUMBER = "number"
    INTEGER = "integer"
    STRING = "string"
    NON_EMPTY = "non-empty"
    PREDICATE = "predicate"
    FUNCTION = "function"
    OPTIONAL = "optional"
    ENUM = "enum"
    OBJECT = "object"
    INDEXED = "indexed"
    ONE_OF = "oneOf"

    def __str__(self) -> str:
        return self.value


BASIC_KINDS = frozenset(
    {Kind.ARRAY, Kind.BOOLEAN, Kind.NUMBER, Kind.INTEGER, Kind.STRING, Kind.NON_EMPTY}
)

# Narrow an already established base kind, so cannot start a chain
REFINEMENTS = frozenset({Kind.NON_EMPTY, Kind.INTEGER})


@dataclass(frozen=True, slots=True)
class PredicateStep:
    kind: ClassVar[Kind] = Kind.PREDICATE

    fn: Callable[[Any], bool]
    err: str
    details: ErrorDetail | None = None


@dataclass(frozen=True, slots=True)
class OptionalStep:
    kind: ClassVar[Kind] = Kind.OPTIONAL

    inner: Any
    fallback: Any


@dataclass(frozen=True, slots=True)
class EnumStep:
    kind: ClassVar[Kind] = Kind.ENUM

    options: Sequence[Any]


@dataclass(frozen=True, slots=True)
class ObjectStep:
    kind: ClassVar[Kind] = Kind.OBJECT

    # (name, schema) pairs; merged objects may repeat a name
    fields: tuple[tuple[str, Any], ...]


@dataclass(frozen=True, slots=True)
class IndexedStep:
    kind: ClassVar[Kind] = Kind.INDEXED

    entries: Sequence[Any]


@dataclass(frozen=True, slots=True)
class OneOfStep:
    kind: ClassVar[Kind] = Kind.ONE_OF

    branches: Sequence[Any]


Step = Union[
    str,
    Callable[[Any], Any],
    PredicateStep,
    OptionalStep,
    EnumStep,
    ObjectStep,
    IndexedStep,
    OneOfStep,
]
Schema = Union[Step, list]

STEP_TYPES = (PredicateStep, OptionalStep, EnumStep, ObjectStep, IndexedStep, OneOfStep)


def Predicate(
    fn: Callable[[Any], bool], err: str, details: ErrorDetail | None = None
) -> PredicateStep:
    """
    Accept values for which `fn` returns True.

    Usage:
        Predicate(lambda x: x > 0, "Must be positive")
        Predicate(str.isalpha, "Must be alphabetic")
    """
    return PredicateStep(fn, err, details)


def Optional(inner: Schema, fallback: Any) -> OptionalStep:
    """
    Substitute `fallback` for None, validate anything else with `inner`.

    The fallback is itself checked against `inner` when compiled.

    Usage:
        Optional("boolean", False)
        Optional(["string", "non-empty"], "n/a")
    """
    return OptionalStep(inner, fallback)


def Enum(options: Sequence[Any]) -> EnumStep:
    """
    Accept one of a fixed set of literals.

    Usage:
        Enum(["active", "inactive", "pending"])
    """
    return EnumStep(options)


def Object(fields: Mapping[str, Schema]) -> ObjectStep:
    """
    Accept a dict with exactly these properties (optional ones may be absent).

    Usage:
        Object({"name": "string", "admin": Optional("boolean", False)})
    """
    return ObjectStep(tuple(fields.items()))


def Indexed(entries: Sequence[Schema]) -> IndexedStep:
    """
    Accept a fixed-length list, one schema per position.

    Usage:
        Indexed(["number", "number"])
    """
    return IndexedStep(entries)


def OneOf(branches: Sequence[Schema]) -> OneOfStep:
    """
    Accept the first branch that succeeds.

    Usage:
        OneOf(["string", "number"])
    """
    return OneOfStep(branches)


def step_kind(step: Any, path: Path) -> Kind:
    """Classify a step, raising SchemaError for anything unrecognised."""
    if isinstance(step, str):
        if step not in BASIC_KINDS:
            raise SchemaError(path, "Unknown basic validator", Found(step))
        return Kind(step)
    if isinstance(step, STEP_TYPES):
        return step.kind
    if callable(step):
        return Kind.FUNCTION
    raise SchemaError(path, "Cannot determine type of validator step", Found(step))


def is_refinement(step: Any) -> bool:
    return isinstance(step, str) and step in REFINEMENTS


def is_optional(schema: Schema) -> bool:
    """Whether the outermost step of a schema is Optional."""
    if isinstance(schema, list):
        return bool(schema) and is_optional(schema[0])
    return isinstance(schema, OptionalStep)


def is_literal(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def check_enum_options(options: Any, path: Path) -> Sequence[Any]:
    """Return enum options, raising SchemaError unless they are a list of literals."""
    if not isinstance(options, (list, tuple)):
        raise SchemaError(
            path, "`Enum` expects a list of options as an argument", Unexpected([options])
        )
    bad_options = [o for o in options if not is_literal(o)]
    if bad_options:
        raise SchemaError(
            path, "`Enum` can only accept literal values as options", Unexpected(bad_options)
        )
    return options
