"""
Schema operations for valchain.

Provides validate() and to_pydantic() functions.
"""

from __future__ import annotations

from typing import Any, Literal, Union
from typing import Optional as TypingOptional

from pydantic import BaseModel, create_model

from .compiler import compile
from .lib.chain_helpers import flatten_chain, merge_steps
from .steps import (
    EnumStep,
    IndexedStep,
    Kind,
    ObjectStep,
    OneOfStep,
    OptionalStep,
    Schema,
)
from .types import Result

BASIC_TYPES: dict[Kind, Any] = {
    Kind.ARRAY: list[Any],
    Kind.BOOLEAN: bool,
    Kind.NUMBER: float,
    Kind.INTEGER: int,
    Kind.STRING: str,
}


def validate(data: Any, schema: Schema) -> Result:
    """
    Validate data against a schema in one go.

    Args:
        data: The value to validate
        schema: A single step or a list of steps

    Returns:
        Ok(validated) if validation passes
        Err(errors) if validation fails

    Usage:
        schema = Object({
            "name": ["string", "non-empty"],
            "age": ["number", "integer"],
        })
        result = validate({"name": "Alice", "age": 30}, schema)

    Compile once with compile() instead when the same schema checks many values.
    """
    return compile(schema)(data)


def to_pydantic(name: str, schema: Schema) -> type[BaseModel]:
    """
    Build a Pydantic model from an object schema.

    Args:
        name: Name of the generated model class
        schema: An Object step, or a chain whose object steps merge into one

    Returns:
        A Pydantic BaseModel subclass

    Usage:
        User = to_pydantic("User", Object({
            "name": "string",
            "admin": Optional("boolean", False),
        }))
        user = User(name="Alice")

    Predicates, functions and refinements other than `integer` have no Pydantic
    counterpart and are not carried over.
    """
    # compile() first so a malformed schema fails the same way it would elsewhere
    compile(schema)
    obj = _as_object(schema)
    if obj is None:
        raise TypeError("Schema must be an Object")

    fields: dict[str, Any] = {}
    for key, v in obj.fields:
        fields[key] = _extract_pydantic_field(v, name + key[:1].upper() + key[1:])

    return create_model(name, **fields)


def _as_object(schema: Schema) -> ObjectStep | None:
    steps = flatten_chain(schema) if isinstance(schema, list) else [schema]
    merged = merge_steps(steps, ()) if steps else []
    objects = [s for s in merged if isinstance(s, ObjectStep)]
    return objects[0] if len(objects) == 1 else None


def _extract_pydantic_field(v: Schema, model_name: str) -> tuple[Any, Any]:
    """Extract Pydantic field type and default from a field schema."""
    match v:
        case OptionalStep(inner=inner, fallback=fallback) | [
            OptionalStep(inner=inner, fallback=fallback),
            *_,
        ]:
            # The default is the fallback as the inner schema returns it
            default = compile(inner)(fallback).unwrap()
            return (TypingOptional[_annotation(inner, model_name)], default)
    return (_annotation(v, model_name), ...)


def _annotation(v: Schema, model_name: str) -> Any:
    """The Python type a schema guarantees, or Any when it cannot tell."""
    if isinstance(v, list):
        steps = merge_steps(flatten_chain(v), ()) if v else []
        annotation: Any = Any
        for step in steps:
            step_annotation = _step_annotation(step, model_name)
            if step_annotation is not None:
                annotation = step_annotation
        return annotation
    return _step_annotation(v, model_name) or Any


def _step_annotation(step: Any, model_name: str) -> Any:
    match step:
        case str() if step in BASIC_TYPES:
            return BASIC_TYPES[Kind(step)]
        case OptionalStep(inner=inner):
            return TypingOptional[_annotation(inner, model_name)]
        case EnumStep(options=options) if options:
            return Literal[tuple(options)]
        case ObjectStep():
            return to_pydantic(model_name, step)
        case IndexedStep(entries=entries):
            return tuple[tuple(_annotation(e, model_name) for e in entries)]
        case OneOfStep(branches=branches) if branches:
            return Union[
                tuple(
                    _annotation(b, f"{model_name}Branch{ix}")
                    for ix, b in enumerate(branches)
                )
            ]
    return None
