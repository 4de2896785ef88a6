"""
valchain - compile declarative schemas into path-aware validators.

Usage:
    from valchain import Object, Optional, compile

    check = compile(Object({
        "name": ["string", "non-empty"],
        "tags": Optional("array", []),
    }))

    result = check({"name": "Alice"})
    result.unwrap()  # {"name": "Alice", "tags": []}
"""

from .compiler import compile
from .context import printing_context
from .errors import SchemaError, ValidationFailed
from .path import Path, parse_path
from .schema import to_pydantic, validate
from .steps import Enum, Indexed, Kind, Object, OneOf, Optional, Predicate
from .types import (
    Caught,
    CheckFn,
    Err,
    Expected,
    Found,
    Ok,
    Result,
    Unexpected,
    ValidationError,
    fail,
    gather,
    ok,
)

__all__ = [
    # Result types
    "Result",
    "Ok",
    "Err",
    "ok",
    "fail",
    "gather",
    "ValidationError",
    "Found",
    "Expected",
    "Unexpected",
    "Caught",
    "Path",
    "parse_path",
    "CheckFn",
    # Steps
    "Kind",
    "Predicate",
    "Optional",
    "Enum",
    "Object",
    "Indexed",
    "OneOf",
    # Compilation
    "compile",
    "validate",
    "to_pydantic",
    "printing_context",
    # Exceptions
    "SchemaError",
    "ValidationFailed",
]
