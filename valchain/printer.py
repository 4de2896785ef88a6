"""
Diagnostic rendering for valchain errors.

Only error paths go through here; compiled checks never print on success.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from .context import max_value_length
from .path import Path, print_path
from .types import Caught, ErrorDetail, Expected, Found, Unexpected, ValidationError


def print_code(name: Any) -> str:
    return f"`{name}`"


def print_value(value: Any) -> str:
    """
    Render a runtime value the way it would appear in JSON.

    Lists render element-wise, callables by name, and values JSON cannot
    express as `<TypeName> repr`. Output is truncated under printing_context().
    """
    return _truncate(_render(value))


def print_values(values: Sequence[Any] | Any) -> str:
    """Render a list of values as a comma-separated run."""
    if isinstance(values, (list, tuple)):
        return ", ".join(print_value(v) for v in values)
    return print_value(values)


def _render(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_render(v) for v in value) + "]"
    if value is None or isinstance(value, (bool, int, float, str)):
        return json.dumps(value, ensure_ascii=False)
    if callable(value):
        return f"<function {getattr(value, '__qualname__', type(value).__name__)}>"
    if isinstance(value, dict):
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            pass
    return f"<{type(value).__name__}> {value!r}"


def _truncate(text: str) -> str:
    limit = max_value_length()
    if limit is None or len(text) <= limit:
        return text
    return text[:limit] + "..."


def print_error(
    path: Path,
    message: str,
    details: ErrorDetail | Sequence[ValidationError] | None = None,
) -> str:
    """
    Render a message with its path prefix and details.

    Shared by ValidationError and SchemaError so both read the same way.
    A sequence of errors as details is listed below the message, indented.
    """
    msg = print_path(path) + message
    match details:
        case None:
            return msg
        case Found(value=value):
            return f"{msg}, found: {print_value(value)}"
        case Expected(values=values):
            return f"{msg}, expected: {print_values(values)}"
        case Unexpected(values=values):
            return f"{msg}, unexpected: {print_values(values)}"
        case Caught(error=error):
            return f"{msg}, inner error: {type(error).__name__}: {error}"
        case [*errors] if errors:
            return msg + ":\n  " + "\n  ".join(str(e) for e in errors)
    return msg
