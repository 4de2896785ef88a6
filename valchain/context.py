"""
Context manager for diagnostic rendering configuration.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Optional

# Context variable for the rendered value length limit
_max_value_length: ContextVar[Optional[int]] = ContextVar(
    "max_value_length", default=None
)


def max_value_length() -> Optional[int]:
    """Current limit for rendered values in error messages, or None."""
    return _max_value_length.get()


@contextmanager
def printing_context(*, max_length: Optional[int] = None):
    """
    Context manager for error rendering configuration.

    Args:
        max_length: If set, values rendered into error messages are cut to this
                    many characters and suffixed with "...".
                    Default is no limit.

    Example:
        from valchain import Object, compile, printing_context

        check = compile(Object({"id": "string"}))
        result = check({"id": "1", "x" * 10_000: None})

        with printing_context(max_length=12):
            print(result.errors[0])  # ..., unexpected: "xxxxxxxxxxx...
    """
    if max_length is not None and max_length < 0:
        raise ValueError(f"max_length must be non-negative, got {max_length}")
    token = _max_value_length.set(max_length)
    try:
        yield
    finally:
        _max_value_length.reset(token)
