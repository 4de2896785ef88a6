"""
Exceptions raised by valchain.

SchemaError is for schemas that cannot be compiled; it is never produced by a
compiled check. ValidationFailed is only raised on request, by Result.unwrap().
"""

from __future__ import annotations

from typing import Sequence

from .path import Path
from .printer import print_error
from .types import ErrorDetail, ValidationError


class SchemaError(ValueError):
    """The schema itself is malformed (a programmer error, not a data error)."""

    def __init__(
        self,
        path: Path,
        message: str,
        details: ErrorDetail | Sequence[ValidationError] | None = None,
    ):
        self.path = path
        self.message = message
        self.details = details
        super().__init__(print_error(path, message, details))


class ValidationFailed(ValueError):
    """Raised by Err.unwrap() with every error of the failed result."""

    def __init__(self, errors: Sequence[ValidationError]):
        self.errors = tuple(errors)
        super().__init__("\n".join(str(e) for e in self.errors))
