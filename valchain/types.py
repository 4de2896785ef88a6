"""
Type definitions for valchain.

Provides the Result type (Ok/Err), structured validation errors and their
detail payloads, and the aggregation helpers every compiled check is built on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar, Union

from .path import Path, PathLike, parse_path

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Found:
    """The offending value itself."""

    value: Any


@dataclass(frozen=True, slots=True)
class Expected:
    """Values that would have been accepted."""

    values: Sequence[Any]


@dataclass(frozen=True, slots=True)
class Unexpected:
    """Values that should not have been there."""

    values: Sequence[Any]


@dataclass(frozen=True, slots=True)
class Caught:
    """An exception raised by caller-supplied code."""

    error: BaseException


ErrorDetail = Union[Found, Expected, Unexpected, Caught]


@dataclass(frozen=True, slots=True)
class ValidationError:
    """A single validation failure, addressed by its path within the input."""

    path: Path
    message: str
    details: ErrorDetail | None = None

    def under(self, prefix: Path) -> ValidationError:
        """Rebase this error below `prefix`."""
        return ValidationError((*prefix, *self.path), self.message, self.details)

    def __str__(self) -> str:
        # Imported here to avoid circular dependency
        from .printer import print_error

        return print_error(self.path, self.message, self.details)


class Result:
    """Common base of Ok and Err."""

    __slots__ = ()

    def is_ok(self) -> bool:
        raise NotImplementedError

    def is_err(self) -> bool:
        return not self.is_ok()


@dataclass(frozen=True, slots=True)
class Ok(Result, Generic[T]):
    """Success result containing a (possibly transformed) value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def map(self, f: Callable[[T], Any]) -> Ok[Any]:
        return Ok(f(self.value))

    def at(self, path: PathLike) -> Ok[T]:
        return self

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Result):
    """Failure result containing every error found, in order."""

    errors: tuple[ValidationError, ...]

    def is_ok(self) -> bool:
        return False

    def map(self, f: Callable[[Any], Any]) -> Err:
        return self

    def at(self, path: PathLike) -> Err:
        """
        Rebase every error under `path`.

        Used when a nested check ran without knowledge of where it was
        installed and its errors must be spliced into the caller's location.
        """
        prefix = parse_path(path)
        if not prefix:
            return self
        return Err(tuple(e.under(prefix) for e in self.errors))

    def unwrap(self) -> Any:
        from .errors import ValidationFailed

        raise ValidationFailed(self.errors)


# Type aliases
CheckFn = Callable[[Any], Result]


def ok(value: Any) -> Ok[Any]:
    return Ok(value)


def fail(
    error: str | Sequence[str],
    path: PathLike = None,
    details: ErrorDetail | None = None,
) -> Err:
    """
    Build a failure with one error per message, all at the same path.

    Usage:
        fail("Not a number")
        fail("Unexpected value", ["user", "role"], Expected(["admin", "guest"]))
    """
    p = parse_path(path)
    messages = [error] if isinstance(error, str) else list(error)
    return Err(tuple(ValidationError(p, m, details) for m in messages))


def gather(results: Iterable[Result]) -> Result:
    """
    Combine results without short-circuiting.

    Returns:
        Ok([values...]) if every result succeeded
        Err(errors) with the errors of every failing result, in input order
    """
    results = list(results)
    failures = [r for r in results if isinstance(r, Err)]
    if failures:
        return Err(tuple(e for r in failures for e in r.errors))
    return Ok([r.value for r in results if isinstance(r, Ok)])
