"""
Path model for valchain errors.

A path locates a value inside a nested structure: a tuple of property names
and list indices, root = ().

Supports:
- Sequences: ["a", 0, "b"]
- Dotted strings: "a.b.c"
- Single indices: 3
- None for the root
"""

from __future__ import annotations

from typing import Sequence, Union

Path = tuple[Union[str, int], ...]
PathLike = Union[Path, Sequence[Union[str, int]], str, int, None]


def parse_path(path: PathLike) -> Path:
    """Normalize any accepted path shorthand into a tuple."""
    if path is None:
        return ()
    if isinstance(path, str):
        return tuple(path.split("."))
    if isinstance(path, int):
        return (path,)
    return tuple(path)


def extend_path(path: Path, step: str | int) -> Path:
    """Return a new path with `step` appended."""
    return (*path, step)


def print_path(path: Path) -> str:
    """
    Render a path as a message prefix.

    Example:
        print_path(("user", 0)) == "At `user`: At `0`: "
    """
    return "".join(f"At `{step}`: " for step in path)
