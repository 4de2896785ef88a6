"""
Helper functions for chain compilation.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence, TypeVar

from ..path import Path
from ..steps import EnumStep, Kind, ObjectStep, check_enum_options, step_kind

logger = logging.getLogger(__name__)

A = TypeVar("A")


def group_runs(items: Sequence[A], same: Callable[[A, A], bool]) -> list[list[A]]:
    """Split items into maximal runs of adjacent items related by `same`."""
    runs: list[list[A]] = []
    for item in items:
        if runs and same(runs[-1][-1], item):
            runs[-1].append(item)
        else:
            runs.append([item])
    return runs


def merge_objects(steps: Sequence[ObjectStep], path: Path) -> ObjectStep:
    # Repeated names are kept; the last one wins when the dict is rebuilt
    return ObjectStep(tuple(f for step in steps for f in step.fields))


def merge_enums(steps: Sequence[EnumStep], path: Path) -> EnumStep:
    return EnumStep(
        [o for step in steps for o in check_enum_options(step.options, path)]
    )


MERGERS: dict[Kind, Callable[[Sequence[Any], Path], Any]] = {
    Kind.OBJECT: merge_objects,
    Kind.ENUM: merge_enums,
}


def merge_steps(steps: Sequence[Any], path: Path) -> list[Any]:
    """
    Collapse runs of adjacent mergeable steps into one step each.

    Runs of other kinds are left as they are, in order.
    """
    typed = [(step_kind(step, path), step) for step in steps]
    merged: list[Any] = []
    for run in group_runs(typed, lambda x, y: x[0] == y[0]):
        kind = run[0][0]
        if kind in MERGERS and len(run) > 1:
            logger.debug("Merging %d adjacent %s steps at %s", len(run), kind, path)
            merged.append(MERGERS[kind]([step for _, step in run], path))
        else:
            merged.extend(step for _, step in run)
    return merged


def is_compatible(prev: Kind, curr: Kind) -> bool:
    """Whether a step of kind `curr` may directly follow one of kind `prev`."""
    if Kind.PREDICATE in (prev, curr) or Kind.FUNCTION in (prev, curr):
        return True
    if prev == Kind.ENUM:
        return curr == Kind.ENUM
    if prev == Kind.OBJECT:
        return curr == Kind.OBJECT
    if prev == Kind.ARRAY:
        return curr in (Kind.INDEXED, Kind.NON_EMPTY)
    if prev == Kind.STRING:
        return curr == Kind.NON_EMPTY
    if prev == Kind.NUMBER:
        return curr == Kind.INTEGER
    return False


def flatten_chain(steps: Sequence[Any]) -> list[Any]:
    """Splice nested chains into their parent, one level deep."""
    return [s for step in steps for s in (step if isinstance(step, list) else [step])]
