"""
Validation issue tree produced by the validator for a failed decode.

Variants:
- Pointer: prepends one or more path segments to its single child.
- Composite: one or more children sharing the current path.
- Refinement: a predicate failed; `actual` is the value the predicate saw.
- Transformation: parsing between encoded and decoded forms failed, or wraps a failure
  raised after parsing; `actual` is the value before parsing.
- Leaves (TypeIssue, Missing, Unexpected, Forbidden): terminate the path.

Notes:
    - Nodes are frozen dataclasses; consumers dispatch with ``match`` over ParseIssue.
    - `message` is an optional override; formatters fall back to a per-kind default.
    - Only Pointer and Composite change the path or fan out; every other node passes
      the path through unchanged to at most one child.

Examples:
    >>> from formmodel.core.issues import Pointer, TypeIssue
    >>> issue = Pointer(path="name", actual={"name": 1}, issue=TypeIssue(actual=1))
    >>> issue.segments
    ('name',)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Union

from .typing import Path, PathSegment

__all__ = [
    "Pointer",
    "Composite",
    "Refinement",
    "Transformation",
    "TypeIssue",
    "Missing",
    "Unexpected",
    "Forbidden",
    "ParseIssue",
    "RefinementKind",
    "TransformationKind",
]

RefinementKind = Literal["Predicate"]
TransformationKind = Literal["Transformation"]


@dataclass(frozen=True)
class Pointer:
    """
    Annotates a sub-issue with the path segment(s) leading to it.

    Attributes:
        path (PathSegment | Sequence[PathSegment]): One segment or a non-empty sequence.
        actual (Any): The container value the path indexes into.
        issue (ParseIssue): The issue found at the end of the path.
    """

    path: PathSegment | Sequence[PathSegment]
    actual: Any
    issue: ParseIssue

    @property
    def segments(self) -> Path:
        if isinstance(self.path, (str, int)):
            return (self.path,)
        return tuple(self.path)


@dataclass(frozen=True)
class Composite:
    """
    Groups one or more issues found at the same path.

    Attributes:
        issues (ParseIssue | Sequence[ParseIssue]): One issue or a non-empty sequence.
        actual (Any): The value at the shared path.
    """

    issues: ParseIssue | Sequence[ParseIssue]
    actual: Any = None

    @property
    def children(self) -> tuple[ParseIssue, ...]:
        if isinstance(self.issues, Sequence):
            return tuple(self.issues)
        return (self.issues,)


@dataclass(frozen=True)
class Refinement:
    """A refinement predicate failed."""

    issue: ParseIssue
    actual: Any
    kind: RefinementKind = "Predicate"
    message: str | None = None


@dataclass(frozen=True)
class Transformation:
    """Failure at a transformation boundary (e.g. int parsed from a submitted string)."""

    issue: ParseIssue
    actual: Any
    kind: TransformationKind = "Transformation"
    message: str | None = None


@dataclass(frozen=True)
class TypeIssue:
    """The value does not conform to the expected type or constraint."""

    actual: Any
    message: str | None = None
    expected: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class Missing:
    """A required key is absent."""

    actual: Any = None
    message: str | None = None


@dataclass(frozen=True)
class Unexpected:
    """A key is present that the schema does not declare."""

    actual: Any
    message: str | None = None


@dataclass(frozen=True)
class Forbidden:
    """The value cannot be validated in the current mode (async check in a sync decode)."""

    actual: Any
    message: str | None = None


ParseIssue = Union[
    Pointer,
    Composite,
    Refinement,
    Transformation,
    TypeIssue,
    Missing,
    Unexpected,
    Forbidden,
]
