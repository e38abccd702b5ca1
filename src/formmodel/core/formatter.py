"""
Issue formatters: a generic issue-to-list formatter and the path-keyed form formatter.

Responsibilities
- ArrayFormatter flattens an issue tree into an ordered list of (path, message) entries,
  one per failure. It knows nothing about forms and can be replaced by any object
  satisfying formmodel.core.protocols.IssueFormatter.
- FormModelFormatter merges that list with the actual values collected from the same
  tree (formmodel.core.collect) into {dotted path: FormIssue(actual, message)}.

Notes
- The merged mapping's keys are exactly the paths produced by the array formatter;
  actual values recorded at other paths are dropped.
- When two formatted entries share a path, the later one wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, assert_never

from .collect import actual_values_by_path, join_path
from .constants import (
    FORBIDDEN_MESSAGE,
    MISSING_MESSAGE,
    PATH_SEPARATOR,
    UNEXPECTED_MESSAGE,
)
from .errors import ParseIssueError
from .issues import (
    Composite,
    Forbidden,
    Missing,
    ParseIssue,
    Pointer,
    Refinement,
    Transformation,
    TypeIssue,
    Unexpected,
)
from .protocols import IssueFormatter
from .typing import Path

__all__ = [
    "ArrayFormatterIssue",
    "ArrayFormatter",
    "FormIssue",
    "FormModelFormatterResult",
    "FormModelFormatter",
    "merge_results",
]


@dataclass(frozen=True)
class ArrayFormatterIssue:
    """
    One flattened failure.

    Attributes:
        tag (str): Name of the issue node the message was taken from.
        path (Path): Segments leading to the failure.
        message (str): Human message.
    """

    tag: str
    path: Path
    message: str


def _type_message(issue: TypeIssue) -> str:
    if issue.message is not None:
        return issue.message
    if issue.expected is not None:
        return f"Expected {issue.expected}, actual {issue.actual!r}"
    return f"Invalid value {issue.actual!r}"


class ArrayFormatter:
    """
    Flatten an issue tree into ArrayFormatterIssue entries, depth-first.

    Refinement and Transformation nodes that carry a message are reported with that
    message and not descended into; otherwise the message comes from the leaf below.

    Examples:
        >>> from formmodel.core.issues import Pointer, Missing
        >>> ArrayFormatter().format_issue(Pointer("name", {}, Missing()))
        [ArrayFormatterIssue(tag='Missing', path=('name',), message='is missing')]
    """

    def format_issue(self, issue: ParseIssue) -> list[ArrayFormatterIssue]:
        return self._format(issue, ())

    def _format(self, issue: ParseIssue, path: Path) -> list[ArrayFormatterIssue]:
        match issue:
            case Pointer():
                return self._format(issue.issue, path + issue.segments)
            case Composite():
                out: list[ArrayFormatterIssue] = []
                for child in issue.children:
                    out.extend(self._format(child, path))
                return out
            case Refinement() | Transformation():
                if issue.message is not None:
                    return [ArrayFormatterIssue(type(issue).__name__, path, issue.message)]
                return self._format(issue.issue, path)
            case TypeIssue():
                return [ArrayFormatterIssue("Type", path, _type_message(issue))]
            case Missing():
                return [ArrayFormatterIssue("Missing", path, issue.message or MISSING_MESSAGE)]
            case Unexpected():
                return [
                    ArrayFormatterIssue("Unexpected", path, issue.message or UNEXPECTED_MESSAGE)
                ]
            case Forbidden():
                return [ArrayFormatterIssue("Forbidden", path, issue.message or FORBIDDEN_MESSAGE)]
            case _:
                assert_never(issue)


@dataclass(frozen=True)
class FormIssue:
    """
    Per-field failure shown next to a form input.

    Attributes:
        actual (Any): Value observed at the path (post-parsing when parsing succeeded),
            or None when nothing was observed (e.g. a missing field).
        message (str | None): Human message.
    """

    actual: Any
    message: str | None


FormModelFormatterResult = dict[str, FormIssue]


class FormModelFormatter:
    """
    Build {dotted path: FormIssue(actual, message)} from an issue tree.

    Args:
        array_formatter (IssueFormatter | None): Produces the (path, message) list.
            Defaults to ArrayFormatter().
        separator (str): Joins path segments into keys.

    Examples:
        >>> from formmodel.core.issues import Pointer, Refinement, TypeIssue
        >>> tree = Pointer("age", {"age": "17"}, Refinement(TypeIssue(17), 17, message="too young"))
        >>> FormModelFormatter().format_issue(tree)
        {'age': FormIssue(actual=17, message='too young')}
    """

    def __init__(
        self,
        array_formatter: IssueFormatter | None = None,
        *,
        separator: str = PATH_SEPARATOR,
    ) -> None:
        self.array_formatter: IssueFormatter = array_formatter or ArrayFormatter()
        self.separator = separator

    def format_issue(self, issue: ParseIssue) -> FormModelFormatterResult:
        actual_map = actual_values_by_path(issue, separator=self.separator)
        return merge_results(
            actual_map,
            (
                (entry.path, entry.message)
                for entry in self.array_formatter.format_issue(issue)
            ),
            separator=self.separator,
        )

    def format_error(self, error: ParseIssueError) -> FormModelFormatterResult:
        return self.format_issue(error.issue)


def merge_results(
    actual_map: Mapping[str, Any],
    messages: Iterable[tuple[Sequence[Any], str]],
    *,
    separator: str = PATH_SEPARATOR,
) -> FormModelFormatterResult:
    """
    Merge collected actual values with formatted (path, message) pairs.

    Args:
        actual_map (Mapping[str, Any]): Output of actual_values_by_path.
        messages (Iterable[tuple[Sequence, str]]): Ordered (path segments, message) pairs.
        separator (str): Joins path segments into keys.

    Returns:
        FormModelFormatterResult: One entry per distinct formatted path.
    """
    result: FormModelFormatterResult = {}
    for path, message in messages:
        key = join_path(tuple(path), separator)
        result[key] = FormIssue(actual=actual_map.get(key), message=message)
    return result
