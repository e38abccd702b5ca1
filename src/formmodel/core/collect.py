"""
Collect the "actual" value observed at every path of a validation issue tree.

The traversal emits one (path, actual) entry per node, parents before children:
- Pointer: the extended path with the pointer's own actual, then its child.
- Composite: the current path, then every child under the same path.
- Refinement / Transformation: the current path, then the child.
- Leaves: the current path only.

Notes:
    - Callers fold the entries with ``dict(entries)``, so when several nodes share a path
      the entry emitted last wins. With the order above, a nested leaf's actual replaces
      the value recorded by its enclosing Transformation or Pointer. This is an effect of
      the traversal order and callers rely on it.
    - Pure function over its input; no shared state.

Examples:
    >>> from formmodel.core.collect import collect_actual_values
    >>> from formmodel.core.issues import Pointer, Transformation, TypeIssue
    >>> tree = Pointer("age", {"age": "x"}, Transformation(TypeIssue("x"), "x"))
    >>> collect_actual_values(tree)
    [('age', {'age': 'x'}), ('age', 'x'), ('age', 'x')]
"""

from __future__ import annotations

from typing import Any, assert_never

from .constants import PATH_SEPARATOR
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
from .typing import Path

__all__ = [
    "join_path",
    "collect_actual_values",
    "actual_values_by_path",
]


def join_path(path: Path, separator: str = PATH_SEPARATOR) -> str:
    """Join path segments into a mapping key; the empty path yields ""."""
    return separator.join(str(segment) for segment in path)


def collect_actual_values(
    issue: ParseIssue,
    path: Path = (),
    *,
    separator: str = PATH_SEPARATOR,
) -> list[tuple[str, Any]]:
    """
    Recursively collect (path, actual) entries from an issue tree.

    Args:
        issue (ParseIssue): Node to start from.
        path (Path): Segments accumulated by enclosing Pointers.
        separator (str): Separator used to join segments.

    Returns:
        list[tuple[str, Any]]: Entries in emission order (parents before children).
    """
    key = join_path(path, separator)
    match issue:
        case Pointer():
            new_path = path + issue.segments
            entries = [(join_path(new_path, separator), issue.actual)]
            entries.extend(collect_actual_values(issue.issue, new_path, separator=separator))
            return entries
        case Composite():
            entries = [(key, issue.actual)]
            for child in issue.children:
                entries.extend(collect_actual_values(child, path, separator=separator))
            return entries
        case Refinement() | Transformation():
            entries = [(key, issue.actual)]
            entries.extend(collect_actual_values(issue.issue, path, separator=separator))
            return entries
        case TypeIssue() | Missing() | Unexpected() | Forbidden():
            return [(key, issue.actual)]
        case _:
            assert_never(issue)


def actual_values_by_path(
    issue: ParseIssue,
    *,
    separator: str = PATH_SEPARATOR,
) -> dict[str, Any]:
    """Fold collected entries into a mapping; later entries overwrite earlier ones."""
    return dict(collect_actual_values(issue, separator=separator))
