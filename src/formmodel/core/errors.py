"""
Core exception types raised by descriptor composition and form decoding.

Provides typed exceptions for core-domain failures:
- FormCompositionError for schema nodes that cannot be represented as one form entry.
- ParseIssueError for validator failures carrying a raw issue tree.
- FormModelParseError for decode failures, carrying the flattened path-keyed mapping.

Notes:
    - ParseIssueError is internal to the validator/orchestrator boundary; callers of
      decode_form_model only ever observe FormModelParseError.
    - FormModelParseError.errors maps dotted field paths to FormIssue(actual, message).

Examples:
    Catch a decode failure and read per-field messages.

    >>> from formmodel.core.errors import FormModelParseError
    >>> from formmodel.core.formatter import FormIssue
    >>> err = FormModelParseError({"age": FormIssue(actual=17, message="too young")})
    >>> err.messages
    {'age': 'too young'}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .formatter import FormIssue
    from .issues import ParseIssue

__all__ = [
    "FormModelError",
    "FormCompositionError",
    "ParseIssueError",
    "FormModelParseError",
]


class FormModelError(Exception):
    """Base class for formmodel errors."""


class FormCompositionError(FormModelError, TypeError):
    """A schema node is not form-coercible, or a model field is not a FieldDescriptor."""


class ParseIssueError(FormModelError):
    """
    Validator failure carrying the raw validation issue tree.

    Attributes:
        issue (ParseIssue): Root of the issue tree produced by the validator.
    """

    def __init__(self, issue: ParseIssue) -> None:
        super().__init__(f"validation failed: {type(issue).__name__}")
        self.issue = issue


class FormModelParseError(FormModelError):
    """
    Decode failure of a form model.

    Attributes:
        errors (dict[str, FormIssue]): Dotted path -> FormIssue(actual, message).
    """

    def __init__(self, errors: Mapping[str, FormIssue]) -> None:
        self.errors: dict[str, FormIssue] = dict(errors)
        paths = ", ".join(repr(p) for p in self.errors) or "<none>"
        super().__init__(f"form model failed validation at {paths}")

    @property
    def messages(self) -> dict[str, str | None]:
        """Dotted path -> human message, for direct use as per-field error text."""
        return {path: issue.message for path, issue in self.errors.items()}
