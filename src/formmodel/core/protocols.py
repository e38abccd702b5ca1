"""
Structural contracts for the external validator and issue formatter.

The decoder depends only on these protocols; formmodel.core.struct.Struct and
formmodel.core.formatter.ArrayFormatter are the pydantic-backed defaults.

Notes:
    - Schema implementations raise formmodel.core.errors.ParseIssueError on failure.
    - Formatter implementations return entries exposing `path` and `message`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

if TYPE_CHECKING:  # pragma: no cover
    from formmodel.config import FormSettings

    from .issues import ParseIssue

__all__ = [
    "Schema",
    "StructFactory",
    "FormattedIssue",
    "IssueFormatter",
]

A = TypeVar("A")
I = TypeVar("I")  # noqa: E741


class Schema(Protocol[A, I]):
    """Bidirectional codec between an encoded form I and a decoded value A."""

    def decode(self, value: I) -> A: ...

    async def decode_async(self, value: I) -> A: ...

    def encode(self, value: A) -> I: ...


class StructFactory(Protocol):
    """Compose field schemas into a struct schema over a Record."""

    def __call__(
        self,
        fields: Mapping[str, Any],
        *,
        settings: FormSettings | None = ...,
        name: str = ...,
    ) -> Schema[dict[str, Any], dict[str, Any]]: ...


class FormattedIssue(Protocol):
    @property
    def path(self) -> Sequence[Any]: ...

    @property
    def message(self) -> str: ...


class IssueFormatter(Protocol):
    """Flatten an issue tree into ordered (path, message) entries."""

    def format_issue(self, issue: ParseIssue) -> Sequence[FormattedIssue]: ...
