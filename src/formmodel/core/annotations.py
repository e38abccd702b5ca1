"""
Pydantic metadata and aliases for declaring form field schemas.

Use these inside ``typing.Annotated`` to build field schemas that pydantic validates:

- FromString marks a node whose submitted form is a string parsed into another type
  (int, float, bool, date). It also rejects non-string input before parsing.
- Refine adds a synchronous predicate evaluated on the decoded value. A failure is
  reported as a ``refinement`` error whose context carries the decoded value, so error
  mappings show e.g. ``17`` rather than the submitted ``"17"``.
- AsyncRefine adds an awaitable predicate evaluated only by the async decode path.
- Filters (min_length, greater_than_or_equal_to, ...) are Refine factories.

Notes:
    - Metadata applies left to right: ``Annotated[int, FromString(), greater_than(0)]``
      checks the input is a string, parses an int, then runs the predicate.
    - ``message`` is either a string or a callable receiving the offending value.

Examples:
    >>> from typing import Annotated
    >>> from pydantic import TypeAdapter
    >>> Age = Annotated[IntFromString, greater_than_or_equal_to(18)]
    >>> TypeAdapter(Age).validate_python("18")
    18
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from typing import Annotated, Any, Union

from fastapi import UploadFile
from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, PydanticCustomError, core_schema

__all__ = [
    "REFINEMENT_ERROR",
    "Message",
    "FromString",
    "Refine",
    "AsyncRefine",
    "min_length",
    "max_length",
    "non_empty",
    "pattern",
    "greater_than",
    "greater_than_or_equal_to",
    "less_than",
    "less_than_or_equal_to",
    "between",
    "IntFromString",
    "NumberFromString",
    "BooleanFromString",
    "DateFromString",
    "NonEmptyString",
    "File",
]

# pydantic error type raised by Refine; ctx["actual"] holds the decoded value.
REFINEMENT_ERROR = "refinement"

Message = Union[str, Callable[[Any], str]]


def _render(message: Message | None, value: Any, description: str) -> str:
    if callable(message):
        return message(value)
    if message is not None:
        return message
    return f"Expected {description}, actual {value!r}"


def _require_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise PydanticCustomError("string_type", "Input should be a valid string")


@dataclass(frozen=True)
class FromString:
    """Marks a schema node as parsed from a submitted string."""

    def __get_pydantic_core_schema__(
        self, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_before_validator_function(_require_string, handler(source_type))


@dataclass(frozen=True)
class Refine:
    """
    Synchronous refinement of a decoded value.

    Attributes:
        predicate (Callable[[Any], bool]): Returns True for acceptable values.
        message (Message | None): Failure message, or a callable building it from the value.
        description (str): Used by the default message "Expected <description>, actual <value>".
    """

    predicate: Callable[[Any], bool]
    message: Message | None = None
    description: str = "a value satisfying the refinement"

    def __get_pydantic_core_schema__(
        self, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_after_validator_function(self._validate, handler(source_type))

    def _validate(self, value: Any) -> Any:
        try:
            ok = self.predicate(value)
        except TypeError:
            # e.g. len() of an UploadFile submitted to a ``str | File`` field.
            ok = False
        if ok:
            return value
        raise PydanticCustomError(
            REFINEMENT_ERROR,
            _render(self.message, value, self.description),
            {"actual": value},
        )


@dataclass(frozen=True)
class AsyncRefine:
    """
    Awaitable refinement of a decoded value (e.g. a uniqueness lookup).

    Only evaluated by decode_async, after every synchronous check has passed. A
    synchronous decode of a field carrying an AsyncRefine fails with a Forbidden issue.
    Must appear at the top level of the field's Annotated metadata; FieldDescriptor
    rejects one nested inside Optional, a union arm, or list items.
    """

    predicate: Callable[[Any], Awaitable[bool]]
    message: Message | None = None
    description: str = "a value satisfying the asynchronous check"

    def render(self, value: Any) -> str:
        return _render(self.message, value, self.description)


def min_length(n: int, *, message: Message | None = None) -> Refine:
    return Refine(
        lambda v: len(v) >= n,
        message,
        f"a value with a length of at least {n}",
    )


def max_length(n: int, *, message: Message | None = None) -> Refine:
    return Refine(
        lambda v: len(v) <= n,
        message,
        f"a value with a length of at most {n}",
    )


def non_empty(*, message: Message | None = None) -> Refine:
    return Refine(lambda v: len(v) > 0, message, "a non empty value")


def pattern(regex: str | re.Pattern[str], *, message: Message | None = None) -> Refine:
    compiled = re.compile(regex)
    return Refine(
        lambda v: compiled.search(v) is not None,
        message,
        f"a string matching the pattern {compiled.pattern}",
    )


def greater_than(n: Any, *, message: Message | None = None) -> Refine:
    return Refine(lambda v: v > n, message, f"a value greater than {n}")


def greater_than_or_equal_to(n: Any, *, message: Message | None = None) -> Refine:
    return Refine(lambda v: v >= n, message, f"a value greater than or equal to {n}")


def less_than(n: Any, *, message: Message | None = None) -> Refine:
    return Refine(lambda v: v < n, message, f"a value less than {n}")


def less_than_or_equal_to(n: Any, *, message: Message | None = None) -> Refine:
    return Refine(lambda v: v <= n, message, f"a value less than or equal to {n}")


def between(low: Any, high: Any, *, message: Message | None = None) -> Refine:
    return Refine(lambda v: low <= v <= high, message, f"a value between {low} and {high}")


IntFromString = Annotated[int, FromString()]
NumberFromString = Annotated[float, FromString()]
BooleanFromString = Annotated[bool, FromString()]
DateFromString = Annotated[date, FromString()]
NonEmptyString = Annotated[str, non_empty()]
File = UploadFile
