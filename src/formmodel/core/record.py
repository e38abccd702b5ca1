"""
Record codec: convert between a FormData submission and a plain key -> value(s) record.

Responsibilities
- to_record groups submitted entries by key; one entry becomes a scalar, several a list.
- from_record appends one entry per scalar or list item, skipping None.
- schema_from_self / schema_record adapt a struct schema so its encoded side is FormData.

Notes
- Files (starlette UploadFile) are passed through as the same instance in both directions.
- Every non-file value written by from_record is coerced with str().
- to_record(from_record(r)) == r for any record without None values.

Examples:
    >>> from formmodel.core.record import from_record, to_record
    >>> form = from_record({"name": "John", "pets": ["Fido", "Rex"]})
    >>> form.getlist("pets")
    ['Fido', 'Rex']
    >>> to_record(form)
    {'name': 'John', 'pets': ['Fido', 'Rex']}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from starlette.datastructures import FormData

from .errors import ParseIssueError
from .issues import TypeIssue
from .protocols import Schema
from .typing import EntryValue, Record, is_file

__all__ = [
    "to_record",
    "from_record",
    "FormDataSchema",
    "RecordSchema",
    "schema_from_self",
    "schema_record",
]

A = TypeVar("A")


def to_record(form_data: FormData) -> Record:
    """
    Convert a FormData submission to a record.

    Args:
        form_data (FormData): Submitted entries, possibly with repeated keys.

    Returns:
        Record: Keys in first-seen order; a key seen once maps to its value, a key
        seen several times maps to the list of its values in submission order.
    """
    grouped: dict[str, list[EntryValue]] = {}
    for key, value in form_data.multi_items():
        grouped.setdefault(key, []).append(value)
    return {key: values[0] if len(values) == 1 else list(values) for key, values in grouped.items()}


def _coerce(value: Any) -> EntryValue:
    return value if is_file(value) else str(value)


def from_record(record: Mapping[str, Any]) -> FormData:
    """
    Convert a record to a FormData submission.

    Args:
        record (Mapping[str, Any]): Scalars or lists of scalars per key.

    Returns:
        FormData: One entry per scalar, one per list item, in record order.

    Notes:
        None values and None list items are dropped without error.
    """
    items: list[tuple[str, EntryValue]] = []
    for key, value in record.items():
        if isinstance(value, (list, tuple)):
            items.extend((key, _coerce(item)) for item in value if item is not None)
        elif value is not None:
            items.append((key, _coerce(value)))
    return FormData(items)


class FormDataSchema:
    """Identity schema over FormData; rejects anything else with a TypeIssue."""

    def decode(self, value: Any) -> FormData:
        return self._check(value)

    async def decode_async(self, value: Any) -> FormData:
        return self._check(value)

    def encode(self, value: Any) -> FormData:
        return self._check(value)

    @staticmethod
    def _check(value: Any) -> FormData:
        if not isinstance(value, FormData):
            raise ParseIssueError(TypeIssue(actual=value, expected="FormData"))
        return value


class RecordSchema(Generic[A]):
    """
    Schema whose encoded side is FormData, wrapping a struct schema over a Record.

    Attributes:
        schema (Schema[A, Record]): Struct schema applied to the record.
    """

    def __init__(self, schema: Schema[A, Record]) -> None:
        self.schema = schema
        self._self = FormDataSchema()

    def decode(self, value: Any) -> A:
        return self.schema.decode(to_record(self._self.decode(value)))

    async def decode_async(self, value: Any) -> A:
        form_data = await self._self.decode_async(value)
        return await self.schema.decode_async(to_record(form_data))

    def encode(self, value: A) -> FormData:
        return from_record(self.schema.encode(value))


def schema_from_self() -> FormDataSchema:
    """Return the identity schema for FormData."""
    return FormDataSchema()


def schema_record(schema: Schema[A, Record]) -> RecordSchema[A]:
    """
    Wrap a struct schema so it decodes from, and encodes to, FormData.

    Args:
        schema (Schema[A, Record]): Struct schema over a record, e.g. formmodel.core.struct.Struct.

    Returns:
        RecordSchema[A]: decode = to_record then schema.decode; encode = schema.encode then from_record.

    Examples:
        >>> from formmodel.core.struct import Struct
        >>> schema = schema_record(Struct({"name": str}))
        >>> schema.decode(from_record({"name": "John"}))
        {'name': 'John'}
    """
    return RecordSchema(schema)
