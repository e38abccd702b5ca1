"""
Typing aliases shared by the record codec, descriptors, and decoder.

Notes:
    - Submission is starlette's FormData (what ``await request.form()`` returns).
    - Files are starlette UploadFile instances and pass through the codec unchanged.
    - A Record never holds an empty or a single-element list.

Examples:
    >>> from formmodel.core.typing import Record
    >>> def describe(record: Record) -> list[str]:
    ...     return sorted(record)
    >>> describe({"b": "1", "a": ["x", "y"]})
    ['a', 'b']
"""

from __future__ import annotations

from typing import Any, Union

from starlette.datastructures import FormData, UploadFile

__all__ = [
    "Submission",
    "FileHandle",
    "EntryValue",
    "CoercibleValue",
    "Record",
    "PathSegment",
    "Path",
    "is_file",
]

Submission = FormData
FileHandle = UploadFile

# One value of a submitted entry.
EntryValue = Union[str, UploadFile]
CoercibleValue = Union[EntryValue, list[EntryValue]]
Record = dict[str, CoercibleValue]

# Property-access segment (field name or list index).
PathSegment = Union[str, int]
Path = tuple[PathSegment, ...]


def is_file(value: Any) -> bool:
    """Return True if value is an uploaded file handle."""
    return isinstance(value, UploadFile)
