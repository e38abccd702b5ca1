"""
Field and model descriptors for submittable forms.

Responsibilities
- FieldDescriptor wraps one schema node (a pydantic-compatible type annotation) and marks
  it as form-eligible. Construction fails fast with FormCompositionError when the node's
  submitted shape is not a string, an uploaded file, or a list of either.
- ModelDescriptor groups named FieldDescriptors into the shape of one form and exposes
  the name -> schema mapping used to compose a struct.

Capability rules
- Accepted: str (and str subclasses such as StrEnum), Literal of strings, UploadFile,
  any node marked FromString (IntFromString, DateFromString, ...), Optional/Union arms
  that are all accepted, and list / tuple[X, ...] / Sequence of an accepted scalar.
- Rejected: int, float, bool, dict, pydantic models and other classes, nested lists,
  and lists of rejected scalars.
- AsyncRefine is only read from the top-level Annotated metadata; one nested inside
  Optional, a union arm, or list items is rejected rather than silently skipped.

Examples:
    >>> from formmodel.core.annotations import IntFromString
    >>> FieldDescriptor(IntFromString).transformed
    True
    >>> FieldDescriptor(int)
    Traceback (most recent call last):
    ...
    formmodel.core.errors.FormCompositionError: schema <class 'int'> is not form-coercible: expected str, UploadFile, a FromString node, or a list of those
"""

from __future__ import annotations

import collections.abc
import types
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from starlette.datastructures import UploadFile

from .annotations import AsyncRefine, FromString
from .constants import DEFAULT_MODEL_NAME
from .errors import FormCompositionError

__all__ = [
    "FieldDescriptor",
    "ModelDescriptor",
    "is_form_coercible",
]

_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence)
_UNION_ORIGINS = (Union, types.UnionType)
_NONE = type(None)


def _split_annotated(tp: Any) -> tuple[Any, tuple[Any, ...]]:
    if get_origin(tp) is Annotated:
        base, *meta = get_args(tp)
        return base, tuple(meta)
    return tp, ()


def _union_arms(tp: Any) -> tuple[Any, ...] | None:
    if get_origin(tp) in _UNION_ORIGINS:
        return get_args(tp)
    return None


def _is_coercible_scalar(tp: Any) -> bool:
    base, meta = _split_annotated(tp)
    if any(isinstance(m, FromString) for m in meta):
        return True
    arms = _union_arms(base)
    if arms is not None:
        present = [arm for arm in arms if arm is not _NONE]
        return bool(present) and all(_is_coercible_scalar(arm) for arm in present)
    if get_origin(base) is Literal:
        return all(isinstance(arg, str) for arg in get_args(base))
    if get_origin(base) is None and isinstance(base, type):
        return issubclass(base, (str, UploadFile))
    return False


def _sequence_item(tp: Any) -> Any | None:
    origin = get_origin(tp)
    if origin not in _SEQUENCE_ORIGINS:
        return None
    args = get_args(tp)
    if origin is tuple:
        # Only homogeneous tuple[X, ...] maps onto repeated entries.
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return None
    return args[0] if args else None


def is_form_coercible(tp: Any) -> bool:
    """
    Return True if a schema node can be represented as one record entry.

    Args:
        tp (Any): Type annotation, possibly Annotated, Optional, or a list type.

    Returns:
        bool: True for string / file / FromString nodes and lists of them.
    """
    if _is_coercible_scalar(tp):
        return True
    base, _ = _split_annotated(tp)
    arms = _union_arms(base)
    if arms is not None:
        present = [arm for arm in arms if arm is not _NONE]
        return bool(present) and all(is_form_coercible(arm) for arm in present)
    item = _sequence_item(base)
    return item is not None and _is_coercible_scalar(item)


def _is_transformed(tp: Any) -> bool:
    base, meta = _split_annotated(tp)
    if any(isinstance(m, FromString) for m in meta):
        return not (isinstance(base, type) and issubclass(base, str))
    return any(_is_transformed(arg) for arg in get_args(base) if arg is not Ellipsis)


def _nested_async_checks(tp: Any) -> bool:
    """True if an AsyncRefine sits anywhere below the top-level Annotated metadata."""
    base, _ = _split_annotated(tp)
    for arg in get_args(base):
        if arg is Ellipsis:
            continue
        inner, meta = _split_annotated(arg)
        if any(isinstance(m, AsyncRefine) for m in meta) or _nested_async_checks(inner):
            return True
    return False


@dataclass(frozen=True)
class FieldDescriptor:
    """
    One form field: a form-coercible schema node plus field-level options.

    Attributes:
        schema (Any): Pydantic-compatible annotation, e.g. ``Annotated[str, min_length(3)]``.
        default (Any): Value used when the key is absent; ``...`` (the default) means required.
        missing_message (str | None): Message reported when a required key is absent.

    Raises:
        FormCompositionError: If the schema node is not form-coercible, or an AsyncRefine
            is nested below its top-level metadata.
    """

    schema: Any
    default: Any = ...
    missing_message: str | None = None

    def __post_init__(self) -> None:
        if not is_form_coercible(self.schema):
            raise FormCompositionError(
                f"schema {self.schema!r} is not form-coercible: expected str, UploadFile, "
                "a FromString node, or a list of those"
            )
        if _nested_async_checks(self.schema):
            raise FormCompositionError(
                f"schema {self.schema!r} nests an AsyncRefine: place it in the field's "
                "top-level Annotated metadata"
            )

    @property
    def required(self) -> bool:
        return self.default is ...

    @property
    def transformed(self) -> bool:
        """True if the decoded value is parsed from a submitted string into another type."""
        return _is_transformed(self.schema)

    @property
    def async_checks(self) -> tuple[AsyncRefine, ...]:
        _, meta = _split_annotated(self.schema)
        return tuple(m for m in meta if isinstance(m, AsyncRefine))


@dataclass(frozen=True, eq=False)
class ModelDescriptor:
    """
    The shape of one submittable form.

    Attributes:
        fields (Mapping[str, FieldDescriptor]): Submitted key -> field descriptor.
        name (str): Model name, used for the composed struct and in logs.

    Raises:
        FormCompositionError: If any field is not a FieldDescriptor.

    Examples:
        >>> from formmodel.core.annotations import NonEmptyString
        >>> form = ModelDescriptor({"name": FieldDescriptor(NonEmptyString)}, name="NameForm")
        >>> list(form.schema_fields())
        ['name']
    """

    fields: Mapping[str, FieldDescriptor]
    name: str = DEFAULT_MODEL_NAME

    def __post_init__(self) -> None:
        for key, field in self.fields.items():
            if not isinstance(field, FieldDescriptor):
                raise FormCompositionError(
                    f"field {key!r} of {self.name} must be a FieldDescriptor, got {field!r}"
                )
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def schema_fields(self) -> dict[str, Any]:
        """Return field name -> schema node, for composition into a struct."""
        return {key: field.schema for key, field in self.fields.items()}
