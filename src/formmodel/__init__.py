"""
formmodel — schema-driven decoding of HTML form submissions.

## Responsibilities
- Convert a multi-valued FormData submission into a record and back.
- Declare forms as named, form-coercible fields validated by pydantic.
- Report failures as {dotted path: FormIssue(actual, message)}, ready to render next to
  each input.

## Public API
- to_record, from_record, schema_from_self, schema_record — record codec.
- FieldDescriptor, ModelDescriptor — form shape.
- decode_form_model, decode_form_model_async — decoders.
- FormModelParseError, FormCompositionError, FormIssue — failures.
- FormSettings — configuration (env/TOML).
- FromString, Refine, AsyncRefine, filters and aliases — schema helpers.

## Examples
```python
from fastapi import Request

from formmodel import FieldDescriptor, ModelDescriptor, NonEmptyString, decode_form_model

NameForm = ModelDescriptor({"name": FieldDescriptor(NonEmptyString)})
decode_name = decode_form_model(NameForm)

async def action(request: Request) -> dict:
    return decode_name(await request.form())
```
"""

from __future__ import annotations

from .core.annotations import (
    AsyncRefine,
    BooleanFromString,
    DateFromString,
    File,
    FromString,
    IntFromString,
    NonEmptyString,
    NumberFromString,
    Refine,
    between,
    greater_than,
    greater_than_or_equal_to,
    less_than,
    less_than_or_equal_to,
    max_length,
    min_length,
    non_empty,
    pattern,
)
from .core.decode import decode_form_model, decode_form_model_async
from .core.errors import FormCompositionError, FormModelError, FormModelParseError
from .core.fields import FieldDescriptor, ModelDescriptor
from .core.formatter import FormIssue
from .core.record import from_record, schema_from_self, schema_record, to_record
from .core.struct import Struct
from .config import FormSettings

__all__ = [
    # Record codec
    "to_record",
    "from_record",
    "schema_from_self",
    "schema_record",
    "Struct",
    # Descriptors
    "FieldDescriptor",
    "ModelDescriptor",
    # Decoding
    "decode_form_model",
    "decode_form_model_async",
    "FormIssue",
    "FormModelError",
    "FormModelParseError",
    "FormCompositionError",
    "FormSettings",
    # Schema helpers
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
