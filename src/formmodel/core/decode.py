"""
Decode a FormData submission against a form model.

decode_form_model(model) returns a decoder that:
1. converts the submission into a Record (formmodel.core.record.to_record),
2. validates it against the struct composed from the model's fields,
3. returns the decoded dict on success,
4. on failure, flattens the validator's issue tree into
   {dotted path: FormIssue(actual, message)} and raises FormModelParseError.

Notes:
    - This is the only place validator failures (ParseIssueError) are translated; callers
      never see a raw issue tree.
    - The struct factory and array formatter are injectable for testing or for another
      validator backend.
    - decode_form_model_async additionally awaits AsyncRefine checks.

Examples:
    >>> from formmodel.core.annotations import IntFromString
    >>> from formmodel.core.fields import FieldDescriptor, ModelDescriptor
    >>> from formmodel.core.record import from_record
    >>> decode = decode_form_model(ModelDescriptor({"age": FieldDescriptor(IntFromString)}))
    >>> decode(from_record({"age": "18"}))
    {'age': 18}
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from starlette.datastructures import FormData

from .constants import PATH_SEPARATOR
from .errors import FormModelParseError, ParseIssueError
from .fields import ModelDescriptor
from .formatter import FormModelFormatter
from .protocols import IssueFormatter, StructFactory
from .record import RecordSchema, schema_record
from .struct import Struct

if TYPE_CHECKING:  # pragma: no cover
    from formmodel.config import FormSettings

__all__ = [
    "decode_form_model",
    "decode_form_model_async",
]

logger = logging.getLogger(__name__)

Decoder = Callable[[FormData], dict[str, Any]]
AsyncDecoder = Callable[[FormData], Awaitable[dict[str, Any]]]


def _prepare(
    model: ModelDescriptor,
    settings: FormSettings | None,
    struct: StructFactory | None,
    formatter: IssueFormatter | None,
) -> tuple[RecordSchema[dict[str, Any]], FormModelFormatter]:
    factory: StructFactory = struct or Struct
    schema = schema_record(factory(model.fields, settings=settings, name=model.name))
    separator = settings.path_separator if settings else PATH_SEPARATOR
    return schema, FormModelFormatter(formatter, separator=separator)


def _fail(
    model: ModelDescriptor, form_formatter: FormModelFormatter, exc: ParseIssueError
) -> FormModelParseError:
    errors = form_formatter.format_error(exc)
    logger.info("form model %s failed validation at %d path(s)", model.name, len(errors))
    return FormModelParseError(errors)


def decode_form_model(
    model: ModelDescriptor,
    *,
    settings: FormSettings | None = None,
    struct: StructFactory | None = None,
    formatter: IssueFormatter | None = None,
) -> Decoder:
    """
    Build a synchronous decoder for a form model.

    Args:
        model (ModelDescriptor): Fields of the form.
        settings (FormSettings | None): Path separator, excess field and error reporting options.
        struct (StructFactory | None): Struct composition; defaults to the pydantic Struct.
        formatter (IssueFormatter | None): Issue-to-list formatter; defaults to ArrayFormatter.

    Returns:
        Decoder: ``decode(form_data) -> dict`` raising FormModelParseError on failure.

    Raises:
        FormCompositionError: When the struct cannot be composed from the model's fields.
    """
    schema, form_formatter = _prepare(model, settings, struct, formatter)

    def decode(form_data: FormData) -> dict[str, Any]:
        try:
            value = schema.decode(form_data)
        except ParseIssueError as exc:
            raise _fail(model, form_formatter, exc) from None
        logger.debug("decoded form model %s", model.name)
        return value

    return decode


def decode_form_model_async(
    model: ModelDescriptor,
    *,
    settings: FormSettings | None = None,
    struct: StructFactory | None = None,
    formatter: IssueFormatter | None = None,
) -> AsyncDecoder:
    """
    Build an asynchronous decoder for a form model.

    Same as decode_form_model, but the returned coroutine function also awaits the
    AsyncRefine checks declared on the model's fields.
    """
    schema, form_formatter = _prepare(model, settings, struct, formatter)

    async def decode(form_data: FormData) -> dict[str, Any]:
        try:
            value = await schema.decode_async(form_data)
        except ParseIssueError as exc:
            raise _fail(model, form_formatter, exc) from None
        logger.debug("decoded form model %s", model.name)
        return value

    return decode
