"""
Pydantic-backed struct schema over a Record, and translation of pydantic errors into
the validation issue tree.

Responsibilities
- Compose field schemas into one pydantic model (create_model), keyed by submitted name.
- Decode a Record into a dict of decoded field values, sync or async.
- Translate pydantic.ValidationError into formmodel.core.issues so no pydantic-specific
  failure shape leaves this module.
- Encode decoded values back into a Record of JSON-compatible scalars (files unchanged).

Issue tree shape
- Root: Composite(actual=record) with one Pointer(field, actual=record) per failing field.
- Several errors on one field are grouped under a Composite(actual=field value).
- List item errors get a nested Pointer(index, actual=list).
- Error kinds map to nodes:
    missing          -> Missing
    extra_forbidden  -> Unexpected
    *_parsing        -> Transformation(TypeIssue)
    refinement and constraint errors -> Refinement(TypeIssue), wrapped in a
        Transformation(actual=submitted value) when the field is parsed FromString
    anything else    -> TypeIssue
- AsyncRefine checks become Refinement issues on the async path and Forbidden issues on
  the sync path.

Notes
- Union member names pydantic adds to error locations are dropped; only field names and
  list indices form paths.
- Refine errors carry the decoded value (`17`), while pydantic's own constraints such as
  `Field(ge=18)` only expose the submitted input (`"17"`); that input is what the
  Refinement node and the resulting FormIssue.actual report for them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ConfigDict, Field, ValidationError, create_model
from pydantic_core import ErrorDetails, PydanticSerializationError, to_jsonable_python

from .annotations import REFINEMENT_ERROR
from .constants import DEFAULT_ERRORS, DEFAULT_EXCESS_FIELDS, DEFAULT_MODEL_NAME
from .errors import ParseIssueError
from .fields import FieldDescriptor
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
from .typing import PathSegment, Record, is_file

if TYPE_CHECKING:  # pragma: no cover
    from formmodel.config import FormSettings

__all__ = [
    "Struct",
    "CONSTRAINT_ERRORS",
]

logger = logging.getLogger(__name__)

# pydantic error types reported as Refinement nodes.
CONSTRAINT_ERRORS: frozenset[str] = frozenset(
    {
        REFINEMENT_ERROR,
        "greater_than",
        "greater_than_equal",
        "less_than",
        "less_than_equal",
        "multiple_of",
        "finite_number",
        "string_too_short",
        "string_too_long",
        "string_pattern_mismatch",
        "too_short",
        "too_long",
        "date_past",
        "date_future",
        "value_error",
        "assertion_error",
    }
)


def _is_parsing_error(kind: str) -> bool:
    return kind.endswith("_parsing") or kind.endswith("_parsing_size")


def _index(container: Any, segment: PathSegment) -> Any:
    if isinstance(container, (list, tuple)) and isinstance(segment, int):
        return container[segment] if -len(container) <= segment < len(container) else None
    return None


def _encode_scalar(value: Any) -> Any:
    if value is None or is_file(value):
        return value
    return to_jsonable_python(value)


class Struct:
    """
    Struct schema composed from named form fields.

    Args:
        fields (Mapping[str, FieldDescriptor | Any]): Submitted key -> FieldDescriptor, or a
            bare annotation (wrapped in a required FieldDescriptor).
        settings (FormSettings | None): excess_fields and errors options; defaults if None.
        name (str): Name of the composed pydantic model.

    Raises:
        FormCompositionError: If a bare annotation is not form-coercible.

    Notes:
        Use Refine filters (greater_than_or_equal_to, ...) rather than pydantic's Field(ge=...)
        when the error should show the decoded value: Field constraints report the
        submitted string as actual.

    Examples:
        >>> from formmodel.core.annotations import IntFromString
        >>> Struct({"age": IntFromString}).decode({"age": "20"})
        {'age': 20}
    """

    def __init__(
        self,
        fields: Mapping[str, FieldDescriptor | Any],
        *,
        settings: FormSettings | None = None,
        name: str = DEFAULT_MODEL_NAME,
    ) -> None:
        self.fields: dict[str, FieldDescriptor] = {
            key: f if isinstance(f, FieldDescriptor) else FieldDescriptor(f)
            for key, f in fields.items()
        }
        self.name = name
        self.excess_fields = settings.excess_fields if settings else DEFAULT_EXCESS_FIELDS
        self.errors = settings.errors if settings else DEFAULT_ERRORS
        # Submitted keys need not be identifiers; attributes are positional, keys are aliases.
        self._attrs = {key: f"field_{i}" for i, key in enumerate(self.fields)}
        definitions: dict[str, Any] = {
            self._attrs[key]: (field.schema, Field(field.default, alias=key))
            for key, field in self.fields.items()
        }
        self._model = create_model(
            name,
            __config__=ConfigDict(
                extra="forbid" if self.excess_fields == "error" else "ignore",
                arbitrary_types_allowed=True,
            ),
            **definitions,
        )

    # ------------------------------------------------------------------------
    # Decode / encode
    # ------------------------------------------------------------------------

    def decode(self, record: Record) -> dict[str, Any]:
        """
        Validate a record synchronously.

        Raises:
            ParseIssueError: On validation failure, or Forbidden issues for fields that
                carry AsyncRefine checks.
        """
        value = self._validate(record)
        forbidden: list[ParseIssue] = [
            Pointer(key, record, Forbidden(actual=record.get(key)))
            for key, field in self.fields.items()
            if field.async_checks
        ]
        if forbidden:
            raise ParseIssueError(self._root(forbidden, record))
        return value

    async def decode_async(self, record: Record) -> dict[str, Any]:
        """
        Validate a record, then await AsyncRefine checks in field order.

        Only the first failing check of a field is reported.

        Raises:
            ParseIssueError: On validation or async check failure.
        """
        value = self._validate(record)
        issues: list[ParseIssue] = []
        for key, field in self.fields.items():
            decoded = value[key]
            for check in field.async_checks:
                if await check.predicate(decoded):
                    continue
                message = check.render(decoded)
                node: ParseIssue = Refinement(TypeIssue(decoded, message), decoded, message=message)
                if field.transformed:
                    node = Transformation(node, record.get(key))
                issues.append(Pointer(key, record, node))
                break
            if issues and self.errors == "first":
                break
        if issues:
            raise ParseIssueError(self._root(issues, record))
        return value

    def encode(self, value: Mapping[str, Any]) -> Record:
        """
        Encode decoded field values into a Record of JSON-compatible scalars.

        Keys absent from `value` are omitted; files and None are passed through.

        Raises:
            ParseIssueError: If a value cannot be serialized.
        """
        out: dict[str, Any] = {}
        for key in self.fields:
            if key not in value:
                continue
            item = value[key]
            try:
                if isinstance(item, (list, tuple)):
                    out[key] = [_encode_scalar(v) for v in item]
                else:
                    out[key] = _encode_scalar(item)
            except PydanticSerializationError as exc:
                raise ParseIssueError(
                    Pointer(key, value, TypeIssue(actual=item, message=str(exc)))
                ) from None
        return out

    # ------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------

    def _validate(self, record: Record) -> dict[str, Any]:
        try:
            instance = self._model.model_validate(record)
        except ValidationError as exc:
            logger.debug("struct %s: translating %d pydantic errors", self.name, exc.error_count())
            raise ParseIssueError(self._issue_from_error(exc, record)) from None
        return {key: getattr(instance, attr) for key, attr in self._attrs.items()}

    def _root(self, issues: list[ParseIssue], record: Record) -> ParseIssue:
        return Composite(issues, actual=record)

    def _issue_from_error(self, exc: ValidationError, record: Record) -> ParseIssue:
        errors = exc.errors()
        if self.errors == "first":
            errors = errors[:1]

        root_issues: list[ParseIssue] = []
        grouped: dict[str, list[ErrorDetails]] = {}
        for err in errors:
            loc = err["loc"]
            if not loc:
                root_issues.append(self._leaf(err, None))
                continue
            grouped.setdefault(str(loc[0]), []).append(err)

        for key, errs in grouped.items():
            field_value = record.get(key)
            nodes = [self._issue_at(err, field_value, self.fields.get(key)) for err in errs]
            child = nodes[0] if len(nodes) == 1 else Composite(nodes, actual=field_value)
            root_issues.append(Pointer(key, record, child))

        return self._root(root_issues, record)

    def _issue_at(
        self, err: ErrorDetails, field_value: Any, field: FieldDescriptor | None
    ) -> ParseIssue:
        rest = [seg for seg in err["loc"][1:] if isinstance(seg, int)]
        containers: list[Any] = []
        current = field_value
        for seg in rest:
            containers.append(current)
            current = _index(current, seg)
        node = self._leaf(err, field)
        for seg, container in reversed(list(zip(rest, containers))):
            node = Pointer(seg, container, node)
        return node

    def _leaf(self, err: ErrorDetails, field: FieldDescriptor | None) -> ParseIssue:
        kind = err["type"]
        actual = err.get("input")
        message = err["msg"]
        if kind == "missing":
            return Missing(actual=None, message=(field.missing_message if field else None) or message)
        if kind == "extra_forbidden":
            return Unexpected(actual=actual, message=message)
        if kind in CONSTRAINT_ERRORS:
            decoded = actual
            if kind == REFINEMENT_ERROR:
                decoded = (err.get("ctx") or {}).get("actual", actual)
            node: ParseIssue = Refinement(
                TypeIssue(decoded, message),
                decoded,
                message=message if kind == REFINEMENT_ERROR else None,
            )
            if field is not None and field.transformed:
                node = Transformation(node, actual)
            return node
        if _is_parsing_error(kind):
            return Transformation(TypeIssue(actual, message), actual, kind="Transformation")
        return TypeIssue(actual, message, expected=kind)
