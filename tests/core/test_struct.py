from __future__ import annotations

import asyncio
import io
from datetime import date
from typing import Annotated, Optional

import pytest
from starlette.datastructures import UploadFile

from formmodel.config import FormSettings
from formmodel.core.annotations import (
    AsyncRefine,
    DateFromString,
    File,
    IntFromString,
    greater_than_or_equal_to,
    min_length,
)
from formmodel.core.errors import ParseIssueError
from formmodel.core.fields import FieldDescriptor
from formmodel.core.issues import (
    Composite,
    Forbidden,
    Missing,
    Pointer,
    Refinement,
    Transformation,
    TypeIssue,
    Unexpected,
)
from formmodel.core.struct import Struct

Age = Annotated[IntFromString, greater_than_or_equal_to(18, message="too young")]


def _issue(struct: Struct, record: dict) -> object:
    with pytest.raises(ParseIssueError) as info:
        struct.decode(record)
    return info.value.issue


def test_decode_returns_decoded_values_keyed_by_submitted_name() -> None:
    struct = Struct({"first-name": str, "age": Age, "born": DateFromString})
    value = struct.decode({"first-name": "Ada", "age": "36", "born": "1815-12-10"})
    assert value == {"first-name": "Ada", "age": 36, "born": date(1815, 12, 10)}


def test_decode_applies_field_defaults() -> None:
    struct = Struct({"nick": FieldDescriptor(Optional[str], default=None)})
    assert struct.decode({}) == {"nick": None}


def test_decode_ignores_excess_fields_by_default() -> None:
    assert Struct({"name": str}).decode({"name": "x", "other": "y"}) == {"name": "x"}


def test_decode_passes_files_through() -> None:
    upload = UploadFile(io.BytesIO(b"data"), filename="a.txt")
    value = Struct({"file": File}).decode({"file": upload})
    assert value["file"] is upload


def test_refinement_on_parsed_field_is_wrapped_in_transformation() -> None:
    record = {"age": "17"}
    issue = _issue(Struct({"age": Age}), record)
    assert issue == Composite(
        [
            Pointer(
                "age",
                record,
                Transformation(
                    Refinement(TypeIssue(17, "too young"), 17, message="too young"),
                    "17",
                ),
            )
        ],
        actual=record,
    )


def test_refinement_on_string_field_is_not_wrapped() -> None:
    record = {"name": "John"}
    issue = _issue(Struct({"name": Annotated[str, min_length(10, message="short")]}), record)
    assert issue.children == (
        Pointer("name", record, Refinement(TypeIssue("John", "short"), "John", message="short")),
    )


def test_missing_field_uses_field_message() -> None:
    struct = Struct({"name": FieldDescriptor(str, missing_message="Name is required")})
    issue = _issue(struct, {})
    assert issue.children == (Pointer("name", {}, Missing(message="Name is required")),)


def test_parsing_failure_is_a_transformation() -> None:
    record = {"age": "abc"}
    [pointer] = _issue(Struct({"age": IntFromString}), record).children
    assert isinstance(pointer.issue, Transformation)
    assert isinstance(pointer.issue.issue, TypeIssue)
    assert pointer.issue.actual == "abc"


def test_list_item_failure_points_at_index() -> None:
    record = {"pets": ["Fido", "Al"]}
    struct = Struct({"pets": list[Annotated[str, min_length(3, message="short")]]})
    [pointer] = _issue(struct, record).children
    assert pointer == Pointer(
        "pets",
        record,
        Pointer(1, ["Fido", "Al"], Refinement(TypeIssue("Al", "short"), "Al", message="short")),
    )


def test_single_value_for_list_field_is_a_type_issue() -> None:
    [pointer] = _issue(Struct({"pets": list[str]}), {"pets": "Fido"}).children
    assert isinstance(pointer.issue, TypeIssue)
    assert pointer.issue.actual == "Fido"


def test_excess_fields_error_reports_unexpected() -> None:
    struct = Struct({"name": str}, settings=FormSettings(excess_fields="error"))
    record = {"name": "x", "other": "y"}
    [pointer] = _issue(struct, record).children
    assert pointer.segments == ("other",)
    assert isinstance(pointer.issue, Unexpected)
    assert pointer.issue.actual == "y"


def test_errors_all_reports_every_field() -> None:
    struct = Struct({"name": str, "age": Age})
    issue = _issue(struct, {"age": "1"})
    assert [p.segments for p in issue.children] == [("name",), ("age",)]


def test_errors_first_keeps_one_field() -> None:
    struct = Struct({"name": str, "age": Age}, settings=FormSettings(errors="first"))
    issue = _issue(struct, {"age": "1"})
    assert len(issue.children) == 1


def test_encode_returns_json_compatible_scalars() -> None:
    upload = UploadFile(io.BytesIO(b""), filename="a.txt")
    struct = Struct({"age": IntFromString, "born": DateFromString, "file": File})
    record = struct.encode({"age": 20, "born": date(2000, 1, 2), "file": upload})
    assert record == {"age": 20, "born": "2000-01-02", "file": upload}
    assert record["file"] is upload


def test_encode_omits_absent_keys() -> None:
    assert Struct({"a": str, "b": str}).encode({"a": "x"}) == {"a": "x"}


async def _is_free(value: str) -> bool:
    return value != "taken"


Username = Annotated[str, min_length(3), AsyncRefine(_is_free, message=lambda v: f"{v} is taken")]


def test_async_check_passes() -> None:
    struct = Struct({"user": Username})
    assert asyncio.run(struct.decode_async({"user": "free"})) == {"user": "free"}


def test_async_check_failure_is_a_refinement() -> None:
    struct = Struct({"user": Username})
    record = {"user": "taken"}
    with pytest.raises(ParseIssueError) as info:
        asyncio.run(struct.decode_async(record))
    [pointer] = info.value.issue.children
    assert pointer == Pointer(
        "user",
        record,
        Refinement(TypeIssue("taken", "taken is taken"), "taken", message="taken is taken"),
    )


def test_async_check_skipped_when_sync_validation_fails() -> None:
    calls: list[str] = []

    async def check(value: str) -> bool:
        calls.append(value)
        return True

    struct = Struct({"user": Annotated[str, min_length(3), AsyncRefine(check)]})
    with pytest.raises(ParseIssueError):
        asyncio.run(struct.decode_async({"user": "ab"}))
    assert calls == []


def test_sync_decode_of_async_field_is_forbidden() -> None:
    record = {"user": "free"}
    [pointer] = _issue(Struct({"user": Username}), record).children
    assert pointer == Pointer("user", record, Forbidden("free"))
