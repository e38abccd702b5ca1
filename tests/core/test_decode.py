from __future__ import annotations

import asyncio
import io
import logging
from typing import Annotated

import pytest
from pydantic import Field
from starlette.datastructures import FormData, UploadFile

from formmodel import (
    AsyncRefine,
    FieldDescriptor,
    File,
    FormIssue,
    FormModelParseError,
    FormSettings,
    IntFromString,
    ModelDescriptor,
    NonEmptyString,
    Struct,
    decode_form_model,
    decode_form_model_async,
    from_record,
    greater_than_or_equal_to,
    min_length,
)
from formmodel.core.formatter import ArrayFormatter

AgeForm = ModelDescriptor(
    {
        "age": FieldDescriptor(
            Annotated[
                IntFromString,
                greater_than_or_equal_to(18, message=lambda actual: f"Must be 18 or over! Got: {actual}"),
            ]
        )
    },
    name="AgeForm",
)

NameForm = ModelDescriptor(
    {
        "name": FieldDescriptor(
            Annotated[
                NonEmptyString,
                min_length(10, message="Name must be at least 10 characters long"),
            ],
            missing_message="Name is required",
        )
    },
    name="NameForm",
)


def _errors(decode, form: FormData) -> dict[str, FormIssue]:
    with pytest.raises(FormModelParseError) as info:
        decode(form)
    return info.value.errors


def test_adult_age_decodes_to_int() -> None:
    decode = decode_form_model(AgeForm)
    assert decode(from_record({"age": "18"})) == {"age": 18}


def test_underage_reports_decoded_value_and_message() -> None:
    decode = decode_form_model(AgeForm)
    errors = _errors(decode, from_record({"age": "17"}))
    assert errors == {"age": FormIssue(actual=17, message="Must be 18 or over! Got: 17")}


def test_repeated_entries_decode_to_list() -> None:
    decode = decode_form_model(ModelDescriptor({"pets": FieldDescriptor(list[str])}))
    form = FormData([("pets", "Fido"), ("pets", "Rex")])
    assert decode(form) == {"pets": ["Fido", "Rex"]}


def test_short_name_reports_submitted_value_and_message() -> None:
    decode = decode_form_model(NameForm)
    errors = _errors(decode, FormData([("name", "John")]))
    assert errors == {
        "name": FormIssue(actual="John", message="Name must be at least 10 characters long")
    }


def test_from_record_keeps_file_instance() -> None:
    upload = UploadFile(io.BytesIO(b"hello"), filename="hello.txt")
    assert from_record({"file": upload}).get("file") is upload


def test_missing_field_reports_none_actual() -> None:
    errors = _errors(decode_form_model(NameForm), FormData())
    assert errors == {"name": FormIssue(actual=None, message="Name is required")}


def test_unparseable_age_reports_submitted_string() -> None:
    errors = _errors(decode_form_model(AgeForm), from_record({"age": "abc"}))
    assert errors["age"].actual == "abc"


def test_list_item_failure_uses_dotted_index_path() -> None:
    form = ModelDescriptor(
        {"pets": FieldDescriptor(list[Annotated[str, min_length(3, message="too short")]])}
    )
    errors = _errors(decode_form_model(form), FormData([("pets", "Fido"), ("pets", "Al")]))
    assert errors == {"pets.1": FormIssue(actual="Al", message="too short")}


def test_custom_separator_from_settings() -> None:
    form = ModelDescriptor(
        {"pets": FieldDescriptor(list[Annotated[str, min_length(3, message="too short")]])}
    )
    decode = decode_form_model(form, settings=FormSettings(path_separator="/"))
    errors = _errors(decode, FormData([("pets", "Al"), ("pets", "Rex")]))
    assert list(errors) == ["pets/0"]


def test_excess_fields_error_reports_unknown_key() -> None:
    decode = decode_form_model(AgeForm, settings=FormSettings(excess_fields="error"))
    errors = _errors(decode, from_record({"age": "20", "debug": "1"}))
    assert list(errors) == ["debug"]
    assert errors["debug"].actual == "1"


def test_errors_first_reports_one_path() -> None:
    form = ModelDescriptor(
        {"name": NameForm.fields["name"], "age": AgeForm.fields["age"]}
    )
    decode = decode_form_model(form, settings=FormSettings(errors="first"))
    errors = _errors(decode, from_record({"age": "1"}))
    assert list(errors) == ["name"]


def test_non_form_data_input_is_reported_at_root() -> None:
    errors = _errors(decode_form_model(AgeForm), {"age": "18"})
    assert list(errors) == [""]
    assert errors[""].actual == {"age": "18"}


def test_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    decode = decode_form_model(AgeForm)
    with caplog.at_level(logging.INFO, logger="formmodel.core.decode"):
        with pytest.raises(FormModelParseError):
            decode(from_record({"age": "3"}))
    assert "AgeForm" in caplog.text


def test_injected_struct_factory_and_formatter() -> None:
    built: list[str] = []

    def factory(fields, *, settings=None, name="FormModel"):
        built.append(name)
        return Struct(fields, settings=settings, name=name)

    class UpperFormatter(ArrayFormatter):
        def format_issue(self, issue):
            return [
                type(entry)(entry.tag, entry.path, entry.message.upper())
                for entry in super().format_issue(issue)
            ]

    decode = decode_form_model(NameForm, struct=factory, formatter=UpperFormatter())
    errors = _errors(decode, FormData([("name", "John")]))
    assert built == ["NameForm"]
    assert errors["name"].message == "NAME MUST BE AT LEAST 10 CHARACTERS LONG"


async def _is_unclaimed(name: str) -> bool:
    await asyncio.sleep(0)
    return name != "Administrator"


HandleForm = ModelDescriptor(
    {
        "handle": FieldDescriptor(
            Annotated[NonEmptyString, AsyncRefine(_is_unclaimed, message="Handle is taken")]
        )
    },
    name="HandleForm",
)


def test_async_decoder_runs_async_checks() -> None:
    decode = decode_form_model_async(HandleForm)
    assert asyncio.run(decode(FormData([("handle", "ada")]))) == {"handle": "ada"}

    with pytest.raises(FormModelParseError) as info:
        asyncio.run(decode(FormData([("handle", "Administrator")])))
    assert info.value.errors == {
        "handle": FormIssue(actual="Administrator", message="Handle is taken")
    }


def test_async_decoder_reports_sync_failures() -> None:
    decode = decode_form_model_async(AgeForm)
    with pytest.raises(FormModelParseError) as info:
        asyncio.run(decode(from_record({"age": "17"})))
    assert info.value.errors["age"].actual == 17


def test_sync_decoder_rejects_async_checks() -> None:
    errors = _errors(decode_form_model(HandleForm), FormData([("handle", "ada")]))
    assert errors == {
        "handle": FormIssue(actual="ada", message="cannot be validated synchronously")
    }


def test_file_submitted_to_length_checked_field_is_reported() -> None:
    form = ModelDescriptor(
        {"doc": FieldDescriptor(Annotated[str | File, min_length(3, message="too short")])}
    )
    upload = UploadFile(io.BytesIO(b"%PDF"), filename="cv.pdf")
    errors = _errors(decode_form_model(form), FormData([("doc", upload)]))
    assert errors == {"doc": FormIssue(actual=upload, message="too short")}


def test_pydantic_field_constraint_reports_submitted_string() -> None:
    form = ModelDescriptor({"age": FieldDescriptor(Annotated[IntFromString, Field(ge=18)])})
    errors = _errors(decode_form_model(form), from_record({"age": "17"}))
    assert errors["age"].actual == "17"
