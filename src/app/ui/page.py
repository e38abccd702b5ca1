"""
Page models and HTML rendering for the example name form.

A page is either a form (with per-field default value and error text) or a success
greeting. Handlers build the page model; render_page turns it into HTML.

Notes:
    - Every interpolated value is escaped with html.escape.
    - Field default values come from FormIssue.actual, so a rejected submission is shown
      back to the user.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Union

__all__ = [
    "FieldView",
    "FormPage",
    "SuccessPage",
    "PageModel",
    "name_field",
    "render_page",
]


@dataclass(frozen=True)
class FieldView:
    """One text input with its label, default value, and error text."""

    id: str
    label: str
    name: str
    placeholder: str
    default_value: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class FormPage:
    name: FieldView


@dataclass(frozen=True)
class SuccessPage:
    name: str


PageModel = Union[FormPage, SuccessPage]


def name_field(default_value: str | None = None, error: str | None = None) -> FieldView:
    return FieldView(
        id="my-name-field",
        label="Enter your name",
        name="name",
        placeholder="John Doe",
        default_value=default_value,
        error=error,
    )


def _render_field(field: FieldView) -> str:
    classes = "input validator input-error" if field.error else "input validator"
    value = f' value="{html.escape(field.default_value)}"' if field.default_value else ""
    return (
        '<fieldset class="fieldset">'
        f'<legend class="fieldset-legend">{html.escape(field.label)}</legend>'
        f'<input type="text" class="{classes}" required id="{html.escape(field.id)}" '
        f'name="{html.escape(field.name)}" placeholder="{html.escape(field.placeholder)}"{value}>'
        f'<div class="text-error">{html.escape(field.error or "")}</div>'
        "</fieldset>"
    )


def render_page(page: PageModel) -> str:
    """Render a page model as a complete HTML document."""
    match page:
        case SuccessPage():
            body = f'<h1 class="text-5xl font-bold">Hello there, {html.escape(page.name)}</h1>'
        case FormPage():
            body = (
                '<form class="max-w-md flex flex-col" method="post">'
                '<h1 class="text-5xl font-bold">Hello there</h1>'
                f"<div>{_render_field(page.name)}</div>"
                '<button class="btn btn-primary" type="submit">Submit</button>'
                "</form>"
            )
    return (
        "<!doctype html><html><head><title>formmodel example</title></head>"
        f'<body><div class="container mx-auto">{body}</div></body></html>'
    )
