"""
FastAPI application serving the example name form.

Routes
- GET /  renders the empty form.
- POST / decodes the submission with formmodel; on failure the form is re-rendered with
  the submitted value and the field's error message, on success a greeting is shown.

Notes
- create_app() reads FormSettings.load() (FORMMODEL_* env, formmodel.toml, or
  [tool.formmodel] in pyproject.toml) unless settings are passed in.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from formmodel import (
    FieldDescriptor,
    FormModelParseError,
    FormSettings,
    ModelDescriptor,
    NonEmptyString,
    decode_form_model,
    min_length,
)

from .ui.page import FormPage, PageModel, SuccessPage, name_field, render_page

logger = logging.getLogger(__name__)

NameField = FieldDescriptor(
    Annotated[
        NonEmptyString,
        min_length(10, message="Name must be at least 10 characters long"),
    ],
    missing_message="Name is required",
)

MyForm = ModelDescriptor({"name": NameField}, name="MyForm")


def create_app(settings: FormSettings | None = None) -> FastAPI:
    """
    Build the example app.

    Args:
        settings (FormSettings | None): Decoding settings; FormSettings.load() if None.

    Returns:
        FastAPI: App with the GET / and POST / form routes.
    """
    settings = settings or FormSettings.load()
    logger.debug("example app using %s", settings)
    decode_my_form = decode_form_model(MyForm, settings=settings)

    app = FastAPI(title="formmodel example")

    @app.get("/", response_class=HTMLResponse)
    async def show_form() -> str:
        return render_page(FormPage(name=name_field()))

    @app.post("/", response_class=HTMLResponse)
    async def submit_form(request: Request) -> str:
        form_data = await request.form()
        page: PageModel
        try:
            data = decode_my_form(form_data)
            page = SuccessPage(name=data["name"])
        except FormModelParseError as exc:
            issue = exc.errors.get("name")
            actual = issue.actual if issue is not None else None
            page = FormPage(
                name=name_field(
                    default_value=actual if isinstance(actual, str) else None,
                    error=issue.message if issue is not None else None,
                )
            )
            logger.debug("re-rendering form with errors at %s", sorted(exc.errors))
        return render_page(page)

    return app


app = create_app()
