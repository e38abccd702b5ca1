"""
UI shell for the example app: page models and HTML rendering.
"""

from __future__ import annotations

from .page import FieldView, FormPage, PageModel, SuccessPage, name_field, render_page

__all__ = [
    "FieldView",
    "FormPage",
    "PageModel",
    "SuccessPage",
    "name_field",
    "render_page",
]
