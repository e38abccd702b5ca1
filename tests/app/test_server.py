from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.server import app, create_app
from app.ui.page import FormPage, SuccessPage, name_field, render_page
from formmodel import FormSettings


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_get_renders_empty_form(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert 'name="name"' in resp.text
    assert 'class="text-error"></div>' in resp.text


def test_post_valid_name_renders_greeting(client: TestClient) -> None:
    resp = client.post("/", data={"name": "Ada Lovelace"})
    assert resp.status_code == 200
    assert "Hello there, Ada Lovelace" in resp.text
    assert "<form" not in resp.text


def test_post_short_name_rerenders_with_value_and_error(client: TestClient) -> None:
    resp = client.post("/", data={"name": "John"})
    assert resp.status_code == 200
    assert 'value="John"' in resp.text
    assert "Name must be at least 10 characters long" in resp.text
    assert "input-error" in resp.text


def test_post_without_name_reports_required(client: TestClient) -> None:
    resp = client.post("/", data={})
    assert resp.status_code == 200
    assert "Name is required" in resp.text


def test_render_page_escapes_values() -> None:
    page = render_page(FormPage(name=name_field(default_value='<b>"x"</b>', error="<oops>")))
    assert "&lt;b&gt;&quot;x&quot;&lt;/b&gt;" in page
    assert "&lt;oops&gt;" in page
    assert "<b>" not in page

    greeting = render_page(SuccessPage(name="<script>"))
    assert "Hello there, &lt;script&gt;" in greeting


def test_create_app_reads_settings_from_env(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FORMMODEL_EXCESS_FIELDS", "error")

    strict = TestClient(create_app())
    resp = strict.post("/", data={"name": "Ada Lovelace", "debug": "1"})

    assert resp.status_code == 200
    assert "Hello there, Ada Lovelace" not in resp.text
    assert "<form" in resp.text


def test_create_app_with_explicit_settings_ignores_excess_fields() -> None:
    lenient = TestClient(create_app(FormSettings(excess_fields="ignore")))
    resp = lenient.post("/", data={"name": "Ada Lovelace", "debug": "1"})
    assert "Hello there, Ada Lovelace" in resp.text
