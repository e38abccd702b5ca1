"""
Example web application package.

This package hosts a FastAPI app that decodes a name form with formmodel, decoupled
from the formmodel.* library modules. Page models and HTML rendering live under
app.ui; routes live in app.server.

CLI entrypoint (configured in pyproject.toml):
    formmodel-example = app.main:main
"""
