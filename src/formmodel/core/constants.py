"""
Core defaults for path joining and fallback issue messages.

Notes:
    - PATH_SEPARATOR is the default; FormSettings.path_separator overrides it per decoder.
    - Default messages are used by ArrayFormatter when an issue node carries no message.
"""

from __future__ import annotations

__all__ = [
    "PATH_SEPARATOR",
    "DEFAULT_MODEL_NAME",
    "DEFAULT_EXCESS_FIELDS",
    "DEFAULT_ERRORS",
    "MISSING_MESSAGE",
    "UNEXPECTED_MESSAGE",
    "FORBIDDEN_MESSAGE",
]

# Joins path segments into Issue Result Mapping keys ("pets.1").
PATH_SEPARATOR: str = "."

DEFAULT_MODEL_NAME: str = "FormModel"

# Undeclared submitted keys are dropped ("ignore") or reported as Unexpected ("error").
DEFAULT_EXCESS_FIELDS: str = "ignore"

# Report every failing path ("all") or only the first ("first").
DEFAULT_ERRORS: str = "all"

MISSING_MESSAGE: str = "is missing"
UNEXPECTED_MESSAGE: str = "is unexpected"
FORBIDDEN_MESSAGE: str = "cannot be validated synchronously"
