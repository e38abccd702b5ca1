"""
Configuration for form decoding.

Defines FormSettings, a frozen dataclass carrying the options that shape how a decoded
form reports its failures. Defaults come from formmodel.core.constants.

Loading precedence
- environment (FORMMODEL_*) > TOML (formmodel.toml or [tool.formmodel] in pyproject.toml)
  > defaults.
- Unrecognized or invalid values are ignored and the previous layer is kept.

Notes
- path_separator joins issue path segments into mapping keys ("pets.1").
- excess_fields="error" reports submitted keys the model does not declare as
  Unexpected issues; "ignore" drops them silently.
- errors="first" keeps only the first failing path, "all" reports every failing path.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from formmodel.core.constants import DEFAULT_ERRORS, DEFAULT_EXCESS_FIELDS, PATH_SEPARATOR

logger = logging.getLogger(__name__)

ExcessFields = Literal["ignore", "error"]
ErrorsMode = Literal["all", "first"]


@dataclass(frozen=True)
class FormSettings:
    """
    Runtime settings for form decoding.

    Attributes:
        path_separator (str): Joins path segments into error mapping keys.
        excess_fields (Literal["ignore","error"]): How undeclared submitted keys are treated.
        errors (Literal["all","first"]): Report every failing path or only the first.

    Examples:
        >>> from formmodel.config import FormSettings
        >>> FormSettings(excess_fields="error")  # doctest: +ELLIPSIS
        FormSettings(...)
    """

    path_separator: str = PATH_SEPARATOR
    excess_fields: ExcessFields = DEFAULT_EXCESS_FIELDS  # type: ignore[assignment]
    errors: ErrorsMode = DEFAULT_ERRORS  # type: ignore[assignment]

    @classmethod
    def _apply_mapping(cls, base: FormSettings, cfg: dict[str, Any] | None) -> FormSettings:
        """Apply a loose config mapping onto FormSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _choice(val: Any, allowed: set[str]) -> str | None:
            if isinstance(val, str):
                lo = val.strip().lower()
                if lo in allowed:
                    return lo
            return None

        sep = cfg.get("path_separator")
        if isinstance(sep, str) and sep:
            s = replace(s, path_separator=sep)

        excess = _choice(cfg.get("excess_fields"), {"ignore", "error"})
        if excess is not None:
            s = replace(s, excess_fields=excess)  # type: ignore[arg-type]
        elif "excess_fields" in cfg:
            logger.warning("ignoring invalid excess_fields setting %r", cfg["excess_fields"])

        errors = _choice(cfg.get("errors"), {"all", "first"})
        if errors is not None:
            s = replace(s, errors=errors)  # type: ignore[arg-type]
        elif "errors" in cfg:
            logger.warning("ignoring invalid errors setting %r", cfg["errors"])

        return s

    @classmethod
    def from_env(cls, base: FormSettings | None = None, prefix: str = "FORMMODEL_") -> FormSettings:
        """
        Build FormSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - FORMMODEL_PATH_SEPARATOR
            - FORMMODEL_EXCESS_FIELDS ("ignore" | "error")
            - FORMMODEL_ERRORS ("all" | "first")
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for name in ("path_separator", "excess_fields", "errors"):
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> FormSettings:
        """
        Build FormSettings from a TOML file.

        Search order when `path` is None:
            1) ./formmodel.toml (with either a [formmodel] table or top-level keys)
            2) ./pyproject.toml under [tool.formmodel]

        Returns defaults if no file is present or none holds settings.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "formmodel.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                logger.warning("could not read settings from %s: %s", p, exc)
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("formmodel") if isinstance(tool, dict) else None
            elif isinstance(data.get("formmodel"), dict):
                cfg = data["formmodel"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> FormSettings:
        """
        Load FormSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (formmodel.toml, pyproject.toml).

        Returns:
            FormSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
