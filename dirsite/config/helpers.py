"""Utility helpers shared by the dirsite configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from dirsite._constants import PROJECT_THEMES_DIR, TEMPLATE_FILENAME
from dirsite.errors import ConfigurationError

T = typ.TypeVar("T")

BUNDLED_THEMES_DIR = Path(__file__).resolve().parents[1] / "themes"
RENDERERS = ("markdown", "pandoc")


def resolve_setting(cli: T | None, file: T | None, default: T | None) -> T | None:
    """Return the first specified value across the CLI, file, and default layers."""
    for value in (cli, file, default):
        if value is not None:
            return value
    return None


def require_setting(name: str, value: T | None) -> T:
    """Return ``value`` or raise when no layer specified it."""
    if value is None:
        msg = (
            f"Missing required setting '{name}': pass it on the command line "
            "or declare it in dirsite.yaml."
        )
        raise ConfigurationError(msg)
    return value


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize_extension(value: str) -> str:
    """Strip whitespace and a leading dot from a content extension."""
    extension = value.strip().lstrip(".")
    if not extension or "/" in extension:
        msg = f"Invalid input extension {value!r}."
        raise ConfigurationError(msg)
    return extension


def _normalize_base_path(value: str) -> str:
    """Return ``value`` as ``/segment/...`` without a trailing slash, or ``""``."""
    stripped = value.strip().strip("/")
    return f"/{stripped}" if stripped else ""


def _validate_renderer(value: str) -> str:
    """Return the renderer name when supported."""
    if value not in RENDERERS:
        msg = f"Unknown renderer {value!r}; expected one of {', '.join(RENDERERS)}."
        raise ConfigurationError(msg)
    return value


def _find_theme_dir(source_root: Path, theme: str) -> Path:
    """Locate ``theme`` in the project's ``.themes`` folder or the bundled themes."""
    candidates = (
        source_root / PROJECT_THEMES_DIR / theme,
        BUNDLED_THEMES_DIR / theme,
    )
    for candidate in candidates:
        if (candidate / TEMPLATE_FILENAME).is_file():
            return candidate.resolve()
    msg = f"Theme '{theme}' not found (looked for {TEMPLATE_FILENAME} in " + (
        ", ".join(str(candidate) for candidate in candidates) + ")."
    )
    raise ConfigurationError(msg)


__all__ = [
    "BUNDLED_THEMES_DIR",
    "RENDERERS",
    "_find_theme_dir",
    "_normalize_base_path",
    "_normalize_extension",
    "_optional_str",
    "_validate_renderer",
    "require_setting",
    "resolve_setting",
]
