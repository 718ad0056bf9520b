r"""Pure string transforms that turn source paths into web-safe output paths.

Two normalisations live here. :func:`slugify` produces human-readable,
lowercase slugs for a single path segment (directory or content file stem).
:func:`simplify` keeps a path filesystem-safe by whitelisting characters
without otherwise rewriting it, which suits assets whose names must survive.
:func:`slug_path` combines both for multi-segment routing, and
:func:`prettify` reverses a slug into a display label.

Examples
--------
>>> from dirsite.paths import prettify, simplify, slug_path, slugify
>>> slugify("Getting  Started_Guide")
'getting-started-guide'
>>> simplify("./img/logo (1).png")
'img/logo__1_.png'
>>> slug_path("My Docs/Part One")
'my-docs/part-one'
>>> prettify("getting-started")
'Getting Started'
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

NON_GRAPHIC_PATTERN = re.compile(r"[^\x21-\x7e\s]")
SEPARATOR_RUN_PATTERN = re.compile(r"[\s_-]+")
UNSAFE_PATH_PATTERN = re.compile(r"[^A-Za-z0-9/_.~-]")


def slugify(value: str) -> str:
    """Return the lowercase, hyphen-separated slug for one path segment.

    Characters outside the printable graphic set (and whitespace) are dropped,
    letters are lowercased, and every run of whitespace, hyphens, or
    underscores collapses into a single hyphen. Never apply this to a whole
    multi-segment path: use :func:`slug_path` so separators survive.
    """
    graphic = NON_GRAPHIC_PATTERN.sub("", value)
    return SEPARATOR_RUN_PATTERN.sub("-", graphic.lower())


def simplify(path: str) -> str:
    """Return ``path`` with one leading ``./`` removed and unsafe characters replaced."""
    if path.startswith("./"):
        path = path[2:]
    return UNSAFE_PATH_PATTERN.sub("_", path)


def slug_segment(segment: str) -> str:
    """Return the slug for one path segment, never empty and never ``.``/``..``.

    Names that slug to nothing (``日本``) or to a relative marker fall back to
    the simplified name so each segment keeps its own output directory.

    >>> slug_segment("日本")
    '__'
    """
    slug = slugify(segment)
    if slug in ("", ".", ".."):
        return simplify(segment)
    return slug


def slug_path(path: str | PurePosixPath) -> str:
    """Slug each segment of a relative path independently and simplify the result.

    The empty path and ``"."`` both denote the root and map to ``""``.
    """
    parts = [part for part in PurePosixPath(path).parts if part not in ("", ".")]
    return simplify("/".join(slug_segment(part) for part in parts))


def prettify(slug: str) -> str:
    """Turn a slug back into a display label (hyphens to spaces, words titled)."""
    return slug.replace("-", " ").strip().title()


__all__ = ["prettify", "simplify", "slug_path", "slug_segment", "slugify"]
