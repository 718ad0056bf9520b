"""Unit tests for the slug and path simplification helpers."""

from __future__ import annotations

import re

import pytest

from dirsite.paths import prettify, simplify, slug_path, slug_segment, slugify

SAMPLES = [
    "",
    "Hello World",
    "a -_ b",
    "Getting__Started--Guide",
    "  padded  ",
    "Café Menu",
    "Tabs\tand\nnewlines",
    "already-a-slug",
    "Version 2.0!",
]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("Hello World", "hello-world"),
        ("a -_ b", "a-b"),
        ("Getting__Started--Guide", "getting-started-guide"),
        ("Café Menu", "caf-menu"),
        ("Tabs\tand\nnewlines", "tabs-and-newlines"),
        ("", ""),
    ],
)
def test_slugify_examples(value: str, expected: str) -> None:
    """Slugs are lowercase with separator runs collapsed to one hyphen."""
    assert slugify(value) == expected


@pytest.mark.parametrize("value", SAMPLES)
def test_slugify_is_idempotent(value: str) -> None:
    """Slugging a slug leaves it unchanged."""
    once = slugify(value)
    assert slugify(once) == once


@pytest.mark.parametrize("value", SAMPLES)
def test_slugify_output_has_no_uppercase_or_separator_runs(value: str) -> None:
    """Slugs never contain uppercase letters, whitespace, or underscores."""
    slug = slugify(value)
    assert slug == slug.lower()
    assert not re.search(r"[\s_]", slug)
    assert "--" not in slug


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("./img/logo (1).png", "img/logo__1_.png"),
        ("./././x", "././x"),
        ("docs/read me.txt", "docs/read_me.txt"),
        ("keep/~tilde_and-dash.v2", "keep/~tilde_and-dash.v2"),
    ],
)
def test_simplify_examples(value: str, expected: str) -> None:
    """Only one leading ``./`` is stripped and unsafe characters become ``_``."""
    assert simplify(value) == expected


@pytest.mark.parametrize("value", ["img/logo (1).png", "ünïcode/ßtuff", "a b/c"])
def test_simplify_is_idempotent(value: str) -> None:
    """Simplifying twice gives the same path as simplifying once."""
    once = simplify(value)
    assert simplify(once) == once


def test_slug_path_slugs_each_segment() -> None:
    """Separators survive because each segment is slugged on its own."""
    assert slug_path("My Docs/Sub_Dir/Page One") == "my-docs/sub-dir/page-one"


@pytest.mark.parametrize(
    ("segment", "expected"),
    [("日本", "__"), ("日.", "_."), ("日..", "_.."), ("Notes", "notes")],
)
def test_slug_segment_is_never_empty_or_relative(segment: str, expected: str) -> None:
    """Names that slug to nothing or to a dot marker keep a simplified name."""
    assert slug_segment(segment) == expected


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("日本/docs", "__/docs"),
        ("a/日本/b", "a/__/b"),
        ("docs/日本", "docs/__"),
    ],
)
def test_slug_path_keeps_unsluggable_segments(path: str, expected: str) -> None:
    """No segment collapses, so the result stays relative and keeps its depth."""
    result = slug_path(path)
    assert result == expected
    assert not result.startswith("/")
    assert result.count("/") == path.count("/")


@pytest.mark.parametrize("root", ["", "."])
def test_slug_path_maps_root_to_empty(root: str) -> None:
    """Both spellings of the root directory map to the empty path."""
    assert slug_path(root) == ""


def test_prettify_titles_words() -> None:
    """Hyphens become spaces and each word is capitalised."""
    assert prettify("getting-started") == "Getting Started"
    assert prettify("docs") == "Docs"
