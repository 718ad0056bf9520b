"""Unit tests for the template renderer and its body converters."""

from __future__ import annotations

import dataclasses as dc
import subprocess
import typing as typ
from pathlib import PurePosixPath

import pytest
from bs4 import BeautifulSoup

from dirsite.errors import DependencyMissingError, RenderError
from dirsite.generator.context import PageContextAssembler
from dirsite.generator.renderer import (
    MarkdownConverter,
    PandocConverter,
    TemplateRenderer,
    build_renderer,
)
from dirsite.navigation import NavTreeBuilder

if typ.TYPE_CHECKING:
    from pathlib import Path

    from dirsite.generator.models import PageContext
    from tests.conftest import ContextFactory, TreeWriter


@pytest.fixture
def docs_page(write_tree: TreeWriter, make_context: ContextFactory) -> PageContext:
    """Return the page context for ``/docs`` in a two-node tree."""
    root = write_tree({"index.md": "home\n"})
    tree = NavTreeBuilder().build(["", "docs"])
    return PageContextAssembler(make_context(root), tree).assemble(
        PurePosixPath("docs")
    )


def test_markdown_converter_highlights_fenced_code() -> None:
    """Fenced code blocks render as Pygments ``codehilite`` blocks."""
    html = MarkdownConverter().convert("```python\nprint('hi')\n```\n")
    soup = BeautifulSoup(html, "html.parser")
    assert soup.select_one(".codehilite") is not None


def test_markdown_converter_strips_fence_attributes() -> None:
    """Comma-separated fence labels are reduced to the language name."""
    html = MarkdownConverter().convert("```rust,no_run\nfn main() {}\n```\n")
    assert "no_run" not in html


def test_markdown_converter_exposes_stylesheet() -> None:
    """The Pygments stylesheet targets the codehilite class."""
    assert ".codehilite" in MarkdownConverter("friendly").stylesheet


def test_empty_body_renders_empty() -> None:
    """Whitespace-only bodies produce no HTML."""
    assert MarkdownConverter().convert("  \n") == ""


def test_template_receives_page_metadata(
    tmp_path: Path, docs_page: PageContext
) -> None:
    """Templates see the title, body, front matter, and page-local nav."""
    theme = tmp_path / "theme"
    theme.mkdir()
    (theme / "template.html").write_text(
        "<title>{{ page_name }}</title>"
        "<main>{{ body | safe }}</main>"
        "<p class='author'>{{ front_matter.author }}</p>"
        "{% for node in nav.contents %}"
        "<li{% if node.active %} class='is-active'{% endif %}>{{ node.name }}</li>"
        "{% endfor %}",
        encoding="utf-8",
    )
    source = tmp_path / "index.md"
    source.write_text("---\nauthor: Ada\n---\n# Hello\n", encoding="utf-8")

    html = TemplateRenderer(theme, MarkdownConverter()).render(source, docs_page)
    soup = BeautifulSoup(html, "html.parser")
    assert soup.title is not None
    assert soup.title.get_text() == "Docs"
    assert soup.select_one("main h1") is not None
    assert soup.select_one(".author").get_text() == "Ada"
    assert [li.get_text() for li in soup.select("li.is-active")] == ["Docs"]


def test_template_errors_become_render_errors(
    tmp_path: Path, docs_page: PageContext
) -> None:
    """A broken template aborts with RenderError naming the source."""
    theme = tmp_path / "theme"
    theme.mkdir()
    (theme / "template.html").write_text("{% for %}", encoding="utf-8")
    source = tmp_path / "index.md"
    source.write_text("body\n", encoding="utf-8")
    with pytest.raises(RenderError, match="index.md"):
        TemplateRenderer(theme, MarkdownConverter()).render(source, docs_page)


def test_missing_source_becomes_render_error(
    tmp_path: Path, docs_page: PageContext
) -> None:
    """An unreadable source file is a render failure, not a crash."""
    theme = tmp_path / "theme"
    theme.mkdir()
    (theme / "template.html").write_text("{{ body }}", encoding="utf-8")
    with pytest.raises(RenderError):
        TemplateRenderer(theme, MarkdownConverter()).render(
            tmp_path / "missing.md", docs_page
        )


def test_pandoc_renderer_requires_executable(
    write_tree: TreeWriter, make_context: ContextFactory, mocker: typ.Any
) -> None:
    """Selecting pandoc without it installed is a missing dependency."""
    root = write_tree({"index.md": "home\n"})
    context = dc.replace(make_context(root), renderer="pandoc")
    mocker.patch("dirsite.generator.renderer.shutil.which", return_value=None)
    with pytest.raises(DependencyMissingError, match="pandoc"):
        build_renderer(context)


def test_pandoc_converter_pipes_body_through_pandoc(mocker: typ.Any) -> None:
    """The pandoc backend returns pandoc's stdout."""
    run = mocker.patch(
        "dirsite.generator.renderer.subprocess.run",
        return_value=subprocess.CompletedProcess([], 0, stdout="<p>hi</p>\n"),
    )
    assert PandocConverter("/usr/bin/pandoc").convert("hi") == "<p>hi</p>\n"
    args = run.call_args.args[0]
    assert args[0] == "/usr/bin/pandoc"
    assert run.call_args.kwargs["input"] == "hi"


def test_pandoc_failure_becomes_render_error(
    tmp_path: Path, docs_page: PageContext, mocker: typ.Any
) -> None:
    """A non-zero pandoc exit aborts rendering of the page."""
    mocker.patch(
        "dirsite.generator.renderer.subprocess.run",
        side_effect=subprocess.CalledProcessError(64, ["pandoc"]),
    )
    theme = tmp_path / "theme"
    theme.mkdir()
    (theme / "template.html").write_text("{{ body }}", encoding="utf-8")
    source = tmp_path / "index.md"
    source.write_text("body\n", encoding="utf-8")
    with pytest.raises(RenderError):
        TemplateRenderer(theme, PandocConverter("pandoc")).render(source, docs_page)
