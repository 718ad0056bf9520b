"""Render one content file plus its page context into a themed HTML page.

The default backend converts Markdown with python-markdown and highlights
fenced code with Pygments. The ``pandoc`` backend hands the body to the
external ``pandoc`` executable instead. Either way the converted body is
wrapped by the theme's Jinja ``template.html``, which receives the page
metadata (title, page-local navigation tree, site settings).
"""

from __future__ import annotations

import re
import shutil
import subprocess
import typing as typ

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from markdown import Markdown
from pygments.formatters.html import HtmlFormatter
from ruamel.yaml.error import YAMLError

from dirsite._constants import TEMPLATE_FILENAME
from dirsite.errors import DependencyMissingError, RenderError
from dirsite.markdown_parser import parse_document

if typ.TYPE_CHECKING:
    from pathlib import Path

    from dirsite.config import BuildContext
    from dirsite.generator.models import PageContext

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)


class BodyConverter(typ.Protocol):
    """Convert a content body to an HTML fragment."""

    stylesheet: str

    def convert(self, text: str) -> str:
        """Return the HTML fragment for ``text``."""
        ...


class Renderer(typ.Protocol):
    """Turn one content file plus its page context into a full HTML page."""

    def render(self, source: Path, page: PageContext) -> str:
        """Return the rendered page; raise :class:`RenderError` on failure."""
        ...


class MarkdownConverter:
    """Render markdown with Pygments-highlighted fenced code blocks."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def convert(self, text: str) -> str:
        """Render markdown into HTML using the configured extensions."""
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return ""
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists", "toc"],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        return md.convert(normalized)

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            return f"{fence}{language or ''}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


class PandocConverter:
    """Convert markdown by piping it through the ``pandoc`` executable."""

    stylesheet = ""

    def __init__(self, executable: str) -> None:
        self.executable = executable

    def convert(self, text: str) -> str:
        """Return pandoc's HTML output for ``text``.

        Raises
        ------
        subprocess.CalledProcessError
            If pandoc exits with a non-zero status.
        """
        result = subprocess.run(  # noqa: S603
            [self.executable, "--from", "markdown", "--to", "html"],
            input=text,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout


def require_pandoc() -> str:
    """Return the path to ``pandoc`` or raise when it is not installed."""
    path = shutil.which("pandoc")
    if not path:
        msg = "The pandoc renderer was selected but 'pandoc' is not on PATH."
        raise DependencyMissingError(msg)
    return path


class TemplateRenderer:
    """Wrap converted content bodies in the theme's Jinja template."""

    def __init__(self, theme_dir: Path, converter: BodyConverter) -> None:
        """Initialize the renderer for a theme directory.

        Parameters
        ----------
        theme_dir : Path
            Directory containing ``template.html``.
        converter : BodyConverter
            Backend that turns content bodies into HTML fragments.
        """
        self.converter = converter
        self.env = Environment(
            loader=FileSystemLoader(str(theme_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.template_name = TEMPLATE_FILENAME

    def render(self, source: Path, page: PageContext) -> str:
        """Render ``source`` into a full HTML page using ``page`` metadata.

        Raises
        ------
        RenderError
            If the source cannot be read or parsed, the converter fails, or
            the template raises.
        """
        try:
            document = parse_document(source.read_text(encoding="utf-8"))
            body = self.converter.convert(document.body)
            template = self.env.get_template(self.template_name)
            return template.render(
                **page.to_metadata(),
                front_matter=document.metadata,
                body=body,
                pygments_css=self.converter.stylesheet,
            )
        except (
            OSError,
            UnicodeDecodeError,
            YAMLError,
            TemplateError,
            subprocess.CalledProcessError,
        ) as exc:
            msg = f"Failed to render '{source}': {exc}"
            raise RenderError(msg) from exc


def build_renderer(context: BuildContext) -> TemplateRenderer:
    """Return the renderer configured for ``context``.

    Raises
    ------
    DependencyMissingError
        If the pandoc backend is selected and pandoc is missing.
    """
    converter: BodyConverter
    if context.renderer == "pandoc":
        converter = PandocConverter(require_pandoc())
    else:
        converter = MarkdownConverter(context.pygments_style)
    return TemplateRenderer(context.theme_dir, converter)


__all__ = [
    "BodyConverter",
    "MarkdownConverter",
    "PandocConverter",
    "Renderer",
    "TemplateRenderer",
    "build_renderer",
    "require_pandoc",
]
