r"""Split content files into YAML front matter and Markdown body.

Content files may open with a front-matter block delimited by ``---`` lines.
Only the ``title`` key is consumed by dirsite (page titles and navigation
labels); the rest of the mapping is passed through to templates untouched.

Example
-------
>>> from dirsite.markdown_parser import parse_document
>>> document = parse_document("---\ntitle: Home\n---\n# Welcome\n")
>>> document.title
'Home'
>>> document.body
'# Welcome\n'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

import structlog
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = structlog.get_logger(__name__)

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)\r?\n(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)", re.DOTALL
)


@dc.dataclass(slots=True)
class ContentDocument:
    """Front matter and body of a content file.

    Attributes
    ----------
    metadata : dict[str, Any]
        Parsed front-matter mapping; empty when absent.
    body : str
        Markdown that follows the front matter.
    """

    metadata: dict[str, typ.Any]
    body: str

    @property
    def title(self) -> str | None:
        """Return the declared ``title`` as a stripped string, if any."""
        value = self.metadata.get("title")
        if value is None:
            return None
        text = str(value).strip()
        return text or None


def parse_document(text: str) -> ContentDocument:
    """Split ``text`` into front matter and body.

    Raises
    ------
    YAMLError
        If the front-matter block is not valid YAML.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return ContentDocument(metadata={}, body=text)
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    loaded = loader.load(match.group(1)) or {}
    metadata = dict(loaded) if isinstance(loaded, dict) else {}
    return ContentDocument(metadata=metadata, body=text[match.end() :])


def read_declared_title(path: Path) -> str | None:
    """Return the title declared in ``path``'s front matter, or ``None``.

    Unreadable files and malformed front matter are logged and treated as
    declaring no title; this lookup never fails a build.
    """
    try:
        document = parse_document(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, YAMLError) as exc:
        logger.warning("TITLE_LOOKUP_FAILED", path=str(path), error=str(exc))
        return None
    return document.title


__all__ = ["ContentDocument", "parse_document", "read_declared_title"]
