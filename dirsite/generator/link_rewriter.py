"""Text transforms that fix up links in rendered HTML.

Pages are rendered into directories of varying depth, so links written
relative to the site root (``/docs/api``) need a prefix that depends on where
the page lands, and links to other content files must point at the page they
render to. :func:`rewrite_content_links` maps them to clean URLs; the plainer
:func:`rewrite_link_suffixes` only swaps the extension. Each transform here
is a pure ``str -> str`` function over the ``href``/``src`` attributes of the
rendered page, so the build can chain them after any renderer.

Examples
--------
>>> from dirsite.generator.link_rewriter import prefix_links, rewrite_link_suffixes
>>> prefix_links('<a href="/docs">Docs</a>', 2)
'<a href="../../docs">Docs</a>'
>>> rewrite_link_suffixes('<a href="guide.md#setup">Guide</a>', "md", "html")
'<a href="guide.html#setup">Guide</a>'
"""

from __future__ import annotations

import collections.abc as cabc
import re
from urllib.parse import unquote, urlsplit, urlunsplit

from dirsite.paths import simplify, slug_segment

LINK_ATTRIBUTE_PATTERN = re.compile(
    r"""(?P<attr>(?<![\w-])(?:href|src))=(?P<quote>["'])(?P<url>.*?)(?P=quote)""",
    re.IGNORECASE,
)


def _is_site_relative(target: str) -> bool:
    return target.startswith("/") and not target.startswith("//")


def _is_relative(target: str) -> bool:
    if not target or target.startswith(("#", "/")):
        return False
    parsed = urlsplit(target)
    return not (parsed.scheme or parsed.netloc)


def _rewrite_attributes(html: str, rewrite: cabc.Callable[[str], str]) -> str:
    def _repl(match: re.Match[str]) -> str:
        url = match.group("url")
        updated = rewrite(url)
        if updated == url:
            return match.group(0)
        quote = match.group("quote")
        return f"{match.group('attr')}={quote}{updated}{quote}"

    return LINK_ATTRIBUTE_PATTERN.sub(_repl, html)


def levels_up_prefix(levels_up: int) -> str:
    """Return the relative prefix that climbs ``levels_up`` directories."""
    return "../" * levels_up if levels_up > 0 else "./"


def prefix_links(html: str, levels_up: int) -> str:
    """Make site-relative links relative to a page ``levels_up`` deep."""
    prefix = levels_up_prefix(levels_up)

    def _rewrite(url: str) -> str:
        if not _is_site_relative(url):
            return url
        return prefix + url.lstrip("/")

    return _rewrite_attributes(html, _rewrite)


def prefix_base_path(html: str, base_path: str) -> str:
    """Prepend the site base path (``/project``) to site-relative links."""
    base = base_path.rstrip("/")
    if not base:
        return html

    def _rewrite(url: str) -> str:
        if not _is_site_relative(url):
            return url
        return base + url

    return _rewrite_attributes(html, _rewrite)


def rewrite_link_suffixes(html: str, from_ext: str, to_ext: str) -> str:
    """Swap ``.from_ext`` for ``.to_ext`` on relative links only.

    Absolute URLs, site-relative paths, and fragment-only anchors are left
    alone; query strings and fragments are preserved.
    """
    source_suffix = f".{from_ext.lstrip('.')}"
    target_suffix = f".{to_ext.lstrip('.')}"

    def _rewrite(url: str) -> str:
        if not _is_relative(url):
            return url
        parsed = urlsplit(url)
        if not parsed.path.endswith(source_suffix):
            return url
        path = parsed.path[: -len(source_suffix)] + target_suffix
        return urlunsplit(parsed._replace(path=path))

    return _rewrite_attributes(html, _rewrite)


def rewrite_content_links(
    html: str, extension: str, *, index_name: str = "index", local: bool = False
) -> str:
    """Point relative links at content files to their rendered clean URL.

    ``guide.md`` becomes ``guide/`` and ``docs/index.md`` becomes ``docs/``,
    with each segment slugged the way the router slugs it. Local builds
    append ``index.html`` so the link also works from disk.

    Examples
    --------
    >>> rewrite_content_links('<a href="My%20Notes/First.md">x</a>', "md")
    '<a href="my-notes/first/">x</a>'
    >>> rewrite_content_links('<a href="../index.md#top">x</a>', "md", local=True)
    '<a href="../index.html#top">x</a>'
    """
    source_suffix = f".{extension.lstrip('.')}"

    def _rewrite(url: str) -> str:
        if not _is_relative(url):
            return url
        parsed = urlsplit(url)
        if not parsed.path.endswith(source_suffix):
            return url
        *directories, stem = unquote(parsed.path[: -len(source_suffix)]).split("/")
        if not stem:
            return url
        parts = [
            part if part in ("", ".", "..") else slug_segment(part)
            for part in directories
        ]
        if stem != index_name:
            parts.append(slug_segment(stem))
        path = simplify("/".join(parts))
        if path:
            path += "/"
        if local:
            path += "index.html"
        return urlunsplit(parsed._replace(path=path or "./"))

    return _rewrite_attributes(html, _rewrite)


def relocate_relative_links(html: str, levels: int = 1) -> str:
    """Prefix relative links with ``../`` for a page rendered ``levels`` deeper.

    Content files render one directory below their source, so their relative
    links must climb out of that extra level.
    """
    prefix = "../" * levels

    def _rewrite(url: str) -> str:
        if not _is_relative(url):
            return url
        return prefix + url.removeprefix("./")

    return _rewrite_attributes(html, _rewrite)


__all__ = [
    "LINK_ATTRIBUTE_PATTERN",
    "levels_up_prefix",
    "prefix_base_path",
    "prefix_links",
    "relocate_relative_links",
    "rewrite_content_links",
    "rewrite_link_suffixes",
]
