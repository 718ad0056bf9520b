"""Build the site-wide navigation tree from a flat list of directories.

Only directories that hold content files (directly) are handed to the
builder, sorted and with no parent/child links. A single forward pass with an
explicit stack of open nodes rebuilds the hierarchy: before each directory is
opened, every open node that is not one of its ancestors is closed, then one
node is opened per missing segment, so intermediate directories that only hold
subdirectories still appear. Closing a node freezes it into an immutable
:class:`NavNode` appended to its parent, which keeps opens and closes balanced
by construction; the counts are kept on the result so tests can check them.

The serialised form is the directory-listing document the theme templates
read: a list holding the root ``{"type": "directory", ...}`` block followed by
a trailing ``{"type": "report", ...}`` block.

Example
-------
>>> from dirsite.navigation import NavTreeBuilder
>>> tree = NavTreeBuilder().build(["", "docs", "docs/api"])
>>> [node.path for node in tree.root.walk()]
[None, '/docs', '/docs/api']
>>> tree.opened == tree.closed
True
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import json
import typing as typ

from dirsite._constants import ROOT_TITLE
from dirsite.paths import prettify

TitleLookup = cabc.Callable[[str], "str | None"]


@dc.dataclass(slots=True, frozen=True)
class NavNode:
    """One directory in the navigation hierarchy.

    Attributes
    ----------
    name : str
        Display name.
    path : str or None
        Site-relative link path (``/docs/api``); ``None`` for the root.
    children : tuple[NavNode, ...]
        Child directories in path order.
    active : bool
        Set on the node matching the page being rendered.
    """

    name: str
    path: str | None
    children: tuple[NavNode, ...] = ()
    active: bool = False

    def walk(self) -> cabc.Iterator[NavNode]:
        """Yield this node and its descendants in depth-first pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def mark_active(self, page_path: str | None) -> NavNode:
        """Return a copy with only the node whose path is ``page_path`` active.

        The receiver is left untouched; a ``None`` path (the root page) marks
        nothing.
        """
        return dc.replace(
            self,
            active=page_path is not None and self.path == page_path,
            children=tuple(child.mark_active(page_path) for child in self.children),
        )

    def to_dict(self) -> dict[str, typ.Any]:
        """Serialise the node as a ``directory`` block."""
        block: dict[str, typ.Any] = {"type": "directory", "name": self.name}
        if self.path is not None:
            block["path"] = self.path
        if self.active:
            block["active"] = True
        block["contents"] = [child.to_dict() for child in self.children]
        return block


@dc.dataclass(slots=True, frozen=True)
class NavTree:
    """The finished navigation tree plus the open/close event counts."""

    root: NavNode
    opened: int
    closed: int

    @property
    def directory_count(self) -> int:
        """Return the number of nodes below the root."""
        return sum(1 for _node in self.root.walk()) - 1

    def to_document(self, root: NavNode | None = None) -> list[dict[str, typ.Any]]:
        """Return the listing document for ``root`` (defaults to the shared tree)."""
        node = root or self.root
        return [
            node.to_dict(),
            {"type": "report", "directories": self.directory_count},
        ]

    def dumps(self, root: NavNode | None = None) -> str:
        """Serialise :meth:`to_document` as JSON."""
        return json.dumps(self.to_document(root), ensure_ascii=False, indent=1)


@dc.dataclass(slots=True)
class _OpenNode:
    """Stack handle for a node whose children are still being collected."""

    segments: tuple[str, ...]
    name: str
    children: list[NavNode] = dc.field(default_factory=list)

    def contains(self, segments: tuple[str, ...]) -> bool:
        return segments[: len(self.segments)] == self.segments

    def close(self) -> NavNode:
        path = "/" + "/".join(self.segments) if self.segments else None
        return NavNode(name=self.name, path=path, children=tuple(self.children))


class NavTreeBuilder:
    """Turn a flat list of slugged directories into a :class:`NavTree`."""

    def __init__(self, title_lookup: TitleLookup | None = None) -> None:
        """Initialize the builder.

        Parameters
        ----------
        title_lookup : callable, optional
            Returns the declared title of a directory's index file given the
            directory's slugged path (``""`` for the root), or ``None`` when
            there is none. Lookups must not raise.
        """
        self.title_lookup = title_lookup

    def build(self, directories: cabc.Iterable[str]) -> NavTree:
        """Build the tree in one forward pass over the sorted directories.

        Raises
        ------
        RuntimeError
            If the pass ends with unbalanced open and close events.
        """
        ordered = sorted({_segments(directory) for directory in directories})
        stack = [_OpenNode((), self._name_for(()))]
        opened = 1
        closed = 0

        for segments in ordered:
            while not stack[-1].contains(segments):
                finished = stack.pop().close()
                stack[-1].children.append(finished)
                closed += 1
            while stack[-1].segments != segments:
                depth = len(stack[-1].segments) + 1
                prefix = segments[:depth]
                stack.append(_OpenNode(prefix, self._name_for(prefix)))
                opened += 1

        root: NavNode | None = None
        while stack:
            finished = stack.pop().close()
            closed += 1
            if stack:
                stack[-1].children.append(finished)
            else:
                root = finished

        if root is None or opened != closed:
            msg = f"Unbalanced navigation tree: {opened} opened, {closed} closed."
            raise RuntimeError(msg)
        return NavTree(root=root, opened=opened, closed=closed)

    def _name_for(self, segments: tuple[str, ...]) -> str:
        declared = self.title_lookup("/".join(segments)) if self.title_lookup else None
        if declared:
            return declared
        if not segments:
            return ROOT_TITLE
        return prettify(segments[-1])


def _segments(directory: str) -> tuple[str, ...]:
    return tuple(part for part in directory.split("/") if part not in ("", "."))


__all__ = ["NavNode", "NavTree", "NavTreeBuilder", "TitleLookup"]
