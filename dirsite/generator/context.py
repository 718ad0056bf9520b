"""Assemble the per-page render context from the shared navigation tree.

For every page the assembler computes the page's site-relative path, derives
its title, produces a page-local copy of the navigation tree with the page's
own node flagged active, and merges everything with the build configuration.
The shared tree is never modified, so one tree serves every page.
"""

from __future__ import annotations

import json
import typing as typ
from pathlib import PurePosixPath

from dirsite._constants import PAGE_META_FILENAME, PAGE_NAV_FILENAME, ROOT_TITLE
from dirsite.generator.models import PageContext
from dirsite.paths import prettify

if typ.TYPE_CHECKING:
    from pathlib import Path

    from dirsite.config import BuildContext
    from dirsite.navigation import NavTree


def page_path_for(page_dir: PurePosixPath) -> str | None:
    """Return the site-relative path for an output page directory."""
    if not page_dir.parts:
        return None
    return "/" + page_dir.as_posix()


class PageContextAssembler:
    """Build :class:`PageContext` objects and their transient fragments."""

    def __init__(self, context: BuildContext, nav_tree: NavTree) -> None:
        self.context = context
        self.nav_tree = nav_tree

    def assemble(
        self,
        page_dir: PurePosixPath,
        declared_title: str | None = None,
        *,
        relocated: bool = False,
    ) -> PageContext:
        """Return the render context for the page whose output dir is ``page_dir``.

        Parameters
        ----------
        page_dir : PurePosixPath
            Page output directory relative to the output root (``""`` for the
            root page).
        declared_title : str or None, optional
            Title declared by the page itself; wins over the derived title.
        relocated : bool, optional
            ``True`` when the page renders one level below its source file.

        Returns
        -------
        PageContext
            Metadata for the renderer, including the active-flagged tree copy.
        """
        page_path = page_path_for(page_dir)
        local_nav = self.nav_tree.root.mark_active(page_path)
        return PageContext(
            page_name=declared_title or self._derive_title(page_dir),
            page_path=page_path,
            page_dir=page_dir,
            levels_up=len(page_dir.parts),
            nav=local_nav,
            nav_document=self.nav_tree.to_document(local_nav),
            theme=self.context.theme,
            input_extension=self.context.content_extension,
            output_folder=str(self.context.output_root),
            site_url=self.context.site_url,
            site_base_path=self.context.site_base_path,
            local=self.context.local,
            relocated=relocated,
        )

    def write_fragments(self, page: PageContext) -> list[Path]:
        """Persist the page-local nav tree and metadata beside the page.

        Returns the written paths so the caller can delete them once every
        page has rendered.
        """
        page_root = self.context.output_root / page.page_dir
        page_root.mkdir(parents=True, exist_ok=True)
        nav_path = page_root / PAGE_NAV_FILENAME
        nav_path.write_text(self.nav_tree.dumps(page.nav), encoding="utf-8")
        meta_path = page_root / PAGE_META_FILENAME
        meta_path.write_text(
            json.dumps(page.to_metadata(), ensure_ascii=False, indent=1),
            encoding="utf-8",
        )
        return [nav_path, meta_path]

    @staticmethod
    def _derive_title(page_dir: PurePosixPath) -> str:
        if not page_dir.parts:
            return ROOT_TITLE
        return prettify(page_dir.name)


__all__ = ["PageContextAssembler", "page_path_for"]
