"""Shared dataclasses used by the page rendering pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import PurePosixPath

    from dirsite.navigation import NavNode


@dc.dataclass(slots=True, frozen=True)
class PageContext:
    """Per-page metadata handed to the renderer.

    Attributes
    ----------
    page_name : str
        Page title (declared, or prettified from the containing directory).
    page_path : str or None
        Site-relative path of the page (``/docs/guide``); ``None`` for the root.
    page_dir : PurePosixPath
        Output directory of the page relative to the output root.
    levels_up : int
        Directory depth of the page below the output root.
    nav : NavNode
        Page-local copy of the navigation tree with this page's node active.
    nav_document : list[dict[str, Any]]
        Serialisable listing document for ``nav``.
    theme : str
        Theme name.
    input_extension : str
        Content file extension.
    output_folder : str
        Absolute output folder.
    site_url : str or None
        Public site URL.
    site_base_path : str
        Base path prefix for site-relative links.
    local : bool
        Whether the build targets browsing from disk.
    relocated : bool
        Whether the page renders one directory below its source file, as
        non-index content files do.
    """

    page_name: str
    page_path: str | None
    page_dir: PurePosixPath
    levels_up: int
    nav: NavNode
    nav_document: list[dict[str, typ.Any]]
    theme: str
    input_extension: str
    output_folder: str
    site_url: str | None
    site_base_path: str
    local: bool
    relocated: bool = False

    def to_metadata(self) -> dict[str, typ.Any]:
        """Return the metadata block written beside the page and fed to templates."""
        return {
            "theme": self.theme,
            "inputextension": self.input_extension,
            "outputfolder": self.output_folder,
            "site_url": self.site_url,
            "site_base_path": self.site_base_path,
            "local": self.local,
            "page_name": self.page_name,
            "page_path": self.page_path,
            "levels_up": self.levels_up,
            "nav": self.nav_document[0],
        }


__all__ = ["PageContext"]
