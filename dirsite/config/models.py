"""Typed dataclasses describing resolved dirsite build configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from dirsite._constants import CONFIG_FILENAME, INDEX_NAME, RESERVED_STEMS


@dc.dataclass(slots=True, frozen=True)
class CliOverrides:
    """Values supplied on the command line; ``None`` means "not given".

    Attributes
    ----------
    theme : str or None
        Theme name override.
    input_extension : str or None
        Content file extension override, with or without the leading dot.
    output_folder : Path or None
        Output folder override, relative to the project root when not absolute.
    site_url : str or None
        Public site URL override.
    site_base_path : str or None
        Base path the site is served under (e.g. ``/docs``).
    renderer : str or None
        Renderer backend override (``markdown`` or ``pandoc``).
    local : bool
        Build for browsing from disk; disables base-path prefixing.
    """

    theme: str | None = None
    input_extension: str | None = None
    output_folder: Path | None = None
    site_url: str | None = None
    site_base_path: str | None = None
    renderer: str | None = None
    local: bool = False


@dc.dataclass(slots=True, frozen=True)
class FileConfig:
    """Raw values read from ``dirsite.yaml``; missing keys stay ``None``."""

    theme: str | None = None
    input_extension: str | None = None
    output_folder: str | None = None
    site_url: str | None = None
    site_base_path: str | None = None
    renderer: str | None = None
    pygments_style: str | None = None


@dc.dataclass(slots=True, frozen=True)
class ExclusionRules:
    """Names the source walk skips.

    Dotfiles are always excluded. ``output_folder`` is set only when the
    output lives inside the source root.
    """

    content_extension: str
    output_folder: Path | None = None
    reserved_stems: frozenset[str] = RESERVED_STEMS
    reserved_files: frozenset[str] = frozenset({CONFIG_FILENAME})

    def excludes(self, path: Path) -> bool:
        """Return ``True`` when ``path`` (absolute) must not be walked."""
        if path.name.startswith("."):
            return True
        if self.output_folder is not None and path == self.output_folder:
            return True
        if path.is_dir():
            return False
        if path.name in self.reserved_files:
            return True
        return (
            path.suffix == f".{self.content_extension}"
            and path.stem in self.reserved_stems
        )


@dc.dataclass(slots=True, frozen=True)
class BuildContext:
    """Immutable, fully resolved settings for one build invocation.

    Attributes
    ----------
    source_root : Path
        Absolute project root that is walked for content.
    theme : str
        Theme name.
    theme_dir : Path
        Absolute directory holding the theme template and assets.
    content_extension : str
        Content file extension without the leading dot (e.g. ``"md"``).
    output_root : Path
        Absolute output folder.
    site_url : str or None
        Public site URL, when configured.
    site_base_path : str
        Base path prepended to site-relative links outside local builds.
    local : bool
        Whether the build targets browsing from disk.
    renderer : str
        Renderer backend name.
    pygments_style : str
        Pygments style used for code highlighting.
    exclusions : ExclusionRules
        Rules applied during the source walk.
    index_name : str
        File stem that marks a directory's index file.
    """

    source_root: Path
    theme: str
    theme_dir: Path
    content_extension: str
    output_root: Path
    site_url: str | None
    site_base_path: str
    local: bool
    renderer: str
    pygments_style: str
    exclusions: ExclusionRules
    index_name: str = INDEX_NAME


__all__ = ["BuildContext", "CliOverrides", "ExclusionRules", "FileConfig"]
