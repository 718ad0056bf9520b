"""Classify source files and compute where each one lands in the output tree.

The router walks the project root once, skipping excluded names, and sorts
every discovered file into one of three kinds:

* index files (``<dir>/index.<ext>``) serve their directory's root page;
* content files (``<dir>/<name>.<ext>``) become the index of a synthetic
  ``<dir>/<name>/`` directory so their URL carries no extension;
* everything else is an asset, copied byte for byte under a simplified name.

Directory segments and content stems are slugged one segment at a time.
Output collisions are detected up front and raise
:class:`~dirsite.errors.RoutingConflictError` before anything is copied.

Example
-------
>>> from pathlib import Path
>>> from dirsite.config import CliOverrides, load_build_context
>>> from dirsite.router import ContentRouter
>>> context = load_build_context(Path("."), CliOverrides())  # doctest: +SKIP
>>> plan = ContentRouter(context).plan()  # doctest: +SKIP
>>> [str(page.output) for page in plan.pages]  # doctest: +SKIP
['index.html', 'docs/index.html', 'docs/guide/index.html']
"""

from __future__ import annotations

import dataclasses as dc
import os
import shutil
import typing as typ
from pathlib import Path, PurePosixPath

import structlog

from dirsite.errors import RoutingConflictError
from dirsite.paths import simplify, slug_path

if typ.TYPE_CHECKING:
    from dirsite.config import BuildContext

logger = structlog.get_logger(__name__)

ROOT = PurePosixPath("")


@dc.dataclass(slots=True, frozen=True)
class SourcePath:
    """A file or directory discovered under the project root.

    Attributes
    ----------
    raw : PurePosixPath
        Path relative to the project root.
    is_directory : bool
        Whether the path is a directory.
    is_index : bool
        Whether the file is its directory's index file.
    extension : str
        File suffix without the leading dot; empty for directories.
    """

    raw: PurePosixPath
    is_directory: bool
    is_index: bool
    extension: str


@dc.dataclass(slots=True, frozen=True)
class RoutedFile:
    """A discovered file paired with its output location."""

    source: SourcePath
    output: PurePosixPath
    staged: PurePosixPath | None = None
    page_dir: PurePosixPath | None = None

    @property
    def is_page(self) -> bool:
        """Return ``True`` for index and content files that render to HTML."""
        return self.page_dir is not None


@dc.dataclass(slots=True, frozen=True)
class RoutePlan:
    """Complete routing result for one build.

    Attributes
    ----------
    directories : tuple[PurePosixPath, ...]
        Output directories to create, sorted.
    files : tuple[RoutedFile, ...]
        Every discovered file with its destination, in walk order.
    nav_directories : tuple[str, ...]
        Distinct slugged parent directories of all content files; ``""`` is
        the root.
    index_sources : dict[str, PurePosixPath]
        Slugged directory to the source path of its index file.
    """

    directories: tuple[PurePosixPath, ...]
    files: tuple[RoutedFile, ...]
    nav_directories: tuple[str, ...]
    index_sources: dict[str, PurePosixPath]

    @property
    def pages(self) -> list[RoutedFile]:
        """Return the routed files that render to HTML pages."""
        return [routed for routed in self.files if routed.is_page]


class ContentRouter:
    """Discover sources and compute, then apply, their output layout."""

    def __init__(self, context: BuildContext) -> None:
        self.context = context
        self.extension = context.content_extension

    def discover(self) -> list[SourcePath]:
        """Walk the project root and return every non-excluded path, sorted."""
        root = self.context.source_root
        exclusions = self.context.exclusions
        found: list[SourcePath] = []
        for current, dirnames, filenames in os.walk(root):
            current_path = Path(current)
            dirnames[:] = sorted(
                name for name in dirnames if not exclusions.excludes(current_path / name)
            )
            relative = PurePosixPath(current_path.relative_to(root).as_posix())
            for name in dirnames:
                found.append(SourcePath(relative / name, True, False, ""))
            for name in sorted(filenames):
                path = current_path / name
                if exclusions.excludes(path):
                    continue
                extension = path.suffix.lstrip(".")
                is_index = (
                    extension == self.extension and path.stem == self.context.index_name
                )
                found.append(SourcePath(relative / name, False, is_index, extension))
        return found

    def route_directory(self, source: SourcePath) -> PurePosixPath:
        """Return the output directory for a source directory."""
        return PurePosixPath(slug_path(source.raw))

    def route_file(self, source: SourcePath) -> RoutedFile:
        """Return the routed destination for a source file."""
        parent = PurePosixPath(slug_path(source.raw.parent))
        if source.is_index:
            return RoutedFile(
                source=source,
                output=parent / "index.html",
                staged=parent / source.raw.name,
                page_dir=parent,
            )
        if source.extension == self.extension:
            page_dir = PurePosixPath(slug_path(source.raw.with_suffix("")))
            return RoutedFile(
                source=source,
                output=page_dir / "index.html",
                staged=page_dir / f"{self.context.index_name}.{self.extension}",
                page_dir=page_dir,
            )
        return RoutedFile(
            source=source, output=PurePosixPath(simplify(source.raw.as_posix()))
        )

    def plan(self) -> RoutePlan:
        """Route every discovered source and check the result for collisions.

        Raises
        ------
        RoutingConflictError
            If two sources resolve to the same output file, or a file would
            land where an output directory must exist.
        """
        sources = self.discover()
        directories: set[PurePosixPath] = set()
        files: list[RoutedFile] = []
        nav_directories: set[str] = set()
        index_sources: dict[str, PurePosixPath] = {}
        for source in sources:
            if source.is_directory:
                directories.add(self.route_directory(source))
                continue
            routed = self.route_file(source)
            files.append(routed)
            if routed.is_page:
                directories.add(typ.cast("PurePosixPath", routed.page_dir))
                nav_directories.add(slug_path(source.raw.parent))
            if source.is_index:
                index_sources[slug_path(source.raw.parent)] = source.raw
        directories.discard(ROOT)
        self._check_conflicts(files, directories)
        return RoutePlan(
            directories=tuple(sorted(directories)),
            files=tuple(files),
            nav_directories=tuple(sorted(nav_directories)),
            index_sources=index_sources,
        )

    def apply(self, plan: RoutePlan) -> None:
        """Create the output skeleton, then copy every routed file into it.

        Pages are copied to their staged ``index.<ext>`` location; assets are
        copied byte for byte to their simplified path.
        """
        output_root = self.context.output_root
        for directory in plan.directories:
            (output_root / directory).mkdir(parents=True, exist_ok=True)
        for routed in plan.files:
            target = routed.staged if routed.is_page else routed.output
            destination = output_root / typ.cast("PurePosixPath", target)
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.context.source_root / routed.source.raw, destination)
            logger.debug(
                "FILE_ROUTED", source=str(routed.source.raw), target=str(target)
            )

    @staticmethod
    def _check_conflicts(
        files: list[RoutedFile], directories: set[PurePosixPath]
    ) -> None:
        claimed: dict[PurePosixPath, PurePosixPath] = {}
        for routed in files:
            targets = [routed.output]
            if routed.staged is not None:
                targets.append(routed.staged)
            for target in targets:
                if target.is_absolute() or ".." in target.parts:
                    msg = (
                        f"'{routed.source.raw}' resolves to '{target}', which is "
                        "outside the output folder."
                    )
                    raise RoutingConflictError(msg)
                previous = claimed.get(target)
                if previous is not None and previous != routed.source.raw:
                    msg = (
                        f"'{previous}' and '{routed.source.raw}' both resolve to "
                        f"'{target}'."
                    )
                    raise RoutingConflictError(msg)
                if target in directories:
                    msg = (
                        f"'{routed.source.raw}' resolves to '{target}', which is "
                        "also an output directory."
                    )
                    raise RoutingConflictError(msg)
                claimed[target] = routed.source.raw


__all__ = ["ContentRouter", "RoutePlan", "RoutedFile", "SourcePath"]
