"""High-level orchestration for a full site build.

:class:`SiteBuilder` drives one build through its stages in order::

    Init -> RouteAndCopy -> BuildNavTree -> RenderAllPages
         -> CopyThemeAssets -> Cleanup -> Done

Every build regenerates the whole output folder. Routing is planned (and
checked for collisions) before the output folder is cleared, a failure on any
page aborts the build, and the build only succeeds when it leaves at least
one HTML page to start browsing from.

Example
-------
>>> from pathlib import Path
>>> from dirsite.config import CliOverrides
>>> from dirsite.generator import SiteBuilder
>>> builder = SiteBuilder.from_project(Path("."), CliOverrides(local=True))  # doctest: +SKIP
>>> result = builder.run()  # doctest: +SKIP
>>> str(result.start_path)  # doctest: +SKIP
'index.html'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import shutil
import typing as typ
from pathlib import Path, PurePosixPath

import structlog

from dirsite._constants import NAV_TREE_FILENAME, TEMPLATE_FILENAME
from dirsite.config import load_build_context
from dirsite.errors import NoOutputError, RoutingConflictError
from dirsite.generator.context import PageContextAssembler
from dirsite.generator.link_rewriter import (
    prefix_base_path,
    prefix_links,
    relocate_relative_links,
    rewrite_content_links,
)
from dirsite.generator.renderer import build_renderer
from dirsite.markdown_parser import read_declared_title
from dirsite.navigation import NavTree, NavTreeBuilder
from dirsite.paths import simplify
from dirsite.router import ContentRouter, RoutePlan

if typ.TYPE_CHECKING:
    from dirsite.config import BuildContext, CliOverrides
    from dirsite.generator.models import PageContext
    from dirsite.generator.renderer import Renderer

logger = structlog.get_logger(__name__)

PostProcessor = cabc.Callable[[str, "PageContext"], str]


class BuildStage(enum.Enum):
    """Stages of one build, in execution order."""

    INIT = "init"
    ROUTE_AND_COPY = "route_and_copy"
    BUILD_NAV_TREE = "build_nav_tree"
    RENDER_ALL_PAGES = "render_all_pages"
    COPY_THEME_ASSETS = "copy_theme_assets"
    CLEANUP = "cleanup"
    DONE = "done"


@dc.dataclass(slots=True, frozen=True)
class BuildResult:
    """Outcome of a successful build.

    Attributes
    ----------
    pages : list[Path]
        Absolute paths of the rendered HTML pages, in render order.
    start_path : PurePosixPath
        Output-relative page to open first.
    nav_tree : NavTree
        The shared navigation tree.
    """

    pages: list[Path]
    start_path: PurePosixPath
    nav_tree: NavTree


class SiteBuilder:
    """Run every build stage for one resolved :class:`BuildContext`."""

    def __init__(
        self,
        context: BuildContext,
        *,
        renderer: Renderer | None = None,
        post_processors: cabc.Sequence[PostProcessor] | None = None,
    ) -> None:
        """Initialize the builder; this is the ``Init`` stage.

        Parameters
        ----------
        context : BuildContext
            Resolved configuration shared read-only with every component.
        renderer : Renderer, optional
            Page renderer; defaults to the backend selected by the context.
        post_processors : sequence of callables, optional
            Transforms applied to each rendered page in order; defaults to
            the link rewriters from :func:`default_post_processors`.

        Raises
        ------
        DependencyMissingError
            If the selected renderer needs an external tool that is missing.
        """
        self.stage = BuildStage.INIT
        self.context = context
        self.renderer = renderer or build_renderer(context)
        self.post_processors = (
            list(post_processors)
            if post_processors is not None
            else default_post_processors(context)
        )
        self.router = ContentRouter(context)
        self._transient: list[Path] = []

    @classmethod
    def from_project(cls, source_root: Path, overrides: CliOverrides) -> SiteBuilder:
        """Resolve configuration for ``source_root`` and return a builder.

        Raises
        ------
        ConfigurationError
            If required settings are missing; nothing is written to disk.
        """
        return cls(load_build_context(source_root, overrides))

    def run(self) -> BuildResult:
        """Execute every stage and return the build result.

        Raises
        ------
        RoutingConflictError
            If two sources, or a source and a theme file, resolve to the same
            output file.
        RenderError
            If any page fails to render; the build stops at that page.
        NoOutputError
            If the finished output folder contains no HTML page.
        """
        plan = self._route_and_copy()
        nav_tree = self._build_nav_tree(plan)
        pages = self._render_all_pages(plan, nav_tree)
        self._copy_theme_assets()
        self._cleanup()
        start_path = self._finish()
        return BuildResult(pages=pages, start_path=start_path, nav_tree=nav_tree)

    def _enter(self, stage: BuildStage) -> None:
        self.stage = stage
        logger.debug("BUILD_STAGE", stage=stage.value)

    def _route_and_copy(self) -> RoutePlan:
        self._enter(BuildStage.ROUTE_AND_COPY)
        plan = self.router.plan()
        check_theme_conflicts(plan, theme_assets(self.context.theme_dir))
        self._reset_output_root()
        self.router.apply(plan)
        output_root = self.context.output_root
        self._transient.extend(
            output_root / typ.cast("PurePosixPath", page.staged) for page in plan.pages
        )
        logger.info(
            "SOURCES_ROUTED", pages=len(plan.pages), files=len(plan.files)
        )
        return plan

    def _reset_output_root(self) -> None:
        output_root = self.context.output_root
        if output_root.exists():
            shutil.rmtree(output_root)
        output_root.mkdir(parents=True)

    def _build_nav_tree(self, plan: RoutePlan) -> NavTree:
        self._enter(BuildStage.BUILD_NAV_TREE)

        def _title_lookup(directory: str) -> str | None:
            source = plan.index_sources.get(directory)
            if source is None:
                return None
            return read_declared_title(self.context.source_root / source)

        nav_tree = NavTreeBuilder(_title_lookup).build(plan.nav_directories)
        nav_path = self.context.output_root / NAV_TREE_FILENAME
        nav_path.write_text(nav_tree.dumps(), encoding="utf-8")
        self._transient.append(nav_path)
        logger.info("NAV_TREE_BUILT", directories=nav_tree.directory_count)
        return nav_tree

    def _render_all_pages(self, plan: RoutePlan, nav_tree: NavTree) -> list[Path]:
        self._enter(BuildStage.RENDER_ALL_PAGES)
        assembler = PageContextAssembler(self.context, nav_tree)
        output_root = self.context.output_root
        written: list[Path] = []
        for routed in sorted(plan.pages, key=lambda page: page.output.as_posix()):
            staged = output_root / typ.cast("PurePosixPath", routed.staged)
            page = assembler.assemble(
                typ.cast("PurePosixPath", routed.page_dir),
                read_declared_title(staged),
                relocated=not routed.source.is_index,
            )
            self._transient.extend(assembler.write_fragments(page))
            html = self.renderer.render(staged, page)
            for post_process in self.post_processors:
                html = post_process(html, page)
            output_path = output_root / routed.output
            output_path.write_text(html, encoding="utf-8")
            written.append(output_path)
            logger.info("PAGE_RENDERED", page=routed.output.as_posix())
        return written

    def _copy_theme_assets(self) -> None:
        self._enter(BuildStage.COPY_THEME_ASSETS)
        for path, target in theme_assets(self.context.theme_dir):
            destination = self.context.output_root / target
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, destination)
            logger.debug("THEME_ASSET_COPIED", asset=target.as_posix())

    def _cleanup(self) -> None:
        self._enter(BuildStage.CLEANUP)
        for path in self._transient:
            path.unlink(missing_ok=True)
        self._transient.clear()

    def _finish(self) -> PurePosixPath:
        self._enter(BuildStage.DONE)
        start_path = find_start_path(self.context.output_root)
        logger.info("BUILD_FINISHED", start_path=start_path.as_posix())
        return start_path


def default_post_processors(context: BuildContext) -> list[PostProcessor]:
    """Return the link rewriters applied to every rendered page.

    Relative links to content files point at the clean URL of their page,
    and relative links on pages rendered below their source climb back out.
    Site-relative links are made relative to the page in local builds and
    receive the site base path otherwise.
    """

    def _content_links(html: str, _page: PageContext) -> str:
        return rewrite_content_links(
            html,
            context.content_extension,
            index_name=context.index_name,
            local=context.local,
        )

    def _relocate(html: str, page: PageContext) -> str:
        return relocate_relative_links(html) if page.relocated else html

    def _levels_up(html: str, page: PageContext) -> str:
        return prefix_links(html, page.levels_up)

    def _base_path(html: str, page: PageContext) -> str:  # noqa: ARG001
        return prefix_base_path(html, context.site_base_path)

    return [_content_links, _relocate, _levels_up if context.local else _base_path]


def theme_assets(theme_dir: Path) -> list[tuple[Path, PurePosixPath]]:
    """Return every theme file except the template with its output path."""
    assets: list[tuple[Path, PurePosixPath]] = []
    for path in sorted(theme_dir.rglob("*")):
        if not path.is_file():
            continue
        relative = path.relative_to(theme_dir).as_posix()
        if relative == TEMPLATE_FILENAME:
            continue
        assets.append((path, PurePosixPath(simplify(relative))))
    return assets


def check_theme_conflicts(
    plan: RoutePlan, assets: cabc.Sequence[tuple[Path, PurePosixPath]]
) -> None:
    """Reject theme files that would overwrite routed content.

    Raises
    ------
    RoutingConflictError
        If a theme file lands on a page, a content asset, a staged source, or
        an output directory.
    """
    claimed: dict[PurePosixPath, PurePosixPath] = {}
    for routed in plan.files:
        claimed[routed.output] = routed.source.raw
        if routed.staged is not None:
            claimed[routed.staged] = routed.source.raw
    directories = set(plan.directories)
    for path, target in assets:
        source = claimed.get(target)
        if source is not None:
            msg = f"Theme file '{path}' and '{source}' both resolve to '{target}'."
            raise RoutingConflictError(msg)
        if target in directories:
            msg = f"Theme file '{path}' resolves to output directory '{target}'."
            raise RoutingConflictError(msg)


def find_start_path(output_root: Path) -> PurePosixPath:
    """Return the page to open first: the root index, else the first HTML page.

    Raises
    ------
    NoOutputError
        If the output folder holds no HTML file at all.
    """
    if (output_root / "index.html").is_file():
        return PurePosixPath("index.html")
    candidates = sorted(
        path.relative_to(output_root).as_posix()
        for path in output_root.rglob("*.html")
        if path.is_file()
    )
    indexes = [name for name in candidates if name.endswith("/index.html")]
    if indexes:
        return PurePosixPath(indexes[0])
    if candidates:
        return PurePosixPath(candidates[0])
    msg = f"The build produced no HTML pages under '{output_root}'."
    raise NoOutputError(msg)


__all__ = [
    "BuildResult",
    "BuildStage",
    "PostProcessor",
    "SiteBuilder",
    "check_theme_conflicts",
    "default_post_processors",
    "find_start_path",
    "theme_assets",
]
