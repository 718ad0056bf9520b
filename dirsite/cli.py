"""Cyclopts CLI entrypoint for building and previewing dirsite projects.

The ``dirsite`` console script defined here turns a directory of content
files into a static site. ``dirsite init`` seeds ``dirsite.yaml``,
``dirsite build`` regenerates the output folder, and ``dirsite serve`` builds
and then serves the result locally. Every flag overrides the matching
``dirsite.yaml`` key, which in turn overrides the built-in default.

Examples
--------
Build the project in the current directory for browsing from disk:

>>> from dirsite.cli import main
>>> main(["build", "--local"])  # doctest: +SKIP
0

Override the theme and output folder:

>>> from dirsite.cli import app
>>> app(["build", "--theme", "default", "--output-folder", "dist"])  # doctest: +SKIP
"""

from __future__ import annotations

import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import __version__
from ._logging import configure_logging
from .config import CliOverrides, write_default_config
from .errors import DirsiteError
from .generator import BuildResult, SiteBuilder
from .server import serve as serve_output

app = App(
    name="dirsite",
    version=__version__,
    config=cyclopts.config.Env("DIRSITE_", command=False),  # type: ignore[unknown-argument]
)

Root = typ.Annotated[Path, Parameter(help="Project root containing content files")]
Theme = typ.Annotated[str | None, Parameter(help="Theme name")]
InputExtension = typ.Annotated[
    str | None, Parameter(help="Content file extension (e.g. md)")
]
OutputFolder = typ.Annotated[Path | None, Parameter(help="Override the output folder")]
SiteUrl = typ.Annotated[str | None, Parameter(help="Public site URL")]
SiteBasePath = typ.Annotated[
    str | None, Parameter(help="Base path the site is served under")
]
RendererName = typ.Annotated[
    str | None, Parameter(help="Renderer backend: markdown or pandoc")
]
Verbose = typ.Annotated[bool, Parameter(help="Log progress at debug level")]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _run_build(root: Path, overrides: CliOverrides) -> BuildResult:
    """Build the site and report every written page."""
    builder = SiteBuilder.from_project(root, overrides)
    result = builder.run()
    for path in result.pages:
        print(f"wrote {_format_path(path)}")
    return result


@app.command(name="help", help="Show this help message.")
def show_help() -> None:
    """Print the top-level usage summary."""
    app.help_print([])


@app.command(name="version", help="Show the dirsite version.")
def show_version() -> None:
    """Print the installed dirsite version."""
    print(__version__)


@app.command(help="Create a default dirsite.yaml in the project root.")
def init(*, root: Root = Path(".")) -> None:
    """Seed ``dirsite.yaml`` with the default settings.

    Parameters
    ----------
    root : Path, optional
        Project root that receives the configuration file.

    Raises
    ------
    ConfigurationError
        If ``dirsite.yaml`` already exists.
    """
    path = write_default_config(root)
    print(f"wrote {_format_path(path.resolve())}")


@app.command(help="Regenerate the static site from the content files.")
def build(
    *,
    root: Root = Path("."),
    local: typ.Annotated[
        bool, Parameter(help="Build for browsing from disk (no base path)")
    ] = False,
    theme: Theme = None,
    input_extension: InputExtension = None,
    output_folder: OutputFolder = None,
    site_url: SiteUrl = None,
    site_base_path: SiteBasePath = None,
    renderer: RendererName = None,
    verbose: Verbose = False,
) -> None:
    """Build the site into the output folder.

    Parameters
    ----------
    root : Path, optional
        Project root containing the content files and ``dirsite.yaml``.
    local : bool, optional
        Make site-relative links relative to each page instead of prefixing
        the site base path.
    theme, input_extension, output_folder, site_url, site_base_path, renderer
        Overrides for the matching ``dirsite.yaml`` keys.
    verbose : bool, optional
        Log build progress.

    Raises
    ------
    DirsiteError
        Any configuration, dependency, routing, render, or no-output failure.
    """
    configure_logging(verbose=verbose)
    overrides = CliOverrides(
        theme=theme,
        input_extension=input_extension,
        output_folder=output_folder,
        site_url=site_url,
        site_base_path=site_base_path,
        renderer=renderer,
        local=local,
    )
    result = _run_build(root, overrides)
    print(f"start {result.start_path.as_posix()}")


@app.command(help="Build the site, then serve it on a local HTTP server.")
def serve(
    *,
    root: Root = Path("."),
    local: typ.Annotated[
        bool, Parameter(help="Build for browsing from disk (no base path)")
    ] = True,
    theme: Theme = None,
    input_extension: InputExtension = None,
    output_folder: OutputFolder = None,
    site_url: SiteUrl = None,
    site_base_path: SiteBasePath = None,
    renderer: RendererName = None,
    verbose: Verbose = False,
) -> None:
    """Build the site and preview it at ``http://127.0.0.1:8000``.

    Falls back to printing a ``file://`` hint when the server cannot start.
    """
    configure_logging(verbose=verbose)
    overrides = CliOverrides(
        theme=theme,
        input_extension=input_extension,
        output_folder=output_folder,
        site_url=site_url,
        site_base_path=site_base_path,
        renderer=renderer,
        local=local,
    )
    builder = SiteBuilder.from_project(root, overrides)
    result = builder.run()
    serve_output(builder.context.output_root, result.start_path)


def main(argv: list[str] | None = None) -> int:
    """Invoke the Cyclopts application that powers the ``dirsite`` command.

    Parameters
    ----------
    argv : list[str] or None, optional
        Arguments to parse; defaults to ``sys.argv[1:]``.

    Returns
    -------
    int
        ``0`` on success, otherwise the failing error's exit code. Unknown
        commands and flags are reported by Cyclopts, which exits non-zero.

    Examples
    --------
    >>> main(["version"])  # doctest: +SKIP
    0.1.0
    0
    """
    try:
        app(argv)
    except DirsiteError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    sys.exit(main())
