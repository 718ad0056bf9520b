"""Turn a directory of content files into a browsable static site.

This package exposes the ``dirsite`` console script. Every content file under
the project root becomes a page at a clean URL, and every directory holding
content becomes a node in the site-wide navigation menu.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from dirsite import main
>>> main(["build", "--local"])  # doctest: +SKIP
0
"""

from __future__ import annotations

from ._constants import __version__
from .cli import app, main

__all__ = ["__version__", "app", "main"]
