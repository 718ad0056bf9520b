"""Shared fixtures for dirsite tests.

``write_tree`` materialises a source tree from a mapping of relative paths to
file contents, and ``make_context`` resolves a :class:`BuildContext` for it
without needing a ``dirsite.yaml`` on disk.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

import pytest

from dirsite.config import CliOverrides, resolve_build_context

if typ.TYPE_CHECKING:
    from pathlib import Path

    from dirsite.config import BuildContext

TreeWriter = cabc.Callable[[cabc.Mapping[str, "str | bytes"]], "Path"]
ContextFactory = cabc.Callable[..., "BuildContext"]


@pytest.fixture
def write_tree(tmp_path: Path) -> TreeWriter:
    """Return a helper that writes files under ``tmp_path / "site"``."""
    root = tmp_path / "site"
    root.mkdir()

    def _write(files: cabc.Mapping[str, str | bytes]) -> Path:
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def make_context() -> ContextFactory:
    """Return a helper resolving a BuildContext with the default theme."""

    def _make(root: Path, **overrides: typ.Any) -> BuildContext:
        values: dict[str, typ.Any] = {"theme": "default", "input_extension": "md"}
        values.update(overrides)
        return resolve_build_context(root, CliOverrides(**values), None)

    return _make
