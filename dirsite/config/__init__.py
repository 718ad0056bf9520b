"""Resolve dirsite build configuration from flags, ``dirsite.yaml``, and defaults.

This subpackage parses the project's ``dirsite.yaml`` file, layers command-line
overrides on top of it, falls back to hard-coded defaults, and produces the
immutable :class:`BuildContext` that every other component reads. The primary
entry point is :func:`load_build_context`; missing required settings raise
:class:`~dirsite.errors.ConfigurationError` before anything touches the disk.

Examples
--------
>>> from pathlib import Path
>>> from dirsite.config import CliOverrides, load_build_context
>>> context = load_build_context(Path("."), CliOverrides(local=True))  # doctest: +SKIP
>>> context.content_extension  # doctest: +SKIP
'md'
"""

from .loader import (
    DEFAULT_CONFIG_TEXT,
    load_build_context,
    load_file_config,
    resolve_build_context,
    write_default_config,
)
from .helpers import resolve_setting
from .models import BuildContext, CliOverrides, ExclusionRules, FileConfig

__all__ = [
    "DEFAULT_CONFIG_TEXT",
    "BuildContext",
    "CliOverrides",
    "ExclusionRules",
    "FileConfig",
    "load_build_context",
    "load_file_config",
    "resolve_build_context",
    "resolve_setting",
    "write_default_config",
]
