"""Load ``dirsite.yaml`` and layer it with CLI overrides into a BuildContext."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from dirsite._constants import CONFIG_FILENAME
from dirsite.errors import ConfigurationError

from .helpers import (
    _find_theme_dir,
    _normalize_base_path,
    _normalize_extension,
    _optional_str,
    _validate_renderer,
    require_setting,
    resolve_setting,
)
from .models import BuildContext, CliOverrides, ExclusionRules, FileConfig

DEFAULT_OUTPUT_FOLDER = "public"
DEFAULT_RENDERER = "markdown"
DEFAULT_PYGMENTS_STYLE = "monokai"
DEFAULT_CONFIG_TEXT = """\
theme: default
inputextension: md
outputfolder: public
site-url: ""
site-base-path: ""
"""


def load_file_config(path: Path) -> FileConfig | None:
    """Load the YAML configuration file, returning ``None`` when it is absent.

    Parameters
    ----------
    path : Path
        Location of ``dirsite.yaml``.

    Returns
    -------
    FileConfig or None
        Parsed values, with unrecognised keys ignored, or ``None`` when the
        file does not exist.

    Raises
    ------
    ConfigurationError
        If the YAML cannot be parsed or its top level is not a mapping.
    """
    if not path.exists():
        return None

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Configuration file '{path}' is not valid YAML: {exc}"
        raise ConfigurationError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"Configuration file '{path}' must contain a mapping at the top level."
        raise ConfigurationError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    return FileConfig(
        theme=_optional_str(raw.get("theme")),
        input_extension=_optional_str(raw.get("inputextension")),
        output_folder=_optional_str(raw.get("outputfolder")),
        site_url=_optional_str(raw.get("site-url")),
        site_base_path=_optional_str(raw.get("site-base-path")),
        renderer=_optional_str(raw.get("renderer")),
        pygments_style=_optional_str(raw.get("pygments-style")),
    )


def resolve_build_context(
    source_root: Path,
    overrides: CliOverrides,
    file_config: FileConfig | None,
) -> BuildContext:
    """Resolve every setting as flag over config file over default.

    Parameters
    ----------
    source_root : Path
        Project root; relative output folders resolve against it.
    overrides : CliOverrides
        Values given on the command line.
    file_config : FileConfig or None
        Values from ``dirsite.yaml``; ``None`` when there is no file.

    Returns
    -------
    BuildContext
        The immutable configuration for one build.

    Raises
    ------
    ConfigurationError
        If ``theme`` or ``inputextension`` is not specified by any layer, a
        value is malformed, or the theme cannot be found. Nothing is written
        to disk before this check.
    """
    source_root = source_root.resolve()
    file_config = file_config or FileConfig()

    theme = require_setting(
        "theme", resolve_setting(overrides.theme, file_config.theme, None)
    )
    extension = _normalize_extension(
        require_setting(
            "inputextension",
            resolve_setting(
                overrides.input_extension, file_config.input_extension, None
            ),
        )
    )
    output_setting = resolve_setting(
        overrides.output_folder,
        Path(file_config.output_folder) if file_config.output_folder else None,
        Path(DEFAULT_OUTPUT_FOLDER),
    )
    output_root = (source_root / typ.cast("Path", output_setting)).resolve()
    if source_root.is_relative_to(output_root):
        msg = f"The output folder '{output_root}' cannot contain the project root."
        raise ConfigurationError(msg)

    base_path = resolve_setting(
        overrides.site_base_path, file_config.site_base_path, ""
    )
    renderer = _validate_renderer(
        typ.cast(
            "str",
            resolve_setting(overrides.renderer, file_config.renderer, DEFAULT_RENDERER),
        )
    )
    pygments_style = typ.cast(
        "str", resolve_setting(None, file_config.pygments_style, DEFAULT_PYGMENTS_STYLE)
    )
    nested_output = output_root if output_root.is_relative_to(source_root) else None

    return BuildContext(
        source_root=source_root,
        theme=theme,
        theme_dir=_find_theme_dir(source_root, theme),
        content_extension=extension,
        output_root=output_root,
        site_url=_optional_str(
            resolve_setting(overrides.site_url, file_config.site_url, None)
        ),
        site_base_path=_normalize_base_path(typ.cast("str", base_path)),
        local=overrides.local,
        renderer=renderer,
        pygments_style=pygments_style,
        exclusions=ExclusionRules(
            content_extension=extension, output_folder=nested_output
        ),
    )


def load_build_context(source_root: Path, overrides: CliOverrides) -> BuildContext:
    """Read ``dirsite.yaml`` under ``source_root`` and resolve the BuildContext."""
    file_config = load_file_config(source_root / CONFIG_FILENAME)
    return resolve_build_context(source_root, overrides, file_config)


def write_default_config(source_root: Path) -> Path:
    """Seed ``dirsite.yaml`` with defaults, refusing to overwrite an existing file."""
    path = source_root / CONFIG_FILENAME
    if path.exists():
        msg = f"Configuration file '{path}' already exists."
        raise ConfigurationError(msg)
    path.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")
    return path


__all__ = [
    "DEFAULT_CONFIG_TEXT",
    "DEFAULT_OUTPUT_FOLDER",
    "load_build_context",
    "load_file_config",
    "resolve_build_context",
    "write_default_config",
]
