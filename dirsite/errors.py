"""Exception hierarchy for dirsite builds.

Every fatal condition raised during a build derives from :class:`DirsiteError`
so the command surface can report it with a descriptive message and a
non-zero exit status. Nothing in the package retries after one of these.
"""

from __future__ import annotations


class DirsiteError(Exception):
    """Base class for fatal build errors."""

    exit_code = 1


class ConfigurationError(DirsiteError, ValueError):
    """Raised when a required setting is missing or the config is malformed."""

    exit_code = 2


class DependencyMissingError(DirsiteError):
    """Raised when a required external tool cannot be found."""

    exit_code = 3


class RoutingConflictError(DirsiteError):
    """Raised when two source files resolve to the same output file."""

    exit_code = 4


class RenderError(DirsiteError):
    """Raised when the renderer fails on a page; aborts the whole build."""

    exit_code = 5


class NoOutputError(DirsiteError):
    """Raised when a finished build contains no discoverable HTML page."""

    exit_code = 6


__all__ = [
    "ConfigurationError",
    "DependencyMissingError",
    "DirsiteError",
    "NoOutputError",
    "RenderError",
    "RoutingConflictError",
]
